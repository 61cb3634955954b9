# File: store.py
"""Handles persistent data storage for the KidRewards integration.

Uses Home Assistant's Storage helper to save and load the reward document
(one key, overwritten whole on every save) so points, ledger, badges and
settings survive restarts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const
from .engines.reward_engine import RewardState

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import RewardData


class KidRewardsStore:
    """Thin wrapper around Home Assistant's Store API for the reward document.

    Load-or-default on startup: a missing or unreadable document yields the
    fresh default. Save failures are logged and never raised to the caller.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store[dict[str, Any]] = Store(
            hass, const.STORAGE_VERSION, storage_key
        )
        self._data: dict[str, Any] = {}

    @staticmethod
    def get_default_structure() -> RewardData:
        """Return the canonical fresh document."""
        return RewardState.default_data()

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, or the stored document cannot be read, initializes
        with the default structure.
        """
        const.LOGGER.debug("DEBUG: KidRewardsStore: Loading data from storage")
        try:
            existing_data = await self._store.async_load()
        except HomeAssistantError as err:
            const.LOGGER.error(
                "ERROR: Stored reward data at %s is unreadable, starting fresh: %s",
                self._store.path,
                err,
            )
            existing_data = None

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = dict(KidRewardsStore.get_default_structure())
        elif not isinstance(existing_data, dict):
            const.LOGGER.error(
                "ERROR: Stored reward data is a %s, not a mapping. Starting fresh",
                type(existing_data).__name__,
            )
            self._data = dict(KidRewardsStore.get_default_structure())
        else:
            self._data = existing_data
            const.LOGGER.debug(
                "DEBUG: Loaded existing data from storage: %s ledger entries, "
                "%s badges, total %s",
                len(self._data.get(const.DATA_LEDGER) or []),
                len(self._data.get(const.DATA_BADGES) or {}),
                self._data.get(const.DATA_TOTAL_POINTS),
            )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def set_data(self, new_data: RewardData | dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = dict(new_data)

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Errors are logged but do not stop execution.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except (TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s",
                err,
            )

    async def async_clear_data(self) -> None:
        """Clear all stored data and reset to default structure."""
        const.LOGGER.warning(
            "WARNING: Clearing all KidRewards data and resetting storage"
        )
        self._data = dict(KidRewardsStore.get_default_structure())
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = {}
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
