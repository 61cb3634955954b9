"""Base entity classes for KidRewards integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import KidRewardsDataCoordinator


def create_kid_device_info(display_name: str, config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info for the tracked kid (one device per config entry)."""
    return DeviceInfo(
        identifiers={(const.DOMAIN, config_entry.entry_id)},
        name=f"{display_name} ({config_entry.title})",
        manufacturer=const.KIDREWARDS_TITLE,
        model="Kid Profile",
        entry_type=DeviceEntryType.SERVICE,
    )


class KidRewardsCoordinatorEntity(CoordinatorEntity[KidRewardsDataCoordinator]):
    """Base entity class for KidRewards entities with typed coordinator access.

    Every entity belongs to the single kid device of its config entry and
    reads from coordinator.state.
    """

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: KidRewardsDataCoordinator,
        entry: ConfigEntry,
        unique_suffix: str,
    ) -> None:
        """Initialize the entity.

        Args:
            coordinator: KidRewardsDataCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            unique_suffix: Appended to the entry id to build the unique_id.
        """
        super().__init__(coordinator)
        self._entry = entry
        self._attr_unique_id = f"{entry.entry_id}{unique_suffix}"
        self._attr_device_info = create_kid_device_info(
            coordinator.state.display_name, entry
        )
