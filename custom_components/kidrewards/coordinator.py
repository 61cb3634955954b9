# File: coordinator.py
"""Coordinator for the KidRewards integration.

Owns the single RewardState, runs the daily rollover, persists after every
mutation, fires bus events for awards, rejections, badge unlocks and undos,
and notifies entities.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_change
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const
from .catalog import build_activity_catalog, build_badge_table
from .engines.reward_engine import AwardResult, RewardState, UndoResult
from .utils.math_utils import parse_quick_add_values

if TYPE_CHECKING:
    from .catalog import BadgeDefinition
    from .store import KidRewardsStore
    from .type_defs import RewardData


class KidRewardsDataCoordinator(DataUpdateCoordinator["RewardData"]):
    """Coordinator for the KidRewards integration.

    All mutations go through the async_* methods below so that every change is
    preceded by a rollover check and followed by a save and a listener update.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        storage_manager: KidRewardsStore,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the KidRewardsDataCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=const.DEFAULT_UPDATE_INTERVAL),
        )
        self.config_entry = config_entry
        self.storage_manager = storage_manager
        self._clock = clock
        activities = build_activity_catalog()
        self.state = RewardState(
            activities=activities,
            badges=build_badge_table(activities=activities),
            clock=clock,
        )

    # -------------------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------------------

    @property
    def points_label(self) -> str:
        """Label used for points in entity names and units."""
        return self.config_entry.options.get(
            const.CONF_POINTS_LABEL, const.DEFAULT_POINTS_LABEL
        )

    @property
    def points_icon(self) -> str:
        """Icon used for the points sensors."""
        return self.config_entry.options.get(
            const.CONF_POINTS_ICON, const.DEFAULT_POINTS_ICON
        )

    @property
    def chart_window_days(self) -> int:
        """Number of days shown by the points history sensor."""
        return int(
            self.config_entry.options.get(
                const.CONF_CHART_WINDOW_DAYS, const.DEFAULT_CHART_WINDOW_DAYS
            )
        )

    @property
    def quick_add_values(self) -> list[int]:
        """Configured quick-add point values (sorted, 1..100)."""
        return parse_quick_add_values(
            self.config_entry.options.get(const.CONF_QUICK_ADD_VALUES)
        )

    @property
    def badges_by_id(self) -> dict[str, BadgeDefinition]:
        """Badge definitions keyed by id."""
        return {badge.id: badge for badge in self.state.badges}

    # -------------------------------------------------------------------------------------
    # Periodic + First Refresh
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> RewardData:
        """Periodic update: catch a missed midnight rollover."""
        if self.state.rollover_if_new_day():
            await self._async_save()
        return self.state.to_dict()

    async def async_config_entry_first_refresh(self) -> None:
        """Load from storage, seed settings on a fresh install, schedule rollover."""
        stored_data = self.storage_manager.data
        self.state = RewardState.from_dict(
            stored_data,
            activities=self.state.activities,
            badges=self.state.badges,
            clock=self._clock,
        )

        if self.state.last_reset is None:
            display_name = self.config_entry.data.get(
                const.CONF_DISPLAY_NAME, const.DEFAULT_DISPLAY_NAME
            )
            const.LOGGER.info(
                "INFO: Fresh KidRewards data, seeding display name '%s'", display_name
            )
            self.state.apply_settings(
                display_name,
                self.state.settings["starting_points"],
                self.state.daily_limit,
            )

        self.state.rollover_if_new_day()
        await self._async_save()

        self.config_entry.async_on_unload(
            async_track_time_change(
                self.hass,
                self._async_handle_midnight,
                **const.DEFAULT_DAILY_RESET_TIME,
            )
        )

        await super().async_config_entry_first_refresh()

    @callback
    def _async_handle_midnight(self, now: datetime) -> None:
        """Roll the day over at local midnight."""
        if self.state.rollover_if_new_day():
            self.hass.async_create_task(self._async_commit())

    # -------------------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------------------

    async def async_award_activity(self, activity_id: str) -> AwardResult:
        """Award a fixed-value catalog activity.

        Raises:
            UnknownActivityError: If the activity is not in the catalog.
        """
        self.state.rollover_if_new_day()
        result = self.state.award_activity(activity_id)
        await self._async_after_award(result)
        return result

    async def async_add_points(self, points: int, *, quick_add: bool) -> AwardResult:
        """Award a variable amount as a quick-add or custom entry (repeatable)."""
        activity_id = (
            const.ACTIVITY_ID_QUICK_ADD if quick_add else const.ACTIVITY_ID_CUSTOM
        )
        activity = self.state.activities.get(activity_id)
        label = activity.name if activity else activity_id
        self.state.rollover_if_new_day()
        result = self.state.award_points(activity_id, label, points)
        await self._async_after_award(result)
        return result

    async def async_undo(self, ledger_index: int) -> UndoResult | None:
        """Undo the ledger entry at `ledger_index`; None if the index is invalid."""
        self.state.rollover_if_new_day()
        result = self.state.undo(ledger_index)
        if result is None:
            const.LOGGER.debug("DEBUG: Undo ignored, no ledger entry %s", ledger_index)
            return None

        await self._async_commit()
        self.hass.bus.async_fire(
            const.EVENT_ACTIVITY_UNDONE,
            {
                const.ATTR_DISPLAY_NAME: self.state.display_name,
                **result.as_dict(),
            },
        )
        return result

    async def async_reset_all(self, *, clear_counters: bool = False) -> None:
        """Zero the total and clear daily points and the ledger."""
        self.state.reset_all(clear_counters=clear_counters)
        await self._async_commit()
        self.hass.bus.async_fire(
            const.EVENT_POINTS_RESET,
            {
                const.ATTR_DISPLAY_NAME: self.state.display_name,
                const.FIELD_CLEAR_COUNTERS: clear_counters,
            },
        )

    async def async_apply_settings(
        self, display_name: str, starting_points: int, daily_limit: int
    ) -> list[str]:
        """Store settings and return any badges the bootstrap unlocked."""
        self.state.rollover_if_new_day()
        new_badges = self.state.apply_settings(
            display_name, starting_points, daily_limit
        )
        await self._async_commit()
        self._fire_badge_events(new_badges)
        return new_badges

    # -------------------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------------------

    async def _async_after_award(self, result: AwardResult) -> None:
        payload: dict[str, Any] = {
            const.ATTR_DISPLAY_NAME: self.state.display_name,
            **result.as_dict(),
        }
        # Saved even on rejection: the rollover check may have changed state.
        await self._async_commit()
        if not result.success:
            self.hass.bus.async_fire(const.EVENT_AWARD_REJECTED, payload)
            return

        self.hass.bus.async_fire(const.EVENT_POINTS_AWARDED, payload)
        self._fire_badge_events(list(result.new_badges))

    def _fire_badge_events(self, badge_ids: list[str]) -> None:
        badges = self.badges_by_id
        for badge_id in badge_ids:
            badge = badges.get(badge_id)
            self.hass.bus.async_fire(
                const.EVENT_BADGE_UNLOCKED,
                {
                    const.ATTR_DISPLAY_NAME: self.state.display_name,
                    const.ATTR_BADGE_ID: badge_id,
                    const.ATTR_BADGE_NAME: badge.name if badge else badge_id,
                    const.ATTR_DESCRIPTION: badge.description if badge else "",
                },
            )

    async def _async_commit(self) -> None:
        """Persist and notify entities."""
        await self._async_save()
        self.async_set_updated_data(self.state.to_dict())

    async def _async_save(self) -> None:
        self.storage_manager.set_data(self.state.to_dict())
        await self.storage_manager.async_save()
