# File: sensor.py
"""Sensors for the KidRewards integration.

Sensors Defined in This File:

01. TotalPointsSensor - lifetime point total
02. TodayPointsSensor - points earned today vs. the daily limit
03. StreakSensor - consecutive days with points
04. PointsHistorySensor - per-day chart series (labels/values attributes)
05. RecentActivitySensor - newest ledger entries
06. BadgesEarnedSensor - number of badges unlocked
07. BadgeSensor - one per badge, locked/unlocked with progress
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import UnitOfTime
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .catalog import BadgeDefinition
from .coordinator import KidRewardsDataCoordinator
from .entity import KidRewardsCoordinatorEntity
from .utils.math_utils import round_points


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for KidRewards integration."""
    coordinator: KidRewardsDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    entities: list[SensorEntity] = [
        TotalPointsSensor(coordinator, entry),
        TodayPointsSensor(coordinator, entry),
        StreakSensor(coordinator, entry),
        PointsHistorySensor(coordinator, entry),
        RecentActivitySensor(coordinator, entry),
        BadgesEarnedSensor(coordinator, entry),
    ]
    entities.extend(
        BadgeSensor(coordinator, entry, badge) for badge in coordinator.state.badges
    )
    async_add_entities(entities)


# ------------------------------------------------------------------------------------------
class TotalPointsSensor(KidRewardsCoordinatorEntity, SensorEntity):
    """Sensor for the lifetime point total.

    Uses MEASUREMENT state class for graphing; the total can go down on undo
    or reset.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_TOTAL_POINTS
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self, coordinator: KidRewardsDataCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_TOTAL_POINTS)
        self._attr_native_unit_of_measurement = coordinator.points_label
        self._attr_icon = coordinator.points_icon
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_DISPLAY_NAME: coordinator.state.display_name,
            const.TRANS_KEY_ATTR_POINTS_LABEL: coordinator.points_label,
        }

    @property
    def native_value(self) -> int:
        """Return the lifetime total."""
        return self.coordinator.state.total_points

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose progress toward the total goal and lifetime counters."""
        state = self.coordinator.state
        return {
            const.ATTR_DISPLAY_NAME: state.display_name,
            const.ATTR_PROGRESS: state.total_progress(),
            const.ATTR_ACTIVITY_COUNTS: state.activity_counts,
            const.ATTR_LAST_RESET: state.last_reset,
        }


# ------------------------------------------------------------------------------------------
class TodayPointsSensor(KidRewardsCoordinatorEntity, SensorEntity):
    """Sensor for points earned today."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_TODAY_POINTS
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = const.DEFAULT_TODAY_ICON

    def __init__(
        self, coordinator: KidRewardsDataCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_TODAY_POINTS)
        self._attr_native_unit_of_measurement = coordinator.points_label
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_DISPLAY_NAME: coordinator.state.display_name,
            const.TRANS_KEY_ATTR_POINTS_LABEL: coordinator.points_label,
        }

    @property
    def native_value(self) -> int:
        """Return today's points."""
        return self.coordinator.state.today_points

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the daily limit, what remains, and today's progress."""
        state = self.coordinator.state
        return {
            const.ATTR_DAILY_LIMIT: state.daily_limit,
            const.ATTR_REMAINING_TODAY: state.remaining_today,
            const.ATTR_PROGRESS: state.today_progress(),
        }


# ------------------------------------------------------------------------------------------
class StreakSensor(KidRewardsCoordinatorEntity, SensorEntity):
    """Sensor for consecutive days with points, ending today."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_STREAK
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = UnitOfTime.DAYS
    _attr_icon = const.DEFAULT_STREAK_ICON

    def __init__(
        self, coordinator: KidRewardsDataCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_STREAK)
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_DISPLAY_NAME: coordinator.state.display_name,
        }

    @property
    def native_value(self) -> int:
        """Return the current streak length."""
        return self.coordinator.state.current_streak()


# ------------------------------------------------------------------------------------------
class PointsHistorySensor(KidRewardsCoordinatorEntity, SensorEntity):
    """Sensor holding the per-day chart series.

    State is the sum over the window; `labels` and `values` attributes are
    oldest-first and ready for a chart card.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_POINTS_HISTORY
    _attr_icon = const.DEFAULT_HISTORY_ICON

    def __init__(
        self, coordinator: KidRewardsDataCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_POINTS_HISTORY)
        self._attr_native_unit_of_measurement = coordinator.points_label
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_DISPLAY_NAME: coordinator.state.display_name,
        }

    def _series(self) -> list[tuple[str, int]]:
        return self.coordinator.state.chart_series(self.coordinator.chart_window_days)

    @property
    def native_value(self) -> int:
        """Return the points earned across the window."""
        return sum(value for _, value in self._series())

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose chart labels and values."""
        series = self._series()
        return {
            const.ATTR_WINDOW_DAYS: len(series),
            const.ATTR_LABELS: [label for label, _ in series],
            const.ATTR_VALUES: [value for _, value in series],
        }


# ------------------------------------------------------------------------------------------
class RecentActivitySensor(KidRewardsCoordinatorEntity, SensorEntity):
    """Sensor showing the most recent activity; attributes hold the newest entries."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_RECENT_ACTIVITY
    _attr_icon = const.DEFAULT_RECENT_ACTIVITY_ICON

    def __init__(
        self, coordinator: KidRewardsDataCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_RECENT_ACTIVITY)
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_DISPLAY_NAME: coordinator.state.display_name,
        }

    @property
    def native_value(self) -> str | None:
        """Return the label of the newest ledger entry."""
        recent = self.coordinator.state.recent_activity(1)
        return recent[0]["activity"] if recent else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the newest ledger entries (newest first)."""
        return {
            const.ATTR_RECENT_ACTIVITY: self.coordinator.state.recent_activity(),
        }


# ------------------------------------------------------------------------------------------
class BadgesEarnedSensor(KidRewardsCoordinatorEntity, SensorEntity):
    """Sensor for the number of badges unlocked."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_BADGES_EARNED
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_icon = const.DEFAULT_BADGES_ICON

    def __init__(
        self, coordinator: KidRewardsDataCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_UID_SUFFIX_BADGES_EARNED)
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_DISPLAY_NAME: coordinator.state.display_name,
        }

    @property
    def native_value(self) -> int:
        """Return the count of unlocked badges."""
        return len(self.coordinator.state.unlocked_badges)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose unlock timestamps keyed by badge id."""
        return {
            const.ATTR_BADGES_UNLOCKED: {
                badge_id: record["unlocked_at"]
                for badge_id, record in self.coordinator.state.unlocked_badges.items()
            },
        }


# ------------------------------------------------------------------------------------------
class BadgeSensor(KidRewardsCoordinatorEntity, SensorEntity):
    """Sensor for one badge: locked or unlocked, with progress.

    Once unlocked a badge stays unlocked, even if the points that earned it
    are undone or reset.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_BADGE
    _attr_device_class = SensorDeviceClass.ENUM
    _attr_options = [const.BADGE_STATE_LOCKED, const.BADGE_STATE_UNLOCKED]

    def __init__(
        self,
        coordinator: KidRewardsDataCoordinator,
        entry: ConfigEntry,
        badge: BadgeDefinition,
    ) -> None:
        """Initialize the sensor.

        Args:
            coordinator: KidRewardsDataCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            badge: The badge definition this sensor tracks.
        """
        super().__init__(
            coordinator, entry, f"{const.SENSOR_UID_MIDFIX_BADGE}{badge.id}"
        )
        self._badge = badge
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_BADGE_NAME: badge.name,
        }

    @property
    def native_value(self) -> str:
        """Return locked/unlocked."""
        if self.coordinator.state.is_badge_unlocked(self._badge.id):
            return const.BADGE_STATE_UNLOCKED
        return const.BADGE_STATE_LOCKED

    @property
    def icon(self) -> str:
        """Return the badge icon once earned, a lock before."""
        if self.coordinator.state.is_badge_unlocked(self._badge.id):
            return self._badge.icon
        return const.DEFAULT_BADGE_LOCKED_ICON

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the requirement and progress toward it (percent)."""
        state = self.coordinator.state
        record = state.unlocked_badges.get(self._badge.id)
        requirement = self._badge.requirement
        attributes: dict[str, Any] = {
            const.ATTR_BADGE_ID: self._badge.id,
            const.ATTR_DESCRIPTION: self._badge.description,
            const.ATTR_REQUIREMENT: str(requirement.kind),
            const.ATTR_THRESHOLD: requirement.threshold,
            const.ATTR_PROGRESS: round_points(
                state.badge_progress(self._badge) * 100
            ),
            const.ATTR_UNLOCKED: record is not None,
            const.ATTR_UNLOCKED_AT: record["unlocked_at"] if record else None,
        }
        if requirement.activity_id:
            attributes[const.ATTR_ACTIVITY_ID] = requirement.activity_id
        return attributes
