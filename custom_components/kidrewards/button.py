# File: button.py
"""Buttons for the KidRewards integration.

Buttons Defined in This File:

01. ActivityButton - one per fixed-value catalog activity
02. QuickAddButton - one per configured quick-add value

A press never raises for expected outcomes: "already completed today" and
"daily limit reached" are reported through the award_rejected event, and the
entities refresh from the coordinator.
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .catalog import ActivityDefinition
from .coordinator import KidRewardsDataCoordinator
from .entity import KidRewardsCoordinatorEntity


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up buttons for KidRewards integration."""
    coordinator: KidRewardsDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    entities: list[ButtonEntity] = [
        ActivityButton(coordinator, entry, activity)
        for activity in coordinator.state.activities.fixed_activities
    ]
    entities.extend(
        QuickAddButton(coordinator, entry, value)
        for value in coordinator.quick_add_values
    )
    async_add_entities(entities)


# ------------------------------------------------------------------------------------------
class ActivityButton(KidRewardsCoordinatorEntity, ButtonEntity):
    """Button that awards one catalog activity."""

    _attr_translation_key = const.TRANS_KEY_BUTTON_ACTIVITY

    def __init__(
        self,
        coordinator: KidRewardsDataCoordinator,
        entry: ConfigEntry,
        activity: ActivityDefinition,
    ) -> None:
        """Initialize the button.

        Args:
            coordinator: KidRewardsDataCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            activity: The catalog activity this button awards.
        """
        super().__init__(
            coordinator, entry, f"{const.BUTTON_UID_MIDFIX_ACTIVITY}{activity.id}"
        )
        self._activity = activity
        self._attr_icon = activity.icon or const.DEFAULT_ACTIVITY_ICON
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_ACTIVITY_NAME: activity.name,
            const.TRANS_KEY_ATTR_POINTS: str(activity.points),
            const.TRANS_KEY_ATTR_POINTS_LABEL: coordinator.points_label,
        }

    async def async_press(self) -> None:
        """Handle the button press event."""
        result = await self.coordinator.async_award_activity(self._activity.id)
        const.LOGGER.info(
            "INFO: Button award '%s': %s points (rejected: %s)",
            self._activity.id,
            result.awarded,
            result.rejected,
        )

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose whether the activity is already done today."""
        state = self.coordinator.state
        return {
            const.ATTR_ACTIVITY_ID: self._activity.id,
            const.ATTR_POINTS: self._activity.points,
            "completed_today": state.is_completed_today(self._activity.id),
            "repeatable": self._activity.repeatable,
        }


# ------------------------------------------------------------------------------------------
class QuickAddButton(KidRewardsCoordinatorEntity, ButtonEntity):
    """Button that adds a fixed quick-add amount (repeatable)."""

    _attr_translation_key = const.TRANS_KEY_BUTTON_QUICK_ADD
    _attr_icon = const.DEFAULT_QUICK_ADD_ICON

    def __init__(
        self,
        coordinator: KidRewardsDataCoordinator,
        entry: ConfigEntry,
        points: int,
    ) -> None:
        """Initialize the button."""
        super().__init__(
            coordinator, entry, f"{const.BUTTON_UID_MIDFIX_QUICK_ADD}{points}"
        )
        self._points = points
        self._attr_translation_placeholders = {
            const.TRANS_KEY_ATTR_POINTS: str(points),
            const.TRANS_KEY_ATTR_POINTS_LABEL: coordinator.points_label,
        }

    async def async_press(self) -> None:
        """Handle the button press event."""
        result = await self.coordinator.async_add_points(self._points, quick_add=True)
        const.LOGGER.info(
            "INFO: Quick add %s: %s points (rejected: %s)",
            self._points,
            result.awarded,
            result.rejected,
        )
