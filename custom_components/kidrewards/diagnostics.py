"""Diagnostics support for KidRewards integration.

The config entry diagnostics return the raw storage document, identical to the
kidrewards_data file, so it can be pasted back during data recovery. The device
diagnostics add the derived values shown by the sensors.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceEntry

from . import const
from .coordinator import KidRewardsDataCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: KidRewardsDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    return coordinator.storage_manager.data


async def async_get_device_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry, device: DeviceEntry
) -> dict[str, Any]:
    """Return a derived snapshot for the kid device."""
    coordinator: KidRewardsDataCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    state = coordinator.state
    return {
        const.ATTR_DISPLAY_NAME: state.display_name,
        const.ATTR_TOTAL_POINTS: state.total_points,
        const.ATTR_TODAY_POINTS: state.today_points,
        const.ATTR_REMAINING_TODAY: state.remaining_today,
        "current_streak": state.current_streak(),
        const.ATTR_BADGES_UNLOCKED: sorted(state.unlocked_badges),
        const.ATTR_SERIES: state.chart_series(coordinator.chart_window_days),
        "options": dict(entry.options),
    }
