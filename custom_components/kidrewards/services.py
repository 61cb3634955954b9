# File: services.py
"""Defines custom services for the KidRewards integration.

These services allow direct actions through scripts, automations and
dashboards. Every mutating service returns the outcome as response data so
callers can show "already done today", "daily limit reached" or an adjusted
award without watching the event bus.
"""

from __future__ import annotations

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import KidRewardsDataCoordinator
from .engines.reward_engine import DailyLimitBelowTodayError, UnknownActivityError

# --- Service Schemas ---
AWARD_ACTIVITY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ACTIVITY_ID): cv.string,
    }
)

ADD_POINTS_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_POINTS): vol.All(
            vol.Coerce(int),
            vol.Range(min=const.CUSTOM_POINTS_MIN, max=const.CUSTOM_POINTS_MAX),
        ),
        vol.Optional(const.FIELD_QUICK_ADD, default=False): cv.boolean,
    }
)

UNDO_ACTIVITY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_LEDGER_INDEX): vol.Coerce(int),
    }
)

RESET_ALL_POINTS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_CLEAR_COUNTERS, default=False): cv.boolean,
    }
)

APPLY_SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_DISPLAY_NAME): cv.string,
        vol.Optional(const.FIELD_STARTING_POINTS): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        vol.Optional(const.FIELD_DAILY_LIMIT): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    }
)

GET_CHART_SERIES_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_WINDOW_DAYS): vol.All(
            vol.Coerce(int),
            vol.Range(
                min=const.MIN_CHART_WINDOW_DAYS, max=const.MAX_CHART_WINDOW_DAYS
            ),
        ),
    }
)

SERVICES = [
    const.SERVICE_AWARD_ACTIVITY,
    const.SERVICE_ADD_POINTS,
    const.SERVICE_UNDO_ACTIVITY,
    const.SERVICE_RESET_ALL_POINTS,
    const.SERVICE_APPLY_SETTINGS,
    const.SERVICE_GET_CHART_SERIES,
]


def get_first_kidrewards_entry(hass: HomeAssistant) -> str | None:
    """Retrieve the first loaded KidRewards config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def _get_coordinator(hass: HomeAssistant, service: str) -> KidRewardsDataCoordinator:
    entry_id = get_first_kidrewards_entry(hass)
    if not entry_id:
        const.LOGGER.warning("WARNING: %s: %s", service, const.MSG_NO_ENTRY_FOUND)
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NO_ENTRY,
        )
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]


def async_setup_services(hass: HomeAssistant) -> None:
    """Register KidRewards services."""
    if hass.services.has_service(const.DOMAIN, const.SERVICE_AWARD_ACTIVITY):
        return

    async def handle_award_activity(call: ServiceCall) -> ServiceResponse:
        """Handle awarding a fixed-value catalog activity."""
        coordinator = _get_coordinator(hass, const.SERVICE_AWARD_ACTIVITY)
        activity_id = call.data[const.FIELD_ACTIVITY_ID]

        try:
            result = await coordinator.async_award_activity(activity_id)
        except UnknownActivityError as err:
            const.LOGGER.warning("WARNING: Award Activity: %s", err)
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_UNKNOWN_ACTIVITY,
                translation_placeholders={
                    const.TRANS_KEY_ATTR_ACTIVITY_NAME: activity_id
                },
            ) from err

        const.LOGGER.info(
            "INFO: Activity '%s' awarded %s of %s points (rejected: %s)",
            activity_id,
            result.awarded,
            result.requested,
            result.rejected,
        )
        return dict(result.as_dict())

    async def handle_add_points(call: ServiceCall) -> ServiceResponse:
        """Handle adding a quick-add or custom amount."""
        coordinator = _get_coordinator(hass, const.SERVICE_ADD_POINTS)
        points = call.data[const.FIELD_POINTS]
        quick_add = call.data[const.FIELD_QUICK_ADD]

        if quick_add and points not in coordinator.quick_add_values:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_QUICK_ADD,
                translation_placeholders={const.TRANS_KEY_ATTR_POINTS: str(points)},
            )

        result = await coordinator.async_add_points(points, quick_add=quick_add)
        const.LOGGER.info(
            "INFO: %s awarded %s of %s points (rejected: %s)",
            result.activity,
            result.awarded,
            result.requested,
            result.rejected,
        )
        return dict(result.as_dict())

    async def handle_undo_activity(call: ServiceCall) -> ServiceResponse:
        """Handle undoing a ledger entry by index (0 = newest)."""
        coordinator = _get_coordinator(hass, const.SERVICE_UNDO_ACTIVITY)
        index = call.data[const.FIELD_LEDGER_INDEX]

        result = await coordinator.async_undo(index)
        if result is None:
            return {
                const.ATTR_UNDONE: False,
                const.ATTR_TOTAL_POINTS: coordinator.state.total_points,
                const.ATTR_TODAY_POINTS: coordinator.state.today_points,
            }

        const.LOGGER.info(
            "INFO: Undid '%s' (%s points)",
            result.entry["activity"],
            result.entry["points"],
        )
        return dict(result.as_dict())

    async def handle_reset_all_points(call: ServiceCall) -> None:
        """Handle resetting all points (badges are kept)."""
        coordinator = _get_coordinator(hass, const.SERVICE_RESET_ALL_POINTS)
        await coordinator.async_reset_all(
            clear_counters=call.data[const.FIELD_CLEAR_COUNTERS]
        )

    async def handle_apply_settings(call: ServiceCall) -> ServiceResponse:
        """Handle updating the display name, starting points and daily limit."""
        coordinator = _get_coordinator(hass, const.SERVICE_APPLY_SETTINGS)
        settings = coordinator.state.settings

        display_name = call.data.get(
            const.FIELD_DISPLAY_NAME, settings["display_name"]
        ).strip()
        if not display_name:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_DISPLAY_NAME,
            )

        try:
            new_badges = await coordinator.async_apply_settings(
                display_name,
                call.data.get(const.FIELD_STARTING_POINTS, settings["starting_points"]),
                call.data.get(const.FIELD_DAILY_LIMIT, settings["daily_limit"]),
            )
        except DailyLimitBelowTodayError as err:
            const.LOGGER.warning("WARNING: Apply Settings: %s", err)
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_DAILY_LIMIT_BELOW_TODAY,
                translation_placeholders={
                    const.TRANS_KEY_ATTR_DAILY_LIMIT: str(err.daily_limit),
                    const.TRANS_KEY_ATTR_TODAY_POINTS: str(err.today_points),
                },
            ) from err
        return {
            const.ATTR_DISPLAY_NAME: coordinator.state.display_name,
            const.ATTR_DAILY_LIMIT: coordinator.state.daily_limit,
            const.ATTR_TOTAL_POINTS: coordinator.state.total_points,
            const.ATTR_NEW_BADGES: new_badges,
        }

    async def handle_get_chart_series(call: ServiceCall) -> ServiceResponse:
        """Return the per-day chart series, oldest day first."""
        coordinator = _get_coordinator(hass, const.SERVICE_GET_CHART_SERIES)
        window_days = call.data.get(
            const.FIELD_WINDOW_DAYS, coordinator.chart_window_days
        )
        series = coordinator.state.chart_series(window_days)
        return {
            const.ATTR_WINDOW_DAYS: window_days,
            const.ATTR_LABELS: [label for label, _ in series],
            const.ATTR_VALUES: [value for _, value in series],
        }

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_AWARD_ACTIVITY,
        handle_award_activity,
        schema=AWARD_ACTIVITY_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_POINTS,
        handle_add_points,
        schema=ADD_POINTS_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UNDO_ACTIVITY,
        handle_undo_activity,
        schema=UNDO_ACTIVITY_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_ALL_POINTS,
        handle_reset_all_points,
        schema=RESET_ALL_POINTS_SCHEMA,
    )

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_APPLY_SETTINGS,
        handle_apply_settings,
        schema=APPLY_SETTINGS_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_CHART_SERIES,
        handle_get_chart_series,
        schema=GET_CHART_SERIES_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )

    const.LOGGER.info("INFO: KidRewards services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister KidRewards services when unloading the integration."""
    for service in SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: KidRewards services have been unregistered")
