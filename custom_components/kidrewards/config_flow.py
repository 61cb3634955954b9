# File: config_flow.py
"""Config flow for the KidRewards integration.

One step: the kid's display name and the points label. Only one instance is
allowed; everything else is edited later through the options flow or the
apply_settings service.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import flow_helpers as fh
from .options_flow import KidRewardsOptionsFlowHandler


class KidRewardsConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for KidRewards."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Ask for the display name and points label."""
        if self._async_current_entries():
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_user_inputs(user_input)
            if not errors:
                display_name = user_input[const.CONF_DISPLAY_NAME].strip()
                const.LOGGER.info(
                    "INFO: Creating KidRewards entry for '%s'", display_name
                )
                return self.async_create_entry(
                    title=const.KIDREWARDS_TITLE,
                    data={const.CONF_DISPLAY_NAME: display_name},
                    options={
                        const.CONF_POINTS_LABEL: user_input[
                            const.CONF_POINTS_LABEL
                        ].strip(),
                        const.CONF_POINTS_ICON: const.DEFAULT_POINTS_ICON,
                        const.CONF_CHART_WINDOW_DAYS: const.DEFAULT_CHART_WINDOW_DAYS,
                        const.CONF_QUICK_ADD_VALUES: "|".join(
                            str(v) for v in const.DEFAULT_QUICK_ADD_VALUES
                        ),
                    },
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=fh.build_user_schema(),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> KidRewardsOptionsFlowHandler:
        """Return the Options Flow."""
        return KidRewardsOptionsFlowHandler()
