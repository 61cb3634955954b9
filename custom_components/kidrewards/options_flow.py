# File: options_flow.py
"""Options Flow for the KidRewards integration.

Edits the display-only settings kept in the config entry options. Saving
reloads the integration so entity units, icons and quick-add buttons follow.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class KidRewardsOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for points label/icon, chart window and quick-add values."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Show and validate the options form."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = fh.validate_options_inputs(user_input)
            if not errors:
                options = fh.build_options_data(user_input)
                const.LOGGER.debug("DEBUG: Saving KidRewards options: %s", options)
                return self.async_create_entry(data=options)

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=fh.build_options_schema(dict(self.config_entry.options)),
            errors=errors,
        )
