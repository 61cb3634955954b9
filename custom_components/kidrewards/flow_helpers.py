# File: flow_helpers.py
"""Helpers for the KidRewards config and options flow.

Each form has a build_*_schema() and a validate_*_inputs() pair; validators
return an errors dict keyed by field (empty when the input is valid).
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.helpers import selector

from . import const
from .utils.math_utils import parse_quick_add_values

# ----------------------------------------------------------------------------------
# USER STEP (display name + points label)
# ----------------------------------------------------------------------------------


def build_user_schema(
    default_display_name: str = const.DEFAULT_DISPLAY_NAME,
    default_label: str = const.DEFAULT_POINTS_LABEL,
) -> vol.Schema:
    """Build the schema for the initial setup form."""
    return vol.Schema(
        {
            vol.Required(const.CONF_DISPLAY_NAME, default=default_display_name): str,
            vol.Required(const.CONF_POINTS_LABEL, default=default_label): str,
        }
    )


def validate_user_inputs(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate the initial setup form."""
    errors: dict[str, str] = {}

    if not user_input.get(const.CONF_DISPLAY_NAME, "").strip():
        errors[const.CONF_DISPLAY_NAME] = const.TRANS_KEY_ERROR_INVALID_DISPLAY_NAME

    if not user_input.get(const.CONF_POINTS_LABEL, "").strip():
        errors[const.CONF_POINTS_LABEL] = const.TRANS_KEY_ERROR_POINTS_LABEL_REQUIRED

    return errors


# ----------------------------------------------------------------------------------
# OPTIONS (points label/icon, chart window, quick-add values)
# ----------------------------------------------------------------------------------


def build_options_schema(options: dict[str, Any]) -> vol.Schema:
    """Build the options form, pre-filled from the current options."""
    quick_add = options.get(const.CONF_QUICK_ADD_VALUES)
    return vol.Schema(
        {
            vol.Required(
                const.CONF_POINTS_LABEL,
                default=options.get(const.CONF_POINTS_LABEL, const.DEFAULT_POINTS_LABEL),
            ): str,
            vol.Optional(
                const.CONF_POINTS_ICON,
                default=options.get(const.CONF_POINTS_ICON, const.DEFAULT_POINTS_ICON),
            ): selector.IconSelector(),
            vol.Required(
                const.CONF_CHART_WINDOW_DAYS,
                default=options.get(
                    const.CONF_CHART_WINDOW_DAYS, const.DEFAULT_CHART_WINDOW_DAYS
                ),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=const.MIN_CHART_WINDOW_DAYS,
                    max=const.MAX_CHART_WINDOW_DAYS,
                    step=1,
                )
            ),
            vol.Required(
                const.CONF_QUICK_ADD_VALUES,
                default=quick_add
                if isinstance(quick_add, str)
                else "|".join(str(v) for v in parse_quick_add_values(quick_add)),
            ): str,
        }
    )


def validate_options_inputs(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate the options form.

    Every pipe-separated quick-add entry must be an integer in 1..100.
    """
    errors: dict[str, str] = {}

    if not user_input.get(const.CONF_POINTS_LABEL, "").strip():
        errors[const.CONF_POINTS_LABEL] = const.TRANS_KEY_ERROR_POINTS_LABEL_REQUIRED

    raw = str(user_input.get(const.CONF_QUICK_ADD_VALUES, ""))
    parts = [part.strip() for part in raw.split("|") if part.strip()]
    if not parts or not all(
        part.isdigit()
        and const.CUSTOM_POINTS_MIN <= int(part) <= const.CUSTOM_POINTS_MAX
        for part in parts
    ):
        errors[const.CONF_QUICK_ADD_VALUES] = const.TRANS_KEY_ERROR_INVALID_QUICK_ADD

    return errors


def build_options_data(user_input: dict[str, Any]) -> dict[str, Any]:
    """Normalize validated options input for storage in the config entry."""
    return {
        const.CONF_POINTS_LABEL: user_input[const.CONF_POINTS_LABEL].strip(),
        const.CONF_POINTS_ICON: user_input.get(
            const.CONF_POINTS_ICON, const.DEFAULT_POINTS_ICON
        ),
        const.CONF_CHART_WINDOW_DAYS: int(user_input[const.CONF_CHART_WINDOW_DAYS]),
        const.CONF_QUICK_ADD_VALUES: "|".join(
            str(v)
            for v in parse_quick_add_values(user_input[const.CONF_QUICK_ADD_VALUES])
        ),
    }
