"""Shared fixtures for KidRewards tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.kidrewards import const
from custom_components.kidrewards.engines.reward_engine import RewardState
from tests.helpers import FakeClock

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def clock() -> FakeClock:
    """Return a clock fixed at 2025-01-15 12:00 UTC."""
    return FakeClock()


@pytest.fixture
def state(clock: FakeClock) -> RewardState:  # pylint: disable=redefined-outer-name
    """Return a fresh RewardState with the default catalog and badges."""
    return RewardState(clock=clock)


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.KIDREWARDS_TITLE,
        data={const.CONF_DISPLAY_NAME: "Alex"},
        options={
            const.CONF_POINTS_LABEL: const.DEFAULT_POINTS_LABEL,
            const.CONF_POINTS_ICON: const.DEFAULT_POINTS_ICON,
            const.CONF_CHART_WINDOW_DAYS: const.DEFAULT_CHART_WINDOW_DAYS,
            const.CONF_QUICK_ADD_VALUES: "1|5|10",
        },
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[MockConfigEntry]:
    """Set up the integration with a fresh store."""
    await hass.config.async_set_time_zone("UTC")
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()
    yield mock_config_entry
