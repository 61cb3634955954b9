"""Setup, unload, persistence and daily rollover tests for KidRewards."""

from __future__ import annotations

from typing import Any

from freezegun.api import FrozenDateTimeFactory
from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_fire_time_changed,
)

from custom_components.kidrewards import const
from custom_components.kidrewards.services import SERVICES
from tests.helpers import get_coordinator


async def test_setup_seeds_display_name(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,
    hass_storage: dict[str, Any],
) -> None:
    """A fresh install takes the display name from the config entry."""
    assert init_integration.state is ConfigEntryState.LOADED

    coordinator = get_coordinator(hass, init_integration)
    assert coordinator.state.display_name == "Alex"
    assert coordinator.state.last_reset == dt_util.now().date().isoformat()

    stored = hass_storage[const.STORAGE_KEY]["data"]
    assert stored[const.DATA_SETTINGS]["display_name"] == "Alex"

    for service in SERVICES:
        assert hass.services.has_service(const.DOMAIN, service)


async def test_unload_removes_services(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Services go away with the last entry."""
    assert await hass.config_entries.async_unload(init_integration.entry_id)
    await hass.async_block_till_done()

    assert init_integration.state is ConfigEntryState.NOT_LOADED
    assert const.DOMAIN not in hass.data or not hass.data[const.DOMAIN]
    for service in SERVICES:
        assert not hass.services.has_service(const.DOMAIN, service)


async def test_points_survive_reload(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """State is saved after each mutation and reloaded on setup."""
    await get_coordinator(hass, init_integration).async_award_activity("homework")

    assert await hass.config_entries.async_reload(init_integration.entry_id)
    await hass.async_block_till_done()

    coordinator = get_coordinator(hass, init_integration)
    assert coordinator.state.total_points == 10
    assert coordinator.state.is_completed_today("homework")
    assert coordinator.state.is_badge_unlocked("first_steps")


async def test_remove_entry_deletes_storage(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,
    hass_storage: dict[str, Any],
) -> None:
    """Removing the entry deletes the stored document."""
    assert const.STORAGE_KEY in hass_storage

    await hass.config_entries.async_remove(init_integration.entry_id)
    await hass.async_block_till_done()

    assert const.STORAGE_KEY not in hass_storage


async def test_midnight_rollover(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,
    freezer: FrozenDateTimeFactory,
) -> None:
    """Local midnight clears the day's points but keeps the total."""
    await hass.config.async_set_time_zone("UTC")
    freezer.move_to("2025-01-15 12:00:00+00:00")
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()

    coordinator = get_coordinator(hass, mock_config_entry)
    await coordinator.async_award_activity("homework")
    assert coordinator.state.today_points == 10

    freezer.move_to("2025-01-16 00:00:00+00:00")
    async_fire_time_changed(hass, dt_util.utcnow())
    await hass.async_block_till_done()

    assert coordinator.state.last_reset == "2025-01-16"
    assert coordinator.state.today_points == 0
    assert coordinator.state.total_points == 10
    assert not coordinator.state.is_completed_today("homework")
    assert coordinator.data[const.DATA_TOTAL_POINTS] == 10
