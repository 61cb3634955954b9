"""Sensor and button tests for KidRewards."""

from __future__ import annotations

from homeassistant.core import HomeAssistant
from homeassistant.helpers import device_registry as dr
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.kidrewards import const
from tests.helpers import get_coordinator, get_entity_id


async def _press(hass: HomeAssistant, entity_id: str) -> None:
    await hass.services.async_call(
        "button", "press", {"entity_id": entity_id}, blocking=True
    )


async def test_entities_share_one_device(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """All entities hang off the single kid device of the entry."""
    device = dr.async_get(hass).async_get_device(
        identifiers={(const.DOMAIN, init_integration.entry_id)}
    )
    assert device is not None
    assert device.name.startswith("Alex")


async def test_activity_button_updates_sensors(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Pressing an activity button flows through to every sensor."""
    button_id = get_entity_id(
        hass, init_integration, "button", f"{const.BUTTON_UID_MIDFIX_ACTIVITY}homework"
    )
    total_id = get_entity_id(
        hass, init_integration, "sensor", const.SENSOR_UID_SUFFIX_TOTAL_POINTS
    )
    today_id = get_entity_id(
        hass, init_integration, "sensor", const.SENSOR_UID_SUFFIX_TODAY_POINTS
    )
    recent_id = get_entity_id(
        hass, init_integration, "sensor", const.SENSOR_UID_SUFFIX_RECENT_ACTIVITY
    )
    history_id = get_entity_id(
        hass, init_integration, "sensor", const.SENSOR_UID_SUFFIX_POINTS_HISTORY
    )
    streak_id = get_entity_id(
        hass, init_integration, "sensor", const.SENSOR_UID_SUFFIX_STREAK
    )

    assert hass.states.get(total_id).state == "0"

    await _press(hass, button_id)
    await hass.async_block_till_done()

    total = hass.states.get(total_id)
    assert total.state == "10"
    assert total.attributes[const.ATTR_ACTIVITY_COUNTS] == {"homework": 1}
    assert total.attributes[const.ATTR_PROGRESS] == 10.0

    today = hass.states.get(today_id)
    assert today.state == "10"
    assert (
        today.attributes[const.ATTR_REMAINING_TODAY] == const.DEFAULT_DAILY_LIMIT - 10
    )

    recent = hass.states.get(recent_id)
    assert recent.state == "Homework Done"
    assert len(recent.attributes[const.ATTR_RECENT_ACTIVITY]) == 1

    history = hass.states.get(history_id)
    assert history.state == "10"
    assert history.attributes[const.ATTR_LABELS][-1] == "Today"

    assert hass.states.get(streak_id).state == "1"
    assert hass.states.get(button_id).attributes["completed_today"] is True


async def test_second_press_is_rejected(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A button press never raises for an expected rejection."""
    button_id = get_entity_id(
        hass, init_integration, "button", f"{const.BUTTON_UID_MIDFIX_ACTIVITY}homework"
    )

    await _press(hass, button_id)
    await _press(hass, button_id)

    assert get_coordinator(hass, init_integration).state.total_points == 10


async def test_quick_add_buttons(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """One button per configured quick-add value; presses are repeatable."""
    coordinator = get_coordinator(hass, init_integration)
    assert coordinator.quick_add_values == [1, 5, 10]

    five_id = get_entity_id(
        hass, init_integration, "button", f"{const.BUTTON_UID_MIDFIX_QUICK_ADD}5"
    )
    await _press(hass, five_id)
    await _press(hass, five_id)

    assert coordinator.state.total_points == 10
    assert coordinator.state.activity_counts == {const.ACTIVITY_ID_QUICK_ADD: 2}


async def test_badge_sensor_unlocks(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A badge sensor switches to unlocked and reports full progress."""
    badge_id = get_entity_id(
        hass, init_integration, "sensor", f"{const.SENSOR_UID_MIDFIX_BADGE}first_steps"
    )
    earned_id = get_entity_id(
        hass, init_integration, "sensor", const.SENSOR_UID_SUFFIX_BADGES_EARNED
    )

    locked = hass.states.get(badge_id)
    assert locked.state == const.BADGE_STATE_LOCKED
    assert locked.attributes["icon"] == const.DEFAULT_BADGE_LOCKED_ICON
    assert locked.attributes[const.ATTR_PROGRESS] == 0.0

    await get_coordinator(hass, init_integration).async_add_points(
        10, quick_add=True
    )
    await hass.async_block_till_done()

    unlocked = hass.states.get(badge_id)
    assert unlocked.state == const.BADGE_STATE_UNLOCKED
    assert unlocked.attributes[const.ATTR_PROGRESS] == 100.0
    assert unlocked.attributes[const.ATTR_UNLOCKED] is True
    assert hass.states.get(earned_id).state == "1"
