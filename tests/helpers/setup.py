"""Integration setup helpers."""

from __future__ import annotations

from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.kidrewards import const
from custom_components.kidrewards.coordinator import KidRewardsDataCoordinator


def get_coordinator(
    hass: HomeAssistant, entry: MockConfigEntry
) -> KidRewardsDataCoordinator:
    """Return the coordinator for a loaded entry."""
    return hass.data[const.DOMAIN][entry.entry_id][const.COORDINATOR]


def get_entity_id(
    hass: HomeAssistant, entry: MockConfigEntry, platform: str, unique_suffix: str
) -> str:
    """Return the entity_id registered for `{entry_id}{unique_suffix}`."""
    entity_id = er.async_get(hass).async_get_entity_id(
        platform, const.DOMAIN, f"{entry.entry_id}{unique_suffix}"
    )
    assert entity_id is not None, f"No {platform} entity for {unique_suffix}"
    return entity_id
