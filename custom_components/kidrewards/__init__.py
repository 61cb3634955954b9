# File: __init__.py
"""Initialization file for the KidRewards integration.

Handles setting up the integration, including loading the config entry,
initializing data storage, and preparing the coordinator.

Key Features:
- Config entry setup, unload and removal support.
- Coordinator initialization (daily rollover, persistence, events).
- Services for scripts, automations and dashboards.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.util import dt as dt_util

from . import const
from .coordinator import KidRewardsDataCoordinator
from .services import async_setup_services, async_unload_services
from .store import KidRewardsStore
from .utils import dt_utils


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for KidRewards entry: %s", entry.entry_id)

    # Calendar days follow Home Assistant's configured time zone
    dt_utils.set_default_timezone(dt_util.get_default_time_zone())

    storage_manager = KidRewardsStore(hass, const.STORAGE_KEY)
    await storage_manager.async_initialize()

    coordinator = KidRewardsDataCoordinator(hass, entry, storage_manager)

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORAGE_MANAGER: storage_manager,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(_async_options_updated))

    const.LOGGER.info("INFO: KidRewards setup complete for entry: %s", entry.entry_id)
    return True


async def _async_options_updated(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload so entities pick up new labels, icons and quick-add buttons."""
    const.LOGGER.debug("DEBUG: KidRewards options changed, reloading entry")
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading KidRewards entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)
        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry: delete the stored document."""
    const.LOGGER.info("INFO: Removing KidRewards entry: %s", entry.entry_id)

    storage_manager = KidRewardsStore(hass, const.STORAGE_KEY)
    await storage_manager.async_delete_storage()

    const.LOGGER.info("INFO: KidRewards entry data cleared: %s", entry.entry_id)
