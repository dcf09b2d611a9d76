from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.helpers.update_coordinator import UpdateFailed

from .const import DOMAIN
from .coordinator import AlfenCoordinator
from .runtime_data import AlfenRuntimeData, get_runtime_data

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[str] = [
    "sensor",
    "binary_sensor",
    "button",
    "select",
    "number",
]

__all__ = ["DOMAIN", "async_setup_entry", "async_unload_entry"]


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    await hass.config_entries.async_reload(entry.entry_id)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    coord = AlfenCoordinator(
        hass, {**entry.data, **entry.options}, config_entry=entry
    )
    try:
        details = await coord.async_fetch_details()
    except UpdateFailed as err:
        raise ConfigEntryNotReady(str(err)) from err
    if coord.socket > details.sockets.number_of_sockets:
        _LOGGER.warning(
            "Charger %s reports %s socket(s) but socket %s is configured",
            details.identity,
            details.sockets.number_of_sockets,
            coord.socket,
        )

    await coord.async_config_entry_first_refresh()
    entry.runtime_data = AlfenRuntimeData(coordinator=coord)

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        await get_runtime_data(entry).coordinator.client.close()
    return unload_ok
