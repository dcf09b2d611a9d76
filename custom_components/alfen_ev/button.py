from __future__ import annotations

from homeassistant.components.button import ButtonDeviceClass, ButtonEntity
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity import EntityCategory
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .coordinator import AlfenCoordinator
from .entity import AlfenBaseEntity
from .runtime_data import AlfenConfigEntry, get_runtime_data

PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: AlfenConfigEntry,
    async_add_entities: AddEntitiesCallback,
):
    coord = get_runtime_data(entry).coordinator
    async_add_entities([RebootButton(coord)], update_before_add=False)


class RebootButton(AlfenBaseEntity, ButtonEntity):
    _attr_translation_key = "reboot"
    _attr_device_class = ButtonDeviceClass.RESTART
    _attr_entity_category = EntityCategory.CONFIG

    def __init__(self, coord: AlfenCoordinator) -> None:
        super().__init__(coord, "reboot")

    @property
    def available(self) -> bool:  # type: ignore[override]
        return self._coord.last_update_success

    async def async_press(self) -> None:
        await self._coord.async_reboot()
