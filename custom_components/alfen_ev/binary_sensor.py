from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .capabilities import Cap
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
    async_add_entities([ChargingBinarySensor(coord)], update_before_add=False)


class ChargingBinarySensor(AlfenBaseEntity, BinarySensorEntity):
    _attr_translation_key = "charging"
    _attr_device_class = BinarySensorDeviceClass.BATTERY_CHARGING

    def __init__(self, coord: AlfenCoordinator) -> None:
        super().__init__(coord, Cap.EV_CHARGING)

    @property
    def is_on(self) -> bool:
        return bool(self.capability_value)

    @property
    def icon(self) -> str | None:
        return "mdi:flash" if self.is_on else "mdi:flash-off"
