from __future__ import annotations

from homeassistant.components.number import NumberDeviceClass, NumberEntity, NumberMode
from homeassistant.const import PERCENTAGE, UnitOfElectricCurrent, UnitOfPower
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity import EntityCategory
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .capabilities import Cap
from .const import (
    COMFORT_LEVEL_MAX,
    COMFORT_LEVEL_MIN,
    CURRENT_LIMIT_MAX,
    CURRENT_LIMIT_MIN,
    GREEN_SHARE_MAX,
    GREEN_SHARE_MIN,
)
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
    entities: list[NumberEntity] = [CurrentLimitNumber(coord)]
    if coord.supports_solar:
        entities.append(GreenShareNumber(coord))
        entities.append(ComfortChargeLevelNumber(coord))
    async_add_entities(entities, update_before_add=False)


class _AlfenNumber(AlfenBaseEntity, NumberEntity):
    _attr_mode = NumberMode.BOX
    _attr_entity_category = EntityCategory.CONFIG

    @property
    def native_value(self) -> float | None:
        value = self.capability_value
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            return None


class CurrentLimitNumber(_AlfenNumber):
    _attr_translation_key = "current_limit"
    _attr_device_class = NumberDeviceClass.CURRENT
    _attr_native_unit_of_measurement = UnitOfElectricCurrent.AMPERE
    _attr_native_min_value = CURRENT_LIMIT_MIN
    _attr_native_max_value = CURRENT_LIMIT_MAX
    _attr_native_step = 1

    def __init__(self, coord: AlfenCoordinator) -> None:
        super().__init__(coord, Cap.CURRENT_LIMIT)

    async def async_set_native_value(self, value: float) -> None:
        await self._coord.async_set_current_limit(int(value))


class GreenShareNumber(_AlfenNumber):
    _attr_translation_key = "green_share"
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_native_min_value = GREEN_SHARE_MIN
    _attr_native_max_value = GREEN_SHARE_MAX
    _attr_native_step = 1

    def __init__(self, coord: AlfenCoordinator) -> None:
        super().__init__(coord, Cap.GREEN_SHARE)

    async def async_set_native_value(self, value: float) -> None:
        await self._coord.async_set_green_share(int(value))


class ComfortChargeLevelNumber(_AlfenNumber):
    _attr_translation_key = "comfort_charge_level"
    _attr_device_class = NumberDeviceClass.POWER
    _attr_native_unit_of_measurement = UnitOfPower.WATT
    _attr_native_min_value = COMFORT_LEVEL_MIN
    _attr_native_max_value = COMFORT_LEVEL_MAX
    _attr_native_step = 100

    def __init__(self, coord: AlfenCoordinator) -> None:
        super().__init__(coord, Cap.COMFORT_CHARGE_LEVEL)

    async def async_set_native_value(self, value: float) -> None:
        await self._coord.async_set_comfort_charge_level(int(value))
