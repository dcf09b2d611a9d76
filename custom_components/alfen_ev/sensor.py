from __future__ import annotations

from dataclasses import dataclass

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import (
    UnitOfElectricCurrent,
    UnitOfElectricPotential,
    UnitOfEnergy,
    UnitOfPower,
    UnitOfTemperature,
)
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity import EntityCategory
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .capabilities import Cap, ChargingState
from .coordinator import AlfenCoordinator
from .entity import AlfenBaseEntity
from .runtime_data import AlfenConfigEntry, get_runtime_data

PARALLEL_UPDATES = 0


@dataclass(frozen=True, slots=True)
class _SensorSpec:
    key: str
    translation_key: str
    device_class: SensorDeviceClass | None = None
    unit: str | None = None
    state_class: SensorStateClass | None = None
    entity_category: EntityCategory | None = None


def _measurement(key: Cap, tkey: str, device_class, unit) -> _SensorSpec:
    return _SensorSpec(key, tkey, device_class, unit, SensorStateClass.MEASUREMENT)


SENSORS: tuple[_SensorSpec, ...] = (
    _measurement(
        Cap.MEASURE_TEMPERATURE,
        "temperature",
        SensorDeviceClass.TEMPERATURE,
        UnitOfTemperature.CELSIUS,
    ),
    *(
        _measurement(
            cap, f"voltage_{cap[-2:]}", SensorDeviceClass.VOLTAGE, UnitOfElectricPotential.VOLT
        )
        for cap in (Cap.MEASURE_VOLTAGE_L1, Cap.MEASURE_VOLTAGE_L2, Cap.MEASURE_VOLTAGE_L3)
    ),
    *(
        _measurement(
            cap, f"current_{cap[-2:]}", SensorDeviceClass.CURRENT, UnitOfElectricCurrent.AMPERE
        )
        for cap in (Cap.MEASURE_CURRENT_L1, Cap.MEASURE_CURRENT_L2, Cap.MEASURE_CURRENT_L3)
    ),
    _measurement(
        Cap.MEASURE_CURRENT, "current", SensorDeviceClass.CURRENT, UnitOfElectricCurrent.AMPERE
    ),
    _measurement(Cap.MEASURE_POWER, "power", SensorDeviceClass.POWER, UnitOfPower.WATT),
    *(
        _measurement(cap, f"power_{cap[-2:]}", SensorDeviceClass.POWER, UnitOfPower.WATT)
        for cap in (Cap.MEASURE_POWER_L1, Cap.MEASURE_POWER_L2, Cap.MEASURE_POWER_L3)
    ),
    _SensorSpec(
        Cap.METER_POWER,
        "energy_delivered",
        SensorDeviceClass.ENERGY,
        UnitOfEnergy.KILO_WATT_HOUR,
        SensorStateClass.TOTAL_INCREASING,
    ),
    _SensorSpec(
        Cap.STATION_LIMIT,
        "station_current_limit",
        SensorDeviceClass.CURRENT,
        UnitOfElectricCurrent.AMPERE,
        entity_category=EntityCategory.DIAGNOSTIC,
    ),
    _SensorSpec(Cap.OPERATING_MODE, "status"),
    _SensorSpec(Cap.EV_CHARGING_STATE, "charging_state", SensorDeviceClass.ENUM),
    _SensorSpec(Cap.AUTH_MODE, "auth_mode_code", entity_category=EntityCategory.DIAGNOSTIC),
    _SensorSpec(Cap.CHARGE_ID, "charge_id", entity_category=EntityCategory.DIAGNOSTIC),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: AlfenConfigEntry,
    async_add_entities: AddEntitiesCallback,
):
    coord = get_runtime_data(entry).coordinator
    async_add_entities(
        [AlfenSensor(coord, spec) for spec in SENSORS], update_before_add=False
    )


class AlfenSensor(AlfenBaseEntity, SensorEntity):
    def __init__(self, coord: AlfenCoordinator, spec: _SensorSpec) -> None:
        super().__init__(coord, spec.key)
        self._attr_translation_key = spec.translation_key
        self._attr_device_class = spec.device_class
        self._attr_native_unit_of_measurement = spec.unit
        self._attr_state_class = spec.state_class
        self._attr_entity_category = spec.entity_category
        if spec.device_class is SensorDeviceClass.ENUM:
            self._attr_options = [str(state) for state in ChargingState]

    @property
    def native_value(self):
        return self.capability_value
