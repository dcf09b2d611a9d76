"""Turn raw Alfen property values into normalized capability values."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .capabilities import (
    PHASES,
    Cap,
    status_to_bool,
    status_to_charging_state,
    status_to_string,
)
from .models import CapabilityValue, CapabilityValueType

_LOGGER = logging.getLogger(__name__)

# Raw power readings in (0, POWER_KW_THRESHOLD] are kilowatts, anything else
# is watts. A genuine draw of a few hundred watts or less is misread as kW.
POWER_KW_THRESHOLD = 200
WH_PER_KWH = 1000

_ONE_DECIMAL = frozenset(
    {
        Cap.MEASURE_TEMPERATURE,
        Cap.MEASURE_CURRENT_L1,
        Cap.MEASURE_CURRENT_L2,
        Cap.MEASURE_CURRENT_L3,
    }
)
_INTEGER = frozenset(
    {Cap.MEASURE_VOLTAGE_L1, Cap.MEASURE_VOLTAGE_L2, Cap.MEASURE_VOLTAGE_L3}
)
_STRING_FORM = frozenset({Cap.AUTH_MODE, Cap.CHARGE_TYPE, Cap.CHARGE_ID})
_COERCED_NUMBER = frozenset({Cap.GREEN_SHARE, Cap.COMFORT_CHARGE_LEVEL})


@dataclass(frozen=True, slots=True)
class NormalizedValue:
    value: CapabilityValueType | None
    derived: tuple[CapabilityValue, ...] = ()


def _as_number(value: Any) -> float | int | None:
    """Return ``value`` when it is a finite int/float (booleans excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def _coerce_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _string_form(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_power(raw: float | int) -> float:
    if 0 < raw <= POWER_KW_THRESHOLD:
        raw = raw * 1000
    return round(raw, 1)


def normalize(
    capability_id: str, raw_value: Any, prop_id: str | None = None
) -> NormalizedValue:
    """Normalize one raw property value for ``capability_id``."""
    if capability_id == Cap.OPERATING_MODE:
        return NormalizedValue(
            status_to_string(raw_value),
            (
                CapabilityValue(
                    Cap.EV_CHARGING_STATE, str(status_to_charging_state(raw_value))
                ),
                CapabilityValue(Cap.EV_CHARGING, status_to_bool(raw_value)),
            ),
        )

    if capability_id in _STRING_FORM:
        if raw_value is None:
            return NormalizedValue(None)
        return NormalizedValue(_string_form(raw_value))

    if capability_id in _COERCED_NUMBER:
        return NormalizedValue(_coerce_number(raw_value))

    number = _as_number(raw_value)
    if number is None:
        _LOGGER.debug(
            "Dropping non-numeric value %r for %s (property %s)",
            raw_value,
            capability_id,
            prop_id,
        )
        return NormalizedValue(None)

    if capability_id in _ONE_DECIMAL:
        return NormalizedValue(round(number, 1))
    if capability_id in _INTEGER:
        return NormalizedValue(round(number))
    if capability_id == Cap.METER_POWER:
        return NormalizedValue(round(number / WH_PER_KWH, 2))
    if capability_id == Cap.MEASURE_POWER:
        return NormalizedValue(normalize_power(number))
    return NormalizedValue(number)


def derive_station_values(
    values: Mapping[str, Any] | Iterable[CapabilityValue],
) -> list[CapabilityValue]:
    """Synthesize the station current and per-phase power.

    Phases missing a voltage or current report 0 W so the set of capabilities
    stays the same from one poll to the next.
    """
    if isinstance(values, Mapping):
        by_cap = dict(values)
    else:
        by_cap = {item.capability_id: item.value for item in values}

    derived: list[CapabilityValue] = []

    currents = [
        number
        for _voltage, current, _power in PHASES
        if (number := _as_number(by_cap.get(current))) is not None
    ]
    if currents:
        derived.append(
            CapabilityValue(Cap.MEASURE_CURRENT, round(float(max(currents)), 1))
        )

    for voltage_cap, current_cap, power_cap in PHASES:
        voltage = _as_number(by_cap.get(voltage_cap))
        current = _as_number(by_cap.get(current_cap))
        if voltage is None or current is None:
            power = 0.0
        else:
            power = round(float(voltage) * current, 1)
        derived.append(CapabilityValue(power_cap, power))
    return derived
