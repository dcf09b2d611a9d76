from __future__ import annotations

import math

import pytest

from custom_components.alfen_ev.capabilities import (
    Cap,
    ChargingState,
    status_to_bool,
    status_to_charging_state,
    status_to_string,
)
from custom_components.alfen_ev.models import CapabilityValue
from custom_components.alfen_ev.normalize import (
    derive_station_values,
    normalize,
    normalize_power,
)


@pytest.mark.parametrize(
    ("code", "state"),
    [
        (0, ChargingState.PLUGGED_OUT),
        (4, ChargingState.PLUGGED_OUT),
        (6, ChargingState.PLUGGED_OUT),
        (7, ChargingState.PLUGGED_IN),
        (10, ChargingState.PLUGGED_IN),
        (11, ChargingState.PLUGGED_IN_CHARGING),
        (12, ChargingState.PLUGGED_IN_CHARGING),
        (35, ChargingState.PLUGGED_IN_CHARGING),
        (36, ChargingState.PLUGGED_IN_CHARGING),
        (41, ChargingState.PLUGGED_IN_CHARGING),
        (43, ChargingState.PLUGGED_IN_CHARGING),
        (13, ChargingState.PLUGGED_IN_PAUSED),
        (27, ChargingState.PLUGGED_IN_PAUSED),
        (42, ChargingState.PLUGGED_IN_PAUSED),
        (37, ChargingState.PLUGGED_OUT),
        (99, ChargingState.PLUGGED_OUT),
        (-1, ChargingState.PLUGGED_OUT),
        ("11", ChargingState.PLUGGED_OUT),
        (None, ChargingState.PLUGGED_OUT),
    ],
)
def test_status_to_charging_state(code, state) -> None:
    assert status_to_charging_state(code) is state


def test_status_bool_agrees_with_state() -> None:
    for code in range(-2, 50):
        expected = status_to_charging_state(code) is ChargingState.PLUGGED_IN_CHARGING
        assert status_to_bool(code) is expected
    assert status_to_bool(11.0) is True
    assert status_to_bool(True) is False


def test_status_to_string() -> None:
    assert status_to_string(4) == "Available"
    assert status_to_string(11) == "Charging"
    assert status_to_string(41) == "Solar charging"
    assert status_to_string(99) == "Unknown"
    assert status_to_string("x") == "Unknown"


def test_operating_mode_emits_derived_values() -> None:
    result = normalize(Cap.OPERATING_MODE, 11, "2501_2")
    assert result.value == "Charging"
    assert result.derived == (
        CapabilityValue(Cap.EV_CHARGING_STATE, "plugged_in_charging"),
        CapabilityValue(Cap.EV_CHARGING, True),
    )

    idle = normalize(Cap.OPERATING_MODE, 4)
    assert idle.value == "Available"
    assert idle.derived[0].value == "plugged_out"
    assert idle.derived[1].value is False


def test_rounding_rules() -> None:
    assert normalize(Cap.MEASURE_TEMPERATURE, 35.26).value == 35.3
    assert normalize(Cap.MEASURE_CURRENT_L1, 10.04).value == 10.0
    assert normalize(Cap.MEASURE_VOLTAGE_L2, 230.6).value == 231
    assert normalize(Cap.METER_POWER, 123450).value == 123.45
    assert normalize(Cap.CURRENT_LIMIT, 16).value == 16


def test_string_and_coerced_capabilities() -> None:
    assert normalize(Cap.CHARGE_TYPE, 1.0).value == "1"
    assert normalize(Cap.AUTH_MODE, 2).value == "2"
    assert normalize(Cap.CHARGE_ID, "04A1B2C3").value == "04A1B2C3"
    assert normalize(Cap.GREEN_SHARE, "50").value == 50.0
    assert normalize(Cap.COMFORT_CHARGE_LEVEL, 1400).value == 1400.0
    assert normalize(Cap.GREEN_SHARE, "n/a").value is None


def test_non_numeric_values_are_dropped() -> None:
    assert normalize(Cap.MEASURE_VOLTAGE_L1, "230").value is None
    assert normalize(Cap.MEASURE_TEMPERATURE, None).value is None
    assert normalize(Cap.MEASURE_POWER, math.nan).value is None
    assert normalize(Cap.MEASURE_CURRENT_L1, True).value is None


@pytest.mark.parametrize(
    ("raw", "watts"),
    [
        (6.9, 6900.0),
        (200, 200000),
        (0, 0),
        (250, 250),
        (7360.44, 7360.4),
        (-5, -5),
    ],
)
def test_normalize_power_heuristic(raw, watts) -> None:
    assert normalize_power(raw) == watts
    assert normalize(Cap.MEASURE_POWER, raw).value == watts


def test_station_values_from_phases() -> None:
    derived = derive_station_values(
        {
            Cap.MEASURE_VOLTAGE_L1: 230,
            Cap.MEASURE_CURRENT_L1: 10.0,
            Cap.MEASURE_VOLTAGE_L2: 231,
            Cap.MEASURE_CURRENT_L2: 12.5,
            Cap.MEASURE_VOLTAGE_L3: 229,
        }
    )
    by_cap = {item.capability_id: item.value for item in derived}
    assert by_cap[Cap.MEASURE_CURRENT] == 12.5
    assert by_cap[Cap.MEASURE_POWER_L1] == 2300.0
    assert by_cap[Cap.MEASURE_POWER_L2] == 2887.5
    assert by_cap[Cap.MEASURE_POWER_L3] == 0.0


def test_station_values_without_currents() -> None:
    derived = derive_station_values([CapabilityValue(Cap.MEASURE_VOLTAGE_L1, 230)])
    caps = [item.capability_id for item in derived]
    assert Cap.MEASURE_CURRENT not in caps
    assert caps == [Cap.MEASURE_POWER_L1, Cap.MEASURE_POWER_L2, Cap.MEASURE_POWER_L3]
    assert all(item.value == 0.0 for item in derived)
