"""Capability ids and status code tables for Alfen chargers."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Cap(StrEnum):
    """Normalized value names exposed to the entity layer."""

    OPERATING_MODE = "operatingmode"
    EV_CHARGING = "evcharger_charging"
    EV_CHARGING_STATE = "evcharger_charging_state"

    MEASURE_TEMPERATURE = "measure_temperature"

    MEASURE_VOLTAGE_L1 = "measure_voltage.l1"
    MEASURE_VOLTAGE_L2 = "measure_voltage.l2"
    MEASURE_VOLTAGE_L3 = "measure_voltage.l3"

    MEASURE_CURRENT_L1 = "measure_current.l1"
    MEASURE_CURRENT_L2 = "measure_current.l2"
    MEASURE_CURRENT_L3 = "measure_current.l3"
    MEASURE_CURRENT = "measure_current"

    MEASURE_POWER = "measure_power"
    MEASURE_POWER_L1 = "measure_power.l1"
    MEASURE_POWER_L2 = "measure_power.l2"
    MEASURE_POWER_L3 = "measure_power.l3"

    METER_POWER = "meter_power"

    AUTH_MODE = "authmode"
    CHARGE_ID = "chargeid"
    CHARGE_TYPE = "chargetype"
    GREEN_SHARE = "greenshare"
    COMFORT_CHARGE_LEVEL = "comfortchargelevel"

    CURRENT_LIMIT = "measure_current.limit"
    STATION_LIMIT = "measure_current.stationlimit"


# (voltage, current, power) per phase
PHASES: tuple[tuple[Cap, Cap, Cap], ...] = (
    (Cap.MEASURE_VOLTAGE_L1, Cap.MEASURE_CURRENT_L1, Cap.MEASURE_POWER_L1),
    (Cap.MEASURE_VOLTAGE_L2, Cap.MEASURE_CURRENT_L2, Cap.MEASURE_POWER_L2),
    (Cap.MEASURE_VOLTAGE_L3, Cap.MEASURE_CURRENT_L3, Cap.MEASURE_POWER_L3),
)


class ChargingState(StrEnum):
    PLUGGED_OUT = "plugged_out"
    PLUGGED_IN = "plugged_in"
    PLUGGED_IN_CHARGING = "plugged_in_charging"
    PLUGGED_IN_PAUSED = "plugged_in_paused"


class SocketType(IntEnum):
    FIXED_CABLE = 0
    MENNEKES = 1
    FCT = 2
    SCHUKO = 3
    FIX_CABLE_1 = 4
    FIX_CABLE_2 = 5
    FIX_CABLE_CCS = 6
    FIX_CABLE_CHADEMO = 7


STATUS_NAMES: dict[int, str] = {
    0: "Unknown",
    1: "Off",
    2: "Booting",
    3: "Booting Check Mennekes",
    4: "Available",
    5: "Prep. Authorising",
    6: "Prep. Authorised",
    7: "Cable connected",
    8: "EV connected",
    9: "Charging Preparing",
    10: "Vehicle connected",
    11: "Charging",
    12: "Charging Simplified",
    13: "Suspended Over-Current",
    14: "Suspended HF Switching",
    15: "Suspended EV Disconnected",
    16: "Finish Wait Vehicle",
    17: "Session end",
    18: "Error Protective Earth",
    19: "Error Powerfailure",
    20: "Error Contactor Fault",
    21: "Error Charging",
    22: "Error Power Failure",
    23: "Error Temperature",
    24: "Error Illegal CP Value",
    25: "Error Illegal PP Value",
    26: "ConnectorLock Failure",
    27: "Error",
    28: "Error Message",
    29: "Error Message Not Sent",
    30: "Error Message Not Acknowledged",
    31: "Error Message Not Supported",
    32: "Error Message Time-Out",
    33: "Reserved",
    34: "Blocked",
    35: "Load Balancing Limited",
    36: "Paused",
    38: "Not Charging",
    39: "Solar Charging Wait",
    40: "Charging Non Charging",
    41: "Solar charging",
    42: "Waiting For Power",
    43: "Partial Solar Charging",
}

_UNPLUGGED_CODES = frozenset(range(0, 7))
_PLUGGED_IN_CODES = frozenset(range(7, 11))
_CHARGING_CODES = frozenset({11, 12, 35, 36, 41, 43})


def _status_code(status: object) -> int | None:
    if isinstance(status, bool):
        return None
    if isinstance(status, int):
        return status
    if isinstance(status, float) and status.is_integer():
        return int(status)
    return None


def status_to_string(status: object) -> str:
    code = _status_code(status)
    if code is None:
        return STATUS_NAMES[0]
    return STATUS_NAMES.get(code, STATUS_NAMES[0])


def status_to_charging_state(status: object) -> ChargingState:
    """Map a status code to a charging state; undefined codes read as unplugged."""
    code = _status_code(status)
    if code is None or code not in STATUS_NAMES or code in _UNPLUGGED_CODES:
        return ChargingState.PLUGGED_OUT
    if code in _PLUGGED_IN_CODES:
        return ChargingState.PLUGGED_IN
    if code in _CHARGING_CODES:
        return ChargingState.PLUGGED_IN_CHARGING
    return ChargingState.PLUGGED_IN_PAUSED


def status_to_bool(status: object) -> bool:
    return status_to_charging_state(status) is ChargingState.PLUGGED_IN_CHARGING


AUTH_MODES: dict[int, str] = {
    0: "plug_and_charge",
    2: "rfid",
}

CHARGE_TYPES: dict[int, str] = {
    0: "normal",
    1: "comfort",
    2: "green",
}
