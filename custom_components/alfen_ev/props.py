"""Alfen property catalog and identifier codec.

Alfen firmware addresses properties as ``"GGGG_I"``: a 16-bit group and an
8-bit index rendered in upper-case hex, the index without leading zeros.
The catalog below keeps the canonical 24-bit numeric form (``0x222116`` is
``"2221_16"``); socket 2 properties live ``0x100000`` above their socket 1
counterparts (``0x2221xx`` -> ``0x3221xx``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from .capabilities import Cap

SocketIndex = Literal[1, 2]
PropId = int | str

SOCKET2_OFFSET = 0x100000
_MAX_PROP_ID = 0xFFFFFF


def prop_id_to_api_id(prop_id: int) -> str:
    """Convert ``0x22210A`` to ``"2221_A"``."""
    if isinstance(prop_id, bool) or not isinstance(prop_id, int):
        raise TypeError(f"Numeric property id expected, got {prop_id!r}")
    if not 0 <= prop_id <= _MAX_PROP_ID:
        raise ValueError(f"Property id {prop_id:#x} is outside the 24-bit range")
    hex_id = f"{prop_id:06X}"
    return normalize_api_id(f"{hex_id[:4]}_{hex_id[4:]}")


def normalize_api_id(api_id: str) -> str:
    """Return the canonical wire form of an id: ``"2221_0a"`` -> ``"2221_A"``."""
    group, _, index = api_id.partition("_")
    group = group.strip().upper()
    index = index.strip().upper().lstrip("0") or "0"
    return f"{group}_{index}"


def as_api_id(prop_id: PropId) -> str:
    if isinstance(prop_id, str):
        return normalize_api_id(prop_id)
    return prop_id_to_api_id(prop_id)


def build_ids(prop_ids: Iterable[PropId]) -> str:
    """Build the comma separated ``ids=`` query value."""
    return ",".join(as_api_id(prop_id) for prop_id in prop_ids)


def for_socket(prop_id: int, socket: SocketIndex) -> int:
    """Apply the socket offset to a socket 1 numeric property id."""
    if isinstance(prop_id, bool) or not isinstance(prop_id, int):
        raise TypeError("Socket offsets apply to numeric property ids only")
    if socket == 1:
        return prop_id
    if socket == 2:
        return prop_id + SOCKET2_OFFSET
    raise ValueError(f"Unsupported socket index {socket!r}")


@dataclass(frozen=True, slots=True)
class GeneralProps:
    temperature_internal: int = 0x220100  # degC
    auth_mode: int = 0x212600
    charge_id: int = 0x206300  # plug and charge id
    station_limit: int = 0x206200  # A


@dataclass(frozen=True, slots=True)
class SolarProps:
    """Green share settings, only available on socket 1."""

    charge_type: int = 0x328001
    green_share: int = 0x328002  # %
    comfort_charge_level: int = 0x328003  # W


@dataclass(frozen=True, slots=True)
class SocketStatusProps:
    device_state: int
    operating_mode: int


@dataclass(frozen=True, slots=True)
class SocketBaseProps:
    """Socket 1 meter ids; socket 2 ids come from :func:`for_socket`."""

    current_limit: int = 0x212900  # A

    voltage_l1: int = 0x222103  # V
    voltage_l2: int = 0x222104
    voltage_l3: int = 0x222105

    current_l1: int = 0x22210A  # A
    current_l2: int = 0x22210B
    current_l3: int = 0x22210C

    power_real_l1: int = 0x222113
    power_real_l2: int = 0x222114
    power_real_l3: int = 0x222115
    power_real_total: int = 0x222116

    energy_delivered_total: int = 0x222122  # Wh

    energy_consumed_l1: int = 0x222123
    energy_consumed_l2: int = 0x222124
    energy_consumed_l3: int = 0x222125
    energy_consumed_total: int = 0x222126


@dataclass(frozen=True, slots=True)
class AlfenProps:
    general: GeneralProps
    solar: SolarProps
    status: dict[int, SocketStatusProps]
    socket_base: SocketBaseProps

    def socket_status(self, socket: SocketIndex) -> SocketStatusProps:
        try:
            return self.status[socket]
        except KeyError:
            raise ValueError(f"Unsupported socket index {socket!r}") from None


ALFEN_PROPS = AlfenProps(
    general=GeneralProps(),
    solar=SolarProps(),
    status={
        1: SocketStatusProps(device_state=0x319001, operating_mode=0x250102),
        2: SocketStatusProps(device_state=0x319101, operating_mode=0x250202),
    },
    socket_base=SocketBaseProps(),
)


def _meter_candidates() -> tuple[int, ...]:
    s = ALFEN_PROPS.socket_base
    return (
        s.voltage_l1,
        s.voltage_l2,
        s.voltage_l3,
        s.current_l1,
        s.current_l2,
        s.current_l3,
        s.current_limit,
        s.power_real_total,
        s.power_real_l1,
        s.power_real_l2,
        s.power_real_l3,
        s.energy_delivered_total,
        s.energy_consumed_total,
        s.energy_consumed_l1,
        s.energy_consumed_l2,
        s.energy_consumed_l3,
    )


def get_actual_value_prop_ids(socket: SocketIndex) -> list[PropId]:
    """Return the ids to poll for ``socket``, deduplicated, in request order."""
    general = ALFEN_PROPS.general
    solar = ALFEN_PROPS.solar
    status = ALFEN_PROPS.socket_status(socket)

    ids: list[PropId] = [
        general.temperature_internal,
        general.station_limit,
        general.auth_mode,
        general.charge_id,
    ]
    if socket == 1:
        ids.extend((solar.charge_type, solar.green_share, solar.comfort_charge_level))
    ids.extend((status.device_state, status.operating_mode))
    ids.extend(for_socket(prop_id, socket) for prop_id in _meter_candidates())
    return list(dict.fromkeys(ids))


def get_capability_map(socket: SocketIndex) -> dict[str, Cap]:
    """Map wire ids to capabilities for ``socket``."""
    general = ALFEN_PROPS.general
    solar = ALFEN_PROPS.solar
    s = ALFEN_PROPS.socket_base
    status = ALFEN_PROPS.socket_status(socket)

    def sock(prop_id: int) -> str:
        return prop_id_to_api_id(for_socket(prop_id, socket))

    return {
        prop_id_to_api_id(general.temperature_internal): Cap.MEASURE_TEMPERATURE,
        prop_id_to_api_id(general.station_limit): Cap.STATION_LIMIT,
        prop_id_to_api_id(general.auth_mode): Cap.AUTH_MODE,
        prop_id_to_api_id(general.charge_id): Cap.CHARGE_ID,
        prop_id_to_api_id(solar.charge_type): Cap.CHARGE_TYPE,
        prop_id_to_api_id(solar.green_share): Cap.GREEN_SHARE,
        prop_id_to_api_id(solar.comfort_charge_level): Cap.COMFORT_CHARGE_LEVEL,
        prop_id_to_api_id(status.operating_mode): Cap.OPERATING_MODE,
        sock(s.current_limit): Cap.CURRENT_LIMIT,
        sock(s.voltage_l1): Cap.MEASURE_VOLTAGE_L1,
        sock(s.voltage_l2): Cap.MEASURE_VOLTAGE_L2,
        sock(s.voltage_l3): Cap.MEASURE_VOLTAGE_L3,
        sock(s.current_l1): Cap.MEASURE_CURRENT_L1,
        sock(s.current_l2): Cap.MEASURE_CURRENT_L2,
        sock(s.current_l3): Cap.MEASURE_CURRENT_L3,
        sock(s.power_real_total): Cap.MEASURE_POWER,
        sock(s.energy_delivered_total): Cap.METER_POWER,
    }
