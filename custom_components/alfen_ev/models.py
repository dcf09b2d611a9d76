from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from .capabilities import SocketType

CapabilityValueType = float | int | str | bool


@dataclass(frozen=True, slots=True)
class CapabilityValue:
    """One normalized value produced by a poll."""

    capability_id: str
    value: CapabilityValueType


@dataclass(frozen=True, slots=True)
class ChargerSocketsInfo:
    number_of_sockets: Literal[1, 2] = 1
    socket_type_1: SocketType = SocketType.MENNEKES
    socket_type_2: SocketType | None = None


def _socket_type(part: str | None) -> SocketType:
    try:
        number = float(part) if part is not None else float("nan")
    except ValueError:
        return SocketType.MENNEKES
    if not number.is_integer() or not 0 <= number <= 7:
        return SocketType.MENNEKES
    return SocketType(int(number))


def parse_charger_sockets_info(type_str: Any) -> ChargerSocketsInfo:
    """Parse the Alfen ``Type`` string ``"x.y.z"``.

    ``x == 2`` marks a dual socket (Duo) station, ``y`` and ``z`` are the
    socket types of socket 1 and 2. Anything unparseable falls back to a
    single Mennekes socket.
    """
    if not isinstance(type_str, str) or not type_str.strip():
        return ChargerSocketsInfo()

    parts = [part.strip() for part in type_str.split(".")]
    parts.extend([None] * (3 - len(parts)))
    try:
        dual = float(parts[0]) == 2
    except ValueError:
        dual = False

    if dual:
        return ChargerSocketsInfo(
            number_of_sockets=2,
            socket_type_1=_socket_type(parts[1]),
            socket_type_2=_socket_type(parts[2]),
        )
    return ChargerSocketsInfo(number_of_sockets=1, socket_type_1=_socket_type(parts[1]))


@dataclass(frozen=True, slots=True)
class ChargerDetails:
    """Snapshot of ``/api/info`` plus the parsed socket topology."""

    identity: str | None
    model: str | None
    firmware_version: str | None
    content_type: str | None
    object_id: str | None
    sockets: ChargerSocketsInfo
    info: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_info(cls, info: dict[str, Any]) -> ChargerDetails:
        def _text(key: str) -> str | None:
            value = info.get(key)
            return str(value) if value is not None else None

        return cls(
            identity=_text("Identity"),
            model=_text("Model"),
            firmware_version=_text("FWVersion"),
            content_type=_text("ContentType"),
            object_id=_text("ObjectId"),
            sockets=parse_charger_sockets_info(info.get("Type")),
            info=dict(info),
        )
