from __future__ import annotations

import pytest

from custom_components.alfen_ev.capabilities import SocketType
from custom_components.alfen_ev.models import (
    ChargerDetails,
    ChargerSocketsInfo,
    parse_charger_sockets_info,
)


@pytest.mark.parametrize(
    ("type_str", "expected"),
    [
        ("2.1.3", ChargerSocketsInfo(2, SocketType.MENNEKES, SocketType.SCHUKO)),
        ("2.9.x", ChargerSocketsInfo(2, SocketType.MENNEKES, SocketType.MENNEKES)),
        ("2", ChargerSocketsInfo(2, SocketType.MENNEKES, SocketType.MENNEKES)),
        ("1.0", ChargerSocketsInfo(1, SocketType.FIXED_CABLE, None)),
        ("1.6.0", ChargerSocketsInfo(1, SocketType.FIX_CABLE_CCS, None)),
        ("abc", ChargerSocketsInfo()),
        ("", ChargerSocketsInfo()),
        (None, ChargerSocketsInfo()),
        (2, ChargerSocketsInfo()),
    ],
)
def test_parse_charger_sockets_info(type_str, expected) -> None:
    assert parse_charger_sockets_info(type_str) == expected


def test_charger_details_from_info() -> None:
    info = {
        "Identity": "ACE0123456",
        "Model": "Eve Double Pro-line",
        "FWVersion": "6.5.0",
        "ContentType": "alfen/json",
        "ObjectId": 42,
        "Type": "2.1.1",
        "Uptime": 1234,
    }
    details = ChargerDetails.from_info(info)
    assert details.identity == "ACE0123456"
    assert details.object_id == "42"
    assert details.content_type == "alfen/json"
    assert details.sockets.number_of_sockets == 2
    assert details.info["Uptime"] == 1234

    info["Model"] = "changed"
    assert details.model == "Eve Double Pro-line"


def test_charger_details_tolerates_missing_fields() -> None:
    details = ChargerDetails.from_info({})
    assert details.identity is None
    assert details.model is None
    assert details.sockets == ChargerSocketsInfo()
