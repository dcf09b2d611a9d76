"""Shared pytest fixtures for the Alfen EV custom integration."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.core import HomeAssistant

try:
    from custom_components.alfen_ev.const import DOMAIN
except ModuleNotFoundError:  # pragma: no cover - fallback for local test runs
    ROOT = Path(__file__).resolve().parents[3]
    if str(ROOT) not in sys.path:
        sys.path.insert(0, str(ROOT))
    from custom_components.alfen_ev.const import DOMAIN

from custom_components.alfen_ev import api

from .fakes import DEFAULT_INFO, ENTRY_DATA, HOST, FakeCharger, prop


@pytest.fixture
def charger() -> FakeCharger:
    """A single socket charger that is currently charging."""
    return FakeCharger(
        properties=[
            prop("2201_0", 35.26),
            prop("2062_0", 32),
            prop("2126_0", 0),
            prop("2063_0", "04A1B2C3"),
            prop("3280_1", 1),
            prop("3280_2", "50"),
            prop("3280_3", 1400.0),
            prop("2501_2", 11),
            prop("2221_3", 230.4),
            prop("2221_4", 231.0),
            prop("2221_5", 229.0),
            prop("2221_A", 10.04),
            prop("2221_B", 9.96),
            prop("2221_C", 0.0),
            prop("2129_0", 16),
            prop("2221_16", 6.9),
            prop("2221_22", 123450),
        ]
    )


@pytest.fixture
def client(charger: FakeCharger) -> api.AlfenApiClient:
    return api.AlfenApiClient(
        HOST, "admin", "secret", session_factory=charger.connection
    )


@pytest.fixture
def patch_connection(monkeypatch, charger: FakeCharger) -> FakeCharger:
    """Route every client built by the integration to ``charger``."""
    monkeypatch.setattr(
        api.AlfenApiClient, "_create_connection", staticmethod(charger.connection)
    )
    return charger


@pytest.fixture
def config_entry(hass: HomeAssistant) -> MockConfigEntry:
    """Provide a config entry for socket 1 added to hass."""
    entry = MockConfigEntry(
        domain=DOMAIN,
        data=dict(ENTRY_DATA),
        title=f"Alfen {DEFAULT_INFO['Model']}",
        unique_id=f"{DEFAULT_INFO['Identity']}_1",
    )
    entry.add_to_hass(hass)
    return entry
