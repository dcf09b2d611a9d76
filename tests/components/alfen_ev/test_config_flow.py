from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from homeassistant import config_entries
from homeassistant.data_entry_flow import FlowResultType

from custom_components.alfen_ev.api import AuthenticationError, ParseError, RequestError
from custom_components.alfen_ev.config_flow import SocketUnavailable, async_validate_input
from custom_components.alfen_ev.const import (
    CONF_HOST,
    CONF_PASSWORD,
    CONF_SCAN_INTERVAL,
    CONF_SOCKET,
    CONF_USERNAME,
    DOMAIN,
)
from custom_components.alfen_ev.models import ChargerDetails

from .fakes import DEFAULT_INFO, DUO_INFO

pytestmark = pytest.mark.usefixtures("enable_custom_integrations")

USER_INPUT = {
    CONF_HOST: " 192.168.1.50 ",
    CONF_USERNAME: "admin",
    CONF_PASSWORD: "secret",
    CONF_SOCKET: "1",
}


async def _start(hass):
    return await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )


@pytest.mark.asyncio
async def test_user_step_creates_entry(hass) -> None:
    init = await _start(hass)
    assert init["type"] is FlowResultType.FORM
    assert init["step_id"] == "user"

    with (
        patch(
            "custom_components.alfen_ev.config_flow.async_validate_input",
            AsyncMock(return_value=ChargerDetails.from_info(DEFAULT_INFO)),
        ) as mock_validate,
        patch("custom_components.alfen_ev.async_setup_entry", return_value=True),
    ):
        result = await hass.config_entries.flow.async_configure(
            init["flow_id"], USER_INPUT
        )

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert result["title"] == "Alfen Eve Single Pro-line"
    assert result["data"][CONF_HOST] == "192.168.1.50"
    assert result["data"][CONF_SOCKET] == 1
    assert result["result"].unique_id == "ACE0123456_1"
    mock_validate.assert_awaited_once()


@pytest.mark.asyncio
async def test_second_socket_gets_its_own_entry(hass) -> None:
    init = await _start(hass)
    with (
        patch(
            "custom_components.alfen_ev.config_flow.async_validate_input",
            AsyncMock(return_value=ChargerDetails.from_info(DUO_INFO)),
        ),
        patch("custom_components.alfen_ev.async_setup_entry", return_value=True),
    ):
        result = await hass.config_entries.flow.async_configure(
            init["flow_id"], {**USER_INPUT, CONF_SOCKET: "2"}
        )

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert result["title"] == "Alfen Eve Double Pro-line socket 2"
    assert result["result"].unique_id == "ACE0123456_2"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (AuthenticationError("denied"), "invalid_auth"),
        (RequestError("timeout"), "cannot_connect"),
        (ParseError("garbage"), "cannot_connect"),
        (SocketUnavailable(), "socket_unavailable"),
        (ValueError("boom"), "unknown"),
    ],
)
async def test_user_step_errors(hass, exc, expected) -> None:
    init = await _start(hass)
    with patch(
        "custom_components.alfen_ev.config_flow.async_validate_input",
        AsyncMock(side_effect=exc),
    ):
        result = await hass.config_entries.flow.async_configure(
            init["flow_id"], USER_INPUT
        )

    assert result["type"] is FlowResultType.FORM
    assert result["step_id"] == "user"
    assert result["errors"] == {"base": expected}
    hass.config_entries.flow.async_abort(result["flow_id"])


@pytest.mark.asyncio
async def test_user_step_aborts_when_configured(hass, config_entry) -> None:
    init = await _start(hass)
    with patch(
        "custom_components.alfen_ev.config_flow.async_validate_input",
        AsyncMock(return_value=ChargerDetails.from_info(DEFAULT_INFO)),
    ):
        result = await hass.config_entries.flow.async_configure(
            init["flow_id"], USER_INPUT
        )

    assert result["type"] is FlowResultType.ABORT
    assert result["reason"] == "already_configured"


@pytest.mark.asyncio
async def test_validate_input_reads_details(patch_connection) -> None:
    details = await async_validate_input(
        {CONF_HOST: "192.168.1.50", CONF_PASSWORD: "secret", CONF_SOCKET: 1}
    )
    assert details.identity == "ACE0123456"
    assert patch_connection.logins == 1
    assert patch_connection.logouts == 1


@pytest.mark.asyncio
async def test_validate_input_rejects_missing_socket(patch_connection) -> None:
    with pytest.raises(SocketUnavailable):
        await async_validate_input(
            {CONF_HOST: "192.168.1.50", CONF_PASSWORD: "secret", CONF_SOCKET: 2}
        )
    assert patch_connection.logouts == 1


@pytest.mark.asyncio
async def test_validate_input_bad_credentials(patch_connection) -> None:
    patch_connection.fail["login"] = 401
    with pytest.raises(AuthenticationError):
        await async_validate_input(
            {CONF_HOST: "192.168.1.50", CONF_PASSWORD: "wrong", CONF_SOCKET: 1}
        )
    assert patch_connection.connections[0].closed is True


@pytest.mark.asyncio
async def test_options_flow_sets_scan_interval(hass, config_entry) -> None:
    init = await hass.config_entries.options.async_init(config_entry.entry_id)
    assert init["type"] is FlowResultType.FORM
    assert init["step_id"] == "init"

    result = await hass.config_entries.options.async_configure(
        init["flow_id"], {CONF_SCAN_INTERVAL: 60}
    )
    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert config_entry.options == {CONF_SCAN_INTERVAL: 60}
