from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers.selector import selector

from .api import AlfenApiClient, AuthenticationError, ParseError, RequestError
from .const import (
    CONF_HOST,
    CONF_PASSWORD,
    CONF_SCAN_INTERVAL,
    CONF_SOCKET,
    CONF_USERNAME,
    DEFAULT_SCAN_INTERVAL,
    DEFAULT_SOCKET,
    DEFAULT_USERNAME,
    DOMAIN,
    MANUFACTURER,
)
from .models import ChargerDetails

_LOGGER = logging.getLogger(__name__)


class SocketUnavailable(Exception):
    """The charger has no second socket."""


async def async_validate_input(data: dict[str, Any]) -> ChargerDetails:
    """Log in, read the charger details and log out again."""
    client = AlfenApiClient(
        data[CONF_HOST].strip(),
        data.get(CONF_USERNAME) or DEFAULT_USERNAME,
        data[CONF_PASSWORD],
    )
    try:
        async with client.session():
            details = await client.get_charger_details()
    finally:
        await client.close()
    if int(data.get(CONF_SOCKET, DEFAULT_SOCKET)) > details.sockets.number_of_sockets:
        raise SocketUnavailable
    return details


class AlfenConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1
    MINOR_VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        errors: dict[str, str] = {}
        if user_input is not None:
            data = dict(user_input)
            data[CONF_HOST] = data[CONF_HOST].strip()
            data[CONF_SOCKET] = int(data.get(CONF_SOCKET, DEFAULT_SOCKET))
            try:
                details = await async_validate_input(data)
            except AuthenticationError:
                errors["base"] = "invalid_auth"
            except (RequestError, ParseError):
                errors["base"] = "cannot_connect"
            except SocketUnavailable:
                errors["base"] = "socket_unavailable"
            except Exception as err:  # noqa: BLE001
                _LOGGER.warning("Unexpected error validating Alfen charger: %s", err)
                errors["base"] = "unknown"
            else:
                ident = details.identity or data[CONF_HOST]
                await self.async_set_unique_id(f"{ident}_{data[CONF_SOCKET]}")
                self._abort_if_unique_id_configured()
                title = f"{MANUFACTURER} {details.model or data[CONF_HOST]}"
                if data[CONF_SOCKET] == 2:
                    title = f"{title} socket 2"
                return self.async_create_entry(title=title, data=data)

        defaults = user_input or {}
        schema = vol.Schema(
            {
                vol.Required(
                    CONF_HOST, default=defaults.get(CONF_HOST, "")
                ): selector({"text": {}}),
                vol.Required(
                    CONF_USERNAME,
                    default=defaults.get(CONF_USERNAME, DEFAULT_USERNAME),
                ): selector({"text": {}}),
                vol.Required(CONF_PASSWORD): selector({"text": {"type": "password"}}),
                vol.Required(
                    CONF_SOCKET,
                    default=str(defaults.get(CONF_SOCKET, DEFAULT_SOCKET)),
                ): selector({"select": {"options": ["1", "2"], "mode": "list"}}),
            }
        )
        return self.async_show_form(step_id="user", data_schema=schema, errors=errors)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry):
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    def __init__(self, config_entry: ConfigEntry) -> None:
        self._entry = config_entry

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        if user_input is not None:
            return self.async_create_entry(data=user_input)

        schema = vol.Schema(
            {
                vol.Optional(
                    CONF_SCAN_INTERVAL,
                    default=self._entry.options.get(
                        CONF_SCAN_INTERVAL,
                        self._entry.data.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL),
                    ),
                ): vol.All(int, vol.Range(min=5, max=3600)),
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema)
