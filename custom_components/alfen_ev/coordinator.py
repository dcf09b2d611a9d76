from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, Awaitable, Callable

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from .api import AlfenApiClient, AlfenError
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
)
from .models import ChargerDetails

_LOGGER = logging.getLogger(__name__)


class AlfenCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Poll one socket of an Alfen charger.

    ``data`` maps capability ids to their latest values. A capability missing
    from a poll keeps its previous value, and a failed poll leaves ``data``
    untouched.
    """

    def __init__(self, hass: HomeAssistant, config, config_entry=None):
        self.hass = hass
        self.config_entry = config_entry
        self.host = str(config[CONF_HOST]).strip()
        try:
            socket = int(config.get(CONF_SOCKET, DEFAULT_SOCKET))
        except (TypeError, ValueError):
            socket = DEFAULT_SOCKET
        self.socket = socket if socket in (1, 2) else DEFAULT_SOCKET
        try:
            interval = int(config.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL))
        except (TypeError, ValueError):
            interval = DEFAULT_SCAN_INTERVAL
        self.client = AlfenApiClient(
            self.host,
            config.get(CONF_USERNAME) or DEFAULT_USERNAME,
            config[CONF_PASSWORD],
        )
        self.details: ChargerDetails | None = None
        self.last_success_utc = None
        self.last_failure_utc = None
        self.last_failure_reason: str | None = None
        self.latency_ms: int | None = None
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=DOMAIN,
            update_interval=timedelta(seconds=max(interval, 5)),
        )

    async def _async_update_data(self) -> dict[str, Any]:
        t0 = time.monotonic()
        try:
            async with self.client.session():
                values = await self.client.get_actual_values(self.socket)
        except AlfenError as err:
            self.last_failure_utc = dt_util.utcnow()
            self.last_failure_reason = str(err)
            raise UpdateFailed(f"Error communicating with charger: {err}") from err
        finally:
            self.latency_ms = int((time.monotonic() - t0) * 1000)

        self.last_success_utc = dt_util.utcnow()
        merged = dict(self.data or {})
        for item in values:
            merged[str(item.capability_id)] = item.value
        return merged

    async def async_fetch_details(self) -> ChargerDetails:
        try:
            async with self.client.session():
                self.details = await self.client.get_charger_details()
        except AlfenError as err:
            raise UpdateFailed(f"Unable to read charger details: {err}") from err
        return self.details

    @property
    def supports_solar(self) -> bool:
        """Green share settings only exist on socket 1."""
        return self.socket == 1

    async def _async_write(
        self, description: str, call: Callable[[], Awaitable[bool]]
    ) -> None:
        try:
            async with self.client.session():
                accepted = await call()
        except AlfenError as err:
            raise HomeAssistantError(f"Unable to set {description}: {err}") from err
        if not accepted:
            raise ServiceValidationError(f"Invalid value for {description}")
        await self.async_request_refresh()

    async def async_set_current_limit(self, amps: float) -> None:
        await self._async_write(
            "current limit",
            lambda: self.client.set_current_limit(amps, self.socket),
        )

    async def async_set_green_share(self, percentage: float) -> None:
        await self._async_write(
            "green share",
            lambda: self.client.set_green_share_percentage(percentage),
        )

    async def async_set_comfort_charge_level(self, watts: float) -> None:
        await self._async_write(
            "comfort charge level",
            lambda: self.client.set_comfort_charge_level(watts),
        )

    async def async_set_charge_type(self, charge_type: int | str) -> None:
        await self._async_write(
            "charge type", lambda: self.client.set_charge_type(charge_type)
        )

    async def async_set_auth_mode(self, auth_mode: int | str) -> None:
        await self._async_write(
            "auth mode", lambda: self.client.set_auth_mode(auth_mode)
        )

    async def async_reboot(self) -> None:
        try:
            async with self.client.session():
                await self.client.reboot()
        except AlfenError as err:
            raise HomeAssistantError(f"Unable to reboot charger: {err}") from err
