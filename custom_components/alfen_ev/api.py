from __future__ import annotations

import asyncio
import json
import logging
import math
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable

import aiohttp
import async_timeout
from yarl import URL

from .capabilities import AUTH_MODES, CHARGE_TYPES
from .const import (
    API_CONTENT_TYPE,
    API_PATH,
    CMD,
    COMFORT_LEVEL_MAX,
    COMFORT_LEVEL_MIN,
    COMMAND_REBOOT,
    CURRENT_LIMIT_MAX,
    CURRENT_LIMIT_MIN,
    DEFAULT_API_TIMEOUT,
    DEFAULT_KEEPALIVE_TIMEOUT,
    GREEN_SHARE_MAX,
    GREEN_SHARE_MIN,
    ID,
    INFO,
    LOGIN,
    LOGOUT,
    MAX_SESSION_REFS,
    PARAM_COMMAND,
    PARAM_PASSWORD,
    PARAM_USERNAME,
    PROP,
    PROPERTIES,
    VALUE,
)
from .models import CapabilityValue, ChargerDetails
from .normalize import derive_station_values, normalize
from .props import (
    ALFEN_PROPS,
    SocketIndex,
    build_ids,
    for_socket,
    get_actual_value_prop_ids,
    get_capability_map,
    normalize_api_id,
    prop_id_to_api_id,
)

_LOGGER = logging.getLogger(__name__)

_JSON_CONTENT_TYPES = ("application/json", "alfen/json")


class AlfenError(Exception):
    """Base exception for Alfen charger failures."""


class AuthenticationError(AlfenError):
    """Raised when the charger rejects the login or cannot be reached for it."""


class RequestError(AlfenError):
    """Raised for a non-200 response or a transport failure."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class PropertyWriteError(AlfenError):
    """Raised when writing a property to the charger fails."""


class ParseError(AlfenError):
    """Raised when a response body is not the JSON the call expects."""


@dataclass
class SessionState:
    """The shared authenticated connection and the number of callers using it."""

    connection: aiohttp.ClientSession | None = None
    refcount: int = 0

    @property
    def is_open(self) -> bool:
        return self.connection is not None


def _is_json_content_type(content_type: str | None) -> bool:
    ctype = (content_type or "").split(";", 1)[0].strip().lower()
    return ctype in _JSON_CONTENT_TYPES


def _decode_body(raw: bytes, content_type: str | None, url: str) -> Any:
    """Decode a response body, preferring JSON and falling back to text."""

    text = raw.decode("utf-8", errors="replace")
    if not text.strip():
        return text
    try:
        return json.loads(text)
    except ValueError as err:
        if _is_json_content_type(content_type):
            raise ParseError(
                f"Invalid JSON in {content_type!r} response from {url}: {text[:120]}"
            ) from err
        return text


def _finite_number(value: Any) -> float | int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if math.isfinite(value) else None


def _in_range(value: Any, low: int, high: int) -> bool:
    number = _finite_number(value)
    return number is not None and low <= number <= high


def _resolve_option(value: Any, options: dict[int, str]) -> int | None:
    """Return the wire code for an option given as code or label."""

    if isinstance(value, str):
        text = value.strip().lower()
        for code, label in options.items():
            if text in (label, str(code)):
                return code
        return None
    number = _finite_number(value)
    if number is None or int(number) != number or int(number) not in options:
        return None
    return int(number)


class AlfenApiClient:
    """Client for the local HTTPS API of an Alfen charger.

    The charger accepts a single authenticated session, so all callers share
    one connection. Every :meth:`login` must be paired with one :meth:`logout`;
    the connection is logged out and closed when the last caller leaves.
    Use :meth:`session` to get the pairing right.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        timeout: int = DEFAULT_API_TIMEOUT,
        session_factory: Callable[[], aiohttp.ClientSession] | None = None,
    ) -> None:
        self._host = host
        self._username = username
        self._password = password
        self._timeout = int(timeout)
        self._base_url = f"https://{host}/{API_PATH}"
        self._session_factory = session_factory or self._create_connection
        self._state = SessionState()
        self._login_done: asyncio.Event | None = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def session_state(self) -> SessionState:
        return self._state

    @staticmethod
    def _create_connection() -> aiohttp.ClientSession:
        # Charger certificates are self-signed, so verification is disabled.
        # The cookie jar must accept cookies from bare IP addresses.
        connector = aiohttp.TCPConnector(
            ssl=False, limit=1, keepalive_timeout=DEFAULT_KEEPALIVE_TIMEOUT
        )
        return aiohttp.ClientSession(
            connector=connector, cookie_jar=aiohttp.CookieJar(unsafe=True)
        )

    async def login(self) -> None:
        state = self._state
        if state.refcount > MAX_SESSION_REFS:
            _LOGGER.warning(
                "Session to %s holds %s logins; assuming leaked callers and "
                "starting a fresh session",
                self._host,
                state.refcount,
            )
            state.refcount = 1
            await self.logout()

        if state.connection is None:
            state.refcount = 0
        state.refcount += 1

        if state.connection is not None:
            pending = self._login_done
            if pending is not None and not pending.is_set():
                connection = state.connection
                try:
                    await pending.wait()
                except asyncio.CancelledError:
                    state.refcount = max(state.refcount - 1, 0)
                    raise
                if state.connection is not connection:
                    raise AuthenticationError(f"Login to {self._host} failed")
            return

        connection = self._session_factory()
        state.connection = connection
        done = self._login_done = asyncio.Event()
        try:
            await self._request(
                "POST",
                LOGIN,
                body={PARAM_USERNAME: self._username, PARAM_PASSWORD: self._password},
                connection=connection,
            )
        except AlfenError as err:
            await self._abandon_login(connection)
            raise AuthenticationError(f"Login to {self._host} failed: {err}") from err
        except asyncio.CancelledError:
            await self._abandon_login(connection)
            raise
        finally:
            done.set()
        _LOGGER.debug("Logged in to %s as %s", self._host, self._username)

    async def _abandon_login(self, connection: aiohttp.ClientSession) -> None:
        """Forget a connection whose login did not complete."""

        state = self._state
        if state.connection is connection:
            state.connection = None
            state.refcount = 0
        await connection.close()

    async def logout(self) -> None:
        state = self._state
        state.refcount -= 1
        if state.refcount > 0:
            return
        state.refcount = 0
        connection = state.connection
        if connection is None:
            return
        state.connection = None
        try:
            await self._request("POST", LOGOUT, keep_alive=False, connection=connection)
        except AlfenError as err:
            _LOGGER.debug("Logout from %s failed: %s", self._host, err)
        else:
            _LOGGER.debug("Logged out from %s", self._host)
        finally:
            await connection.close()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AlfenApiClient]:
        """Hold a login for the duration of the block."""

        await self.login()
        try:
            yield self
        finally:
            await self.logout()

    async def close(self) -> None:
        """Drop every outstanding login and close the connection."""

        if self._state.connection is None:
            self._state.refcount = 0
            return
        self._state.refcount = 1
        await self.logout()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Any | None = None,
        keep_alive: bool = True,
        connection: aiohttp.ClientSession | None = None,
    ) -> Any:
        """Perform one request on the shared connection and decode the body."""

        conn = connection or self._state.connection
        if conn is None:
            raise RequestError(f"No open session to {self._host}; login first")

        url = f"{self._base_url}/{path}"
        headers = {
            "Content-Type": API_CONTENT_TYPE,
            "Connection": "keep-alive" if keep_alive else "close",
        }
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Length"] = str(len(data))

        try:
            async with async_timeout.timeout(self._timeout):
                async with conn.request(
                    method,
                    URL(url, encoded=True),
                    headers=headers,
                    data=data,
                    ssl=False,
                ) as resp:
                    if resp.status != 200:
                        raise RequestError(
                            f"{method} {url} failed with status {resp.status}",
                            status=resp.status,
                        )
                    raw = await resp.read()
                    content_type = resp.headers.get("Content-Type")
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            msg = str(err).strip() or err.__class__.__name__
            raise RequestError(f"{method} {url} failed: {msg}") from err

        _LOGGER.debug("%s %s -> %s (%s bytes)", method, url, content_type, len(raw))
        return _decode_body(raw, content_type, url)

    async def get_charger_details(self) -> ChargerDetails:
        info = await self._request("GET", INFO)
        if not isinstance(info, dict):
            raise ParseError(
                f"Unexpected info response from {self._host}: {str(info)[:120]}"
            )
        details = ChargerDetails.from_info(info)
        _LOGGER.debug(
            "Charger %s is a %s with %s socket(s), firmware %s",
            details.identity,
            details.model,
            details.sockets.number_of_sockets,
            details.firmware_version,
        )
        return details

    async def get_actual_values(self, socket: SocketIndex = 1) -> list[CapabilityValue]:
        """Poll the current measurements and settings of ``socket``."""

        ids = build_ids(get_actual_value_prop_ids(socket))
        payload = await self._request("GET", f"{PROP}?ids={ids}")
        properties = payload.get(PROPERTIES) if isinstance(payload, dict) else None
        if not isinstance(properties, list):
            raise ParseError(
                f"Unexpected property response from {self._host}: {str(payload)[:120]}"
            )

        capability_map = get_capability_map(socket)
        values: list[CapabilityValue] = []
        for prop in properties:
            if not isinstance(prop, dict) or not isinstance(prop.get(ID), str):
                continue
            api_id = normalize_api_id(prop[ID])
            capability_id = capability_map.get(api_id)
            if capability_id is None:
                continue
            normalized = normalize(capability_id, prop.get(VALUE), api_id)
            if normalized.value is not None:
                values.append(CapabilityValue(capability_id, normalized.value))
            values.extend(normalized.derived)

        values.extend(derive_station_values(values))
        return values

    async def _set_property(self, prop_id: int, value: Any) -> bool:
        api_id = prop_id_to_api_id(prop_id)
        body = {api_id: {ID: api_id, VALUE: value}}
        try:
            await self._request("POST", PROP, body=body)
        except AlfenError as err:
            raise PropertyWriteError(
                f"Writing {api_id}={value!r} to {self._host} failed: {err}"
            ) from err
        _LOGGER.debug("Wrote %s=%s to %s", api_id, value, self._host)
        return True

    def _reject(self, name: str, value: Any) -> bool:
        _LOGGER.warning("Refusing to set %s to out of range value %r", name, value)
        return False

    async def set_current_limit(self, amps: float, socket: SocketIndex = 1) -> bool:
        if not _in_range(amps, CURRENT_LIMIT_MIN, CURRENT_LIMIT_MAX):
            return self._reject("current limit", amps)
        prop_id = for_socket(ALFEN_PROPS.socket_base.current_limit, socket)
        return await self._set_property(prop_id, amps)

    async def set_charge_type(self, charge_type: int | str) -> bool:
        code = _resolve_option(charge_type, CHARGE_TYPES)
        if code is None:
            return self._reject("charge type", charge_type)
        return await self._set_property(ALFEN_PROPS.solar.charge_type, code)

    async def set_green_share_percentage(self, percentage: float) -> bool:
        if not _in_range(percentage, GREEN_SHARE_MIN, GREEN_SHARE_MAX):
            return self._reject("green share", percentage)
        return await self._set_property(ALFEN_PROPS.solar.green_share, percentage)

    async def set_comfort_charge_level(self, watts: float) -> bool:
        if not _in_range(watts, COMFORT_LEVEL_MIN, COMFORT_LEVEL_MAX):
            return self._reject("comfort charge level", watts)
        return await self._set_property(ALFEN_PROPS.solar.comfort_charge_level, watts)

    async def set_auth_mode(self, auth_mode: int | str) -> bool:
        code = _resolve_option(auth_mode, AUTH_MODES)
        if code is None:
            return self._reject("auth mode", auth_mode)
        return await self._set_property(ALFEN_PROPS.general.auth_mode, code)

    async def reboot(self) -> bool:
        await self._request("POST", CMD, body={PARAM_COMMAND: COMMAND_REBOOT})
        _LOGGER.debug("Reboot requested for %s", self._host)
        return True
