from __future__ import annotations

from typing import Any

from homeassistant.components.diagnostics import async_redact_data

from .const import CONF_PASSWORD, CONF_USERNAME

TO_REDACT = [CONF_PASSWORD, CONF_USERNAME, "Identity"]


async def async_get_config_entry_diagnostics(hass, entry) -> dict[str, Any]:
    diag: dict[str, Any] = {
        "entry_data": async_redact_data(dict(entry.data), TO_REDACT),
        "entry_options": dict(getattr(entry, "options", {}) or {}),
    }

    coord = getattr(getattr(entry, "runtime_data", None), "coordinator", None)
    if coord is None:
        return diag

    details = coord.details
    state = coord.client.session_state
    diag["coordinator"] = {
        "socket": coord.socket,
        "update_interval_seconds": (
            int(coord.update_interval.total_seconds())
            if coord.update_interval
            else None
        ),
        "last_update_success": coord.last_update_success,
        "last_success_utc": (
            coord.last_success_utc.isoformat() if coord.last_success_utc else None
        ),
        "last_failure_utc": (
            coord.last_failure_utc.isoformat() if coord.last_failure_utc else None
        ),
        "last_failure_reason": coord.last_failure_reason,
        "latency_ms": coord.latency_ms,
        "session_open": state.is_open,
        "session_refs": state.refcount,
    }
    if details is not None:
        diag["charger"] = {
            "model": details.model,
            "firmware_version": details.firmware_version,
            "number_of_sockets": details.sockets.number_of_sockets,
            "socket_type_1": details.sockets.socket_type_1.name,
            "socket_type_2": (
                details.sockets.socket_type_2.name
                if details.sockets.socket_type_2 is not None
                else None
            ),
            "info": async_redact_data(details.info, TO_REDACT),
        }
    diag["data"] = dict(coord.data or {})
    return diag
