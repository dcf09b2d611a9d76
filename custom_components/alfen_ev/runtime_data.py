from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntry

if TYPE_CHECKING:
    from .coordinator import AlfenCoordinator


@dataclass(slots=True)
class AlfenRuntimeData:
    """Runtime objects attached to a loaded config entry."""

    coordinator: AlfenCoordinator


type AlfenConfigEntry = ConfigEntry[AlfenRuntimeData]


def get_runtime_data(entry: ConfigEntry) -> AlfenRuntimeData:
    """Return runtime data for a loaded entry."""

    runtime_data = getattr(entry, "runtime_data", None)
    if not isinstance(runtime_data, AlfenRuntimeData):
        raise RuntimeError(f"Missing runtime data for entry {entry.entry_id}")
    return runtime_data
