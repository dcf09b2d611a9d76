from __future__ import annotations

from typing import Any

from homeassistant.helpers.entity import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER
from .coordinator import AlfenCoordinator


def device_key(coordinator: AlfenCoordinator) -> str:
    details = coordinator.details
    ident = (details.identity if details else None) or coordinator.host
    return f"{ident}_{coordinator.socket}"


class AlfenBaseEntity(CoordinatorEntity[AlfenCoordinator]):
    """Entity backed by one capability of the coordinator data."""

    _attr_has_entity_name = True

    def __init__(self, coordinator: AlfenCoordinator, key: str) -> None:
        super().__init__(coordinator)
        self._coord = coordinator
        self._key = key
        self._attr_unique_id = f"{DOMAIN}_{device_key(coordinator)}_{key}"

    @property
    def available(self) -> bool:  # type: ignore[override]
        return super().available and self._key in (self._coord.data or {})

    @property
    def capability_value(self) -> Any:
        return (self._coord.data or {}).get(self._key)

    @property
    def device_info(self) -> DeviceInfo:
        details = self._coord.details
        model = details.model if details else None
        name = f"{MANUFACTURER} {model}" if model else f"{MANUFACTURER} charger"
        if self._coord.socket == 2:
            name = f"{name} socket 2"
        info_kwargs: dict[str, object] = {
            "identifiers": {(DOMAIN, device_key(self._coord))},
            "manufacturer": MANUFACTURER,
            "name": name,
            "configuration_url": f"https://{self._coord.host}",
        }
        if model:
            info_kwargs["model"] = model
        if details and details.firmware_version:
            info_kwargs["sw_version"] = details.firmware_version
        if details and details.identity:
            info_kwargs["serial_number"] = details.identity
        return DeviceInfo(**info_kwargs)
