from __future__ import annotations

from homeassistant.components.select import SelectEntity
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity import EntityCategory
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .capabilities import AUTH_MODES, CHARGE_TYPES, Cap
from .coordinator import AlfenCoordinator
from .entity import AlfenBaseEntity
from .runtime_data import AlfenConfigEntry, get_runtime_data

PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: AlfenConfigEntry,
    async_add_entities: AddEntitiesCallback,
):
    coord = get_runtime_data(entry).coordinator
    entities: list[SelectEntity] = [AuthModeSelect(coord)]
    if coord.supports_solar:
        entities.append(ChargeTypeSelect(coord))
    async_add_entities(entities, update_before_add=False)


class _OptionSelect(AlfenBaseEntity, SelectEntity):
    """Select over a ``code -> option`` table; the data holds the code as text."""

    _attr_entity_category = EntityCategory.CONFIG
    _codes: dict[int, str] = {}

    def __init__(self, coord: AlfenCoordinator, key: str) -> None:
        super().__init__(coord, key)
        self._attr_options = list(self._codes.values())

    @property
    def current_option(self) -> str | None:
        value = self.capability_value
        if value is None:
            return None
        try:
            return self._codes.get(int(float(value)))
        except (TypeError, ValueError):
            return None


class ChargeTypeSelect(_OptionSelect):
    _attr_translation_key = "charge_type"
    _codes = CHARGE_TYPES

    def __init__(self, coord: AlfenCoordinator) -> None:
        super().__init__(coord, Cap.CHARGE_TYPE)

    async def async_select_option(self, option: str) -> None:
        await self._coord.async_set_charge_type(option)


class AuthModeSelect(_OptionSelect):
    _attr_translation_key = "auth_mode"
    _codes = AUTH_MODES

    def __init__(self, coord: AlfenCoordinator) -> None:
        super().__init__(coord, Cap.AUTH_MODE)

    async def async_select_option(self, option: str) -> None:
        await self._coord.async_set_auth_mode(option)
