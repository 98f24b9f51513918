"""Lock platform for the HTTP lock integration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.components.lock import LockEntity
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .lock_coordinator import HTTPLockCoordinator
from .state_machine import STATE_SECURED, STATE_UNSECURED

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

    from . import HTTPLockConfigEntry

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: HTTPLockConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up the HTTP lock entity."""
    async_add_entities([HTTPLockEntity(entry.runtime_data)])


def lock_device_info(coordinator: HTTPLockCoordinator) -> DeviceInfo:
    """Build the device registry entry shared by all entities of one lock."""
    config = coordinator.lock_config
    return DeviceInfo(
        identifiers={(DOMAIN, coordinator.config_entry.entry_id)},
        name=config.name,
        manufacturer=config.manufacturer,
        model=config.model,
        serial_number=config.serial,
        sw_version=config.firmware,
    )


class HTTPLockEntity(CoordinatorEntity[HTTPLockCoordinator], LockEntity):
    """Representation of a lock driven by HTTP requests."""

    _attr_has_entity_name = True
    _attr_name = None  # Use device name

    def __init__(self, coordinator: HTTPLockCoordinator) -> None:
        """Initialize the lock."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{coordinator.config_entry.entry_id}_lock"
        self._attr_device_info = lock_device_info(coordinator)

    @property
    def is_locked(self) -> bool:
        """Return true if the lock is reported as secured."""
        return self.coordinator.current_state == STATE_SECURED

    @property
    def is_locking(self) -> bool:
        """Return true while a secure request is in flight."""
        return self.coordinator.pending_target == STATE_SECURED

    @property
    def is_unlocking(self) -> bool:
        """Return true while an unlock request is in flight."""
        return self.coordinator.pending_target == STATE_UNSECURED

    async def async_lock(self, **kwargs: Any) -> None:
        """Lock the device."""
        await self.coordinator.async_request_transition(STATE_SECURED)

    async def async_unlock(self, **kwargs: Any) -> None:
        """Unlock the device."""
        await self.coordinator.async_request_transition(STATE_UNSECURED)
