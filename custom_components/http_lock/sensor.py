"""Sensor platform for the HTTP lock integration.

This module exposes a single diagnostic sensor per lock. Its state is the
reported *target* state of the lock, the counterpart of the lock entity's
current state. The attributes carry what is useful when an automation did not
behave as expected:

- Current and in-flight target state
- The armed follow-up timer (auto-lock or reset) and its remaining time
- The last request failure
- A short log of recent requests, timer events and state changes
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
)
from homeassistant.const import EntityCategory
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .lock import lock_device_info
from .lock_coordinator import HTTPLockCoordinator
from .state_machine import STATE_SECURED, STATE_UNSECURED

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

    from . import HTTPLockConfigEntry

SENSOR_DESCRIPTION = SensorEntityDescription(
    key="target_state",
    name="Target state",
    icon="mdi:lock-clock",
    device_class=SensorDeviceClass.ENUM,
    options=[STATE_SECURED, STATE_UNSECURED],
    entity_category=EntityCategory.DIAGNOSTIC,
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: HTTPLockConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up sensor entities."""
    async_add_entities(
        [
            HTTPLockTargetStateSensor(
                coordinator=entry.runtime_data,
                entity_description=SENSOR_DESCRIPTION,
            ),
        ]
    )


class HTTPLockTargetStateSensor(CoordinatorEntity[HTTPLockCoordinator], SensorEntity):
    """Diagnostic sensor reporting the lock target state and pending timers."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: HTTPLockCoordinator,
        entity_description: SensorEntityDescription,
    ) -> None:
        """Initialize the diagnostic sensor."""
        super().__init__(coordinator)
        self.entity_description = entity_description
        self._attr_unique_id = (
            f"{coordinator.config_entry.entry_id}_{entity_description.key}"
        )
        self._attr_device_info = lock_device_info(coordinator)

    @property
    def native_value(self) -> str:
        """Return the target of a request in flight, else the reported target."""
        return self.coordinator.pending_target or self.coordinator.target_state

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return diagnostic data about the lock automation."""
        diagnostic_data = self.coordinator.get_diagnostic_data()

        return {
            "current_state": diagnostic_data.get("current_state"),
            "previous_state": diagnostic_data.get("previous_state"),
            "time_in_state": diagnostic_data.get("time_in_state"),
            "pending_target": diagnostic_data.get("pending_target"),
            "pending_timer": diagnostic_data.get("pending_timer"),
            "timer_remaining": diagnostic_data.get("timer_remaining"),
            "timers": diagnostic_data.get("timers", {}),
            "last_error": diagnostic_data.get("last_error"),
            "last_transition_time": diagnostic_data.get("last_transition_time"),
            "recent_events": diagnostic_data.get("recent_events", []),
        }
