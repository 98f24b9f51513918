"""Lock coordinator for the HTTP lock integration.

The coordinator owns the reported state of one lock, turns target state
requests into HTTP actions and arms the follow-up timers (auto-lock or state
reset) after a successful unlock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_NAME, CONF_PASSWORD, CONF_TIMEOUT, CONF_USERNAME
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator
from homeassistant.util import dt as dt_util

from .const import (
    CONF_AUTO_LOCK,
    CONF_AUTO_LOCK_DELAY,
    CONF_CLOSE_BODY,
    CONF_CLOSE_HEADERS,
    CONF_CLOSE_URL,
    CONF_FIRMWARE,
    CONF_HTTP_METHOD,
    CONF_MANUFACTURER,
    CONF_MODEL,
    CONF_OPEN_BODY,
    CONF_OPEN_HEADERS,
    CONF_OPEN_URL,
    CONF_RESET_LOCK,
    CONF_RESET_LOCK_TIME,
    CONF_SERIAL,
    DEFAULT_AUTO_LOCK,
    DEFAULT_AUTO_LOCK_DELAY,
    DEFAULT_FIRMWARE,
    DEFAULT_HTTP_METHOD,
    DEFAULT_MANUFACTURER,
    DEFAULT_MODEL,
    DEFAULT_RESET_LOCK,
    DEFAULT_RESET_LOCK_TIME,
    DEFAULT_SERIAL,
    DEFAULT_TIMEOUT,
    DOMAIN,
    TIMER_AUTO_LOCK,
    TIMER_RESET,
)
from .http_client import ConfigError, HTTPActionExecutor, HTTPLockError
from .state_machine import (
    STATE_SECURED,
    LockStateMachine,
    StateTransitionEvent,
)
from .timer_manager import TimerManager, TimerType

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """Request descriptor for one lock direction."""

    url: str
    body: Any = ""
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LockConfig:
    """Immutable per-device configuration."""

    name: str
    open_endpoint: Endpoint | None = None
    close_endpoint: Endpoint | None = None
    username: str | None = None
    password: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    http_method: str = DEFAULT_HTTP_METHOD
    auto_lock: bool = DEFAULT_AUTO_LOCK
    auto_lock_delay: float = DEFAULT_AUTO_LOCK_DELAY
    reset_lock: bool = DEFAULT_RESET_LOCK
    reset_lock_delay: float = DEFAULT_RESET_LOCK_TIME
    manufacturer: str = DEFAULT_MANUFACTURER
    model: str = DEFAULT_MODEL
    serial: str = DEFAULT_SERIAL
    firmware: str = DEFAULT_FIRMWARE

    @classmethod
    def from_entry_data(cls, data: dict[str, Any]) -> LockConfig:
        """Build a config from config entry data, filling in defaults."""

        def _endpoint(url_key: str, body_key: str, headers_key: str) -> Endpoint | None:
            url = data.get(url_key)
            if not url:
                return None
            return Endpoint(
                url=url,
                body=data.get(body_key) or "",
                headers=dict(data.get(headers_key) or {}),
            )

        return cls(
            name=data[CONF_NAME],
            open_endpoint=_endpoint(CONF_OPEN_URL, CONF_OPEN_BODY, CONF_OPEN_HEADERS),
            close_endpoint=_endpoint(
                CONF_CLOSE_URL, CONF_CLOSE_BODY, CONF_CLOSE_HEADERS
            ),
            username=data.get(CONF_USERNAME) or None,
            password=data.get(CONF_PASSWORD) or None,
            timeout=data.get(CONF_TIMEOUT) or DEFAULT_TIMEOUT,
            http_method=(data.get(CONF_HTTP_METHOD) or DEFAULT_HTTP_METHOD).upper(),
            auto_lock=data.get(CONF_AUTO_LOCK, DEFAULT_AUTO_LOCK),
            auto_lock_delay=data.get(CONF_AUTO_LOCK_DELAY) or DEFAULT_AUTO_LOCK_DELAY,
            reset_lock=data.get(CONF_RESET_LOCK, DEFAULT_RESET_LOCK),
            reset_lock_delay=data.get(CONF_RESET_LOCK_TIME)
            or DEFAULT_RESET_LOCK_TIME,
            manufacturer=data.get(CONF_MANUFACTURER) or DEFAULT_MANUFACTURER,
            model=data.get(CONF_MODEL) or DEFAULT_MODEL,
            serial=data.get(CONF_SERIAL) or DEFAULT_SERIAL,
            firmware=data.get(CONF_FIRMWARE) or DEFAULT_FIRMWARE,
        )

    def endpoint_for(self, target: str) -> Endpoint | None:
        """Return the endpoint that drives the lock towards target."""
        if target == STATE_SECURED:
            return self.close_endpoint
        return self.open_endpoint


class HTTPLockCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Drive one HTTP lock and push its reported state to entities."""

    def __init__(self, hass: HomeAssistant, config_entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            name=f"{DOMAIN}_{config_entry.entry_id}",
            update_interval=None,
            config_entry=config_entry,
        )

        self.config_entry = config_entry
        self.lock_config = LockConfig.from_entry_data(dict(config_entry.data))

        self.state_machine = LockStateMachine(initial_state=STATE_SECURED)
        self.timer_manager = TimerManager(hass)
        self.timer_manager.set_default_duration(
            TimerType.AUTO_LOCK, self.lock_config.auto_lock_delay
        )
        self.timer_manager.set_default_duration(
            TimerType.RESET, self.lock_config.reset_lock_delay
        )
        self.executor = HTTPActionExecutor(
            async_get_clientsession(hass),
            timeout=self.lock_config.timeout,
            username=self.lock_config.username,
            password=self.lock_config.password,
        )

        self.state_machine.on_transition(self._on_transition)

        # Target of the most recent request still waiting for a response
        self._pending_target: str | None = None

        # Event tracking for diagnostics
        self._events: list[dict[str, Any]] = []
        self._max_events = 50
        self._last_error: str | None = None
        self._last_transition_time: datetime | None = None
        # Set once the entry is unloaded; late responses must not arm timers
        self._shut_down = False
        self.data = {}

        _LOGGER.info(
            "Lock device '%s' initialized using %s method",
            self.lock_config.name,
            self.lock_config.http_method,
        )

    # ========================================================================
    # Transitions
    # ========================================================================

    async def async_request_transition(self, target: str) -> None:
        """Drive the lock towards target through its HTTP endpoint.

        Returns normally once the device confirmed the action; raises an
        HTTPLockError otherwise, leaving the reported state untouched.
        """
        action = "secure" if target == STATE_SECURED else "unlock"
        _LOGGER.info(
            "Processing lock state change request for '%s': %s",
            self.lock_config.name,
            action.upper(),
        )

        endpoint = self.lock_config.endpoint_for(target)
        if endpoint is None:
            err = ConfigError(f"No endpoint configured for {action} operation")
            _LOGGER.error("%s", err)
            self._last_error = str(err)
            self._log_event("request_rejected", {"target": target, "error": str(err)})
            raise err

        # A new command always preempts any scheduled follow-up
        self.timer_manager.cancel_all_timers()

        self._pending_target = target
        self._update_data()
        self._log_event("request_sent", {"target": target, "url": endpoint.url})

        try:
            await self.executor.async_execute(
                endpoint.url,
                endpoint.headers,
                endpoint.body,
                self.lock_config.http_method,
            )
        except HTTPLockError as err:
            _LOGGER.debug(
                "Lock operation for '%s' failed: %s", self.lock_config.name, err
            )
            self._last_error = str(err)
            self._log_event("request_failed", {"target": target, "error": str(err)})
            raise
        finally:
            if self._pending_target == target:
                self._pending_target = None
            self._update_data()

        self._last_error = None
        if target == STATE_SECURED:
            self.state_machine.transition(StateTransitionEvent.LOCK_CONFIRMED)
            _LOGGER.info("Lock mechanism '%s' secured successfully", self.lock_config.name)
        else:
            self.state_machine.transition(StateTransitionEvent.UNLOCK_CONFIRMED)
            _LOGGER.info(
                "Lock mechanism '%s' unlocked successfully", self.lock_config.name
            )
            if self._shut_down:
                _LOGGER.debug(
                    "Lock '%s' was unloaded during the request, no follow-up armed",
                    self.lock_config.name,
                )
            elif self.lock_config.auto_lock:
                self._arm_auto_lock()
            elif self.lock_config.reset_lock:
                self._arm_reset()

        self._update_data()

    def _arm_auto_lock(self) -> None:
        """Schedule a new close request after the auto-lock delay."""
        _LOGGER.info(
            "Automatic lock scheduled to execute in %s seconds",
            self.lock_config.auto_lock_delay,
        )
        self.timer_manager.start_timer(
            TIMER_AUTO_LOCK, TimerType.AUTO_LOCK, self._async_auto_lock_expired
        )
        self._log_event(
            "timer_armed",
            {"timer": TIMER_AUTO_LOCK, "delay": self.lock_config.auto_lock_delay},
        )

    def _arm_reset(self) -> None:
        """Schedule a local resync of the reported state to secured."""
        _LOGGER.info(
            "Lock state will reset to secured in %s seconds",
            self.lock_config.reset_lock_delay,
        )
        self.timer_manager.start_timer(
            TIMER_RESET, TimerType.RESET, self._reset_expired
        )
        self._log_event(
            "timer_armed",
            {"timer": TIMER_RESET, "delay": self.lock_config.reset_lock_delay},
        )

    async def _async_auto_lock_expired(self, timer_id: str | None = None) -> None:
        """Send the automatic close request.

        The target state sensor shows secured as soon as the request goes out,
        through the pending target; the reported target itself only moves
        once the device confirms, unlike devices that flip it on expiry.
        """
        if self._shut_down:
            return
        _LOGGER.info("Executing automatic lock sequence for '%s'", self.lock_config.name)
        self._log_event("timer_fired", {"timer": TIMER_AUTO_LOCK})
        try:
            await self.async_request_transition(STATE_SECURED)
        except HTTPLockError as err:
            # Not retried and not re-armed; the next command starts over
            _LOGGER.error(
                "Automatic lock of '%s' failed: %s", self.lock_config.name, err
            )

    def _reset_expired(self, timer_id: str | None = None) -> None:
        """Bring the reported state back to secured without a request."""
        if self._shut_down:
            return
        _LOGGER.info(
            "Resetting lock state of '%s' to secured position", self.lock_config.name
        )
        self._log_event("timer_fired", {"timer": TIMER_RESET})
        self.state_machine.transition(StateTransitionEvent.RESET_EXPIRED)
        self._update_data()

    def _on_transition(
        self, old_state: str, new_state: str, event: StateTransitionEvent
    ) -> None:
        """Record state changes for diagnostics."""
        self._last_transition_time = dt_util.now()
        self._log_event(
            "state_changed",
            {"from": old_state, "to": new_state, "event": event.value},
        )

    # ========================================================================
    # Diagnostics
    # ========================================================================

    def _log_event(self, event_type: str, details: dict[str, Any]) -> None:
        """Log an event for diagnostics."""
        event = {
            "timestamp": dt_util.now().isoformat(),
            "type": event_type,
            **details,
        }
        self._events.append(event)

        # Keep only last N events
        if len(self._events) > self._max_events:
            self._events.pop(0)

        _LOGGER.debug("Event logged: %s - %s", event_type, details)

    def get_diagnostic_data(self) -> dict[str, Any]:
        """Get diagnostic data for the sensor."""
        timer_info = self.timer_manager.get_info()
        active = self.timer_manager.get_active_timers()
        state_info = self.state_machine.get_info()

        return {
            "current_state": state_info["current_state"],
            "target_state": state_info["target_state"],
            "previous_state": state_info["previous_state"],
            "time_in_state": round(state_info["time_in_state"], 1),
            "pending_target": self._pending_target,
            "pending_timer": self.pending_timer.value if self.pending_timer else None,
            "timer_remaining": active[0].remaining_seconds if active else None,
            "timers": timer_info.get("timers", {}),
            "last_error": self._last_error,
            "last_transition_time": (
                self._last_transition_time.isoformat()
                if self._last_transition_time
                else None
            ),
            "recent_events": list(self._events[-10:]),
        }

    def _update_data(self) -> None:
        """Update coordinator data and notify entities."""
        self.data = {
            "current_state": self.state_machine.current_state,
            "target_state": self.state_machine.target_state,
            "pending_target": self._pending_target,
            "pending_timer": self.pending_timer.value if self.pending_timer else None,
        }

        self.async_update_listeners()

    # ========================================================================
    # Cleanup
    # ========================================================================

    def async_cleanup(self) -> None:
        """Cancel pending follow-ups and refuse to arm new ones."""
        self._shut_down = True
        self.timer_manager.cancel_all_timers()

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def current_state(self) -> str:
        """Return the reported current state."""
        return self.state_machine.current_state

    @property
    def target_state(self) -> str:
        """Return the reported target state."""
        return self.state_machine.target_state

    @property
    def pending_target(self) -> str | None:
        """Return the target of a request still in flight."""
        return self._pending_target

    @property
    def pending_timer(self) -> TimerType | None:
        """Return the type of the armed follow-up timer, if any."""
        active = self.timer_manager.get_active_timers()
        return active[0].timer_type if active else None

    @property
    def last_error(self) -> str | None:
        """Return the last failure message, cleared by a success."""
        return self._last_error
