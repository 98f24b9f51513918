"""State machine for the HTTP lock.

The machine holds the *reported* lock state: what Home Assistant believes the
lock is doing, which is not necessarily the physical position. Only confirmed
outcomes move it; a failed request never touches it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from homeassistant.util import dt as dt_util

_LOGGER = logging.getLogger(__name__)

STATE_SECURED = "secured"
STATE_UNSECURED = "unsecured"


class StateTransitionEvent(Enum):
    """Events that can move the reported lock state."""

    LOCK_CONFIRMED = "lock_confirmed"
    UNLOCK_CONFIRMED = "unlock_confirmed"
    RESET_EXPIRED = "reset_expired"


@dataclass
class StateTransition:
    """Represents a state transition."""

    from_state: str
    to_state: str
    event: StateTransitionEvent


__all__ = [
    "STATE_SECURED",
    "STATE_UNSECURED",
    "LockStateMachine",
    "StateTransition",
    "StateTransitionEvent",
]


class LockStateMachine:
    """Reported current/target state of one lock.

    Both states start out secured. The target is only advanced together with
    the current state, once the device has confirmed the action.
    """

    def __init__(self, initial_state: str = STATE_SECURED):
        """Initialize the state machine."""
        self._current_state = initial_state
        self._target_state = initial_state
        self._previous_state: str | None = None
        self._state_entered_at: datetime = dt_util.now()
        self._transitions: dict[
            tuple[str, StateTransitionEvent], StateTransition
        ] = {}
        self._transition_callbacks: list[
            Callable[[str, str, StateTransitionEvent], None]
        ] = []

        self._define_transitions()

    def _define_transitions(self) -> None:
        """Define valid state transitions."""
        for state in (STATE_SECURED, STATE_UNSECURED):
            self._add_transition(
                state, StateTransitionEvent.LOCK_CONFIRMED, STATE_SECURED
            )
            self._add_transition(
                state, StateTransitionEvent.UNLOCK_CONFIRMED, STATE_UNSECURED
            )
            # Resync is local only and safe to apply when already secured
            self._add_transition(
                state, StateTransitionEvent.RESET_EXPIRED, STATE_SECURED
            )

    def _add_transition(
        self,
        from_state: str,
        event: StateTransitionEvent,
        to_state: str,
    ) -> None:
        """Add a valid state transition."""
        self._transitions[(from_state, event)] = StateTransition(
            from_state, to_state, event
        )

    def transition(self, event: StateTransitionEvent) -> bool:
        """Apply an event to the reported state.

        Returns:
            True if the current state changed, False otherwise
        """
        trans = self._transitions.get((self._current_state, event))
        if trans is None:
            _LOGGER.debug(
                "No transition defined for state=%s, event=%s",
                self._current_state,
                event.value,
            )
            return False

        self._target_state = trans.to_state
        old_state = self._current_state
        new_state = trans.to_state
        if old_state == new_state:
            _LOGGER.debug(
                "Lock already %s, ignoring %s", old_state, event.value
            )
            return False

        _LOGGER.debug(
            "State transition: %s -> %s (event: %s)",
            old_state,
            new_state,
            event.value,
        )

        self._previous_state = old_state
        self._current_state = new_state
        self._state_entered_at = dt_util.now()

        for callback in self._transition_callbacks:
            try:
                callback(old_state, new_state, event)
            except Exception as err:  # noqa: BLE001
                _LOGGER.error("Error in transition callback: %s", err)

        return True

    def on_transition(
        self, callback: Callable[[str, str, StateTransitionEvent], None]
    ) -> None:
        """Register a callback to be called on any state change."""
        self._transition_callbacks.append(callback)

    @property
    def current_state(self) -> str:
        """Get the reported current state."""
        return self._current_state

    @property
    def target_state(self) -> str:
        """Get the reported target state."""
        return self._target_state

    @property
    def time_in_current_state(self) -> float:
        """Get seconds spent in current state."""
        return (dt_util.now() - self._state_entered_at).total_seconds()

    def get_info(self) -> dict[str, Any]:
        """Get state machine diagnostic info."""
        return {
            "current_state": self._current_state,
            "target_state": self._target_state,
            "previous_state": self._previous_state,
            "state_entered_at": self._state_entered_at.isoformat(),
            "time_in_state": self.time_in_current_state,
        }
