"""Base timer management for the HTTP lock.

After a successful unlock the lock arms at most one follow-up: an auto-lock,
which sends a new close request, or a reset, which only flips the reported
state back to secured. This module keeps the arming and bookkeeping free of
Home Assistant so the scheduling backend can be swapped (see timer_manager.py).
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable

from .const import DEFAULT_AUTO_LOCK_DELAY, DEFAULT_RESET_LOCK_TIME

_LOGGER = logging.getLogger(__name__)


class TimerType(Enum):
    """Follow-up actions that can be scheduled after an unlock."""

    AUTO_LOCK = "auto_lock"
    RESET = "reset"


class BaseTimer(ABC):
    """A one-shot follow-up timer.

    Subclasses provide the clock and hook the expiry into an event loop.
    """

    def __init__(
        self,
        timer_type: TimerType,
        duration: float,
        callback: Callable,
        name: str | None = None,
    ):
        """Initialize an unarmed timer.

        Args:
            timer_type: Follow-up this timer schedules
            duration: Delay in seconds between arming and expiry
            callback: Called with the timer name on expiry, may be a coroutine
            name: Key under which the manager tracks the timer
        """
        self.timer_type = timer_type
        self.duration = duration
        self.callback = callback
        self.name = name or timer_type.value

        self._armed_at: datetime | None = None
        self._due_at: datetime | None = None

    @abstractmethod
    def _schedule(self) -> None:
        """Arrange for _async_expire to run once the duration has passed."""

    @abstractmethod
    def _unschedule(self) -> None:
        """Drop the pending expiry, if any."""

    @abstractmethod
    def _now(self) -> datetime:
        """Return the current time."""

    def start(self) -> None:
        """Arm the timer, counting from now even if it was already armed."""
        if self.is_active:
            self._unschedule()

        self._armed_at = self._now()
        self._due_at = self._armed_at + timedelta(seconds=self.duration)
        self._schedule()

        _LOGGER.debug(
            "Armed %s timer '%s' for %ss (due %s)",
            self.timer_type.value,
            self.name,
            self.duration,
            self._due_at.isoformat(),
        )

    def cancel(self) -> None:
        """Disarm the timer. Does nothing when it is not armed."""
        if not self.is_active:
            return

        self._unschedule()
        self._armed_at = None
        self._due_at = None
        _LOGGER.debug("Disarmed %s timer '%s'", self.timer_type.value, self.name)

    async def _async_expire(self) -> None:
        """Run the callback for a timer that came due."""
        if not self.is_active:
            _LOGGER.debug("Ignoring expiry of disarmed timer '%s'", self.name)
            return

        # Disarmed first: the callback may arm a new follow-up itself
        self._armed_at = None
        self._due_at = None
        _LOGGER.debug("%s timer '%s' is due", self.timer_type.value, self.name)

        try:
            result = self.callback(self.name)
            if inspect.isawaitable(result):
                await result
        except Exception as err:  # noqa: BLE001
            _LOGGER.error("Error in timer callback for '%s': %s", self.name, err)

    @property
    def is_active(self) -> bool:
        """Return True while the timer is armed."""
        return self._due_at is not None

    @property
    def remaining_seconds(self) -> float:
        """Return seconds until expiry, 0 when disarmed."""
        if self._due_at is None:
            return 0
        return max(0.0, round((self._due_at - self._now()).total_seconds(), 1))

    def get_info(self) -> dict[str, Any]:
        """Return diagnostic info about the timer."""
        return {
            "name": self.name,
            "type": self.timer_type.value,
            "duration": self.duration,
            "is_active": self.is_active,
            "remaining_seconds": self.remaining_seconds,
            "armed_at": self._armed_at.isoformat() if self._armed_at else None,
            "due_at": self._due_at.isoformat() if self._due_at else None,
        }


class BaseTimerManager(ABC):
    """Named follow-up timers of one lock.

    The coordinator disarms everything before each request, so in practice at
    most one timer is armed at a time.
    """

    def __init__(self):
        """Initialize with the default delay of each follow-up."""
        self._timers: dict[str, BaseTimer] = {}
        self._default_durations: dict[TimerType, float] = {
            TimerType.AUTO_LOCK: DEFAULT_AUTO_LOCK_DELAY,
            TimerType.RESET: DEFAULT_RESET_LOCK_TIME,
        }

    @abstractmethod
    def create_timer(
        self,
        timer_type: TimerType,
        callback: Callable,
        duration: float | None = None,
        name: str | None = None,
    ) -> BaseTimer:
        """Build an unarmed timer; duration falls back to the type's default."""

    def duration_for(self, timer_type: TimerType) -> float:
        """Return the default delay for a follow-up type."""
        return self._default_durations[timer_type]

    def set_default_duration(self, timer_type: TimerType, duration: float) -> None:
        """Change the default delay for a follow-up type."""
        self._default_durations[timer_type] = duration

    def start_timer(
        self,
        name: str,
        timer_type: TimerType,
        callback: Callable,
        duration: float | None = None,
    ) -> BaseTimer:
        """Arm a new timer under name, replacing the one already there."""
        self.cancel_timer(name)
        timer = self.create_timer(timer_type, callback, duration, name)
        self._timers[name] = timer
        timer.start()
        return timer

    def cancel_timer(self, name: str) -> bool:
        """Disarm and forget one timer. Returns False if name is unknown."""
        timer = self._timers.pop(name, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all_timers(self) -> int:
        """Disarm and forget every timer.

        Returns:
            How many timers were still armed
        """
        armed = self.get_active_timers()
        for timer in armed:
            timer.cancel()
        self._timers.clear()
        if armed:
            _LOGGER.debug("Disarmed %d pending follow-up(s)", len(armed))
        return len(armed)

    def get_active_timers(self) -> list[BaseTimer]:
        """Return the armed timers."""
        return [timer for timer in self._timers.values() if timer.is_active]

    def get_info(self) -> dict[str, Any]:
        """Return diagnostic info about all tracked timers."""
        return {
            "total_timers": len(self._timers),
            "active_timers": len(self.get_active_timers()),
            "default_durations": {
                timer_type.value: duration
                for timer_type, duration in self._default_durations.items()
            },
            "timers": {name: timer.get_info() for name, timer in self._timers.items()},
        }
