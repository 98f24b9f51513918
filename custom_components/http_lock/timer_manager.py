"""Timers for the HTTP lock, scheduled on the Home Assistant event loop."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable

from homeassistant.core import HomeAssistant, callback
from homeassistant.util import dt as dt_util

from .base_timer_manager import BaseTimer, BaseTimerManager, TimerType

__all__ = [
    "Timer",
    "TimerManager",
    "TimerType",
]


class Timer(BaseTimer):
    """Follow-up timer backed by loop.call_later."""

    def __init__(
        self,
        timer_type: TimerType,
        duration: float,
        callback: Callable,
        hass: HomeAssistant,
        name: str | None = None,
    ):
        """Initialize the timer for the given Home Assistant instance."""
        super().__init__(timer_type, duration, callback, name)
        self.hass = hass
        self._handle: asyncio.TimerHandle | None = None

    def _now(self) -> datetime:
        return dt_util.utcnow()

    def _schedule(self) -> None:
        self._handle = self.hass.loop.call_later(self.duration, self._fire)

    def _unschedule(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @callback
    def _fire(self) -> None:
        self._handle = None
        self.hass.async_create_task(self._async_expire())


class TimerManager(BaseTimerManager):
    """Timer manager creating Home Assistant loop timers."""

    def __init__(self, hass: HomeAssistant):
        """Initialize the timer manager."""
        super().__init__()
        self.hass = hass

    def create_timer(
        self,
        timer_type: TimerType,
        callback: Callable,
        duration: float | None = None,
        name: str | None = None,
    ) -> Timer:
        """Create an unarmed Home Assistant timer."""
        if duration is None:
            duration = self.duration_for(timer_type)
        return Timer(timer_type, duration, callback, self.hass, name)
