"""Tests for timer_manager.py."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

from homeassistant.core import HomeAssistant

from custom_components.http_lock.timer_manager import Timer, TimerManager, TimerType


class TestTimer:
    """Test Timer class."""

    async def test_timer_creation(self, hass: HomeAssistant):
        """Test timer creation."""
        callback = AsyncMock()
        timer = Timer(TimerType.AUTO_LOCK, 10, callback, hass, "auto_lock")

        assert timer.timer_type == TimerType.AUTO_LOCK
        assert timer.duration == 10
        assert timer.name == "auto_lock"
        assert timer.is_active is False

    async def test_timer_expiry(self, hass: HomeAssistant):
        """Test timer expiry calls callback once and clears itself."""
        callback = AsyncMock()
        timer = Timer(TimerType.AUTO_LOCK, 0.1, callback, hass, "auto_lock")

        timer.start()
        await asyncio.sleep(0.2)
        await hass.async_block_till_done()

        callback.assert_awaited_once_with("auto_lock")
        assert timer.is_active is False

    async def test_sync_callback(self, hass: HomeAssistant):
        """Test plain callables are supported as well as coroutines."""
        callback = MagicMock(return_value=None)
        timer = Timer(TimerType.RESET, 0.1, callback, hass, "reset")

        timer.start()
        await asyncio.sleep(0.2)
        await hass.async_block_till_done()

        callback.assert_called_once_with("reset")

    async def test_timer_cancel(self, hass: HomeAssistant):
        """Test a cancelled timer never fires."""
        callback = AsyncMock()
        timer = Timer(TimerType.AUTO_LOCK, 0.1, callback, hass)

        timer.start()
        timer.cancel()
        assert timer.is_active is False

        await asyncio.sleep(0.2)
        await hass.async_block_till_done()
        callback.assert_not_called()

    async def test_cancel_is_noop_when_unarmed_or_fired(self, hass: HomeAssistant):
        """Test cancel before start and after expiry are harmless."""
        callback = AsyncMock()
        timer = Timer(TimerType.RESET, 0.1, callback, hass)

        timer.cancel()

        timer.start()
        await asyncio.sleep(0.2)
        await hass.async_block_till_done()
        timer.cancel()

        callback.assert_awaited_once()

    async def test_callback_error_is_logged(self, hass: HomeAssistant, caplog):
        """Test an exception in the callback does not escape the timer."""
        callback = AsyncMock(side_effect=RuntimeError("boom"))
        timer = Timer(TimerType.AUTO_LOCK, 0.1, callback, hass, "auto_lock")

        timer.start()
        await asyncio.sleep(0.2)
        await hass.async_block_till_done()

        assert "Error in timer callback for 'auto_lock'" in caplog.text

    async def test_timer_remaining_seconds(self, hass: HomeAssistant):
        """Test remaining_seconds property."""
        timer = Timer(TimerType.AUTO_LOCK, 10, AsyncMock(), hass)

        assert timer.remaining_seconds == 0

        timer.start()
        assert 0 < timer.remaining_seconds <= 10

        timer.cancel()
        assert timer.remaining_seconds == 0

    async def test_timer_get_info(self, hass: HomeAssistant):
        """Test timer get_info method."""
        timer = Timer(TimerType.RESET, 10, AsyncMock(), hass, "reset")

        info = timer.get_info()
        assert info["name"] == "reset"
        assert info["type"] == "reset"
        assert info["duration"] == 10
        assert info["is_active"] is False


class TestTimerManager:
    """Test TimerManager class."""

    async def test_default_durations(self, hass: HomeAssistant):
        """Test timers fall back to the configured default duration."""
        manager = TimerManager(hass)
        manager.set_default_duration(TimerType.AUTO_LOCK, 2)

        timer = manager.create_timer(TimerType.AUTO_LOCK, AsyncMock())
        assert timer.duration == 2
        assert timer.name == "auto_lock"

        timer = manager.create_timer(TimerType.RESET, AsyncMock())
        assert timer.duration == 5

    async def test_start_and_cancel_timer(self, hass: HomeAssistant):
        """Test starting and cancelling a named timer."""
        manager = TimerManager(hass)

        timer = manager.start_timer("auto_lock", TimerType.AUTO_LOCK, AsyncMock(), 10)
        assert timer.is_active is True
        assert manager.get_active_timers() == [timer]

        assert manager.cancel_timer("auto_lock") is True
        assert timer.is_active is False
        assert manager.get_info()["total_timers"] == 0

    async def test_cancel_nonexistent_timer(self, hass: HomeAssistant):
        """Test canceling a timer that was never armed."""
        manager = TimerManager(hass)
        assert manager.cancel_timer("nonexistent") is False

    async def test_cancel_all_timers(self, hass: HomeAssistant):
        """Test canceling all timers."""
        manager = TimerManager(hass)
        callback = AsyncMock()

        manager.start_timer("auto_lock", TimerType.AUTO_LOCK, callback, 10)
        manager.start_timer("reset", TimerType.RESET, callback, 20)

        assert len(manager.get_active_timers()) == 2
        assert manager.cancel_all_timers() == 2
        assert manager.get_active_timers() == []

        await asyncio.sleep(0)
        callback.assert_not_called()

    async def test_replace_existing_timer(self, hass: HomeAssistant):
        """Test adding a timer under an existing name cancels the old one."""
        manager = TimerManager(hass)

        first = manager.start_timer("auto_lock", TimerType.AUTO_LOCK, AsyncMock(), 10)
        second = manager.start_timer("auto_lock", TimerType.AUTO_LOCK, AsyncMock(), 10)

        assert first.is_active is False
        assert second.is_active is True
        assert manager.get_active_timers() == [second]

        manager.cancel_all_timers()

    async def test_get_info(self, hass: HomeAssistant):
        """Test get_info method."""
        manager = TimerManager(hass)
        manager.start_timer("reset", TimerType.RESET, AsyncMock(), 10)

        info = manager.get_info()
        assert info["total_timers"] == 1
        assert info["active_timers"] == 1
        assert info["default_durations"] == {"auto_lock": 5, "reset": 5}
        assert info["timers"]["reset"]["type"] == "reset"

        manager.cancel_all_timers()
