"""Fixtures for HTTP lock integration tests."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from homeassistant.const import CONF_NAME
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.http_lock.const import (
    CONF_AUTO_LOCK,
    CONF_AUTO_LOCK_DELAY,
    CONF_CLOSE_URL,
    CONF_HTTP_METHOD,
    CONF_OPEN_URL,
    CONF_RESET_LOCK,
    CONF_RESET_LOCK_TIME,
    DOMAIN,
)

OPEN_URL = "http://x/open"
CLOSE_URL = "http://x/close"


@pytest.fixture
def mock_config_data() -> dict[str, Any]:
    """Return a lock with both endpoints and no follow-up automation."""
    return {
        CONF_NAME: "Door",
        CONF_OPEN_URL: OPEN_URL,
        CONF_CLOSE_URL: CLOSE_URL,
        CONF_HTTP_METHOD: "GET",
        CONF_AUTO_LOCK: False,
        CONF_AUTO_LOCK_DELAY: 5,
        CONF_RESET_LOCK: False,
        CONF_RESET_LOCK_TIME: 5,
    }


@pytest.fixture
def setup_lock(
    hass: HomeAssistant, mock_config_data: dict[str, Any]
) -> Callable[..., Awaitable[MockConfigEntry]]:
    """Return a helper that sets up a lock entry with overridden settings."""

    async def _setup(**overrides: Any) -> MockConfigEntry:
        data = {**mock_config_data, **overrides}
        data = {key: value for key, value in data.items() if value is not None}
        config_entry = MockConfigEntry(
            domain=DOMAIN,
            data=data,
            title=data[CONF_NAME],
            unique_id=data[CONF_NAME].lower(),
        )
        config_entry.add_to_hass(hass)
        assert await hass.config_entries.async_setup(config_entry.entry_id)
        await hass.async_block_till_done()
        return config_entry

    return _setup
