"""The HTTP lock integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import SOURCE_IMPORT, ConfigEntry
from homeassistant.const import (
    CONF_NAME,
    CONF_PASSWORD,
    CONF_TIMEOUT,
    CONF_USERNAME,
    EVENT_HOMEASSISTANT_STOP,
    Platform,
)
from homeassistant.core import Event, HomeAssistant, callback
from homeassistant.helpers import config_validation as cv

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
    DEFAULT_HTTP_METHOD,
    DEFAULT_RESET_LOCK,
    DEFAULT_RESET_LOCK_TIME,
    DEFAULT_TIMEOUT,
    DOMAIN,
    SUPPORTED_METHODS,
)
from .lock_coordinator import HTTPLockCoordinator

_LOGGER = logging.getLogger(__name__)

_PLATFORMS: list[Platform] = [Platform.LOCK, Platform.SENSOR]

type HTTPLockConfigEntry = ConfigEntry[HTTPLockCoordinator]


def has_endpoint(config: dict[str, Any]) -> dict[str, Any]:
    """Require at least one of the open/close URLs."""
    if not config.get(CONF_OPEN_URL) and not config.get(CONF_CLOSE_URL):
        raise vol.Invalid(
            f"At least one endpoint URL ({CONF_OPEN_URL} or {CONF_CLOSE_URL}) is required"
        )
    return config


HEADERS_SCHEMA = vol.Schema({cv.string: cv.string})
BODY_SCHEMA = vol.Any(cv.string, dict, list)

# YAML configuration schema
LOCK_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Required(CONF_NAME): cv.string,
            vol.Optional(CONF_OPEN_URL): cv.url,
            vol.Optional(CONF_OPEN_BODY): BODY_SCHEMA,
            vol.Optional(CONF_OPEN_HEADERS): HEADERS_SCHEMA,
            vol.Optional(CONF_CLOSE_URL): cv.url,
            vol.Optional(CONF_CLOSE_BODY): BODY_SCHEMA,
            vol.Optional(CONF_CLOSE_HEADERS): HEADERS_SCHEMA,
            vol.Optional(CONF_HTTP_METHOD, default=DEFAULT_HTTP_METHOD): vol.All(
                vol.Upper, vol.In(SUPPORTED_METHODS)
            ),
            vol.Inclusive(CONF_USERNAME, "authentication"): cv.string,
            vol.Inclusive(CONF_PASSWORD, "authentication"): cv.string,
            vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT): cv.positive_int,
            vol.Optional(CONF_AUTO_LOCK, default=DEFAULT_AUTO_LOCK): cv.boolean,
            vol.Optional(
                CONF_AUTO_LOCK_DELAY, default=DEFAULT_AUTO_LOCK_DELAY
            ): cv.positive_int,
            vol.Optional(CONF_RESET_LOCK, default=DEFAULT_RESET_LOCK): cv.boolean,
            vol.Optional(
                CONF_RESET_LOCK_TIME, default=DEFAULT_RESET_LOCK_TIME
            ): cv.positive_int,
            vol.Optional(CONF_MANUFACTURER): cv.string,
            vol.Optional(CONF_MODEL): cv.string,
            vol.Optional(CONF_SERIAL): cv.string,
            vol.Optional(CONF_FIRMWARE): cv.string,
        }
    ),
    has_endpoint,
)

CONFIG_SCHEMA = vol.Schema(
    {DOMAIN: vol.All(cv.ensure_list, [LOCK_SCHEMA])},
    extra=vol.ALLOW_EXTRA,
)


async def async_setup(hass: HomeAssistant, config: dict) -> bool:
    """Set up HTTP locks declared in YAML."""
    if DOMAIN not in config:
        return True

    for lock_config in config[DOMAIN]:
        name = lock_config[CONF_NAME]

        # Locks are keyed by name; an existing entry wins over YAML
        existing_entries = hass.config_entries.async_entries(DOMAIN)
        if any(entry.title == name for entry in existing_entries):
            _LOGGER.info("HTTP lock '%s' already exists, skipping YAML import", name)
            continue

        _LOGGER.info("Importing HTTP lock '%s' from YAML", name)
        hass.async_create_task(
            hass.config_entries.flow.async_init(
                DOMAIN,
                context={"source": SOURCE_IMPORT},
                data=dict(lock_config),
            )
        )

    return True


async def async_setup_entry(hass: HomeAssistant, entry: HTTPLockConfigEntry) -> bool:
    """Set up an HTTP lock from a config entry."""
    coordinator = HTTPLockCoordinator(hass, entry)

    # Store coordinator in runtime_data
    entry.runtime_data = coordinator

    @callback
    def _async_cancel_timers(event: Event) -> None:
        coordinator.async_cleanup()

    entry.async_on_unload(
        hass.bus.async_listen_once(EVENT_HOMEASSISTANT_STOP, _async_cancel_timers)
    )

    await hass.config_entries.async_forward_entry_setups(entry, _PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: HTTPLockConfigEntry) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, _PLATFORMS)

    # Pending auto-lock/reset timers must not outlive the entry
    if unload_ok and getattr(entry, "runtime_data", None):
        entry.runtime_data.async_cleanup()

    return unload_ok
