"""Config flow for the HTTP lock integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_NAME, CONF_PASSWORD, CONF_TIMEOUT, CONF_USERNAME
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers import selector
from homeassistant.util import slugify

from .const import (
    CONF_AUTO_LOCK,
    CONF_AUTO_LOCK_DELAY,
    CONF_CLOSE_BODY,
    CONF_CLOSE_HEADERS,
    CONF_CLOSE_URL,
    CONF_HTTP_METHOD,
    CONF_OPEN_BODY,
    CONF_OPEN_HEADERS,
    CONF_OPEN_URL,
    CONF_RESET_LOCK,
    CONF_RESET_LOCK_TIME,
    DEFAULT_AUTO_LOCK,
    DEFAULT_AUTO_LOCK_DELAY,
    DEFAULT_HTTP_METHOD,
    DEFAULT_RESET_LOCK,
    DEFAULT_RESET_LOCK_TIME,
    DEFAULT_TIMEOUT,
    DOMAIN,
    SUPPORTED_METHODS,
)

_LOGGER = logging.getLogger(__name__)

_URL_SELECTOR = selector.TextSelector(
    selector.TextSelectorConfig(type=selector.TextSelectorType.URL)
)


def _optional(key: str, data: dict[str, Any] | None) -> vol.Optional:
    """Optional marker that suggests the stored value, so it can be cleared."""
    if data and data.get(key):
        return vol.Optional(key, description={"suggested_value": data[key]})
    return vol.Optional(key)


def get_user_schema(data: dict[str, Any] | None = None) -> vol.Schema:
    """Get the connection schema with optional default values."""
    return vol.Schema(
        {
            vol.Required(
                CONF_NAME, default=(data.get(CONF_NAME) if data else vol.UNDEFINED)
            ): str,
            _optional(CONF_OPEN_URL, data): _URL_SELECTOR,
            _optional(CONF_CLOSE_URL, data): _URL_SELECTOR,
            vol.Optional(
                CONF_HTTP_METHOD,
                default=data.get(CONF_HTTP_METHOD, DEFAULT_HTTP_METHOD)
                if data
                else DEFAULT_HTTP_METHOD,
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=SUPPORTED_METHODS,
                    mode=selector.SelectSelectorMode.DROPDOWN,
                )
            ),
            _optional(CONF_USERNAME, data): str,
            _optional(CONF_PASSWORD, data): selector.TextSelector(
                selector.TextSelectorConfig(type=selector.TextSelectorType.PASSWORD)
            ),
            vol.Optional(
                CONF_TIMEOUT,
                default=data.get(CONF_TIMEOUT, DEFAULT_TIMEOUT)
                if data
                else DEFAULT_TIMEOUT,
            ): vol.All(vol.Coerce(int), vol.Range(min=1, max=300)),
        }
    )


def get_advanced_schema(data: dict[str, Any] | None = None) -> vol.Schema:
    """Get the request payload and automation schema."""
    return vol.Schema(
        {
            _optional(CONF_OPEN_BODY, data): selector.TextSelector(
                selector.TextSelectorConfig(multiline=True)
            ),
            _optional(CONF_OPEN_HEADERS, data): selector.ObjectSelector(),
            _optional(CONF_CLOSE_BODY, data): selector.TextSelector(
                selector.TextSelectorConfig(multiline=True)
            ),
            _optional(CONF_CLOSE_HEADERS, data): selector.ObjectSelector(),
            vol.Optional(
                CONF_AUTO_LOCK,
                default=data.get(CONF_AUTO_LOCK, DEFAULT_AUTO_LOCK)
                if data
                else DEFAULT_AUTO_LOCK,
            ): bool,
            vol.Optional(
                CONF_AUTO_LOCK_DELAY,
                default=data.get(CONF_AUTO_LOCK_DELAY, DEFAULT_AUTO_LOCK_DELAY)
                if data
                else DEFAULT_AUTO_LOCK_DELAY,
            ): vol.All(vol.Coerce(int), vol.Range(min=1, max=3600)),
            vol.Optional(
                CONF_RESET_LOCK,
                default=data.get(CONF_RESET_LOCK, DEFAULT_RESET_LOCK)
                if data
                else DEFAULT_RESET_LOCK,
            ): bool,
            vol.Optional(
                CONF_RESET_LOCK_TIME,
                default=data.get(CONF_RESET_LOCK_TIME, DEFAULT_RESET_LOCK_TIME)
                if data
                else DEFAULT_RESET_LOCK_TIME,
            ): vol.All(vol.Coerce(int), vol.Range(min=1, max=3600)),
        }
    )


STEP_USER_DATA_SCHEMA = get_user_schema()
STEP_ADVANCED_DATA_SCHEMA = get_advanced_schema()


def validate_input(data: dict[str, Any]) -> dict[str, Any]:
    """Validate the connection settings.

    Data has the keys from STEP_USER_DATA_SCHEMA with values provided by the user.
    """
    open_url = data.get(CONF_OPEN_URL)
    close_url = data.get(CONF_CLOSE_URL)
    if not open_url and not close_url:
        raise MissingEndpoint("At least one of open_url or close_url is required")

    for url in (open_url, close_url):
        if not url:
            continue
        try:
            cv.url(url)
        except vol.Invalid as err:
            raise InvalidConfiguration(f"Invalid URL {url}") from err

    if bool(data.get(CONF_USERNAME)) != bool(data.get(CONF_PASSWORD)):
        raise InvalidConfiguration("Username and password must be set together")

    return {"title": data[CONF_NAME]}


class HTTPLockConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for HTTP lock."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self._basic_config: dict[str, Any] = {}

    def _validate(self, user_input: dict[str, Any], errors: dict[str, str]) -> bool:
        """Run validate_input and translate failures into form errors."""
        try:
            validate_input(user_input)
        except MissingEndpoint:
            errors["base"] = "missing_endpoint"
        except InvalidConfiguration:
            errors["base"] = "invalid_config"
        except Exception:
            _LOGGER.exception("Unexpected exception")
            errors["base"] = "unknown"
        return not errors

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None and self._validate(user_input, errors):
            await self.async_set_unique_id(slugify(user_input[CONF_NAME]))
            self._abort_if_unique_id_configured()
            self._basic_config = user_input
            return await self.async_step_advanced()

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_advanced(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the payload and automation step."""
        if user_input is not None:
            config_data = {**self._basic_config, **user_input}
            return self.async_create_entry(
                title=config_data[CONF_NAME], data=config_data
            )

        return self.async_show_form(
            step_id="advanced",
            data_schema=STEP_ADVANCED_DATA_SCHEMA,
        )

    async def async_step_import(self, import_data: dict[str, Any]) -> ConfigFlowResult:
        """Create an entry from a YAML lock definition."""
        await self.async_set_unique_id(slugify(import_data[CONF_NAME]))
        self._abort_if_unique_id_configured()

        errors: dict[str, str] = {}
        if not self._validate(import_data, errors):
            return self.async_abort(reason=errors["base"])

        return self.async_create_entry(title=import_data[CONF_NAME], data=import_data)

    async def async_step_reconfigure(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle reconfiguration - connection settings."""
        config_entry = self._get_reconfigure_entry()

        errors: dict[str, str] = {}
        if user_input is not None and self._validate(user_input, errors):
            self._basic_config = user_input
            return await self.async_step_reconfigure_advanced()

        return self.async_show_form(
            step_id="reconfigure",
            data_schema=get_user_schema(config_entry.data),
            errors=errors,
            description_placeholders={"name": config_entry.title},
        )

    async def async_step_reconfigure_advanced(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle reconfiguration - payload and automation settings."""
        config_entry = self._get_reconfigure_entry()

        if user_input is not None:
            config_data = {**self._basic_config, **user_input}

            new_unique_id = slugify(config_data[CONF_NAME])
            if config_entry.unique_id != new_unique_id:
                await self.async_set_unique_id(new_unique_id)
                self._abort_if_unique_id_configured()

            # The whole config is replaced and the entry reloaded
            return self.async_update_reload_and_abort(
                config_entry,
                unique_id=new_unique_id,
                title=config_data[CONF_NAME],
                data=config_data,
                reason="reconfigure_successful",
            )

        return self.async_show_form(
            step_id="reconfigure_advanced",
            data_schema=get_advanced_schema(config_entry.data),
            description_placeholders={"name": config_entry.title},
        )


class InvalidConfiguration(HomeAssistantError):
    """Error to indicate there is invalid configuration."""


class MissingEndpoint(InvalidConfiguration):
    """Error to indicate neither an open nor a close URL was given."""
