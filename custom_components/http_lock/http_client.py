"""HTTP action client for the HTTP lock integration.

Every lock action is a single outbound request to a user supplied endpoint.
The client makes exactly one attempt and classifies what went wrong, so the
failure kinds stay distinguishable in the logs even though the lock treats
them all as "the action did not happen".
"""

from __future__ import annotations

import asyncio
import logging
from http import HTTPStatus
from typing import Any

import aiohttp
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.json import json_dumps

from .const import BODY_METHODS, DEFAULT_TIMEOUT, SUPPORTED_METHODS, USER_AGENT

_LOGGER = logging.getLogger(__name__)


class HTTPLockError(HomeAssistantError):
    """Base class for all lock action failures."""


class ConfigError(HTTPLockError):
    """Raised when a request cannot be built or dispatched."""


class NetworkError(HTTPLockError):
    """Raised when a request was sent but no response arrived."""


class ServerError(HTTPLockError):
    """Raised when the endpoint answered with a non-2xx status."""

    def __init__(self, status: int, reason: str | None = None) -> None:
        """Initialize with the HTTP status code and status text."""
        super().__init__(f"Server responded with {status}: {reason or ''}".rstrip())
        self.status = status
        self.reason = reason


def _status_text(status: int) -> str | None:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return None


class HTTPActionExecutor:
    """Issue open/close requests for one lock."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout: float = DEFAULT_TIMEOUT,
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            session: Shared aiohttp session
            timeout: Total request timeout in seconds
            username: Optional basic-auth user name
            password: Optional basic-auth password
        """
        self._session = session
        self._timeout = timeout
        self._auth: aiohttp.BasicAuth | None = None
        if username and password:
            self._auth = aiohttp.BasicAuth(username, password)

    def _build_request(
        self,
        headers: dict[str, str] | None,
        body: Any,
        method: str,
    ) -> tuple[dict[str, str], str | None]:
        """Merge headers and encode the body for the given method."""
        request_headers = {"User-Agent": USER_AGENT, **(headers or {})}
        data: str | None = None

        if method in BODY_METHODS and body:
            if isinstance(body, str):
                data = body
            else:
                data = json_dumps(body)
                if not any(key.lower() == "content-type" for key in request_headers):
                    request_headers["Content-Type"] = "application/json"

        return request_headers, data

    async def async_execute(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        body: Any = "",
        method: str = "GET",
    ) -> int:
        """Send one request and return the status code of a 2xx response.

        Raises:
            ConfigError: The request could not be built or dispatched
            NetworkError: No response was received
            ServerError: A non-2xx response was received
        """
        if not url:
            raise ConfigError("Request URL cannot be empty")

        method = (method or "GET").upper()
        if method not in SUPPORTED_METHODS:
            raise ConfigError(f"Unsupported HTTP method: {method}")

        try:
            request_headers, data = self._build_request(headers, body, method)
        except (TypeError, ValueError) as err:
            _LOGGER.error("Request setup failed: %s", err)
            raise ConfigError(f"Configuration error: {err}") from err

        _LOGGER.debug("Sending %s request to endpoint: %s", method, url)
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session.request(
                    method,
                    url,
                    headers=request_headers,
                    data=data,
                    auth=self._auth,
                ) as response:
                    status = response.status
        except aiohttp.InvalidURL as err:
            _LOGGER.error("Request setup failed for %s: %s", url, err)
            raise ConfigError(f"Configuration error: invalid URL {url}") from err
        except (TimeoutError, aiohttp.ClientError) as err:
            _LOGGER.error("Network connectivity failed for %s: %s", url, repr(err))
            raise NetworkError(f"Connection failed: {err!r}") from err
        except (TypeError, ValueError) as err:
            _LOGGER.error("Request setup failed for %s: %s", url, err)
            raise ConfigError(f"Configuration error: {err}") from err

        if not HTTPStatus.OK <= status < HTTPStatus.MULTIPLE_CHOICES:
            reason = _status_text(status)
            _LOGGER.error("Server error %s %s from %s", status, reason, url)
            raise ServerError(status, reason)

        _LOGGER.debug("HTTP request completed successfully with status: %s", status)
        return status
