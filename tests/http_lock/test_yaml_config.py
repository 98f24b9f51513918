"""Tests for YAML configuration support."""

from unittest.mock import patch

from homeassistant.core import HomeAssistant
from homeassistant.setup import async_setup_component
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.http_lock.const import (
    CONF_AUTO_LOCK,
    CONF_AUTO_LOCK_DELAY,
    CONF_CLOSE_URL,
    CONF_HTTP_METHOD,
    CONF_OPEN_BODY,
    CONF_OPEN_URL,
    DOMAIN,
)

from .conftest import CLOSE_URL, OPEN_URL


async def test_yaml_setup_basic(hass: HomeAssistant) -> None:
    """Test a YAML lock is imported with defaults filled in."""
    config = {
        DOMAIN: [
            {
                "name": "Garage",
                CONF_OPEN_URL: OPEN_URL,
                CONF_CLOSE_URL: CLOSE_URL,
                CONF_HTTP_METHOD: "post",
                CONF_OPEN_BODY: {"action": "open"},
            }
        ]
    }

    with patch(
        "custom_components.http_lock.async_setup_entry",
        return_value=True,
    ) as mock_setup:
        assert await async_setup_component(hass, DOMAIN, config)
        await hass.async_block_till_done()

        assert mock_setup.call_count == 1

    entries = hass.config_entries.async_entries(DOMAIN)
    assert len(entries) == 1
    assert entries[0].title == "Garage"
    assert entries[0].unique_id == "garage"
    assert entries[0].data[CONF_HTTP_METHOD] == "POST"
    assert entries[0].data[CONF_OPEN_BODY] == {"action": "open"}
    assert entries[0].data[CONF_AUTO_LOCK] is False
    assert entries[0].data[CONF_AUTO_LOCK_DELAY] == 5


async def test_yaml_setup_multiple(hass: HomeAssistant) -> None:
    """Test several locks can be declared at once."""
    config = {
        DOMAIN: [
            {"name": "Front", CONF_OPEN_URL: OPEN_URL},
            {"name": "Back", CONF_CLOSE_URL: CLOSE_URL, CONF_AUTO_LOCK: True},
        ]
    }

    with patch(
        "custom_components.http_lock.async_setup_entry",
        return_value=True,
    ):
        assert await async_setup_component(hass, DOMAIN, config)
        await hass.async_block_till_done()

    titles = {entry.title for entry in hass.config_entries.async_entries(DOMAIN)}
    assert titles == {"Front", "Back"}


async def test_yaml_skips_existing_lock(hass: HomeAssistant) -> None:
    """Test a lock that already has an entry is not imported again."""
    MockConfigEntry(
        domain=DOMAIN,
        title="Garage",
        unique_id="garage",
        data={"name": "Garage", CONF_OPEN_URL: OPEN_URL},
    ).add_to_hass(hass)

    config = {DOMAIN: [{"name": "Garage", CONF_OPEN_URL: "http://y/open"}]}

    with patch(
        "custom_components.http_lock.async_setup_entry",
        return_value=True,
    ):
        assert await async_setup_component(hass, DOMAIN, config)
        await hass.async_block_till_done()

    entries = hass.config_entries.async_entries(DOMAIN)
    assert len(entries) == 1
    assert entries[0].data[CONF_OPEN_URL] == OPEN_URL


async def test_yaml_requires_an_endpoint(hass: HomeAssistant) -> None:
    """Test a YAML lock without any URL fails validation."""
    config = {DOMAIN: [{"name": "Garage"}]}

    assert not await async_setup_component(hass, DOMAIN, config)
    assert hass.config_entries.async_entries(DOMAIN) == []


async def test_yaml_rejects_unknown_method(hass: HomeAssistant) -> None:
    """Test only the supported HTTP methods are accepted."""
    config = {DOMAIN: [{"name": "Garage", CONF_OPEN_URL: OPEN_URL, CONF_HTTP_METHOD: "FETCH"}]}

    assert not await async_setup_component(hass, DOMAIN, config)
