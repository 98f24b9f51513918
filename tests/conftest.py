"""pytest fixtures shared by all HTTP lock tests."""

import pytest


@pytest.fixture(autouse=True)
async def auto_enable_custom_integrations(enable_custom_integrations):
    """Load custom_components/http_lock instead of a core integration."""
    return
