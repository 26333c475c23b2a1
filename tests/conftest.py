"""Shared fixtures for liveconfig tests."""

import pytest

# Variables the test targets would pick up through automatic env overlay
_OVERLAY_VARIABLES = [
    "HOST",
    "SERVERS",
    "REPLICAS",
    "SITES",
    "PORT",
    "NAME",
    "TAGS",
    "WORKERS",
    "LISTENADDRESS",
    "HTTPLISTENER",
    "DATABASECONFIG_HOST",
    "DATABASECONFIG_PORT",
    "APP_HOST",
    "APP_PORT",
    "APP_DATABASECONFIG_HOST",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the process environment from leaking into decoded configs."""
    for name in _OVERLAY_VARIABLES:
        monkeypatch.delenv(name, raising=False)
