"""Pytest configuration and shared fixtures."""

import json
from unittest.mock import patch

import pytest
import requests

from moxiworks_platform.event_client import EventClient
from moxiworks_platform.settings_manager import PlatformConfig, reset_config, set_config


def make_response(body, status_code: int = 200, url: str = "https://api.example.test") -> requests.Response:
    """Build a real requests.Response carrying the given JSON body (or raw text)."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if isinstance(body, (bytes, str)):
        response._content = body.encode("utf-8") if isinstance(body, str) else body
    else:
        response._content = json.dumps(body).encode("utf-8")
    return response


@pytest.fixture
def config() -> PlatformConfig:
    return PlatformConfig(
        url="https://api.example.test/",
        platform_identifier="partner-id",
        platform_secret="partner-secret",
    )


@pytest.fixture(autouse=True)
def default_config(config):
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def client(config) -> EventClient:
    return EventClient(config)


@pytest.fixture
def mock_request():
    """Patch the single HTTP entry point so no test touches the network."""
    with patch("moxiworks_platform.platform_client.requests.request") as mocked:
        yield mocked


@pytest.fixture
def respond():
    return make_response
