import json
import logging
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from voice_relay.bot.call_monitor import CallMonitorRegistry
from voice_relay.config.settings import RelaySettings
from voice_relay.main import create_app
from voice_relay.services.provider_client import RealtimeProviderClient


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


class ProviderStub:
    """Stands in for the provider's REST API behind an httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.responses = {}

    def respond(self, path_suffix, status_code, **kwargs):
        self.responses[path_suffix] = (status_code, kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, (status_code, kwargs) in self.responses.items():
            if request.url.path.endswith(suffix):
                return httpx.Response(status_code, **kwargs)
        return httpx.Response(200, json={})

    def paths(self):
        return [request.url.path for request in self.requests]

    def body(self, index=-1):
        content = self.requests[index].content
        return json.loads(content) if content else None


@pytest.fixture
def settings():
    return RelaySettings(
        openai_api_key="test-api-key",
        openai_project_id="proj_abc123",
        public_base_url="https://relay.example.com/",
    )


@pytest.fixture
def provider_stub():
    return ProviderStub()


@pytest.fixture
def provider(settings, provider_stub):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(provider_stub))
    return RealtimeProviderClient(settings, http_client=http_client)


@pytest.fixture
def monitors(settings):
    registry = CallMonitorRegistry(settings)
    registry.start = MagicMock()
    return registry


@pytest.fixture
def client(settings, provider, monitors):
    return TestClient(create_app(settings, provider=provider, monitors=monitors))
