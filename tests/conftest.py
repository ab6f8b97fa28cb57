"""
Shared fixtures: in-memory storage, test settings, and httpx mock transports
that record every request.
"""

from datetime import datetime, timezone
from typing import Callable

import httpx
import pytest

from adducation.config.settings import Settings
from adducation.core.backend_client import BackendClient
from adducation.core.gamification import GamificationState
from adducation.core.llm_gateway import LLMGateway
from adducation.storage.local_store import AUTH_TOKEN_KEY, LocalStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it sees."""

    def __init__(self, handler: Handler):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]


def completion(content: str) -> httpx.Response:
    """A minimal chat completion reply."""
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        api_base_url="http://backend.test",
        openrouter_base_url="http://llm.test/api/v1",
        openrouter_api_key="test-key",
        storage_path="",
    )


@pytest.fixture
def store() -> LocalStore:
    return LocalStore()


@pytest.fixture
def make_backend(store, settings):
    def factory(handler: Handler, token: str | None = None) -> tuple[BackendClient, RecordingTransport]:
        if token:
            store.set_item(AUTH_TOKEN_KEY, token)
        transport = RecordingTransport(handler)
        return BackendClient(store, settings=settings, transport=transport), transport

    return factory


@pytest.fixture
def make_gateway(store, settings):
    def factory(handler: Handler, settings_override: Settings | None = None) -> tuple[LLMGateway, RecordingTransport]:
        transport = RecordingTransport(handler)
        gateway = LLMGateway(store, settings=settings_override or settings, transport=transport)
        return gateway, transport

    return factory


@pytest.fixture
def sync_transport(make_backend):
    """Backend that accepts every progress write."""
    backend, transport = make_backend(lambda request: httpx.Response(200, json={}), token="tok")
    return backend, transport


@pytest.fixture
def gamification(store, sync_transport) -> GamificationState:
    backend, _ = sync_transport
    return GamificationState(backend, store, clock=lambda: NOW)
