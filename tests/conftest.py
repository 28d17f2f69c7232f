"""Shared fixtures.

The backend is an ``httpx.MockTransport`` that records every request, so
no test touches the network.
"""

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from gorilla_archive.core.config import BASE_URL_ENV_VAR, BASE_URL_FALLBACK_ENV_VAR, Settings
from gorilla_archive.main import create_app
from gorilla_archive.proxy import ForwarderService
from gorilla_archive.proxy.dependencies import get_forwarder_service

BACKEND_URL = "http://backend.test"


class FakeBackend:
    """Records outbound requests and answers them with ``handler``."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, content=b"ok")
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        # Hand back an unread stream, the way a network transport does.
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            stream=httpx.ByteStream(response.content),
            request=request,
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv(BASE_URL_ENV_VAR, raising=False)
    monkeypatch.delenv(BASE_URL_FALLBACK_ENV_VAR, raising=False)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        backend_base_url=BACKEND_URL,
        preferences_dir=str(tmp_path / "prefs"),
        metrics_enabled=False,
        log_format="text",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


def make_client(settings: Settings, backend: FakeBackend) -> TestClient:
    app = create_app(settings)
    forwarder = ForwarderService(settings.backend_base_url, transport=backend.transport)
    app.dependency_overrides[get_forwarder_service] = lambda: forwarder
    return TestClient(app)


@pytest.fixture
def client(settings, backend):
    with make_client(settings, backend) as client:
        yield client
