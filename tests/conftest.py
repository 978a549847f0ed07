"""Pytest configuration and fixtures."""

import os

# Configuração precisa existir antes de importar o app
os.environ["CORS_ORIGIN"] = "https://app.example.com"
os.environ["PROXY_TOKEN"] = "secret-token"
os.environ["THIRD_PARTY_TTS_URL"] = "https://tts.example.com/v1/t2a_v2"
os.environ["THIRD_PARTY_GROUP_ID"] = "group-1"
os.environ["THIRD_PARTY_TTS_KEY"] = "upstream-key"

import json

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.tts_service import get_upstream_client

ORIGIN = "https://app.example.com"
AUTH_HEADERS = {"Origin": ORIGIN, "X-Proxy-Token": "secret-token"}


class FakeContent:
    def __init__(self, body: bytes):
        self._body = body

    async def iter_chunked(self, n):
        for i in range(0, len(self._body), n):
            yield self._body[i:i + n]


class FakeResponse:
    """Imita a parte usada de aiohttp.ClientResponse."""

    def __init__(self, status=200, body=b"", content_type=None):
        self.status = status
        self.headers = {"Content-Type": content_type} if content_type else {}
        self._body = body
        self.content = FakeContent(body)
        self.closed = False

    @classmethod
    def from_json(cls, data, status=200):
        return cls(status=status, body=json.dumps(data).encode(), content_type="application/json")

    async def read(self):
        return self._body

    async def text(self):
        return self._body.decode("utf-8")

    def close(self):
        self.closed = True


class FakeUpstream:
    """Cliente do provedor em memória."""

    def __init__(self, response=None, content=None, error=None, fetch_error=None):
        self.response = response
        self.content = content
        self.error = error
        self.fetch_error = fetch_error
        self.payloads = []
        self.fetched = []
        self.close_calls = 0

    async def synthesize(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.response

    async def fetch(self, url):
        self.fetched.append(url)
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.content

    async def close(self):
        self.close_calls += 1


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def upstream():
    """Instala um FakeUpstream como cliente do provedor."""
    fake = FakeUpstream()
    app.dependency_overrides[get_upstream_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_upstream_client, None)
