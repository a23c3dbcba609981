import base64
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest

import tulip_edge
from tulip_edge.config import settings
from tulip_edge.credentials.models import ApiAuth
from tulip_edge.engine.nodes.registry import NodeRegistry

PACKAGES_DIR = Path(tulip_edge.__file__).parent / "node_packages"

API_KEY = "apikey.2_abc123"
API_SECRET = "s3cr3t"


@pytest.fixture(scope="session", autouse=True)
def registry():
    NodeRegistry.reload_all(PACKAGES_DIR)
    return NodeRegistry


@pytest.fixture(autouse=True)
def no_proxy(monkeypatch):
    # A proxy mount would bypass the mock transports
    monkeypatch.setattr(settings, "HTTP_PROXY", None)


@pytest.fixture
def auth() -> ApiAuth:
    return ApiAuth(
        name="acme",
        protocol="https",
        hostname="acme.tulip.co",
        apiKey=API_KEY,
        apiSecret=API_SECRET,
    )


@pytest.fixture
def basic_auth_header() -> str:
    token = base64.b64encode(f"{API_KEY}:{API_SECRET}".encode()).decode()
    return f"Basic {token}"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that answers with a fixed response and records every request."""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        error: Optional[Exception] = None,
    ):
        self.requests: List[httpx.Request] = []
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.headers = headers
        self.error = error
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body, headers=self.headers)
        return httpx.Response(self.status_code, text=self.text or "", headers=self.headers)


@pytest.fixture
def make_transport():
    return RecordingTransport
