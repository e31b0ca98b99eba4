"""
Pytest configuration for the gateway. Backends are httpx mock transports or the real service
apps mounted in-process, addressed by host name.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from gateway.main import create_app
from gateway.routes import default_routes

AUTH = "http://auth-service"
PROFILE = "http://profile-service"
PRODUCTS = "http://product-service"
INVENTORY = "http://inventory-service"


class RecordingBackend:
    """Mock backend that records every forwarded request and answers with a canned JSON body."""

    def __init__(self, status_code=200, json_body=None, headers=None):
        self.requests = []
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else {"ok": True}
        self.headers = headers or {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.json_body, headers=self.headers)


class ServiceMesh(httpx.AsyncBaseTransport):
    """Routes each outbound request to an in-process ASGI app by host name."""

    def __init__(self, apps: dict):
        self._transports = {host: httpx.ASGITransport(app=app) for host, app in apps.items()}

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        transport = self._transports.get(request.url.host)
        if transport is None:
            raise httpx.ConnectError(f"no route to {request.url.host}", request=request)
        return await transport.handle_async_request(request)


@pytest.fixture
def routes():
    return default_routes(auth=AUTH, profile=PROFILE, products=PRODUCTS, inventory=INVENTORY)


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def client(routes, backend):
    with TestClient(create_app(routes, transport=httpx.MockTransport(backend))) as c:
        yield c


@pytest.fixture
def service_mesh():
    return ServiceMesh
