"""Tests for the API gateway: prefix routing, path rewrite, pass-through and failure handling."""
import httpx
import pytest
from fastapi.testclient import TestClient

from auth_server.main import create_app as create_auth_app
from auth_server.tokens import CredentialAuthority
from gateway.main import create_app
from gateway.routes import ProxyRoute, default_routes
from resource_server.auth import RemoteVerifier
from resource_server.inventory import create_app as create_inventory_app
from resource_server.products import create_app as create_product_app
from resource_server.profiles import create_app as create_profile_app


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/api/auth/login", "/login"),
        ("/api/auth", "/"),
        ("/api/profile/2", "/profile/2"),
        ("/api/products", "/products"),
        ("/api/products/5/notify", "/products/5/notify"),
        ("/api/inventory/7", "/inventory/7"),
    ],
)
def test_route_table_rewrites(routes, path, expected):
    route, backend_path = routes.resolve(path)
    assert backend_path == expected


@pytest.mark.parametrize("path", ["/api/authx", "/api/orders", "/api", "/products", "/"])
def test_route_table_unmatched(routes, path):
    assert routes.resolve(path) is None


def test_route_matches_on_segment_boundary():
    route = ProxyRoute("auth", "/api/auth", "http://a")
    assert route.matches("/api/auth/login")
    assert not route.matches("/api/authority")


def test_health_lists_routes(client):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["service"] == "api-gateway"
    assert data["status"] == "healthy"
    assert data["routes"] == {
        "auth": "http://auth-service",
        "profile": "http://profile-service",
        "products": "http://product-service",
        "inventory": "http://inventory-service",
    }


def test_inventory_path_reaches_backend_rewritten(client, backend):
    r = client.get("/api/inventory/7")
    assert r.status_code == 200
    forwarded = backend.requests[0]
    assert forwarded.method == "GET"
    assert str(forwarded.url) == "http://inventory-service/inventory/7"


def test_auth_path_prefix_is_stripped(client, backend):
    client.post("/api/auth/login", json={"username": "alice", "password": "password123"})
    forwarded = backend.requests[0]
    assert forwarded.url.host == "auth-service"
    assert forwarded.url.path == "/login"


def test_method_headers_body_and_query_pass_through(client, backend):
    client.put(
        "/api/inventory/3?dry_run=1&x=a%20b",
        headers={"Authorization": "Bearer abc", "X-Request-Id": "r-1"},
        content=b'{"stock": 4}',
    )
    forwarded = backend.requests[0]
    assert forwarded.method == "PUT"
    assert forwarded.url.path == "/inventory/3"
    assert forwarded.url.query == b"dry_run=1&x=a%20b"
    assert forwarded.headers["authorization"] == "Bearer abc"
    assert forwarded.headers["x-request-id"] == "r-1"
    assert forwarded.headers["host"] == "inventory-service"
    assert forwarded.content == b'{"stock": 4}'


def test_backend_response_passes_through(routes):
    def backend(request):
        return httpx.Response(404, json={"error": "Product not found"}, headers={"X-Backend": "products"})

    with TestClient(create_app(routes, transport=httpx.MockTransport(backend))) as client:
        r = client.get("/api/products/999")
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found"}
    assert r.headers["x-backend"] == "products"


@pytest.mark.parametrize(
    "error",
    [httpx.ConnectError("connection refused"), httpx.ConnectTimeout("timed out"), httpx.ReadTimeout("timed out")],
    ids=["refused", "connect-timeout", "read-timeout"],
)
def test_backend_down_is_502(routes, error):
    def backend(request):
        raise error

    with TestClient(create_app(routes, transport=httpx.MockTransport(backend))) as client:
        r = client.get("/api/products")
    assert r.status_code == 502
    assert r.json() == {"error": "Service unavailable", "service": "http://product-service"}


def test_unexpected_proxy_failure_is_json_500(routes):
    def backend(request):
        raise RuntimeError("backend client blew up")

    app = create_app(routes, transport=httpx.MockTransport(backend))
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


def test_encoded_slash_is_forwarded_unchanged(client, backend):
    client.get("/api/products/a%2Fb")
    forwarded = backend.requests[0]
    assert forwarded.url.raw_path == b"/products/a%2Fb"


def test_method_not_allowed_outside_api_is_json(client):
    r = client.post("/about")
    assert r.status_code == 405
    assert "error" in r.json()


@pytest.mark.parametrize("path", ["/api/orders", "/api/authx/login", "/api", "/api/"])
def test_unmatched_api_path_is_404(client, backend, path):
    r = client.get(path)
    assert r.status_code == 404
    assert r.json() == {"error": "API route not found"}
    assert backend.requests == []


@pytest.mark.parametrize("path", ["/", "/about", "/static/index.html"])
def test_other_paths_get_gateway_info(client, path):
    r = client.get(path)
    assert r.status_code == 200
    data = r.json()
    assert data["name"] == "Mini E-Commerce API Gateway"
    assert "POST /api/auth/login" in data["endpoints"]


class _QuietNotifier:
    def __init__(self):
        self.sent = []

    def dispatch(self, product_id, stock):
        self.sent.append((product_id, stock))

    async def aclose(self):
        pass


@pytest.fixture
def stack(routes, service_mesh):
    """Gateway in front of real service apps sharing one in-process authority."""
    authority = CredentialAuthority(secret="gateway-test-secret", ttl_seconds=3600)
    auth_app = create_auth_app(authority)
    verifier = RemoteVerifier("http://auth-service", transport=httpx.ASGITransport(app=auth_app))
    notifier = _QuietNotifier()
    mesh = service_mesh(
        {
            "auth-service": auth_app,
            "profile-service": create_profile_app(verifier=verifier),
            "product-service": create_product_app(verifier=verifier),
            "inventory-service": create_inventory_app(verifier=verifier, notifier=notifier),
        }
    )
    with TestClient(create_app(routes, transport=mesh)) as client:
        yield client, notifier


def test_missing_product_through_gateway(stack):
    client, _ = stack
    r = client.get("/api/products/999")
    assert r.status_code == 404
    assert r.json() == {"error": "Product not found"}


def test_login_create_product_update_stock_logout(stack):
    client, notifier = stack
    r = client.post("/api/auth/login", json={"username": "alice", "password": "password123"})
    assert r.status_code == 200
    assert r.json()["user"]["role"] == "admin"
    headers = {"Authorization": f"Bearer {r.json()['token']}"}

    r = client.post("/api/products", headers=headers, json={"name": "X", "price": 10})
    assert r.status_code == 201
    assert r.json()["id"] == 9

    r = client.put("/api/inventory/8", headers=headers, json={"stock": 0})
    assert r.status_code == 200
    assert r.json()["inventory"] == {"productId": 8, "stock": 0, "warehouse": "B"}
    assert notifier.sent == [(8, 0)]

    r = client.put("/api/profile/2", headers=headers, json={"bio": "Edited by admin"})
    assert r.status_code == 200

    assert client.get("/api/auth/validate", headers=headers).json()["valid"] is True
    assert client.post("/api/auth/logout", headers=headers).status_code == 200

    r = client.get("/api/auth/validate", headers=headers)
    assert r.status_code == 401
    assert r.json() == {"valid": False, "error": "Token has been revoked"}
    r = client.put("/api/inventory/8", headers=headers, json={"stock": 5})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid token"}


def test_unreachable_backend_in_mesh_is_502(routes, service_mesh):
    mesh = service_mesh({})
    with TestClient(create_app(routes, transport=mesh)) as client:
        r = client.get("/api/inventory")
    assert r.status_code == 502
    assert r.json()["service"] == "http://inventory-service"


def test_default_routes_use_config_urls():
    table = default_routes()
    assert set(table.targets()) == {"auth", "profile", "products", "inventory"}
