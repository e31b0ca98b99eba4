"""
Path-prefix routing table for the gateway.
A prefix matches on a path-segment boundary; the matched prefix is replaced by the
route's backend prefix ("" strips it).
"""
from dataclasses import dataclass

from gateway.config import (
    AUTH_SERVICE_URL,
    INVENTORY_SERVICE_URL,
    PRODUCT_SERVICE_URL,
    PROFILE_SERVICE_URL,
)


@dataclass(frozen=True)
class ProxyRoute:
    name: str
    prefix: str
    target: str
    replacement: str = ""

    def matches(self, path: str) -> bool:
        return path == self.prefix or path.startswith(self.prefix + "/")

    def rewrite(self, path: str) -> str:
        rewritten = self.replacement + path[len(self.prefix):]
        return rewritten or "/"


class RouteTable:
    def __init__(self, routes: list[ProxyRoute]):
        self.routes = list(routes)

    def resolve(self, path: str) -> tuple[ProxyRoute, str] | None:
        """(route, backend path) for the first matching route, or None."""
        for route in self.routes:
            if route.matches(path):
                return route, route.rewrite(path)
        return None

    def targets(self) -> dict[str, str]:
        return {route.name: route.target for route in self.routes}


def default_routes(
    auth: str = AUTH_SERVICE_URL,
    profile: str = PROFILE_SERVICE_URL,
    products: str = PRODUCT_SERVICE_URL,
    inventory: str = INVENTORY_SERVICE_URL,
) -> RouteTable:
    return RouteTable(
        [
            ProxyRoute("auth", "/api/auth", auth.rstrip("/")),
            ProxyRoute("profile", "/api/profile", profile.rstrip("/"), "/profile"),
            ProxyRoute("products", "/api/products", products.rstrip("/"), "/products"),
            ProxyRoute("inventory", "/api/inventory", inventory.rstrip("/"), "/inventory"),
        ]
    )
