"""
API gateway: single public entry point in front of the auth, profile, product and inventory services.
/api/<service>/* is proxied by prefix; backend connection failures become 502 JSON errors.
Port 3000 by default.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from gateway.config import HOST, LOG_LEVEL, PORT, PROXY_TIMEOUT_SECONDS
from gateway.errors import install_error_handlers
from gateway.routes import RouteTable, default_routes

logger = logging.getLogger(__name__)

SERVICE_NAME = "api-gateway"
PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# Per-connection headers; the HTTP client sets Host and Content-Length for the backend hop
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
    }
)
# httpx hands back a decoded body, so the upstream content-encoding no longer applies
_DROP_FROM_RESPONSE = HOP_BY_HOP_HEADERS | {"content-encoding"}

ENDPOINTS = [
    "POST /api/auth/login",
    "POST /api/auth/logout",
    "GET  /api/auth/validate",
    "GET  /api/profile/:userId",
    "PUT  /api/profile/:userId",
    "GET  /api/products",
    "GET  /api/products/:id",
    "POST /api/products",
    "GET  /api/inventory",
    "GET  /api/inventory/:productId",
    "PUT  /api/inventory/:productId",
]


def raw_path(request: Request) -> str:
    """Path as sent by the client, percent-encoding intact."""
    raw = request.scope.get("raw_path")
    if raw:
        return raw.split(b"?", 1)[0].decode("latin-1")
    return request.url.path


async def forward(client: httpx.AsyncClient, request: Request, target: str, backend_path: str) -> Response:
    """Send the inbound request to target+backend_path unchanged; relay the backend response."""
    url = f"{target}{backend_path}"
    if request.url.query:
        url = f"{url}?{request.url.query}"
    headers = [(k, v) for k, v in request.headers.items() if k.lower() not in HOP_BY_HOP_HEADERS]
    body = await request.body()

    upstream = await client.request(request.method, url, headers=headers, content=body)

    response = Response(content=upstream.content, status_code=upstream.status_code)
    for key, value in upstream.headers.multi_items():
        if key.lower() not in _DROP_FROM_RESPONSE:
            response.headers.append(key, value)
    return response


def create_app(
    routes: RouteTable | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float = PROXY_TIMEOUT_SECONDS,
) -> FastAPI:
    """The gateway holds no session state; one shared HTTP client lives for the app lifespan."""
    routes = routes if routes is not None else default_routes()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
            app.state.http = client
            yield

    app = FastAPI(title="API Gateway", version="1.0.0", lifespan=lifespan)
    app.state.routes = routes
    install_error_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("Routing: %s %s", request.method, request.url.path)
        return await call_next(request)

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {
            "service": SERVICE_NAME,
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "routes": routes.targets(),
        }

    @app.api_route("/api", methods=PROXY_METHODS)
    @app.api_route("/api/{path:path}", methods=PROXY_METHODS)
    async def proxy(request: Request):
        resolved = routes.resolve(raw_path(request))
        if resolved is None:
            raise HTTPException(status_code=404, detail="API route not found")
        route, backend_path = resolved

        logger.info("-> Proxying to %s%s", route.target, backend_path)
        try:
            return await forward(request.app.state.http, request, route.target, backend_path)
        except httpx.RequestError as e:
            logger.error("Proxy error for %s: %s", route.target, e)
            return JSONResponse({"error": "Service unavailable", "service": route.target}, status_code=502)

    @app.get("/")
    @app.get("/{path:path}")
    def info():
        """Static gateway description for anything outside /api."""
        return {"name": "Mini E-Commerce API Gateway", "version": "1.0.0", "endpoints": ENDPOINTS}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL)
    for name, target in app.state.routes.targets().items():
        logger.info("  /api/%s/* -> %s", name, target)
    uvicorn.run(
        "gateway.main:app",
        host=HOST,
        port=PORT,
        reload=True,
    )
