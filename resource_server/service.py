"""
Common FastAPI shell for the resource services: error bodies, request log, /health,
and the verifier used by protected routes.
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request

from resource_server.auth import CredentialVerifier, RemoteVerifier
from resource_server.errors import install_error_handlers

logger = logging.getLogger(__name__)


def build_app(
    *,
    title: str,
    service_name: str,
    verifier: CredentialVerifier | None = None,
    lifespan=None,
) -> FastAPI:
    app = FastAPI(title=title, version="1.0.0", lifespan=lifespan)
    app.state.verifier = verifier if verifier is not None else RemoteVerifier()
    install_error_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("[%s] %s %s", service_name, request.method, request.url.path)
        return await call_next(request)

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {
            "service": service_name,
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app
