"""
Credential Authority (auth-service).
POST /login, POST /logout, GET /validate, GET /health. Port 3001 by default.
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request

from auth_server.config import HOST, LOG_LEVEL, PORT
from auth_server.errors import install_error_handlers
from auth_server.login import router as login_router
from auth_server.logout import router as logout_router
from auth_server.tokens import CredentialAuthority
from auth_server.validate import router as validate_router

logger = logging.getLogger(__name__)

SERVICE_NAME = "auth-service"


def create_app(authority: CredentialAuthority | None = None) -> FastAPI:
    """Build the app around its own authority (users + revocation set); one per process or test."""
    app = FastAPI(title="Auth Service", version="1.0.0")
    app.state.authority = authority if authority is not None else CredentialAuthority()
    install_error_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    app.include_router(login_router, tags=["login"])
    app.include_router(logout_router, tags=["logout"])
    app.include_router(validate_router, tags=["validate"])

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {
            "service": SERVICE_NAME,
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL)
    logger.info("Test users: alice/password123 (admin), bob/password456, charlie/password789")
    uvicorn.run(
        "auth_server.main:app",
        host=HOST,
        port=PORT,
        reload=True,
    )
