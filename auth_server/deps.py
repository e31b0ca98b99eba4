"""
FastAPI dependencies shared by the Credential Authority routers.
"""
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth_server.tokens import CredentialAuthority

security = HTTPBearer(auto_error=False)


def get_authority(request: Request) -> CredentialAuthority:
    """The authority owned by this app instance (set by create_app)."""
    return request.app.state.authority


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    """Bearer token from the Authorization header, or None when absent or not Bearer."""
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials
