"""
Login endpoint (POST /login): exchange username + password for a signed credential.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from auth_server.deps import get_authority
from auth_server.tokens import CredentialAuthority

logger = logging.getLogger(__name__)
router = APIRouter()


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


@router.post("/login")
def login(
    body: LoginRequest | None = None,
    authority: CredentialAuthority = Depends(get_authority),
):
    """Returns the credential and a public view of the principal (never the password)."""
    if body is None or not body.username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    issued = authority.issue(body.username, body.password)
    if issued is None:
        logger.info("Login failed for user '%s'", body.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info("User '%s' logged in successfully", issued.principal.username)
    return {
        "message": "Login successful",
        "token": issued.token,
        "user": issued.principal.public_view(),
    }
