"""
Logout endpoint (POST /logout): revoke the presented bearer credential.
Revocation is by value and idempotent; the credential does not have to be valid to be revoked.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from auth_server.deps import get_authority, get_bearer_token
from auth_server.tokens import CredentialAuthority

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/logout")
def logout(
    token: str | None = Depends(get_bearer_token),
    authority: CredentialAuthority = Depends(get_authority),
):
    if token is None:
        raise HTTPException(status_code=400, detail="No token provided")
    if not authority.revoke(token):
        logger.debug("Logout for an already revoked token")
    return {"message": "Logged out successfully"}
