"""
Validation endpoint (GET /validate), called by every resource service on each protected request.
200 {valid: true, user} or 401 {valid: false, error}.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from auth_server.deps import get_authority, get_bearer_token
from auth_server.tokens import CredentialAuthority

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/validate")
def validate(
    token: str | None = Depends(get_bearer_token),
    authority: CredentialAuthority = Depends(get_authority),
):
    result = authority.verify(token)
    if not result.valid:
        logger.debug("Validation rejected: %s", result.reason)
        raise HTTPException(
            status_code=401,
            detail={"valid": False, "error": result.reason},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"valid": True, "user": result.user_view()}
