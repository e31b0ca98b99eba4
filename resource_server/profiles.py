"""
Profile service. Port 3002 by default.
GET /profile/{user_id} (any authenticated principal), PUT /profile/{user_id} (owner or admin).
"""
import logging

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from resource_server.auth import CredentialVerifier, Principal, require_principal
from resource_server.config import HOST, LOG_LEVEL, PROFILE_PORT, service_port
from resource_server.seed import seed_profiles
from resource_server.service import build_app
from resource_server.stores import ProfileStore

logger = logging.getLogger(__name__)
router = APIRouter()


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: StrictStr | None = None
    full_name: StrictStr | None = Field(default=None, alias="fullName")
    bio: StrictStr | None = None


def get_profiles(request: Request) -> ProfileStore:
    return request.app.state.profiles


@router.get("/profile/{user_id}")
def get_profile(
    user_id: int,
    principal: Principal = Depends(require_principal),
    profiles: ProfileStore = Depends(get_profiles),
):
    profile = profiles.get(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("/profile/{user_id}")
def update_profile(
    user_id: int,
    body: ProfileUpdate | None = None,
    principal: Principal = Depends(require_principal),
    profiles: ProfileStore = Depends(get_profiles),
):
    """Only the provided, non-empty email / fullName / bio are applied."""
    if principal.id != user_id and not principal.is_admin:
        raise HTTPException(status_code=403, detail="You can only update your own profile")

    body = body or ProfileUpdate()
    profile = profiles.update(user_id, email=body.email, full_name=body.full_name, bio=body.bio)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    logger.info("Profile updated for user %s by '%s'", user_id, principal.username)
    return {"message": "Profile updated", "profile": profile}


def create_app(
    profiles: ProfileStore | None = None,
    verifier: CredentialVerifier | None = None,
) -> FastAPI:
    app = build_app(title="Profile Service", service_name="profile-service", verifier=verifier)
    app.state.profiles = profiles if profiles is not None else ProfileStore(seed_profiles())
    app.include_router(router, tags=["profile"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL)
    uvicorn.run(
        "resource_server.profiles:app",
        host=HOST,
        port=service_port(PROFILE_PORT),
        reload=True,
    )
