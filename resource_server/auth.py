"""
Remote credential verification for the resource services.
Each protected request forwards its Authorization header to the Credential Authority's
GET /validate and maps the answer to one of four outcomes:

  Unauthenticated       no credential presented (no network call)     -> 401
  Unauthorized          authority answered valid=false                -> 401
  AuthorityUnavailable  transport failure or malformed answer         -> 503
  Authorized            principal attached to the request             -> handler runs
"""
import logging
from dataclasses import dataclass
from typing import Protocol, Union

import httpx
from fastapi import Depends, HTTPException, Request, status

from resource_server.config import AUTH_SERVICE_URL, AUTH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class Principal:
    id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass(frozen=True)
class Authorized:
    principal: Principal


@dataclass(frozen=True)
class Unauthenticated:
    pass


@dataclass(frozen=True)
class Unauthorized:
    reason: str | None = None


@dataclass(frozen=True)
class AuthorityUnavailable:
    detail: str


VerificationOutcome = Union[Authorized, Unauthenticated, Unauthorized, AuthorityUnavailable]


class CredentialVerifier(Protocol):
    async def verify(self, authorization: str | None) -> VerificationOutcome:
        ...


def parse_validation_response(data: object) -> VerificationOutcome:
    """Interpret the authority's JSON answer. Anything not matching the contract is AuthorityUnavailable."""
    if not isinstance(data, dict) or not isinstance(data.get("valid"), bool):
        return AuthorityUnavailable("malformed response from auth service")
    if not data["valid"]:
        reason = data.get("error")
        return Unauthorized(reason if isinstance(reason, str) else None)

    user = data.get("user")
    if not isinstance(user, dict):
        return AuthorityUnavailable("auth service response has no user")
    user_id = user.get("id")
    username = user.get("username")
    role = user.get("role")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        return AuthorityUnavailable("auth service response has no user id")
    if not isinstance(username, str) or not isinstance(role, str):
        return AuthorityUnavailable("auth service response has incomplete user")
    return Authorized(Principal(id=user_id, username=username, role=role))


class RemoteVerifier:
    """Delegates verification to the Credential Authority over HTTP, with a bounded timeout."""

    def __init__(
        self,
        base_url: str = AUTH_SERVICE_URL,
        *,
        timeout: float = AUTH_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def verify(self, authorization: str | None) -> VerificationOutcome:
        if not authorization or not authorization.strip():
            return Unauthenticated()
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.get(
                    f"{self.base_url}/validate",
                    headers={"Authorization": authorization},
                )
            data = response.json()
        except httpx.HTTPError as e:
            return AuthorityUnavailable(f"{type(e).__name__}: {e}")
        except ValueError:
            return AuthorityUnavailable(f"non-JSON response from auth service (status {response.status_code})")
        return parse_validation_response(data)


def get_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.verifier


async def require_principal(
    request: Request,
    verifier: CredentialVerifier = Depends(get_verifier),
) -> Principal:
    """Dependency: authenticated principal, or 401/503 as described above."""
    outcome = await verifier.verify(request.headers.get("Authorization"))
    if isinstance(outcome, Authorized):
        request.state.principal = outcome.principal
        return outcome.principal
    if isinstance(outcome, Unauthenticated):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(outcome, Unauthorized):
        logger.debug("Credential rejected by auth service: %s", outcome.reason)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.warning("Auth validation failed: %s", outcome.detail)
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Auth service unavailable")


def require_admin(principal: Principal = Depends(require_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return principal
