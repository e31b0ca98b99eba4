"""
Credential Authority: issue, verify and revoke signed, time-bound credentials (HS256 JWTs).
A credential is valid iff it is not revoked, parses, carries a good signature and is unexpired.
"""
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable

import jwt

from auth_server.config import JWT_ALGORITHM, JWT_SECRET, TOKEN_TTL_SECONDS
from auth_server.revocation import RevocationSet
from auth_server.users import Principal, UserDirectory

logger = logging.getLogger(__name__)

REASON_MISSING = "No token provided"
REASON_REVOKED = "Token has been revoked"
REASON_INVALID = "Invalid or expired token"


@dataclass(frozen=True)
class IssuedCredential:
    token: str
    principal: Principal
    issued_at: int
    expires_at: int


@dataclass(frozen=True)
class Verification:
    valid: bool
    principal: Principal | None = None
    issued_at: int | None = None
    expires_at: int | None = None
    reason: str | None = None

    def user_view(self) -> dict:
        """Principal snapshot as carried by the credential, plus its iat/exp."""
        view = self.principal.public_view() if self.principal else {}
        view["iat"] = self.issued_at
        view["exp"] = self.expires_at
        return view


def _rejected(reason: str) -> Verification:
    return Verification(valid=False, reason=reason)


class CredentialAuthority:
    def __init__(
        self,
        users: UserDirectory | None = None,
        revoked: RevocationSet | None = None,
        *,
        secret: str = JWT_SECRET,
        ttl_seconds: int = TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.users = users if users is not None else UserDirectory()
        self.revoked = revoked if revoked is not None else RevocationSet()
        self._secret = secret
        self._ttl = ttl_seconds
        self._clock = clock

    def issue(self, username: str, password: str) -> IssuedCredential | None:
        """Return a fresh credential for a matching username/password, else None."""
        principal = self.users.authenticate(username, password)
        if principal is None:
            return None
        now = int(self._clock())
        exp = now + self._ttl
        payload = {
            "sub": str(principal.id),
            "username": principal.username,
            "role": principal.role,
            "iat": now,
            "exp": exp,
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        if isinstance(token, bytes):
            token = token.decode("utf-8")
        return IssuedCredential(token=token, principal=principal, issued_at=now, expires_at=exp)

    def verify(self, token: str | None) -> Verification:
        """Never raises: every failure is a valid=False result with a reason."""
        if not token:
            return _rejected(REASON_MISSING)
        # Revocation first: a revoked token stays rejected even while its signature is good
        if token in self.revoked:
            return _rejected(REASON_REVOKED)
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "iat", "exp"]},
            )
            principal = Principal(
                id=int(payload["sub"]),
                username=str(payload["username"]),
                role=str(payload["role"]),
            )
        except jwt.InvalidTokenError as e:
            logger.debug("Credential rejected: %s", e)
            return _rejected(REASON_INVALID)
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Credential has malformed claims: %s", e)
            return _rejected(REASON_INVALID)
        return Verification(
            valid=True,
            principal=principal,
            issued_at=payload["iat"],
            expires_at=payload["exp"],
        )

    def revoke(self, token: str) -> bool:
        """Idempotent. Returns True only the first time a value is revoked."""
        added = self.revoked.add(token)
        if added:
            logger.info("Credential revoked (revocation set size=%d)", len(self.revoked))
        return added
