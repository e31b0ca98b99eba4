"""
Pytest configuration for resource_server.
Verification and notification collaborators are replaced by in-process stand-ins so no test
needs a running auth or product service.
"""
import httpx
import pytest

from auth_server.main import create_app as create_auth_app
from auth_server.tokens import CredentialAuthority
from resource_server.auth import (
    AuthorityUnavailable,
    Authorized,
    Principal,
    RemoteVerifier,
    Unauthenticated,
    Unauthorized,
)

ALICE = Principal(id=1, username="alice", role="admin")
BOB = Principal(id=2, username="bob", role="user")


class StubVerifier:
    """Maps bearer tokens to principals; any other credential is rejected."""

    def __init__(self, principals=None, unavailable=False):
        self.principals = principals if principals is not None else {"alice-token": ALICE, "bob-token": BOB}
        self.unavailable = unavailable
        self.calls = []

    async def verify(self, authorization):
        self.calls.append(authorization)
        if not authorization:
            return Unauthenticated()
        if self.unavailable:
            return AuthorityUnavailable("stubbed outage")
        principal = self.principals.get(authorization.removeprefix("Bearer "))
        if principal is None:
            return Unauthorized("Invalid or expired token")
        return Authorized(principal)


class RecordingNotifier:
    def __init__(self):
        self.sent = []
        self.closed = False

    def dispatch(self, product_id, stock):
        self.sent.append((product_id, stock))

    async def aclose(self):
        self.closed = True


@pytest.fixture
def verifier():
    return StubVerifier()


@pytest.fixture
def unavailable_verifier():
    return StubVerifier(unavailable=True)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def alice_headers():
    return {"Authorization": "Bearer alice-token"}


@pytest.fixture
def bob_headers():
    return {"Authorization": "Bearer bob-token"}


@pytest.fixture
def authority():
    return CredentialAuthority(secret="resource-test-secret", ttl_seconds=3600)


@pytest.fixture
def remote_verifier(authority):
    """RemoteVerifier talking to a real Credential Authority app in-process."""
    transport = httpx.ASGITransport(app=create_auth_app(authority))
    return RemoteVerifier("http://auth-service", transport=transport)
