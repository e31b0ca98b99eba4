"""
Pytest configuration for auth_server. Each test gets its own authority so revocations don't leak.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("TOKEN_EXPIRY", "1h")

import pytest
from fastapi.testclient import TestClient

from auth_server.main import create_app
from auth_server.tokens import CredentialAuthority


@pytest.fixture
def authority():
    return CredentialAuthority(secret="test-secret", ttl_seconds=3600)


@pytest.fixture
def client(authority):
    with TestClient(create_app(authority)) as c:
        yield c
