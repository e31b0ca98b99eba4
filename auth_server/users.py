"""
Principal directory for the Credential Authority.
In-memory, seeded at construction; no create/delete operations.
Secrets are compared in plaintext (demo simplification, see DESIGN.md).
"""
import threading
from dataclasses import dataclass

ROLE_ADMIN = "admin"
ROLE_USER = "user"


@dataclass(frozen=True)
class Principal:
    id: int
    username: str
    role: str

    def public_view(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role}


@dataclass(frozen=True)
class UserRecord:
    principal: Principal
    password: str


DEFAULT_USERS: tuple[UserRecord, ...] = (
    UserRecord(Principal(1, "alice", ROLE_ADMIN), "password123"),
    UserRecord(Principal(2, "bob", ROLE_USER), "password456"),
    UserRecord(Principal(3, "charlie", ROLE_USER), "password789"),
)


class UserDirectory:
    def __init__(self, users: tuple[UserRecord, ...] | list[UserRecord] = DEFAULT_USERS):
        self._lock = threading.Lock()
        self._users = {u.principal.username: u for u in users}

    def authenticate(self, username: str, password: str) -> Principal | None:
        """Exact username + password match; returns the principal or None."""
        with self._lock:
            record = self._users.get(username)
        if record is None or record.password != password:
            return None
        return record.principal

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
