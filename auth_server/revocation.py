"""
Revocation set: credential values invalidated before natural expiry.
Grows only; lives for the process lifetime. Safe for concurrent use.
"""
import threading


class RevocationSet:
    def __init__(self) -> None:
        self._tokens: set[str] = set()
        self._lock = threading.Lock()

    def add(self, token: str) -> bool:
        """Record token as revoked. Returns True if it was not already revoked."""
        with self._lock:
            if token in self._tokens:
                return False
            self._tokens.add(token)
            return True

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._tokens

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
