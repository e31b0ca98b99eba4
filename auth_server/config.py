"""
Credential Authority configuration.
Signing secret and credential lifetime come from env; defaults are for local composition only.
"""
import os
import re

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str) -> int:
    """Parse '3600', '90s', '30m', '1h' or '7d' into seconds. Raises ValueError otherwise."""
    match = _DURATION_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    seconds = int(match.group(1)) * _UNIT_SECONDS[match.group(2)]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return seconds


# HMAC secret used to sign credentials (HS256)
JWT_SECRET = os.environ.get("JWT_SECRET", "super-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"

# Credential lifetime, e.g. "1h" or "3600"
TOKEN_EXPIRY = os.environ.get("TOKEN_EXPIRY", "1h")
TOKEN_TTL_SECONDS = parse_duration(TOKEN_EXPIRY)

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "3001"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
