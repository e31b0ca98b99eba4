"""
Resource services configuration (profile, product, inventory).
Base URLs of the services they call are public identifiers, not secrets.
"""
import os

# Credential Authority; every protected request is validated here
AUTH_SERVICE_URL = os.environ.get("AUTH_SERVICE_URL", "http://localhost:3001").rstrip("/")

# Product service; target of the inventory -> product stock notification
PRODUCT_SERVICE_URL = os.environ.get("PRODUCT_SERVICE_URL", "http://localhost:3003").rstrip("/")

# Bounded waits on outbound calls (seconds)
AUTH_TIMEOUT_SECONDS = float(os.environ.get("AUTH_TIMEOUT_SECONDS", "5"))
NOTIFY_TIMEOUT_SECONDS = float(os.environ.get("NOTIFY_TIMEOUT_SECONDS", "5"))

# Default ports when each service is run as its own process
PROFILE_PORT = 3002
PRODUCT_PORT = 3003
INVENTORY_PORT = 3004

HOST = os.environ.get("HOST", "127.0.0.1")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def service_port(default: int) -> int:
    """PORT from env, else the service's default."""
    return int(os.environ.get("PORT", str(default)))
