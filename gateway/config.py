"""
API gateway configuration: backend base URLs per route prefix.
"""
import os

AUTH_SERVICE_URL = os.environ.get("AUTH_SERVICE_URL", "http://localhost:3001").rstrip("/")
PROFILE_SERVICE_URL = os.environ.get("PROFILE_SERVICE_URL", "http://localhost:3002").rstrip("/")
PRODUCT_SERVICE_URL = os.environ.get("PRODUCT_SERVICE_URL", "http://localhost:3003").rstrip("/")
INVENTORY_SERVICE_URL = os.environ.get("INVENTORY_SERVICE_URL", "http://localhost:3004").rstrip("/")

# Upper bound on a single proxied exchange (seconds)
PROXY_TIMEOUT_SECONDS = float(os.environ.get("PROXY_TIMEOUT_SECONDS", "30"))

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "3000"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
