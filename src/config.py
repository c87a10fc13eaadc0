"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (e.g.
READ_URL_PREFIX, AUTH_TIMESTAMP_CACHE_SIZE, timeouts and intervals).
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Storage locations; the auth file lives at <prefix><bucket>-auth/authTimestamp
READ_URL_PREFIX = os.environ.get("READ_URL_PREFIX", "http://localhost:8008/read/").strip()
WRITE_URL_PREFIX = os.environ.get("WRITE_URL_PREFIX", "http://localhost:8008/write/").strip()
STORAGE_TOKEN = os.environ.get("STORAGE_TOKEN", "").strip()

# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", False)
HTTP_TIMEOUT = _env_float("HTTP_TIMEOUT", 20.0)

# Cache sizing and eviction reporting
AUTH_TIMESTAMP_CACHE_SIZE = max(1, _env_int("AUTH_TIMESTAMP_CACHE_SIZE", 50_000))
EVICTION_REPORT_INTERVAL = _env_float("EVICTION_REPORT_INTERVAL", 600.0)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
