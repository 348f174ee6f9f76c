"""
Environment-driven settings.

Values are read on every call so tests can flip them with `monkeypatch.setenv`.
"""

from __future__ import annotations

import os

DEFAULT_SEED_SOURCE_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"
DEFAULT_SEED_TIMEOUT_S = 30.0
DEFAULT_CORS_ALLOW_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
)
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def seed_source_url() -> str:
    return _env_str("SEED_SOURCE_URL", DEFAULT_SEED_SOURCE_URL)


def seed_timeout_s() -> float:
    return _env_float("SEED_TIMEOUT_S", DEFAULT_SEED_TIMEOUT_S)


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or list(DEFAULT_CORS_ALLOW_ORIGINS)


def host() -> str:
    return _env_str("HOST", DEFAULT_HOST)


def port() -> int:
    value = _env_int("PORT", DEFAULT_PORT)
    if not 0 < value < 65536:
        return DEFAULT_PORT
    return value
