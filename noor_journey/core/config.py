"""Application settings and environment helpers."""

from __future__ import annotations

import os
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# Family roster --------------------------------------------------------------
DEFAULT_ROSTER = [
    "Bilal Qureshi",
    "Umar Qureshi",
    "Abdullah Qureshi",
    "Abir Qureshi",
    "Ammar Qureshi",
    "Arif Qureshi",
    "Hoorab",
    "Amna",
    "Lareb",
    "Mama",
]

# Duplicates are kept so roster validation can reject them at startup.
ROSTER = _split_csv(os.getenv("NOOR_ROSTER")) or list(DEFAULT_ROSTER)


# Application security -------------------------------------------------------
SECRET_KEY = _require_env("NOOR_SECRET_KEY")
ADMIN_PASSWORD = os.getenv("NOOR_ADMIN_PASSWORD", "changeme")

_frontend_origins = _split_csv(os.getenv("FRONTEND_ORIGIN"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

_local_dev_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
]

ALLOWED_CORS_ORIGINS = _unique(
    [
        *_frontend_origins,
        *_additional_origins,
        *_local_dev_origins,
    ]
)

COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")


# Runtime behaviour ----------------------------------------------------------
DATABASE_URL = os.getenv("NOOR_DATABASE_URL", "")
DB_RESET = _env_bool("NOOR_DB_RESET", False)
POLL_INTERVAL_SECONDS = _env_float("NOOR_POLL_INTERVAL_SECONDS", 5.0)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "console")


__all__ = [
    "ADMIN_PASSWORD",
    "ALLOWED_CORS_ORIGINS",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DB_RESET",
    "DEFAULT_ROSTER",
    "LOG_FORMAT",
    "LOG_LEVEL",
    "POLL_INTERVAL_SECONDS",
    "ROSTER",
    "SECRET_KEY",
]
