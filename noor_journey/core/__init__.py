"""Core configuration and infrastructure helpers."""

from .config import (
    ADMIN_PASSWORD,
    ALLOWED_CORS_ORIGINS,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DB_RESET,
    LOG_FORMAT,
    LOG_LEVEL,
    POLL_INTERVAL_SECONDS,
    ROSTER,
    SECRET_KEY,
)
from .database import make_engine
from .logging import setup_logging
from .time import now_ms, utcnow

__all__ = [
    "ADMIN_PASSWORD",
    "ALLOWED_CORS_ORIGINS",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DB_RESET",
    "LOG_FORMAT",
    "LOG_LEVEL",
    "POLL_INTERVAL_SECONDS",
    "ROSTER",
    "SECRET_KEY",
    "make_engine",
    "now_ms",
    "setup_logging",
    "utcnow",
]
