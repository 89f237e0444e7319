"""Database configuration and engine helpers."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from .config import DATABASE_URL

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_DATA_DIR = _PROJECT_ROOT / "data"


def default_database_url() -> str:
    if DATABASE_URL:
        return DATABASE_URL
    _DATA_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{_DATA_DIR / 'app.db'}"


def make_engine(url: str | None = None) -> Engine:
    """Create an engine; ``sqlite://`` yields a shared in-memory database."""

    url = url or default_database_url()
    if url == "sqlite://":
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


__all__ = ["default_database_url", "make_engine"]
