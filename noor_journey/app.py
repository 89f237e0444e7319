"""FastAPI application factory and configuration."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Callable, Iterable, Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel
from starlette.middleware.sessions import SessionMiddleware

from . import __version__
from . import models  # noqa: F401 - ensure models are registered with SQLModel
from .api import register_routes, setup_error_handlers
from .core import (
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
    make_engine,
    now_ms,
    setup_logging,
)
from .services import (
    Roster,
    SQLCredentialStore,
    SQLProgressStore,
    SyncNotifier,
    run_poller,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine: Engine = app.state.engine
    if DB_RESET:
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)

    poller: Optional[asyncio.Task] = None
    if app.state.poll_interval > 0:
        poller = asyncio.create_task(run_poller(app.state.notifier, app.state.poll_interval))
    logger.info("app_started", members=len(app.state.roster))
    try:
        yield
    finally:
        if poller is not None:
            poller.cancel()
            with suppress(asyncio.CancelledError):
                await poller


def create_app(
    *,
    engine: Optional[Engine] = None,
    roster: Optional[Iterable[str]] = None,
    poll_interval: float = POLL_INTERVAL_SECONDS,
    clock: Callable[[], int] = now_ms,
    admin_password: str = ADMIN_PASSWORD,
    secret_key: str = SECRET_KEY,
) -> FastAPI:
    setup_logging(LOG_LEVEL, LOG_FORMAT)

    family = Roster(ROSTER if roster is None else roster)
    engine = engine or make_engine()
    notifier = SyncNotifier()

    app = FastAPI(title="Noor Journey API", version=__version__, lifespan=lifespan)
    app.state.engine = engine
    app.state.roster = family
    app.state.notifier = notifier
    app.state.clock = clock
    app.state.poll_interval = poll_interval
    app.state.admin_password = admin_password
    app.state.progress_store = SQLProgressStore(family, engine, notifier, clock=clock)
    app.state.credentials = SQLCredentialStore(family, engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=secret_key,
        session_cookie="sid",
        https_only=COOKIE_SECURE,
        same_site=COOKIE_SAMESITE,
        domain=COOKIE_DOMAIN,
    )

    setup_error_handlers(app)
    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("noor_journey.app:app", host="127.0.0.1", port=3000, reload=True)
