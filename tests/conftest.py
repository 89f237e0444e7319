"""Shared test fixtures."""

from __future__ import annotations

import os

os.environ.setdefault("NOOR_SECRET_KEY", "test-secret-key")
os.environ.setdefault("NOOR_DATABASE_URL", "sqlite://")
os.environ.setdefault("NOOR_POLL_INTERVAL_SECONDS", "0")

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from noor_journey.app import create_app
from noor_journey.core.database import make_engine
from noor_journey.services import (
    MemoryCredentialStore,
    MemoryProgressStore,
    Roster,
    SyncNotifier,
)

DAY_MS = 86_400_000
START_MS = 1_760_000_000_000

FAMILY = ["Bilal Qureshi", "Umar Qureshi", "Hoorab", "Amna"]
ADMIN_PASSWORD = "let-me-in"


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, *, days: int = 0, ms: int = 0) -> int:
        self.now += days * DAY_MS + ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def roster() -> Roster:
    return Roster(FAMILY)


@pytest.fixture
def notifier() -> SyncNotifier:
    return SyncNotifier()


@pytest.fixture
def memory_store(roster: Roster, notifier: SyncNotifier, clock: FakeClock) -> MemoryProgressStore:
    return MemoryProgressStore(roster, notifier, clock=clock)


@pytest.fixture
def memory_credentials(roster: Roster) -> MemoryCredentialStore:
    return MemoryCredentialStore(roster)


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = make_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def app(engine: Engine, clock: FakeClock):
    return create_app(
        engine=engine,
        roster=FAMILY,
        poll_interval=0,
        clock=clock,
        admin_password=ADMIN_PASSWORD,
        secret_key="test-secret-key",
    )


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def sign_in(client: TestClient, name: str, pin: str = "1234") -> None:
    """Drive the gate to ``authenticated`` for ``name``, setting the PIN if needed."""

    assert client.post("/gate/select", json={"name": name}).status_code == 200
    state = client.post("/gate/lookup").json()["state"]
    if state == "awaiting_first_pin":
        response = client.post("/gate/pin/setup", json={"pin": pin, "confirm_pin": pin})
    else:
        response = client.post("/gate/pin", json={"pin": pin})
    assert response.status_code == 200, response.text
    assert response.json()["state"] == "authenticated"
