from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from dining_backend.app import app, get_ledger
from dining_backend.ledger.config import LedgerConfig
from dining_backend.ledger.store import LedgerStore


class FakeClock:
    """Wall clock the tests can move forward by hand."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    # Monday 12:00
    return FakeClock(datetime(2024, 3, 4, 12, 0))


@pytest.fixture
def ledger_config(tmp_path) -> LedgerConfig:
    return LedgerConfig(data_dir=tmp_path / "ledger")


@pytest.fixture
def store(ledger_config, clock):
    with LedgerStore(ledger_config, clock=clock) as s:
        yield s


@pytest.fixture
def client(store):
    app.dependency_overrides[get_ledger] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
