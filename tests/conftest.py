"""Shared fixtures: fresh settings, state and app per test."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from currencypro.core.config import Settings
from currencypro.main import create_app
from currencypro.services.rates.table import RateTable

SCENARIO_RATES = {"TND": 1.0, "EUR": 3.475, "USD": 2.98}


class FakeClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, history_seed=1234, debug=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def table(clock) -> RateTable:
    return RateTable(SCENARIO_RATES, "TND", clock=clock)


@pytest.fixture
def app(settings):
    return create_app(settings_override=settings)


@pytest.fixture
def client(app):
    return TestClient(app)
