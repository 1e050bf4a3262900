from __future__ import annotations

"""Application state container.

One CurrencyState is built per application by `create_app` and stored on
`app.state.currency`. Route handlers receive it through the `get_state`
dependency instead of reaching for module-level globals, so every app (and
every test) owns an isolated rate table, history store and alert registry.
"""
import random
import time
from dataclasses import dataclass, field

from fastapi import Request

from currencypro.core.config import Settings
from currencypro.services.alerts import AlertRegistry
from currencypro.services.history import HistoryStore
from currencypro.services.rates.table import RateTable


@dataclass
class CurrencyState:
    settings: Settings
    rates: RateTable
    history: HistoryStore
    alerts: AlertRegistry
    rng: random.Random
    started_at: float = field(default_factory=time.monotonic)

    def uptime(self) -> float:
        return time.monotonic() - self.started_at


def build_state(settings: Settings) -> CurrencyState:
    rng = random.Random(settings.history_seed)
    rates = RateTable(settings.initial_rates, settings.base_currency)
    history = HistoryStore(rates, settings.history_days, rng=rng)
    history.prime()
    alerts = AlertRegistry(rates, validate_currency=settings.validate_alert_currency)
    return CurrencyState(
        settings=settings, rates=rates, history=history, alerts=alerts, rng=rng
    )


def get_state(request: Request) -> CurrencyState:
    return request.app.state.currency
