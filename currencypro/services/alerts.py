"""Alert registry.

Alerts are append-only threshold watches (currency, target rate, direction,
optional email). Nothing evaluates them against the rate table and they never
become inactive; removing an alert is a client-side concern only.

Currency validation is a policy switch (settings.validate_alert_currency):
when on, the currency must exist in the rate table; when off, any code is
stored as given.

Ids come from the creation time in milliseconds. Two alerts created within the
same millisecond get consecutive ids so ids stay unique inside one registry.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from currencypro.core.errors import MissingParameter, UnknownCurrency
from currencypro.models.alerts import Alert
from currencypro.models.constants import AlertDirection
from currencypro.services.rates.table import Clock, RateTable, utcnow

logger = logging.getLogger("currencypro.alerts")


def _millis() -> int:
    return time.time_ns() // 1_000_000


class AlertRegistry:
    def __init__(
        self,
        table: RateTable,
        validate_currency: bool = True,
        clock: Clock = utcnow,
        ticks: Callable[[], int] = _millis,
    ):
        self._table = table
        self.validate_currency = validate_currency
        self._clock = clock
        self._ticks = ticks
        self._alerts: List[Alert] = []
        self._last_tick = 0

    def __len__(self) -> int:
        return len(self._alerts)

    def _next_id(self) -> str:
        tick = max(self._ticks(), self._last_tick + 1)
        self._last_tick = tick
        return str(tick)

    def create(
        self,
        currency: str,
        target_rate: float,
        direction: AlertDirection,
        email: Optional[str] = None,
    ) -> Alert:
        currency = currency.strip().upper()
        if not currency:
            raise MissingParameter("currency is required")
        if self.validate_currency and currency not in self._table:
            raise UnknownCurrency(currency)
        alert = Alert(
            id=self._next_id(),
            currency=currency,
            target_rate=target_rate,
            direction=direction,
            email=email,
            created_at=self._clock(),
            active=True,
        )
        self._alerts.append(alert)
        logger.info(
            "alert %s created: %s %s %s",
            alert.id,
            alert.currency,
            alert.direction,
            alert.target_rate,
        )
        return alert

    def list(self) -> List[Alert]:
        return list(self._alerts)
