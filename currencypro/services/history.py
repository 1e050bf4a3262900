"""Simulated rate history.

There is no real data source: a series is `baseRate * (1 + u)` for each of the
trailing `days` days plus today, with `u` drawn independently per day from
uniform(-0.02, 0.02). It is not a random walk, so consecutive days can swing
by up to 4% of the base rate.

Caching policy: series are generated once and then frozen.
  - At startup one series per non-base currency against the base currency is
    generated (`HistoryStore.prime`), served by the single-currency endpoint.
  - Pair series are generated on first request for a (from, to, days) key and
    returned unchanged afterwards.
Rate updates never regenerate a cached series.
"""

from __future__ import annotations

import logging
import math
import random
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from currencypro.core.errors import InvalidRate, UnknownCurrency
from currencypro.models.constants import HISTORY_JITTER
from currencypro.models.history import HistoryPoint, HistorySummary
from currencypro.services.rates.table import RateTable

logger = logging.getLogger("currencypro.history")


def generate_history(
    table: RateTable,
    from_currency: str,
    to_currency: str,
    days: int,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> List[HistoryPoint]:
    """Return `days + 1` points ordered oldest first, the last one dated today."""
    if days < 0:
        raise ValueError("days must be >= 0")
    rng = rng or random.Random()
    today = today or date.today()
    base_rate = table.rate(to_currency) / table.rate(from_currency)
    low, high = base_rate * (1 - HISTORY_JITTER), base_rate * (1 + HISTORY_JITTER)
    if not (math.isfinite(high) and low > 0):
        raise InvalidRate(
            f"History for {from_currency.upper()}/{to_currency.upper()} is out of the "
            f"representable range (base rate {base_rate})"
        )

    points: List[HistoryPoint] = []
    for i in range(days, -1, -1):
        u = rng.uniform(-HISTORY_JITTER, HISTORY_JITTER)
        points.append(
            HistoryPoint(
                date=today - timedelta(days=i),
                rate=base_rate * (1 + u),
                change_percent=u * 100,
            )
        )
    return points


def summarize(points: Sequence[HistoryPoint]) -> HistorySummary:
    if not points:
        raise ValueError("cannot summarize an empty history")
    rates = [p.rate for p in points]
    return HistorySummary(
        current=points[-1].rate,
        highest=max(rates),
        lowest=min(rates),
        average_change=sum(abs(p.change_percent) for p in points) / len(points),
    )


PairKey = Tuple[str, str, int]


class HistoryStore:
    """Frozen history series for single currencies and currency pairs."""

    def __init__(
        self,
        table: RateTable,
        default_days: int,
        rng: Optional[random.Random] = None,
    ):
        self._table = table
        self.default_days = default_days
        self._rng = rng or random.Random()
        self._by_currency: Dict[str, List[HistoryPoint]] = {}
        self._by_pair: Dict[PairKey, List[HistoryPoint]] = {}

    def prime(self) -> None:
        """Generate the per-currency series (each against the base currency)."""
        base = self._table.base_currency
        for code in self._table.codes():
            if code == base:
                continue
            self._by_currency[code] = generate_history(
                self._table, base, code, self.default_days, rng=self._rng
            )
        logger.info(
            "history primed for %d currencies over %d days",
            len(self._by_currency),
            self.default_days,
        )

    def for_currency(self, code: str) -> Optional[List[HistoryPoint]]:
        """Startup series for `code`, or None when none exists (the base currency)."""
        series = self._by_currency.get(code.upper())
        return list(series) if series is not None else None

    def for_pair(
        self, from_currency: str, to_currency: str, days: Optional[int] = None
    ) -> List[HistoryPoint]:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()
        for code in (from_currency, to_currency):
            if code not in self._table:
                raise UnknownCurrency(code)
        days = self.default_days if days is None else days
        key = (from_currency, to_currency, days)
        series = self._by_pair.get(key)
        if series is None:
            series = generate_history(
                self._table, from_currency, to_currency, days, rng=self._rng
            )
            self._by_pair[key] = series
            logger.debug("history generated for %s/%s over %d days", *key)
        return list(series)
