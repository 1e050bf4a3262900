from __future__ import annotations

"""In-memory rate table.

Holds one RateEntry per supported currency, keyed by upper-case code. Rates are
the value of one unit of the currency in base-currency units, so the base
currency itself is pinned at 1.

Entries are created once from configuration and never deleted; `update` and
`drift` replace entries wholesale, so a RateEntry handed out earlier keeps the
values it had when read. No locking: all access happens on the event loop and
concurrent updates resolve as last writer wins.
"""
import logging
import math
import random
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Mapping, Optional

from currencypro.core.errors import BaseCurrencyLocked, InvalidRate, UnknownCurrency
from currencypro.models.rates import RateEntry

logger = logging.getLogger("currencypro.rates")

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RateTable:
    def __init__(
        self,
        rates: Mapping[str, float],
        base_currency: str,
        clock: Clock = utcnow,
    ):
        self._clock = clock
        self.base_currency = base_currency.upper()
        now = clock()
        self._entries: Dict[str, RateEntry] = {
            code.upper(): RateEntry(code=code, rate=rate, last_updated=now)
            for code, rate in rates.items()
        }
        if self.base_currency not in self._entries:
            raise ValueError(f"base currency {self.base_currency} not in rate table")

    # Read ------------------------------------------------------
    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def codes(self) -> List[str]:
        return list(self._entries)

    def get(self, code: str) -> RateEntry:
        entry = self._entries.get(code.upper())
        if entry is None:
            raise UnknownCurrency(code.upper())
        return entry

    def get_all(self) -> Dict[str, RateEntry]:
        return dict(self._entries)

    def rate(self, code: str) -> float:
        return self.get(code).rate

    # Write -----------------------------------------------------
    def update(self, code: str, new_rate: float) -> RateEntry:
        """Overwrite the rate of an existing currency and refresh lastUpdated.

        Unknown codes are rejected (no dynamic registration). The base currency
        only accepts its fixed value of 1, which just refreshes the timestamp.
        """
        code = code.upper()
        if code not in self._entries:
            raise UnknownCurrency(code)
        if not math.isfinite(new_rate) or new_rate <= 0:
            raise InvalidRate(f"Rate must be a finite positive number, got {new_rate}")
        if code == self.base_currency and new_rate != 1.0:
            raise BaseCurrencyLocked(code)
        previous = self._entries[code].rate
        entry = RateEntry(code=code, rate=float(new_rate), last_updated=self._clock())
        self._entries[code] = entry
        logger.info("rate updated %s: %s -> %s", code, previous, entry.rate)
        return entry

    def drift(self, max_pct: float, rng: Optional[random.Random] = None) -> Dict[str, float]:
        """Nudge every non-base rate by a uniform variation in [-max_pct, max_pct].

        Returns the new rates keyed by code.
        """
        rng = rng or random.Random()
        now = self._clock()
        changed: Dict[str, float] = {}
        for code, entry in self._entries.items():
            if code == self.base_currency:
                continue
            new_rate = entry.rate * (1 + rng.uniform(-max_pct, max_pct))
            self._entries[code] = RateEntry(code=code, rate=new_rate, last_updated=now)
            changed[code] = new_rate
        logger.debug("rates drifted", extra={"fields": {"rates": changed}})
        return changed
