from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from currencypro.core.errors import InvalidRate, UnknownCurrency
from currencypro.services.money import round6

"""Currency conversion through the base-currency pivot.

`convert` is the pure arithmetic and keeps full float precision. `quote` is
what the API returns: the converted amount and the unit rate, each computed by
its own `convert` call and rounded to 6 decimals independently, so
`result / amount` is not guaranteed to equal `rate` exactly.
"""


class SupportsRateLookup(Protocol):
    base_currency: str

    def __contains__(self, code: object) -> bool: ...

    def rate(self, code: str) -> float: ...


@dataclass(frozen=True)
class Conversion:
    amount: float
    from_currency: str
    to_currency: str
    result: float
    rate: float
    timestamp: datetime


def convert(
    amount: float, from_currency: str, to_currency: str, table: SupportsRateLookup
) -> float:
    from_currency = from_currency.upper()
    to_currency = to_currency.upper()
    for code in (from_currency, to_currency):
        if code not in table:
            raise UnknownCurrency(code)

    if from_currency == to_currency:
        return amount
    if from_currency == table.base_currency:
        return amount / table.rate(to_currency)
    if to_currency == table.base_currency:
        return amount * table.rate(from_currency)
    return (amount * table.rate(from_currency)) / table.rate(to_currency)


def quote(
    amount: float,
    from_currency: str,
    to_currency: str,
    table: SupportsRateLookup,
    timestamp: datetime,
) -> Conversion:
    result = convert(amount, from_currency, to_currency, table)
    rate = convert(1, from_currency, to_currency, table)
    if not (math.isfinite(result) and math.isfinite(rate)):
        raise InvalidRate(
            f"Conversion of {amount} {from_currency.upper()} to {to_currency.upper()} "
            "is out of the representable range"
        )
    return Conversion(
        amount=amount,
        from_currency=from_currency.upper(),
        to_currency=to_currency.upper(),
        result=round6(result),
        rate=round6(rate),
        timestamp=timestamp,
    )
