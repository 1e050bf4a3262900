"""Money / rounding helpers.

Centralized so conversion and history responses use identical rounding
semantics. Internal arithmetic stays at full float precision; rounding only
happens when values leave the API.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from currencypro.models.constants import API_DECIMALS

_QUANTUM = Decimal(1).scaleb(-API_DECIMALS)  # 0.000001


def round6(value: float) -> float:
    try:
        return float(Decimal(str(value)).quantize(_QUANTUM, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # Too many integer digits for the decimal context; no fraction left to round.
        return value
