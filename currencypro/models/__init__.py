"""Pydantic domain models for the CurrencyPro API."""

from .constants import (
    BASE_CURRENCY,
    DEFAULT_RATES,
    AlertDirection,
)  # re-export
from .rates import RateEntry
from .history import HistoryPoint, HistorySummary
from .alerts import Alert

__all__ = [
    "BASE_CURRENCY",
    "DEFAULT_RATES",
    "AlertDirection",
    "RateEntry",
    "HistoryPoint",
    "HistorySummary",
    "Alert",
]
