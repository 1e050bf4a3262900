from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from currencypro.core.errors import InvalidRate, NotFound, UnknownCurrency
from currencypro.models.history import HistoryPoint, HistorySummary
from currencypro.services.history import summarize
from currencypro.services.money import round6
from currencypro.services.rates.table import utcnow
from currencypro.services.state import CurrencyState, get_state

router = APIRouter(prefix="/api/history", tags=["history"])


class PairHistory(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_currency: str = Field(..., alias="from")
    to_currency: str = Field(..., alias="to")
    period: str
    history: List[HistoryPoint]
    summary: HistorySummary


class PairHistoryOut(BaseModel):
    success: bool = True
    data: PairHistory
    timestamp: datetime


class CurrencyHistory(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    currency: str
    history: List[HistoryPoint]
    current_rate: float = Field(..., alias="currentRate")
    total_entries: int = Field(..., alias="totalEntries")


class CurrencyHistoryOut(BaseModel):
    success: bool = True
    data: CurrencyHistory
    timestamp: datetime


def _rounded(points: List[HistoryPoint]) -> List[HistoryPoint]:
    if points and round6(min(p.rate for p in points)) <= 0:
        raise InvalidRate("History rates are below the 6-decimal precision of the API")
    return [
        HistoryPoint(
            date=p.date, rate=round6(p.rate), change_percent=round6(p.change_percent)
        )
        for p in points
    ]


def _rounded_summary(summary: HistorySummary) -> HistorySummary:
    return HistorySummary(
        current=round6(summary.current),
        highest=round6(summary.highest),
        lowest=round6(summary.lowest),
        average_change=round6(summary.average_change),
    )


@router.get(
    "/{from_currency}/{to_currency}",
    response_model=PairHistoryOut,
    summary="Simulated rate history for a currency pair",
)
async def pair_history(
    from_currency: str,
    to_currency: str,
    days: Optional[int] = Query(
        None, ge=1, le=365, description="Trailing days (defaults to settings.history_days)"
    ),
    state: CurrencyState = Depends(get_state),
):
    """Return `days + 1` points (oldest first) plus summary statistics.

    The series for a given (from, to, days) is generated on first request and
    served unchanged afterwards. The summary is computed before rounding.
    """
    days = days or state.history.default_days
    points = state.history.for_pair(from_currency, to_currency, days)
    return PairHistoryOut(
        data=PairHistory(
            from_currency=from_currency.upper(),
            to_currency=to_currency.upper(),
            period=f"{days} days",
            history=_rounded(points),
            summary=_rounded_summary(summarize(points)),
        ),
        timestamp=utcnow(),
    )


@router.get(
    "/{currency}",
    response_model=CurrencyHistoryOut,
    summary="Startup history of one currency against the base currency",
)
async def currency_history(currency: str, state: CurrencyState = Depends(get_state)):
    try:
        entry = state.rates.get(currency)
    except UnknownCurrency as e:
        raise NotFound(f"Currency not found: {e.code}") from e
    points = state.history.for_currency(entry.code)
    if points is None:
        raise NotFound(f"No history available for {entry.code}")
    return CurrencyHistoryOut(
        data=CurrencyHistory(
            currency=entry.code,
            history=_rounded(points),
            current_rate=entry.rate,
            total_entries=len(points),
        ),
        timestamp=utcnow(),
    )
