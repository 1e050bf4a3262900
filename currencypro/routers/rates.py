from __future__ import annotations

from datetime import datetime
from typing import Dict

from fastapi import APIRouter, Depends, Path
from pydantic import AliasChoices, BaseModel, Field

from currencypro.core.errors import NotFound, UnknownCurrency
from currencypro.models.rates import RateEntry
from currencypro.services.rates.table import utcnow
from currencypro.services.state import CurrencyState, get_state

"""Rates router.

Endpoints:
    - GET  /api/rates          -> full rate table
    - GET  /api/rates/{code}   -> one entry (404 when unknown)
    - POST /api/rates/update   -> overwrite a rate {devise, taux}

Updates are unauthenticated and in-memory only; a restart restores the
configured rates.
"""

router = APIRouter(prefix="/api/rates", tags=["rates"])


class RateUpdateIn(BaseModel):
    code: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("devise", "code"),
        description="Currency code (e.g. EUR, USD)",
    )
    rate: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("taux", "rate"),
        description="Base-currency value of one unit of the currency",
    )


class RatesOut(BaseModel):
    success: bool = True
    data: Dict[str, RateEntry]
    timestamp: datetime


class RateOut(BaseModel):
    success: bool = True
    data: RateEntry


class RateUpdateOut(RateOut):
    message: str


@router.get("", response_model=RatesOut, summary="List all exchange rates")
async def list_rates(state: CurrencyState = Depends(get_state)):
    return RatesOut(data=state.rates.get_all(), timestamp=utcnow())


@router.post(
    "/update", response_model=RateUpdateOut, summary="Overwrite the rate of a currency"
)
async def update_rate(payload: RateUpdateIn, state: CurrencyState = Depends(get_state)):
    try:
        entry = state.rates.update(payload.code, payload.rate)
    except UnknownCurrency as e:
        raise NotFound(e.message) from e
    return RateUpdateOut(data=entry, message=f"Rate for {entry.code} updated")


@router.get("/{code}", response_model=RateOut, summary="Get the rate of one currency")
async def get_rate(
    code: str = Path(..., description="Currency code", examples=["EUR", "USD"]),
    state: CurrencyState = Depends(get_state),
):
    try:
        entry = state.rates.get(code)
    except UnknownCurrency as e:
        raise NotFound(f"Currency not found: {e.code}") from e
    return RateOut(data=entry)
