from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field, field_validator

from currencypro.models.alerts import Alert
from currencypro.models.constants import AlertDirection
from currencypro.services.rates.table import utcnow
from currencypro.services.state import CurrencyState, get_state

"""Alerts router.

Alerts are recorded and listed only. There is no delete endpoint and no
evaluator; `active` is always true.
"""

router = APIRouter(prefix="/api/alerts", tags=["alerts"])


class AlertIn(BaseModel):
    currency: str = Field(..., min_length=1, description="Watched currency code")
    target_rate: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("targetRate", "target_rate"),
    )
    direction: AlertDirection = Field(
        ..., validation_alias=AliasChoices("type", "direction")
    )
    email: Optional[str] = Field(None, max_length=254)

    @field_validator("email")
    @classmethod
    def blank_email_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class AlertListOut(BaseModel):
    success: bool = True
    data: List[Alert]
    count: int
    timestamp: datetime


class AlertCreatedOut(BaseModel):
    success: bool = True
    data: Alert
    message: str


@router.get("", response_model=AlertListOut, summary="List alerts in creation order")
async def list_alerts(state: CurrencyState = Depends(get_state)):
    alerts = state.alerts.list()
    return AlertListOut(data=alerts, count=len(alerts), timestamp=utcnow())


@router.post("", response_model=AlertCreatedOut, summary="Create a rate alert")
async def create_alert(payload: AlertIn, state: CurrencyState = Depends(get_state)):
    alert = state.alerts.create(
        payload.currency,
        payload.target_rate,
        payload.direction,
        email=payload.email,
    )
    return AlertCreatedOut(data=alert, message="Alert created")
