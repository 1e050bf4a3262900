from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from currencypro.services.rates.conversion import quote
from currencypro.services.rates.table import utcnow
from currencypro.services.state import CurrencyState, get_state

router = APIRouter(prefix="/api/convert", tags=["convert"])


class ConversionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Amount to convert")
    from_currency: str = Field(..., alias="from", min_length=1, examples=["EUR"])
    to_currency: str = Field(..., alias="to", min_length=1, examples=["USD"])


class ConversionData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: float
    from_currency: str = Field(..., alias="from")
    to_currency: str = Field(..., alias="to")
    result: float
    rate: float
    timestamp: datetime


class ConversionOut(BaseModel):
    success: bool = True
    data: ConversionData


@router.post("", response_model=ConversionOut, summary="Convert an amount between currencies")
async def convert_amount(payload: ConversionIn, state: CurrencyState = Depends(get_state)):
    """Convert `amount` from one currency to another through the base currency.

    `result` and `rate` (the converted value of one unit) are computed and
    rounded to 6 decimals independently.
    """
    conversion = quote(
        payload.amount,
        payload.from_currency,
        payload.to_currency,
        state.rates,
        timestamp=utcnow(),
    )
    return ConversionOut(
        data=ConversionData(
            amount=conversion.amount,
            from_currency=conversion.from_currency,
            to_currency=conversion.to_currency,
            result=conversion.result,
            rate=conversion.rate,
            timestamp=conversion.timestamp,
        )
    )
