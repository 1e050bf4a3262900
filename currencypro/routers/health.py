from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from currencypro.services.rates.table import utcnow
from currencypro.services.state import CurrencyState, get_state

router = APIRouter(prefix="/api/health", tags=["health"])


class HealthOut(BaseModel):
    success: bool = True
    message: str
    timestamp: datetime
    uptime: float


@router.get("", response_model=HealthOut, summary="Liveness check")
async def health(state: CurrencyState = Depends(get_state)):
    return HealthOut(
        message=f"{state.settings.app_name} is running",
        timestamp=utcnow(),
        uptime=round(state.uptime(), 3),
    )
