from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RateEntry(BaseModel):
    """Current rate of one currency, as the value of one unit in base units."""

    model_config = ConfigDict(populate_by_name=True)

    code: str
    rate: float = Field(..., gt=0)
    last_updated: datetime = Field(..., alias="lastUpdated")

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.upper()

    @field_validator("rate")
    @classmethod
    def finite_rate(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("rate must be finite")
        return v
