from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import AlertDirection


class Alert(BaseModel):
    """A user-declared threshold watch. Stored only; nothing evaluates it."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    currency: str
    target_rate: float = Field(..., alias="targetRate", gt=0)
    direction: AlertDirection = Field(..., alias="type")
    email: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")
    active: bool = True
