from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class HistoryPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: date
    rate: float = Field(..., gt=0)
    change_percent: float = Field(..., alias="changePercent")


class HistorySummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current: float
    highest: float
    lowest: float
    average_change: float = Field(..., alias="averageChange")
