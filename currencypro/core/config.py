import math
from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from currencypro.models.constants import BASE_CURRENCY, DEFAULT_RATES


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic-settings rules (e.g. APP_NAME,
    DEBUG, BASE_CURRENCY, HISTORY_DAYS, RATE_DRIFT_ENABLED). Dict and list
    fields such as INITIAL_RATES are read as JSON.
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "CurrencyPro API"
    debug: bool = False
    version: str = "1.0.0"

    # Server (used by `python -m currencypro`)
    host: str = "0.0.0.0"
    port: int = 5000
    cors_allow_origins: List[str] = ["*"]

    # Rate table
    base_currency: str = BASE_CURRENCY
    initial_rates: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_RATES))

    # Simulated history
    history_days: int = Field(30, ge=1, le=365)
    history_seed: Optional[int] = None  # None -> fresh entropy per process

    # Alerts: reject currencies missing from the rate table
    validate_alert_currency: bool = True

    # Periodic random rate drift (off by default)
    rate_drift_enabled: bool = False
    rate_drift_interval_seconds: float = Field(3600, gt=0)
    rate_drift_max_pct: float = Field(0.01, ge=0, lt=1)

    @field_validator("base_currency")
    @classmethod
    def upper_base(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("initial_rates")
    @classmethod
    def valid_rates(cls, v: Dict[str, float]) -> Dict[str, float]:
        rates = {}
        for code, rate in v.items():
            if not math.isfinite(rate) or rate <= 0:
                raise ValueError(f"rate for {code} must be a finite positive number")
            rates[code.strip().upper()] = float(rate)
        return rates

    @model_validator(mode="after")
    def base_in_table(self) -> "Settings":
        base_rate = self.initial_rates.get(self.base_currency)
        if base_rate is None:
            raise ValueError(
                f"base currency '{self.base_currency}' missing from initial_rates"
            )
        if base_rate != 1.0:
            raise ValueError("base currency rate must be exactly 1")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
