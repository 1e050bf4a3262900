"""Domain constants: the base currency and the startup rate table.

Rates are the value of one unit of the currency expressed in the base
currency (1 EUR = 3.475 TND). The base currency is always 1.
"""

from typing import Dict, Literal

BASE_CURRENCY = "TND"

DEFAULT_RATES: Dict[str, float] = {
    "TND": 1.0,  # base
    "EUR": 3.475,
    "USD": 2.98,
    "GBP": 3.70,
    "MAD": 0.298,
    "CAD": 2.17,
    "CHF": 3.33,
    "JPY": 0.0206,
}

# History jitter: each point is baseRate * (1 + u), u in [-0.02, 0.02]
HISTORY_JITTER = 0.02

# Decimal places applied to amounts and rates at the API boundary
API_DECIMALS = 6

AlertDirection = Literal["above", "below"]
