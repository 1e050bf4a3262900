"""Periodic simulated rate drift.

Every `rate_drift_interval_seconds` each non-base rate moves by a random
variation within +/- `rate_drift_max_pct`. Disabled unless
settings.rate_drift_enabled; started and cancelled by the app lifespan.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI

logger = logging.getLogger("currencypro.drift")


async def rate_drift_loop(app: FastAPI) -> None:
    state = app.state.currency
    interval = state.settings.rate_drift_interval_seconds
    max_pct = state.settings.rate_drift_max_pct

    logger.info("rate drift loop started (every %ss, +/-%s)", interval, max_pct)

    while True:
        try:
            await asyncio.sleep(interval)
            changed = state.rates.drift(max_pct, rng=state.rng)
            logger.info("rates drifted for %d currencies", len(changed))
        except asyncio.CancelledError:
            logger.info("rate drift loop stopped")
            raise
        except Exception:
            logger.exception("rate drift pass failed")
