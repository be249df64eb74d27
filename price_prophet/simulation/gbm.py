"""
Geometric Brownian Motion path simulator.

Produces the one-minute base series every other resolution is derived from:
    - Annualized volatility/drift scaled to per-minute values
    - Box-Muller standard-normal shocks from an injectable uniform source
    - Prices rounded to cent ticks, opens chained to the previous close
"""

from __future__ import annotations

import logging
import math
from typing import Protocol

import numpy as np
import pandas as pd

from price_prophet.config import GeneratorConfig
from price_prophet.data.schemas import OHLC_COLUMNS
from price_prophet.errors import DataGenerationError

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 1_440
MINUTES_PER_YEAR = 525_600
PRICE_DECIMALS = 2

# Monday and the first day of a month, so every calendar bucket starts on it.
SYNTHETIC_EPOCH = pd.Timestamp("2029-01-01 00:00:00", tz="UTC")


class UniformSource(Protocol):
    """Anything yielding uniform [0, 1) draws, e.g. ``numpy.random.Generator``."""

    def random(self, size: int) -> np.ndarray: ...


def minute_parameters(volatility: float, drift: float) -> tuple[float, float]:
    """Scale annual volatility (square-root of time) and drift (linear) to one minute."""
    minute_vol = volatility / math.sqrt(MINUTES_PER_YEAR)
    minute_drift = drift / MINUTES_PER_YEAR
    return minute_vol, minute_drift


def standard_normal_shocks(source: UniformSource, n: int) -> np.ndarray:
    """Draw ``n`` standard-normal shocks via the Box-Muller transform."""
    if n <= 0:
        return np.empty(0, dtype=float)

    u1 = np.asarray(source.random(n), dtype=float)
    u2 = np.asarray(source.random(n), dtype=float)
    if u1.shape != (n,) or u2.shape != (n,):
        raise DataGenerationError(
            f"Uniform source returned {u1.shape}/{u2.shape} draws, expected ({n},)"
        )

    # 1 - u maps [0, 1) onto (0, 1] so the log stays finite
    radius = np.sqrt(-2.0 * np.log(1.0 - u1))
    return radius * np.cos(2.0 * np.pi * u2)


def round_price(price: float, decimals: int = PRICE_DECIMALS) -> float:
    """Round half-up to the tick size."""
    scale = 10 ** decimals
    scaled = price * scale
    if not math.isfinite(scaled):
        raise DataGenerationError(f"Non-finite price {price!r} at {decimals} decimals")
    return math.floor(scaled + 0.5) / scale


def simulate_prices(config: GeneratorConfig, source: UniformSource) -> np.ndarray:
    """
    Simulate ``days_needed * 1440`` minute prices starting at ``start_price``.

    Each step applies ``exp((mu - sigma^2 / 2) + sigma * z)`` to the previous
    rounded price, so rounding compounds exactly as a tick-quoted market would.

    ``config`` is expected to be validated by the caller.

    Raises:
        DataGenerationError: If the path leaves the positive finite range.
    """
    num_minutes = config.days_needed * MINUTES_PER_DAY
    minute_vol, minute_drift = minute_parameters(config.volatility, config.drift)

    logger.info(
        "Generating %d days of GBM prices (%d minutes)", config.days_needed, num_minutes
    )
    logger.info(
        "Per-minute volatility: %.6g (annual: %s), per-minute drift: %.6g (annual: %s)",
        minute_vol,
        config.volatility,
        minute_drift,
        config.drift,
    )

    with np.errstate(over="ignore", invalid="ignore"):
        log_drift = np.float64(minute_drift) - 0.5 * np.float64(minute_vol) ** 2
    if not np.isfinite(log_drift):
        raise DataGenerationError(
            f"Non-finite per-minute log drift (volatility={config.volatility}, drift={config.drift})"
        )

    shocks = standard_normal_shocks(source, num_minutes - 1)
    with np.errstate(over="ignore"):
        growth = np.exp(log_drift + minute_vol * shocks)

    prices = np.empty(num_minutes, dtype=float)
    price = float(config.start_price)
    prices[0] = price

    for i, factor in enumerate(growth.tolist(), start=1):
        raw = price * factor
        if not math.isfinite(raw):
            raise DataGenerationError(f"Non-finite price at minute {i} (previous={price})")
        price = round_price(raw)
        if price <= 0.0:
            raise DataGenerationError(f"Price rounded to zero at minute {i} (raw={raw:.6g})")
        prices[i] = price

    total_return = (prices[-1] - config.start_price) / config.start_price * 100.0
    logger.info("Final price: %.2f (total return %.2f%%)", prices[-1], total_return)
    return prices


def minute_index(num_minutes: int) -> pd.DatetimeIndex:
    """One-minute UTC timestamps starting at the synthetic epoch."""
    return pd.date_range(
        SYNTHETIC_EPOCH, periods=num_minutes, freq="min", name="timestamp"
    )


def apply_open_continuity(bars: pd.DataFrame, start_price: float) -> pd.DataFrame:
    """
    Chain every open to the previous close; the first open is ``start_price``.

    High and low are widened to cover the re-assigned open.
    """
    out = bars.copy()
    if out.empty:
        return out

    closes = out["close"].to_numpy(dtype=float)
    opens = np.empty_like(closes)
    opens[0] = float(start_price)
    opens[1:] = closes[:-1]

    out["open"] = opens
    out["high"] = np.maximum(out["high"].to_numpy(dtype=float), np.maximum(opens, closes))
    out["low"] = np.minimum(out["low"].to_numpy(dtype=float), np.minimum(opens, closes))
    return out


def simulate_minute_bars(config: GeneratorConfig, source: UniformSource) -> pd.DataFrame:
    """
    Build the continuous one-minute base series.

    Each minute is a flat bar at its simulated price before the continuity
    pass, so all intrabar range comes from the chained opens.
    """
    prices = simulate_prices(config, source)
    flat = pd.DataFrame(
        {col: prices for col in OHLC_COLUMNS},
        index=minute_index(len(prices)),
    )
    return apply_open_continuity(flat, config.start_price)
