"""
Shared test fixtures: deterministic random sources and minute series.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from price_prophet.config import GeneratorConfig
from price_prophet.simulation.gbm import SYNTHETIC_EPOCH, simulate_minute_bars


class RecordingSource:
    """Uniform source returning a constant and counting calls."""

    def __init__(self, value: float = 0.5) -> None:
        self.value = value
        self.calls = 0

    def random(self, size: int) -> np.ndarray:
        self.calls += 1
        return np.full(size, self.value, dtype=float)


@pytest.fixture
def recording_source() -> RecordingSource:
    return RecordingSource()


@pytest.fixture
def make_minute_bars():
    """Factory for simulated one-minute bars starting at an arbitrary instant."""

    def _make(
        days: int,
        *,
        start: pd.Timestamp = SYNTHETIC_EPOCH,
        seed: int = 42,
        extra_minutes: int = 0,
    ) -> pd.DataFrame:
        config = GeneratorConfig(days_needed=days + 1, start_price=100.0, volatility=0.8, drift=0.1)
        bars = simulate_minute_bars(config, np.random.default_rng(seed))
        bars = bars.iloc[: days * 1440 + extra_minutes].copy()
        bars.index = pd.date_range(start, periods=len(bars), freq="min", name="timestamp")
        return bars

    return _make


@pytest.fixture
def ten_minute_bars() -> pd.DataFrame:
    """Hand-built ten-minute series with known extremes."""
    idx = pd.date_range(SYNTHETIC_EPOCH, periods=10, freq="min", name="timestamp")
    return pd.DataFrame(
        {
            "open": [10.0, 10.0, 11.0, 12.0, 9.0, 10.0, 10.5, 13.0, 8.0, 9.0],
            "high": [10.2, 11.1, 12.3, 12.0, 10.0, 10.6, 13.4, 13.0, 9.0, 9.7],
            "low": [9.9, 10.0, 11.0, 8.7, 9.0, 10.0, 10.5, 7.9, 8.0, 9.0],
            "close": [10.0, 11.0, 12.0, 9.0, 10.0, 10.5, 13.0, 8.0, 9.0, 9.5],
        },
        index=idx,
    )
