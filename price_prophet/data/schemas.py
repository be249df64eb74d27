"""
Price data schemas.

Defines the bar and resolution types shared by the simulator, the aggregator
and the game layer.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, model_validator

OHLC_COLUMNS = ("open", "high", "low", "close")


class Resolution(str, Enum):
    """Supported candle resolutions, finest first."""

    MINUTE = "1m"
    FIVE_MINUTE = "5m"
    FIFTEEN_MINUTE = "15m"
    HOUR = "1h"
    FOUR_HOUR = "4h"
    DAY = "D"
    WEEK = "W"
    MONTH = "M"

    @property
    def is_calendar(self) -> bool:
        """True for resolutions charted with calendar dates instead of epoch seconds."""
        return self in (Resolution.DAY, Resolution.WEEK, Resolution.MONTH)


RESOLUTIONS: tuple[Resolution, ...] = tuple(Resolution)

_UNIX_EPOCH = pd.Timestamp("1970-01-01")


def epoch_seconds(index: pd.DatetimeIndex) -> np.ndarray:
    """Integer seconds since the Unix epoch for each timestamp."""
    naive = index.tz_convert("UTC").tz_localize(None) if index.tz is not None else index
    return ((naive - _UNIX_EPOCH) // pd.Timedelta(seconds=1)).to_numpy(dtype="int64")


class Bar(BaseModel):
    """
    Single OHLC candle.

    Immutable and strictly validated. ``timestamp`` is seconds since the Unix
    epoch, aligned to the start of the bar's bucket.
    """
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(ge=0)
    open: float = Field(gt=0.0)
    high: float = Field(gt=0.0)
    low: float = Field(gt=0.0)
    close: float = Field(gt=0.0)

    @model_validator(mode='after')
    def validate_prices(self) -> 'Bar':
        """
        Validate price consistency.

        Evaluates:
        - High >= Low
        - High >= max(Open, Close)
        - Low <= min(Open, Close)
        """
        if self.high < self.low:
            raise ValueError(f"High ({self.high}) cannot be less than Low ({self.low})")

        if self.high < max(self.open, self.close):
            raise ValueError(
                f"High ({self.high}) cannot be less than Open/Close "
                f"({self.open}/{self.close})"
            )

        if self.low > min(self.open, self.close):
            raise ValueError(
                f"Low ({self.low}) cannot be greater than Open/Close "
                f"({self.open}/{self.close})"
            )

        return self
