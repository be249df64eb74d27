"""Shared data types for synthetic price series."""

from price_prophet.data.schemas import OHLC_COLUMNS, RESOLUTIONS, Bar, Resolution, epoch_seconds

__all__ = [
    "Bar",
    "OHLC_COLUMNS",
    "RESOLUTIONS",
    "Resolution",
    "epoch_seconds",
]
