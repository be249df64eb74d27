"""
Multi-resolution OHLC aggregation.

Partitions the one-minute base series into calendar-aligned buckets and
reduces each bucket to a single bar. The valid date range is computed once
upfront so every resolution covers exactly the same minutes.
"""

from __future__ import annotations

import logging
from typing import Iterable

import pandas as pd

from price_prophet.data.schemas import OHLC_COLUMNS, RESOLUTIONS, Resolution
from price_prophet.errors import DataGenerationError

logger = logging.getLogger(__name__)

_FIXED_FLOORS = {
    Resolution.FIVE_MINUTE: "5min",
    Resolution.FIFTEEN_MINUTE: "15min",
    Resolution.HOUR: "1h",
    Resolution.FOUR_HOUR: "4h",
    Resolution.DAY: "1D",
}


def bucket_starts(index: pd.DatetimeIndex, resolution: Resolution | str) -> pd.DatetimeIndex:
    """Map each timestamp to the aligned start of its bucket."""

    resolution = Resolution(resolution)
    if resolution is Resolution.MINUTE:
        return index.floor("min")

    floor_freq = _FIXED_FLOORS.get(resolution)
    if floor_freq is not None:
        # Fixed floors count from the Unix epoch; 4h divides a UTC day evenly.
        return index.floor(floor_freq)

    days = index.normalize()
    if resolution is Resolution.WEEK:
        return days - pd.to_timedelta(days.dayofweek, unit="D")
    return days - pd.to_timedelta(days.day - 1, unit="D")


def resample_bars(bars: pd.DataFrame, resolution: Resolution | str) -> pd.DataFrame:
    """
    Reduce ``bars`` to one OHLC bar per bucket of ``resolution``.

    Open is the first member's open, close the last member's close, high and
    low the extremes. Output is indexed by bucket start, ascending.

    Raises:
        DataGenerationError: If ``bars`` is empty.
    """
    resolution = Resolution(resolution)
    if bars.empty:
        raise DataGenerationError(f"Cannot aggregate empty base series to {resolution.value}")

    ordered = bars.sort_index()
    keys = bucket_starts(pd.DatetimeIndex(ordered.index), resolution)
    grouped = ordered.groupby(keys, sort=True)

    out = pd.DataFrame(
        {
            "open": grouped["open"].first(),
            "high": grouped["high"].max(),
            "low": grouped["low"].min(),
            "close": grouped["close"].last(),
        }
    )
    out.index = pd.DatetimeIndex(out.index, name="timestamp")
    return out[list(OHLC_COLUMNS)]


def valid_range(bars: pd.DataFrame) -> tuple[pd.Timestamp, pd.Timestamp]:
    """
    Return ``[start of first day, end of last complete day)``.

    A day is complete when its final minute is present.

    Raises:
        DataGenerationError: If ``bars`` is empty or holds no complete day.
    """
    if bars.empty:
        raise DataGenerationError("Cannot derive a date range from an empty base series")

    index = pd.DatetimeIndex(bars.index)
    start = index.min().normalize()
    last = index.max()
    end = (last + pd.Timedelta(minutes=1)).normalize()

    if end <= start:
        raise DataGenerationError(
            f"Base series holds no complete day ({index.min()} -> {last})"
        )
    return start, end


def build_resolutions(
    bars: pd.DataFrame,
    resolutions: Iterable[Resolution | str] = RESOLUTIONS,
) -> dict[Resolution, pd.DataFrame]:
    """
    Aggregate the base series into every requested resolution.

    The base is clipped to complete days first. Buckets that begin before the
    range start are dropped; calendar buckets running past the range end are
    kept, since they aggregate exactly the in-range minutes.
    """
    start, end = valid_range(bars)
    index = pd.DatetimeIndex(bars.index)
    clipped = bars.loc[(index >= start) & (index < end)]

    dropped = len(bars) - len(clipped)
    if dropped:
        logger.warning("Clipped %d minute bars outside complete days [%s, %s)", dropped, start, end)

    frames: dict[Resolution, pd.DataFrame] = {}
    for resolution in resolutions:
        resolution = Resolution(resolution)
        frame = resample_bars(clipped, resolution)
        frame = frame.loc[frame.index >= start]
        frames[resolution] = frame
        logger.debug("Aggregated %s: %d bars", resolution.value, len(frame))

    return frames
