"""Chart-ready records for the rendering layer."""

from __future__ import annotations

from typing import Any

import pandas as pd

from price_prophet.data.schemas import OHLC_COLUMNS, Resolution, epoch_seconds


def to_chart_records(frame: pd.DataFrame, resolution: Resolution | str) -> list[dict[str, Any]]:
    """
    Convert a resolution frame to ``{time, open, high, low, close}`` dicts.

    Daily and coarser bars carry a ``YYYY-MM-DD`` date string, intraday bars
    carry epoch seconds.
    """
    resolution = Resolution(resolution)
    index = pd.DatetimeIndex(frame.index)

    if resolution.is_calendar:
        times: list[Any] = list(index.strftime("%Y-%m-%d"))
    else:
        times = [int(ts) for ts in epoch_seconds(index)]

    values = frame[list(OHLC_COLUMNS)].to_numpy(dtype=float).tolist()
    return [
        {"time": time, **dict(zip(OHLC_COLUMNS, row))}
        for time, row in zip(times, values)
    ]
