"""Final QA gate for multi-resolution datasets."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

import numpy as np
import pandas as pd

from price_prophet.data.schemas import OHLC_COLUMNS, RESOLUTIONS, Resolution
from price_prophet.errors import DataGenerationError, PriceValidationError

logger = logging.getLogger(__name__)

OPEN_PRICE_TOLERANCE = 1e-4


def _validate_frame(resolution: Resolution, frame: pd.DataFrame) -> None:
    """Structural checks for a single resolution."""

    missing = set(OHLC_COLUMNS) - set(frame.columns)
    if missing:
        raise DataGenerationError(f"{resolution.value} is missing columns: {sorted(missing)}")

    if frame.empty:
        raise DataGenerationError(f"No data available for resolution {resolution.value}")

    if not isinstance(frame.index, pd.DatetimeIndex):
        raise DataGenerationError(f"{resolution.value} index must be a DatetimeIndex")
    if not frame.index.is_monotonic_increasing or frame.index.has_duplicates:
        raise DataGenerationError(f"{resolution.value} timestamps are not strictly increasing")

    values = frame[list(OHLC_COLUMNS)].to_numpy(dtype=float)
    if not np.isfinite(values).all():
        raise DataGenerationError(f"Non-numeric or NaN price detected in {resolution.value}")
    if (values <= 0.0).any():
        raise DataGenerationError(f"Non-positive price detected in {resolution.value}")

    bad_low = (frame["low"] > frame["open"]).any() or (frame["low"] > frame["close"]).any()
    bad_high = (frame["high"] < frame["open"]).any() or (frame["high"] < frame["close"]).any()
    if bad_low or bad_high:
        raise DataGenerationError(f"OHLC relationship violated for {resolution.value}")


def validate_open_prices(frames: Mapping[Resolution, pd.DataFrame]) -> None:
    """Every resolution's first open must match the first resolution's, within tolerance."""

    opens = [(resolution, float(frame["open"].iloc[0])) for resolution, frame in frames.items()]
    if not opens:
        raise DataGenerationError("No data available for validation")

    reference = opens[0][1]
    if not np.isfinite(reference) or reference <= 0.0:
        raise DataGenerationError(f"Invalid opening price detected: {reference}")

    mismatched = [
        (resolution, value)
        for resolution, value in opens
        if abs((value - reference) / reference) > OPEN_PRICE_TOLERANCE
    ]
    if mismatched:
        details = ", ".join(f"{resolution.value}: {value}" for resolution, value in mismatched)
        logger.error("Open price mismatch against %.6f: %s", reference, details)
        raise PriceValidationError(f"Open prices do not match across resolutions: {details}")


def validate_close_prices(frames: Mapping[Resolution, pd.DataFrame]) -> None:
    """Every resolution's last close must equal the first resolution's exactly."""

    closes = [(resolution, float(frame["close"].iloc[-1])) for resolution, frame in frames.items()]
    if not closes:
        raise DataGenerationError("No data available for validation")

    reference = closes[0][1]
    mismatched = [(resolution, value) for resolution, value in closes if value != reference]
    if mismatched:
        details = ", ".join(f"{resolution.value}: {value}" for resolution, value in mismatched)
        logger.error("Close price mismatch against %.6f: %s", reference, details)
        raise PriceValidationError(f"Close prices do not match across resolutions: {details}")


def validate_dataset(
    frames: Mapping[Resolution, pd.DataFrame],
    *,
    expected: Iterable[Resolution | str] = RESOLUTIONS,
) -> None:
    """
    Validate a multi-resolution dataset before it leaves the generator.

    Raises:
        DataGenerationError: Missing/empty resolution, bad prices or ordering.
        PriceValidationError: Resolutions disagree on first open or last close.
    """
    frames = {Resolution(resolution): frame for resolution, frame in frames.items()}
    missing = [Resolution(r).value for r in expected if Resolution(r) not in frames]
    if missing:
        raise DataGenerationError(f"Missing required resolutions: {missing}")

    for resolution, frame in frames.items():
        _validate_frame(resolution, frame)

    validate_open_prices(frames)
    validate_close_prices(frames)
