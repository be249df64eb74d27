"""
Synthetic multi-resolution OHLC generation.

``generate`` is a pure function: configuration in, validated dataset out.
Each call draws from its own random stream unless one is injected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import InitVar, dataclass, field
from types import MappingProxyType
from typing import Any, Iterator

import numpy as np
import pandas as pd

from price_prophet.config import GeneratorConfig
from price_prophet.data.schemas import OHLC_COLUMNS, RESOLUTIONS, Bar, Resolution, epoch_seconds
from price_prophet.simulation.aggregation import build_resolutions
from price_prophet.simulation.gbm import UniformSource, simulate_minute_bars
from price_prophet.simulation.validation import validate_dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MultiResolutionDataset(Mapping):
    """
    Read-only mapping of resolution to OHLC frame (indexed by ``timestamp``).

    Frames are copied on the way in and on every lookup, so edits made by a
    caller never reach the validated data.
    """

    frames: InitVar[Mapping[Resolution, pd.DataFrame]]
    _frames: Mapping[Resolution, pd.DataFrame] = field(init=False, repr=False)

    def __post_init__(self, frames: Mapping[Resolution, pd.DataFrame]) -> None:
        ordered = {Resolution(r): frames[r].copy() for r in frames}
        object.__setattr__(self, "_frames", MappingProxyType(ordered))

    @staticmethod
    def _key(resolution: Resolution | str) -> Resolution:
        try:
            return Resolution(resolution)
        except ValueError as exc:
            raise KeyError(resolution) from exc

    def __getitem__(self, resolution: Resolution | str) -> pd.DataFrame:
        return self._frames[self._key(resolution)].copy()

    def __iter__(self) -> Iterator[Resolution]:
        return iter(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def _base(self) -> pd.DataFrame:
        return next(iter(self._frames.values()))

    @property
    def base(self) -> pd.DataFrame:
        """The finest resolution present (one-minute for generated data)."""
        return self._base.copy()

    @property
    def first_open(self) -> float:
        return float(self._base["open"].iloc[0])

    @property
    def final_close(self) -> float:
        return float(self._base["close"].iloc[-1])

    def bars(self, resolution: Resolution | str) -> list[Bar]:
        """Materialize one resolution as validated ``Bar`` models."""
        frame = self._frames[self._key(resolution)]
        values = frame[list(OHLC_COLUMNS)].to_numpy(dtype=float)
        return [
            Bar(timestamp=int(ts), open=o, high=h, low=l, close=c)
            for ts, (o, h, l, c) in zip(epoch_seconds(frame.index), values.tolist())
        ]

    def bar_counts(self) -> dict[str, int]:
        return {resolution.value: len(frame) for resolution, frame in self._frames.items()}

    def equals(self, other: "MultiResolutionDataset") -> bool:
        """Exact equality of resolutions, timestamps and prices."""
        if list(self._frames) != list(other._frames):
            return False
        return all(frame.equals(other._frames[r]) for r, frame in self._frames.items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiResolutionDataset):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]


def _coerce_config(config: GeneratorConfig | Mapping[str, Any]) -> GeneratorConfig:
    if isinstance(config, GeneratorConfig):
        return config
    return GeneratorConfig.from_mapping(config)


def generate(
    config: GeneratorConfig | Mapping[str, Any],
    *,
    source: UniformSource | None = None,
) -> MultiResolutionDataset:
    """
    Generate a validated multi-resolution OHLC dataset.

    Args:
        config: ``GeneratorConfig`` or mapping with ``days_needed``,
                ``start_price``, ``volatility`` and ``drift``.
        source: Uniform random source; a fresh ``numpy`` generator when omitted.

    Returns:
        MultiResolutionDataset keyed by every ``Resolution``.

    Raises:
        ConfigurationError: Invalid parameters (no random draws are made).
        DataGenerationError: Structural failure during simulation/aggregation.
        PriceValidationError: Cross-resolution open/close mismatch.
    """
    cfg = _coerce_config(config)
    cfg.validate()

    if source is None:
        source = np.random.default_rng()

    minute_bars = simulate_minute_bars(cfg, source)
    frames = build_resolutions(minute_bars, RESOLUTIONS)
    validate_dataset(frames, expected=RESOLUTIONS)

    dataset = MultiResolutionDataset(frames)
    logger.info("Generated OHLC dataset: %s", dataset.bar_counts())
    return dataset
