"""Price path simulation, multi-resolution aggregation and validation."""

from price_prophet.simulation.aggregation import (
    bucket_starts,
    build_resolutions,
    resample_bars,
    valid_range,
)
from price_prophet.simulation.gbm import (
    SYNTHETIC_EPOCH,
    UniformSource,
    apply_open_continuity,
    simulate_minute_bars,
    simulate_prices,
)
from price_prophet.simulation.generator import MultiResolutionDataset, generate
from price_prophet.simulation.validation import validate_dataset

__all__ = [
    "MultiResolutionDataset",
    "SYNTHETIC_EPOCH",
    "UniformSource",
    "apply_open_continuity",
    "bucket_starts",
    "build_resolutions",
    "generate",
    "resample_bars",
    "simulate_minute_bars",
    "simulate_prices",
    "valid_range",
    "validate_dataset",
]
