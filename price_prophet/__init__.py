"""Synthetic multi-resolution OHLC price generation for the Price Prophet game."""

from price_prophet.config import GeneratorConfig, RoundProfile, get_round_profile
from price_prophet.data import Bar, Resolution
from price_prophet.errors import (
    ConfigurationError,
    DataGenerationError,
    PriceProphetError,
    PriceValidationError,
)
from price_prophet.game import Difficulty, GameRound, new_round
from price_prophet.simulation import MultiResolutionDataset, generate

__all__ = [
    "Bar",
    "ConfigurationError",
    "DataGenerationError",
    "Difficulty",
    "GameRound",
    "GeneratorConfig",
    "MultiResolutionDataset",
    "PriceProphetError",
    "PriceValidationError",
    "Resolution",
    "RoundProfile",
    "generate",
    "get_round_profile",
    "new_round",
]
