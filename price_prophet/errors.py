"""Error taxonomy for synthetic price generation."""

from __future__ import annotations


class PriceProphetError(Exception):
    """Base class for all price_prophet failures."""


class ConfigurationError(PriceProphetError, ValueError):
    """Raised when generator parameters are invalid. Never retried."""


class DataGenerationError(PriceProphetError):
    """Raised when a generated dataset is structurally unusable.

    Failures are probabilistic (rounding, degenerate paths), so callers may
    regenerate with a fresh random draw.
    """


class PriceValidationError(DataGenerationError):
    """Raised when resolutions disagree on the opening or closing price."""
