"""Configuration for the price generator and the game rounds built on it."""

from __future__ import annotations

import math
import numbers
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

from price_prophet.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Load .env from project root
# ---------------------------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")


# ---------------------------------------------------------------------------
# Generator Configuration
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class GeneratorConfig:
    """Parameters for one generation run. Volatility and drift are annualized."""

    days_needed: int
    start_price: float
    volatility: float
    drift: float

    def validate(self) -> None:
        if isinstance(self.days_needed, bool) or not isinstance(self.days_needed, numbers.Integral):
            raise ConfigurationError(
                f"days_needed must be an integer, got {self.days_needed!r}"
            )
        if self.days_needed <= 0:
            raise ConfigurationError(f"days_needed must be positive, got {self.days_needed}")

        for name in ("start_price", "volatility", "drift"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")

        if self.start_price <= 0:
            raise ConfigurationError(f"start_price must be positive, got {self.start_price}")
        if self.volatility < 0:
            raise ConfigurationError(f"volatility cannot be negative, got {self.volatility}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "GeneratorConfig":
        """Build a config from a plain mapping with the four generator keys."""

        required = ("days_needed", "start_price", "volatility", "drift")
        missing = [key for key in required if key not in values]
        if missing:
            raise ConfigurationError(f"Missing generator config keys: {missing}")
        return cls(**{key: values[key] for key in required})


# ---------------------------------------------------------------------------
# Round Configuration
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class RoundProfile:
    """Defaults for a single guessing round."""

    days_needed: int = 91
    start_price: float = 10_000.0
    volatility_range: tuple[float, float] = (1.0, 3.0)
    drift_range: tuple[float, float] = (1.0, 3.0)

    # Calendar days hidden from the player, keyed by difficulty name
    hidden_days: Mapping[str, int] = field(
        default_factory=lambda: {"easy": 1, "medium": 7, "hard": 30}
    )

    # Multiple-choice answers
    choice_count: int = 4
    choice_band: float = 0.20
    min_choice_price: float = 0.01

    max_attempts: int = 3

    def validate(self) -> None:
        if self.days_needed <= 0:
            raise ConfigurationError("Round days_needed must be positive")
        if self.start_price <= 0:
            raise ConfigurationError("Round start_price must be positive")
        for name in ("volatility_range", "drift_range"):
            low, high = getattr(self, name)
            if low > high:
                raise ConfigurationError(f"{name} lower bound exceeds upper bound")
        if self.volatility_range[0] < 0:
            raise ConfigurationError("volatility_range cannot include negative values")
        if not self.hidden_days:
            raise ConfigurationError("At least one difficulty must be configured")
        longest = max(self.hidden_days.values())
        if min(self.hidden_days.values()) <= 0 or longest >= self.days_needed:
            raise ConfigurationError(
                f"Hidden days must be within [1, {self.days_needed - 1}]"
            )
        if self.choice_count < 2:
            raise ConfigurationError("choice_count must be at least 2")
        if not 0.0 < self.choice_band < 1.0:
            raise ConfigurationError("choice_band must be within (0, 1)")
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_round_profile() -> RoundProfile:
    """Return singleton round defaults, honouring environment overrides."""

    defaults = RoundProfile()
    profile = RoundProfile(
        days_needed=_env_int("PRICE_PROPHET_DAYS_NEEDED", defaults.days_needed),
        start_price=_env_float("PRICE_PROPHET_START_PRICE", defaults.start_price),
        max_attempts=_env_int("PRICE_PROPHET_MAX_ATTEMPTS", defaults.max_attempts),
    )
    profile.validate()
    return profile
