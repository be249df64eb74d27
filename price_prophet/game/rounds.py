"""
Guessing-round preparation.

Generates a fresh dataset, records the final daily close as the answer,
hides the last few calendar days from the player and builds the
multiple-choice prices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np
import pandas as pd

from price_prophet.config import GeneratorConfig, RoundProfile, get_round_profile
from price_prophet.data.schemas import RESOLUTIONS, Resolution
from price_prophet.errors import ConfigurationError, DataGenerationError
from price_prophet.game.pricing import format_price, generate_price_choices
from price_prophet.simulation.aggregation import build_resolutions, valid_range
from price_prophet.simulation.generator import MultiResolutionDataset, generate
from price_prophet.simulation.validation import validate_dataset

logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    """How far into the future the player has to guess."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty {value!r} (expected one of: {allowed})") from exc


def hidden_days(difficulty: Difficulty | str, profile: RoundProfile | None = None) -> int:
    """Calendar days hidden from the player for ``difficulty``."""
    profile = profile or get_round_profile()
    level = Difficulty.parse(difficulty)
    try:
        return int(profile.hidden_days[level.value])
    except KeyError as exc:
        raise ConfigurationError(f"No hidden-day setting for difficulty {level.value!r}") from exc


def truncate_future(dataset: MultiResolutionDataset, days: int) -> MultiResolutionDataset:
    """
    Hide the last ``days`` calendar days of ``dataset``.

    The one-minute base is cut and every resolution re-aggregated from the
    visible minutes, so no coarse bucket carries a hidden price.
    """
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")

    base = dataset[Resolution.MINUTE]
    start, end = valid_range(base)
    cutoff = end - pd.Timedelta(days=days)
    if cutoff <= start:
        raise ValueError(
            f"Hiding {days} days leaves no visible history ({start} -> {end})"
        )

    visible = base.loc[pd.DatetimeIndex(base.index) < cutoff]
    frames = build_resolutions(visible, RESOLUTIONS)
    validate_dataset(frames, expected=RESOLUTIONS)
    return MultiResolutionDataset(frames)


def random_round_config(profile: RoundProfile, rng: np.random.Generator) -> GeneratorConfig:
    """Draw a round's volatility and drift from the profile ranges."""
    return GeneratorConfig(
        days_needed=profile.days_needed,
        start_price=profile.start_price,
        volatility=float(rng.uniform(*profile.volatility_range)),
        drift=float(rng.uniform(*profile.drift_range)),
    )


@dataclass(frozen=True)
class GameRound:
    """Everything the UI needs to play one round."""

    difficulty: Difficulty
    config: GeneratorConfig
    history: MultiResolutionDataset
    answer: float
    choices: tuple[str, ...]

    @property
    def correct_choice(self) -> str:
        return format_price(self.answer)

    def check_guess(self, choice: str) -> bool:
        return choice.strip() == self.correct_choice


def new_round(
    difficulty: Difficulty | str,
    *,
    profile: RoundProfile | None = None,
    rng: np.random.Generator | None = None,
) -> GameRound:
    """
    Prepare a round, regenerating on probabilistic generation failures.

    Raises:
        DataGenerationError: If every attempt fails (last error re-raised).
    """
    profile = profile or get_round_profile()
    profile.validate()
    rng = rng or np.random.default_rng()
    level = Difficulty.parse(difficulty)
    days = hidden_days(level, profile)

    dataset: MultiResolutionDataset | None = None
    config: GeneratorConfig | None = None
    last_error: DataGenerationError | None = None

    for attempt in range(1, profile.max_attempts + 1):
        config = random_round_config(profile, rng)
        try:
            dataset = generate(config, source=rng)
            break
        except DataGenerationError as exc:
            last_error = exc
            logger.warning(
                "Round generation attempt %d/%d failed: %s",
                attempt,
                profile.max_attempts,
                exc,
            )

    if dataset is None or config is None:
        raise last_error or DataGenerationError("Round generation made no attempts")

    answer = float(dataset[Resolution.DAY]["close"].iloc[-1])
    history = truncate_future(dataset, days)
    choices = generate_price_choices(
        answer,
        rng,
        count=profile.choice_count,
        band=profile.choice_band,
        floor=profile.min_choice_price,
    )

    logger.info(
        "Prepared %s round: %d hidden days, answer=%s, choices=%s",
        level.value,
        days,
        format_price(answer),
        choices,
    )
    return GameRound(
        difficulty=level,
        config=config,
        history=history,
        answer=answer,
        choices=tuple(choices),
    )
