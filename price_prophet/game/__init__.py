"""Game-facing helpers built on the price generator."""

from price_prophet.game.chart import to_chart_records
from price_prophet.game.pricing import format_price, generate_price_choices
from price_prophet.game.rounds import (
    Difficulty,
    GameRound,
    hidden_days,
    new_round,
    random_round_config,
    truncate_future,
)

__all__ = [
    "Difficulty",
    "GameRound",
    "format_price",
    "generate_price_choices",
    "hidden_days",
    "new_round",
    "random_round_config",
    "to_chart_records",
    "truncate_future",
]
