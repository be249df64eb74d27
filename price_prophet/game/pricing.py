"""Price formatting and multiple-choice answer generation."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

import numpy as np

_CENT = Decimal("0.01")


def format_price(price: float) -> str:
    """Format as US dollars with two decimals and thousands separators."""
    quantized = Decimal(str(price)).quantize(_CENT, rounding=ROUND_HALF_UP)
    if quantized < 0:
        return f"-${-quantized:,.2f}"
    return f"${quantized:,.2f}"


def generate_price_choices(
    actual_price: float,
    rng: np.random.Generator,
    *,
    count: int = 4,
    band: float = 0.20,
    floor: float = 0.01,
) -> list[str]:
    """
    Build ``count`` formatted price choices, one of them ``actual_price``.

    Decoys are drawn uniformly within ``+-band`` of the actual price, never
    below ``floor``, and are distinct once formatted. The correct answer lands
    at a uniformly random position.

    Raises:
        ValueError: If ``actual_price`` is not a positive finite number.
    """
    if not math.isfinite(actual_price) or actual_price <= 0:
        raise ValueError(f"Actual price must be positive, got {actual_price}")
    if count < 1:
        raise ValueError("count must be at least 1")

    choices = [format_price(actual_price)]
    seen = set(choices)

    max_draws = 100 * count
    draws = 0
    while len(choices) < count and draws < max_draws:
        draws += 1
        pct = rng.uniform(-band, band)
        decoy = format_price(max(floor, actual_price * (1.0 + pct)))
        if decoy not in seen:
            seen.add(decoy)
            choices.append(decoy)

    # Tiny prices collapse onto a few cents; step upwards one cent at a time
    step = max(actual_price, floor)
    while len(choices) < count:
        step += 0.01
        decoy = format_price(step)
        if decoy not in seen:
            seen.add(decoy)
            choices.append(decoy)

    order = rng.permutation(len(choices))
    return [choices[i] for i in order]
