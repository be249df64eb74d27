from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from price_prophet.config import GeneratorConfig
from price_prophet.errors import DataGenerationError
from price_prophet.simulation.gbm import (
    MINUTES_PER_YEAR,
    SYNTHETIC_EPOCH,
    apply_open_continuity,
    minute_parameters,
    round_price,
    simulate_minute_bars,
    simulate_prices,
    standard_normal_shocks,
)


def test_minute_parameters_scale_annual_values() -> None:
    vol, drift = minute_parameters(1.0, 1.0)

    assert vol == pytest.approx(1.0 / math.sqrt(MINUTES_PER_YEAR))
    assert drift == pytest.approx(1.0 / MINUTES_PER_YEAR)


def test_box_muller_shocks_from_constant_draws(recording_source) -> None:
    shocks = standard_normal_shocks(recording_source, 3)

    # u1 = u2 = 0.5 -> sqrt(-2 ln 0.5) * cos(pi)
    expected = -math.sqrt(-2.0 * math.log(0.5))
    assert shocks.shape == (3,)
    assert np.allclose(shocks, expected)
    assert recording_source.calls == 2


def test_box_muller_shocks_are_roughly_standard_normal() -> None:
    shocks = standard_normal_shocks(np.random.default_rng(0), 200_000)

    assert abs(shocks.mean()) < 0.01
    assert shocks.std() == pytest.approx(1.0, abs=0.01)


def test_zero_draw_does_not_produce_infinite_shock() -> None:
    class ZeroSource:
        def random(self, size: int) -> np.ndarray:
            return np.zeros(size)

    shocks = standard_normal_shocks(ZeroSource(), 4)
    assert np.isfinite(shocks).all()


def test_round_price_rounds_half_up() -> None:
    assert round_price(100.125) == 100.13
    assert round_price(99.994) == 99.99
    assert round_price(0.005) == 0.01


def test_flat_path_without_volatility_or_drift(recording_source) -> None:
    config = GeneratorConfig(days_needed=1, start_price=250.0, volatility=0.0, drift=0.0)
    prices = simulate_prices(config, recording_source)

    assert len(prices) == 1440
    assert (prices == 250.0).all()


def test_positive_drift_never_decreases_price(recording_source) -> None:
    config = GeneratorConfig(
        days_needed=1, start_price=100.0, volatility=0.0, drift=MINUTES_PER_YEAR * 0.001
    )
    prices = simulate_prices(config, recording_source)

    assert (np.diff(prices) >= 0).all()
    assert prices[-1] > prices[0]


def test_prices_are_cent_ticks() -> None:
    config = GeneratorConfig(days_needed=1, start_price=100.0, volatility=1.5, drift=0.3)
    prices = simulate_prices(config, np.random.default_rng(11))

    cents = prices[1:] * 100
    assert np.allclose(cents, np.round(cents))


def test_collapsing_path_raises_generation_error(recording_source) -> None:
    config = GeneratorConfig(
        days_needed=1, start_price=100.0, volatility=0.0, drift=-MINUTES_PER_YEAR * 10
    )

    with pytest.raises(DataGenerationError, match="rounded to zero"):
        simulate_prices(config, recording_source)


def test_exploding_path_raises_generation_error(recording_source) -> None:
    config = GeneratorConfig(
        days_needed=1, start_price=100.0, volatility=0.0, drift=MINUTES_PER_YEAR * 800
    )

    with pytest.raises(DataGenerationError, match="Non-finite"):
        simulate_prices(config, recording_source)


def test_extreme_volatility_raises_generation_error(recording_source) -> None:
    config = GeneratorConfig(days_needed=1, start_price=100.0, volatility=1e160, drift=0.1)
    config.validate()

    with pytest.raises(DataGenerationError, match="Non-finite"):
        simulate_prices(config, recording_source)
    assert recording_source.calls == 0


def test_price_too_large_to_round_raises_generation_error(recording_source) -> None:
    config = GeneratorConfig(days_needed=1, start_price=1e307, volatility=0.0, drift=0.0)
    config.validate()

    with pytest.raises(DataGenerationError, match="Non-finite price"):
        simulate_prices(config, recording_source)


def test_round_price_rejects_overflowing_scale() -> None:
    with pytest.raises(DataGenerationError):
        round_price(1e307)


def test_apply_open_continuity_chains_and_widens() -> None:
    idx = pd.date_range(SYNTHETIC_EPOCH, periods=3, freq="min", name="timestamp")
    flat = pd.DataFrame(
        {"open": [100.0, 101.0, 99.5], "high": [100.0, 101.0, 99.5],
         "low": [100.0, 101.0, 99.5], "close": [100.0, 101.0, 99.5]},
        index=idx,
    )

    out = apply_open_continuity(flat, 100.0)

    assert out["open"].tolist() == [100.0, 100.0, 101.0]
    assert out["high"].tolist() == [100.0, 101.0, 101.0]
    assert out["low"].tolist() == [100.0, 100.0, 99.5]
    # input left untouched
    assert flat["open"].tolist() == [100.0, 101.0, 99.5]


def test_minute_bars_are_continuous_and_well_formed() -> None:
    config = GeneratorConfig(days_needed=2, start_price=100.0, volatility=1.0, drift=0.5)
    bars = simulate_minute_bars(config, np.random.default_rng(3))

    assert len(bars) == 2 * 1440
    assert bars.index[0] == SYNTHETIC_EPOCH
    assert bars.index.name == "timestamp"
    assert (bars.index.to_series().diff().dropna() == pd.Timedelta(minutes=1)).all()

    assert bars["open"].iloc[0] == 100.0
    assert (bars["open"].to_numpy()[1:] == bars["close"].to_numpy()[:-1]).all()
    assert (bars["high"] >= bars[["open", "close"]].max(axis=1)).all()
    assert (bars["low"] <= bars[["open", "close"]].min(axis=1)).all()


def test_same_seed_reproduces_minute_bars() -> None:
    config = GeneratorConfig(days_needed=1, start_price=100.0, volatility=1.0, drift=1.0)

    first = simulate_minute_bars(config, np.random.default_rng(99))
    second = simulate_minute_bars(config, np.random.default_rng(99))

    pd.testing.assert_frame_equal(first, second, check_exact=True)
