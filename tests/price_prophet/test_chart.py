from __future__ import annotations

import numpy as np

from price_prophet.config import GeneratorConfig
from price_prophet.data.schemas import Resolution
from price_prophet.game.chart import to_chart_records
from price_prophet.simulation.gbm import SYNTHETIC_EPOCH
from price_prophet.simulation.generator import generate


def _dataset():
    config = GeneratorConfig(days_needed=2, start_price=100.0, volatility=0.5, drift=0.1)
    return generate(config, source=np.random.default_rng(4))


def test_daily_records_use_date_strings() -> None:
    dataset = _dataset()
    records = to_chart_records(dataset[Resolution.DAY], Resolution.DAY)

    assert [r["time"] for r in records] == ["2029-01-01", "2029-01-02"]
    assert records[0]["open"] == 100.0
    assert records[-1]["close"] == dataset.final_close
    assert set(records[0]) == {"time", "open", "high", "low", "close"}


def test_intraday_records_use_epoch_seconds() -> None:
    dataset = _dataset()
    records = to_chart_records(dataset["1h"], "1h")

    start = int(SYNTHETIC_EPOCH.timestamp())
    assert len(records) == 48
    assert records[0]["time"] == start
    assert records[1]["time"] == start + 3600
    assert all(isinstance(r["time"], int) for r in records)


def test_weekly_and_monthly_records_are_dated() -> None:
    dataset = _dataset()

    assert to_chart_records(dataset["W"], "W")[0]["time"] == "2029-01-01"
    assert to_chart_records(dataset["M"], Resolution.MONTH)[0]["time"] == "2029-01-01"
