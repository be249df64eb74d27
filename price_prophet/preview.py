"""Generate a synthetic dataset and print a preview of it."""

from __future__ import annotations

import argparse
import logging

import numpy as np

from price_prophet.config import GeneratorConfig
from price_prophet.data.schemas import Resolution
from price_prophet.errors import PriceProphetError
from price_prophet.simulation.generator import MultiResolutionDataset, generate

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Preview synthetic multi-resolution OHLC data")
    parser.add_argument("--days", type=int, default=5, help="Calendar days to simulate")
    parser.add_argument("--start-price", type=float, default=100.0, help="Initial price")
    parser.add_argument("--volatility", type=float, default=0.2, help="Annualized volatility")
    parser.add_argument("--drift", type=float, default=0.05, help="Annualized drift")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: fresh entropy)")
    parser.add_argument("--rows", type=int, default=5, help="Rows to show per resolution")
    return parser


def log_preview(dataset: MultiResolutionDataset, rows: int) -> None:
    logger.info("Bar counts: %s", dataset.bar_counts())
    for resolution in (Resolution.DAY, Resolution.HOUR):
        logger.info("%s data:\n%s", resolution.value, dataset[resolution].head(rows).to_string())


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = GeneratorConfig(
        days_needed=args.days,
        start_price=args.start_price,
        volatility=args.volatility,
        drift=args.drift,
    )

    try:
        dataset = generate(config, source=np.random.default_rng(args.seed))
    except PriceProphetError as exc:
        logger.error("Generation failed: %s", exc)
        return 1

    log_preview(dataset, args.rows)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
