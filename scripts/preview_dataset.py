"""CLI wrapper for price_prophet.preview."""

from price_prophet.preview import main as preview_main


def main() -> int:
    return preview_main()


if __name__ == "__main__":
    raise SystemExit(main())
