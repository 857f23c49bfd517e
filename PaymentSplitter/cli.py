"""
Command-line entry point.

Loads a trip data file and prints the balances before settling, the
payments to settle up, and the balances after settling.

Usage:
    payment-splitter [DATASET] [--log-level LEVEL] [--tolerance AMOUNT]

Without DATASET the file named by PAYMENT_SPLITTER_DATASET is used, or the
bundled Savannah 2022 trip.
"""

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Optional

from config.settings import get_settings
from dataset import load_trip
from report import render_report

logger = logging.getLogger(__name__)


def _tolerance(value: str) -> Decimal:
    try:
        tolerance = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a decimal number: {value}")
    if not tolerance.is_finite() or tolerance < 0:
        raise argparse.ArgumentTypeError(f"must be a finite, non-negative number: {value}")
    return tolerance


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="payment-splitter",
        description="Work out who pays whom to settle up shared trip expenses."
    )
    p.add_argument(
        "dataset", nargs="?", default=None,
        help="trip JSON file (default: $PAYMENT_SPLITTER_DATASET or the bundled Savannah 2022 trip)"
    )
    p.add_argument(
        "--log-level", default=None,
        help="logging level (default: $PAYMENT_SPLITTER_LOG_LEVEL or WARNING)"
    )
    p.add_argument(
        "--tolerance", type=_tolerance, default=None,
        help="largest balance accepted after settling (default: $PAYMENT_SPLITTER_TOLERANCE or 0.00)"
    )
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    level = (args.log_level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    path = args.dataset or settings.resolved_dataset()
    tolerance = args.tolerance if args.tolerance is not None else settings.tolerance

    try:
        trip = load_trip(path, tolerance=tolerance)
        report = render_report(trip)
    except ValueError as e:
        logger.debug("failed to settle %s", path, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2

    sys.stdout.write(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
