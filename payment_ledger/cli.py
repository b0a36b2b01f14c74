"""
cli.py - Command-line entry point

    payment-ledger transactions.csv > accounts.csv

Reads the whole input, replays it, and only then writes the account table to
stdout. Any error prints a single message to stderr and exits with status 1
without writing anything to stdout.
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Optional, Sequence

import structlog

from .core import DECIMAL_PLACES, MAX_DECIMAL_PLACES, LedgerError
from .csv_io import read_records, write_accounts
from .engine import ReplayEngine
from .logging_config import setup_logging

logger = structlog.get_logger(__name__)


def decimal_places(text: str) -> int:
    """argparse type for --decimal-places: an integer in 0..MAX_DECIMAL_PLACES."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{text}' is not an integer") from None
    if value < 0 or value > MAX_DECIMAL_PLACES:
        raise argparse.ArgumentTypeError(
            f"{value} is out of range 0..{MAX_DECIMAL_PLACES}"
        )
    return value


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="payment-ledger",
        description=(
            "Replay a CSV log of deposits, withdrawals, disputes, resolves and "
            "chargebacks and print the final state of every client account."
        ),
    )
    parser.add_argument("input", help="Path to the transaction CSV file.")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every replayed transaction to stderr.",
    )
    parser.add_argument(
        "--decimal-places",
        type=decimal_places,
        default=DECIMAL_PLACES,
        help=(
            f"Precision of amounts and balances, 0..{MAX_DECIMAL_PLACES} "
            f"(default: {DECIMAL_PLACES})."
        ),
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING")

    engine = ReplayEngine(decimal_places=args.decimal_places, verbose=args.verbose)
    try:
        records = read_records(args.input)
        accounts = engine.run(records)
    except (LedgerError, OSError) as e:
        logger.debug("run_failed", error=str(e), error_type=type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
