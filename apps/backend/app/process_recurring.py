"""Run the recurring-transaction processor once from the command line.

    python -m app.process_recurring [--date YYYY-MM-DD] [--user-id N]

Intended for cron/systemd timers when the in-process scheduler is disabled.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from app.core.config import LOG_LEVELS
from app.core.database import SessionLocal
from app.core.logging_config import configure_logging
from app.services.recurring_processor import process_recurring_transactions
from app.utils.dates import today_local

logger = logging.getLogger("app.process_recurring")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m app.process_recurring", description=__doc__.splitlines()[0])
    parser.add_argument("--date", dest="run_date", type=_parse_date, default=None, help="run date (default: today)")
    parser.add_argument("--user-id", dest="user_id", type=int, default=None, help="only process this user's definitions")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default=None, help="override FT_LOG_LEVEL"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    run_date = args.run_date or today_local()
    if run_date > today_local():
        logger.error("Refusing to process a future run date: %s", run_date.isoformat())
        return 1

    db = SessionLocal()
    try:
        created = process_recurring_transactions(db, run_date=run_date, user_id=args.user_id)
    except Exception:
        logger.exception("Recurring run failed for %s", run_date.isoformat())
        return 1
    finally:
        db.close()

    print(f"{run_date.isoformat()}: created {created} transaction(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
