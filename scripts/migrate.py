#!/usr/bin/env python
"""Run or inspect schema reconciliation against the configured database.

Usage:
  python scripts/migrate.py            # apply pending steps
  python scripts/migrate.py --status   # list applied / pending steps
  python scripts/migrate.py --force    # re-run every step (each is idempotent)
"""
import argparse
import logging
import os
import sys

# Ensure project root is on sys.path so `app` package can be imported
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import DBAPIError

from app.config import get_settings
from app.database import build_engine
from app.logging_config import configure_logging
from app.migrations import MIGRATIONS, applied_versions, run_schema_reconciliation

logger = logging.getLogger("scripts.migrate")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bring the club directory schema up to date.")
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show which steps are recorded as applied and exit.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-run steps even if they are already recorded.",
    )
    return parser.parse_args()


def show_status(engine) -> int:
    try:
        applied = set(applied_versions(engine))
    except DBAPIError as exc:
        logger.error("Could not read schema_migrations: %s", exc.orig or exc)
        return 1
    for step in MIGRATIONS:
        mark = "applied" if step.version in applied else "pending"
        print(f"{step.version:<8} {mark:<8} {step.name}")
    return 0


def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    engine = build_engine(settings)

    try:
        if args.status:
            return show_status(engine)

        report = run_schema_reconciliation(engine, force=args.force)
        if not report.connected:
            return 2
        if report.deferred:
            logger.warning("Deferred steps (will retry on next run): %s", ", ".join(report.deferred))
        return 0 if report.ok else 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
