#!/usr/bin/env python3
"""
Run sources by hand, outside the cron triggers.

Usage:
    cd backend

    # Fetch + classify only, print normalized jobs as JSON (no database needed)
    python3 scripts/run_sync.py sync himalayas --dry-run
    python3 scripts/run_sync.py sync --group ats --dry-run

    # Sync into DATABASE_URL (or TEST_DATABASE_URL with --test-db)
    python3 scripts/run_sync.py sync remotive
    python3 scripts/run_sync.py sync indeed --region ph --type ux --test-db
    python3 scripts/run_sync.py sync nodesk --mode quick

    # Cross-source duplicate cleanup
    python3 scripts/run_sync.py cleanup
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add backend to path for imports
BACKEND_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from config.settings import get_settings  # noqa: E402
from db.session import SessionLocal, get_test_session_local  # noqa: E402
from sourcing.cleanup import cleanup_duplicates  # noqa: E402
from sourcing.runner import run_and_sync  # noqa: E402
from sources.config import SourceConfig  # noqa: E402
from sources.enums import IndeedQueryType, IndeedRegion, JobSource, ScrapeMode  # noqa: E402
from sources.registry import (  # noqa: E402
    SCRAPER_SOURCES,
    get_group_sources,
    list_groups,
    list_sources,
    parse_source,
)
from utils.deadline import Deadline  # noqa: E402

# No time limit by hand, but keep one so a hung upstream still ends the run
CLI_TIME_BUDGET_SECONDS = 900.0


def _adapter_options(args, sources: list[JobSource]) -> dict:
    options = {}
    if sources == [JobSource.INDEED]:
        options["region"] = IndeedRegion(args.region)
        if args.type:
            options["query_types"] = [IndeedQueryType(args.type)]
    if sources and all(source in SCRAPER_SOURCES for source in sources):
        options["mode"] = ScrapeMode(args.mode)
    return options


async def run_sync(args) -> int:
    try:
        if args.group:
            sources = get_group_sources(args.group)
        elif args.source:
            sources = [parse_source(args.source)]
        else:
            print("ERROR: pass a source or --group")
            print(f"Available sources: {', '.join(list_sources())}")
            print(f"Available groups: {', '.join(list_groups())}")
            return 2
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    settings = get_settings()
    config = SourceConfig.from_settings(settings).with_overrides(headless=not args.headed)
    deadline = Deadline(CLI_TIME_BUDGET_SECONDS)
    options = _adapter_options(args, sources)

    db = None
    if not args.dry_run:
        db = get_test_session_local() if args.test_db else SessionLocal()

    try:
        report = await run_and_sync(
            db,
            sources,
            config,
            deadline,
            use_test_db=args.test_db,
            dry_run=args.dry_run,
            **options,
        )
    finally:
        if db is not None:
            db.close()

    if args.dry_run:
        print(json.dumps([job.to_dict() for job in report.jobs], indent=2))
    print(json.dumps(report.to_dict(), indent=2), file=sys.stderr if args.dry_run else sys.stdout)
    return 0 if report.success else 1


def run_cleanup(args) -> int:
    db = get_test_session_local() if args.test_db else SessionLocal()
    try:
        counts = cleanup_duplicates(db, use_test_db=args.test_db)
    finally:
        db.close()
    print(json.dumps(counts, indent=2))
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Run design-job sources and sync by hand",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--test-db', action='store_true', help='Use TEST_DATABASE_URL')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    # sync command
    sync_parser = subparsers.add_parser('sync', help='Fetch a source or group and sync it')
    sync_parser.add_argument('source', nargs='?', help=f"One of: {', '.join(list_sources())}")
    sync_parser.add_argument('-g', '--group', help=f"One of: {', '.join(list_groups())}")
    sync_parser.add_argument('--dry-run', action='store_true', help='Fetch and classify only, print JSON')
    sync_parser.add_argument('--region', default=IndeedRegion.US.value,
                             choices=[r.value for r in IndeedRegion], help='Indeed region')
    sync_parser.add_argument('--type', choices=[q.value for q in IndeedQueryType],
                             help='Indeed query type (default: all)')
    sync_parser.add_argument('--mode', default=ScrapeMode.FULL.value,
                             choices=[m.value for m in ScrapeMode], help='Scrape mode')
    sync_parser.add_argument('--headed', action='store_true', help='Show the browser window')

    # cleanup command
    subparsers.add_parser('cleanup', help='Delete cross-source duplicates')

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(message)s',
    )

    if args.command == 'sync':
        sys.exit(asyncio.run(run_sync(args)))
    elif args.command == 'cleanup':
        sys.exit(run_cleanup(args))


if __name__ == '__main__':
    main()
