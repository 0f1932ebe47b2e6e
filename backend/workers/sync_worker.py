"""
Sync Worker Lambda Handler

Invoked by scheduled events (EventBridge rules), one rule per batch so that
every invocation fits its time budget.

Event format (exactly one of):
{"source": "himalayas"}                                  one source
{"group": "aggregators"}                                 a source group
{"indeed": {"region": "ph", "type": "ux"}}               one Indeed batch (type optional)
{"scrape": {"source": "nodesk", "mode": "quick"}}        one browser scrape
{"task": "cleanup"}                                      duplicate cleanup

Optional: "use_test_db": true  -> TEST_DATABASE_URL and [TEST] log prefix

Log Format:
All logs use prefix [SyncWorker:source=X] / [ScrapeWorker:...] /
[CleanupWorker:task=duplicates] for CloudWatch filtering.
"""

import asyncio
import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.settings import Settings, get_settings
from db.session import SessionLocal, get_test_session_local
from sourcing.cleanup import cleanup_duplicates
from sourcing.runner import _map_source_error, run_and_sync
from sources.config import SourceConfig
from sources.enums import IndeedQueryType, IndeedRegion, JobSource, ScrapeMode
from sources.registry import SCRAPER_SOURCES, get_group_sources, parse_source
from utils.deadline import Deadline
from workers.types import InvocationReport

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def plan_invocation(event: dict, settings: Settings) -> tuple[list[JobSource], dict, float]:
    """
    Resolve an event into (sources, adapter options, time budget).

    Raises:
        ValueError: If the event names nothing runnable or an unknown value
    """
    if event.get("source"):
        source = parse_source(event["source"])
        budget = settings.SCRAPE_TIME_BUDGET_SECONDS if source in SCRAPER_SOURCES \
            else settings.SYNC_TIME_BUDGET_SECONDS
        return [source], {}, budget

    if event.get("group"):
        sources = get_group_sources(event["group"])
        budget = settings.SCRAPE_TIME_BUDGET_SECONDS if sources == SCRAPER_SOURCES \
            else settings.SYNC_TIME_BUDGET_SECONDS
        return sources, {}, budget

    if isinstance(event.get("indeed"), dict):
        options = {"region": IndeedRegion(event["indeed"].get("region", IndeedRegion.US.value))}
        if event["indeed"].get("type"):
            options["query_types"] = [IndeedQueryType(event["indeed"]["type"])]
        return [JobSource.INDEED], options, settings.SYNC_TIME_BUDGET_SECONDS

    if isinstance(event.get("scrape"), dict):
        source = parse_source(event["scrape"].get("source", ""))
        if source not in SCRAPER_SOURCES:
            raise ValueError(f"'{source.value}' is not a browser scraper")
        options = {"mode": ScrapeMode(event["scrape"].get("mode", ScrapeMode.FULL.value))}
        return [source], options, settings.SCRAPE_TIME_BUDGET_SECONDS

    raise ValueError(f"Nothing to run in event keys: {sorted(event)}")


def process_event(
    db: Session,
    event: dict,
    settings: Settings,
    _run_and_sync: Callable = run_and_sync,
    _cleanup: Callable = cleanup_duplicates,
) -> dict:
    """Run the batch an event describes and return the report dict."""
    use_test_db = event.get("use_test_db", False)

    if event.get("task") == "cleanup":
        try:
            counts = _cleanup(db, use_test_db=use_test_db)
        except SQLAlchemyError as e:
            logger.exception(f"Duplicate cleanup failed: {e}")
            db.rollback()
            return {"success": False, "deleted": 0, "total": 0, "error": _map_source_error(e)}
        return {"success": True, **counts}

    sources, options, budget = plan_invocation(event, settings)
    deadline = Deadline(budget)
    report: InvocationReport = asyncio.run(_run_and_sync(
        db,
        sources,
        SourceConfig.from_settings(settings),
        deadline,
        use_test_db=use_test_db,
        **options,
    ))
    return report.to_dict()


def handler(event: dict, context) -> dict:
    """
    Lambda handler for scheduled sync.

    Args:
        event: See module docstring
        context: Lambda context (unused)

    Returns:
        InvocationReport dict, cleanup counts, or {"success": False, "error": ...}
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL)
    use_test_db = event.get("use_test_db", False)

    # Validate before opening a connection
    if event.get("task") != "cleanup":
        try:
            plan_invocation(event, settings)
        except ValueError as e:
            logger.error(f"Invalid event {event}: {e}")
            return {"success": False, "error": str(e)}

    db = get_test_session_local() if use_test_db else SessionLocal()
    try:
        return process_event(db, event, settings)
    except Exception as e:
        logger.exception(f"Sync worker error for event {event}: {e}")
        db.rollback()
        return {"success": False, "error": str(e)}
    finally:
        db.close()
