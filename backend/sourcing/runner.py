"""
Run adapters and sync their output, one source after another.

Each source is isolated: an adapter failure or a database error for one
source is logged, rolled back and reported, and the next source still runs.
Sources that would start after the invocation deadline are reported as
skipped instead of being started.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sourcing.sync_engine import sync_jobs
from sources.config import SourceConfig
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.registry import get_source
from sources.types import NormalizedJob
from utils.deadline import Deadline
from utils.worker_logging import SyncLogContext
from workers.types import InvocationReport, SourceRunResult

logger = logging.getLogger(__name__)

# Less budget than this left: don't start another source
MIN_SOURCE_SECONDS = 3.0


def _map_source_error(e: Exception) -> str:
    """Map exception to user-friendly error message."""
    if isinstance(e, httpx.TimeoutException):
        return "Request timed out - upstream may be slow"
    elif isinstance(e, httpx.ConnectError):
        return "Could not connect to upstream"
    elif isinstance(e, httpx.HTTPStatusError):
        status_code = e.response.status_code
        if status_code in (401, 403):
            return "Access denied - check API credentials"
        elif status_code == 429:
            return "Rate limited - try again later"
        elif status_code >= 500:
            return "Upstream is temporarily unavailable"
        else:
            return f"HTTP error: {status_code}"
    elif isinstance(e, SQLAlchemyError):
        return f"Database error while syncing: {type(e).__name__}"
    elif isinstance(e, (MalformedPayload, KeyError, TypeError, ValueError)):
        return "Unexpected response format - API may have changed"
    else:
        # Generic fallback - don't expose internal details
        return f"Source failed: {type(e).__name__}"


async def run_adapter(
    adapter,
    db: Optional[Session],
    deadline: Deadline,
    use_test_db: bool = False,
    dry_run: bool = False,
    _sync: Callable = sync_jobs,
) -> Tuple[SourceRunResult, List[NormalizedJob]]:
    """
    Fetch one adapter and sync its jobs.

    Args:
        adapter: BaseJobSource or ScrapeOrchestrator instance
        db: Database session (may be None when dry_run)
        deadline: Invocation budget, used for the duration
        use_test_db: Adds the [TEST] log prefix
        dry_run: Fetch and classify only, nothing is written
        _sync: Injected for testing

    Returns:
        (SourceRunResult, fetched jobs)
    """
    source = adapter.SOURCE.value
    log = SyncLogContext(source, use_test_db)
    started_ms = deadline.elapsed_ms()

    jobs = await adapter.fetch()

    result = SourceRunResult(
        source=source,
        fetched=adapter.stats.fetched,
        classified=adapter.stats.classified,
        failed_requests=adapter.stats.failed_requests,
    )

    if adapter.skipped:
        result.status = "skipped"
        result.error_message = "Not configured"
    elif adapter.last_error is not None:
        result.status = "partial" if jobs else "error"
        result.error_message = _map_source_error(adapter.last_error)

    if jobs and not dry_run:
        try:
            sync = _sync(db, jobs, source)
        except SQLAlchemyError as e:
            db.rollback()
            log.log_error(f"Sync failed, rolled back: {type(e).__name__}: {e}")
            result.status = "error"
            result.error_message = _map_source_error(e)
        else:
            result.inserted = sync.inserted
            result.skipped = sync.skipped
            result.superseded = sync.superseded

    result.duration_ms = deadline.elapsed_ms() - started_ms
    log.log_info(
        f"{result.status}: fetched={result.fetched} classified={result.classified} "
        f"inserted={result.inserted} skipped={result.skipped} superseded={result.superseded}"
    )
    return result, jobs


async def run_and_sync(
    db: Optional[Session],
    sources: Iterable[JobSource | str],
    config: SourceConfig,
    deadline: Deadline,
    use_test_db: bool = False,
    dry_run: bool = False,
    _sync: Callable = sync_jobs,
    _get_source: Callable = get_source,
    **options,
) -> InvocationReport:
    """
    Run a list of sources sequentially and sync each one's output.

    Args:
        db: Database session (may be None when dry_run)
        sources: Source names in run order
        config: Per-invocation SourceConfig
        deadline: Invocation budget shared by all sources
        use_test_db: Adds the [TEST] log prefix
        dry_run: Fetch and classify only
        _sync: Injected for testing
        _get_source: Injected for testing
        **options: Passed to every adapter constructor (Indeed region,
                   scraper mode, ...)

    Returns:
        InvocationReport with one SourceRunResult per source
    """
    report = InvocationReport()

    for name in sources:
        source = JobSource(name)

        if deadline.remaining() < MIN_SOURCE_SECONDS:
            logger.warning(f"Time budget exhausted, not starting {source.value}")
            report.results.append(SourceRunResult(
                source=source.value,
                status="skipped",
                error_message="Time budget exhausted before start",
            ))
            continue

        adapter = _get_source(source, config, deadline, **options)
        result, jobs = await run_adapter(
            adapter, db, deadline, use_test_db=use_test_db, dry_run=dry_run, _sync=_sync
        )
        report.results.append(result)
        report.jobs.extend(jobs)

    report.duration_ms = deadline.elapsed_ms()
    if report.results and report.total("fetched") == 0 and all(
        r.status in ("success", "partial") for r in report.results
    ):
        report.warning = "No jobs fetched - upstream layout or API may have changed"

    return report
