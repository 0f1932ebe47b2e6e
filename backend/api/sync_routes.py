"""
API routes for scheduled sync triggers.

Endpoints (GET and POST, all require Authorization: Bearer <CRON_SECRET>):
- /api/cron/sync?source=<source> | ?group=<group>   Run one source or a group
- /api/cron/sync-indeed?region=<region>&type=<type> One Indeed region batch
- /api/cron/scrape?source=<remoteco|nodesk>&mode=<full|quick>
- /api/cron/cleanup-duplicates                       Cross-source duplicate cleanup
- /api/cron/endpoints                                List every valid trigger URL

Adapter and sync failures are reported inside a 200 response; only bad
credentials (401) and unknown parameters (400) are HTTP errors.

Running locally:
    cd backend
    uvicorn main:app --reload
    curl -H "Authorization: Bearer $CRON_SECRET" \
        "http://localhost:8000/api/cron/sync?source=remotive"
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auth.dependencies import verify_cron_secret
from config.settings import Settings, get_settings
from db.session import get_db
from sourcing.cleanup import cleanup_duplicates
from sourcing.runner import _map_source_error, run_and_sync
from sources.config import SourceConfig
from sources.enums import IndeedQueryType, IndeedRegion, JobSource, ScrapeMode
from sources.registry import (
    SCRAPER_SOURCES,
    get_group_sources,
    list_groups,
    list_sources,
    parse_group,
    parse_source,
)
from utils.deadline import Deadline

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_cron_secret)])


# =============================================================================
# Pydantic Models
# =============================================================================

class SourceResult(BaseModel):
    """Fetch + sync outcome for one source."""
    source: str
    status: str
    fetched: int = 0
    classified: int = 0
    inserted: int = 0
    skipped: int = 0
    superseded: int = 0
    failed_requests: int = 0
    duration_ms: int = 0
    error_message: Optional[str] = None


class SourceErrorInfo(BaseModel):
    source: str
    message: str


class SyncResponse(BaseModel):
    """Aggregate result of one trigger call."""
    success: bool
    sources: list[str]
    fetched: int = 0
    classified: int = 0
    inserted: int = 0
    skipped: int = 0
    superseded: int = 0
    duration_ms: int = 0
    results: list[SourceResult] = []
    errors: list[SourceErrorInfo] = []
    warning: Optional[str] = None


class CleanupResponse(BaseModel):
    success: bool
    deleted: int
    total: int
    duration_ms: int
    error: Optional[str] = None


class EndpointsResponse(BaseModel):
    sources: list[str]
    groups: list[str]
    endpoints: list[str]


# =============================================================================
# Helpers
# =============================================================================

def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _parse_choice(enum_cls, value: str, label: str):
    try:
        return enum_cls((value or '').strip().lower())
    except ValueError:
        valid = ', '.join(member.value for member in enum_cls)
        raise _bad_request(f"Invalid {label} '{value}'. Valid values: {valid}") from None


def _source_config(settings: Settings) -> SourceConfig:
    return SourceConfig.from_settings(settings)


# =============================================================================
# Endpoints
# =============================================================================

@router.api_route("/sync", methods=["GET", "POST"], response_model=SyncResponse)
async def sync(
    source: Optional[str] = Query(default=None),
    group: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Run one source or one group of sources and sync their jobs.

    Example:
        GET /api/cron/sync?group=ats
        Authorization: Bearer <CRON_SECRET>

        Response:
        {
            "success": true,
            "sources": ["greenhouse", "lever", "ashby"],
            "fetched": 412,
            "classified": 23,
            "inserted": 5,
            "skipped": 18,
            "superseded": 0,
            "results": [...],
            "errors": []
        }
    """
    if bool(source) == bool(group):
        raise _bad_request(
            f"Pass exactly one of source or group. Sources: {', '.join(list_sources())}. "
            f"Groups: {', '.join(list_groups())}"
        )

    try:
        sources = [parse_source(source)] if source else get_group_sources(parse_group(group))
    except ValueError as e:
        raise _bad_request(str(e)) from None

    deadline = Deadline(settings.SYNC_TIME_BUDGET_SECONDS)
    report = await run_and_sync(db, sources, _source_config(settings), deadline)
    return report.to_dict()


@router.api_route("/sync-indeed", methods=["GET", "POST"], response_model=SyncResponse)
async def sync_indeed(
    region: Optional[str] = Query(default=None),
    type: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Run one Indeed region, optionally narrowed to one query type.

    Regions are split into separate calls because each RapidAPI round trip
    is slow; one region with all four query types fits the sync budget.
    """
    indeed_region = _parse_choice(IndeedRegion, region, "region")
    query_types = [_parse_choice(IndeedQueryType, type, "type")] if type else None

    deadline = Deadline(settings.SYNC_TIME_BUDGET_SECONDS)
    report = await run_and_sync(
        db,
        [JobSource.INDEED],
        _source_config(settings),
        deadline,
        region=indeed_region,
        query_types=query_types,
    )
    return report.to_dict()


@router.api_route("/scrape", methods=["GET", "POST"], response_model=SyncResponse)
async def scrape(
    source: Optional[str] = Query(default=None),
    mode: str = Query(default=ScrapeMode.FULL.value),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Run one browser scraper (full: listing + detail pages, quick: listing only)."""
    valid = ', '.join(s.value for s in SCRAPER_SOURCES)
    try:
        scraper = parse_source(source)
    except ValueError:
        raise _bad_request(f"Invalid source '{source}'. Valid values: {valid}") from None
    if scraper not in SCRAPER_SOURCES:
        raise _bad_request(f"Invalid source '{source}'. Valid values: {valid}")
    scrape_mode = _parse_choice(ScrapeMode, mode, "mode")

    deadline = Deadline(settings.SCRAPE_TIME_BUDGET_SECONDS)
    report = await run_and_sync(
        db, [scraper], _source_config(settings), deadline, mode=scrape_mode
    )
    if report.total("fetched") == 0 and not report.warning:
        report.warning = "No jobs scraped - page layout may have changed"
    return report.to_dict()


@router.api_route("/cleanup-duplicates", methods=["GET", "POST"], response_model=CleanupResponse)
async def cleanup(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Delete cross-source duplicates, keeping the oldest posting of each."""
    deadline = Deadline(settings.SYNC_TIME_BUDGET_SECONDS)
    try:
        counts = cleanup_duplicates(db)
    except SQLAlchemyError as e:
        logger.exception(f"Duplicate cleanup failed: {e}")
        db.rollback()
        return {
            "success": False,
            "deleted": 0,
            "total": 0,
            "duration_ms": deadline.elapsed_ms(),
            "error": _map_source_error(e),
        }
    return {"success": True, **counts, "duration_ms": deadline.elapsed_ms()}


@router.get("/endpoints", response_model=EndpointsResponse)
async def list_endpoints():
    """Every valid trigger URL, for wiring up the scheduler."""
    endpoints = [f"/api/cron/sync?source={name}" for name in list_sources()]
    endpoints += [f"/api/cron/sync?group={name}" for name in list_groups()]
    endpoints += [
        f"/api/cron/sync-indeed?region={region.value}&type={query_type.value}"
        for region in IndeedRegion
        for query_type in IndeedQueryType
    ]
    endpoints += [
        f"/api/cron/scrape?source={scraper.value}&mode={mode.value}"
        for scraper in SCRAPER_SOURCES
        for mode in ScrapeMode
    ]
    endpoints.append("/api/cron/cleanup-duplicates")
    return {"sources": list_sources(), "groups": list_groups(), "endpoints": endpoints}
