"""
Sync engine: reconcile a batch of NormalizedJob candidates into the jobs table.

Dedup keys, in priority order:
1. external_id ("<source>-<upstream id>"): an existing row always wins
2. apply_url: the posting with the oldest posted_at wins, regardless of
   which source or run discovered it first

Rules:
- Within a batch, candidates are sorted by posted_at ascending and the
  first one per id and per apply_url is kept.
- A stored row with the same apply_url and an older-or-equal posted_at
  makes the candidate a skip.
- A stored row with the same apply_url and a newer posted_at is deleted
  and the candidate inserted in its place (superseded).
- Inserts are INSERT ... ON CONFLICT DO NOTHING, so a row that appeared
  between lookup and insert is a skip, never an error.

Running the same batch twice inserts nothing the second time.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Tuple

from sqlalchemy.orm import Session

from db.jobs_service import (
    StoredJob,
    delete_jobs_by_ids,
    find_existing_jobs,
    insert_job_if_absent,
)
from sources.types import NormalizedJob

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Counts for one sync_jobs() call; every field is always present"""
    source: str
    fetched: int = 0
    inserted: int = 0
    skipped: int = 0
    superseded: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def collapse_candidates(jobs: Iterable[NormalizedJob]) -> Tuple[List[NormalizedJob], int]:
    """
    In-batch dedup: oldest posted_at first, first occurrence per id and per apply_url kept.

    Returns:
        (kept candidates in posted_at order, number dropped)
    """
    jobs = list(jobs)
    ordered = sorted(jobs, key=lambda job: job.posted_at)

    kept: List[NormalizedJob] = []
    seen_ids = set()
    seen_urls = set()
    for job in ordered:
        if job.id in seen_ids:
            continue
        if job.apply_url and job.apply_url in seen_urls:
            continue
        seen_ids.add(job.id)
        if job.apply_url:
            seen_urls.add(job.apply_url)
        kept.append(job)

    return kept, len(jobs) - len(kept)


def _posted_at(job: NormalizedJob) -> datetime:
    if job.posted_at.tzinfo is None:
        return job.posted_at.replace(tzinfo=timezone.utc)
    return job.posted_at


def sync_jobs(
    db: Session,
    jobs: List[NormalizedJob],
    source_name: str,
    _find_existing: Callable = find_existing_jobs,
    _insert_job: Callable = insert_job_if_absent,
    _delete_jobs: Callable = delete_jobs_by_ids,
) -> SyncResult:
    """
    Persist a batch of candidates from one source.

    Args:
        db: Database session (committed once at the end)
        jobs: Candidates from one adapter run
        source_name: Source label for logging and the result
        _find_existing: Injected for testing
        _insert_job: Injected for testing
        _delete_jobs: Injected for testing

    Returns:
        SyncResult with fetched/inserted/skipped/superseded counts

    Raises:
        SQLAlchemyError: On database failure (caller rolls back)
    """
    result = SyncResult(source=source_name, fetched=len(jobs))
    if not jobs:
        return result

    candidates, collapsed = collapse_candidates(jobs)
    result.skipped += collapsed

    existing: List[StoredJob] = _find_existing(
        db,
        [job.id for job in candidates],
        [job.apply_url for job in candidates],
    )
    stored_ids = {row.external_id for row in existing}
    stored_by_url = {row.apply_url: row for row in existing if row.apply_url}

    for job in candidates:
        if job.id in stored_ids:
            result.skipped += 1
            continue

        stored = stored_by_url.get(job.apply_url) if job.apply_url else None
        if stored is not None:
            if stored.posted_at <= _posted_at(job):
                result.skipped += 1
                continue
            # Stored copy is newer: replace it so the oldest posting wins
            _delete_jobs(db, [stored.id])
            del stored_by_url[job.apply_url]
            if _insert_job(db, job.to_row()):
                result.superseded += 1
            else:
                result.skipped += 1
            continue

        if _insert_job(db, job.to_row()):
            result.inserted += 1
        else:
            result.skipped += 1

    db.commit()

    logger.info(
        f"Sync {source_name}: fetched={result.fetched} inserted={result.inserted} "
        f"skipped={result.skipped} superseded={result.superseded}"
    )
    return result
