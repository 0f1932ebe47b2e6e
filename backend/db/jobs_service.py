"""
Database service functions for job records.

Provides the existence lookups, conditional insert and batched delete used
by the sync engine and the duplicate cleanup job.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from models.job import Job

logger = logging.getLogger(__name__)

DELETE_BATCH_SIZE = 50


@dataclass
class StoredJob:
    """The columns dedup decisions need, detached from the session"""
    id: int
    external_id: str
    apply_url: Optional[str]
    posted_at: datetime
    title: str = ""
    company: str = ""


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_stored(row) -> StoredJob:
    return StoredJob(
        id=row.id,
        external_id=row.external_id,
        apply_url=row.apply_url,
        posted_at=_as_utc(row.posted_at),
        title=row.title,
        company=row.company,
    )


def find_existing_jobs(
    db: Session,
    external_ids: Iterable[str],
    apply_urls: Iterable[str],
) -> list[StoredJob]:
    """
    Stored jobs matching any of the given external IDs or apply URLs.

    Args:
        db: Database session
        external_ids: Candidate NormalizedJob.id values
        apply_urls: Candidate apply URLs (empty values are ignored)

    Returns:
        List of StoredJob, one per matching row
    """
    external_ids = [value for value in external_ids if value]
    apply_urls = [value for value in apply_urls if value]
    if not external_ids and not apply_urls:
        return []

    conditions = []
    if external_ids:
        conditions.append(Job.external_id.in_(external_ids))
    if apply_urls:
        conditions.append(Job.apply_url.in_(apply_urls))

    rows = db.execute(
        select(
            Job.id, Job.external_id, Job.apply_url, Job.posted_at, Job.title, Job.company
        ).where(or_(*conditions))
    ).all()
    return [_to_stored(row) for row in rows]


def _insert_for(db: Session):
    """Dialect-specific insert() that supports ON CONFLICT DO NOTHING"""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise ValueError(f"Unsupported database dialect: {dialect}")


def insert_job_if_absent(db: Session, row: dict) -> bool:
    """
    Conditionally insert one job row.

    Uses INSERT ... ON CONFLICT DO NOTHING against both unique keys
    (external_id, apply_url), so a concurrent writer can never produce a
    duplicate. Does not commit.

    Args:
        db: Database session
        row: Column values (NormalizedJob.to_row())

    Returns:
        True if a row was inserted, False if it already existed
    """
    insert = _insert_for(db)
    stmt = insert(Job).values(**row).on_conflict_do_nothing()
    result = db.execute(stmt)
    return result.rowcount == 1


def delete_jobs_by_ids(db: Session, ids: Iterable[int], batch_size: int = DELETE_BATCH_SIZE) -> int:
    """
    Delete jobs by primary key in batches. Does not commit.

    Returns:
        Number of rows deleted
    """
    ids = list(ids)
    deleted = 0
    for start in range(0, len(ids), batch_size):
        batch = ids[start:start + batch_size]
        result = db.execute(delete(Job).where(Job.id.in_(batch)))
        deleted += result.rowcount
    if ids:
        logger.info(f"Deleted {deleted} jobs in batches of {batch_size}")
    return deleted


def count_jobs(db: Session) -> int:
    return db.execute(select(func.count(Job.id))).scalar_one()


def list_jobs_for_dedup(db: Session) -> list[StoredJob]:
    """All jobs, oldest posted_at first (ties broken by insertion order)"""
    rows = db.execute(
        select(
            Job.id, Job.external_id, Job.apply_url, Job.posted_at, Job.title, Job.company
        ).order_by(Job.posted_at.asc(), Job.id.asc())
    ).all()
    return [_to_stored(row) for row in rows]
