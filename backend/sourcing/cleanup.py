"""
Batch duplicate cleanup over the whole jobs table.

Catches duplicates the per-batch sync cannot see: the same posting listed by
two sources under different apply URLs (aggregator link vs ATS link).

Pass 1 groups by apply_url, pass 2 groups what is left by the soft key
(first 30 characters of the title + company, both lowercased). In each group
the oldest posted_at is kept and the rest deleted.
"""

from typing import Callable, Dict, List

from sqlalchemy.orm import Session

from db.jobs_service import (
    DELETE_BATCH_SIZE,
    StoredJob,
    count_jobs,
    delete_jobs_by_ids,
    list_jobs_for_dedup,
)
from sources.types import soft_dedup_key
from utils.worker_logging import CleanupLogContext


def find_duplicate_ids(rows: List[StoredJob]) -> List[int]:
    """
    Ids to delete so that each apply_url and each soft key keeps only its oldest row.

    Args:
        rows: Stored jobs ordered by posted_at ascending

    Returns:
        Primary keys of the duplicates, apply_url matches first
    """
    ordered = sorted(rows, key=lambda row: (row.posted_at, row.id))
    to_delete: List[int] = []

    survivors: List[StoredJob] = []
    seen_urls = set()
    for row in ordered:
        if row.apply_url:
            if row.apply_url in seen_urls:
                to_delete.append(row.id)
                continue
            seen_urls.add(row.apply_url)
        survivors.append(row)

    seen_keys: Dict[str, int] = {}
    for row in survivors:
        key = soft_dedup_key(row.title, row.company)
        if key in seen_keys:
            to_delete.append(row.id)
            continue
        seen_keys[key] = row.id

    return to_delete


def cleanup_duplicates(
    db: Session,
    use_test_db: bool = False,
    _list_jobs: Callable = list_jobs_for_dedup,
    _delete_jobs: Callable = delete_jobs_by_ids,
    _count_jobs: Callable = count_jobs,
) -> dict:
    """
    Delete duplicate jobs across all sources.

    Returns:
        {"deleted": int, "total": int} where total is the remaining row count
    """
    log = CleanupLogContext("duplicates", use_test_db)

    rows = _list_jobs(db)
    duplicate_ids = find_duplicate_ids(rows)
    log.log_info(f"Scanned {len(rows)} jobs, found {len(duplicate_ids)} duplicates")

    deleted = 0
    if duplicate_ids:
        deleted = _delete_jobs(db, duplicate_ids, DELETE_BATCH_SIZE)
        db.commit()

    total = _count_jobs(db)
    log.log_info(f"Deleted {deleted} duplicates, {total} jobs remain")
    return {"deleted": deleted, "total": total}
