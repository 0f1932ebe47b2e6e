"""
Tests for the job store functions.

Run against in-memory SQLite (see conftest.py), which supports the same
INSERT ... ON CONFLICT DO NOTHING as PostgreSQL.

Run: python3 -m pytest db/__tests__/test_jobs_service.py -v
"""

from unittest.mock import MagicMock

import pytest

from db.jobs_service import (
    _insert_for,
    count_jobs,
    delete_jobs_by_ids,
    find_existing_jobs,
    insert_job_if_absent,
    list_jobs_for_dedup,
)


def seed(db, *jobs):
    for job in jobs:
        assert insert_job_if_absent(db, job.to_row()) is True
    db.commit()


class TestInsertJobIfAbsent:

    def test_insert_then_conflict_on_external_id(self, test_db, make_job):
        job = make_job(id="remotive-1")
        assert insert_job_if_absent(test_db, job.to_row()) is True
        assert insert_job_if_absent(test_db, job.to_row()) is False
        assert count_jobs(test_db) == 1

    def test_conflict_on_apply_url(self, test_db, make_job):
        seed(test_db, make_job(id="remotive-1", apply_url="https://x/1"))

        inserted = insert_job_if_absent(
            test_db, make_job(id="jobicy-1", apply_url="https://x/1").to_row()
        )

        assert inserted is False
        assert count_jobs(test_db) == 1

    def test_row_values_round_trip(self, test_db, make_job):
        seed(test_db, make_job(id="lever-acme-7", skills=["Figma", "Sketch"], salary_min=90000))

        [row] = list_jobs_for_dedup(test_db)

        assert row.external_id == "lever-acme-7"
        assert row.posted_at.tzinfo is not None
        assert row.company == "Acme"

    def test_unsupported_dialect(self):
        db = MagicMock()
        db.get_bind.return_value.dialect.name = "mysql"
        with pytest.raises(ValueError, match="Unsupported database dialect: mysql"):
            _insert_for(db)


class TestFindExistingJobs:

    def test_matches_by_id_or_url(self, test_db, make_job):
        seed(
            test_db,
            make_job(id="remotive-1", apply_url="https://x/1"),
            make_job(id="remotive-2", apply_url="https://x/2"),
            make_job(id="remotive-3", apply_url="https://x/3"),
        )

        found = find_existing_jobs(test_db, ["remotive-1", "remotive-9"], ["https://x/3", ""])

        assert sorted(row.external_id for row in found) == ["remotive-1", "remotive-3"]

    def test_empty_inputs_skip_the_query(self):
        db = MagicMock()
        assert find_existing_jobs(db, [], [""]) == []
        db.execute.assert_not_called()


class TestDeleteJobsByIds:

    def test_deletes_in_batches(self, test_db, make_job):
        seed(test_db, *[make_job(id=f"remotive-{i}") for i in range(7)])
        ids = [row.id for row in list_jobs_for_dedup(test_db)]

        deleted = delete_jobs_by_ids(test_db, ids[:5], batch_size=2)
        test_db.commit()

        assert deleted == 5
        assert count_jobs(test_db) == 2

    def test_no_ids(self, test_db):
        assert delete_jobs_by_ids(test_db, []) == 0


class TestListJobsForDedup:

    def test_oldest_first(self, test_db, make_job):
        seed(
            test_db,
            make_job(id="remotive-new", posted_at="2024-05-01"),
            make_job(id="remotive-old", posted_at="2023-12-01"),
        )

        rows = list_jobs_for_dedup(test_db)

        assert [row.external_id for row in rows] == ["remotive-old", "remotive-new"]
