"""
Tests for the sync engine.

Store behaviour runs against the in-memory SQLite fixtures from conftest.py;
race and counting paths use injected fakes.

Run: python3 -m pytest sourcing/__tests__/test_sync_engine.py -v
"""

from unittest.mock import MagicMock

from db.jobs_service import count_jobs, list_jobs_for_dedup
from sourcing.sync_engine import collapse_candidates, sync_jobs


def stored_external_ids(db) -> list[str]:
    return sorted(row.external_id for row in list_jobs_for_dedup(db))


class TestSyncJobs:

    def test_inserts_new_jobs(self, test_db, make_job):
        jobs = [make_job(id="remotive-1"), make_job(id="remotive-2")]

        result = sync_jobs(test_db, jobs, "remotive")

        assert result.to_dict() == {
            "source": "remotive", "fetched": 2, "inserted": 2, "skipped": 0, "superseded": 0,
        }
        assert count_jobs(test_db) == 2

    def test_same_batch_twice_inserts_nothing(self, test_db, make_job):
        jobs = [make_job(id="remotive-1"), make_job(id="remotive-2")]
        sync_jobs(test_db, jobs, "remotive")

        result = sync_jobs(test_db, jobs, "remotive")

        assert result.inserted == 0
        assert result.skipped == 2
        assert count_jobs(test_db) == 2

    def test_oldest_posting_kept_across_sources(self, test_db, make_job):
        url = "https://boards.greenhouse.io/acme/jobs/1"
        sync_jobs(test_db, [make_job(id="greenhouse-acme-1", apply_url=url, posted_at="2024-01-01")],
                  "greenhouse")

        result = sync_jobs(
            test_db,
            [make_job(id="remotive-77", apply_url=url, posted_at="2024-02-01")],
            "remotive",
        )

        assert result.skipped == 1
        assert result.inserted == 0
        assert stored_external_ids(test_db) == ["greenhouse-acme-1"]

    def test_older_candidate_supersedes_stored_row(self, test_db, make_job):
        url = "https://jobs.lever.co/acme/2"
        sync_jobs(test_db, [make_job(id="himalayas-9", apply_url=url, posted_at="2024-03-01")],
                  "himalayas")

        result = sync_jobs(
            test_db,
            [make_job(id="lever-acme-2", apply_url=url, posted_at="2024-01-01")],
            "lever",
        )

        assert result.superseded == 1
        assert result.inserted == 0
        assert stored_external_ids(test_db) == ["lever-acme-2"]
        [row] = list_jobs_for_dedup(test_db)
        assert row.posted_at.year == 2024 and row.posted_at.month == 1

    def test_equal_posted_at_keeps_stored_row(self, test_db, make_job):
        url = "https://example.com/apply/3"
        sync_jobs(test_db, [make_job(id="arbeitnow-3", apply_url=url)], "arbeitnow")

        result = sync_jobs(test_db, [make_job(id="jobicy-3", apply_url=url)], "jobicy")

        assert result.skipped == 1
        assert stored_external_ids(test_db) == ["arbeitnow-3"]

    def test_in_batch_duplicates_collapse_to_oldest(self, test_db, make_job):
        url = "https://example.com/apply/4"
        jobs = [
            make_job(id="remoteok-4a", apply_url=url, posted_at="2024-01-05"),
            make_job(id="remoteok-4b", apply_url=url, posted_at="2024-01-01"),
        ]

        result = sync_jobs(test_db, jobs, "remoteok")

        assert result.inserted == 1
        assert result.skipped == 1
        assert stored_external_ids(test_db) == ["remoteok-4b"]

    def test_jobs_without_apply_url_dedup_on_id_only(self, test_db, make_job):
        jobs = [make_job(id="ycombinator-1", apply_url=""), make_job(id="ycombinator-2", apply_url="")]

        result = sync_jobs(test_db, jobs, "ycombinator")

        assert result.inserted == 2

    def test_empty_batch_touches_nothing(self):
        db = MagicMock()
        find = MagicMock()

        result = sync_jobs(db, [], "remotive", _find_existing=find)

        assert result.fetched == 0
        find.assert_not_called()
        db.commit.assert_not_called()

    def test_lost_insert_race_counts_as_skip(self, make_job):
        db = MagicMock()

        result = sync_jobs(
            db,
            [make_job(id="remotive-5")],
            "remotive",
            _find_existing=MagicMock(return_value=[]),
            _insert_job=MagicMock(return_value=False),
        )

        assert result.inserted == 0
        assert result.skipped == 1
        db.commit.assert_called_once()


class TestCollapseCandidates:

    def test_keeps_first_per_id_and_url_in_date_order(self, make_job):
        jobs = [
            make_job(id="lever-a-1", apply_url="https://x/1", posted_at="2024-01-03"),
            make_job(id="lever-a-1", apply_url="https://x/other", posted_at="2024-01-02"),
            make_job(id="lever-a-2", apply_url="https://x/other", posted_at="2024-01-04"),
            make_job(id="lever-a-3", apply_url="https://x/3", posted_at="2024-01-01"),
        ]

        kept, dropped = collapse_candidates(jobs)

        assert [(job.id, job.apply_url) for job in kept] == [
            ("lever-a-3", "https://x/3"),
            ("lever-a-1", "https://x/other"),
        ]
        assert dropped == 2
