"""
Unit tests for the source runner.

Adapters and the sync engine are replaced with fakes via dependency
injection; no network, no database.

Run: python3 -m pytest sourcing/__tests__/test_runner.py -v
"""

import asyncio
from unittest.mock import MagicMock

import httpx
from sqlalchemy.exc import OperationalError

from sourcing.runner import _map_source_error, run_adapter, run_and_sync
from sourcing.sync_engine import SyncResult
from sources.config import SourceConfig
from sources.enums import JobSource
from sources.types import FetchStats
from utils.deadline import Deadline


class FakeAdapter:
    """Adapter surface only: fetch(), stats, skipped, last_error"""

    def __init__(self, source, jobs=(), skipped=False, last_error=None, fetched=None):
        self.SOURCE = JobSource(source)
        self._jobs = list(jobs)
        self.skipped = skipped
        self.last_error = last_error
        self.stats = FetchStats(
            fetched=len(self._jobs) if fetched is None else fetched,
            classified=len(self._jobs),
        )
        self.fetched_calls = 0

    async def fetch(self):
        self.fetched_calls += 1
        return list(self._jobs)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def sync_result(inserted=0, skipped=0, superseded=0):
    return MagicMock(return_value=SyncResult(
        source="x", inserted=inserted, skipped=skipped, superseded=superseded,
    ))


def status_error(code: int) -> httpx.HTTPStatusError:
    return httpx.HTTPStatusError(
        str(code),
        request=httpx.Request("GET", "https://api.example.com"),
        response=httpx.Response(code),
    )


class TestRunAdapter:

    def test_success(self, make_job):
        adapter = FakeAdapter("remotive", jobs=[make_job(), make_job(id="remotive-2")])
        sync = sync_result(inserted=2)

        result, jobs = asyncio.run(run_adapter(adapter, MagicMock(), Deadline(60), _sync=sync))

        assert result.status == "success"
        assert (result.fetched, result.classified, result.inserted) == (2, 2, 2)
        assert len(jobs) == 2
        sync.assert_called_once()

    def test_not_configured_is_skipped(self):
        adapter = FakeAdapter("jsearch", skipped=True)
        sync = sync_result()

        result, _ = asyncio.run(run_adapter(adapter, MagicMock(), Deadline(60), _sync=sync))

        assert result.status == "skipped"
        assert result.error_message == "Not configured"
        sync.assert_not_called()

    def test_error_after_some_jobs_is_partial_and_still_synced(self, make_job):
        adapter = FakeAdapter("remoteok", jobs=[make_job(id="remoteok-1")],
                              last_error=KeyError("jobs"))
        sync = sync_result(inserted=1)

        result, _ = asyncio.run(run_adapter(adapter, MagicMock(), Deadline(60), _sync=sync))

        assert result.status == "partial"
        assert result.inserted == 1
        assert result.error_message == "Unexpected response format - API may have changed"

    def test_error_without_jobs(self):
        adapter = FakeAdapter("adzuna", last_error=status_error(401))

        result, _ = asyncio.run(run_adapter(adapter, MagicMock(), Deadline(60), _sync=sync_result()))

        assert result.status == "error"
        assert result.error_message == "Access denied - check API credentials"

    def test_database_error_rolls_back(self, make_job):
        adapter = FakeAdapter("lever", jobs=[make_job(id="lever-acme-1")])
        db = MagicMock()
        sync = MagicMock(side_effect=OperationalError("INSERT", {}, Exception("db down")))

        result, jobs = asyncio.run(run_adapter(adapter, db, Deadline(60), _sync=sync))

        db.rollback.assert_called_once()
        assert result.status == "error"
        assert result.error_message == "Database error while syncing: OperationalError"
        assert len(jobs) == 1

    def test_dry_run_does_not_sync(self, make_job):
        adapter = FakeAdapter("remotive", jobs=[make_job()])
        sync = sync_result()

        result, jobs = asyncio.run(
            run_adapter(adapter, None, Deadline(60), dry_run=True, _sync=sync)
        )

        sync.assert_not_called()
        assert result.inserted == 0
        assert len(jobs) == 1


class TestRunAndSync:

    def test_sources_run_in_order_and_failures_are_isolated(self, make_job):
        adapters = {
            JobSource.REMOTIVE: FakeAdapter("remotive", last_error=httpx.ConnectError("refused")),
            JobSource.HIMALAYAS: FakeAdapter("himalayas", jobs=[make_job(id="himalayas-1")]),
        }
        get_source = MagicMock(side_effect=lambda source, config, deadline, **options: adapters[source])

        report = asyncio.run(run_and_sync(
            MagicMock(),
            ["remotive", "himalayas"],
            SourceConfig(),
            Deadline(60),
            _sync=sync_result(inserted=1),
            _get_source=get_source,
        ))

        assert report.sources == ["remotive", "himalayas"]
        assert [r.status for r in report.results] == ["error", "success"]
        assert report.errors == [{"source": "remotive", "message": "Could not connect to upstream"}]
        assert report.success is False
        assert report.total("inserted") == 1
        assert len(report.jobs) == 1

    def test_options_reach_the_adapter(self):
        get_source = MagicMock(return_value=FakeAdapter("indeed"))

        asyncio.run(run_and_sync(
            None, ["indeed"], SourceConfig(), Deadline(60),
            dry_run=True, _get_source=get_source, region="ph",
        ))

        assert get_source.call_args.kwargs == {"region": "ph"}

    def test_source_not_started_when_budget_is_gone(self, make_job):
        clock = FakeClock()
        deadline = Deadline(10, clock=clock)

        class SlowAdapter(FakeAdapter):
            async def fetch(self):
                clock.now = 8.0
                return await super().fetch()

        first = SlowAdapter("greenhouse", jobs=[make_job(id="greenhouse-acme-1")])
        second = FakeAdapter("lever")
        get_source = MagicMock(side_effect=[first, second])

        report = asyncio.run(run_and_sync(
            MagicMock(), ["greenhouse", "lever"], SourceConfig(), deadline,
            _sync=sync_result(inserted=1), _get_source=get_source,
        ))

        assert get_source.call_count == 1
        assert report.results[1].status == "skipped"
        assert report.results[1].error_message == "Time budget exhausted before start"
        assert second.fetched_calls == 0

    def test_warning_when_nothing_fetched(self):
        get_source = MagicMock(return_value=FakeAdapter("nodesk"))

        report = asyncio.run(run_and_sync(
            MagicMock(), ["nodesk"], SourceConfig(), Deadline(60), _get_source=get_source,
        ))

        assert report.warning == "No jobs fetched - upstream layout or API may have changed"
        assert report.to_dict()["warning"] == report.warning

    def test_no_warning_when_every_source_was_skipped(self):
        get_source = MagicMock(return_value=FakeAdapter("jsearch", skipped=True))

        report = asyncio.run(run_and_sync(
            MagicMock(), ["jsearch"], SourceConfig(), Deadline(60), _get_source=get_source,
        ))

        assert report.warning is None
        assert report.success is True


class TestMapSourceError:

    def test_status_codes(self):
        assert _map_source_error(status_error(429)) == "Rate limited - try again later"
        assert _map_source_error(status_error(503)) == "Upstream is temporarily unavailable"
        assert _map_source_error(status_error(404)) == "HTTP error: 404"

    def test_timeout(self):
        assert _map_source_error(httpx.ReadTimeout("slow")) == "Request timed out - upstream may be slow"

    def test_unknown_error_hides_details(self):
        assert _map_source_error(RuntimeError("secret path")) == "Source failed: RuntimeError"
