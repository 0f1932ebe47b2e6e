"""
Unit tests for REST/ATS source adapters.

Upstream calls are replaced by patching get_json on the adapter class, so
no test touches the network. request_delay_seconds=0 keeps throttle() from
sleeping.

Run: python3 -m pytest sources/__tests__/test_rest_sources.py -v
"""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx

from sources.companies import CompanyBoard
from sources.config import SourceConfig
from sources.enums import JobSource
from sources.greenhouse import GreenhouseSource
from sources.himalayas import HimalayasSource
from sources.indeed import IndeedSource
from sources.remotive import RemotiveSource
from utils.deadline import Deadline

NO_DELAY = SourceConfig(request_delay_seconds=0)


def himalayas_page(offset: int, titles: list[str], total: int = 100) -> dict:
    return {
        "offset": offset,
        "limit": 20,
        "totalCount": total,
        "jobs": [
            {
                "guid": f"h{offset}-{i}",
                "title": title,
                "applicationLink": f"https://himalayas.app/jobs/h{offset}-{i}",
                "companyName": "Acme",
                "pubDate": 1704067200,
                "categories": ["Design"],
            }
            for i, title in enumerate(titles)
        ],
    }


def remotive_item(job_id, title="Product Designer", **overrides) -> dict:
    item = {
        "id": job_id,
        "title": title,
        "url": f"https://remotive.com/jobs/{job_id}",
        "company_name": "Acme",
        "publication_date": "2024-01-05T10:00:00",
        "salary": "$80k - $100k",
        "description": "<p>Own the design system in Figma.</p>",
        "tags": ["figma"],
    }
    item.update(overrides)
    return item


def fetch(adapter):
    return asyncio.run(adapter.fetch())


class TestPaginatedSource:
    """Himalayas: offset pagination where one page can fail."""

    def test_failed_page_is_skipped_and_walk_continues(self):
        pages = [
            himalayas_page(0, ["Product Designer"]),
            himalayas_page(20, ["UX Designer"]),
            httpx.ConnectError("connection reset"),
            himalayas_page(60, ["Visual Designer"]),
            himalayas_page(80, ["Brand Designer"]),
        ]
        adapter = HimalayasSource(NO_DELAY, Deadline(60))

        with patch.object(HimalayasSource, "get_json", AsyncMock(side_effect=pages)) as get_json:
            jobs = fetch(adapter)

        assert get_json.await_count == 5
        assert [job.title for job in jobs] == [
            "Product Designer", "UX Designer", "Visual Designer", "Brand Designer",
        ]
        assert adapter.stats.failed_requests == 1
        assert adapter.last_error is None

    def test_stops_at_total_count(self):
        pages = [himalayas_page(0, ["Product Designer"], total=20)]
        adapter = HimalayasSource(NO_DELAY, Deadline(60))

        with patch.object(HimalayasSource, "get_json", AsyncMock(side_effect=pages)) as get_json:
            jobs = fetch(adapter)

        assert len(jobs) == 1
        assert get_json.await_count == 1

    def test_offsets_requested_in_order(self):
        pages = [himalayas_page(0, ["Product Designer"], total=40), himalayas_page(20, [], total=40)]
        adapter = HimalayasSource(NO_DELAY, Deadline(60))

        with patch.object(HimalayasSource, "get_json", AsyncMock(side_effect=pages)) as get_json:
            fetch(adapter)

        offsets = [c.kwargs["params"]["offset"] for c in get_json.await_args_list]
        assert offsets == [0, 20]


class TestSingleRequestSource:
    """Remotive: one request, classification and item-level failures."""

    def test_classifies_and_normalizes(self):
        data = {"jobs": [
            remotive_item(1),
            remotive_item(2, title="Senior Backend Engineer"),
        ]}
        adapter = RemotiveSource(NO_DELAY, Deadline(60))

        with patch.object(RemotiveSource, "get_json", AsyncMock(return_value=data)):
            jobs = fetch(adapter)

        assert len(jobs) == 1
        job = jobs[0]
        assert job.id == "remotive-1"
        assert job.source == JobSource.REMOTIVE
        assert job.salary_min == 80000
        assert job.salary_max == 100000
        assert job.posted_at.tzinfo is not None
        assert "Figma" in job.skills
        assert "<p>" not in job.description
        assert adapter.stats.fetched == 2
        assert adapter.stats.classified == 1

    def test_malformed_item_costs_only_itself(self):
        data = {"jobs": [
            {"id": 9, "url": "https://remotive.com/jobs/9"},  # no title
            remotive_item(3),
        ]}
        adapter = RemotiveSource(NO_DELAY, Deadline(60))

        with patch.object(RemotiveSource, "get_json", AsyncMock(return_value=data)):
            jobs = fetch(adapter)

        assert [job.id for job in jobs] == ["remotive-3"]
        assert adapter.stats.failed_requests == 1

    def test_repeated_ids_are_dropped(self):
        data = {"jobs": [remotive_item(4), remotive_item(4)]}
        adapter = RemotiveSource(NO_DELAY, Deadline(60))

        with patch.object(RemotiveSource, "get_json", AsyncMock(return_value=data)):
            jobs = fetch(adapter)

        assert len(jobs) == 1
        assert adapter.stats.fetched == 1

    def test_request_failure_returns_empty_without_raising(self):
        adapter = RemotiveSource(NO_DELAY, Deadline(60))

        with patch.object(
            RemotiveSource, "get_json", AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        ):
            jobs = fetch(adapter)

        assert jobs == []
        assert adapter.stats.failed_requests == 1

    def test_exhausted_deadline_makes_no_request(self):
        adapter = RemotiveSource(NO_DELAY, Deadline(0))

        with patch("sources.base_source.httpx.AsyncClient") as client:
            jobs = fetch(adapter)

        assert jobs == []
        client.assert_not_called()
        assert adapter.last_error is None


class TestNotConfigured:

    def test_missing_key_skips_without_requests(self):
        adapter = IndeedSource(SourceConfig(), Deadline(60))

        with patch.object(IndeedSource, "get_json", AsyncMock()) as get_json:
            jobs = fetch(adapter)

        assert jobs == []
        assert adapter.skipped is True
        get_json.assert_not_awaited()


class TestIndeedTwoPhase:
    """Title pre-filter, capped detail calls, full classification on the detail."""

    def make_adapter(self):
        config = NO_DELAY.with_overrides(
            rapidapi_key="key",
            indeed_detail_cap=2,
            indeed_detail_delay_seconds=0,
        )
        return IndeedSource(config, Deadline(60), region="ph", query_types=["ux"])

    def test_detail_calls_only_for_design_titles(self):
        search = {"hits": [
            {"id": "a1", "title": "UX Designer", "company_name": "Acme",
             "pub_date_ts_milli": 1704067200000},
            {"id": "a2", "title": "Software Engineer"},
            {"id": "a3", "title": "Product Designer"},
            {"id": "a4", "title": "UI Designer"},
        ]}
        detail_ok = {
            "job_title": "UX Designer",
            "company": {"name": "Acme Corp"},
            "description": "<p>Design flows in Figma.</p>",
            "apply_url": "https://acme.example/apply/a1",
            "salary": {"min": 40, "max": 60, "type": "HOURLY"},
        }
        detail_rejected = {"job_title": "Sales Manager", "description": "Sell things."}
        adapter = self.make_adapter()

        with patch.object(
            IndeedSource, "get_json", AsyncMock(side_effect=[search, detail_ok, detail_rejected])
        ) as get_json:
            jobs = fetch(adapter)

        assert get_json.await_count == 3
        assert adapter.stats.detail_calls == 2
        assert len(jobs) == 1

        job = jobs[0]
        assert job.id == "indeed-a1"
        assert job.company == "Acme Corp"
        assert job.apply_url == "https://acme.example/apply/a1"
        assert job.salary_min == 83200
        assert job.salary_max == 124800
        assert job.posted_at.year == 2024

        search_call = get_json.await_args_list[0]
        assert search_call.kwargs["params"]["locality"] == "ph"
        assert search_call.kwargs["params"]["query"] == "remote UX designer"

    def test_failed_detail_is_counted_and_skipped(self):
        search = {"hits": [{"id": "b1", "title": "UX Designer"}]}
        adapter = self.make_adapter()

        with patch.object(
            IndeedSource, "get_json", AsyncMock(side_effect=[search, httpx.ConnectTimeout("slow")])
        ):
            jobs = fetch(adapter)

        assert jobs == []
        assert adapter.stats.failed_requests == 1

    def test_region_without_locality_uses_neighbour(self):
        adapter = IndeedSource(NO_DELAY, Deadline(60), region="sg")
        assert adapter.locality == "my"
        assert len(adapter.query_types) == 4


class TestBoardSource:

    def test_failed_board_costs_only_itself(self):
        boards = [CompanyBoard("Gone", "gone"), CompanyBoard("Figma", "figma")]
        feed = {"jobs": [
            {"id": 101, "title": "Product Designer, Editor",
             "absolute_url": "https://boards.greenhouse.io/figma/jobs/101",
             "location": {"name": "San Francisco, CA"},
             "updated_at": "2024-02-01T00:00:00-05:00",
             "content": "&lt;p&gt;Design the editor.&lt;/p&gt;"},
            {"id": 102, "title": "Account Executive",
             "absolute_url": "https://boards.greenhouse.io/figma/jobs/102"},
        ]}
        not_found = httpx.HTTPStatusError(
            "404",
            request=httpx.Request("GET", "https://boards-api.greenhouse.io/v1/boards/gone/jobs"),
            response=httpx.Response(404),
        )
        adapter = GreenhouseSource(NO_DELAY, Deadline(60), boards=boards)

        with patch.object(GreenhouseSource, "get_json", AsyncMock(side_effect=[not_found, feed])):
            jobs = fetch(adapter)

        assert [job.id for job in jobs] == ["greenhouse-figma-101"]
        assert jobs[0].company == "Figma"
        assert jobs[0].location == "San Francisco, CA"
        assert adapter.stats.failed_requests == 1
        assert adapter.stats.fetched == 2

    def test_odd_field_on_first_board_does_not_stop_the_walk(self):
        boards = [CompanyBoard("Acme", "acme"), CompanyBoard("Figma", "figma")]
        acme = {"jobs": [
            {"id": 201, "title": "Product Designer",
             "absolute_url": "https://boards.greenhouse.io/acme/jobs/201",
             "location": {"name": {"city": "Berlin"}}},
        ]}
        figma = {"jobs": [
            {"id": 301, "title": "UX Designer",
             "absolute_url": "https://boards.greenhouse.io/figma/jobs/301",
             "location": {"name": 42}},
        ]}
        adapter = GreenhouseSource(NO_DELAY, Deadline(60), boards=boards)

        with patch.object(GreenhouseSource, "get_json", AsyncMock(side_effect=[acme, figma])) as get_json:
            jobs = fetch(adapter)

        assert get_json.await_count == 2
        assert [job.id for job in jobs] == ["greenhouse-acme-201", "greenhouse-figma-301"]
        assert jobs[0].location == "Remote"
        assert jobs[1].location == "42"
        assert adapter.last_error is None

    def test_item_that_fails_to_normalize_costs_only_itself(self):
        boards = [CompanyBoard("Acme", "acme"), CompanyBoard("Figma", "figma")]
        acme = {"jobs": [
            {"id": 201, "title": "Product Designer",
             "absolute_url": "https://boards.greenhouse.io/acme/jobs/201"},
            {"id": 202, "title": "Brand Designer",
             "absolute_url": "https://boards.greenhouse.io/acme/jobs/202"},
        ]}
        figma = {"jobs": [
            {"id": 301, "title": "UX Designer",
             "absolute_url": "https://boards.greenhouse.io/figma/jobs/301"},
        ]}
        original = GreenhouseSource.normalize

        def normalize(self, board, posting):
            if posting.id == "201":
                raise AttributeError("'int' object has no attribute 'strip'")
            return original(self, board, posting)

        adapter = GreenhouseSource(NO_DELAY, Deadline(60), boards=boards)
        with patch.object(GreenhouseSource, "normalize", normalize), \
             patch.object(GreenhouseSource, "get_json", AsyncMock(side_effect=[acme, figma])):
            jobs = fetch(adapter)

        assert [job.id for job in jobs] == ["greenhouse-acme-202", "greenhouse-figma-301"]
        assert adapter.stats.failed_requests == 1
        assert adapter.last_error is None
