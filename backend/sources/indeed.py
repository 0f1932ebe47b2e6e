"""
Indeed adapter (RapidAPI indeed12)

Search: https://indeed12.p.rapidapi.com/jobs/search?query=...&location=remote
        &page_id=1&locality=<cc>&fromage=7&sort=date -> {"hits": [...]}
Detail: https://indeed12.p.rapidapi.com/job/{id}?locality=<cc>

Two-phase fetch. Search results carry only a title, so the classifier runs
on the title first and a detail request is spent only on likely design
roles, capped per query. The full classification is repeated on the detail
title. Search and detail calls have their own (longer) timeouts.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Dict, Iterable, Optional

from classifier import is_design_job
from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.config import SourceConfig
from sources.enums import IndeedQueryType, IndeedRegion, JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_nested_str, optional_number, optional_str, require_mapping, require_str
from sources.types import NormalizedJob
from utils.deadline import Deadline
from utils.salary import salary_range
from utils.skills import build_skills
from utils.text import html_to_structured_text, normalize_job_type, parse_experience_level, parse_timestamp

API_HOST = "indeed12.p.rapidapi.com"

# Regions without their own Indeed locality are searched through a neighbour
REGION_LOCALITIES = {
    IndeedRegion.US: 'us',
    IndeedRegion.PH: 'ph',
    IndeedRegion.CA: 'ca',
    IndeedRegion.GB: 'gb',
    IndeedRegion.AU: 'au',
    IndeedRegion.IN: 'in',
    IndeedRegion.SG: 'my',
    IndeedRegion.ID: 'id',
}

QUERY_TEMPLATES = {
    IndeedQueryType.UI: 'remote UI designer',
    IndeedQueryType.UX: 'remote UX designer',
    IndeedQueryType.PRODUCT: 'remote product designer',
    IndeedQueryType.GRAPHIC: 'remote graphic designer',
}

QUERY_DELAY_SECONDS = 0.5


@dataclass
class IndeedSearchResult:
    id: str
    title: str
    company_name: str = ""
    location: str = ""
    pub_date_ts_milli: Optional[float] = None

    @classmethod
    def from_payload(cls, data) -> "IndeedSearchResult":
        data = require_mapping(data)
        return cls(
            id=require_str(data, 'id'),
            title=require_str(data, 'title'),
            company_name=optional_str(data, 'company_name', ''),
            location=optional_str(data, 'location', ''),
            pub_date_ts_milli=optional_number(data, 'pub_date_ts_milli'),
        )


@dataclass
class IndeedJobDetail:
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    company_logo: Optional[str] = None
    location: Optional[str] = None
    description: str = ""
    job_type: Optional[str] = None
    apply_url: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_type: Optional[str] = None

    @classmethod
    def from_payload(cls, data) -> "IndeedJobDetail":
        data = require_mapping(data, "job detail")
        salary = data.get('salary') if isinstance(data.get('salary'), dict) else {}
        return cls(
            job_title=optional_str(data, 'job_title'),
            company_name=optional_nested_str(data, 'company', 'name'),
            company_logo=optional_nested_str(data, 'company', 'logo_url'),
            location=optional_str(data, 'location'),
            description=optional_str(data, 'description', ''),
            job_type=optional_str(data, 'job_type'),
            apply_url=optional_str(data, 'apply_url') or optional_str(data, 'indeed_final_url'),
            salary_min=optional_number(salary, 'min'),
            salary_max=optional_number(salary, 'max'),
            salary_type=optional_str(salary, 'type'),
        )


class IndeedSource(BaseJobSource):
    """
    Indeed search for one region and a set of query types.

    Example:
        source = IndeedSource(config, deadline, region='ph', query_types=['ux'])
        jobs = await source.fetch()
    """

    SOURCE = JobSource.INDEED
    API_URL = f"https://{API_HOST}"

    def __init__(
        self,
        config: SourceConfig,
        deadline: Deadline,
        region: IndeedRegion | str = IndeedRegion.US,
        query_types: Optional[Iterable[IndeedQueryType | str]] = None,
    ):
        super().__init__(config, deadline)
        self.region = IndeedRegion(region)
        self.query_types = [IndeedQueryType(q) for q in (query_types or list(IndeedQueryType))]

    @property
    def locality(self) -> str:
        return REGION_LOCALITIES[self.region]

    def is_configured(self) -> bool:
        return bool(self.config.rapidapi_key)

    def get_headers(self) -> Dict[str, str]:
        headers = super().get_headers()
        headers.update({
            'X-RapidAPI-Key': self.config.rapidapi_key or '',
            'X-RapidAPI-Host': API_HOST,
        })
        return headers

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        for index, query_type in enumerate(self.query_types):
            if index > 0:
                await self.throttle(QUERY_DELAY_SECONDS)

            query = QUERY_TEMPLATES[query_type]
            try:
                data = await self.get_json(
                    f"{self.API_URL}/jobs/search",
                    params={
                        'query': query,
                        'location': 'remote',
                        'page_id': 1,
                        'locality': self.locality,
                        'fromage': 7,
                        'sort': 'date',
                    },
                    timeout=self.config.indeed_search_timeout_seconds,
                )
            except TRANSIENT_ERRORS as e:
                self.record_failure(f"Search '{query}' ({self.region.value})", e)
                continue

            results = []
            if isinstance(data, dict):
                results = data.get('hits') or data.get('jobs') or []

            details_spent = 0
            for item in results:
                if details_spent >= self.config.indeed_detail_cap:
                    break
                try:
                    result = IndeedSearchResult.from_payload(item)
                except MalformedPayload as e:
                    self.record_failure("Search result parse", e)
                    continue

                if not self.mark_seen(result.id):
                    continue
                # Phase 1: title-only pre-filter, before paying for a detail call
                if not is_design_job(result.title):
                    continue

                details_spent += 1
                self.stats.detail_calls += 1
                try:
                    detail = IndeedJobDetail.from_payload(await self.get_json(
                        f"{self.API_URL}/job/{result.id}",
                        params={'locality': self.locality},
                        timeout=self.config.indeed_detail_timeout_seconds,
                    ))
                except TRANSIENT_ERRORS as e:
                    self.record_failure(f"Detail {result.id}", e)
                    continue
                finally:
                    await self.throttle(self.config.indeed_detail_delay_seconds)

                # Phase 2: full classification with the detail payload
                description = html_to_structured_text(detail.description)
                if not self.classify(detail.job_title or result.title, None, description):
                    continue

                job = self.try_normalize(f"Item {result.id}", self._normalize, result, detail, description)
                if job:
                    yield job

    def _normalize(
        self,
        result: IndeedSearchResult,
        detail: IndeedJobDetail,
        description: str,
    ) -> NormalizedJob:
        title = detail.job_title or result.title
        salary = salary_range(detail.salary_min, detail.salary_max, detail.salary_type)
        salary_text = None
        if detail.salary_min and detail.salary_max:
            period = (detail.salary_type or '').lower()
            salary_text = f"${detail.salary_min:,.0f} - ${detail.salary_max:,.0f} {period}".strip()

        return self.build_job(
            upstream_id=result.id,
            title=title,
            company=detail.company_name or result.company_name,
            company_logo=detail.company_logo,
            location=detail.location or result.location or "Remote",
            apply_url=detail.apply_url or f"https://www.indeed.com/viewjob?jk={result.id}",
            posted_at=parse_timestamp(result.pub_date_ts_milli),
            description=description,
            salary_min=salary.min,
            salary_max=salary.max,
            salary_text=salary_text,
            job_type=normalize_job_type(detail.job_type, title),
            experience_level=parse_experience_level(title),
            skills=build_skills(description),
        )
