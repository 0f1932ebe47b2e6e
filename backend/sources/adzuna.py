"""
Adzuna adapter

API: https://api.adzuna.com/v1/api/jobs/{country}/search/{page}
Auth: app_id / app_key query parameters (ADZUNA_APP_ID, ADZUNA_API_KEY);
skipped when either is absent.

Adzuna has no remote filter, so postings are kept only when the location
or description says remote / work from home / work from anywhere.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_nested_str, optional_number, optional_str, require_mapping, require_str
from sources.types import NormalizedJob
from utils.salary import salary_range
from utils.skills import build_skills
from utils.text import normalize_job_type, parse_experience_level, parse_timestamp, strip_html

COUNTRIES = ['us', 'gb']
SEARCH_QUERIES = ['designer', 'ux designer', 'ui designer', 'product designer', 'graphic designer']
RESULTS_PER_PAGE = 50
PAGES_PER_QUERY = 2
REQUEST_DELAY_SECONDS = 0.1

REMOTE_MARKERS = ('remote', 'work from home', 'work from anywhere')


@dataclass
class AdzunaListing:
    id: str
    title: str
    redirect_url: str
    description: str = ""
    company: str = ""
    location: str = ""
    created: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    contract_time: Optional[str] = None
    contract_type: Optional[str] = None

    @classmethod
    def from_payload(cls, data) -> "AdzunaListing":
        data = require_mapping(data)
        return cls(
            id=require_str(data, 'id'),
            title=require_str(data, 'title'),
            redirect_url=require_str(data, 'redirect_url'),
            description=optional_str(data, 'description', ''),
            company=optional_nested_str(data, 'company', 'display_name', default=''),
            location=optional_nested_str(data, 'location', 'display_name', default=''),
            created=optional_str(data, 'created'),
            salary_min=optional_number(data, 'salary_min'),
            salary_max=optional_number(data, 'salary_max'),
            contract_time=optional_str(data, 'contract_time'),
            contract_type=optional_str(data, 'contract_type'),
        )

    @property
    def is_remote(self) -> bool:
        haystack = f"{self.location} {self.description}".lower()
        return any(marker in haystack for marker in REMOTE_MARKERS)


class AdzunaSource(BaseJobSource):
    """Keyed search across US and UK markets"""

    SOURCE = JobSource.ADZUNA
    API_URL = "https://api.adzuna.com/v1/api/jobs"

    def is_configured(self) -> bool:
        return bool(self.config.adzuna_app_id and self.config.adzuna_api_key)

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        for country in COUNTRIES:
            for query in SEARCH_QUERIES:
                for page in range(1, min(PAGES_PER_QUERY, self.config.max_pages) + 1):
                    try:
                        data = await self.get_json(
                            f"{self.API_URL}/{country}/search/{page}",
                            params={
                                'app_id': self.config.adzuna_app_id,
                                'app_key': self.config.adzuna_api_key,
                                'results_per_page': RESULTS_PER_PAGE,
                                'what': query,
                                'what_or': 'remote design figma',
                                'content-type': 'application/json',
                            },
                        )
                    except TRANSIENT_ERRORS as e:
                        self.record_failure(f"{country}/'{query}' page {page}", e)
                        continue
                    finally:
                        await self.throttle(REQUEST_DELAY_SECONDS)

                    items = data.get('results') if isinstance(data, dict) else None
                    for item in items or []:
                        try:
                            listing = AdzunaListing.from_payload(item)
                        except MalformedPayload as e:
                            self.record_failure("Item parse", e)
                            continue

                        if not self.mark_seen(listing.id):
                            continue
                        if not listing.is_remote:
                            continue
                        if not self.classify(listing.title):
                            continue

                        job = self.try_normalize(f"Item {listing.id}", self._normalize, listing)
                        if job:
                            yield job

                    if not items or len(items) < RESULTS_PER_PAGE:
                        break

    def _normalize(self, listing: AdzunaListing) -> NormalizedJob:
        title = strip_html(listing.title)
        description = strip_html(listing.description)
        salary = salary_range(listing.salary_min, listing.salary_max, 'year')
        return self.build_job(
            upstream_id=listing.id,
            title=title,
            company=listing.company,
            location=listing.location or "Remote",
            apply_url=listing.redirect_url,
            posted_at=parse_timestamp(listing.created),
            description=description,
            salary_min=salary.min,
            salary_max=salary.max,
            job_type=normalize_job_type(listing.contract_type or listing.contract_time, title),
            experience_level=parse_experience_level(title),
            skills=build_skills(description),
        )
