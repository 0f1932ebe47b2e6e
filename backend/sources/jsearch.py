"""
JSearch adapter (RapidAPI)

API: https://jsearch.p.rapidapi.com/search?query=...&page=N&num_pages=1&remote_jobs_only=true
Auth: X-RapidAPI-Key / X-RapidAPI-Host headers (RAPIDAPI_KEY); skipped when absent.
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_bool, optional_number, optional_str, require_mapping, require_str, str_list
from sources.types import NormalizedJob
from utils.salary import salary_range
from utils.skills import build_skills
from utils.text import normalize_job_type, parse_experience_level, parse_timestamp, strip_html

SEARCH_QUERIES = ['remote designer', 'remote UI UX designer', 'remote product designer']
PAGES_PER_QUERY = 2


@dataclass
class JSearchListing:
    job_id: str
    job_title: str
    job_apply_link: str
    employer_name: str = ""
    employer_logo: Optional[str] = None
    job_description: str = ""
    job_city: Optional[str] = None
    job_country: Optional[str] = None
    job_employment_type: Optional[str] = None
    job_min_salary: Optional[float] = None
    job_max_salary: Optional[float] = None
    job_salary_period: Optional[str] = None
    job_posted_at: Optional[str] = None
    job_required_skills: List[str] = field(default_factory=list)
    job_is_remote: bool = False

    @classmethod
    def from_payload(cls, data) -> "JSearchListing":
        data = require_mapping(data)
        return cls(
            job_id=require_str(data, 'job_id'),
            job_title=require_str(data, 'job_title'),
            job_apply_link=require_str(data, 'job_apply_link'),
            employer_name=optional_str(data, 'employer_name', ''),
            employer_logo=optional_str(data, 'employer_logo'),
            job_description=optional_str(data, 'job_description', ''),
            job_city=optional_str(data, 'job_city'),
            job_country=optional_str(data, 'job_country'),
            job_employment_type=optional_str(data, 'job_employment_type'),
            job_min_salary=optional_number(data, 'job_min_salary'),
            job_max_salary=optional_number(data, 'job_max_salary'),
            job_salary_period=optional_str(data, 'job_salary_period'),
            job_posted_at=optional_str(data, 'job_posted_at_datetime_utc'),
            job_required_skills=str_list(data, 'job_required_skills'),
            job_is_remote=optional_bool(data, 'job_is_remote'),
        )

    @property
    def location(self) -> str:
        if self.job_city:
            where = ', '.join(part for part in (self.job_city, self.job_country) if part)
            return f"Remote ({where})"
        return "Remote"


class JSearchSource(BaseJobSource):
    """Google-for-Jobs style search through RapidAPI"""

    SOURCE = JobSource.JSEARCH
    API_URL = "https://jsearch.p.rapidapi.com/search"

    def is_configured(self) -> bool:
        return bool(self.config.rapidapi_key)

    def get_headers(self) -> Dict[str, str]:
        headers = super().get_headers()
        headers.update({
            'X-RapidAPI-Key': self.config.rapidapi_key or '',
            'X-RapidAPI-Host': 'jsearch.p.rapidapi.com',
        })
        return headers

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        first_request = True
        for query in SEARCH_QUERIES:
            for page in range(1, min(PAGES_PER_QUERY, self.config.max_pages) + 1):
                if not first_request:
                    await self.throttle()
                first_request = False

                try:
                    data = await self.get_json(self.API_URL, params={
                        'query': query,
                        'page': page,
                        'num_pages': 1,
                        'remote_jobs_only': 'true',
                    })
                except TRANSIENT_ERRORS as e:
                    self.record_failure(f"Search '{query}' page {page}", e)
                    continue

                items = data.get('data') if isinstance(data, dict) else None
                if not items:
                    break

                for item in items:
                    try:
                        listing = JSearchListing.from_payload(item)
                    except MalformedPayload as e:
                        self.record_failure("Item parse", e)
                        continue

                    if not self.mark_seen(listing.job_id):
                        continue
                    if not listing.job_is_remote:
                        continue
                    if not self.classify(listing.job_title, listing.job_required_skills):
                        continue

                    job = self.try_normalize(f"Item {listing.job_id}", self._normalize, listing)
                    if job:
                        yield job

    def _normalize(self, listing: JSearchListing) -> NormalizedJob:
        description = strip_html(listing.job_description) if '<' in listing.job_description \
            else listing.job_description.strip()
        salary = salary_range(listing.job_min_salary, listing.job_max_salary, listing.job_salary_period)
        return self.build_job(
            upstream_id=listing.job_id,
            title=listing.job_title,
            company=listing.employer_name,
            company_logo=listing.employer_logo,
            location=listing.location,
            apply_url=listing.job_apply_link,
            posted_at=parse_timestamp(listing.job_posted_at),
            description=description,
            salary_min=salary.min,
            salary_max=salary.max,
            job_type=normalize_job_type(listing.job_employment_type, listing.job_title),
            experience_level=parse_experience_level(listing.job_title),
            skills=build_skills(description, listing.job_required_skills),
        )
