"""
Jobicy adapter

API: https://jobicy.com/api/v2/remote-jobs?count=50&industry=design (no auth)
Response: {"jobs": [...]}; salaries are annual when present.
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, List, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_number, optional_str, require_mapping, require_str, str_list
from sources.types import NormalizedJob
from utils.salary import salary_range
from utils.skills import build_skills
from utils.text import html_to_structured_text, normalize_experience_level, normalize_job_type, parse_timestamp


@dataclass
class JobicyListing:
    id: str
    job_title: str
    url: str
    company_name: str = ""
    company_logo: Optional[str] = None
    job_industry: List[str] = field(default_factory=list)
    job_type: List[str] = field(default_factory=list)
    job_geo: str = ""
    job_level: Optional[str] = None
    description: str = ""
    pub_date: Optional[str] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None

    @classmethod
    def from_payload(cls, data) -> "JobicyListing":
        data = require_mapping(data)
        return cls(
            id=require_str(data, 'id'),
            job_title=require_str(data, 'jobTitle'),
            url=require_str(data, 'url'),
            company_name=optional_str(data, 'companyName', ''),
            company_logo=optional_str(data, 'companyLogo'),
            job_industry=str_list(data, 'jobIndustry'),
            job_type=str_list(data, 'jobType'),
            job_geo=optional_str(data, 'jobGeo', ''),
            job_level=optional_str(data, 'jobLevel'),
            description=optional_str(data, 'jobDescription', '') or optional_str(data, 'jobExcerpt', ''),
            pub_date=optional_str(data, 'pubDate'),
            salary_min=optional_number(data, 'annualSalaryMin'),
            salary_max=optional_number(data, 'annualSalaryMax'),
        )


class JobicySource(BaseJobSource):
    """Jobicy design industry feed (single request)"""

    SOURCE = JobSource.JOBICY
    API_URL = "https://jobicy.com/api/v2/remote-jobs"

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        try:
            data = await self.get_json(self.API_URL, params={'count': 50, 'industry': 'design'})
        except TRANSIENT_ERRORS as e:
            self.record_failure("Listing request", e)
            return

        items = data.get('jobs') if isinstance(data, dict) else None
        for item in items or []:
            try:
                listing = JobicyListing.from_payload(item)
            except MalformedPayload as e:
                self.record_failure("Item parse", e)
                continue

            if not self.mark_seen(listing.id):
                continue
            if not self.classify(listing.job_title, listing.job_industry):
                continue

            job = self.try_normalize(f"Item {listing.id}", self._normalize, listing)
            if job:
                yield job

    def _normalize(self, listing: JobicyListing) -> NormalizedJob:
        description = html_to_structured_text(listing.description)
        salary = salary_range(listing.salary_min, listing.salary_max, 'year')
        job_type = listing.job_type[0] if listing.job_type else None
        return self.build_job(
            upstream_id=listing.id,
            title=listing.job_title,
            company=listing.company_name,
            company_logo=listing.company_logo,
            location=listing.job_geo or "Remote",
            apply_url=listing.url,
            posted_at=parse_timestamp(listing.pub_date),
            description=description,
            salary_min=salary.min,
            salary_max=salary.max,
            job_type=normalize_job_type(job_type, listing.job_title),
            experience_level=normalize_experience_level(listing.job_level, listing.job_title),
            skills=build_skills(description),
        )
