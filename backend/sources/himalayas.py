"""
Himalayas adapter

API: https://himalayas.app/jobs/api?limit=20&offset=N (no auth)
Response: {"offset": N, "limit": 20, "totalCount": T, "jobs": [...]}

Offset pagination bounded by totalCount and config.max_pages. A failed page
is skipped and the walk continues at the next offset.
"""

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, List, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_number, optional_str, require_mapping, require_str, str_list
from sources.types import NormalizedJob
from utils.salary import salary_range
from utils.skills import build_skills
from utils.text import (
    html_to_structured_text,
    normalize_experience_level,
    normalize_job_type,
    parse_timestamp,
)

PAGE_SIZE = 20


@dataclass
class HimalayasListing:
    id: str
    title: str
    link: str
    company_name: str = ""
    company_logo: Optional[str] = None
    employment_type: Optional[str] = None
    seniority: Optional[str] = None
    location_restrictions: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    pub_date: Any = None
    description: str = ""

    @classmethod
    def from_payload(cls, data) -> "HimalayasListing":
        data = require_mapping(data)
        upstream_id = optional_str(data, 'guid') or require_str(data, 'id')
        link = optional_str(data, 'applicationLink') or require_str(data, 'link')
        seniority = data.get('seniority')
        if isinstance(seniority, list):
            seniority = next((s for s in seniority if isinstance(s, str)), None)
        return cls(
            id=upstream_id,
            title=require_str(data, 'title'),
            link=link,
            company_name=optional_str(data, 'companyName', ''),
            company_logo=optional_str(data, 'companyLogo'),
            employment_type=optional_str(data, 'employmentType'),
            seniority=seniority if isinstance(seniority, str) else None,
            location_restrictions=str_list(data, 'locationRestrictions'),
            categories=str_list(data, 'categories'),
            min_salary=optional_number(data, 'minSalary'),
            max_salary=optional_number(data, 'maxSalary'),
            pub_date=data.get('pubDate'),
            description=optional_str(data, 'description', '') or optional_str(data, 'excerpt', ''),
        )


class HimalayasSource(BaseJobSource):
    """Himalayas remote jobs, offset-paginated"""

    SOURCE = JobSource.HIMALAYAS
    API_URL = "https://himalayas.app/jobs/api"

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        total: Optional[int] = None

        for page in range(self.config.max_pages):
            offset = page * PAGE_SIZE
            if total is not None and offset >= total:
                break
            if page > 0:
                await self.throttle()

            try:
                data = await self.get_json(
                    self.API_URL,
                    params={'limit': PAGE_SIZE, 'offset': offset},
                )
            except TRANSIENT_ERRORS as e:
                self.record_failure(f"Page at offset {offset}", e)
                continue

            if not isinstance(data, dict):
                self.record_failure(f"Page at offset {offset}", MalformedPayload("expected an object"))
                continue

            if isinstance(data.get('totalCount'), int):
                total = data['totalCount']

            items = data.get('jobs') or []
            if not items:
                break

            for item in items:
                try:
                    listing = HimalayasListing.from_payload(item)
                except MalformedPayload as e:
                    self.record_failure("Item parse", e)
                    continue

                if not self.mark_seen(listing.id):
                    continue
                if not self.classify(listing.title, listing.categories):
                    continue

                job = self.try_normalize(f"Item {listing.id}", self._normalize, listing)
                if job:
                    yield job

    def _normalize(self, listing: HimalayasListing) -> NormalizedJob:
        description = html_to_structured_text(listing.description)
        salary = salary_range(listing.min_salary, listing.max_salary, 'year')
        return self.build_job(
            upstream_id=listing.id,
            title=listing.title,
            company=listing.company_name,
            company_logo=listing.company_logo,
            location=', '.join(listing.location_restrictions) or "Remote",
            apply_url=listing.link,
            posted_at=parse_timestamp(listing.pub_date),
            description=description,
            salary_min=salary.min,
            salary_max=salary.max,
            job_type=normalize_job_type(listing.employment_type, listing.title),
            experience_level=normalize_experience_level(listing.seniority, listing.title),
            skills=build_skills(description, listing.categories),
        )
