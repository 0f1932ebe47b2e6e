"""
Remotive adapter

API: https://remotive.com/api/remote-jobs?category=design (no auth)
Response: {"job-count": N, "jobs": [...]}
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, List, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_str, require_mapping, require_str, str_list
from sources.types import NormalizedJob
from utils.salary import parse_salary_text
from utils.skills import build_skills
from utils.text import html_to_structured_text, normalize_job_type, parse_experience_level, parse_timestamp


@dataclass
class RemotiveListing:
    """One item of the Remotive feed; optional fields default to empty"""
    id: str
    title: str
    url: str
    company_name: str = ""
    company_logo: Optional[str] = None
    job_type: Optional[str] = None
    publication_date: Optional[str] = None
    candidate_required_location: str = ""
    salary: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data) -> "RemotiveListing":
        data = require_mapping(data)
        return cls(
            id=require_str(data, 'id'),
            title=require_str(data, 'title'),
            url=require_str(data, 'url'),
            company_name=optional_str(data, 'company_name', ''),
            company_logo=optional_str(data, 'company_logo'),
            job_type=optional_str(data, 'job_type'),
            publication_date=optional_str(data, 'publication_date'),
            candidate_required_location=optional_str(data, 'candidate_required_location', ''),
            salary=optional_str(data, 'salary', ''),
            description=optional_str(data, 'description', ''),
            tags=str_list(data, 'tags'),
        )


class RemotiveSource(BaseJobSource):
    """Remotive's design category (single request, no pagination)"""

    SOURCE = JobSource.REMOTIVE
    API_URL = "https://remotive.com/api/remote-jobs"

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        try:
            data = await self.get_json(self.API_URL, params={'category': 'design'})
        except TRANSIENT_ERRORS as e:
            self.record_failure("Listing request", e)
            return

        items = data.get('jobs') if isinstance(data, dict) else None
        for item in items or []:
            try:
                listing = RemotiveListing.from_payload(item)
            except MalformedPayload as e:
                self.record_failure("Item parse", e)
                continue

            if not self.mark_seen(listing.id):
                continue
            if not self.classify(listing.title, listing.tags):
                continue

            job = self.try_normalize(f"Item {listing.id}", self._normalize, listing)
            if job:
                yield job

    def _normalize(self, listing: RemotiveListing) -> NormalizedJob:
        description = html_to_structured_text(listing.description)
        salary = parse_salary_text(listing.salary)
        return self.build_job(
            upstream_id=listing.id,
            title=listing.title,
            company=listing.company_name,
            company_logo=listing.company_logo,
            location=listing.candidate_required_location or "Remote",
            apply_url=listing.url,
            posted_at=parse_timestamp(listing.publication_date),
            description=description,
            salary_min=salary.min,
            salary_max=salary.max,
            salary_text=salary.text,
            job_type=normalize_job_type(listing.job_type, listing.title),
            experience_level=parse_experience_level(listing.title),
            skills=build_skills(description, listing.tags),
        )
