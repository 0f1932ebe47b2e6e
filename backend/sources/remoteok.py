"""
RemoteOK adapter

API: https://remoteok.com/api?tag=design (no auth, wants a descriptive User-Agent)
Response: JSON array whose first element is a legal notice, not a job.
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_number, optional_str, require_mapping, require_str, str_list
from sources.types import NormalizedJob
from utils.salary import salary_range
from utils.skills import build_skills
from utils.text import html_to_structured_text, parse_experience_level, parse_job_type, parse_timestamp


@dataclass
class RemoteOKListing:
    id: str
    position: str
    company: str = ""
    company_logo: Optional[str] = None
    slug: Optional[str] = None
    url: Optional[str] = None
    location: str = ""
    tags: List[str] = field(default_factory=list)
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    date: Optional[str] = None
    epoch: Optional[float] = None
    description: str = ""

    @classmethod
    def from_payload(cls, data) -> "RemoteOKListing":
        data = require_mapping(data)
        return cls(
            id=require_str(data, 'id'),
            position=require_str(data, 'position'),
            company=optional_str(data, 'company', ''),
            company_logo=optional_str(data, 'company_logo') or optional_str(data, 'logo'),
            slug=optional_str(data, 'slug'),
            url=optional_str(data, 'url'),
            location=optional_str(data, 'location', ''),
            tags=str_list(data, 'tags'),
            salary_min=optional_number(data, 'salary_min'),
            salary_max=optional_number(data, 'salary_max'),
            date=optional_str(data, 'date'),
            epoch=optional_number(data, 'epoch'),
            description=optional_str(data, 'description', ''),
        )

    @property
    def apply_url(self) -> str:
        if self.url:
            return self.url
        if self.slug:
            return f"https://remoteok.com/l/{self.slug}"
        return f"https://remoteok.com/remote-jobs/{self.id}"


class RemoteOKSource(BaseJobSource):
    """RemoteOK design tag feed"""

    SOURCE = JobSource.REMOTEOK
    API_URL = "https://remoteok.com/api"

    def get_headers(self) -> Dict[str, str]:
        headers = super().get_headers()
        headers['User-Agent'] = 'DesignJobs Sync Aggregator'
        return headers

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        try:
            data = await self.get_json(self.API_URL, params={'tag': 'design'})
        except TRANSIENT_ERRORS as e:
            self.record_failure("Listing request", e)
            return

        if not isinstance(data, list):
            self.record_failure("Listing request", MalformedPayload("expected a JSON array"))
            return

        for item in data:
            # Legal notice element
            if isinstance(item, dict) and 'legal' in item:
                continue
            try:
                listing = RemoteOKListing.from_payload(item)
            except MalformedPayload as e:
                self.record_failure("Item parse", e)
                continue

            if not self.mark_seen(listing.id):
                continue
            if not self.classify(listing.position, listing.tags):
                continue

            job = self.try_normalize(f"Item {listing.id}", self._normalize, listing)
            if job:
                yield job

    def _normalize(self, listing: RemoteOKListing) -> NormalizedJob:
        description = html_to_structured_text(listing.description)
        salary = salary_range(listing.salary_min, listing.salary_max, 'year')
        return self.build_job(
            upstream_id=listing.id,
            title=listing.position,
            company=listing.company,
            company_logo=listing.company_logo,
            location=listing.location or "Remote",
            apply_url=listing.apply_url,
            posted_at=parse_timestamp(listing.date) or parse_timestamp(listing.epoch),
            description=description,
            salary_min=salary.min,
            salary_max=salary.max,
            job_type=parse_job_type(listing.position),
            experience_level=parse_experience_level(listing.position),
            skills=build_skills(description, listing.tags),
        )
