"""
Arbeitnow adapter

API: https://arbeitnow.com/api/job-board-api?page=N (no auth)
Response: {"data": [...], "links": {"next": url | null}, "meta": {...}}

Only remote postings are kept; created_at is epoch seconds.
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, List, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import nested, optional_bool, optional_number, optional_str, require_mapping, require_str, str_list
from sources.types import NormalizedJob
from utils.skills import build_skills
from utils.text import html_to_structured_text, normalize_job_type, parse_experience_level, parse_timestamp


@dataclass
class ArbeitnowListing:
    slug: str
    title: str
    url: str
    company_name: str = ""
    description: str = ""
    remote: bool = False
    tags: List[str] = field(default_factory=list)
    job_types: List[str] = field(default_factory=list)
    location: str = ""
    created_at: Optional[float] = None

    @classmethod
    def from_payload(cls, data) -> "ArbeitnowListing":
        data = require_mapping(data)
        return cls(
            slug=require_str(data, 'slug'),
            title=require_str(data, 'title'),
            url=require_str(data, 'url'),
            company_name=optional_str(data, 'company_name', ''),
            description=optional_str(data, 'description', ''),
            remote=optional_bool(data, 'remote'),
            tags=str_list(data, 'tags'),
            job_types=str_list(data, 'job_types'),
            location=optional_str(data, 'location', ''),
            created_at=optional_number(data, 'created_at'),
        )


class ArbeitnowSource(BaseJobSource):
    """Arbeitnow job board, remote postings only"""

    SOURCE = JobSource.ARBEITNOW
    API_URL = "https://arbeitnow.com/api/job-board-api"

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        for page in range(1, self.config.max_pages + 1):
            if page > 1:
                await self.throttle()
            try:
                data = await self.get_json(self.API_URL, params={'page': page})
            except TRANSIENT_ERRORS as e:
                self.record_failure(f"Page {page}", e)
                continue

            items = data.get('data') if isinstance(data, dict) else None
            if not items:
                break

            for item in items:
                try:
                    listing = ArbeitnowListing.from_payload(item)
                except MalformedPayload as e:
                    self.record_failure("Item parse", e)
                    continue

                if not self.mark_seen(listing.slug):
                    continue
                if not listing.remote:
                    continue
                if not self.classify(listing.title, listing.tags):
                    continue

                job = self.try_normalize(f"Item {listing.slug}", self._normalize, listing)
                if job:
                    yield job

            if not nested(data, 'links', 'next'):
                break

    def _normalize(self, listing: ArbeitnowListing) -> NormalizedJob:
        description = html_to_structured_text(listing.description)
        job_type = listing.job_types[0] if listing.job_types else None
        return self.build_job(
            upstream_id=listing.slug,
            title=listing.title,
            company=listing.company_name,
            location=listing.location or "Remote (EU)",
            apply_url=listing.url,
            posted_at=parse_timestamp(listing.created_at),
            description=description,
            job_type=normalize_job_type(job_type, listing.title),
            experience_level=parse_experience_level(listing.title),
            skills=build_skills(description, listing.tags),
        )
