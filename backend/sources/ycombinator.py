"""
Y Combinator adapter (Hacker News job stories)

API: https://hacker-news.firebaseio.com/v0/jobstories.json -> [id, ...]
     https://hacker-news.firebaseio.com/v0/item/{id}.json   -> item

Two-phase: the ID list is cheap, each item costs a request, so only the
most recent `ycombinator_item_cap` stories are looked up.
"""

import re
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_number, optional_str, require_mapping, require_str
from sources.types import NormalizedJob
from utils.skills import build_skills
from utils.text import html_to_structured_text, parse_experience_level, parse_job_type, parse_timestamp

# "Acme (YC W21) is hiring a Product Designer" -> "Acme"
_COMPANY_RE = re.compile(r'^([^(]+?)(?:\s*\([^)]*\))?\s+(?:is hiring|hiring)', re.IGNORECASE)

ITEM_DELAY_SECONDS = 0.1


@dataclass
class HNJobItem:
    id: str
    title: str
    type: str
    by: str = ""
    url: Optional[str] = None
    text: str = ""
    time: Optional[float] = None

    @classmethod
    def from_payload(cls, data) -> "HNJobItem":
        data = require_mapping(data)
        return cls(
            id=require_str(data, 'id'),
            title=require_str(data, 'title'),
            type=optional_str(data, 'type', ''),
            by=optional_str(data, 'by', ''),
            url=optional_str(data, 'url'),
            text=optional_str(data, 'text', ''),
            time=optional_number(data, 'time'),
        )


def parse_company_from_title(title: str, fallback: str = "") -> str:
    match = _COMPANY_RE.match(title or "")
    return match.group(1).strip() if match else fallback


class YCombinatorSource(BaseJobSource):
    """Design roles among recent HN job stories"""

    SOURCE = JobSource.YCOMBINATOR
    API_URL = "https://hacker-news.firebaseio.com/v0"

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        try:
            story_ids = await self.get_json(f"{self.API_URL}/jobstories.json")
        except TRANSIENT_ERRORS as e:
            self.record_failure("Job story list", e)
            return

        if not isinstance(story_ids, list):
            self.record_failure("Job story list", MalformedPayload("expected a JSON array"))
            return

        for story_id in story_ids[:self.config.ycombinator_item_cap]:
            if not self.mark_seen(str(story_id)):
                continue

            try:
                self.stats.detail_calls += 1
                item = HNJobItem.from_payload(
                    await self.get_json(f"{self.API_URL}/item/{story_id}.json")
                )
            except TRANSIENT_ERRORS as e:
                self.record_failure(f"Item {story_id}", e)
                continue
            finally:
                await self.throttle(ITEM_DELAY_SECONDS)

            if item.type != 'job':
                continue

            description = html_to_structured_text(item.text)
            if not self.classify(item.title, None, description):
                continue

            job = self.try_normalize(f"Item {story_id}", self._normalize, item, description)
            if job:
                yield job

    def _normalize(self, item: HNJobItem, description: str) -> NormalizedJob:
        return self.build_job(
            upstream_id=item.id,
            title=item.title,
            company=parse_company_from_title(item.title, item.by),
            location="Remote",
            apply_url=item.url or f"https://news.ycombinator.com/item?id={item.id}",
            posted_at=parse_timestamp(item.time),
            description=description,
            job_type=parse_job_type(item.title),
            experience_level=parse_experience_level(item.title),
            skills=build_skills(description),
        )
