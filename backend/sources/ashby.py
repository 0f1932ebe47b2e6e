"""
Ashby adapter

API: https://api.ashbyhq.com/posting-api/job-board/{slug}
Response: {"jobs": [{"id", "title", "jobUrl", "location", "employmentType",
           "publishedAt", "descriptionPlain", "descriptionHtml"}]}
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from sources.board_source import BoardSource
from sources.companies import ASHBY_BOARDS, CompanyBoard
from sources.enums import JobSource
from sources.payload import optional_str, require_mapping, require_str
from sources.types import NormalizedJob
from utils.skills import build_skills
from utils.text import html_to_structured_text, normalize_job_type, parse_experience_level, parse_timestamp


@dataclass
class AshbyPosting:
    id: str
    title: str
    job_url: Optional[str] = None
    location: Optional[str] = None
    employment_type: Optional[str] = None
    published_at: Optional[str] = None
    description: str = ""

    @classmethod
    def from_payload(cls, data) -> "AshbyPosting":
        data = require_mapping(data)
        description = optional_str(data, 'descriptionPlain') or html_to_structured_text(
            optional_str(data, 'descriptionHtml', '') or optional_str(data, 'description', '')
        )
        return cls(
            id=require_str(data, 'id'),
            title=require_str(data, 'title'),
            job_url=optional_str(data, 'jobUrl'),
            location=optional_str(data, 'location') or optional_str(data, 'locationName'),
            employment_type=optional_str(data, 'employmentType'),
            published_at=optional_str(data, 'publishedAt'),
            description=description,
        )


class AshbySource(BoardSource):
    SOURCE = JobSource.ASHBY
    API_URL = "https://api.ashbyhq.com/posting-api/job-board"
    DEFAULT_BOARDS = ASHBY_BOARDS

    def board_url(self, board: CompanyBoard) -> str:
        return f"{self.API_URL}/{board.slug}"

    def board_items(self, data: Any) -> List[Any]:
        return (data.get('jobs') if isinstance(data, dict) else None) or []

    def parse_posting(self, item: Any) -> AshbyPosting:
        return AshbyPosting.from_payload(item)

    def normalize(self, board: CompanyBoard, posting: AshbyPosting) -> NormalizedJob:
        return self.build_job(
            upstream_id=(board.slug, posting.id),
            title=posting.title,
            company=board.name,
            location=posting.location or "Remote",
            apply_url=posting.job_url or f"https://jobs.ashbyhq.com/{board.slug}/{posting.id}",
            posted_at=parse_timestamp(posting.published_at),
            description=posting.description,
            job_type=normalize_job_type(posting.employment_type, posting.title),
            experience_level=parse_experience_level(posting.title),
            skills=build_skills(posting.description),
        )
