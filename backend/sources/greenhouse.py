"""
Greenhouse adapter

API: https://boards-api.greenhouse.io/v1/boards/{slug}/jobs?content=true
Response: {"jobs": [{"id", "title", "absolute_url", "location": {"name"},
           "updated_at", "content": "&lt;p&gt;..."}]}

The absolute_url is the hosted job page with the application form embedded.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from sources.board_source import BoardSource
from sources.companies import GREENHOUSE_BOARDS, CompanyBoard
from sources.enums import JobSource
from sources.payload import optional_nested_str, optional_str, require_mapping, require_str
from sources.types import NormalizedJob
from utils.skills import build_skills
from utils.text import html_to_structured_text, parse_experience_level, parse_job_type, parse_timestamp


@dataclass
class GreenhousePosting:
    id: str
    title: str
    absolute_url: str
    location: Optional[str] = None
    updated_at: Optional[str] = None
    content: str = ""

    @classmethod
    def from_payload(cls, data) -> "GreenhousePosting":
        data = require_mapping(data)
        return cls(
            id=require_str(data, 'id'),
            title=require_str(data, 'title'),
            absolute_url=require_str(data, 'absolute_url'),
            location=optional_nested_str(data, 'location', 'name'),
            updated_at=optional_str(data, 'updated_at'),
            content=optional_str(data, 'content', ''),
        )


class GreenhouseSource(BoardSource):
    SOURCE = JobSource.GREENHOUSE
    API_URL = "https://boards-api.greenhouse.io/v1/boards"
    DEFAULT_BOARDS = GREENHOUSE_BOARDS

    def board_url(self, board: CompanyBoard) -> str:
        return f"{self.API_URL}/{board.slug}/jobs?content=true"

    def board_items(self, data: Any) -> List[Any]:
        return (data.get('jobs') if isinstance(data, dict) else None) or []

    def parse_posting(self, item: Any) -> GreenhousePosting:
        return GreenhousePosting.from_payload(item)

    def normalize(self, board: CompanyBoard, posting: GreenhousePosting) -> NormalizedJob:
        description = html_to_structured_text(posting.content)
        return self.build_job(
            upstream_id=(board.slug, posting.id),
            title=posting.title,
            company=board.name,
            location=posting.location or "Remote",
            apply_url=posting.absolute_url,
            posted_at=parse_timestamp(posting.updated_at),
            description=description,
            job_type=parse_job_type(posting.title),
            experience_level=parse_experience_level(posting.title),
            skills=build_skills(description),
        )
