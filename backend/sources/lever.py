"""
Lever adapter

API: https://api.lever.co/v0/postings/{slug}?mode=json
Response: JSON array of postings; createdAt is epoch milliseconds,
categories.commitment carries the employment type.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from sources.board_source import BoardSource
from sources.companies import LEVER_BOARDS, CompanyBoard
from sources.enums import JobSource
from sources.errors import MalformedPayload
from sources.payload import optional_nested_str, optional_number, optional_str, require_mapping, require_str
from sources.types import NormalizedJob
from utils.skills import build_skills
from utils.text import html_to_structured_text, normalize_job_type, parse_experience_level, parse_timestamp


@dataclass
class LeverPosting:
    id: str
    title: str
    url: str
    location: Optional[str] = None
    commitment: Optional[str] = None
    created_at: Optional[float] = None
    description: str = ""

    @classmethod
    def from_payload(cls, data) -> "LeverPosting":
        data = require_mapping(data)
        url = optional_str(data, 'hostedUrl') or optional_str(data, 'applyUrl')
        if not url:
            raise MalformedPayload("Missing required field 'hostedUrl'")
        return cls(
            id=require_str(data, 'id'),
            title=require_str(data, 'text'),
            url=url,
            location=optional_nested_str(data, 'categories', 'location'),
            commitment=optional_nested_str(data, 'categories', 'commitment'),
            created_at=optional_number(data, 'createdAt'),
            description=cls._description(data),
        )

    @staticmethod
    def _description(data: dict) -> str:
        plain = optional_str(data, 'descriptionPlain')
        if plain:
            return plain
        sections = []
        for section in data.get('lists') or []:
            if isinstance(section, dict):
                heading = section.get('text') or ''
                body = section.get('content') or ''
                sections.append(f"<h3>{heading}</h3>{body}")
        return '\n'.join(sections)


class LeverSource(BoardSource):
    SOURCE = JobSource.LEVER
    API_URL = "https://api.lever.co/v0/postings"
    DEFAULT_BOARDS = LEVER_BOARDS

    def board_url(self, board: CompanyBoard) -> str:
        return f"{self.API_URL}/{board.slug}?mode=json"

    def board_items(self, data: Any) -> List[Any]:
        return data if isinstance(data, list) else []

    def parse_posting(self, item: Any) -> LeverPosting:
        return LeverPosting.from_payload(item)

    def normalize(self, board: CompanyBoard, posting: LeverPosting) -> NormalizedJob:
        description = html_to_structured_text(posting.description)
        return self.build_job(
            upstream_id=(board.slug, posting.id),
            title=posting.title,
            company=board.name,
            location=posting.location or "Remote",
            apply_url=posting.url,
            posted_at=parse_timestamp(posting.created_at),
            description=description,
            job_type=normalize_job_type(posting.commitment, posting.title),
            experience_level=parse_experience_level(posting.title),
            skills=build_skills(description),
        )
