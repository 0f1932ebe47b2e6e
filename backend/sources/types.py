"""
Canonical record shape produced by every adapter.

NormalizedJob is the only thing that crosses from adapters into the sync
engine. Its constructor enforces the invariants every stored row relies on.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Optional

from sources.enums import JobSource
from utils.text import (
    DEFAULT_EXPERIENCE_LEVEL,
    DEFAULT_JOB_TYPE,
    EXPERIENCE_LEVELS,
    JOB_TYPES,
    parse_timestamp,
    truncate,
)

DESCRIPTION_MAX_CHARS = 20_000
DEFAULT_COMPANY = "Unknown Company"
DEFAULT_LOCATION = "Remote"


@dataclass
class NormalizedJob:
    """
    One design job posting in canonical form.

    Invariants (enforced in __post_init__):
    - salary_min <= salary_max when both are present (inverted input is swapped)
    - description is at most DESCRIPTION_MAX_CHARS characters
    - job_type / experience_level are from the closed sets
    - posted_at is timezone-aware UTC
    """
    id: str
    source: JobSource
    title: str
    company: str
    location: str
    apply_url: str
    posted_at: datetime
    description: str = ""
    company_logo: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_text: Optional[str] = None
    job_type: str = DEFAULT_JOB_TYPE
    experience_level: str = DEFAULT_EXPERIENCE_LEVEL
    skills: list[str] = field(default_factory=list)
    is_featured: bool = False

    def __post_init__(self):
        self.source = JobSource(self.source)
        self.company = (self.company or "").strip() or DEFAULT_COMPANY
        self.location = (self.location or "").strip() or DEFAULT_LOCATION
        self.description = truncate(self.description or "", DESCRIPTION_MAX_CHARS)

        if self.salary_min is not None and self.salary_min <= 0:
            self.salary_min = None
        if self.salary_max is not None and self.salary_max <= 0:
            self.salary_max = None
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            self.salary_min, self.salary_max = self.salary_max, self.salary_min

        if self.job_type not in JOB_TYPES:
            self.job_type = DEFAULT_JOB_TYPE
        if self.experience_level not in EXPERIENCE_LEVELS:
            self.experience_level = DEFAULT_EXPERIENCE_LEVEL

        if self.posted_at.tzinfo is None:
            self.posted_at = self.posted_at.replace(tzinfo=timezone.utc)

        # Ingested jobs are never featured
        self.is_featured = False

    @property
    def dedup_key(self) -> str:
        """Soft title+company key used by bulk duplicate cleanup"""
        return soft_dedup_key(self.title, self.company)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["source"] = self.source.value
        data["posted_at"] = self.posted_at.isoformat()
        return data

    def to_row(self) -> dict:
        """Column values for the jobs table"""
        return {
            "external_id": self.id,
            "source": self.source.value,
            "title": self.title,
            "company": self.company,
            "company_logo": self.company_logo,
            "location": self.location,
            "salary_min": self.salary_min,
            "salary_max": self.salary_max,
            "salary_text": self.salary_text,
            "description": self.description,
            "job_type": self.job_type,
            "experience_level": self.experience_level,
            "skills": list(self.skills),
            "apply_url": self.apply_url or None,
            "posted_at": self.posted_at,
            "is_featured": False,
            "is_active": True,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NormalizedJob":
        posted_at = parse_timestamp(data.get("posted_at")) or datetime.now(timezone.utc)
        return cls(
            id=data["id"],
            source=data["source"],
            title=data["title"],
            company=data.get("company", DEFAULT_COMPANY),
            location=data.get("location", DEFAULT_LOCATION),
            apply_url=data.get("apply_url", ""),
            posted_at=posted_at,
            description=data.get("description", ""),
            company_logo=data.get("company_logo"),
            salary_min=data.get("salary_min"),
            salary_max=data.get("salary_max"),
            salary_text=data.get("salary_text"),
            job_type=data.get("job_type", DEFAULT_JOB_TYPE),
            experience_level=data.get("experience_level", DEFAULT_EXPERIENCE_LEVEL),
            skills=list(data.get("skills") or []),
        )


def soft_dedup_key(title: str, company: str) -> str:
    """First 30 characters of the lowercased title plus the lowercased company"""
    return f"{(title or '').lower()[:30]}|||{(company or '').lower()}"


@dataclass
class FetchStats:
    """Per-adapter counters for one fetch() call"""
    fetched: int = 0            # raw upstream candidates seen (after in-run dedup)
    classified: int = 0         # candidates accepted by the classifier
    failed_requests: int = 0    # pages/items skipped after an error
    detail_calls: int = 0       # second-phase requests spent

    def to_dict(self) -> dict:
        return asdict(self)
