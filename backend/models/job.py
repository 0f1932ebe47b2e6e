from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import JSON, Boolean, Integer, String, Text, DateTime, UniqueConstraint, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from models import Base


class Job(Base):
    """
    Model for ingested job postings.

    Dedup keys, both enforced by the database:
    - external_id: "<source>-<upstream id>", unique
    - apply_url: unique when present (oldest posted_at wins)
    """
    __tablename__ = "jobs"
    __table_args__ = (
        UniqueConstraint("external_id", name="uq_jobs_external_id"),
        UniqueConstraint("apply_url", name="uq_jobs_apply_url"),
        Index("ix_jobs_posted_at", "posted_at"),
        Index("ix_jobs_source", "source"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    external_id: Mapped[str] = mapped_column(String(255), nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    company: Mapped[str] = mapped_column(Text, nullable=False)
    company_logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(Text, nullable=False)

    salary_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    salary_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    salary_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    job_type: Mapped[str] = mapped_column(String(20), nullable=False, default="full-time")
    experience_level: Mapped[str] = mapped_column(String(20), nullable=False, default="mid")
    skills: Mapped[list] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=list
    )

    apply_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    posted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, external_id='{self.external_id}', title='{self.title}')>"
