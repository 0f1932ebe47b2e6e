"""
Pytest configuration and fixtures for testing.

Store tests run against a fresh in-memory SQLite database per test:
- Schema created from the ORM metadata (same tables/constraints as Alembic)
- ON CONFLICT DO NOTHING works the same way as on PostgreSQL
- Nothing to configure, no network, no cleanup

Tests that need the real PostgreSQL schema can point TEST_DATABASE_URL at a
database and use scripts/run_sync.py --test-db instead.
"""
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base
from sources.types import NormalizedJob


@pytest.fixture(scope="function")
def test_engine():
    """
    In-memory SQLite engine with the jobs schema.

    StaticPool keeps the single connection alive so every session in the
    test sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db(test_engine):
    """
    Database session for one test.

    Usage:
        def test_insert(test_db, make_job):
            result = sync_jobs(test_db, [make_job()], "remotive")
            assert result.inserted == 1
    """
    TestSessionLocal = sessionmaker(bind=test_engine, autoflush=False)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_job():
    """
    Factory for NormalizedJob with sensible defaults.

    Usage:
        job = make_job(id="remotive-1", apply_url="https://x/1", posted_at="2024-01-01")
    """
    def _make_job(**overrides) -> NormalizedJob:
        posted_at = overrides.pop("posted_at", datetime(2024, 1, 1, tzinfo=timezone.utc))
        if isinstance(posted_at, str):
            posted_at = datetime.fromisoformat(posted_at).replace(tzinfo=timezone.utc)
        job_id = overrides.pop("id", "remotive-1")
        fields = {
            "source": job_id.split("-", 1)[0],
            "title": "Senior Product Designer",
            "company": "Acme",
            "location": "Remote",
            "apply_url": f"https://jobs.example.com/{job_id}",
            "description": "Design things in Figma.",
        }
        fields.update(overrides)
        return NormalizedJob(id=job_id, posted_at=posted_at, **fields)

    return _make_job
