"""
Typed structures for sync invocation results.

These dataclasses are what the runner produces for every source and what
the cron routes, the scheduled worker and the CLI serialize.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional

from sources.types import NormalizedJob


@dataclass
class SourceRunResult:
    """
    Result of fetching and syncing one source.

    status:
    - success: adapter finished, batch synced
    - partial: adapter stopped early (error after some jobs), what it had was synced
    - skipped: adapter not configured (missing credentials)
    - error: adapter or sync failed with nothing stored
    """
    source: str
    status: str = "success"
    fetched: int = 0
    classified: int = 0
    inserted: int = 0
    skipped: int = 0
    superseded: int = 0
    failed_requests: int = 0
    duration_ms: int = 0
    error_message: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class InvocationReport:
    """
    Aggregate of one trigger call (one source, a group, an Indeed batch).

    Failures of individual sources are carried in results/errors; the
    invocation itself always completes.
    """
    results: list[SourceRunResult] = field(default_factory=list)
    duration_ms: int = 0
    warning: Optional[str] = None
    # Fetched jobs, kept for dry runs; never serialized
    jobs: list[NormalizedJob] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> list[str]:
        return [r.source for r in self.results]

    @property
    def errors(self) -> list[dict]:
        return [
            {"source": r.source, "message": r.error_message}
            for r in self.results
            if r.error_message
        ]

    @property
    def success(self) -> bool:
        return not any(r.status == "error" for r in self.results)

    def total(self, name: str) -> int:
        return sum(getattr(r, name) for r in self.results)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "sources": self.sources,
            "fetched": self.total("fetched"),
            "classified": self.total("classified"),
            "inserted": self.total("inserted"),
            "skipped": self.total("skipped"),
            "superseded": self.total("superseded"),
            "duration_ms": self.duration_ms,
            "results": [r.to_dict() for r in self.results],
            "errors": self.errors,
            "warning": self.warning,
        }
