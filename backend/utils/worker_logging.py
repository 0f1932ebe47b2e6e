"""
Worker logging utilities with Protocol + Mixin pattern.

Provides trait-like logging functionality for sync, scrape and cleanup runs.
Each context defines its worker type and context format, the mixin provides
consistent log_info/log_warning/log_error methods.

Usage:
    class SyncLogContext(WorkerLoggerMixin):
        worker_type = WorkerType.SYNC

        def __init__(self, source: str):
            self.source = source

        def _log_context(self) -> str:
            return f"source={self.source}"

    ctx = SyncLogContext("indeed")
    ctx.log_info("Fetched 12 jobs")  # [SyncWorker:source=indeed] Fetched 12 jobs
"""

import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger()
logger.setLevel(logging.INFO)


class WorkerType(Enum):
    """Worker type enum for log prefix identification."""
    SYNC = "SyncWorker"
    SCRAPER = "ScrapeWorker"
    CLEANUP = "CleanupWorker"


class WorkerLoggerProtocol(Protocol):
    """
    Protocol defining what classes using WorkerLoggerMixin must provide.

    This enables type checking - mypy will error if a class uses the mixin
    but doesn't define worker_type or _log_context().
    """
    worker_type: WorkerType

    def _log_context(self) -> str:
        """Return context string like 'source=indeed' or 'source=nodesk:state=navigate'."""
        ...


class WorkerLoggerMixin:
    """
    Mixin providing log_info/log_warning/log_error methods.

    Classes using this mixin must satisfy WorkerLoggerProtocol:
    - Define worker_type: WorkerType class attribute
    - Implement _log_context() -> str method

    Log format: [WorkerType:context] message
    With test DB: [TEST][WorkerType:context] message

    Examples:
    - [SyncWorker:source=remotive] Fetched 42 candidates
    - [TEST][ScrapeWorker:source=nodesk:state=detail_fetch] Timed out
    """

    # Set by subclass __init__ to add [TEST] prefix
    use_test_db: bool = False

    def _log_prefix(self: WorkerLoggerProtocol) -> str:
        """Build log prefix from worker type and context."""
        test_prefix = "[TEST]" if getattr(self, 'use_test_db', False) else ""
        return f"{test_prefix}[{self.worker_type.value}:{self._log_context()}]"

    def log_info(self: WorkerLoggerProtocol, message: str) -> None:
        """Log info message with worker prefix."""
        logger.info(f"{self._log_prefix()} {message}")

    def log_warning(self: WorkerLoggerProtocol, message: str) -> None:
        """Log warning message with worker prefix."""
        logger.warning(f"{self._log_prefix()} {message}")

    def log_error(self: WorkerLoggerProtocol, message: str) -> None:
        """Log error message with worker prefix."""
        logger.error(f"{self._log_prefix()} {message}")


# =============================================================================
# Concrete Context Classes
# =============================================================================

class SyncLogContext(WorkerLoggerMixin):
    """
    Logging context for one source's fetch + sync.

    Log format: [SyncWorker:source=X] message
    """
    worker_type = WorkerType.SYNC

    def __init__(self, source: str, use_test_db: bool = False):
        self.source = source
        self.use_test_db = use_test_db

    def _log_context(self) -> str:
        return f"source={self.source}"


class ScrapeLogContext(WorkerLoggerMixin):
    """
    Logging context for a browser scrape; state is updated as the run advances.

    Log format: [ScrapeWorker:source=X:state=Y] message
    """
    worker_type = WorkerType.SCRAPER

    def __init__(self, source: str, state: str = "launch", use_test_db: bool = False):
        self.source = source
        self.state = state
        self.use_test_db = use_test_db

    def _log_context(self) -> str:
        return f"source={self.source}:state={self.state}"


class CleanupLogContext(WorkerLoggerMixin):
    """
    Logging context for batch duplicate cleanup.

    Log format: [CleanupWorker:task=X] message
    """
    worker_type = WorkerType.CLEANUP

    def __init__(self, task: str = "duplicates", use_test_db: bool = False):
        self.task = task
        self.use_test_db = use_test_db

    def _log_context(self) -> str:
        return f"task={self.task}"
