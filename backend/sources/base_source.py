"""
Base source adapter for the design-job ingestion pipeline

This module provides the abstract base class every REST/ATS adapter
implements. An adapter:

1. Fetches raw postings from its upstream (own pagination, auth, throttling)
2. Parses each item through a typed intermediate (from_payload)
3. Classifies with is_design_job() and normalizes to NormalizedJob

fetch() never raises: failed pages/items are logged and skipped, an
exhausted deadline stops the adapter with whatever it already has.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Dict, Iterable, List, Optional

import httpx

from classifier import is_design_job
from sources.config import SourceConfig
from sources.enums import JobSource
from sources.errors import BudgetExhausted
from sources.types import FetchStats, NormalizedJob
from utils.deadline import Deadline
from utils.text import company_logo_url
from utils.worker_logging import SyncLogContext

# Failures that cost one page or one item, never the whole adapter
TRANSIENT_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError)

# Failures while building one record from an already parsed item
ITEM_ERRORS = TRANSIENT_ERRORS + (AttributeError,)

# Don't start a request with less budget than this
MIN_REQUEST_SECONDS = 1.0


class JobBuilderMixin:
    """NormalizedJob assembly shared by REST adapters and browser scrapers"""

    SOURCE: JobSource

    def make_id(self, *parts: Any) -> str:
        """'<source>-<part>-<part>' (e.g. 'greenhouse-figma-4012345')"""
        return '-'.join([self.SOURCE.value, *(str(part) for part in parts)])

    def build_job(
        self,
        upstream_id: Any,
        title: str,
        company: Optional[str],
        apply_url: str,
        posted_at: Optional[datetime] = None,
        company_logo: Optional[str] = None,
        **fields: Any,
    ) -> NormalizedJob:
        """
        Assemble a NormalizedJob with the shared defaults filled in.

        upstream_id may be a tuple for composite IDs (board slug + job id).
        Missing logo falls back to a Clearbit URL from the company name and a
        missing posted_at to ingestion time.
        """
        id_parts = upstream_id if isinstance(upstream_id, tuple) else (upstream_id,)
        return NormalizedJob(
            id=self.make_id(*id_parts),
            source=self.SOURCE,
            title=title.strip(),
            company=company or '',
            apply_url=apply_url,
            posted_at=posted_at or datetime.now(timezone.utc),
            company_logo=company_logo or company_logo_url(company),
            **fields,
        )


class BaseJobSource(JobBuilderMixin, ABC):
    """
    Abstract base class for source adapters

    Architecture:
    - Each source implements _iter_jobs() as an async generator of NormalizedJob
    - Base class collects yielded jobs, so everything produced before a
      failure is kept (partial results are the normal case)
    - Configuration and the invocation deadline are always passed in
      explicitly; adapters never read the environment

    Each source adapter must define:
    1. SOURCE: JobSource enum value
    2. API_URL: Base endpoint for the upstream
    3. _iter_jobs(): async generator yielding accepted, normalized jobs
    """

    # Abstract class variables - must be defined by each concrete adapter
    SOURCE: JobSource
    API_URL: str

    def __init__(self, config: SourceConfig, deadline: Deadline):
        """
        Initialize adapter with configuration

        Args:
            config: Credentials, timeouts and throttling for this invocation
            deadline: Invocation budget; every request is clamped to it
        """
        # Verify that subclass defined required class variables
        required_vars = ['SOURCE', 'API_URL']
        for var in required_vars:
            if not hasattr(self.__class__, var):
                raise NotImplementedError(
                    f"{self.__class__.__name__} must define {var} class variable"
                )

        self.config = config
        self.deadline = deadline
        self.stats = FetchStats()
        self.skipped = False
        self.last_error: Optional[Exception] = None
        self.log = SyncLogContext(self.SOURCE.value)
        self._seen_ids: set[str] = set()

    def is_configured(self) -> bool:
        """Override for adapters that need credentials"""
        return True

    @abstractmethod
    def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        """
        Yield accepted, normalized jobs one at a time.

        Implementation notes:
        - Catch TRANSIENT_ERRORS per page / per item and call record_failure()
        - Call mark_seen() before classifying, so repeats across pages are dropped
        - Call classify() for the accept/reject decision (it keeps the stats)
        - Build each record through try_normalize(), so one odd field costs one item
        - Let BudgetExhausted propagate; fetch() turns it into a clean stop
        """
        ...

    async def fetch(self) -> List[NormalizedJob]:
        """
        Run the adapter to completion (or until the deadline).

        Returns:
            List of NormalizedJob, possibly empty, never raises
        """
        if not self.is_configured():
            self.skipped = True
            self.log.log_info("skipped: not configured")
            return []

        jobs: List[NormalizedJob] = []
        try:
            async for job in self._iter_jobs():
                jobs.append(job)
        except BudgetExhausted:
            self.log.log_warning(f"Time budget exhausted, stopping with {len(jobs)} jobs")
        except Exception as e:
            self.last_error = e
            self.log.log_error(
                f"Stopped after {len(jobs)} jobs: {type(e).__name__}: {e}"
            )

        self.log.log_info(
            f"Fetched {self.stats.fetched} candidates, accepted {self.stats.classified}, "
            f"failed requests {self.stats.failed_requests}"
        )
        return jobs

    # =========================================================================
    # Helpers for concrete adapters
    # =========================================================================

    def get_headers(self) -> Dict[str, str]:
        """
        Get default HTTP headers for requests

        Override this method if the upstream needs specific headers.
        """
        return {
            'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) '
                          'AppleWebKit/537.36 (KHTML, like Gecko) '
                          'Chrome/141.0.0.0 Safari/537.36',
            'Accept': 'application/json, text/plain, */*',
            'Accept-Language': 'en-US,en;q=0.9',
        }

    async def make_request(
        self,
        url: str,
        method: str = 'GET',
        params: Optional[Dict] = None,
        json: Optional[Dict] = None,
        headers: Optional[Dict] = None,
        timeout: Optional[float] = None
    ) -> httpx.Response:
        """
        Helper method to make HTTP requests with consistent error handling

        Args:
            url: URL to request
            method: HTTP method (GET, POST, etc.)
            params: Query parameters
            json: JSON body (for POST requests)
            headers: Additional headers (merged with default headers)
            timeout: Request timeout in seconds (defaults to config), always
                     clamped to the remaining deadline

        Returns:
            httpx.Response object

        Raises:
            BudgetExhausted: If the deadline leaves no room for the request
            httpx.HTTPStatusError: On HTTP error responses
            httpx.TimeoutException: On request timeout
            httpx.ConnectError: On connection failure
        """
        if self.deadline.remaining() < MIN_REQUEST_SECONDS:
            raise BudgetExhausted(f"{self.deadline.remaining():.1f}s left before {url}")

        request_headers = self.get_headers()
        if headers:
            request_headers.update(headers)

        request_timeout = self.deadline.clamp(timeout or self.config.request_timeout_seconds)

        async with httpx.AsyncClient(follow_redirects=True) as client:
            response = await client.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=request_headers,
                timeout=request_timeout
            )
            response.raise_for_status()
            return response

    async def get_json(self, url: str, **kwargs) -> Any:
        response = await self.make_request(url, **kwargs)
        return response.json()

    async def throttle(self, seconds: Optional[float] = None) -> None:
        """Fixed inter-request sleep, never longer than the remaining budget"""
        delay = self.config.request_delay_seconds if seconds is None else seconds
        delay = min(delay, self.deadline.remaining())
        if delay > 0:
            await asyncio.sleep(delay)

    def mark_seen(self, upstream_id: str) -> bool:
        """
        Record an upstream ID for in-run dedup.

        Returns:
            True the first time an ID is seen, False for repeats
        """
        if upstream_id in self._seen_ids:
            return False
        self._seen_ids.add(upstream_id)
        self.stats.fetched += 1
        return True

    def classify(
        self,
        title: Optional[str],
        tags: Optional[Iterable[str]] = None,
        description: Optional[str] = None,
    ) -> bool:
        accepted = is_design_job(title, tags, description)
        if accepted:
            self.stats.classified += 1
        return accepted

    def record_failure(self, what: str, error: Exception) -> None:
        self.stats.failed_requests += 1
        self.log.log_warning(f"{what} failed, skipping: {type(error).__name__}: {error}")

    def try_normalize(self, what: str, build: Callable[..., NormalizedJob], *args: Any) -> Optional[NormalizedJob]:
        """build(*args), or None after recording the failure of this one item"""
        try:
            return build(*args)
        except ITEM_ERRORS as e:
            self.record_failure(what, e)
            return None

    def __repr__(self) -> str:
        """String representation of adapter"""
        return f"{self.__class__.__name__}(source={self.SOURCE.value}, stats={self.stats})"
