"""
Browser scrape orchestration.

A scrape walks an explicit state machine:

    LAUNCH -> NAVIGATE -> EXTRACT -> [PAGINATE -> EXTRACT]* -> DETAIL_FETCH -> CLOSED

The browser is opened once per run inside an async context manager and is
closed on every exit path. Jobs are appended to the result as soon as they
are normalized, so a failure in a later state still returns (and syncs)
everything produced before it.

Concrete scrapers only implement the DOM-specific pieces:
1. collect_listings(page): NAVIGATE / EXTRACT / PAGINATE for the listing pages
2. fetch_detail(page, listing): DETAIL_FETCH for one listing
3. normalize(listing, detail): NormalizedJob
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncContextManager, Callable, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from classifier import is_design_job
from sources.base_source import ITEM_ERRORS, JobBuilderMixin
from sources.config import SourceConfig
from sources.enums import JobSource, ScrapeMode
from sources.errors import BudgetExhausted
from sources.types import FetchStats, NormalizedJob
from utils.deadline import Deadline
from utils.worker_logging import ScrapeLogContext

USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

# Failures that cost one page visit, never the whole scrape
PAGE_ERRORS = (PlaywrightError, ValueError)

# Don't start a page load with less budget than this
MIN_PAGE_SECONDS = 2.0

# Playwright reads timeout=0 as "no timeout"
MIN_TIMEOUT_SECONDS = 0.5


class ScrapeState(str, Enum):
    LAUNCH = "launch"
    NAVIGATE = "navigate"
    EXTRACT = "extract"
    PAGINATE = "paginate"
    DETAIL_FETCH = "detail_fetch"
    CLOSED = "closed"


@dataclass
class ScrapeResult:
    """Outcome of one scrape run; jobs holds whatever was produced before a failure"""
    source: str
    mode: str
    jobs: List[NormalizedJob] = field(default_factory=list)
    listings: int = 0
    status: str = "success"     # success | partial | error
    failed_state: Optional[str] = None
    error: Optional[str] = None


BrowserFactory = Callable[[bool], AsyncContextManager[Any]]


@asynccontextmanager
async def launch_chromium(headless: bool = True):
    """Yield a fresh Chromium page; the browser is closed on exit"""
    async with async_playwright() as p:
        browser = await p.chromium.launch(
            headless=headless,
            args=['--no-sandbox', '--disable-setuid-sandbox'],
        )
        try:
            context = await browser.new_context(user_agent=USER_AGENT)
            yield await context.new_page()
        finally:
            await browser.close()


class ScrapeOrchestrator(JobBuilderMixin, ABC):
    """
    Base class for browser-automation sources.

    Exposes the same surface as BaseJobSource (fetch(), stats, skipped,
    last_error) so the runner treats scrapers like any other adapter.

    Each scraper must define:
    1. SOURCE: JobSource enum value
    2. DETAIL_CAP: detail pages visited per run in FULL mode
    """

    SOURCE: JobSource
    DETAIL_CAP: int = 20
    DETAIL_DELAY_SECONDS: float = 1.0

    def __init__(
        self,
        config: SourceConfig,
        deadline: Deadline,
        mode: ScrapeMode | str = ScrapeMode.FULL,
        browser_factory: BrowserFactory = launch_chromium,
    ):
        if not hasattr(self.__class__, 'SOURCE'):
            raise NotImplementedError(f"{self.__class__.__name__} must define SOURCE class variable")

        self.config = config
        self.deadline = deadline
        self.mode = ScrapeMode(mode)
        self.browser_factory = browser_factory
        self.stats = FetchStats()
        self.skipped = False
        self.last_error: Optional[Exception] = None
        self.state = ScrapeState.LAUNCH
        self.log = ScrapeLogContext(self.SOURCE.value, self.state.value)
        self.result: Optional[ScrapeResult] = None

    @property
    def detail_cap(self) -> int:
        if self.config.scrape_detail_cap is not None:
            return self.config.scrape_detail_cap
        return self.DETAIL_CAP

    def enter(self, state: ScrapeState) -> None:
        self.state = state
        self.log.state = state.value

    # =========================================================================
    # Scraper-specific steps
    # =========================================================================

    @abstractmethod
    async def collect_listings(self, page) -> List[Any]:
        """NAVIGATE / EXTRACT / PAGINATE; returns listing records in page order"""
        ...

    @abstractmethod
    async def fetch_detail(self, page, listing: Any) -> Any:
        """DETAIL_FETCH for one listing; returns whatever normalize() needs"""
        ...

    @abstractmethod
    def normalize(self, listing: Any, detail: Any = None) -> NormalizedJob:
        ...

    def listing_key(self, listing: Any) -> str:
        return listing.url

    # =========================================================================
    # Run
    # =========================================================================

    async def run(self) -> ScrapeResult:
        result = ScrapeResult(source=self.SOURCE.value, mode=self.mode.value)
        self.result = result

        try:
            self.enter(ScrapeState.LAUNCH)
            self.log.log_info(f"Launching browser ({self.mode.value} mode)")
            async with self.browser_factory(self.config.headless) as page:
                listings = await self.collect_listings(page)
                result.listings = len(listings)
                candidates = self._classify_listings(listings)
                self.log.log_info(
                    f"Extracted {len(listings)} listings, {len(candidates)} design candidates"
                )

                if self.mode == ScrapeMode.QUICK:
                    for listing in candidates:
                        self._append_job(result, listing)
                else:
                    await self._fetch_details(page, candidates[:self.detail_cap], result)
        except BudgetExhausted as e:
            self._mark_failed(result, e)
            self.log.log_warning(f"Time budget exhausted, stopping with {len(result.jobs)} jobs")
        except Exception as e:
            self._mark_failed(result, e)
            self.last_error = e
            self.log.log_error(
                f"Failed after {len(result.jobs)} jobs: {type(e).__name__}: {e}"
            )
        finally:
            self.enter(ScrapeState.CLOSED)

        self.log.log_info(
            f"Scrape {result.status}: {len(result.jobs)} jobs from {result.listings} listings"
        )
        return result

    async def fetch(self) -> List[NormalizedJob]:
        """Adapter surface: run and return the collected jobs"""
        result = await self.run()
        return result.jobs

    def _classify_listings(self, listings: List[Any]) -> List[Any]:
        """Listing titles are classified before any detail page is paid for"""
        seen = set()
        candidates = []
        for listing in listings:
            key = self.listing_key(listing)
            if key in seen:
                continue
            seen.add(key)
            self.stats.fetched += 1
            if is_design_job(listing.title, getattr(listing, 'tags', None)):
                self.stats.classified += 1
                candidates.append(listing)
        return candidates

    async def _fetch_details(self, page, listings: List[Any], result: ScrapeResult) -> None:
        self.enter(ScrapeState.DETAIL_FETCH)
        for index, listing in enumerate(listings):
            if index > 0:
                await self.pause(self.DETAIL_DELAY_SECONDS)
            self.ensure_budget()

            self.stats.detail_calls += 1
            try:
                detail = await self.fetch_detail(page, listing)
            except PAGE_ERRORS as e:
                self.stats.failed_requests += 1
                self.log.log_warning(
                    f"Detail {listing.url} failed, keeping listing data: {type(e).__name__}: {e}"
                )
                detail = None

            self._append_job(result, listing, detail)

    def _append_job(self, result: ScrapeResult, listing: Any, detail: Any = None) -> None:
        try:
            result.jobs.append(self.normalize(listing, detail))
        except ITEM_ERRORS as e:
            self.stats.failed_requests += 1
            self.log.log_warning(f"Listing {listing.url} skipped: {type(e).__name__}: {e}")

    def _mark_failed(self, result: ScrapeResult, error: Exception) -> None:
        result.status = "partial" if result.jobs else "error"
        result.failed_state = self.state.value
        result.error = f"{type(error).__name__}: {error}"

    # =========================================================================
    # Helpers for concrete scrapers
    # =========================================================================

    def ensure_budget(self) -> None:
        if self.deadline.remaining() < MIN_PAGE_SECONDS:
            raise BudgetExhausted(
                f"{self.deadline.remaining():.1f}s left in state {self.state.value}"
            )

    def timeout_ms(self, seconds: float) -> float:
        """Playwright timeout in milliseconds, clamped to the invocation budget"""
        return self.deadline.clamp(seconds, floor=MIN_TIMEOUT_SECONDS) * 1000

    async def goto(self, page, url: str, timeout_seconds: float, wait_until: str = 'domcontentloaded') -> str:
        """Load url and return the rendered HTML"""
        self.ensure_budget()
        await page.goto(url, wait_until=wait_until, timeout=self.timeout_ms(timeout_seconds))
        return await page.content()

    async def pause(self, seconds: float) -> None:
        """Fixed sleep between page loads, never longer than the remaining budget"""
        delay = min(seconds, self.deadline.remaining())
        if delay > 0:
            await asyncio.sleep(delay)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(source={self.SOURCE.value}, state={self.state.value})"
