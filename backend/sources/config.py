"""
Runtime configuration handed to every adapter.

Built once per invocation from Settings at the entry point; adapters never
read environment variables or module globals themselves.
"""

from dataclasses import dataclass, replace
from typing import Optional

from config.settings import Settings


@dataclass(frozen=True)
class SourceConfig:
    """
    Credentials, timeouts and throttling for one invocation.

    Examples:
        # From environment-backed settings
        config = SourceConfig.from_settings(get_settings())

        # Tests: no sleeps, no keys
        config = SourceConfig(request_delay_seconds=0)
    """
    rapidapi_key: Optional[str] = None
    adzuna_app_id: Optional[str] = None
    adzuna_api_key: Optional[str] = None

    request_timeout_seconds: float = 10.0
    request_delay_seconds: float = 0.5

    # Indeed two-phase fetch
    indeed_search_timeout_seconds: float = 25.0
    indeed_detail_timeout_seconds: float = 20.0
    indeed_detail_cap: int = 2
    indeed_detail_delay_seconds: float = 0.3

    # Hacker News job stories
    ycombinator_item_cap: int = 30

    # Paginated searches
    max_pages: int = 5

    # Browser scrapes
    scrape_detail_cap: Optional[int] = None
    headless: bool = True

    def with_overrides(self, **changes) -> "SourceConfig":
        return replace(self, **changes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SourceConfig":
        return cls(
            rapidapi_key=settings.RAPIDAPI_KEY or None,
            adzuna_app_id=settings.ADZUNA_APP_ID or None,
            adzuna_api_key=settings.ADZUNA_API_KEY or None,
            request_timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
            request_delay_seconds=settings.REQUEST_DELAY_SECONDS,
        )
