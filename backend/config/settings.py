from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path

# Get absolute path to backend directory (config/settings.py -> backend/)
_backend_dir = Path(__file__).parent.parent
_env_local = _backend_dir / '.env.local'
_env_file = _backend_dir / '.env'


class Settings(BaseSettings):
    """Application settings"""

    # Cron trigger authorization (Authorization: Bearer <CRON_SECRET>)
    # Empty means every trigger call is rejected
    CRON_SECRET: str = ""

    # CORS - Will be parsed from environment variable string
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Database Configuration
    DATABASE_URL: str = ""  # PostgreSQL connection string (production)
    TEST_DATABASE_URL: str = ""  # PostgreSQL connection string (test/dev branch) - Optional

    # Upstream credentials - sources without keys are skipped, not failed
    RAPIDAPI_KEY: str = ""
    ADZUNA_APP_ID: str = ""
    ADZUNA_API_KEY: str = ""

    # Invocation budgets (serverless ceilings are 60s for sync, 180s for scrape)
    SYNC_TIME_BUDGET_SECONDS: float = 55.0
    SCRAPE_TIME_BUDGET_SECONDS: float = 170.0
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    REQUEST_DELAY_SECONDS: float = 0.5

    LOG_LEVEL: str = "INFO"

    class Config:
        # Prioritize .env.local for local development, fallback to .env
        # Use absolute paths to avoid working directory issues
        env_file = str(_env_local) if _env_local.exists() else str(_env_file)
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields from environment file

    def get_allowed_origins(self) -> List[str]:
        """Parse and return CORS origins as a list"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


@lru_cache
def get_settings() -> Settings:
    """
    Return process-wide settings, read once at first use.

    Only entry points (routes, workers, scripts) call this; everything below
    them receives an explicit SourceConfig instead.
    """
    return Settings()
