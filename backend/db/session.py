"""Database session management"""
import os
from typing import Generator, Optional
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from dotenv import load_dotenv

# Load environment variables for LOCAL development only
# In Lambda, env vars are set via CloudFormation - don't override them with .env files
# AWS_LAMBDA_FUNCTION_NAME is set by Lambda runtime
_is_lambda = os.getenv("AWS_LAMBDA_FUNCTION_NAME") is not None

if not _is_lambda:
    # Local development: load .env.local (takes precedence over .env)
    _backend_dir = Path(__file__).parent.parent
    env_local = _backend_dir / '.env.local'
    env_file = _backend_dir / '.env'

    if env_local.exists():
        load_dotenv(env_local, override=True)
    elif env_file.exists():
        load_dotenv(env_file, override=True)

# Engines are created on first use so importing this module never needs a database
_engines: dict[str, Engine] = {}


def get_database_url(use_test_db: bool = False) -> str:
    """
    Resolve the connection string from the environment.

    Raises:
        ValueError: If the requested URL is not configured
    """
    key = "TEST_DATABASE_URL" if use_test_db else "DATABASE_URL"
    url = os.getenv(key)
    if not url:
        raise ValueError(f"{key} not found in environment variables")
    return url


def get_engine(use_test_db: bool = False) -> Engine:
    url = get_database_url(use_test_db)
    if url not in _engines:
        _engines[url] = create_engine(
            url,
            pool_pre_ping=True,  # Verify connections before using
            pool_recycle=3600,   # Recycle connections after 1 hour
        )
    return _engines[url]


def SessionLocal(bind: Optional[Engine] = None) -> Session:
    """Open a new session on the configured (or given) engine"""
    factory = sessionmaker(autocommit=False, autoflush=False, bind=bind or get_engine())
    return factory()


def get_test_session_local() -> Session:
    """Session on TEST_DATABASE_URL, for scripts and workers invoked with use_test_db"""
    return SessionLocal(bind=get_engine(use_test_db=True))


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Usage in FastAPI:
        from fastapi import Depends
        from db.session import get_db

        @router.post("/cron/sync")
        async def sync(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
