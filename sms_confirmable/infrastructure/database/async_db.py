from __future__ import annotations

"""
Asynchronous Database Utilities Module

This module provides the asynchronous engine and session helpers used by the
SQL account repository.

**Security Note**: asyncpg does not accept 'sslmode' in connect_args; it is
stripped from the URL and must be configured through the driver if required.
Avoid logging connection details, which contain credentials.

Key Components:
    - engine: The asynchronous SQLAlchemy engine for PostgreSQL connections.
    - AsyncSessionFactory: A factory for creating asynchronous database sessions.
    - get_async_db: A context manager yielding async sessions.
    - check_database_health: Connectivity probe with retry logic.
    - create_async_db_and_tables: Utility to create tables using the async engine.
"""

import time
import urllib.parse as urlparse
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.sql import text
from sqlmodel import SQLModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sms_confirmable.core.config.settings import settings
from sms_confirmable.core.logging import logger


def _build_async_url(database_url: str) -> str:
    """
    Build the asynchronous database URL.

    Replaces a synchronous driver with asyncpg and removes query parameters
    such as sslmode that asyncpg handles differently.

    Returns:
        str: The cleaned asynchronous database URL.
    """
    async_url = database_url.replace("postgresql+psycopg2", "postgresql+asyncpg")
    if async_url.startswith("postgresql://"):
        async_url = async_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    parsed = urlparse.urlparse(async_url)
    query = dict(urlparse.parse_qsl(parsed.query))
    query.pop("sslmode", None)
    parsed = parsed._replace(query=urlparse.urlencode(query))
    return urlparse.urlunparse(parsed)


url = make_url(_build_async_url(settings.DATABASE_URL))
engine = create_async_engine(
    url,
    echo=False,
    pool_size=settings.POSTGRES_POOL_SIZE,
    max_overflow=settings.POSTGRES_MAX_OVERFLOW,
    pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
    pool_pre_ping=True,
)

AsyncSessionFactory: sessionmaker[AsyncSession] = sessionmaker(  # type: ignore[type-arg]
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


@asynccontextmanager
async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession, rolling back if the caller raises.

    Yields:
        AsyncSession: An asynchronous database session.
    """
    async with AsyncSessionFactory() as session:  # pragma: no cover – boilerplate
        logger.debug("async_database_session_created")
        try:
            yield session
        except Exception:  # noqa: BLE001 – Any DB error must trigger rollback
            await session.rollback()
            logger.error("async_database_session_rollback")
            raise
        finally:
            await session.close()
            logger.debug("async_database_session_closed")


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    retry=retry_if_exception_type(OperationalError),
)
async def check_database_health() -> bool:
    """
    Performs a health check on the database connection.

    OperationalError is retried; any other failure is logged and reported
    as unhealthy.

    Returns:
        bool: True if the database answered ``SELECT 1``.
    """
    start_time = time.time()
    try:
        async with AsyncSessionFactory() as session:
            await session.execute(text("SELECT 1"))
    except OperationalError:
        raise
    except Exception as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            execution_time=time.time() - start_time,
        )
        return False
    logger.info("database_health_check_success", execution_time=time.time() - start_time)
    return True


async def create_async_db_and_tables() -> None:
    """
    Create tables using the async engine (mainly for local setups).
    """
    start_time = time.time()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info(
        "database_tables_created",
        execution_time=time.time() - start_time,
        tables=list(SQLModel.metadata.tables.keys()),
    )
