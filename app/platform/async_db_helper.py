"""
Async Database Helper for Celery Tasks

Provides async database session management for the pipeline's background
tasks, which run their async services under ``asyncio.run``.
"""

from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.platform.config import settings


@asynccontextmanager
async def get_async_db():
    """
    Get an async database session for use inside a Celery task.

    Every ``asyncio.run`` call owns a fresh event loop, so the engine is
    created per call with ``NullPool`` and disposed on exit; pooled
    connections cannot be shared across loops.

    Usage in Celery task:
        async def _run():
            async with get_async_db() as db:
                await EnrichmentService().enrich_job(db, job_id)

        asyncio.run(_run())
    """
    engine = create_async_engine(settings.DATABASE_URL, echo=False, poolclass=NullPool)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_factory() as session:
            try:
                yield session
            finally:
                await session.close()
    finally:
        await engine.dispose()
