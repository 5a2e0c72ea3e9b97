"""
Test configuration and fixtures for the crawl scoring pipeline.

Environment is pinned before any app module is imported so settings,
the engine and the Celery app all pick up the test values.
"""

import os
import tempfile
from datetime import datetime, timezone
from typing import Generator

from dotenv import load_dotenv

load_dotenv()

_tmp_dir = tempfile.mkdtemp(prefix="crawl-pipeline-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmp_dir, 'app.db')}"
os.environ["INTEGRATION_ENCRYPTION_KEY"] = "test-integration-key"
os.environ["LOG_DIR"] = os.path.join(_tmp_dir, "logs")
os.environ["OPENROUTER_API_KEY"] = "test-key"
os.environ["OBJECT_STORE_ROOT"] = os.path.join(_tmp_dir, "objects")
os.environ["OBJECT_STORE_BASE_URL"] = ""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from app.features.crawl.models import CrawlJob, CrawlJobStatus, Project
from app.features.scoring.schemas import (
    ExtractedSignals,
    LighthouseScores,
    PageData,
    SiteContext,
)
from app.platform.db.registry import import_all_models


GOOD_TITLE = "Espresso Grinder Buying Guide for Home Baristas"
GOOD_DESCRIPTION = (
    "Everything we learned testing twenty espresso grinders at home: burr types, "
    "retention, noise and which grinder suits your budget."
)


def make_page(**overrides) -> PageData:
    """A page that passes every rule; override fields to trigger one."""
    extracted = dict(
        h1=["Espresso grinder guide"],
        h2=["Our hands-on experience", "Key takeaways"],
        schema_types=["Organization"],
        internal_links=["https://example.com/", "https://example.com/about"],
        external_links=["https://www.nist.gov/grind-size"],
        og_tags={"og:title": "Guide", "og:description": "Grinders", "og:image": "https://example.com/a.png"},
        structured_data=[{"@type": "Organization", "name": "Example", "url": "https://example.com"}],
    )
    extracted.update(overrides.pop("extracted", {}))
    fields = dict(
        url="https://example.com/guide",
        status_code=200,
        title=GOOD_TITLE,
        meta_description=GOOD_DESCRIPTION,
        canonical_url="https://example.com/guide",
        word_count=900,
        content_hash="hash-guide",
        extracted=ExtractedSignals(**extracted),
        lighthouse=LighthouseScores(performance=0.95, seo=0.95, accessibility=0.95, best_practices=0.95),
        site_context=SiteContext(),
    )
    fields.update(overrides)
    return PageData(**fields)


@pytest.fixture
def clean_page():
    return make_page


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    metadata = import_all_models()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def crawl_job(db_session):
    """A pending crawl job on a fresh project."""
    project = Project(id="project-1", name="Example", domain="example.com")
    job = CrawlJob(id="job-1", project_id=project.id, status=CrawlJobStatus.pending)
    db_session.add_all([project, job])
    await db_session.commit()
    return job


# ── HTTP client ─────────────────────────────────

@pytest.fixture
def sync_db_url(tmp_path):
    """File database seeded synchronously for TestClient tests."""
    path = tmp_path / "routes.db"
    engine = create_engine(f"sqlite:///{path}")
    import_all_models().create_all(engine)
    with Session(engine) as session:
        session.add(Project(id="project-1", name="Example", domain="example.com"))
        session.flush()
        session.add(CrawlJob(id="job-1", project_id="project-1", status=CrawlJobStatus.pending))
        session.add(
            CrawlJob(
                id="job-done",
                project_id="project-1",
                status=CrawlJobStatus.complete,
                completed_at=datetime.now(timezone.utc),
                last_batch_index=2,
            )
        )
        session.commit()
    engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def scheduled(monkeypatch):
    """Captures background task scheduling instead of talking to the broker."""
    from app.features.crawl.workers import tasks

    calls = []

    def fake_delay(name):
        def delay(*args, **kwargs):
            calls.append((name, args, kwargs))
        return delay

    for name in ("score_content_quality", "rescore_content_quality", "enrich_job"):
        monkeypatch.setattr(getattr(tasks, name), "delay", fake_delay(name))
    return calls


@pytest.fixture
def client(sync_db_url, scheduled) -> Generator[TestClient, None, None]:
    """
    Test client whose requests hit the seeded file database.

    NullPool keeps connections off the pytest event loop; TestClient runs
    the app on its own loop.
    """
    from app.main import app
    from app.platform.db.session import get_db

    engine = create_async_engine(sync_db_url, poolclass=NullPool)
    factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)
