"""
Imports every model module so SQLAlchemy mappers and ``Base.metadata`` are
complete. Used by migrations, worker tasks and the test database fixture.
"""


def import_all_models():
    from app.features.crawl.models import CrawlJob, Issue, Page, PageScore, Project  # noqa: F401
    from app.features.enrichment.models import EnrichmentResult, ProjectIntegration  # noqa: F401

    from app.platform.db.base import Base

    return Base.metadata
