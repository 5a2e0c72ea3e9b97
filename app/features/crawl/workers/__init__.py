"""Celery workers module - imports task modules for autodiscovery."""

from app.features.crawl.workers import tasks  # noqa: F401
