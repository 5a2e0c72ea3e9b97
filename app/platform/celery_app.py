from celery import Celery
from kombu import Queue

from app.platform.config import settings


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Queue Structure:
    - pipeline.content: deferred content-quality scoring (model provider calls)
    - pipeline.enrichment: final-batch analytics enrichment (third-party APIs)

    Tasks are fire-and-forget from the ingestion request; the worker pool
    supervises them with a hard time limit and late acknowledgement so a
    lost worker requeues the task instead of dropping it.
    """
    celery_app = Celery(
        "crawl_score_pipeline",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
    )

    celery_app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer=settings.CELERY_RESULT_SERIALIZER,
        accept_content=[settings.CELERY_ACCEPT_CONTENT],
        timezone="UTC",
        enable_utc=True,
        task_track_started=settings.CELERY_TASK_TRACK_STARTED,
        task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
        task_soft_time_limit=max(settings.CELERY_TASK_TIME_LIMIT - 30, 30),

        result_expires=3600,

        task_routes={
            "app.features.crawl.workers.tasks.score_content_quality": {"queue": "pipeline.content"},
            "app.features.crawl.workers.tasks.rescore_content_quality": {"queue": "pipeline.content"},
            "app.features.crawl.workers.tasks.enrich_job": {"queue": "pipeline.enrichment"},
        },

        task_queues=(
            Queue("default"),
            Queue("pipeline.content"),
            Queue("pipeline.enrichment"),
        ),

        task_default_queue="default",

        worker_prefetch_multiplier=1,  # Fair distribution

        task_acks_late=True,
        task_reject_on_worker_lost=True,
    )

    celery_app.autodiscover_tasks(["app.features.crawl.workers"])

    return celery_app


celery_app = create_celery_app()
