from fastapi import APIRouter

from app.features.crawl.routes.ingest import router as ingest_router
from app.features.health.routes.health import router as health_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(ingest_router)
api_router.include_router(health_router)
