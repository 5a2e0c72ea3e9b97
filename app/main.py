import logging

from fastapi import FastAPI

from app.api_routers.v1 import api_router
from app.features.health.routes.health import router as health_router
from app.platform.config import settings
from app.platform.exceptions import add_exception_handlers

# Configure logging to show INFO level messages
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Crawl-result ingestion, scoring and enrichment pipeline",
    version="1.0.0",
)


# Root endpoint for basic info
@app.get("/", tags=["Info"])
def root():
    return {
        "app_name": settings.APP_NAME,
        "description": "Ingests crawler batches, scores pages and enriches them in the background.",
        "version": "1.0.0",
        "docs_url": "/docs",
        "api_base": "/api/v1",
    }


add_exception_handlers(app)

app.include_router(health_router)
app.include_router(api_router, prefix="/api/v1")
