"""
FastAPI application initialization
"""

from fastapi import FastAPI
from api.routes import health, universities
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.exceptions import ETLException
from core.logging import setup_logging
from ingestion.extractors.university_api import UniversityAPIExtractor
from ingestion.loaders.snapshot_store import JsonSnapshotStore
from ingestion.runner import ETLRunner
from ingestion.scheduler import ETLScheduler
import logging
import uvicorn

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="University Directory ETL API",
    description="Daily snapshot of the university directory, served as CSV",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(universities.router)


def build_pipeline():
    """Wire the store, runner and scheduler from settings"""
    store = JsonSnapshotStore(settings.DATA_FILE_PATH)
    runner = ETLRunner(source=UniversityAPIExtractor(), store=store)
    scheduler = ETLScheduler(runner)
    return store, runner, scheduler


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting University Directory ETL API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Snapshot: {settings.DATA_FILE_PATH}")

    store, runner, scheduler = build_pipeline()
    app.state.store = store
    app.state.runner = runner
    app.state.scheduler = scheduler

    try:
        store.ensure_exists()
    except ETLException as e:
        logger.error(f"Could not create snapshot file: {e}")

    if settings.RUN_ETL_ON_STARTUP:
        logger.info("Running initial ETL process")
        try:
            await runner.run(trigger="startup")
        except Exception as e:
            logger.error(f"Initial ETL process failed: {e}")
    else:
        logger.info("Skipping initial ETL process as RUN_ETL_ON_STARTUP is set to false")

    scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down University Directory ETL API")
    app.state.scheduler.stop()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "University Directory ETL API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "download": "/v1/universities/download",
            "list": "/v1/universities",
            "run_etl": "/v1/universities/etl"
        }
    }


def main():
    if settings.PORT is None:
        raise SystemExit("PORT must be set to serve the API")
    uvicorn.run(app, host=settings.API_HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
