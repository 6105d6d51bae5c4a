"""
Health check endpoint with snapshot and ETL status
"""

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool
from api.dependencies import get_runner, get_store
from schemas.api import HealthCheckResponse, SnapshotInfo
from ingestion.loaders.snapshot_store import JsonSnapshotStore
from ingestion.runner import ETLRunner
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    store: JsonSnapshotStore = Depends(get_store),
    runner: ETLRunner = Depends(get_runner)
):
    """
    Health check endpoint.

    Returns:
    - Snapshot location, presence and size
    - Whether an ETL run is in flight
    - Summary of the last ETL run; a failed last run marks the service degraded
    """
    exists = store.exists()
    records = await run_in_threadpool(store.count) if exists else 0

    last_run = runner.last_run
    status = "degraded" if last_run is not None and last_run.status == "failed" else "healthy"

    return HealthCheckResponse(
        status=status,
        timestamp=datetime.now(timezone.utc),
        snapshot=SnapshotInfo(path=str(store.file_path), exists=exists, records=records),
        etl_running=runner.is_running,
        last_run=last_run
    )
