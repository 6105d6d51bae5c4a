"""
FastAPI dependencies exposing the pipeline components built at startup
"""

from fastapi import Request
from ingestion.loaders.snapshot_store import JsonSnapshotStore
from ingestion.runner import ETLRunner


def get_store(request: Request) -> JsonSnapshotStore:
    """Snapshot store shared by the API and the ETL runner"""
    return request.app.state.store


def get_runner(request: Request) -> ETLRunner:
    """ETL runner shared by the scheduler, startup and manual triggers"""
    return request.app.state.runner
