"""
University snapshot endpoints: CSV download, JSON listing, manual ETL trigger
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from starlette.concurrency import run_in_threadpool
from api.dependencies import get_runner, get_store
from schemas.api import ETLRunSummary, UniversityPageResponse
from schemas.university import University
from ingestion.loaders.snapshot_store import JsonSnapshotStore
from ingestion.runner import ETLRunner
from core.exceptions import (
    ETLAlreadyRunningError,
    ETLException,
    UpstreamUnavailable
)
from typing import Iterable, Optional
import pandas as pd
import uuid
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/universities", tags=["Universities"])

CSV_HEADERS = ["name", "country", "alphaTwoCode", "domains", "webPages", "stateProvince"]


def universities_to_csv(universities: Iterable[University]) -> str:
    """Render records as CSV; lists are ';'-joined and a null state is empty"""
    rows = [
        [
            uni.name,
            uni.country,
            uni.alpha_two_code,
            ";".join(uni.domains),
            ";".join(uni.web_pages),
            uni.state_province or "",
        ]
        for uni in universities
    ]
    df = pd.DataFrame(rows, columns=CSV_HEADERS)
    return df.to_csv(index=False, lineterminator="\n")


@router.get("/download")
async def download_universities(
    request: Request,
    offset: int = Query(0, ge=0, description="Index of the first record"),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of records"),
    store: JsonSnapshotStore = Depends(get_store)
):
    """Download the snapshot (or a slice of it) as a CSV attachment."""
    request_id = getattr(request.state, "request_id", uuid.uuid4().hex)
    logger.info(f"[{request_id}] Downloading universities with offset={offset}, limit={limit}")

    universities = await run_in_threadpool(store.page, offset, limit)
    content = universities_to_csv(universities)

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="universities.csv"'}
    )


@router.get("", response_model=UniversityPageResponse)
async def list_universities(
    offset: int = Query(0, ge=0, description="Index of the first record"),
    limit: Optional[int] = Query(None, ge=1, le=5000, description="Maximum number of records"),
    store: JsonSnapshotStore = Depends(get_store)
):
    """Return a slice of the snapshot as JSON."""
    universities = await run_in_threadpool(store.page, offset, limit)
    return UniversityPageResponse(
        items=universities,
        offset=offset,
        limit=limit,
        count=len(universities)
    )


@router.post("/etl", response_model=ETLRunSummary)
async def trigger_etl(runner: ETLRunner = Depends(get_runner)):
    """
    Run the ETL pipeline now and wait for it to finish.

    Returns 409 if a run is already in progress, 502 if the directory API
    could not be reached, 500 for any other failure.
    """
    try:
        return await runner.run(trigger="manual")
    except ETLAlreadyRunningError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except UpstreamUnavailable as e:
        raise HTTPException(status_code=502, detail=e.message)
    except ETLException as e:
        raise HTTPException(status_code=500, detail=e.message)
