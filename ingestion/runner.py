# ============================================================================
# File: ingestion/runner.py
# Description: ETL orchestrator for the university snapshot
# ============================================================================
"""
ETL Runner - Orchestrates Extract, Transform, Load for the university snapshot.

This module provides:
- Strictly sequential fetch -> normalize -> merge phases
- A single-run guard so overlapping triggers cannot interleave writes
- Detailed error context and logging, with every failure re-raised
- Last-run bookkeeping for the health endpoint
"""

from typing import Any, Dict, Optional
from datetime import datetime, timezone
import asyncio
import logging

from ingestion.base import PagedSource
from ingestion.transformers.normalizer import UniversityNormalizer
from ingestion.loaders.snapshot_store import JsonSnapshotStore
from schemas.api import ETLRunSummary
from core.exceptions import ETLException, ETLAlreadyRunningError


class ETLRunner:
    """
    ETL Orchestrator

    Responsibilities:
    - Orchestrate Extract -> Transform -> Load
    - Only hand complete, normalized batches to the store
    - Refuse to start while another run is in flight
    - Log failures with context and re-raise them
    """

    def __init__(
        self,
        source: PagedSource,
        store: JsonSnapshotStore,
        normalizer: Optional[UniversityNormalizer] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.source = source
        self.store = store
        self.normalizer = normalizer or UniversityNormalizer()
        self.logger = logger or logging.getLogger(__name__)
        self.last_run: Optional[ETLRunSummary] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run(self, trigger: str = "manual") -> Dict[str, Any]:
        """
        Run one full ETL cycle.

        Pipeline phases:
        1. Extract - Fetch every page from the source
        2. Transform - Normalize and deduplicate
        3. Load - Merge into the snapshot and persist it

        Args:
            trigger: What started the run (startup, schedule, manual, cli)

        Returns:
            Run summary (see ETLRunSummary)

        Raises:
            ETLAlreadyRunningError: If a run is already in flight
            UpstreamUnavailable: If a page could not be fetched after all retries
            PersistenceError: If the merged snapshot could not be written
            ETLException: For any other failure (original chained as __cause__)
        """
        if self._lock.locked():
            self.logger.warning(f"ETL run requested by {trigger} while another run is in flight")
            raise ETLAlreadyRunningError(
                "An ETL run is already in progress",
                context={"source_name": self.source.source_name, "trigger": trigger}
            )

        async with self._lock:
            return await self._run(trigger)

    async def _run(self, trigger: str) -> Dict[str, Any]:
        summary = ETLRunSummary(
            status="running",
            trigger=trigger,
            started_at=datetime.now(timezone.utc)
        )
        self.logger.info(f"Starting ETL run for {self.source.source_name} (trigger: {trigger})")

        try:
            # --------------------------------------------------
            # PHASE 1: EXTRACTION
            # --------------------------------------------------
            raw_records = await self.source.fetch_all()
            summary.records_fetched = len(raw_records)

            # --------------------------------------------------
            # PHASE 2: TRANSFORMATION
            # --------------------------------------------------
            universities = self.normalizer.normalize(raw_records)
            summary.records_normalized = len(universities)

            # --------------------------------------------------
            # PHASE 3: LOAD (MERGE + ATOMIC REPLACE)
            # --------------------------------------------------
            summary.records_total = await asyncio.to_thread(
                self.store.merge_and_save, universities
            )

        except ETLException as e:
            self._finish(summary, "failed", e.message)
            self.logger.error(
                f"ETL process failed: {e}",
                extra={"error_context": e.to_dict()}
            )
            raise

        except Exception as e:
            self._finish(summary, "failed", str(e))
            self.logger.exception("Unexpected error in ETL pipeline")
            raise ETLException(
                "Unexpected error in ETL pipeline",
                context={
                    "source_name": self.source.source_name,
                    "trigger": trigger,
                    "records_fetched": summary.records_fetched,
                    "records_normalized": summary.records_normalized
                },
                original_exception=e
            )

        self._finish(summary, "success")
        self.logger.info(
            f"ETL run completed - Fetched: {summary.records_fetched}, "
            f"Normalized: {summary.records_normalized}, Snapshot: {summary.records_total}"
        )
        return summary.model_dump()

    def _finish(self, summary: ETLRunSummary, status: str, error_message: Optional[str] = None):
        summary.status = status
        summary.completed_at = datetime.now(timezone.utc)
        summary.duration_seconds = (summary.completed_at - summary.started_at).total_seconds()
        summary.error_message = error_message
        self.last_run = summary
