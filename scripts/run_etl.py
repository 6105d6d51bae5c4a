"""
Script to run one ETL cycle for the university snapshot
"""

import asyncio
import sys
import logging

from core.config import settings
from core.logging import setup_logging
from ingestion.extractors.university_api import UniversityAPIExtractor
from ingestion.loaders.snapshot_store import JsonSnapshotStore
from ingestion.runner import ETLRunner

logger = logging.getLogger(__name__)


async def run_etl() -> int:
    """Run the ETL pipeline once; returns a process exit code"""
    store = JsonSnapshotStore(settings.DATA_FILE_PATH)
    runner = ETLRunner(source=UniversityAPIExtractor(), store=store)

    try:
        result = await runner.run(trigger="cli")
    except Exception as e:
        logger.error(f"ETL pipeline error: {e}")
        return 1

    logger.info(
        f"ETL completed: Fetched={result['records_fetched']}, "
        f"Snapshot={result['records_total']} ({store.file_path})"
    )
    return 0


def main():
    setup_logging()
    sys.exit(asyncio.run(run_etl()))


if __name__ == "__main__":
    main()
