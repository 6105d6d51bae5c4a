"""
ETL pipeline components for the university snapshot.

Modules:
    base: Abstract paginated source (offset/limit walking until an empty page)
    runner: ETL orchestrator that coordinates extract, transform, and load phases
    scheduler: APScheduler integration for the daily ETL run

Subpackages:
    extractors: Directory API extractor with retry logic
    transformers: Normalization and deduplication
    loaders: JSON snapshot store with merge-on-load and atomic replace

Architecture:
    The ETL pipeline follows a three-phase approach:

    1. Extract - Fetch every page from the directory API with retry logic
    2. Transform - Normalize to the canonical schema, first occurrence wins
    3. Load - Merge over the existing snapshot, last write wins

    Phases run strictly in order; the store is only touched once the whole
    batch has been fetched and normalized.

Usage:
    from ingestion.extractors.university_api import UniversityAPIExtractor
    from ingestion.loaders.snapshot_store import JsonSnapshotStore
    from ingestion.runner import ETLRunner

Example:
    runner = ETLRunner(
        source=UniversityAPIExtractor(country="Canada"),
        store=JsonSnapshotStore("./data/universities.json"),
    )
    result = await runner.run()

    print(f"Snapshot holds {result['records_total']} universities")

Error Handling:
    All components use custom exceptions from core.exceptions. The runner
    logs every failure and re-raises it; callers decide whether it is fatal.
"""

__all__ = [
    "PagedSource",
    "ETLRunner",
    "ETLScheduler",
    "UniversityAPIExtractor",
    "UniversityNormalizer",
    "JsonSnapshotStore",
]
