"""
Core utilities and configuration for the university ETL service.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Application configuration and environment variable management
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities
    retry: Retry wrapper with exponential backoff

Usage:
    from core.config import settings
    from core.exceptions import UpstreamUnavailable, PersistenceError
    from core.logging import setup_logging
    from core.retry import with_retry

Example:
    # Initialize logging
    setup_logging()

    # Retry a flaky coroutine three times, waiting 1s then 2s
    fetch = with_retry(max_attempts=3, initial_delay=1.0)(fetch_page)
"""

__all__ = [
    "settings",
    "setup_logging",
    "with_retry",
    # Exceptions
    "ETLException",
    "ExtractionError",
    "UpstreamUnavailable",
    "LoadError",
    "PersistenceError",
    "PersistenceMissing",
    "ETLAlreadyRunningError",
]
