"""
Custom exceptions for the university ETL pipeline with structured error context.

Each exception carries a context dictionary so that failures can be logged
with enough detail to diagnose a failed run after the fact.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   └── UpstreamUnavailable
    ├── LoadError
    │   ├── PersistenceError
    │   └── PersistenceMissing
    └── ETLAlreadyRunningError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all ETL-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (url, offset, file path, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for data extraction failures."""
    pass


class UpstreamUnavailable(ExtractionError):
    """
    Raised when the directory API cannot serve a page.

    Covers network errors, timeouts, non-2xx responses and bodies that are not
    a JSON array. The page fetcher retries on this error and only lets it
    escape once every attempt has failed.

    Context should include:
        - api_url: The endpoint that failed
        - offset / limit: The page that was requested
        - status_code: HTTP status code (if a response was received)
    """
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for snapshot persistence failures."""
    pass


class PersistenceError(LoadError):
    """
    Raised when the merged snapshot cannot be written.

    The previous snapshot is left untouched when this is raised.

    Context should include:
        - file_path: Path of the snapshot file
        - records: Number of records that were about to be written
    """
    pass


class PersistenceMissing(LoadError):
    """
    Raised internally when the snapshot is absent or unreadable.

    The snapshot store recovers from this by treating the snapshot as empty.
    """
    pass


# ============================================================================
# Run Coordination
# ============================================================================

class ETLAlreadyRunningError(ETLException):
    """Raised when a run is triggered while another one is still in flight."""
    pass
