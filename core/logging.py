"""
Logging configuration
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional
from core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_handlers(log_dir: Optional[str] = None) -> List[logging.Handler]:
    """
    Create log handlers: stdout always, plus error.log (ERROR and above)
    and combined.log (everything) when a log directory is configured.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)

        error_handler = logging.FileHandler(directory / "error.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)
        handlers.append(logging.FileHandler(directory / "combined.log", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging():
    """Configure application logging"""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(level=log_level, handlers=build_handlers(settings.LOG_DIR))

    # Per-request lines from the HTTP client and job bookkeeping are noise at INFO
    for noisy in ("httpx", "httpcore", "apscheduler"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {settings.LOG_LEVEL} level")
