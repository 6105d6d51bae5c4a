"""
Abstract base class for paginated data sources
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from schemas.university import RawUniversity
from core.config import settings
import logging


class PagedSource(ABC):
    """
    Abstract base class for offset/limit paginated sources.

    Responsibilities:
    - Fetch a single page (implemented by subclasses)
    - Walk every page until the source reports end-of-data
    """

    def __init__(
        self,
        source_name: str,
        page_size: Optional[int] = None,
        logger: Optional[logging.Logger] = None
    ):
        page_size = settings.DEFAULT_LIMIT if page_size is None else page_size
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self.source_name = source_name
        self.page_size = page_size
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    async def fetch_page(self, offset: int, limit: int) -> List[RawUniversity]:
        """
        Fetch one page of raw records.

        Args:
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of raw record dictionaries; empty when there is no more data
        """
        pass

    async def fetch_all(self) -> List[RawUniversity]:
        """
        Fetch every page, starting at offset 0.

        An empty page is the only end-of-data signal. The offset advances by
        the number of records actually received, so a short final page is
        followed by one more request that comes back empty.

        Returns:
            All raw records in upstream order
        """
        offset = 0
        all_records: List[RawUniversity] = []

        self.logger.info(
            f"Starting paginated fetch for {self.source_name} with page_size={self.page_size}"
        )

        while True:
            records = await self.fetch_page(offset, self.page_size)

            if not records:
                self.logger.info(f"No more data for {self.source_name} at offset={offset}")
                break

            all_records.extend(records)
            offset += len(records)
            self.logger.info(f"Total records fetched so far: {len(all_records)}")

        self.logger.info(
            f"Completed fetch for {self.source_name}. Total: {len(all_records)}"
        )
        return all_records
