"""
University directory API extractor with retry logic.

This module fetches pages of universities from the public directory API:
- Offset/limit pagination (driven by PagedSource.fetch_all)
- Country filter sent with '+' for spaces
- Exponential backoff retry for transient failures
- Timeout handling with configurable limits
"""

import httpx
from typing import List, Dict, Any, Optional, Callable, Awaitable
from urllib.parse import quote_plus
from ingestion.base import PagedSource
from schemas.university import RawUniversity
from core.config import settings
from core.exceptions import UpstreamUnavailable
from core.retry import with_retry
import asyncio
import logging


class UniversityAPIExtractor(PagedSource):
    """
    Extract universities from the directory API.

    Every page request goes through the retry wrapper; an
    UpstreamUnavailable only escapes fetch_page once all attempts failed.

    Attributes:
        max_retries: Maximum number of attempts per page (default: 3)
        retry_delay: Delay after the first failed attempt in seconds (default: 1.0)
        timeout: Request timeout in seconds (default: 30.0)
    """

    def __init__(
        self,
        source_name: str = "universities",
        api_url: Optional[str] = None,
        country: Optional[str] = None,
        page_size: Optional[int] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        logger: Optional[logging.Logger] = None
    ):
        super().__init__(
            source_name=source_name,
            page_size=page_size,
            logger=logger or logging.getLogger(__name__)
        )
        self.api_url = api_url or settings.API_URL
        self.country = country if country is not None else settings.DEFAULT_COUNTRY
        self.max_retries = max_retries if max_retries is not None else settings.MAX_RETRIES
        self.retry_delay = retry_delay if retry_delay is not None else settings.RETRY_INITIAL_DELAY
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._client = client

        self._request_with_retry = with_retry(
            max_attempts=self.max_retries,
            initial_delay=self.retry_delay,
            retry_on=(UpstreamUnavailable,),
            logger=self.logger,
            sleep=sleep
        )(self._request_page)

    def build_url(self, offset: int, limit: int) -> str:
        """Build the page URL; spaces in the country become '+', existing '+' are kept."""
        country = quote_plus(self.country, safe="+")
        return f"{self.api_url}?offset={offset}&limit={limit}&country={country}"

    async def fetch_page(self, offset: int, limit: int) -> List[RawUniversity]:
        """
        Fetch one page of universities.

        Args:
            offset: Number of records to skip (non-negative)
            limit: Page size (positive)

        Returns:
            Raw university records for this page

        Raises:
            UpstreamUnavailable: When every attempt failed
        """
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")

        self.logger.info(f"Fetching universities page: offset={offset}, limit={limit}")
        records = await self._request_with_retry(offset, limit)
        self.logger.info(f"Fetched {len(records)} universities for page offset={offset}")
        return records

    async def _request_page(self, offset: int, limit: int) -> List[RawUniversity]:
        """Single attempt at fetching a page; every failure becomes UpstreamUnavailable."""
        url = self.build_url(offset, limit)
        context: Dict[str, Any] = {
            "api_url": self.api_url,
            "source_name": self.source_name,
            "offset": offset,
            "limit": limit
        }

        try:
            if self._client is not None:
                response = await self._client.get(url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()

        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(
                "Request timeout",
                context={**context, "timeout": self.timeout},
                original_exception=e
            )

        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailable(
                f"Upstream returned HTTP {e.response.status_code}",
                context={
                    **context,
                    "status_code": e.response.status_code,
                    "response_body": e.response.text[:500]
                },
                original_exception=e
            )

        except httpx.HTTPError as e:
            raise UpstreamUnavailable(
                "Network error",
                context=context,
                original_exception=e
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailable(
                "Failed to parse JSON response",
                context={**context, "response_body": response.text[:500]},
                original_exception=e
            )

        if not isinstance(data, list):
            raise UpstreamUnavailable(
                "Expected a JSON array of universities",
                context={**context, "response_type": type(data).__name__}
            )

        return data
