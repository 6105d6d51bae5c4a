"""
Test doubles and record builders shared across test modules
"""

from typing import List
from ingestion.base import PagedSource
from schemas.university import University


class ScriptedSource(PagedSource):
    """Paged source that serves pre-defined pages and records every call"""

    def __init__(self, pages: List[list], page_size: int = 5):
        super().__init__(source_name="scripted", page_size=page_size)
        self.pages = list(pages)
        self.calls = []

    async def fetch_page(self, offset: int, limit: int) -> list:
        self.calls.append((offset, limit))
        if not self.pages:
            return []
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return page


def make_raw(name: str, code: str = "US", **overrides) -> dict:
    slug = name.lower().replace(" ", "")
    record = {
        "name": name,
        "country": "United States",
        "alpha_two_code": code,
        "domains": [f"{slug}.edu"],
        "web_pages": [f"https://{slug}.edu"],
        "state-province": None,
    }
    record.update(overrides)
    return record


def make_university(name: str, code: str = "US", **overrides) -> University:
    slug = name.lower().replace(" ", "")
    fields = {
        "name": name,
        "country": "United States",
        "alpha_two_code": code,
        "domains": [f"{slug}.edu"],
        "web_pages": [f"https://{slug}.edu"],
        "state_province": None,
    }
    fields.update(overrides)
    return University(**fields)
