"""
Transform raw directory records into canonical University records
"""

from typing import Dict, Optional, List, Iterable
from pydantic import ValidationError
from schemas.university import University, RawUniversity, IdentityKey
import logging


class UniversityNormalizer:
    """
    Normalize raw directory records into the canonical schema.

    Handles:
    - Field renaming (alpha_two_code, web_pages, state-province)
    - Default values for missing or null fields
    - Deduplication by (name, alpha_two_code), first occurrence wins
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def normalize(self, raw_records: Iterable[RawUniversity]) -> List[University]:
        """
        Normalize and deduplicate a batch of raw records.

        Later duplicates of an identity key are dropped as-is; their fields
        are not merged into the first occurrence. Entries that are not JSON
        objects are skipped and counted in the log.

        Returns:
            Canonical records in first-seen order
        """
        universities: Dict[IdentityKey, University] = {}
        duplicates = 0
        skipped = 0

        for raw in raw_records:
            if not isinstance(raw, dict):
                skipped += 1
                continue
            try:
                university = self.normalize_record(raw)
            except ValidationError as e:
                self.logger.debug(f"Skipping malformed record {raw.get('name')!r}: {e}")
                skipped += 1
                continue

            key = university.identity_key
            if key in universities:
                duplicates += 1
                continue
            universities[key] = university

        if duplicates:
            self.logger.debug(f"Dropped {duplicates} duplicate records")
        if skipped:
            self.logger.warning(f"Skipped {skipped} malformed records")

        self.logger.info(f"Normalized {len(universities)} universities")
        return list(universities.values())

    @staticmethod
    def normalize_record(record: RawUniversity) -> University:
        """Map a single raw record to the canonical schema"""
        return University(
            name=record.get("name"),
            country=record.get("country"),
            alpha_two_code=record.get("alpha_two_code"),
            domains=record.get("domains"),
            web_pages=record.get("web_pages"),
            state_province=record.get("state-province"),
        )
