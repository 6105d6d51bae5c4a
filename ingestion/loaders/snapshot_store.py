"""
JSON file snapshot store with merge-on-load and atomic replace.

The snapshot is a single pretty-printed JSON array of University records.
Writes never truncate the live file: the merged content is written to a
temporary file next to it and moved over it with os.replace.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Iterable
from pydantic import ValidationError
from schemas.university import University, IdentityKey
from core.config import settings
from core.exceptions import PersistenceError, PersistenceMissing
import logging


class JsonSnapshotStore:
    """
    Persisted snapshot of canonical university records.

    Read failures degrade to an empty snapshot; write failures raise
    PersistenceError and leave the previous snapshot in place. Individual
    records that cannot be parsed are skipped, the rest of the file is kept.
    """

    def __init__(
        self,
        file_path: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.file_path = Path(file_path or settings.DATA_FILE_PATH)
        self.logger = logger or logging.getLogger(__name__)

    def exists(self) -> bool:
        return self.file_path.is_file()

    def ensure_exists(self) -> None:
        """Create an empty snapshot if none exists yet"""
        if self.exists():
            return
        self.logger.info(f"Creating empty snapshot at {self.file_path}")
        self._write([])

    def load(self) -> List[University]:
        """
        Read the persisted snapshot.

        Returns:
            Records in snapshot order; empty if the file is absent or unreadable
        """
        try:
            return self._read()
        except PersistenceMissing as e:
            self.logger.warning(f"No usable snapshot at {self.file_path}: {e.message}")
            return []

    def merge_and_save(self, new_records: Iterable[University]) -> int:
        """
        Merge new records over the existing snapshot and persist the result.

        Existing records keep their order. A new record replaces the existing
        record with the same identity key in place; records with unseen keys
        are appended.

        Returns:
            Number of records in the merged snapshot

        Raises:
            PersistenceError: If the merged snapshot could not be written
        """
        self.logger.info(f"Loading universities to {self.file_path}")

        merged: Dict[IdentityKey, University] = {
            record.identity_key: record for record in self.load()
        }
        for record in new_records:
            merged[record.identity_key] = record

        records = list(merged.values())
        self._write(records)

        self.logger.info(f"Successfully loaded {len(records)} universities")
        return len(records)

    def page(self, offset: int = 0, limit: Optional[int] = None) -> List[University]:
        """
        Read a slice of the snapshot.

        Args:
            offset: Index of the first record to return
            limit: Maximum number of records; None returns everything from offset

        Returns:
            The requested records; empty past the end or when the snapshot cannot be read

        Raises:
            ValueError: If limit is given and less than 1
        """
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")

        try:
            records = self._read()
        except PersistenceMissing as e:
            self.logger.error(f"Failed to read universities file: {e}")
            return []

        offset = max(offset, 0)
        if limit is None:
            return records[offset:]
        return records[offset:offset + limit]

    def count(self) -> int:
        try:
            return len(self._read())
        except PersistenceMissing:
            return 0

    def _read(self) -> List[University]:
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceMissing(
                "Snapshot file is absent or not valid JSON",
                context={"file_path": str(self.file_path)},
                original_exception=e
            )

        if not isinstance(payload, list):
            raise PersistenceMissing(
                "Snapshot file does not contain a JSON array",
                context={"file_path": str(self.file_path), "payload_type": type(payload).__name__}
            )

        records: List[University] = []
        skipped = 0
        for item in payload:
            try:
                records.append(University.model_validate(item))
            except ValidationError:
                skipped += 1

        if skipped:
            self.logger.warning(f"Skipped {skipped} unreadable records in {self.file_path}")
        return records

    def _write(self, records: List[University]) -> None:
        payload = [record.to_json_dict() for record in records]
        tmp_path: Optional[str] = None

        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.file_path.name}.",
                suffix=".tmp",
                dir=self.file_path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.file_path)

        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(
                "Failed to write snapshot",
                context={"file_path": str(self.file_path), "records": len(records)},
                original_exception=e
            )
