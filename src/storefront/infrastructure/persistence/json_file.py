"""Shared file helpers for the JSON-backed repositories.

Each collection is a JSON array of records in one file.  Every
read-check-write cycle runs under a lock shared by all repository
instances pointing at the same file, which makes the version check in
``save_record`` a real compare-and-swap within the process.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path

from storefront.domain.exceptions import ConcurrencyConflictError, InternalError

logger = logging.getLogger(__name__)

# Records written before versioning existed count as the first version.
LEGACY_VERSION = 1

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _locks_guard:
        return _locks.setdefault(key, threading.RLock())


class JsonCollection:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = _lock_for(file_path)
        self._ensure_file()

    # --- Reads ----------------------------------------------------------------

    def load(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("could not read %s: %s", self._file_path, exc)
            raise InternalError(f"Could not read {self._file_path.name}") from exc

    def find(self, record_id: str) -> dict | None:
        for raw in self.load():
            if str(raw["id"]) == record_id:
                return raw
        return None

    # --- Writes ---------------------------------------------------------------

    def save_record(self, record: dict, expected_version: int) -> tuple[str, int]:
        """Insert or replace *record*, matched on its ``id``.

        The stored version must equal *expected_version* (0 meaning "not
        stored yet").  A record without an ``id`` gets the next numeric ID.
        Returns the record's ID and new version.
        """
        with self._lock:
            records = self.load()
            if record["id"] is None:
                record = {**record, "id": self._next_id(records)}

            index = next(
                (i for i, raw in enumerate(records) if str(raw["id"]) == record["id"]),
                None,
            )
            stored = (
                records[index].get("version", LEGACY_VERSION) if index is not None else 0
            )
            if stored != expected_version:
                raise ConcurrencyConflictError(
                    f"{self._file_path.stem} #{record['id']} was modified concurrently "
                    f"(expected version {expected_version}, found {stored})"
                )

            new_version = expected_version + 1
            record = {**record, "version": new_version}
            if index is None:
                records.append(record)
            else:
                records[index] = record
            self._persist(records)
            return record["id"], new_version

    def remove(self, record_id: str) -> bool:
        with self._lock:
            records = self.load()
            kept = [raw for raw in records if str(raw["id"]) != record_id]
            if len(kept) == len(records):
                return False
            self._persist(kept)
            return True

    def next_id(self) -> str:
        with self._lock:
            return self._next_id(self.load())

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _next_id(records: list[dict]) -> str:
        numeric = [int(raw["id"]) for raw in records if str(raw["id"]).isdigit()]
        return str(max(numeric, default=0) + 1)

    def _persist(self, records: list[dict]) -> None:
        # Swap in a fully written sibling file; readers never see a partial write
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self._file_path)
        except OSError as exc:
            logger.error("could not write %s: %s", self._file_path, exc)
            raise InternalError(f"Could not write {self._file_path.name}") from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
