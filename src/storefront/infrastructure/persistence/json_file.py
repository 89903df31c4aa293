"""A JSON array on disk, read and rewritten as a whole.

All repositories in this package store one collection per file.  The
lock serializes read-modify-write cycles within the process and the write
goes through a temporary file and ``os.replace`` so readers never see a
half-written document.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    @contextmanager
    def editing(self) -> Iterator[list[dict]]:
        """Yield the records for in-place edits; they are written on exit."""
        with self._lock:
            records = self.load()
            yield records
            self._persist(records)

    def _persist(self, records: list[dict]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(json.dumps(records, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def upsert(records: list[dict], record: dict, key: str = "id") -> None:
    """Replace the record with the same *key*, or append it."""
    for i, raw in enumerate(records):
        if raw[key] == record[key]:
            records[i] = record
            return
    records.append(record)


def parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
