"""File-backed stores under a data directory.

Layout:
    <data_dir>/responses.jsonl     append-only rank record log
    <data_dir>/statuses.json       status and timestamps per assessment
    <data_dir>/results/<id>.json   one score vector per assessment
"""

import json
import logging
import os
import threading
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import NamedTuple

from pydantic import ValidationError

from discform.core.models import AssessmentStatus, RankRecord
from discform.core.scores import ScoreVector
from discform.io import append_jsonl, read_jsonl
from discform.stores.base import PersistenceError

logger = logging.getLogger(__name__)

_TIMESTAMP_KEYS = {
    AssessmentStatus.IN_PROGRESS: "started_at",
    AssessmentStatus.COMPLETED: "completed_at",
}


def _replace_file(path: Path, text: str) -> None:
    """Write text to path through a temporary file, so readers never see half of it."""
    tmp = path.with_name(path.name + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(text)
    os.replace(tmp, path)


def _check_id(assessment_id: str) -> str:
    if not assessment_id or any(sep in assessment_id for sep in ("/", "\\", "..")):
        raise PersistenceError(f"Invalid assessment id: {assessment_id!r}")
    return assessment_id


class JsonlResponseStore:
    """Response log kept as one JSON line per rank record."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, records: Sequence[RankRecord]) -> None:
        rows = [r.model_dump(mode="json") for r in records]
        try:
            with self._lock:
                append_jsonl(self.path, rows)
        except OSError as e:
            raise PersistenceError(f"Failed to append responses to {self.path}: {e}") from e
        logger.debug("Appended %d records to %s", len(rows), self.path)

    def read_all(self, assessment_id: str) -> list[RankRecord]:
        if not self.path.exists():
            return []
        try:
            with self._lock:
                rows = list(read_jsonl(self.path))
            return [
                RankRecord.model_validate(row)
                for row in rows
                if row.get("assessment_id") == assessment_id
            ]
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read responses from {self.path}: {e}") from e


class JsonStatusStore:
    """Assessment statuses kept in a single JSON document."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            return json.load(f)

    def set_status(
        self,
        assessment_id: str,
        status: AssessmentStatus,
        at: datetime,
    ) -> None:
        try:
            with self._lock:
                data = self._load()
                entry = data.setdefault(assessment_id, {})
                entry["status"] = status.value
                entry["updated_at"] = at.isoformat()
                if status in _TIMESTAMP_KEYS:
                    entry[_TIMESTAMP_KEYS[status]] = at.isoformat()
                _replace_file(self.path, json.dumps(data, indent=2, ensure_ascii=False))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to write status to {self.path}: {e}") from e

    def get_status(self, assessment_id: str) -> AssessmentStatus:
        try:
            with self._lock:
                entry = self._load().get(assessment_id)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read status from {self.path}: {e}") from e
        if not entry:
            return AssessmentStatus.PENDING
        return AssessmentStatus(entry["status"])


class JsonResultStore:
    """Score vectors kept as one JSON file per assessment; upsert replaces."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def _path(self, assessment_id: str) -> Path:
        return self.directory / f"{_check_id(assessment_id)}.json"

    def upsert(self, vector: ScoreVector) -> None:
        path = self._path(vector.assessment_id)
        try:
            with self._lock:
                self.directory.mkdir(parents=True, exist_ok=True)
                _replace_file(path, vector.model_dump_json(indent=2))
        except OSError as e:
            raise PersistenceError(f"Failed to write result to {path}: {e}") from e

    def get(self, assessment_id: str) -> ScoreVector | None:
        path = self._path(assessment_id)
        if not path.exists():
            return None
        try:
            with self._lock:
                text = path.read_text(encoding="utf-8")
            return ScoreVector.model_validate_json(text)
        except (OSError, ValidationError) as e:
            raise PersistenceError(f"Failed to read result from {path}: {e}") from e


class FileStores(NamedTuple):
    """The three file-backed stores rooted at one data directory."""

    responses: JsonlResponseStore
    statuses: JsonStatusStore
    results: JsonResultStore

    @classmethod
    def open(cls, data_dir: Path | str) -> "FileStores":
        """Create the data directory if needed and open the stores in it."""
        root = Path(data_dir)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create data directory {root}: {e}") from e
        return cls(
            responses=JsonlResponseStore(root / "responses.jsonl"),
            statuses=JsonStatusStore(root / "statuses.json"),
            results=JsonResultStore(root / "results"),
        )
