"""In-memory stores.

Thread-safe implementations of the store protocols, used by tests and by
callers that persist elsewhere after scoring.
"""

import logging
import threading
from collections.abc import Sequence
from datetime import datetime

from discform.core.models import AssessmentStatus, RankRecord
from discform.core.scores import ScoreVector

logger = logging.getLogger(__name__)


class InMemoryResponseStore:
    """Append-only response log held in a list."""

    def __init__(self) -> None:
        self._records: list[RankRecord] = []
        self._lock = threading.Lock()

    def append(self, records: Sequence[RankRecord]) -> None:
        with self._lock:
            self._records.extend(records)
        logger.debug("Appended %d records", len(records))

    def read_all(self, assessment_id: str) -> list[RankRecord]:
        with self._lock:
            return [r for r in self._records if r.assessment_id == assessment_id]


class InMemoryStatusStore:
    """Status per assessment, with the full transition history."""

    def __init__(self) -> None:
        self._status: dict[str, AssessmentStatus] = {}
        self.history: list[tuple[str, AssessmentStatus, datetime]] = []
        self._lock = threading.Lock()

    def set_status(
        self,
        assessment_id: str,
        status: AssessmentStatus,
        at: datetime,
    ) -> None:
        with self._lock:
            self._status[assessment_id] = status
            self.history.append((assessment_id, status, at))

    def get_status(self, assessment_id: str) -> AssessmentStatus:
        with self._lock:
            return self._status.get(assessment_id, AssessmentStatus.PENDING)


class InMemoryResultStore:
    """One score vector per assessment; upsert replaces.

    Attributes:
        writes: Number of upserts performed, across all assessments.
    """

    def __init__(self) -> None:
        self._results: dict[str, ScoreVector] = {}
        self.writes = 0
        self._lock = threading.Lock()

    def upsert(self, vector: ScoreVector) -> None:
        with self._lock:
            self._results[vector.assessment_id] = vector
            self.writes += 1

    def get(self, assessment_id: str) -> ScoreVector | None:
        with self._lock:
            return self._results.get(assessment_id)

    def all(self) -> list[ScoreVector]:
        with self._lock:
            return list(self._results.values())
