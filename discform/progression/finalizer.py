"""At-most-once finalization of a completed assessment.

Finalizing reads every persisted response, scores it, stores the score
vector and marks the assessment completed. A stored vector makes any later
finalize a no-op; a second attempt racing an in-flight one is rejected.
"""

import logging
import threading

from pydantic import BaseModel, ConfigDict

from discform.core.models import AssessmentStatus, utcnow
from discform.core.scores import ScoreVector
from discform.core.stores import ResponseStore, ResultStore, StatusStore
from discform.scoring.engine import ScoringEngine

logger = logging.getLogger(__name__)


class DuplicateFinalizationError(Exception):
    """Raised when an assessment is already being finalized by another caller."""

    def __init__(self, assessment_id: str) -> None:
        self.assessment_id = assessment_id
        super().__init__(f"Assessment {assessment_id} is already being finalized")


class FinalizationOutcome(BaseModel):
    """Result of a finalize call."""

    vector: ScoreVector
    created: bool  # False when a stored vector was returned unchanged

    model_config = ConfigDict(frozen=True)


class AssessmentFinalizer:
    """Scores and stores an assessment once.

    Locks are per assessment id and held for the whole read-score-store
    sequence. An id is only tracked while a finalize or regenerate for it is
    running.
    """

    def __init__(
        self,
        responses: ResponseStore,
        statuses: StatusStore,
        results: ResultStore,
        engine: ScoringEngine | None = None,
    ) -> None:
        self.responses = responses
        self.statuses = statuses
        self.results = results
        self.engine = engine or ScoringEngine()
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def in_flight(self) -> frozenset[str]:
        """Assessment ids currently being finalized or regenerated."""
        with self._locks_guard:
            return frozenset(self._locks)

    def _acquire(self, assessment_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.setdefault(assessment_id, threading.Lock())
            if not lock.acquire(blocking=False):
                raise DuplicateFinalizationError(assessment_id)
            return lock

    def _release(self, assessment_id: str, lock: threading.Lock) -> None:
        # locks are only acquired under the guard
        with self._locks_guard:
            lock.release()
            del self._locks[assessment_id]

    def finalize(self, assessment_id: str) -> FinalizationOutcome:
        """Score and store the assessment unless that already happened.

        Raises:
            DuplicateFinalizationError: If another finalize for the same
                assessment is in flight.
            IncompleteDataError: If the responses are incomplete; nothing is
                stored.
            PersistenceError: If a store fails; safe to retry.
        """
        lock = self._acquire(assessment_id)
        try:
            existing = self.results.get(assessment_id)
            if existing is not None:
                logger.info("Assessment %s already finalized; nothing to do", assessment_id)
                if self.statuses.get_status(assessment_id) is not AssessmentStatus.COMPLETED:
                    self.statuses.set_status(assessment_id, AssessmentStatus.COMPLETED, utcnow())
                return FinalizationOutcome(vector=existing, created=False)

            vector = self._compute(assessment_id)
            self.results.upsert(vector)
            self.statuses.set_status(assessment_id, AssessmentStatus.COMPLETED, utcnow())
            logger.info(
                "Finalized assessment %s: %s, tension %s",
                assessment_id,
                vector.primary_profile,
                vector.tension_level,
            )
            return FinalizationOutcome(vector=vector, created=True)
        finally:
            self._release(assessment_id, lock)

    def regenerate(self, assessment_id: str) -> ScoreVector:
        """Recompute from scratch and replace the stored vector.

        Raises:
            DuplicateFinalizationError: If a finalize or regenerate for the
                same assessment is in flight.
        """
        lock = self._acquire(assessment_id)
        try:
            vector = self._compute(assessment_id)
            self.results.upsert(vector)
            logger.info("Regenerated result for assessment %s", assessment_id)
            return vector
        finally:
            self._release(assessment_id, lock)

    def _compute(self, assessment_id: str) -> ScoreVector:
        records = self.responses.read_all(assessment_id)
        return self.engine.score(records, assessment_id=assessment_id)
