"""Stage and group progression through the questionnaire.

Natural 1..10, then Adapted 1..10, then Values 1..10, then completed.
The controller holds no session state of its own: every call takes an
AssessmentProgress and returns the next one.
"""

import logging
import time

from discform.catalog.models import Catalog
from discform.catalog.registry import get_default_catalog
from discform.config import ScoringPolicy
from discform.core.models import AssessmentStatus, RankRecord, utcnow
from discform.core.stores import ResponseStore, StatusStore
from discform.progression.finalizer import (
    AssessmentFinalizer,
    DuplicateFinalizationError,
    FinalizationOutcome,
)
from discform.progression.session import AssessmentProgress
from discform.ranking.selector import RankSelector, RankValidationError
from discform.scoring.engine import ScoringError
from discform.stores.base import PersistenceError

logger = logging.getLogger(__name__)


class NavigationError(Exception):
    """Raised for a transition the state machine does not allow."""

    pass


class FinalizationError(Exception):
    """Raised when finalization still fails after the configured retries.

    All responses are persisted and ``progress`` is the completed session;
    pass it to ``ProgressionController.finalize`` to retry.
    """

    def __init__(self, progress: AssessmentProgress, cause: Exception) -> None:
        self.progress = progress
        self.cause = cause
        super().__init__(
            f"Could not finalize assessment {progress.assessment_id}: {cause}"
        )


class ProgressionController:
    """Walks a candidate through the three stages, one group at a time."""

    def __init__(
        self,
        responses: ResponseStore,
        statuses: StatusStore,
        finalizer: AssessmentFinalizer,
        catalog: Catalog | None = None,
        policy: ScoringPolicy | None = None,
    ) -> None:
        self.responses = responses
        self.statuses = statuses
        self.finalizer = finalizer
        self.catalog = catalog or get_default_catalog()
        self.policy = policy or ScoringPolicy()

    def start(self, assessment_id: str) -> AssessmentProgress:
        """Open a session at natural.1.

        The assessment is marked in progress only on its first start.
        """
        if self.statuses.get_status(assessment_id) is AssessmentStatus.PENDING:
            self.statuses.set_status(assessment_id, AssessmentStatus.IN_PROGRESS, utcnow())
        logger.info("Started assessment %s", assessment_id)
        return AssessmentProgress(assessment_id=assessment_id)

    def resume(self, assessment_id: str) -> AssessmentProgress:
        """Reopen a session after the last persisted group.

        Starts a new session when nothing was persisted yet. The returned
        session may already be completed, in which case only
        ``finalize`` applies. The session clock runs from the first
        persisted submission.
        """
        records = self.responses.read_all(assessment_id)
        if not records:
            return self.start(assessment_id)

        # ties go to the record appended last
        last = max(reversed(records), key=lambda r: r.created_at)
        progress = AssessmentProgress(
            assessment_id=assessment_id,
            stage=last.stage,
            current_group=last.group_number,
            started_at=min(r.created_at for r in records),
        ).advance()
        logger.info("Resumed assessment %s at %s", assessment_id, progress.position)
        return progress

    def selector(self, progress: AssessmentProgress) -> RankSelector:
        """A fresh selector for the current group, seeded from the catalog."""
        self._require_open(progress)
        items = self.catalog.items(progress.stage, progress.current_group)
        return RankSelector(items, progress.stage.max_rank)

    def submit(
        self,
        progress: AssessmentProgress,
        selector: RankSelector,
    ) -> AssessmentProgress:
        """Persist the current group's ranking and advance.

        Submitting the last Values group completes the session and runs
        finalization.

        Raises:
            RankValidationError: If the ranking is incomplete or the selector
                belongs to another group.
            PersistenceError: If the records could not be stored. ``progress``
                is still current; resubmit.
            FinalizationError: If scoring or storing the result failed after
                retries. Responses are safe; retry with ``finalize``.
        """
        self._require_open(progress)
        group = self.catalog.group(progress.stage, progress.current_group)
        if selector.items != group.items:
            raise RankValidationError(
                f"Selector does not hold the items of group {progress.position}"
            )

        ranking = selector.submit()
        created_at = utcnow()
        records = [
            RankRecord(
                assessment_id=progress.assessment_id,
                stage=progress.stage,
                group_number=progress.current_group,
                item_text=text,
                item_factor=group.get_item(text).factor,
                rank=rank,
                created_at=created_at,
            )
            for text, rank in ranking.items()
        ]

        try:
            self.responses.append(records)
        except PersistenceError:
            logger.warning(
                "Could not save group %s of assessment %s",
                progress.position,
                progress.assessment_id,
            )
            raise

        next_progress = progress.advance()
        logger.info(
            "Assessment %s: %s -> %s",
            progress.assessment_id,
            progress.position,
            next_progress.position,
        )

        if next_progress.completed:
            self._finalize_with_retries(next_progress)
        return next_progress

    def back(self, progress: AssessmentProgress) -> AssessmentProgress:
        """Step back one group. Persisted responses are kept.

        Raises:
            NavigationError: From natural.1 or from a completed session.
        """
        previous = progress.previous()
        if previous is None:
            raise NavigationError(f"Cannot go back from {progress.position}")
        return previous

    def finalize(self, progress: AssessmentProgress) -> FinalizationOutcome | None:
        """Finalize a completed session. Safe to call repeatedly.

        Returns:
            The outcome, or None when another finalize is already running.
        """
        if not progress.completed:
            raise NavigationError(
                f"Assessment {progress.assessment_id} is at {progress.position}, not completed"
            )
        try:
            return self.finalizer.finalize(progress.assessment_id)
        except DuplicateFinalizationError:
            logger.info(
                "Finalization of %s already in flight; ignoring duplicate",
                progress.assessment_id,
            )
            return None

    def _finalize_with_retries(self, progress: AssessmentProgress) -> None:
        attempts = self.policy.finalize_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self.finalize(progress)
                return
            except PersistenceError as e:
                logger.warning(
                    "Finalization attempt %d/%d for %s failed: %s",
                    attempt,
                    attempts,
                    progress.assessment_id,
                    e,
                )
                last_error = e
            except ScoringError as e:
                raise FinalizationError(progress, e) from e
            if attempt < attempts:
                time.sleep(self.policy.finalize_retry_delay)
        raise FinalizationError(progress, last_error) from last_error

    def _require_open(self, progress: AssessmentProgress) -> None:
        if progress.completed:
            raise NavigationError(f"Assessment {progress.assessment_id} is completed")
