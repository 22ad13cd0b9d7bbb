"""Store protocols.

The progression controller and finalizer talk to persistence only through
these narrow contracts. Implementations raise
``discform.stores.base.PersistenceError`` on any failure.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from discform.core.models import AssessmentStatus, RankRecord
from discform.core.scores import ScoreVector


@runtime_checkable
class ResponseStore(Protocol):
    """Append-only log of rank records."""

    def append(self, records: Sequence[RankRecord]) -> None:
        """Persist all records of one group submission, or none of them."""
        ...

    def read_all(self, assessment_id: str) -> list[RankRecord]:
        """Return every record ever appended for the assessment, in any order."""
        ...


@runtime_checkable
class StatusStore(Protocol):
    """Assessment lifecycle status."""

    def set_status(
        self,
        assessment_id: str,
        status: AssessmentStatus,
        at: datetime,
    ) -> None:
        """Record a status transition and its timestamp."""
        ...

    def get_status(self, assessment_id: str) -> AssessmentStatus:
        """Current status; PENDING when nothing was recorded."""
        ...


@runtime_checkable
class ResultStore(Protocol):
    """One score vector per assessment, replaced on upsert."""

    def upsert(self, vector: ScoreVector) -> None:
        """Store the vector, replacing any previous one for the same assessment."""
        ...

    def get(self, assessment_id: str) -> ScoreVector | None:
        """Stored vector, or None."""
        ...
