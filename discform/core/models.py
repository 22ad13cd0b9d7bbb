"""Core records shared by every stage of the questionnaire.

Stages, factor domains and the persisted RankRecord. These are the only
types that cross the boundary to the external response store.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

GROUPS_PER_STAGE = 10


class Stage(str, Enum):
    """Questionnaire stage, in traversal order."""

    NATURAL = "natural"
    ADAPTED = "adapted"
    VALUES = "values"

    @property
    def is_disc(self) -> bool:
        """Whether items in this stage are tagged with DISC factors."""
        return self is not Stage.VALUES

    @property
    def max_rank(self) -> int:
        """Number of items ranked per group (4 adjectives or 6 phrases)."""
        return 4 if self.is_disc else 6

    @property
    def factors(self) -> tuple[str, ...]:
        """Factor domain for items of this stage."""
        if self.is_disc:
            return tuple(f.value for f in DiscFactor)
        return tuple(f.value for f in ValueFactor)


class DiscFactor(str, Enum):
    """DISC factors. Declaration order is the tie-break precedence."""

    D = "D"
    I = "I"  # noqa: E741
    S = "S"
    C = "C"


class ValueFactor(str, Enum):
    """Motivational values ranked in the third stage."""

    THEORETICAL = "theoretical"
    ECONOMIC = "economic"
    AESTHETIC = "aesthetic"
    SOCIAL = "social"
    POLITICAL = "political"
    SPIRITUAL = "spiritual"


class AssessmentStatus(str, Enum):
    """Lifecycle status kept by the external assessment store."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def utcnow() -> datetime:
    """Current UTC time."""
    return datetime.now(timezone.utc)


class RankRecord(BaseModel):
    """Persisted outcome of ranking one item in one completed group.

    All records written by a single group submission share ``created_at``;
    it is what distinguishes a revisited group's fresh attempt from the
    earlier one.
    """

    assessment_id: str
    stage: Stage
    group_number: int = Field(ge=1, le=GROUPS_PER_STAGE)
    item_text: str
    item_factor: str
    rank: int = Field(ge=1)
    created_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC so submissions stay comparable."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def check_stage_domain(self) -> "RankRecord":
        """Reject factors and ranks outside the stage's domain."""
        if self.item_factor not in self.stage.factors:
            raise ValueError(
                f"Factor {self.item_factor!r} is not valid for stage {self.stage.value}"
            )
        if self.rank > self.stage.max_rank:
            raise ValueError(
                f"Rank {self.rank} exceeds max rank {self.stage.max_rank} "
                f"for stage {self.stage.value}"
            )
        return self
