"""Session object for an in-flight questionnaire."""

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discform.core.models import GROUPS_PER_STAGE, Stage, utcnow

STAGE_ORDER: tuple[Stage, ...] = (Stage.NATURAL, Stage.ADAPTED, Stage.VALUES)


class AssessmentProgress(BaseModel):
    """Where a candidate is in the questionnaire.

    Immutable: transitions return a new session. Once ``completed`` is set
    the session only serves to (re)trigger finalization. ``started_at`` is
    carried unchanged through every transition.
    """

    assessment_id: str
    stage: Stage = Stage.NATURAL
    current_group: int = Field(default=1, ge=1, le=GROUPS_PER_STAGE)
    completed: bool = False
    started_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True)

    @field_validator("started_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def position(self) -> str:
        """``stage.group`` label, or ``completed``."""
        if self.completed:
            return "completed"
        return f"{self.stage.value}.{self.current_group}"

    @property
    def stage_number(self) -> int:
        return STAGE_ORDER.index(self.stage) + 1

    @property
    def percent(self) -> float:
        """Progress through the current stage, 0-100."""
        if self.completed:
            return 100.0
        return (self.current_group - 1) / GROUPS_PER_STAGE * 100

    @property
    def elapsed(self) -> timedelta:
        """Time since the session started."""
        return utcnow() - self.started_at

    def advance(self) -> "AssessmentProgress":
        """Session after the current group was submitted."""
        if self.completed:
            raise ValueError("Session is already completed")
        if self.current_group < GROUPS_PER_STAGE:
            return self.model_copy(update={"current_group": self.current_group + 1})
        if self.stage is Stage.VALUES:
            return self.model_copy(update={"completed": True})
        next_stage = STAGE_ORDER[STAGE_ORDER.index(self.stage) + 1]
        return self.model_copy(update={"stage": next_stage, "current_group": 1})

    def previous(self) -> "AssessmentProgress | None":
        """Session one group back, or None from the first group of the first stage."""
        if self.completed:
            return None
        if self.current_group > 1:
            return self.model_copy(update={"current_group": self.current_group - 1})
        if self.stage is Stage.NATURAL:
            return None
        prior_stage = STAGE_ORDER[STAGE_ORDER.index(self.stage) - 1]
        return self.model_copy(
            update={"stage": prior_stage, "current_group": GROUPS_PER_STAGE}
        )
