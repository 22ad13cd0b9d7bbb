"""Score models produced by the scoring engine."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from discform.core.models import DiscFactor, ValueFactor

DISC_MAX = 40
VALUES_MAX = 60

TensionLevel = Literal["low", "moderate", "high"]


class DiscScores(BaseModel):
    """Raw DISC sums, each 0-40 (10 groups x at most 4 points)."""

    D: int = Field(ge=0, le=DISC_MAX)
    I: int = Field(ge=0, le=DISC_MAX)  # noqa: E741
    S: int = Field(ge=0, le=DISC_MAX)
    C: int = Field(ge=0, le=DISC_MAX)

    model_config = ConfigDict(frozen=True)

    def get(self, factor: DiscFactor | str) -> int:
        return getattr(self, DiscFactor(factor).value)

    def ranked(self) -> list[tuple[DiscFactor, int]]:
        """Factors by descending score; ties keep D, I, S, C precedence."""
        pairs = [(factor, self.get(factor)) for factor in DiscFactor]
        return sorted(pairs, key=lambda pair: -pair[1])


class ValuesScores(BaseModel):
    """Raw motivational value sums, each 0-60 (10 groups x at most 6 points)."""

    theoretical: int = Field(ge=0, le=VALUES_MAX)
    economic: int = Field(ge=0, le=VALUES_MAX)
    aesthetic: int = Field(ge=0, le=VALUES_MAX)
    social: int = Field(ge=0, le=VALUES_MAX)
    political: int = Field(ge=0, le=VALUES_MAX)
    spiritual: int = Field(ge=0, le=VALUES_MAX)

    model_config = ConfigDict(frozen=True)

    def get(self, factor: ValueFactor | str) -> int:
        return getattr(self, ValueFactor(factor).value)


class Tension(BaseModel):
    """Distance between the natural and adapted DISC vectors."""

    delta: DiscScores
    total: int
    level: TensionLevel

    model_config = ConfigDict(frozen=True)


class ProfileClassification(BaseModel):
    """Primary and optional secondary DISC profile."""

    primary_factor: DiscFactor
    primary_profile: str
    secondary_factor: DiscFactor | None = None
    secondary_profile: str | None = None
    description: str

    model_config = ConfigDict(frozen=True)


class JungType(BaseModel):
    """Four-letter type code and the composites it was derived from."""

    type: str = Field(min_length=4, max_length=4)
    extroversion: int
    introversion: int
    intuition: int
    sensation: int
    thinking: int
    feeling: int

    model_config = ConfigDict(frozen=True)


class LeadershipStyle(BaseModel):
    executive: int
    motivator: int
    systematic: int
    methodical: int

    model_config = ConfigDict(frozen=True)


class SalesInsights(BaseModel):
    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]
    ideal_customer: str
    sales_approach: str

    model_config = ConfigDict(frozen=True)


class ScoreVector(BaseModel):
    """Complete, immutable scoring result for one assessment.

    Regeneration produces a new vector from scratch; it is never updated
    in place.
    """

    assessment_id: str
    catalog_version: str
    natural: DiscScores
    adapted: DiscScores
    values: ValuesScores
    tension_delta: DiscScores
    total_tension: int
    tension_level: TensionLevel
    primary_profile: str
    secondary_profile: str | None = None
    profile_description: str
    jung_type: JungType
    leadership_style: LeadershipStyle
    competencies: dict[str, int]
    sales_insights: SalesInsights

    model_config = ConfigDict(frozen=True)

    def to_row(self) -> dict[str, Any]:
        """Flatten into a result-table row.

        DISC columns are flat; derived documents stay nested.
        """
        row: dict[str, Any] = {"assessment_id": self.assessment_id}
        for prefix, scores in (("natural", self.natural), ("adapted", self.adapted)):
            for factor in DiscFactor:
                row[f"{prefix}_{factor.value.lower()}"] = scores.get(factor)
        row.update(
            {
                "primary_profile": self.primary_profile,
                "secondary_profile": self.secondary_profile,
                "tension_level": self.tension_level,
                "values_scores": self.values.model_dump(),
                "jung_type": self.jung_type.model_dump(),
                "leadership_style": self.leadership_style.model_dump(),
                "sales_insights": self.sales_insights.model_dump(mode="json"),
                "competencies": dict(self.competencies),
            }
        )
        return row
