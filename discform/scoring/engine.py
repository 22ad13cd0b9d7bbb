"""Scoring engine for turning rank records into a score vector.

The engine is pure: it reads nothing and writes nothing. Persistence of
the result belongs to the caller.
"""

from collections.abc import Iterable

from discform.catalog.models import Catalog
from discform.catalog.registry import get_default_catalog
from discform.config import ScoringPolicy
from discform.core.models import DiscFactor, RankRecord, Stage, ValueFactor
from discform.core.scores import DiscScores, ScoreVector, ValuesScores
from discform.interpretation import (
    classify_profile,
    competencies,
    jung_type,
    leadership_style,
    sales_insights,
    tension,
)
from discform.scoring.methods import sum_points
from discform.validation.checks import (
    CompletenessResult,
    CompletenessValidator,
    GroupKey,
    group_submissions,
)


class ScoringError(Exception):
    """Raised when scoring fails."""

    pass


class IncompleteDataError(ScoringError):
    """Raised when a response set is missing groups or item ranks.

    Partial response sets are never scored.
    """

    def __init__(self, result: CompletenessResult) -> None:
        self.result = result
        summary = "; ".join(result.errors[:5])
        more = len(result.errors) - 5
        if more > 0:
            summary += f"; and {more} more"
        super().__init__(f"Incomplete responses: {summary}")


class ScoringEngine:
    """Computes the complete score vector for one assessment.

    Records for a stage are grouped per (stage, group); only the latest
    submission of each group counts. Every group of every stage must be
    fully ranked before anything is scored.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        policy: ScoringPolicy | None = None,
    ) -> None:
        self.catalog = catalog or get_default_catalog()
        self.policy = policy or ScoringPolicy()
        self.validator = CompletenessValidator(self.catalog)

    def score(
        self,
        records: Iterable[RankRecord],
        assessment_id: str | None = None,
    ) -> ScoreVector:
        """Score a full response set.

        Args:
            records: Every rank record of the assessment, in any order.
            assessment_id: Expected assessment; inferred from the records
                when omitted.

        Returns:
            The ScoreVector.

        Raises:
            IncompleteDataError: If any group of any stage is missing, not
                fully ranked, or disagrees with the catalog.
            ScoringError: If records belong to another assessment, or there
                are no records and no assessment_id.
        """
        records = list(records)
        assessment_id = self._resolve_assessment(records, assessment_id)

        submissions = group_submissions(records)
        completeness = self.validator.validate(submissions)
        if not completeness.valid:
            raise IncompleteDataError(completeness)

        natural = self.disc_scores(submissions, Stage.NATURAL)
        adapted = self.disc_scores(submissions, Stage.ADAPTED)
        values = self.values_scores(submissions)

        stress = tension(natural, adapted, self.policy)
        profile = classify_profile(natural, self.catalog, self.policy)

        return ScoreVector(
            assessment_id=assessment_id,
            catalog_version=self.catalog.version,
            natural=natural,
            adapted=adapted,
            values=values,
            tension_delta=stress.delta,
            total_tension=stress.total,
            tension_level=stress.level,
            primary_profile=profile.primary_profile,
            secondary_profile=profile.secondary_profile,
            profile_description=profile.description,
            jung_type=jung_type(natural, self.policy),
            leadership_style=leadership_style(natural),
            competencies=competencies(natural, adapted),
            sales_insights=sales_insights(natural, self.policy),
        )

    def disc_scores(
        self,
        submissions: dict[GroupKey, list[RankRecord]],
        stage: Stage,
    ) -> DiscScores:
        """Sum DISC points for the natural or adapted stage."""
        sums = sum_points(_stage_records(submissions, stage), [f.value for f in DiscFactor])
        return DiscScores(**sums)

    def values_scores(self, submissions: dict[GroupKey, list[RankRecord]]) -> ValuesScores:
        """Sum value points for the values stage."""
        sums = sum_points(
            _stage_records(submissions, Stage.VALUES), [f.value for f in ValueFactor]
        )
        return ValuesScores(**sums)

    def _resolve_assessment(
        self,
        records: list[RankRecord],
        assessment_id: str | None,
    ) -> str:
        ids = {r.assessment_id for r in records}
        if assessment_id is not None:
            ids.discard(assessment_id)
            if ids:
                raise ScoringError(
                    f"Records for other assessments passed when scoring {assessment_id}: "
                    f"{', '.join(sorted(ids))}"
                )
            return assessment_id
        if len(ids) == 1:
            return ids.pop()
        if not ids:
            raise ScoringError("No responses to score")
        raise ScoringError(f"Records span several assessments: {', '.join(sorted(ids))}")


def _stage_records(
    submissions: dict[GroupKey, list[RankRecord]],
    stage: Stage,
) -> list[RankRecord]:
    return [
        record
        for (record_stage, _), group_records in submissions.items()
        if record_stage == stage
        for record in group_records
    ]
