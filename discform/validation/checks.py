"""Completeness checks for rank records.

A stage can only be scored when every one of its groups has a full
ranking: ranks 1..max_rank, each exactly once, on distinct items.
"""

from collections.abc import Iterable

from pydantic import BaseModel

from discform.catalog.models import Catalog
from discform.core.models import GROUPS_PER_STAGE, RankRecord, Stage

GroupKey = tuple[Stage, int]


def group_key_label(key: GroupKey) -> str:
    """Format a group key as ``stage.group`` (e.g. ``natural.3``)."""
    stage, group_number = key
    return f"{stage.value}.{group_number}"


def group_submissions(records: Iterable[RankRecord]) -> dict[GroupKey, list[RankRecord]]:
    """Select the latest submission of every group.

    A revisited group is appended again rather than overwritten, so a group
    may hold several submissions; the one with the greatest ``created_at``
    replaces the earlier ones.

    Returns:
        Mapping of (stage, group_number) to that submission's records,
        sorted by rank.
    """
    by_submission: dict[GroupKey, dict] = {}
    for record in records:
        key = (record.stage, record.group_number)
        by_submission.setdefault(key, {}).setdefault(record.created_at, []).append(record)

    latest: dict[GroupKey, list[RankRecord]] = {}
    for key, submissions in by_submission.items():
        newest = max(submissions)
        latest[key] = sorted(submissions[newest], key=lambda r: (r.rank, r.item_text))
    return latest


class CompletenessResult(BaseModel):
    """Result of checking a response set for scoring."""

    valid: bool
    completeness: float  # 0.0 to 1.0, fraction of complete groups
    missing_groups: list[str]
    invalid_groups: list[str]
    errors: list[str]

    @property
    def has_errors(self) -> bool:
        """Whether there are any validation errors."""
        return len(self.errors) > 0


class CompletenessValidator:
    """Validates that every group of the requested stages is fully ranked.

    Checks:
    1. Presence: every group 1..10 of each stage has a submission
    2. Permutation: ranks are exactly 1..max_rank, no duplicates or gaps
    3. Distinct items: no item text is ranked twice in a group
    4. Catalog match: the group ranks exactly the catalog's items, each
       tagged with the catalog's factor (only when a catalog is given)
    """

    def __init__(self, catalog: Catalog | None = None) -> None:
        self.catalog = catalog

    def validate(
        self,
        submissions: dict[GroupKey, list[RankRecord]],
        stages: Iterable[Stage] = tuple(Stage),
    ) -> CompletenessResult:
        """Validate grouped submissions.

        Args:
            submissions: Output of ``group_submissions``.
            stages: Stages that must be complete.

        Returns:
            CompletenessResult with status and details.
        """
        errors: list[str] = []
        missing_groups: list[str] = []
        invalid_groups: list[str] = []
        expected = 0

        for stage in stages:
            for group_number in range(1, GROUPS_PER_STAGE + 1):
                expected += 1
                key = (stage, group_number)
                label = group_key_label(key)
                records = submissions.get(key)

                if not records:
                    missing_groups.append(label)
                    errors.append(f"Group {label} has no responses")
                    continue

                problem = self._check_group(stage, group_number, records)
                if problem:
                    invalid_groups.append(label)
                    errors.append(f"Group {label}: {problem}")

        complete = expected - len(missing_groups) - len(invalid_groups)
        completeness = complete / expected if expected > 0 else 1.0

        return CompletenessResult(
            valid=len(errors) == 0,
            completeness=completeness,
            missing_groups=missing_groups,
            invalid_groups=invalid_groups,
            errors=errors,
        )

    def _check_group(
        self,
        stage: Stage,
        group_number: int,
        records: list[RankRecord],
    ) -> str | None:
        """Return a description of what is wrong with a group, if anything."""
        ranks = sorted(r.rank for r in records)
        expected_ranks = list(range(1, stage.max_rank + 1))
        if ranks != expected_ranks:
            return f"ranks {ranks} are not a permutation of 1..{stage.max_rank}"

        texts = [r.item_text for r in records]
        if len(set(texts)) != len(texts):
            return "an item was ranked more than once"

        if self.catalog is None:
            return None

        group = self.catalog.group(stage, group_number)
        for record in records:
            item = group.get_item(record.item_text)
            if item is None:
                return f"item {record.item_text!r} is not in the catalog group"
            if item.factor != record.item_factor:
                return (
                    f"item {record.item_text!r} is tagged {record.item_factor}, "
                    f"catalog says {item.factor}"
                )
        return None
