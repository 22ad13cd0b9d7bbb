"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

import pytest

from discform.catalog import Catalog, CatalogRegistry
from discform.core.models import GROUPS_PER_STAGE, RankRecord, Stage, ValueFactor

T0 = datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc)

DISC_ORDER = ("D", "I", "S", "C")
VALUE_ORDER = tuple(f.value for f in ValueFactor)

RecordFactory = Callable[..., list[RankRecord]]


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch) -> None:
    """Keep tests away from the real ~/.config/discform."""
    home = tmp_path_factory.mktemp("discform-home")
    monkeypatch.setenv("DISCFORM_HOME", str(home))
    monkeypatch.delenv("DISCFORM_DATA_DIR", raising=False)


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    """Load the packaged catalog."""
    return CatalogRegistry().get("1.0.0")


@pytest.fixture
def group_records(catalog: Catalog) -> RecordFactory:
    """Build one group submission from a factor order (rank 1 first)."""

    def build(
        stage: Stage,
        group_number: int,
        order: Sequence[str],
        assessment_id: str = "a-1",
        created_at: datetime = T0,
    ) -> list[RankRecord]:
        by_factor = {item.factor: item for item in catalog.items(stage, group_number)}
        return [
            RankRecord(
                assessment_id=assessment_id,
                stage=stage,
                group_number=group_number,
                item_text=by_factor[factor].text,
                item_factor=factor,
                rank=rank,
                created_at=created_at,
            )
            for rank, factor in enumerate(order, 1)
        ]

    return build


@pytest.fixture
def make_records(group_records: RecordFactory) -> RecordFactory:
    """Build a full response set, every group of a stage ranked the same way.

    ``skip`` drops groups given as (stage, group_number).
    """

    def build(
        natural: Sequence[str] = DISC_ORDER,
        adapted: Sequence[str] = DISC_ORDER,
        values: Sequence[str] = VALUE_ORDER,
        assessment_id: str = "a-1",
        skip: Sequence[tuple[Stage, int]] = (),
    ) -> list[RankRecord]:
        records: list[RankRecord] = []
        minute = 0
        for stage, order in (
            (Stage.NATURAL, natural),
            (Stage.ADAPTED, adapted),
            (Stage.VALUES, values),
        ):
            for group_number in range(1, GROUPS_PER_STAGE + 1):
                minute += 1
                if (stage, group_number) in skip:
                    continue
                records.extend(
                    group_records(
                        stage,
                        group_number,
                        order,
                        assessment_id=assessment_id,
                        created_at=T0 + timedelta(minutes=minute),
                    )
                )
        return records

    return build
