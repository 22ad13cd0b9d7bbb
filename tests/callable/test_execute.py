"""Tests for the execute() interface."""

from datetime import timedelta

import pytest

from conftest import T0
from discform import execute
from discform.core.models import Stage
from discform.scoring import IncompleteDataError


@pytest.fixture
def items(make_records) -> list[dict]:
    """A complete response set as JSON-ready dicts."""
    return [r.model_dump(mode="json") for r in make_records()]


class TestExecuteInterface:
    """Tests for execute() function interface."""

    def test_returns_score_vector(self, items: list[dict]) -> None:
        """Test that execute returns one serialized vector."""
        result = execute({"assessment_id": "a-1", "items": items})

        assert result["schema_version"] == "1.0"
        assert result["assessment_id"] == "a-1"
        assert len(result["items"]) == 1
        vector = result["items"][0]
        assert vector["natural"] == {"D": 40, "I": 30, "S": 20, "C": 10}
        assert vector["primary_profile"] == "Diretor"

    def test_stats(self, items: list[dict]) -> None:
        """Test input and output counts."""
        result = execute({"assessment_id": "a-1", "items": items})
        assert result["stats"] == {"input": 140, "output": 1, "skipped": 0, "errors": 0}

    def test_superseded_records_skipped(self, items: list[dict], group_records) -> None:
        """Test that an earlier attempt at a revisited group is counted as skipped."""
        redo = group_records(
            Stage.VALUES,
            2,
            ("spiritual", "political", "social", "aesthetic", "economic", "theoretical"),
            created_at=T0 + timedelta(days=1),
        )
        items += [r.model_dump(mode="json") for r in redo]
        result = execute({"assessment_id": "a-1", "items": items})
        assert result["stats"]["input"] == 146
        assert result["stats"]["skipped"] == 6

    def test_policy_overrides(self, items: list[dict]) -> None:
        """Test that scoring overrides reach the engine."""
        result = execute({
            "assessment_id": "a-1",
            "items": items,
            "config": {"scoring": {"secondary_profile_min": 31}},
        })
        assert result["items"][0]["secondary_profile"] is None

    def test_catalog_version(self, items: list[dict]) -> None:
        """Test selecting the catalog explicitly."""
        result = execute({
            "assessment_id": "a-1",
            "items": items,
            "config": {"catalog_version": "1.0.0"},
        })
        assert result["items"][0]["catalog_version"] == "1.0.0"

    def test_missing_assessment_id(self, items: list[dict]) -> None:
        """Test that assessment_id is required."""
        with pytest.raises(ValueError, match="assessment_id"):
            execute({"items": items})

    def test_missing_items(self) -> None:
        """Test that items is required."""
        with pytest.raises(ValueError, match="'items' is required"):
            execute({"assessment_id": "a-1"})

    def test_items_must_be_list(self) -> None:
        """Test that items is a list of records."""
        with pytest.raises(ValueError, match="must be a list"):
            execute({"assessment_id": "a-1", "items": {"rank": 1}})

    def test_incomplete_propagates(self, items: list[dict]) -> None:
        """Test that partial response sets are not scored."""
        with pytest.raises(IncompleteDataError):
            execute({"assessment_id": "a-1", "items": items[:-6]})

    def test_malformed_record(self, items: list[dict]) -> None:
        """Test that a record outside its stage's domain is rejected."""
        items[0]["rank"] = 9
        with pytest.raises(ValueError):
            execute({"assessment_id": "a-1", "items": items})
