"""Tests for the in-memory and file-backed stores."""

import json
from pathlib import Path

import pytest

from conftest import T0
from discform.core.models import AssessmentStatus, Stage
from discform.core.stores import ResponseStore, ResultStore, StatusStore
from discform.io import append_jsonl, read_jsonl, write_jsonl
from discform.scoring import ScoringEngine
from discform.stores import (
    FileStores,
    InMemoryResponseStore,
    InMemoryResultStore,
    InMemoryStatusStore,
    JsonlResponseStore,
    JsonResultStore,
    JsonStatusStore,
    PersistenceError,
)


@pytest.fixture
def vector(catalog, make_records):
    """A score vector for assessment a-1."""
    return ScoringEngine(catalog=catalog).score(make_records())


@pytest.fixture(params=["memory", "files"])
def stores(request, tmp_path: Path):
    """Both store families behind the same three protocols."""
    if request.param == "memory":
        return InMemoryResponseStore(), InMemoryStatusStore(), InMemoryResultStore()
    return tuple(FileStores.open(tmp_path / "data"))


class TestJsonl:
    """Tests for JSONL helpers."""

    def test_write_append_read(self, tmp_path: Path) -> None:
        """Test that appended lines follow written ones."""
        path = tmp_path / "out.jsonl"
        assert write_jsonl(path, [{"a": 1}]) == 1
        assert append_jsonl(path, [{"b": "ÉTICA"}, {"c": None}]) == 2
        assert list(read_jsonl(path)) == [{"a": 1}, {"b": "ÉTICA"}, {"c": None}]

    def test_blank_lines_skipped(self, tmp_path: Path) -> None:
        """Test that empty lines are ignored."""
        path = tmp_path / "in.jsonl"
        path.write_text('{"a": 1}\n\n{"a": 2}\n', encoding="utf-8")
        assert len(list(read_jsonl(path))) == 2

    def test_invalid_line_names_line_number(self, tmp_path: Path) -> None:
        """Test the error for malformed JSON."""
        path = tmp_path / "bad.jsonl"
        path.write_text('{"a": 1}\n{nope\n', encoding="utf-8")
        with pytest.raises(ValueError, match="line 2"):
            list(read_jsonl(path))


class TestStoreProtocols:
    """Behaviour shared by every store implementation."""

    def test_implements_protocols(self, stores) -> None:
        """Test runtime protocol conformance."""
        responses, statuses, results = stores
        assert isinstance(responses, ResponseStore)
        assert isinstance(statuses, StatusStore)
        assert isinstance(results, ResultStore)

    def test_responses_filtered_by_assessment(self, stores, group_records) -> None:
        """Test that read_all returns only the requested assessment."""
        responses, _, _ = stores
        responses.append(group_records(Stage.NATURAL, 1, ("D", "I", "S", "C")))
        responses.append(
            group_records(Stage.NATURAL, 1, ("C", "S", "I", "D"), assessment_id="other")
        )
        records = responses.read_all("a-1")
        assert len(records) == 4
        assert {r.assessment_id for r in records} == {"a-1"}
        assert records[0].created_at == T0

    def test_unknown_assessment_has_no_responses(self, stores) -> None:
        """Test read_all before anything was written."""
        responses, _, _ = stores
        assert responses.read_all("nobody") == []

    def test_status_default_pending(self, stores) -> None:
        """Test the status of an unknown assessment."""
        _, statuses, _ = stores
        assert statuses.get_status("a-1") is AssessmentStatus.PENDING

    def test_status_updates(self, stores) -> None:
        """Test that the last status written wins."""
        _, statuses, _ = stores
        statuses.set_status("a-1", AssessmentStatus.IN_PROGRESS, T0)
        statuses.set_status("a-1", AssessmentStatus.COMPLETED, T0)
        assert statuses.get_status("a-1") is AssessmentStatus.COMPLETED

    def test_result_upsert_replaces(self, stores, vector) -> None:
        """Test that a second upsert replaces the first."""
        _, _, results = stores
        assert results.get("a-1") is None
        results.upsert(vector)
        replacement = vector.model_copy(update={"total_tension": 99})
        results.upsert(replacement)
        assert results.get("a-1") == replacement


class TestInMemoryStores:
    """Tests specific to the in-memory stores."""

    def test_write_counter(self, vector) -> None:
        """Test that every upsert is counted."""
        results = InMemoryResultStore()
        results.upsert(vector)
        results.upsert(vector)
        assert results.writes == 2
        assert results.all() == [vector]

    def test_status_history(self) -> None:
        """Test that transitions are recorded in order."""
        statuses = InMemoryStatusStore()
        statuses.set_status("a-1", AssessmentStatus.IN_PROGRESS, T0)
        statuses.set_status("a-1", AssessmentStatus.COMPLETED, T0)
        assert [s for _, s, _ in statuses.history] == [
            AssessmentStatus.IN_PROGRESS,
            AssessmentStatus.COMPLETED,
        ]


class TestFileStores:
    """Tests specific to the file-backed stores."""

    def test_open_creates_layout(self, tmp_path: Path) -> None:
        """Test the data directory layout."""
        stores = FileStores.open(tmp_path / "data")
        assert (tmp_path / "data").is_dir()
        assert stores.responses.path == tmp_path / "data" / "responses.jsonl"
        assert stores.results.directory == tmp_path / "data" / "results"

    def test_responses_are_jsonl(self, tmp_path: Path, group_records) -> None:
        """Test that each record is one JSON line."""
        store = JsonlResponseStore(tmp_path / "responses.jsonl")
        store.append(group_records(Stage.VALUES, 1, (
            "theoretical", "economic", "aesthetic", "social", "political", "spiritual",
        )))
        lines = (tmp_path / "responses.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 6
        assert json.loads(lines[0])["stage"] == "values"

    def test_status_timestamps(self, tmp_path: Path) -> None:
        """Test that start and completion times are kept."""
        store = JsonStatusStore(tmp_path / "statuses.json")
        store.set_status("a-1", AssessmentStatus.IN_PROGRESS, T0)
        store.set_status("a-1", AssessmentStatus.COMPLETED, T0)
        entry = json.loads((tmp_path / "statuses.json").read_text(encoding="utf-8"))["a-1"]
        assert entry["status"] == "completed"
        assert entry["started_at"] == T0.isoformat()
        assert entry["completed_at"] == T0.isoformat()

    def test_result_file_per_assessment(self, tmp_path: Path, vector) -> None:
        """Test one JSON document per assessment."""
        store = JsonResultStore(tmp_path / "results")
        store.upsert(vector)
        assert (tmp_path / "results" / "a-1.json").exists()
        assert not (tmp_path / "results" / "a-1.json.tmp").exists()

    def test_path_traversal_rejected(self, tmp_path: Path) -> None:
        """Test that assessment ids cannot escape the results directory."""
        store = JsonResultStore(tmp_path / "results")
        with pytest.raises(PersistenceError, match="Invalid assessment id"):
            store.get("../secrets")

    def test_corrupt_response_log(self, tmp_path: Path) -> None:
        """Test that an unreadable log surfaces as PersistenceError."""
        path = tmp_path / "responses.jsonl"
        path.write_text("{broken\n", encoding="utf-8")
        with pytest.raises(PersistenceError):
            JsonlResponseStore(path).read_all("a-1")

    def test_corrupt_result(self, tmp_path: Path) -> None:
        """Test that an unreadable result surfaces as PersistenceError."""
        (tmp_path / "a-1.json").write_text("{}", encoding="utf-8")
        with pytest.raises(PersistenceError):
            JsonResultStore(tmp_path).get("a-1")

    def test_unwritable_directory(self, tmp_path: Path) -> None:
        """Test that a file in place of the data directory is reported."""
        blocker = tmp_path / "data"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(PersistenceError, match="Cannot create"):
            FileStores.open(blocker)
