"""Tests for JsonRunStateStore."""

from pathlib import Path

import pytest

from skill_duel.evaluation.domain.errors import StateStoreError
from skill_duel.evaluation.domain.run_state import RunPhase, RunProgress, RunState
from skill_duel.evaluation.infrastructure.state_store import JsonRunStateStore
from tests.evaluation.factories import generated_item, judged_item


class TestJsonRunStateStore:
    def test_missing_file_means_no_prior_run(self, tmp_path: Path) -> None:
        store = JsonRunStateStore(path=tmp_path / "duel.json")

        assert store.load() is None

    def test_saved_state_loads_back_equal(self, tmp_path: Path) -> None:
        store = JsonRunStateStore(path=tmp_path / "duel.json")
        state = RunState(
            evaluations=[judged_item(1, "tie"), generated_item(2)],
            phase=RunPhase.COMPLETE,
            progress=RunProgress(current=1, total=1, phase="judging"),
        )

        store.save(state)

        assert store.load() == state

    def test_save_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "state" / "duel.json"
        store = JsonRunStateStore(path=path)

        store.save(RunState())

        assert path.exists()
        assert not path.with_name("duel.json.tmp").exists()

    def test_save_overwrites_previous_document(self, tmp_path: Path) -> None:
        store = JsonRunStateStore(path=tmp_path / "duel.json")
        store.save(RunState(evaluations=[generated_item(1)]))

        store.save(RunState(error="second"))

        loaded = store.load()
        assert loaded is not None
        assert loaded.evaluations == []
        assert loaded.error == "second"

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "duel.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonRunStateStore(path=path)

        with pytest.raises(StateStoreError, match="not a valid run state"):
            store.load()

    def test_clear_removes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "duel.json"
        store = JsonRunStateStore(path=path)
        store.save(RunState())

        store.clear()

        assert not path.exists()
        assert store.load() is None

    def test_clear_without_file_is_a_no_op(self, tmp_path: Path) -> None:
        store = JsonRunStateStore(path=tmp_path / "duel.json")

        store.clear()

        assert store.path == tmp_path / "duel.json"
