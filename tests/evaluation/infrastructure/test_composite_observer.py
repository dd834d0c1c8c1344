"""Tests for CompositeEvaluationObserver."""

from skill_duel.evaluation.infrastructure.composite_observer import (
    CompositeEvaluationObserver,
)
from tests.evaluation.fake_observer import FakeEvaluationObserver


def _make_composite(
    *observers: FakeEvaluationObserver,
) -> CompositeEvaluationObserver:
    return CompositeEvaluationObserver(observers=list(observers))


class TestCompositeEvaluationObserverFanOut:
    """Every event is forwarded to all observers in order."""

    def test_stage_started_forwarded_to_all(self) -> None:
        obs_a = FakeEvaluationObserver()
        obs_b = FakeEvaluationObserver()
        composite = _make_composite(obs_a, obs_b)

        composite.stage_started(run_id="run-1", phase="generating", total=6, max_concurrent=4)

        assert obs_a.started == obs_b.started
        event = obs_a.started[0]
        assert event.run_id == "run-1"
        assert event.total == 6
        assert event.max_concurrent == 4

    def test_call_events_forwarded(self) -> None:
        obs = FakeEvaluationObserver()
        composite = _make_composite(obs)

        composite.call_started(run_id="r", phase="judging", item_id=3, side="judge")
        composite.call_completed(
            run_id="r", phase="judging", item_id=3, side="judge", elapsed_ms=12
        )
        composite.call_failed(
            run_id="r", phase="generating", item_id=4, side="B", reason="boom"
        )

        assert obs.calls_started[0].item_id == 3
        assert obs.calls_completed[0].side == "judge"
        assert obs.calls_failed[0].reason == "boom"

    def test_stage_progress_and_completed_forwarded(self) -> None:
        obs = FakeEvaluationObserver()
        composite = _make_composite(obs)

        composite.stage_progress(run_id="r", phase="judging", current=2, total=5)
        composite.stage_completed(
            run_id="r", phase="judging", succeeded=4, failed=1, elapsed_seconds=1.5
        )

        assert obs.progress[0].current == 2
        assert obs.completed[0].succeeded == 4
        assert obs.completed[0].failed == 1

    def test_run_level_events_forwarded(self) -> None:
        obs_a = FakeEvaluationObserver()
        obs_b = FakeEvaluationObserver()
        composite = _make_composite(obs_a, obs_b)

        composite.screenshot_missing(run_id="r", item_id=1, side="A")
        composite.judge_unparseable(run_id="r", item_id=2)
        composite.run_rejected(phase="judging", reason="API key is required")
        composite.run_failed(run_id="r", phase="generating", reason="exploded")
        composite.stale_result_discarded(run_id="r", item_id=None)
        composite.state_persist_failed(reason="disk full")
        composite.state_cleared()

        for obs in (obs_a, obs_b):
            assert obs.screenshots_missing[0].side == "A"
            assert obs.unparseable == [2]
            assert obs.rejected[0].reason == "API key is required"
            assert obs.failed[0].reason == "exploded"
            assert obs.stale == [None]
            assert obs.persist_failures == ["disk full"]
            assert obs.cleared == 1

    def test_empty_composite_is_a_no_op(self) -> None:
        composite = _make_composite()

        composite.stage_started(run_id="r", phase="generating", total=1, max_concurrent=1)
        composite.state_cleared()
