"""Tests for StructlogEvaluationObserver event names and fields."""

from structlog.testing import capture_logs

from skill_duel.evaluation.infrastructure.observer import StructlogEvaluationObserver


class TestStructlogEvaluationObserver:
    def test_stage_progress_includes_percent(self) -> None:
        observer = StructlogEvaluationObserver()

        with capture_logs() as logs:
            observer.stage_progress(run_id="r", phase="judging", current=1, total=4)

        assert logs[0]["event"] == "evaluation.stage.progress"
        assert logs[0]["percent"] == 25.0
        assert logs[0]["log_level"] == "info"

    def test_call_failed_logs_error_with_reason(self) -> None:
        observer = StructlogEvaluationObserver()

        with capture_logs() as logs:
            observer.call_failed(
                run_id="r", phase="generating", item_id=2, side="B", reason="boom"
            )

        assert logs[0]["event"] == "evaluation.call.failed"
        assert logs[0]["reason"] == "boom"
        assert logs[0]["item_id"] == 2
        assert logs[0]["log_level"] == "error"

    def test_stale_result_logged(self) -> None:
        observer = StructlogEvaluationObserver()

        with capture_logs() as logs:
            observer.stale_result_discarded(run_id="r", item_id=None)

        assert logs[0]["event"] == "evaluation.result.stale_discarded"
