"""StructlogEvaluationObserver — production observer that delegates to structlog."""

import structlog


class StructlogEvaluationObserver:
    """Logs evaluation domain events to structlog.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def stage_started(
        self, run_id: str, phase: str, total: int, max_concurrent: int
    ) -> None:
        self._log.info(
            "evaluation.stage.started",
            run_id=run_id,
            phase=phase,
            total=total,
            max_concurrent=max_concurrent,
        )

    def stage_progress(self, run_id: str, phase: str, current: int, total: int) -> None:
        self._log.info(
            "evaluation.stage.progress",
            run_id=run_id,
            phase=phase,
            current=current,
            total=total,
            percent=round(100.0 * current / total, 1) if total else 0.0,
        )

    def stage_completed(
        self,
        run_id: str,
        phase: str,
        succeeded: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "evaluation.stage.completed",
            run_id=run_id,
            phase=phase,
            succeeded=succeeded,
            failed=failed,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def call_started(self, run_id: str, phase: str, item_id: int, side: str) -> None:
        self._log.debug(
            "evaluation.call.started",
            run_id=run_id,
            phase=phase,
            item_id=item_id,
            side=side,
        )

    def call_completed(
        self, run_id: str, phase: str, item_id: int, side: str, elapsed_ms: int
    ) -> None:
        self._log.info(
            "evaluation.call.completed",
            run_id=run_id,
            phase=phase,
            item_id=item_id,
            side=side,
            elapsed_ms=elapsed_ms,
        )

    def call_failed(
        self, run_id: str, phase: str, item_id: int, side: str, reason: str
    ) -> None:
        self._log.error(
            "evaluation.call.failed",
            run_id=run_id,
            phase=phase,
            item_id=item_id,
            side=side,
            reason=reason,
        )

    def screenshot_missing(self, run_id: str, item_id: int, side: str) -> None:
        self._log.warning(
            "evaluation.screenshot.missing",
            run_id=run_id,
            item_id=item_id,
            side=side,
        )

    def judge_unparseable(self, run_id: str, item_id: int) -> None:
        self._log.warning(
            "evaluation.judge.unparseable",
            run_id=run_id,
            item_id=item_id,
        )

    def run_rejected(self, phase: str, reason: str) -> None:
        self._log.warning("evaluation.run.rejected", phase=phase, reason=reason)

    def run_failed(self, run_id: str, phase: str, reason: str) -> None:
        self._log.error(
            "evaluation.run.failed",
            run_id=run_id,
            phase=phase,
            reason=reason,
        )

    def stale_result_discarded(self, run_id: str, item_id: int | None) -> None:
        self._log.info(
            "evaluation.result.stale_discarded",
            run_id=run_id,
            item_id=item_id,
        )

    def state_persist_failed(self, reason: str) -> None:
        self._log.warning("evaluation.state.persist_failed", reason=reason)

    def state_cleared(self) -> None:
        self._log.info("evaluation.state.cleared")
