"""CompositeEvaluationObserver — fans out all events to a list of observers."""

from skill_duel.evaluation.domain.observer import EvaluationObserver


class CompositeEvaluationObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[EvaluationObserver]) -> None:
        self._observers = observers

    def stage_started(
        self, run_id: str, phase: str, total: int, max_concurrent: int
    ) -> None:
        for obs in self._observers:
            obs.stage_started(
                run_id=run_id, phase=phase, total=total, max_concurrent=max_concurrent
            )

    def stage_progress(self, run_id: str, phase: str, current: int, total: int) -> None:
        for obs in self._observers:
            obs.stage_progress(run_id=run_id, phase=phase, current=current, total=total)

    def stage_completed(
        self,
        run_id: str,
        phase: str,
        succeeded: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None:
        for obs in self._observers:
            obs.stage_completed(
                run_id=run_id,
                phase=phase,
                succeeded=succeeded,
                failed=failed,
                elapsed_seconds=elapsed_seconds,
            )

    def call_started(self, run_id: str, phase: str, item_id: int, side: str) -> None:
        for obs in self._observers:
            obs.call_started(run_id=run_id, phase=phase, item_id=item_id, side=side)

    def call_completed(
        self, run_id: str, phase: str, item_id: int, side: str, elapsed_ms: int
    ) -> None:
        for obs in self._observers:
            obs.call_completed(
                run_id=run_id,
                phase=phase,
                item_id=item_id,
                side=side,
                elapsed_ms=elapsed_ms,
            )

    def call_failed(
        self, run_id: str, phase: str, item_id: int, side: str, reason: str
    ) -> None:
        for obs in self._observers:
            obs.call_failed(
                run_id=run_id,
                phase=phase,
                item_id=item_id,
                side=side,
                reason=reason,
            )

    def screenshot_missing(self, run_id: str, item_id: int, side: str) -> None:
        for obs in self._observers:
            obs.screenshot_missing(run_id=run_id, item_id=item_id, side=side)

    def judge_unparseable(self, run_id: str, item_id: int) -> None:
        for obs in self._observers:
            obs.judge_unparseable(run_id=run_id, item_id=item_id)

    def run_rejected(self, phase: str, reason: str) -> None:
        for obs in self._observers:
            obs.run_rejected(phase=phase, reason=reason)

    def run_failed(self, run_id: str, phase: str, reason: str) -> None:
        for obs in self._observers:
            obs.run_failed(run_id=run_id, phase=phase, reason=reason)

    def stale_result_discarded(self, run_id: str, item_id: int | None) -> None:
        for obs in self._observers:
            obs.stale_result_discarded(run_id=run_id, item_id=item_id)

    def state_persist_failed(self, reason: str) -> None:
        for obs in self._observers:
            obs.state_persist_failed(reason=reason)

    def state_cleared(self) -> None:
        for obs in self._observers:
            obs.state_cleared()
