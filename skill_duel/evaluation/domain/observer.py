"""Observer port for the evaluation domain — defines events in domain language."""

from typing import Protocol


class EvaluationObserver(Protocol):
    """Observer port emitting structured events during generation and judging.

    ``phase`` is ``"generating"`` or ``"judging"``. ``side`` is ``"A"`` or ``"B"``
    for generation calls and ``"judge"`` for judging calls.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def stage_started(
        self, run_id: str, phase: str, total: int, max_concurrent: int
    ) -> None: ...

    def stage_progress(self, run_id: str, phase: str, current: int, total: int) -> None: ...

    def stage_completed(
        self,
        run_id: str,
        phase: str,
        succeeded: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None: ...

    def call_started(self, run_id: str, phase: str, item_id: int, side: str) -> None: ...

    def call_completed(
        self, run_id: str, phase: str, item_id: int, side: str, elapsed_ms: int
    ) -> None: ...

    def call_failed(
        self, run_id: str, phase: str, item_id: int, side: str, reason: str
    ) -> None: ...

    def screenshot_missing(self, run_id: str, item_id: int, side: str) -> None: ...

    def judge_unparseable(self, run_id: str, item_id: int) -> None: ...

    def run_rejected(self, phase: str, reason: str) -> None: ...

    def run_failed(self, run_id: str, phase: str, reason: str) -> None: ...

    def stale_result_discarded(self, run_id: str, item_id: int | None) -> None: ...

    def state_persist_failed(self, reason: str) -> None: ...

    def state_cleared(self) -> None: ...
