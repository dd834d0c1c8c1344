"""FakeEvaluationObserver — records evaluation domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StageStartedEvent:
    run_id: str
    phase: str
    total: int
    max_concurrent: int


@dataclass(frozen=True)
class StageProgressEvent:
    run_id: str
    phase: str
    current: int
    total: int


@dataclass(frozen=True)
class StageCompletedEvent:
    run_id: str
    phase: str
    succeeded: int
    failed: int
    elapsed_seconds: float


@dataclass(frozen=True)
class CallEvent:
    run_id: str
    phase: str
    item_id: int
    side: str


@dataclass(frozen=True)
class CallFailedEvent:
    run_id: str
    phase: str
    item_id: int
    side: str
    reason: str


@dataclass(frozen=True)
class ScreenshotMissingEvent:
    run_id: str
    item_id: int
    side: str


@dataclass(frozen=True)
class RunRejectedEvent:
    phase: str
    reason: str


@dataclass(frozen=True)
class RunFailedEvent:
    run_id: str
    phase: str
    reason: str


class FakeEvaluationObserver:
    """Records all emitted evaluation events as typed frozen dataclasses.

    Use in tests to assert which events were emitted and with what data,
    without mocking or patching.

    Event lists use a leading underscore + public property pattern to avoid
    name collision between the list attributes and the Protocol method names.
    """

    def __init__(self) -> None:
        self._started: list[StageStartedEvent] = []
        self._progress: list[StageProgressEvent] = []
        self._completed: list[StageCompletedEvent] = []
        self._calls_started: list[CallEvent] = []
        self._calls_completed: list[CallEvent] = []
        self._calls_failed: list[CallFailedEvent] = []
        self._screenshots_missing: list[ScreenshotMissingEvent] = []
        self._unparseable: list[int] = []
        self._rejected: list[RunRejectedEvent] = []
        self._failed: list[RunFailedEvent] = []
        self._stale: list[int | None] = []
        self._persist_failures: list[str] = []
        self.cleared = 0

    @property
    def started(self) -> list[StageStartedEvent]:
        return self._started

    @property
    def progress(self) -> list[StageProgressEvent]:
        return self._progress

    @property
    def completed(self) -> list[StageCompletedEvent]:
        return self._completed

    @property
    def calls_started(self) -> list[CallEvent]:
        return self._calls_started

    @property
    def calls_completed(self) -> list[CallEvent]:
        return self._calls_completed

    @property
    def calls_failed(self) -> list[CallFailedEvent]:
        return self._calls_failed

    @property
    def screenshots_missing(self) -> list[ScreenshotMissingEvent]:
        return self._screenshots_missing

    @property
    def unparseable(self) -> list[int]:
        return self._unparseable

    @property
    def rejected(self) -> list[RunRejectedEvent]:
        return self._rejected

    @property
    def failed(self) -> list[RunFailedEvent]:
        return self._failed

    @property
    def stale(self) -> list[int | None]:
        return self._stale

    @property
    def persist_failures(self) -> list[str]:
        return self._persist_failures

    def stage_started(
        self, run_id: str, phase: str, total: int, max_concurrent: int
    ) -> None:
        self._started.append(
            StageStartedEvent(
                run_id=run_id, phase=phase, total=total, max_concurrent=max_concurrent
            )
        )

    def stage_progress(self, run_id: str, phase: str, current: int, total: int) -> None:
        self._progress.append(
            StageProgressEvent(run_id=run_id, phase=phase, current=current, total=total)
        )

    def stage_completed(
        self,
        run_id: str,
        phase: str,
        succeeded: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None:
        self._completed.append(
            StageCompletedEvent(
                run_id=run_id,
                phase=phase,
                succeeded=succeeded,
                failed=failed,
                elapsed_seconds=elapsed_seconds,
            )
        )

    def call_started(self, run_id: str, phase: str, item_id: int, side: str) -> None:
        self._calls_started.append(
            CallEvent(run_id=run_id, phase=phase, item_id=item_id, side=side)
        )

    def call_completed(
        self, run_id: str, phase: str, item_id: int, side: str, elapsed_ms: int
    ) -> None:
        self._calls_completed.append(
            CallEvent(run_id=run_id, phase=phase, item_id=item_id, side=side)
        )

    def call_failed(
        self, run_id: str, phase: str, item_id: int, side: str, reason: str
    ) -> None:
        self._calls_failed.append(
            CallFailedEvent(
                run_id=run_id, phase=phase, item_id=item_id, side=side, reason=reason
            )
        )

    def screenshot_missing(self, run_id: str, item_id: int, side: str) -> None:
        self._screenshots_missing.append(
            ScreenshotMissingEvent(run_id=run_id, item_id=item_id, side=side)
        )

    def judge_unparseable(self, run_id: str, item_id: int) -> None:
        self._unparseable.append(item_id)

    def run_rejected(self, phase: str, reason: str) -> None:
        self._rejected.append(RunRejectedEvent(phase=phase, reason=reason))

    def run_failed(self, run_id: str, phase: str, reason: str) -> None:
        self._failed.append(RunFailedEvent(run_id=run_id, phase=phase, reason=reason))

    def stale_result_discarded(self, run_id: str, item_id: int | None) -> None:
        self._stale.append(item_id)

    def state_persist_failed(self, reason: str) -> None:
        self._persist_failures.append(reason)

    def state_cleared(self) -> None:
        self.cleared += 1
