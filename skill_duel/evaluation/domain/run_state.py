"""RunState — the controller-owned record of one configuration's run."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel

from skill_duel.evaluation.domain.item import (
    EvaluationItem,
    GenerationResult,
    GenStatus,
    JudgeOutcome,
    JudgeStatus,
)


class RunPhase(StrEnum):
    IDLE = "idle"
    GENERATING = "generating"
    JUDGING = "judging"
    COMPLETE = "complete"


class RunProgress(BaseModel, frozen=True):
    current: int = 0
    total: int = 0
    phase: str = ""


class RunState(BaseModel, frozen=True):
    evaluations: list[EvaluationItem] = []
    phase: RunPhase = RunPhase.IDLE
    progress: RunProgress = RunProgress()
    error: str | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @property
    def is_busy(self) -> bool:
        return self.phase in (RunPhase.GENERATING, RunPhase.JUDGING)

    def with_item(self, item: EvaluationItem) -> "RunState":
        """Return a copy with the item of the same id replaced; unknown ids are ignored."""
        evaluations = [item if e.id == item.id else e for e in self.evaluations]
        return self.model_copy(update={"evaluations": evaluations})

    def recovered(self) -> "RunState":
        """Normalise a state persisted mid-phase so it can be re-entered.

        The phase drops back to idle and anything left ``running`` by the
        interrupted process is reset to ``pending``.
        """
        if not self.is_busy and not any(_is_running(e) for e in self.evaluations):
            return self
        evaluations = [_reset_running(e) for e in self.evaluations]
        return self.model_copy(
            update={"evaluations": evaluations, "phase": RunPhase.IDLE}
        )


def _is_running(item: EvaluationItem) -> bool:
    return (
        item.result_a.status is GenStatus.RUNNING
        or item.result_b.status is GenStatus.RUNNING
        or item.judge.status is JudgeStatus.RUNNING
    )


def _reset_running(item: EvaluationItem) -> EvaluationItem:
    update: dict[str, object] = {}
    if item.result_a.status is GenStatus.RUNNING:
        update["result_a"] = GenerationResult()
    if item.result_b.status is GenStatus.RUNNING:
        update["result_b"] = GenerationResult()
    if item.judge.status is JudgeStatus.RUNNING:
        update["judge"] = JudgeOutcome()
    return item.model_copy(update=update) if update else item
