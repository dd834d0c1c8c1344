"""EvaluationItem — one prompt run through both skills and judged."""

from enum import StrEnum
from typing import Literal, Self, TypeAlias

from pydantic import BaseModel, Field, model_validator

from skill_duel.judge.domain.score import ParsedScore

Side: TypeAlias = Literal["A", "B"]


class GenStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"


class JudgeStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"


class GenerationResult(BaseModel, frozen=True):
    """Outcome of one skill's generation for one prompt."""

    content: str = ""
    error: str | None = None
    elapsed_ms: int | None = None
    status: GenStatus = GenStatus.PENDING

    @model_validator(mode="after")
    def _error_has_message_and_no_content(self) -> Self:
        if self.status is GenStatus.ERROR and (not self.error or self.content):
            raise ValueError("an errored generation needs an error message and no content")
        return self


class JudgeOutcome(BaseModel, frozen=True):
    """Outcome of judging one A/B pair.

    ``raw_text`` holds the judge's full reply, or ``"Error: ..."`` when the
    call itself failed. ``scores`` is None when the reply was unparseable.
    """

    status: JudgeStatus = JudgeStatus.PENDING
    raw_text: str = ""
    scores: ParsedScore | None = None
    elapsed_ms: int | None = None


class EvaluationItem(BaseModel, frozen=True):
    """Immutable unit of work; stages hand back updated copies, never mutate."""

    id: int = Field(ge=1)
    prompt: str
    result_a: GenerationResult = GenerationResult()
    result_b: GenerationResult = GenerationResult()
    screenshot_a: str | None = None
    screenshot_b: str | None = None
    judge: JudgeOutcome = JudgeOutcome()

    @property
    def is_generated(self) -> bool:
        return (
            self.result_a.status is GenStatus.COMPLETE
            and self.result_b.status is GenStatus.COMPLETE
        )

    @property
    def is_judgeable(self) -> bool:
        """Both legs succeeded and the pair has not been judged yet."""
        return self.is_generated and self.judge.status is not JudgeStatus.COMPLETE

    def with_result(self, side: Side, result: GenerationResult) -> "EvaluationItem":
        field = "result_a" if side == "A" else "result_b"
        return self.model_copy(update={field: result})


def fresh_items(prompts: list[str]) -> list[EvaluationItem]:
    """Build 1-indexed pending items, one per prompt, in prompt order."""
    return [EvaluationItem(id=i, prompt=p) for i, p in enumerate(prompts, start=1)]
