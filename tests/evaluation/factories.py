"""Builders for evaluation items and configs shared across evaluation tests."""

from skill_duel.config.domain.config import EvalConfig
from skill_duel.config.domain.criterion import Criterion
from skill_duel.config.domain.execution import ExecutionConfig
from skill_duel.config.domain.output_type import OutputType
from skill_duel.config.domain.skill import SkillDocument
from skill_duel.evaluation.domain.item import (
    EvaluationItem,
    GenerationResult,
    GenStatus,
    JudgeOutcome,
    JudgeStatus,
)
from skill_duel.judge.domain.score import ParsedScore, Winner

RUBRIC = {"1": "Broken", "2": "Poor", "3": "Acceptable", "4": "Good", "5": "Superb"}

JUDGE_REPLY_TEMPLATE = """### Winner
**[{winner}]** - reasons

### JSON Summary
```json
{{"winner": "{winner}", "scoreA": 8, "scoreB": 6, "breakdown": {{"quality": {{"A": 4, "B": 3}}}}}}
```
"""


def make_config(
    prompts: list[str] | None = None,
    output_type: OutputType = OutputType.TEXT,
    api_key: str = "sk-test",
    max_concurrent: int = 8,
    call_timeout_seconds: float = 300.0,
    base_system_prompt: str = "",
) -> EvalConfig:
    return EvalConfig(
        name="duel",
        skill_a=SkillDocument(name="Skill A", content="SKILL-A-CONTENT"),
        skill_b=SkillDocument(name="Skill B", content="SKILL-B-CONTENT"),
        base_system_prompt=base_system_prompt,
        output_type=output_type,
        criteria=[
            Criterion(id="quality", name="Quality", description="Overall", rubric=RUBRIC)
        ],
        prompts=prompts if prompts is not None else ["prompt one", "prompt two"],
        execution=ExecutionConfig(
            max_concurrent=max_concurrent, call_timeout_seconds=call_timeout_seconds
        ),
        api_key=api_key,
    )


def complete(content: str) -> GenerationResult:
    return GenerationResult(content=content, elapsed_ms=10, status=GenStatus.COMPLETE)


def failed(error: str = "boom") -> GenerationResult:
    return GenerationResult(error=error, elapsed_ms=10, status=GenStatus.ERROR)


def generated_item(item_id: int, prompt: str | None = None) -> EvaluationItem:
    return EvaluationItem(
        id=item_id,
        prompt=prompt or f"prompt {item_id}",
        result_a=complete(f"A output {item_id}"),
        result_b=complete(f"B output {item_id}"),
    )


def judged_item(item_id: int, winner: Winner | None) -> EvaluationItem:
    scores = None if winner is None else ParsedScore(winner=winner, score_a=8, score_b=6)
    return generated_item(item_id).model_copy(
        update={
            "judge": JudgeOutcome(
                status=JudgeStatus.COMPLETE, raw_text="verdict", scores=scores
            )
        }
    )
