"""Export of a run's results as a JSON document or a CSV table."""

import csv
import io
from datetime import UTC, datetime
from typing import Any, TypeAlias

from skill_duel.config.domain.config import EvalConfig
from skill_duel.evaluation.domain.item import EvaluationItem
from skill_duel.evaluation.domain.stats import compute_stats

JsonDict: TypeAlias = dict[str, Any]


def _judge_json(item: EvaluationItem) -> JsonDict | None:
    scores = item.judge.scores
    if scores is None:
        return None
    breakdown = (
        {cid: s.model_dump(by_alias=True) for cid, s in scores.breakdown.items()}
        if scores.breakdown is not None
        else None
    )
    return {
        "winner": scores.winner,
        "scoreA": scores.score_a,
        "scoreB": scores.score_b,
        "breakdown": breakdown,
        "reasoning": item.judge.raw_text,
    }


def build_export_json(
    config: EvalConfig,
    evaluations: list[EvaluationItem],
    exported_at: datetime | None = None,
) -> JsonDict:
    """Build the full results document: skills, criteria, summary, per-item detail."""
    stats = compute_stats(evaluations)
    return {
        "exportedAt": (exported_at or datetime.now(UTC)).isoformat(),
        "skillA": config.skill_a.name,
        "skillB": config.skill_b.name,
        "criteria": [c.model_dump() for c in config.criteria],
        "summary": {
            "total": stats.total_evals,
            "judged": stats.judged_count,
            "aWins": stats.a_wins,
            "bWins": stats.b_wins,
            "ties": stats.ties,
            "unscored": stats.unscored,
        },
        "evaluations": [
            {
                "id": item.id,
                "prompt": item.prompt,
                "resultA": {
                    "content": item.result_a.content,
                    "elapsed": item.result_a.elapsed_ms,
                },
                "resultB": {
                    "content": item.result_b.content,
                    "elapsed": item.result_b.elapsed_ms,
                },
                "judge": _judge_json(item),
            }
            for item in evaluations
        ],
    }


def _cell(value: int | float | str | None) -> str:
    """Empty for missing values; whole-number scores without a trailing '.0'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_export_csv(config: EvalConfig, evaluations: list[EvaluationItem]) -> str:
    """Build one CSV row per item with totals and per-criterion scores for A and B."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(
        ["ID", "Prompt", "Winner", "Score A", "Score B"]
        + [f"{c.name} (A)" for c in config.criteria]
        + [f"{c.name} (B)" for c in config.criteria]
    )
    for item in evaluations:
        scores = item.judge.scores
        breakdown = (scores.breakdown if scores else None) or {}
        per_a = [_cell(breakdown[c.id].a if c.id in breakdown else None) for c in config.criteria]
        per_b = [_cell(breakdown[c.id].b if c.id in breakdown else None) for c in config.criteria]
        writer.writerow(
            [
                item.id,
                item.prompt,
                _cell(scores.winner if scores else None),
                _cell(scores.score_a if scores else None),
                _cell(scores.score_b if scores else None),
                *per_a,
                *per_b,
            ]
        )
    return buffer.getvalue()
