"""RunStats — aggregate statistics, recomputed on demand from the items."""

from pydantic import BaseModel

from skill_duel.evaluation.domain.item import EvaluationItem, JudgeStatus


class RunStats(BaseModel, frozen=True):
    """Aggregate tallies over one batch.

    Always: ``a_wins + b_wins + ties + unscored == judged_count`` and
    ``judged_count <= generated_count <= total_evals``.
    """

    total_evals: int
    generated_count: int
    judged_count: int
    a_wins: int
    b_wins: int
    ties: int
    unscored: int
    can_judge: bool


def compute_stats(items: list[EvaluationItem]) -> RunStats:
    judged = [e for e in items if e.judge.status is JudgeStatus.COMPLETE]
    winners = [e.judge.scores.winner if e.judge.scores else None for e in judged]
    return RunStats(
        total_evals=len(items),
        generated_count=sum(1 for e in items if e.is_generated),
        judged_count=len(judged),
        a_wins=winners.count("A"),
        b_wins=winners.count("B"),
        ties=winners.count("tie"),
        unscored=winners.count(None),
        can_judge=any(e.is_judgeable for e in items),
    )
