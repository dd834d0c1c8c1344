"""Tests for JSON and CSV result export."""

import csv
import io
from datetime import UTC, datetime

from skill_duel.cli.output.export import build_export_csv, build_export_json
from skill_duel.evaluation.domain.item import EvaluationItem, JudgeOutcome, JudgeStatus
from skill_duel.judge.domain.score import CriterionScore, ParsedScore
from tests.evaluation.factories import generated_item, judged_item, make_config

_EXPORTED_AT = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _scored_item(item_id: int) -> EvaluationItem:
    scores = ParsedScore(
        winner="B",
        score_a=6.5,
        score_b=9.0,
        breakdown={"quality": CriterionScore(a=3, b=5)},
    )
    return generated_item(item_id).model_copy(
        update={
            "judge": JudgeOutcome(
                status=JudgeStatus.COMPLETE, raw_text="B is better", scores=scores
            )
        }
    )


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


class TestBuildExportJson:
    def test_summary_counts(self) -> None:
        items = [
            judged_item(1, "A"),
            judged_item(2, "tie"),
            judged_item(3, None),
            generated_item(4),
        ]

        document = build_export_json(make_config(), items, exported_at=_EXPORTED_AT)

        assert document["exportedAt"] == "2025-03-01T12:00:00+00:00"
        assert document["skillA"] == "Skill A"
        assert document["skillB"] == "Skill B"
        assert document["summary"] == {
            "total": 4,
            "judged": 3,
            "aWins": 1,
            "bWins": 0,
            "ties": 1,
            "unscored": 1,
        }

    def test_item_detail(self) -> None:
        document = build_export_json(make_config(), [_scored_item(1)])

        entry = document["evaluations"][0]
        assert entry["id"] == 1
        assert entry["prompt"] == "prompt 1"
        assert entry["resultA"] == {"content": "A output 1", "elapsed": 10}
        assert entry["judge"] == {
            "winner": "B",
            "scoreA": 6.5,
            "scoreB": 9.0,
            "breakdown": {"quality": {"A": 3, "B": 5}},
            "reasoning": "B is better",
        }

    def test_unjudged_item_has_null_judge(self) -> None:
        document = build_export_json(make_config(), [generated_item(1)])

        assert document["evaluations"][0]["judge"] is None

    def test_criteria_are_included(self) -> None:
        document = build_export_json(make_config(), [])

        assert [c["id"] for c in document["criteria"]] == ["quality"]
        assert document["summary"]["total"] == 0


class TestBuildExportCsv:
    def test_header_lists_criteria_per_side(self) -> None:
        rows = _rows(build_export_csv(make_config(), []))

        assert rows == [
            ["ID", "Prompt", "Winner", "Score A", "Score B", "Quality (A)", "Quality (B)"]
        ]

    def test_scored_row(self) -> None:
        rows = _rows(build_export_csv(make_config(), [_scored_item(1)]))

        assert rows[1] == ["1", "prompt 1", "B", "6.5", "9", "3", "5"]

    def test_missing_values_are_empty_cells(self) -> None:
        items = [generated_item(1), judged_item(2, "A")]

        rows = _rows(build_export_csv(make_config(), items))

        assert rows[1] == ["1", "prompt 1", "", "", "", "", ""]
        assert rows[2] == ["2", "prompt 2", "A", "8", "6", "", ""]

    def test_zero_score_is_kept(self) -> None:
        scores = ParsedScore(winner="A", score_a=1, score_b=0)
        item = generated_item(1).model_copy(
            update={"judge": JudgeOutcome(status=JudgeStatus.COMPLETE, scores=scores)}
        )

        rows = _rows(build_export_csv(make_config(), [item]))

        assert rows[1][3:5] == ["1", "0"]

    def test_prompts_with_commas_and_quotes_are_escaped(self) -> None:
        item = generated_item(1, prompt='Say "hi", then leave')

        text = build_export_csv(make_config(), [item])

        assert '"Say ""hi"", then leave"' in text
        assert _rows(text)[1][1] == 'Say "hi", then leave'
