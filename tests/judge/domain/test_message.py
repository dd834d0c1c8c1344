"""Tests for the judge user message assembly."""

from skill_duel.config.domain.output_type import OutputType
from skill_duel.gateway.domain.message import ImageBlock, TextBlock
from skill_duel.judge.domain.message import build_judge_message


def _texts(blocks) -> list[str]:
    return [b.text if isinstance(b, TextBlock) else "<image>" for b in blocks]


class TestTextModality:
    def test_block_order(self) -> None:
        blocks = build_judge_message(
            prompt="Write a haiku",
            content_a="haiku A",
            content_b="haiku B",
            output_type=OutputType.TEXT,
            skill_names=("Skill A", "Skill B"),
        )

        assert _texts(blocks) == [
            'Here is the original user prompt:\n\n"Write a haiku"\n\n---\n\n## Result A (Skill A)',
            "### Source of Result A:\n\n```\nhaiku A\n```",
            "\n\n---\n\n## Result B (Skill B)",
            "### Source of Result B:\n\n```\nhaiku B\n```",
            "\n\nPlease evaluate both outputs based on the content above.",
        ]

    def test_no_image_blocks(self) -> None:
        blocks = build_judge_message(
            prompt="p",
            content_a="a",
            content_b="b",
            output_type=OutputType.TEXT,
            skill_names=("A", "B"),
        )

        assert not any(isinstance(b, ImageBlock) for b in blocks)


class TestVisualModality:
    def test_screenshots_without_source(self) -> None:
        blocks = build_judge_message(
            prompt="p",
            content_a="<p>a</p>",
            content_b="<p>b</p>",
            output_type=OutputType.VISUAL,
            skill_names=("Minimal", "Polished"),
            screenshot_a="AAAA",
            screenshot_b="BBBB",
        )

        assert _texts(blocks) == [
            'Here is the original user prompt:\n\n"p"\n\n---\n\n## Result A (Minimal)',
            "### Screenshot of Result A:",
            "<image>",
            "\n\n---\n\n## Result B (Polished)",
            "### Screenshot of Result B:",
            "<image>",
            "\n\nPlease evaluate both outputs based on the screenshots above.",
        ]
        images = [b for b in blocks if isinstance(b, ImageBlock)]
        assert [i.base64 for i in images] == ["AAAA", "BBBB"]
        assert all(i.media_type == "image/png" for i in images)

    def test_missing_screenshot_is_omitted(self) -> None:
        blocks = build_judge_message(
            prompt="p",
            content_a="a",
            content_b="b",
            output_type=OutputType.VISUAL,
            skill_names=("A", "B"),
            screenshot_a=None,
            screenshot_b="BBBB",
        )

        assert "### Screenshot of Result A:" not in _texts(blocks)
        assert "### Screenshot of Result B:" in _texts(blocks)

    def test_no_screenshots_at_all_still_builds(self) -> None:
        blocks = build_judge_message(
            prompt="p",
            content_a="a",
            content_b="b",
            output_type=OutputType.VISUAL,
            skill_names=("A", "B"),
        )

        assert not any(isinstance(b, ImageBlock) for b in blocks)
        assert _texts(blocks)[-1] == (
            "\n\nPlease evaluate both outputs based on the content above."
        )


class TestBothModality:
    def test_screenshot_precedes_source_per_side(self) -> None:
        blocks = build_judge_message(
            prompt="p",
            content_a="a",
            content_b="b",
            output_type=OutputType.BOTH,
            skill_names=("A", "B"),
            screenshot_a="AAAA",
            screenshot_b="BBBB",
        )
        texts = _texts(blocks)

        assert texts.index("### Screenshot of Result A:") < texts.index(
            "### Source of Result A:\n\n```\na\n```"
        )
        assert texts[-1] == (
            "\n\nPlease evaluate both outputs based on the screenshots and source content."
        )
