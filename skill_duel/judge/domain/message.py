"""Assemble the judge's user message for one A/B pair."""

from skill_duel.config.domain.output_type import OutputType
from skill_duel.gateway.domain.message import ContentBlock, ImageBlock, TextBlock


def _side_blocks(
    label: str, content: str, screenshot: str | None, include_source: bool
) -> list[ContentBlock]:
    blocks: list[ContentBlock] = []
    if screenshot:
        blocks.append(TextBlock(text=f"### Screenshot of Result {label}:"))
        blocks.append(ImageBlock(base64=screenshot, media_type="image/png"))
    if include_source:
        blocks.append(
            TextBlock(text=f"### Source of Result {label}:\n\n```\n{content}\n```")
        )
    return blocks


def _closing_instruction(has_screenshots: bool, has_source: bool) -> str:
    if has_screenshots and has_source:
        return "\n\nPlease evaluate both outputs based on the screenshots and source content."
    if has_screenshots:
        return "\n\nPlease evaluate both outputs based on the screenshots above."
    return "\n\nPlease evaluate both outputs based on the content above."


def build_judge_message(
    prompt: str,
    content_a: str,
    content_b: str,
    output_type: OutputType,
    skill_names: tuple[str, str],
    screenshot_a: str | None = None,
    screenshot_b: str | None = None,
) -> list[ContentBlock]:
    """Return the content blocks of the judge request, in fixed order.

    Prompt context, Result A header, screenshot A, source A, Result B header,
    screenshot B, source B, closing instruction. Screenshots are included only
    when present; source only when the modality includes it. The closing
    wording reflects the evidence actually attached.
    """
    name_a, name_b = skill_names
    include_source = output_type.includes_source
    blocks: list[ContentBlock] = [
        TextBlock(
            text=(
                f'Here is the original user prompt:\n\n"{prompt}"\n\n---\n\n'
                f"## Result A ({name_a})"
            )
        )
    ]
    blocks.extend(_side_blocks("A", content_a, screenshot_a, include_source))
    blocks.append(TextBlock(text=f"\n\n---\n\n## Result B ({name_b})"))
    blocks.extend(_side_blocks("B", content_b, screenshot_b, include_source))
    blocks.append(
        TextBlock(
            text=_closing_instruction(
                has_screenshots=bool(screenshot_a or screenshot_b),
                has_source=include_source,
            )
        )
    )
    return blocks
