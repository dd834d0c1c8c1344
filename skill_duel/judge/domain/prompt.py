"""Build the judge system prompt from the live criteria list."""

from skill_duel.config.domain.criterion import Criterion
from skill_duel.config.domain.output_type import OutputType

# Only these rubric anchors are quoted, to bound prompt length.
_ANCHOR_LEVELS: tuple[str, ...] = ("5", "3", "1")


def _evidence_section(output_type: OutputType) -> str:
    lines = [
        "You are an expert evaluator comparing two AI-generated outputs. You will receive:",
        "1. The original user prompt that both were given",
    ]
    n = 2
    if output_type.needs_screenshots:
        lines.append(f"{n}. A SCREENSHOT of Result A showing the rendered visual output")
        lines.append(f"{n + 1}. A SCREENSHOT of Result B showing the rendered visual output")
        n += 2
    if output_type.includes_source:
        lines.append(f"{n}. The source content/code of both results")
    text = "\n".join(lines) + "\n"
    if output_type.needs_screenshots:
        text += (
            "\nIMPORTANT: Base your visual assessments primarily on the SCREENSHOTS, "
            "not just the code. The screenshots show exactly how the output renders.\n"
        )
    return text


def _criterion_section(index: int, criterion: Criterion) -> str:
    lines = [f"### {index}. {criterion.name} (1-5)", criterion.description]
    for level in _ANCHOR_LEVELS:
        anchor = criterion.rubric.get(level)
        if anchor:
            lines.append(f"- {level}: {anchor}")
    return "\n".join(lines) + "\n"


def _output_format_section(criteria: list[Criterion]) -> str:
    max_total = len(criteria) * 5
    table_rows = "\n".join(f"| {c.name} | X/5 | X/5 |" for c in criteria)
    breakdown = ",\n".join(f'    "{c.id}": {{"A": X, "B": X}}' for c in criteria)
    return (
        "## Required Output Format\n\n"
        "### First Impressions\n"
        "**Result A**: [2-3 sentence impression]\n"
        "**Result B**: [2-3 sentence impression]\n\n"
        "### Scores\n\n"
        "| Criterion | Result A | Result B |\n"
        "|-----------|----------|----------|\n"
        f"{table_rows}\n"
        f"| **TOTAL** | XX/{max_total} | XX/{max_total} |\n\n"
        "### Winner\n"
        "**[A or B]** - [Brief justification in 1-2 sentences]\n\n"
        "### JSON Summary\n"
        "```json\n"
        "{\n"
        '  "winner": "A" or "B",\n'
        '  "scoreA": XX,\n'
        '  "scoreB": XX,\n'
        '  "breakdown": {\n'
        f"{breakdown}\n"
        "  }\n"
        "}\n"
        "```"
    )


def build_judge_prompt(criteria: list[Criterion], output_type: OutputType) -> str:
    """Return the judge system prompt for the given criteria and modality.

    Deterministic: the same inputs always produce the same prompt. The JSON
    contract carries one breakdown entry per criterion, keyed by criterion id.
    """
    sections = [
        _evidence_section(output_type),
        "Rate each criterion from 1-5 and provide a brief justification.\n",
    ]
    sections.extend(
        _criterion_section(index, criterion)
        for index, criterion in enumerate(criteria, start=1)
    )
    sections.append(_output_format_section(criteria))
    return "\n".join(sections)
