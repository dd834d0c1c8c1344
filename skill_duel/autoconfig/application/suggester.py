"""ConfigSuggester — asks the model to propose criteria, prompts, and output type."""

from typing import Any

from pydantic import ValidationError

from skill_duel.autoconfig.domain.observer import SuggestionObserver
from skill_duel.autoconfig.domain.suggestion import (
    FALLBACK_CONFIG,
    GenerationType,
    SuggestedConfig,
)
from skill_duel.config.domain.criterion import Criterion
from skill_duel.config.domain.models import DEFAULT_MODEL
from skill_duel.config.domain.output_type import OutputType
from skill_duel.config.domain.skill import SkillDocument
from skill_duel.core.errors import SkillDuelError
from skill_duel.gateway.domain.gateway import ModelGateway

SUGGESTION_MAX_TOKENS = 8192

SYSTEM_PROMPT = """You are a configuration generator for an AI skill evaluation tool.

Given two skill files that will be compared against each other, analyze them and generate appropriate evaluation configuration.

Your task is to understand:
1. What domain/task the skills are designed for
2. What kind of output the skills will produce
3. What criteria would fairly evaluate their outputs
4. What prompts would effectively test their capabilities

## Output Type Inference

Analyze the skill to determine output type:
- "visual" if skills produce HTML/CSS, UI components, or visual artifacts
- "text" if skills produce code, text, data, or non-visual outputs
- "both" if outputs benefit from seeing both rendered result AND source

## Criteria Generation Guidelines

Generate 4-6 criteria that:
- Are specific to what these skills claim to do
- Can be objectively evaluated (not vague)
- Cover different aspects (correctness, quality, style, edge cases)
- Each have a clear 1-5 scoring rubric

## Prompt Generation Guidelines

Generate the requested number of prompts that:
- Actually test what the skills claim to do
- Vary in difficulty (roughly 20% easy, 60% medium, 20% hard)
- Cover different aspects mentioned in the skills
- Are realistic user requests, not artificial tests
- Include edge cases and challenging scenarios

## Output Format

You MUST respond with valid JSON in this exact structure:
{
  "outputType": "text" | "visual" | "both",
  "outputTypeReasoning": "Brief explanation of why this output type was chosen",
  "criteria": [
    {
      "id": "snake_case_id",
      "name": "Human Readable Name",
      "description": "What this criterion measures",
      "rubric": {
        "5": "Description of excellent (5/5)",
        "4": "Description of good (4/5)",
        "3": "Description of acceptable (3/5)",
        "2": "Description of poor (2/5)",
        "1": "Description of unacceptable (1/5)"
      }
    }
  ],
  "prompts": ["Prompt 1", "Prompt 2", ...]
}"""

FEW_SHOT_EXAMPLE = """
## Example Output (for a frontend design skill)

This shows the expected format. Adapt criteria and prompts to match the actual skill domain:

{
  "outputType": "visual",
  "outputTypeReasoning": "Skills produce HTML/CSS components that should be visually evaluated",
  "criteria": [
    {
      "id": "prompt_adherence",
      "name": "Prompt Adherence",
      "description": "How well does the output match what was requested?",
      "rubric": {
        "5": "Perfectly matches all requirements with thoughtful extras",
        "4": "Matches all explicit requirements",
        "3": "Matches most requirements, minor omissions",
        "2": "Partial match, significant gaps",
        "1": "Does not address the prompt"
      }
    },
    {
      "id": "visual_polish",
      "name": "Visual Polish",
      "description": "Quality of typography, spacing, color, and visual details",
      "rubric": {
        "5": "Premium, refined visual execution",
        "4": "Clean and professional",
        "3": "Acceptable but generic",
        "2": "Noticeable visual issues",
        "1": "Poor or broken visual presentation"
      }
    }
  ],
  "prompts": [
    "Build a responsive landing page for a SaaS product that helps teams track OKRs",
    "Create a dark mode toggle component with smooth transitions",
    "Design an accessible contact form with validation feedback"
  ]
}"""

_OUTPUT_TYPE_VALUES = tuple(t.value for t in OutputType)


def build_user_message(
    skill_a: SkillDocument,
    skill_b: SkillDocument,
    generation_type: GenerationType,
    prompt_count: int,
    existing_output_type: OutputType | None,
) -> str:
    """Return the user message asking for the requested part of the configuration."""
    message = (
        "Please analyze these two skill files and generate evaluation configuration.\n\n"
        f"## Skill A: {skill_a.name}\n\n```\n{skill_a.content}\n```\n\n"
        f"## Skill B: {skill_b.name}\n\n```\n{skill_b.content}\n```\n\n"
    )
    keep = (existing_output_type or OutputType.TEXT).value
    match generation_type:
        case GenerationType.ALL:
            message += (
                "Generate a complete configuration with:\n"
                "- Output type (text/visual/both)\n"
                "- 4-6 evaluation criteria with rubrics\n"
                f"- {prompt_count} test prompts\n\n"
                f"{FEW_SHOT_EXAMPLE}"
            )
        case GenerationType.CRITERIA:
            message += (
                "Generate only the evaluation criteria (4-6 criteria with rubrics).\n"
                f"Keep outputType as: {keep}\n"
                "Do not generate prompts, use empty array."
            )
        case GenerationType.PROMPTS:
            message += (
                f"Generate only {prompt_count} test prompts.\n"
                f"Keep outputType as: {keep}\n"
                "Do not generate criteria, use empty array."
            )
        case GenerationType.OUTPUT_TYPE:
            message += (
                "Determine only the appropriate output type (text/visual/both).\n"
                "Do not generate criteria or prompts, use empty arrays."
            )
    return message


def validate_suggestion(raw: Any) -> list[str]:
    """Return human-readable structural problems in a raw suggestion payload."""
    if not isinstance(raw, dict):
        return ["Config must be an object"]

    errors: list[str] = []
    if raw.get("outputType") not in _OUTPUT_TYPE_VALUES:
        errors.append(f"Invalid outputType: {raw.get('outputType')}")

    criteria = raw.get("criteria")
    if not isinstance(criteria, list):
        errors.append("criteria must be an array")
    else:
        for i, c in enumerate(criteria):
            if not isinstance(c, dict):
                errors.append(f"Criterion {i} must be an object")
                continue
            if not (c.get("id") and c.get("name") and c.get("description")):
                errors.append(f"Criterion {i} missing required fields")
            rubric = c.get("rubric")
            if not isinstance(rubric, dict):
                errors.append(f"Criterion {i} missing rubric")
            elif len(rubric) != 5:
                errors.append(f"Criterion {i} rubric should have 5 levels")

    prompts = raw.get("prompts")
    if not isinstance(prompts, list):
        errors.append("prompts must be an array")
    else:
        for i, p in enumerate(prompts):
            if not isinstance(p, str) or not p.strip():
                errors.append(f"Prompt {i} must be a non-empty string")
    return errors


def _coerce(raw: dict[str, Any], warnings: list[str]) -> SuggestedConfig:
    """Keep whatever parts of the payload are usable; drop the rest with a warning."""
    value = raw.get("outputType")
    output_type = OutputType(value) if value in _OUTPUT_TYPE_VALUES else OutputType.TEXT

    criteria: list[Criterion] = []
    raw_criteria = raw.get("criteria")
    for i, c in enumerate(raw_criteria if isinstance(raw_criteria, list) else []):
        try:
            criteria.append(Criterion.model_validate(c))
        except ValidationError:
            warnings.append(f"Criterion {i} dropped: not a valid criterion")

    raw_prompts = raw.get("prompts")
    prompts = [
        p.strip()
        for p in (raw_prompts if isinstance(raw_prompts, list) else [])
        if isinstance(p, str) and p.strip()
    ]

    reasoning = raw.get("outputTypeReasoning")
    return SuggestedConfig(
        output_type=output_type,
        output_type_reasoning=reasoning if isinstance(reasoning, str) else "",
        criteria=criteria,
        prompts=prompts,
        warnings=warnings,
    )


def _merge(
    generated: SuggestedConfig,
    existing: SuggestedConfig,
    generation_type: GenerationType,
) -> SuggestedConfig:
    """Take only the regenerated part from ``generated``; keep the rest of ``existing``."""
    return SuggestedConfig(
        output_type=(
            generated.output_type
            if generation_type is GenerationType.OUTPUT_TYPE
            else existing.output_type
        ),
        output_type_reasoning=(
            generated.output_type_reasoning or existing.output_type_reasoning
        ),
        criteria=(
            generated.criteria
            if generation_type is GenerationType.CRITERIA
            else existing.criteria
        ),
        prompts=(
            generated.prompts
            if generation_type is GenerationType.PROMPTS
            else existing.prompts
        ),
        warnings=generated.warnings,
    )


class ConfigSuggester:
    """One-shot helper proposing an evaluation setup for a pair of skills.

    Never raises for model or parse failures: the fallback configuration is
    returned with ``generation_error`` set instead.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        observer: SuggestionObserver,
        model: str = DEFAULT_MODEL,
    ) -> None:
        self._gateway = gateway
        self._observer = observer
        self._model = model

    async def suggest(
        self,
        api_key: str,
        skill_a: SkillDocument,
        skill_b: SkillDocument,
        generation_type: GenerationType = GenerationType.ALL,
        prompt_count: int = 50,
        existing: SuggestedConfig | None = None,
    ) -> SuggestedConfig:
        content = build_user_message(
            skill_a=skill_a,
            skill_b=skill_b,
            generation_type=generation_type,
            prompt_count=prompt_count,
            existing_output_type=existing.output_type if existing else None,
        )
        try:
            reply = await self._gateway.complete(
                api_key=api_key,
                model=self._model,
                system_prompt=SYSTEM_PROMPT,
                content=content,
                max_tokens=SUGGESTION_MAX_TOKENS,
                json_mode=True,
            )
        except SkillDuelError as exc:
            return self._fallback(generation_type, str(exc))

        if reply.parse_error is not None or not isinstance(reply.parsed, dict):
            return self._fallback(
                generation_type, "Failed to parse generated configuration"
            )

        warnings = validate_suggestion(reply.parsed)
        generated = _coerce(reply.parsed, warnings=warnings)
        if existing is not None and generation_type is not GenerationType.ALL:
            generated = _merge(generated, existing, generation_type)

        self._observer.suggestion_completed(
            generation_type=generation_type,
            criteria=len(generated.criteria),
            prompts=len(generated.prompts),
            warnings=generated.warnings,
        )
        return generated

    def _fallback(self, generation_type: GenerationType, reason: str) -> SuggestedConfig:
        self._observer.suggestion_failed(generation_type=generation_type, reason=reason)
        return FALLBACK_CONFIG.model_copy(update={"generation_error": reason})
