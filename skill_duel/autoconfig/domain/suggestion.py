"""SuggestedConfig — an evaluation setup proposed by the model from two skills."""

from enum import StrEnum

from pydantic import BaseModel

from skill_duel.config.domain.criterion import Criterion
from skill_duel.config.domain.output_type import OutputType


class GenerationType(StrEnum):
    """Which parts of the configuration a suggestion call should produce."""

    ALL = "all"
    CRITERIA = "criteria"
    PROMPTS = "prompts"
    OUTPUT_TYPE = "output_type"


class SuggestedConfig(BaseModel, frozen=True):
    """Proposed output type, criteria, and prompts.

    ``generation_error`` is set when the call failed and the fallback
    configuration was returned. ``warnings`` lists structural problems
    found in a reply that was otherwise usable.
    """

    output_type: OutputType = OutputType.TEXT
    output_type_reasoning: str = ""
    criteria: list[Criterion] = []
    prompts: list[str] = []
    generation_error: str | None = None
    warnings: list[str] = []


FALLBACK_CONFIG = SuggestedConfig(
    output_type=OutputType.TEXT,
    output_type_reasoning="Default fallback - unable to determine from skills",
    criteria=[
        Criterion(
            id="correctness",
            name="Correctness",
            description="Does the output correctly fulfill the request?",
            rubric={
                "5": "Perfectly correct with no errors",
                "4": "Mostly correct with minor issues",
                "3": "Partially correct",
                "2": "Significant errors present",
                "1": "Fundamentally incorrect",
            },
        ),
        Criterion(
            id="quality",
            name="Quality",
            description="Overall quality of the output",
            rubric={
                "5": "Exceptional quality",
                "4": "Good quality",
                "3": "Acceptable quality",
                "2": "Below average quality",
                "1": "Poor quality",
            },
        ),
        Criterion(
            id="completeness",
            name="Completeness",
            description="How complete and thorough is the output?",
            rubric={
                "5": "Thoroughly complete with extras",
                "4": "Complete",
                "3": "Mostly complete",
                "2": "Incomplete",
                "1": "Severely incomplete",
            },
        ),
    ],
    prompts=[],
)
