"""Top-level EvalConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field, field_validator

from skill_duel.config.domain.criterion import Criterion
from skill_duel.config.domain.execution import ExecutionConfig
from skill_duel.config.domain.models import ModelsConfig
from skill_duel.config.domain.output_type import OutputType
from skill_duel.config.domain.renderer import RendererConfig
from skill_duel.config.domain.skill import SkillDocument


class EvalConfig(BaseModel, frozen=True):
    """Root configuration aggregate for one A/B skill comparison.

    Passed explicitly into the run controller; nothing in the evaluation
    core reads ambient settings.
    """

    name: str = Field(min_length=1)
    skill_a: SkillDocument
    skill_b: SkillDocument
    base_system_prompt: str = ""
    output_type: OutputType = OutputType.TEXT
    criteria: list[Criterion] = Field(min_length=1)
    prompts: list[str] = Field(min_length=1)
    models: ModelsConfig = ModelsConfig()
    execution: ExecutionConfig = ExecutionConfig()
    renderer: RendererConfig = RendererConfig()
    api_key: str = ""

    @field_validator("prompts")
    @classmethod
    def _prompts_not_blank(cls, prompts: list[str]) -> list[str]:
        blank = [str(i) for i, p in enumerate(prompts) if not p.strip()]
        if blank:
            raise ValueError(f"prompts at index {', '.join(blank)} are blank")
        return prompts

    @property
    def skill_names(self) -> tuple[str, str]:
        return self.skill_a.name, self.skill_b.name
