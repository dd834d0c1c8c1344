"""Model selection for the generation and judging passes."""

from pydantic import BaseModel, Field

DEFAULT_MODEL = "anthropic/claude-sonnet-4-5-20250929"


class ModelsConfig(BaseModel, frozen=True):
    generation_model: str = Field(default=DEFAULT_MODEL, min_length=1)
    judge_model: str = Field(default=DEFAULT_MODEL, min_length=1)
    max_tokens: int = Field(default=8192, ge=1)
    judge_max_tokens: int = Field(default=4096, ge=1)
