"""Criterion model — one rubric-scored dimension used by the judge."""

from typing import TypeAlias

from pydantic import BaseModel, Field

CriterionId: TypeAlias = str

RUBRIC_LEVELS: tuple[str, ...] = ("1", "2", "3", "4", "5")


class Criterion(BaseModel, frozen=True):
    """A named quality dimension scored 1-5.

    ``rubric`` maps the level ("1".."5") to the anchor text for that level.
    Exactly five levels are expected; the loader warns rather than fails
    when a rubric has a different shape.
    """

    id: CriterionId = Field(min_length=1, pattern=r"^[A-Za-z0-9_\-]+$")
    name: str = Field(min_length=1)
    description: str = ""
    rubric: dict[str, str] = Field(default_factory=dict)

    def has_complete_rubric(self) -> bool:
        return sorted(self.rubric.keys()) == list(RUBRIC_LEVELS)
