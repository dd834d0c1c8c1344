"""ParsedScore — structured verdict recovered from a judge reply."""

from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

Winner: TypeAlias = Literal["A", "B", "tie"]

_TIE_WORDS = frozenset({"TIE", "DRAW", "EVEN"})


class CriterionScore(BaseModel):
    """Per-criterion pair of 1-5 scores, serialised as ``{"A": x, "B": y}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    a: int | float | None = Field(default=None, alias="A")
    b: int | float | None = Field(default=None, alias="B")


class ParsedScore(BaseModel):
    """Immutable judge verdict.

    ``winner`` is None when the judge named no usable winner; a tie is the
    explicit value ``"tie"``. Score fields are None when the verdict came from
    the bold-marker fallback rather than the JSON block.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    winner: Winner | None = None
    score_a: int | float | None = Field(default=None, alias="scoreA")
    score_b: int | float | None = Field(default=None, alias="scoreB")
    breakdown: dict[str, CriterionScore] | None = None

    @field_validator("winner", mode="before")
    @classmethod
    def _normalise_winner(cls, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        label = value.strip().strip("*[]").strip().upper()
        if label in ("A", "B"):
            return label
        if label in _TIE_WORDS:
            return "tie"
        return None
