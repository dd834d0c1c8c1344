"""Skill document model — one of the two instruction sets under comparison."""

from pydantic import BaseModel, Field


class SkillDocument(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    content: str = Field(min_length=1)
