"""Execution configuration models."""

from pydantic import BaseModel, Field


class ExecutionConfig(BaseModel, frozen=True):
    max_concurrent: int = Field(default=8, ge=1)
    call_timeout_seconds: float = Field(default=300.0, gt=0)
