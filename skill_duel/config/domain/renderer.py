"""Rendering service configuration model."""

from pydantic import BaseModel, Field


class RendererConfig(BaseModel, frozen=True):
    url: str = Field(default="http://localhost:3001", min_length=1)
    width: int = Field(default=1200, ge=1)
    height: int = Field(default=800, ge=1)
    health_timeout_seconds: float = Field(default=3.0, gt=0)
    render_timeout_seconds: float = Field(default=60.0, gt=0)
