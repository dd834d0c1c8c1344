"""Renderer Protocol — visual capture of model output."""

from typing import Protocol

from pydantic import BaseModel


class RendererHealth(BaseModel, frozen=True):
    available: bool
    status: str | None = None
    browser_running: bool | None = None
    error: str | None = None


class Renderer(Protocol):
    """Structural interface for the screenshot service.

    ``render`` never raises: any failure yields None and the caller proceeds
    without the image.
    """

    async def render(self, html: str) -> str | None: ...

    async def health(self) -> RendererHealth: ...
