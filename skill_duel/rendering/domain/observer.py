"""RendererObserver port — domain events emitted by the screenshot client."""

from typing import Protocol


class RendererObserver(Protocol):
    def render_completed(self, duration_ms: int, size_bytes: int) -> None: ...

    def render_failed(self, reason: str) -> None: ...

    def renderer_unavailable(self, url: str, reason: str) -> None: ...
