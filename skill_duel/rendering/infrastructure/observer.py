"""Structlog implementation of the RendererObserver port."""

import structlog


class StructlogRendererObserver:
    """Logs rendering events to structlog.

    Does NOT inherit from RendererObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def render_completed(self, duration_ms: int, size_bytes: int) -> None:
        self._log.debug(
            "rendering.capture.completed", duration_ms=duration_ms, size_bytes=size_bytes
        )

    def render_failed(self, reason: str) -> None:
        self._log.warning("rendering.capture.failed", reason=reason)

    def renderer_unavailable(self, url: str, reason: str) -> None:
        self._log.warning("rendering.health.unavailable", url=url, reason=reason)
