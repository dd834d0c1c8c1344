"""Structlog implementation of the GatewayObserver port."""

import structlog


class StructlogGatewayObserver:
    """Logs gateway domain events to structlog.

    Does NOT inherit from GatewayObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def gateway_call_started(self, model: str, has_images: bool) -> None:
        self._log.debug("gateway.call.started", model=model, has_images=has_images)

    def gateway_call_completed(self, model: str, duration_ms: int) -> None:
        self._log.debug("gateway.call.completed", model=model, duration_ms=duration_ms)

    def gateway_call_failed(self, model: str, reason: str) -> None:
        self._log.warning("gateway.call.failed", model=model, reason=reason)

    def gateway_json_unparseable(self, model: str, reason: str) -> None:
        self._log.warning("gateway.json.unparseable", model=model, reason=reason)
