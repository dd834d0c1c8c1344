"""GatewayObserver port — domain events emitted around model calls."""

from typing import Protocol


class GatewayObserver(Protocol):
    """Observer port for model gateway events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def gateway_call_started(self, model: str, has_images: bool) -> None: ...

    def gateway_call_completed(self, model: str, duration_ms: int) -> None: ...

    def gateway_call_failed(self, model: str, reason: str) -> None: ...

    def gateway_json_unparseable(self, model: str, reason: str) -> None: ...
