"""Error types raised by gateway infrastructure."""

from skill_duel.core.errors import SkillDuelError

_RETRIABLE_STATUS_CODES = frozenset({429, 503, 529})


class GatewayInvocationError(SkillDuelError):
    """Raised when the model API call fails or returns no usable response.

    ``status_code`` carries the upstream HTTP status when the provider reported one.
    Rate-limit and overload statuses are marked retriable; nothing in this
    package retries automatically.
    """

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        super().__init__(
            f"Failed to call model: {reason}",
            retriable=status_code in _RETRIABLE_STATUS_CODES,
        )
