"""Observer port for the autoconfig domain."""

from typing import Protocol


class SuggestionObserver(Protocol):
    """Observer port for configuration suggestion events.

    Implementations may log to structlog or record for tests.
    """

    def suggestion_completed(
        self, generation_type: str, criteria: int, prompts: int, warnings: list[str]
    ) -> None: ...

    def suggestion_failed(self, generation_type: str, reason: str) -> None: ...
