"""Structlog implementation of the SuggestionObserver port."""

import structlog


class StructlogSuggestionObserver:
    """Delegates suggestion events to structlog.

    Satisfies the SuggestionObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def suggestion_completed(
        self, generation_type: str, criteria: int, prompts: int, warnings: list[str]
    ) -> None:
        self._log.info(
            "autoconfig.suggestion.completed",
            generation_type=generation_type,
            criteria=criteria,
            prompts=prompts,
        )
        for warning in warnings:
            self._log.warning(
                "autoconfig.suggestion.invalid_field",
                generation_type=generation_type,
                message=warning,
            )

    def suggestion_failed(self, generation_type: str, reason: str) -> None:
        self._log.error(
            "autoconfig.suggestion.failed",
            generation_type=generation_type,
            reason=reason,
        )
