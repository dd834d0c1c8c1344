"""Error types raised by the evaluation context."""

from skill_duel.core.errors import SkillDuelError


class RunRejectedError(SkillDuelError):
    """Raised by pre-flight checks when a stage cannot start.

    The controller catches it and records the message as the run-level error.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to start run: {reason}")


class StateStoreError(SkillDuelError):
    """Raised when the run state cannot be written to or read from storage."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to persist run state: {reason}")
