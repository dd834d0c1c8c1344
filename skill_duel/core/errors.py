"""Base exception class for all skill-duel-specific errors."""


class SkillDuelError(Exception):
    """Base class for all skill-duel errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
