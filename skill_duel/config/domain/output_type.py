"""Output modality of the evaluated skills."""

from enum import StrEnum


class OutputType(StrEnum):
    TEXT = "text"
    VISUAL = "visual"
    BOTH = "both"

    @property
    def needs_screenshots(self) -> bool:
        return self in (OutputType.VISUAL, OutputType.BOTH)

    @property
    def includes_source(self) -> bool:
        return self in (OutputType.TEXT, OutputType.BOTH)
