"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, name: str, prompts: int, criteria: int) -> None: ...

    def config_rubric_incomplete(
        self, criterion_id: str, levels: list[str]
    ) -> None: ...
