"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, name: str, prompts: int, criteria: int) -> None:
        self._log.info("config.loaded", name=name, prompts=prompts, criteria=criteria)

    def config_rubric_incomplete(self, criterion_id: str, levels: list[str]) -> None:
        self._log.warning(
            "config.rubric_incomplete",
            criterion_id=criterion_id,
            levels=levels,
            message="Rubric should define exactly the levels 1-5",
        )
