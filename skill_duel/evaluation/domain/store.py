"""RunStateStore Protocol — durable persistence of the run state."""

from typing import Protocol

from skill_duel.evaluation.domain.run_state import RunState


class RunStateStore(Protocol):
    """Structural interface for run state persistence.

    ``save`` may raise StateStoreError; the controller treats persistence as
    best-effort and keeps orchestrating.
    """

    def load(self) -> RunState | None: ...

    def save(self, state: RunState) -> None: ...

    def clear(self) -> None: ...
