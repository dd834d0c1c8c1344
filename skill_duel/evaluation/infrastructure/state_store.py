"""JsonRunStateStore — persists the run state as one JSON document on disk."""

import os
from pathlib import Path

from pydantic import ValidationError

from skill_duel.evaluation.domain.errors import StateStoreError
from skill_duel.evaluation.domain.run_state import RunState


class JsonRunStateStore:
    """Stores the RunState at ``path``; a missing file means no prior run.

    Writes go to a sibling temp file that is then swapped into place, so a
    crash mid-write leaves the previous document intact.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> RunState | None:
        """Return the persisted state, or None when nothing has been saved.

        Raises:
            StateStoreError: if the file exists but cannot be read or decoded.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StateStoreError(f"{self._path}: {exc}") from exc
        try:
            return RunState.model_validate_json(raw)
        except ValidationError as exc:
            raise StateStoreError(f"{self._path} is not a valid run state") from exc

    def save(self, state: RunState) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(state.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise StateStoreError(f"{self._path}: {exc}") from exc

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            raise StateStoreError(f"{self._path}: {exc}") from exc
