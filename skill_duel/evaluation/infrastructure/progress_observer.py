"""ProgressEvaluationObserver — renders a Rich progress bar per stage to stderr."""

from __future__ import annotations

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.text import Text

_PHASE_LABELS: dict[str, str] = {
    "generating": "[cyan]Generating[/cyan]",
    "judging": "[magenta]Judging[/magenta]",
}


class _CountsColumn(ProgressColumn):
    """Renders done+inflight/total with colors matching the bar segments."""

    def render(self, task: Task) -> Text:
        done = int(task.fields.get("done", 0))
        inflight = int(task.fields.get("inflight", 0))
        failed = int(task.fields.get("failed", 0))
        text = Text.assemble(
            (str(done), "bright_green"),
            ("+", "dim white"),
            (str(inflight), "grey50"),
            ("/", "dim white"),
            (str(int(task.total or 0)), "default"),
        )
        if failed:
            text.append(f"  {failed} failed", style="red")
        return text


class _ThreeSegmentBarColumn(ProgressColumn):
    """Done, in-flight, and remaining cells side by side."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        total = task.total or 0
        if total > 0:
            done_cells = int(task.completed / total * self.bar_width)
            inflight = int(task.fields.get("inflight", 0))
            inflight_cells = min(
                int(inflight / total * self.bar_width),
                self.bar_width - done_cells,
            )
        else:
            done_cells = 0
            inflight_cells = 0

        result = Text()
        result.append("█" * done_cells, style="bright_green")
        result.append("▒" * inflight_cells, style="grey50")
        result.append(
            "░" * (self.bar_width - done_cells - inflight_cells), style="dim white"
        )
        return result


class ProgressEvaluationObserver:
    """Renders one live progress row for the stage currently running.

    Only stage and call lifecycle events produce output; everything else is
    a no-op. Pass ``disabled=True`` to track counts without drawing.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._done = 0
        self._inflight = 0
        self._failed = 0
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._live: Live | None = None

    @property
    def counts(self) -> tuple[int, int, int]:
        """Return (done, inflight, failed) for the current stage."""
        return self._done, self._inflight, self._failed

    def _update(self) -> None:
        if self._progress is None or self._task_id is None:
            return
        self._progress.update(
            self._task_id,
            completed=self._done,
            done=self._done,
            inflight=self._inflight,
            failed=self._failed,
        )

    def stage_started(
        self, run_id: str, phase: str, total: int, max_concurrent: int
    ) -> None:
        self._done = 0
        self._inflight = 0
        self._failed = 0
        if self._disabled:
            return

        console = Console(stderr=True)
        self._progress = Progress(
            TextColumn("{task.description}"),
            _ThreeSegmentBarColumn(bar_width=40),
            _CountsColumn(),
            TimeElapsedColumn(),
            TextColumn("eta"),
            TimeRemainingColumn(),
            console=console,
            refresh_per_second=10,
            transient=False,
        )
        self._task_id = self._progress.add_task(
            description=_PHASE_LABELS.get(phase, phase),
            total=float(total),
            done=0,
            inflight=0,
            failed=0,
        )
        legend = Text.assemble(
            "  Legend:  ",
            ("█", "bright_green"),
            " done  ",
            ("▒", "grey50"),
            " in-flight  ",
            ("░", "dim white"),
            " remaining",
        )
        self._live = Live(
            Group(self._progress, Text(""), legend),
            console=console,
            refresh_per_second=10,
        )
        self._live.start()

    def stage_progress(self, run_id: str, phase: str, current: int, total: int) -> None:
        self._done = current
        self._inflight = max(0, self._inflight - 1)
        if not self._disabled:
            self._update()

    def stage_completed(
        self,
        run_id: str,
        phase: str,
        succeeded: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None:
        if self._live is not None:
            self._live.stop()
        self._progress = None
        self._task_id = None
        self._live = None

    def call_started(self, run_id: str, phase: str, item_id: int, side: str) -> None:
        self._inflight += 1
        if not self._disabled:
            self._update()

    def call_completed(
        self, run_id: str, phase: str, item_id: int, side: str, elapsed_ms: int
    ) -> None:
        pass

    def call_failed(
        self, run_id: str, phase: str, item_id: int, side: str, reason: str
    ) -> None:
        self._failed += 1

    def screenshot_missing(self, run_id: str, item_id: int, side: str) -> None:
        pass

    def judge_unparseable(self, run_id: str, item_id: int) -> None:
        pass

    def run_rejected(self, phase: str, reason: str) -> None:
        pass

    def run_failed(self, run_id: str, phase: str, reason: str) -> None:
        if self._live is not None:
            self._live.stop()
        self._progress = None
        self._task_id = None
        self._live = None

    def stale_result_discarded(self, run_id: str, item_id: int | None) -> None:
        pass

    def state_persist_failed(self, reason: str) -> None:
        pass

    def state_cleared(self) -> None:
        pass
