"""EvaluationRunController — owns the run state and sequences the two stages."""

import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from skill_duel.config.domain.config import EvalConfig
from skill_duel.evaluation.application.generation import GenerationStage
from skill_duel.evaluation.application.judging import JudgingStage
from skill_duel.evaluation.domain.errors import RunRejectedError, StateStoreError
from skill_duel.evaluation.domain.item import EvaluationItem, fresh_items
from skill_duel.evaluation.domain.observer import EvaluationObserver
from skill_duel.evaluation.domain.run_state import RunPhase, RunProgress, RunState
from skill_duel.evaluation.domain.stats import RunStats, compute_stats
from skill_duel.evaluation.domain.store import RunStateStore


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _describe(exc: BaseException) -> str:
    """Return the most specific message available for a stage failure."""
    while isinstance(exc, BaseExceptionGroup) and exc.exceptions:
        exc = exc.exceptions[0]
    return str(exc) or type(exc).__name__


class EvaluationRunController:
    """Single owner of the RunState for one configuration.

    Stages hand back updated item copies through callbacks; the controller
    merges them by id and persists after every change. Every fresh generation
    and every ``clear()`` bumps an epoch token, and callbacks or results that
    belong to an older epoch are discarded.
    """

    def __init__(
        self,
        config: EvalConfig,
        generation_stage: GenerationStage,
        judging_stage: JudgingStage,
        store: RunStateStore,
        observer: EvaluationObserver,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._generation = generation_stage
        self._judging = judging_stage
        self._store = store
        self._observer = observer
        self._clock = clock
        self._epoch = 0
        self._state = self._restore()

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def stats(self) -> RunStats:
        return compute_stats(self._state.evaluations)

    async def run_generations(self) -> bool:
        """Start a fresh batch: N pending items, then generate both sides of each.

        Returns False when the run was rejected, failed, or was superseded by
        ``clear()`` before it finished.
        """
        try:
            self._check_idle()
            self._check_api_key()
        except RunRejectedError as exc:
            self._reject(RunPhase.GENERATING, exc)
            return False

        self._epoch += 1
        epoch = self._epoch
        run_id = str(uuid.uuid4())
        items = fresh_items(self._config.prompts)
        self._commit(
            RunState(
                evaluations=items,
                phase=RunPhase.GENERATING,
                progress=RunProgress(
                    current=0, total=len(items) * 2, phase=RunPhase.GENERATING
                ),
                started_at=self._clock(),
            )
        )

        try:
            results = await self._generation.run(
                run_id=run_id,
                api_key=self._config.api_key,
                skill_a=self._config.skill_a,
                skill_b=self._config.skill_b,
                prompts=self._config.prompts,
                model=self._config.models.generation_model,
                max_tokens=self._config.models.max_tokens,
                base_system_prompt=self._config.base_system_prompt,
                on_progress=self._progress_callback(run_id, epoch),
                on_item=self._item_callback(run_id, epoch),
            )
        except Exception as exc:
            return self._fail(run_id, epoch, RunPhase.GENERATING, exc)

        return self._finish(run_id, epoch, results, RunPhase.IDLE)

    async def run_judgments(self) -> bool:
        """Judge every item whose generations both completed and is not yet judged."""
        try:
            self._check_idle()
            self._check_api_key()
            if not compute_stats(self._state.evaluations).can_judge:
                raise RunRejectedError("no generated evaluations are waiting to be judged")
        except RunRejectedError as exc:
            self._reject(RunPhase.JUDGING, exc)
            return False

        epoch = self._epoch
        run_id = str(uuid.uuid4())
        pending = sum(1 for e in self._state.evaluations if e.is_judgeable)
        self._commit(
            self._state.model_copy(
                update={
                    "phase": RunPhase.JUDGING,
                    "error": None,
                    "progress": RunProgress(
                        current=0, total=pending, phase=RunPhase.JUDGING
                    ),
                }
            )
        )

        try:
            results = await self._judging.run(
                run_id=run_id,
                api_key=self._config.api_key,
                evaluations=self._state.evaluations,
                criteria=self._config.criteria,
                output_type=self._config.output_type,
                judge_model=self._config.models.judge_model,
                judge_max_tokens=self._config.models.judge_max_tokens,
                skill_names=self._config.skill_names,
                on_progress=self._progress_callback(run_id, epoch),
                on_item=self._item_callback(run_id, epoch),
            )
        except Exception as exc:
            return self._fail(run_id, epoch, RunPhase.JUDGING, exc)

        return self._finish(run_id, epoch, results, RunPhase.COMPLETE)

    def clear(self) -> None:
        """Reset to idle with no items and drop the persisted state.

        Any stage still in flight keeps running but its results are discarded.
        """
        self._epoch += 1
        self._state = RunState()
        try:
            self._store.clear()
        except StateStoreError as exc:
            self._observer.state_persist_failed(reason=str(exc))
        self._observer.state_cleared()

    def _check_idle(self) -> None:
        if self._state.is_busy:
            raise RunRejectedError(f"a {self._state.phase} run is already in progress")

    def _check_api_key(self) -> None:
        if not self._config.api_key:
            raise RunRejectedError("API key is required")

    def _reject(self, phase: RunPhase, exc: RunRejectedError) -> None:
        self._observer.run_rejected(phase=phase, reason=exc.reason)
        if not self._state.is_busy:
            self._commit(self._state.model_copy(update={"error": str(exc)}))

    def _progress_callback(
        self, run_id: str, epoch: int
    ) -> Callable[[RunProgress, EvaluationItem], None]:
        def on_progress(progress: RunProgress, item: EvaluationItem) -> None:
            if epoch != self._epoch:
                self._observer.stale_result_discarded(run_id=run_id, item_id=item.id)
                return
            self._commit(
                self._state.with_item(item).model_copy(update={"progress": progress})
            )

        return on_progress

    def _item_callback(
        self, run_id: str, epoch: int
    ) -> Callable[[EvaluationItem], None]:
        def on_item(item: EvaluationItem) -> None:
            if epoch != self._epoch:
                self._observer.stale_result_discarded(run_id=run_id, item_id=item.id)
                return
            self._commit(self._state.with_item(item))

        return on_item

    def _finish(
        self,
        run_id: str,
        epoch: int,
        results: list[EvaluationItem],
        phase: RunPhase,
    ) -> bool:
        if epoch != self._epoch:
            self._observer.stale_result_discarded(run_id=run_id, item_id=None)
            return False
        state = self._state
        for item in results:
            state = state.with_item(item)
        self._commit(
            state.model_copy(update={"phase": phase, "ended_at": self._clock()})
        )
        return True

    def _fail(self, run_id: str, epoch: int, phase: RunPhase, exc: Exception) -> bool:
        """Record a stage-level failure; items already settled are kept."""
        if epoch != self._epoch:
            self._observer.stale_result_discarded(run_id=run_id, item_id=None)
            return False
        reason = _describe(exc)
        self._observer.run_failed(run_id=run_id, phase=phase, reason=reason)
        self._commit(
            self._state.model_copy(
                update={
                    "phase": RunPhase.IDLE,
                    "error": reason,
                    "ended_at": self._clock(),
                }
            ).recovered()
        )
        return False

    def _commit(self, state: RunState) -> None:
        self._state = state
        try:
            self._store.save(state)
        except StateStoreError as exc:
            self._observer.state_persist_failed(reason=str(exc))

    def _restore(self) -> RunState:
        try:
            persisted = self._store.load()
        except StateStoreError as exc:
            self._observer.state_persist_failed(reason=str(exc))
            return RunState()
        if persisted is None:
            return RunState()
        return persisted.recovered()
