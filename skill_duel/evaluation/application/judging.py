"""JudgingStage — pairwise judging of generated A/B outputs."""

import asyncio
import time

from skill_duel.config.domain.criterion import Criterion
from skill_duel.config.domain.execution import ExecutionConfig
from skill_duel.config.domain.output_type import OutputType
from skill_duel.evaluation.application.generation import ItemCallback, ProgressCallback
from skill_duel.evaluation.domain.item import EvaluationItem, JudgeOutcome, JudgeStatus
from skill_duel.evaluation.domain.observer import EvaluationObserver
from skill_duel.evaluation.domain.run_state import RunProgress
from skill_duel.gateway.domain.gateway import ModelGateway
from skill_duel.judge.domain.message import build_judge_message
from skill_duel.judge.domain.parser import parse_judge_response
from skill_duel.judge.domain.prompt import build_judge_prompt
from skill_duel.rendering.domain.renderer import Renderer

PHASE = "judging"
JUDGE_SIDE = "judge"


class JudgingStage:
    """Judges every item whose two generations both completed and which is unjudged.

    Items that are not judgeable pass through untouched. A judge reply that
    cannot be parsed still completes the item, with ``scores=None``.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        renderer: Renderer | None,
        observer: EvaluationObserver,
        execution: ExecutionConfig,
    ) -> None:
        self._gateway = gateway
        self._renderer = renderer
        self._observer = observer
        self._execution = execution

    async def run(
        self,
        run_id: str,
        api_key: str,
        evaluations: list[EvaluationItem],
        criteria: list[Criterion],
        output_type: OutputType,
        judge_model: str,
        judge_max_tokens: int,
        skill_names: tuple[str, str],
        on_progress: ProgressCallback | None = None,
        on_item: ItemCallback | None = None,
    ) -> list[EvaluationItem]:
        """Judge the judgeable subset and return all items in their original order."""
        selected = [e for e in evaluations if e.is_judgeable]
        if not selected:
            return list(evaluations)

        working: dict[int, EvaluationItem] = {e.id: e for e in evaluations}
        total = len(selected)
        completed: list[int] = [0]
        sem = asyncio.Semaphore(self._execution.max_concurrent)
        system_prompt = build_judge_prompt(criteria, output_type)

        self._observer.stage_started(
            run_id=run_id,
            phase=PHASE,
            total=total,
            max_concurrent=self._execution.max_concurrent,
        )
        started_at = time.monotonic()

        async with asyncio.TaskGroup() as tg:
            for item in selected:
                tg.create_task(
                    self._judge_one(
                        sem=sem,
                        run_id=run_id,
                        api_key=api_key,
                        working=working,
                        item_id=item.id,
                        system_prompt=system_prompt,
                        output_type=output_type,
                        judge_model=judge_model,
                        judge_max_tokens=judge_max_tokens,
                        skill_names=skill_names,
                        total=total,
                        completed=completed,
                        on_progress=on_progress,
                        on_item=on_item,
                    )
                )

        judged = [working[e.id].judge for e in selected]
        self._observer.stage_completed(
            run_id=run_id,
            phase=PHASE,
            succeeded=sum(1 for j in judged if j.status is JudgeStatus.COMPLETE),
            failed=sum(1 for j in judged if j.status is JudgeStatus.ERROR),
            elapsed_seconds=time.monotonic() - started_at,
        )
        return [working[e.id] for e in evaluations]

    async def _judge_one(
        self,
        sem: asyncio.Semaphore,
        run_id: str,
        api_key: str,
        working: dict[int, EvaluationItem],
        item_id: int,
        system_prompt: str,
        output_type: OutputType,
        judge_model: str,
        judge_max_tokens: int,
        skill_names: tuple[str, str],
        total: int,
        completed: list[int],
        on_progress: ProgressCallback | None,
        on_item: ItemCallback | None,
    ) -> None:
        async with sem:
            item = working[item_id].model_copy(
                update={"judge": JudgeOutcome(status=JudgeStatus.RUNNING)}
            )
            working[item_id] = item
            if on_item is not None:
                on_item(item)
            self._observer.call_started(
                run_id=run_id, phase=PHASE, item_id=item_id, side=JUDGE_SIDE
            )

            timeout = self._execution.call_timeout_seconds
            screenshot_a: str | None = None
            screenshot_b: str | None = None
            start = time.monotonic()
            try:
                async with asyncio.timeout(timeout):
                    if output_type.needs_screenshots:
                        screenshot_a, screenshot_b = await self._capture(
                            run_id=run_id, item=item
                        )
                    content = build_judge_message(
                        prompt=item.prompt,
                        content_a=item.result_a.content,
                        content_b=item.result_b.content,
                        output_type=output_type,
                        skill_names=skill_names,
                        screenshot_a=screenshot_a,
                        screenshot_b=screenshot_b,
                    )
                    reply = await self._gateway.complete(
                        api_key=api_key,
                        model=judge_model,
                        system_prompt=system_prompt,
                        content=content,
                        max_tokens=judge_max_tokens,
                    )
            except TimeoutError:
                reason = f"Timed out after {timeout:g}s"
            except Exception as exc:
                reason = str(exc) or type(exc).__name__
            else:
                reason = None
            elapsed_ms = int((time.monotonic() - start) * 1000)

        if reason is not None:
            # Screenshots of a failed judgment are not kept.
            updated = item.model_copy(
                update={
                    "screenshot_a": None,
                    "screenshot_b": None,
                    "judge": JudgeOutcome(
                        status=JudgeStatus.ERROR,
                        raw_text=f"Error: {reason}",
                        elapsed_ms=elapsed_ms,
                    ),
                }
            )
            self._observer.call_failed(
                run_id=run_id,
                phase=PHASE,
                item_id=item_id,
                side=JUDGE_SIDE,
                reason=reason,
            )
        else:
            scores = parse_judge_response(reply.text)
            if scores is None:
                self._observer.judge_unparseable(run_id=run_id, item_id=item_id)
            updated = item.model_copy(
                update={
                    "screenshot_a": screenshot_a,
                    "screenshot_b": screenshot_b,
                    "judge": JudgeOutcome(
                        status=JudgeStatus.COMPLETE,
                        raw_text=reply.text,
                        scores=scores,
                        elapsed_ms=elapsed_ms,
                    ),
                }
            )
            self._observer.call_completed(
                run_id=run_id,
                phase=PHASE,
                item_id=item_id,
                side=JUDGE_SIDE,
                elapsed_ms=elapsed_ms,
            )

        working[item_id] = updated
        completed[0] += 1
        progress = RunProgress(current=completed[0], total=total, phase=PHASE)
        self._observer.stage_progress(
            run_id=run_id, phase=PHASE, current=progress.current, total=total
        )
        if on_progress is not None:
            on_progress(progress, updated)

    async def _capture(
        self, run_id: str, item: EvaluationItem
    ) -> tuple[str | None, str | None]:
        """Render both outputs concurrently; a missing renderer or failed render yields None."""
        if self._renderer is None:
            shots: list[str | None] = [None, None]
        else:
            results = await asyncio.gather(
                self._renderer.render(item.result_a.content),
                self._renderer.render(item.result_b.content),
                return_exceptions=True,
            )
            shots = [r if isinstance(r, str) else None for r in results]
        for side, shot in zip(("A", "B"), shots):
            if shot is None:
                self._observer.screenshot_missing(
                    run_id=run_id, item_id=item.id, side=side
                )
        return shots[0], shots[1]
