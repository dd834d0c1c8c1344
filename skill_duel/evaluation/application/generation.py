"""GenerationStage — runs every prompt against both skills."""

import asyncio
import time
from collections.abc import Callable
from typing import TypeAlias

from skill_duel.config.domain.execution import ExecutionConfig
from skill_duel.config.domain.skill import SkillDocument
from skill_duel.evaluation.domain.item import (
    EvaluationItem,
    GenerationResult,
    GenStatus,
    Side,
    fresh_items,
)
from skill_duel.evaluation.domain.observer import EvaluationObserver
from skill_duel.evaluation.domain.run_state import RunProgress
from skill_duel.gateway.domain.gateway import ModelGateway

PHASE = "generating"

ProgressCallback: TypeAlias = Callable[[RunProgress, EvaluationItem], None]
ItemCallback: TypeAlias = Callable[[EvaluationItem], None]


def compose_system_prompt(base_system_prompt: str, skill_content: str) -> str:
    if base_system_prompt:
        return f"{base_system_prompt}\n\n{skill_content}"
    return skill_content


class GenerationStage:
    """Fans out N prompts x 2 skills into gateway calls, bounded by max_concurrent.

    Each call's outcome is written into its own side of the item the moment
    it settles; a failed side is recorded as an error and never retried.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        observer: EvaluationObserver,
        execution: ExecutionConfig,
    ) -> None:
        self._gateway = gateway
        self._observer = observer
        self._execution = execution

    async def run(
        self,
        run_id: str,
        api_key: str,
        skill_a: SkillDocument,
        skill_b: SkillDocument,
        prompts: list[str],
        model: str,
        max_tokens: int,
        base_system_prompt: str,
        on_progress: ProgressCallback | None = None,
        on_item: ItemCallback | None = None,
    ) -> list[EvaluationItem]:
        """Generate both outputs for every prompt and return the items in prompt order.

        Returns only after all 2N calls have settled. ``on_progress`` fires once
        per settled call with a monotonically increasing ``current`` out of
        ``2N`` and carries the settled item; ``on_item`` fires only when a call
        starts running.
        """
        items = fresh_items(prompts)
        working: dict[int, EvaluationItem] = {item.id: item for item in items}
        total = len(items) * 2
        completed: list[int] = [0]
        sem = asyncio.Semaphore(self._execution.max_concurrent)
        system_prompts: dict[Side, str] = {
            "A": compose_system_prompt(base_system_prompt, skill_a.content),
            "B": compose_system_prompt(base_system_prompt, skill_b.content),
        }

        self._observer.stage_started(
            run_id=run_id,
            phase=PHASE,
            total=total,
            max_concurrent=self._execution.max_concurrent,
        )
        started_at = time.monotonic()

        async with asyncio.TaskGroup() as tg:
            for item in items:
                for side in ("A", "B"):
                    tg.create_task(
                        self._generate_one(
                            sem=sem,
                            run_id=run_id,
                            api_key=api_key,
                            working=working,
                            item_id=item.id,
                            side=side,
                            system_prompt=system_prompts[side],
                            model=model,
                            max_tokens=max_tokens,
                            total=total,
                            completed=completed,
                            on_progress=on_progress,
                            on_item=on_item,
                        )
                    )

        results = [working[item.id] for item in items]
        sides = [r for item in results for r in (item.result_a, item.result_b)]
        self._observer.stage_completed(
            run_id=run_id,
            phase=PHASE,
            succeeded=sum(1 for r in sides if r.status is GenStatus.COMPLETE),
            failed=sum(1 for r in sides if r.status is GenStatus.ERROR),
            elapsed_seconds=time.monotonic() - started_at,
        )
        return results

    async def _generate_one(
        self,
        sem: asyncio.Semaphore,
        run_id: str,
        api_key: str,
        working: dict[int, EvaluationItem],
        item_id: int,
        side: Side,
        system_prompt: str,
        model: str,
        max_tokens: int,
        total: int,
        completed: list[int],
        on_progress: ProgressCallback | None,
        on_item: ItemCallback | None,
    ) -> None:
        """Run one side of one item; every failure becomes an error outcome."""
        async with sem:
            item = working[item_id].with_result(
                side, GenerationResult(status=GenStatus.RUNNING)
            )
            working[item_id] = item
            if on_item is not None:
                on_item(item)
            self._observer.call_started(
                run_id=run_id, phase=PHASE, item_id=item_id, side=side
            )

            timeout = self._execution.call_timeout_seconds
            start = time.monotonic()
            try:
                async with asyncio.timeout(timeout):
                    reply = await self._gateway.complete(
                        api_key=api_key,
                        model=model,
                        system_prompt=system_prompt,
                        content=item.prompt,
                        max_tokens=max_tokens,
                    )
            except TimeoutError:
                result = _error_result(f"Timed out after {timeout:g}s", start)
            except Exception as exc:
                result = _error_result(str(exc) or type(exc).__name__, start)
            else:
                result = GenerationResult(
                    content=reply.text,
                    elapsed_ms=_elapsed_ms(start),
                    status=GenStatus.COMPLETE,
                )

        if result.status is GenStatus.ERROR:
            self._observer.call_failed(
                run_id=run_id,
                phase=PHASE,
                item_id=item_id,
                side=side,
                reason=result.error or "",
            )
        else:
            self._observer.call_completed(
                run_id=run_id,
                phase=PHASE,
                item_id=item_id,
                side=side,
                elapsed_ms=result.elapsed_ms or 0,
            )

        # No await between read and write: the sibling side cannot interleave.
        item = working[item_id].with_result(side, result)
        working[item_id] = item
        completed[0] += 1
        progress = RunProgress(current=completed[0], total=total, phase=PHASE)
        self._observer.stage_progress(
            run_id=run_id, phase=PHASE, current=progress.current, total=total
        )
        if on_progress is not None:
            on_progress(progress, item)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _error_result(reason: str, start: float) -> GenerationResult:
    return GenerationResult(
        content="",
        error=reason,
        elapsed_ms=_elapsed_ms(start),
        status=GenStatus.ERROR,
    )
