"""
Stage tasks - explicit handles for concurrent remote calls.

Each StageTask owns one asyncio task and its own timer. When the timer
fires only that task is cancelled; siblings keep running.

Two join disciplines are used by the pipeline:

    join_critical(render, images)
        The critical branch fails fast: if it raises, the optional branches
        are cancelled and the error propagates. Otherwise the optional
        branches are settled.

    settle_all(images)
        Waits for every branch. A failed branch yields None instead of an
        exception, so one image failing never affects another.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from explainer.ai.pipeline.errors import StageTimeoutError

logger = logging.getLogger("explainer.ai.pipeline.tasks")

T = TypeVar("T")


class StageTask(Generic[T]):
    """
    A named, independently timed unit of work.

    Usage:
        render = StageTask("render", client.complete(...), timeout_s=45)
        html = await render
    """

    def __init__(
        self,
        name: str,
        awaitable: Awaitable[T],
        timeout_s: float,
        on_timeout: Optional[Callable[["StageTask"], None]] = None,
    ):
        self.name = name
        self.timeout_s = timeout_s
        self._on_timeout = on_timeout
        self.task: "asyncio.Future[T]" = asyncio.ensure_future(self._run(awaitable))

    async def _run(self, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            if self._on_timeout is not None:
                self._on_timeout(self)
            raise StageTimeoutError(self.name, self.timeout_s) from e

    def cancel(self) -> None:
        self.task.cancel()

    def done(self) -> bool:
        return self.task.done()

    def __await__(self):
        return self.task.__await__()

    def __repr__(self) -> str:
        return f"StageTask(name={self.name!r}, timeout_s={self.timeout_s})"


async def settle_all(tasks: Sequence[StageTask]) -> List[Optional[Any]]:
    """Wait for every task; failures become None (logged, not raised)."""
    if not tasks:
        return []

    outcomes = await asyncio.gather(*(t.task for t in tasks), return_exceptions=True)

    results: List[Optional[Any]] = []
    for stage, outcome in zip(tasks, outcomes):
        if isinstance(outcome, BaseException):
            logger.warning(f"Optional stage {stage.name} failed: {outcome}")
            results.append(None)
        else:
            results.append(outcome)
    return results


async def join_critical(
    critical: StageTask[T],
    optional: Sequence[StageTask],
) -> Tuple[T, List[Optional[Any]]]:
    """
    Await the critical task, then settle the optional ones.

    If the critical task fails (or the caller is cancelled while waiting),
    the optional tasks are cancelled before the error propagates.
    """
    try:
        result = await critical
    except BaseException:
        for stage in optional:
            stage.cancel()
        await asyncio.gather(*(t.task for t in optional), return_exceptions=True)
        raise

    return result, await settle_all(optional)
