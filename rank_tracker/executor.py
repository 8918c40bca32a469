# File: rank_tracker/executor.py
"""rank_tracker.executor: bounded-concurrency execution of fetch tasks.

Concurrency lives only at the I/O boundary: ``fn`` calls overlap, while
admission, result collection and the ``on_result`` callback all run on the
single event-loop task that called :func:`run_bounded`.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Set

from rank_tracker.logger import logger
from rank_tracker.models import TaskResult

__all__ = ["run_bounded"]

FetchFn = Callable[[Any], Awaitable[Any]]
ResultCallback = Callable[[TaskResult, int, int], None]


def _describe(task: Any) -> str:
    return getattr(task, "description", None) or repr(task)


async def _guarded(index: int, task: Any, fn: FetchFn) -> TaskResult:
    """Run one task; any failure becomes part of its result."""
    try:
        value = await fn(task)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.error("Task %s failed: %s: %s", _describe(task), type(exc).__name__, exc)
        return TaskResult(index=index, task=task, error=exc)
    return TaskResult(index=index, task=task, value=value)


async def run_bounded(
    tasks: Sequence[Any],
    concurrency: int,
    fn: FetchFn,
    on_result: Optional[ResultCallback] = None,
) -> List[TaskResult]:
    """
    Execute ``fn(task)`` once per task with at most *concurrency* calls in flight.

    Parameters
    ----------
    tasks
        Tasks in submission order.
    concurrency
        Upper bound of outstanding calls, must be >= 1.
    fn
        Coroutine function; it may raise, the error is caught per task.
    on_result
        Called as ``on_result(result, done, total)`` after each completion.

    Returns
    -------
    List[TaskResult]
        One result per task in completion order. ``TaskResult.index`` gives
        the submission position.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    total = len(tasks)
    results: List[TaskResult] = []
    in_flight: Set[asyncio.Task[TaskResult]] = set()
    order: Dict[asyncio.Task[TaskResult], int] = {}

    def _collect(finished: Set[asyncio.Task[TaskResult]]) -> None:
        # asyncio.wait hands back an unordered set; ties are broken by index
        for fut in sorted(finished, key=order.__getitem__):
            result = fut.result()
            results.append(result)
            if on_result is not None:
                on_result(result, len(results), total)

    try:
        for index, task in enumerate(tasks):
            if len(in_flight) >= concurrency:
                done, in_flight = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
                _collect(done)
            fut = asyncio.create_task(_guarded(index, task, fn))
            order[fut] = index
            in_flight.add(fut)

        while in_flight:
            done, in_flight = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
            _collect(done)
    finally:
        for fut in in_flight:
            fut.cancel()

    logger.debug("Executor finished %d/%d tasks", len(results), total)
    return results
