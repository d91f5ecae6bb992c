# ABOUTME: Structured fan-out for concurrent work inside a sync run
# ABOUTME: First failure cancels sibling tasks and is re-raised as the original exception

import asyncio
from collections.abc import Coroutine, Iterable
from typing import Any, TypeVar

T = TypeVar("T")


def _first_leaf(error: BaseExceptionGroup) -> BaseException:
    first = error.exceptions[0]
    return _first_leaf(first) if isinstance(first, BaseExceptionGroup) else first


async def gather_or_cancel(coros: Iterable[Coroutine[Any, Any, T]]) -> list[T]:
    """Run coroutines concurrently and return their results in input order.

    Unlike asyncio.gather, a failure cancels every sibling and waits for
    them to unwind before raising, so no request outlives the failure.
    The first error is raised itself rather than wrapped in an ExceptionGroup.
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(coro) for coro in coros]
    except ExceptionGroup as error:
        raise _first_leaf(error) from error
    return [task.result() for task in tasks]
