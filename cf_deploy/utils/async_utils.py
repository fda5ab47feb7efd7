"""Asynchronous operation utilities"""

import asyncio
import threading
from typing import Any, Awaitable, Callable, Coroutine, Iterable, List, Optional, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, run on a private loop in a new thread
        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                result = asyncio.run(coro)
            except Exception as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        return asyncio.run(coro)


async def gather_all(items: Iterable[Any],
                     worker: Callable[[Any], Awaitable[T]],
                     callback: Optional[Callable[[int, int], None]] = None) -> List[T]:
    """
    Run worker for every item concurrently and wait for all of them

    Args:
        items: Items to process
        worker: Async function applied to each item
        callback: Progress callback(completed, total)

    Returns:
        Results in item order
    """
    items = list(items)
    total = len(items)
    completed = 0

    async def wrapped(item):
        nonlocal completed
        try:
            return await worker(item)
        finally:
            completed += 1
            if callback:
                callback(completed, total)

    return await asyncio.gather(*(wrapped(item) for item in items))
