"""Helpers that race awaitables against a cooperative cancellation signal.

The signal is a plain asyncio.Event owned by the caller. When it is set, the
in-flight work is cancelled as an asyncio task (which terminates any child
process it awaits) and OperationCancelledError is raised in the caller.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable

from codeloop.core.errors import CodeloopError, ErrorCode

_END = object()


class OperationCancelledError(CodeloopError):
    """Raised when the cancellation signal fires before work completes."""

    code = ErrorCode.CANCELLED

    def __init__(self) -> None:
        super().__init__("Failed to complete operation: cancelled by user")


async def run_cancellable[T](
    awaitable: Awaitable[T], cancel: asyncio.Event | None
) -> T:
    """Await awaitable unless cancel is set first.

    Raises:
        OperationCancelledError: if cancel is (or becomes) set before the
            awaitable completes.
    """
    if cancel is None:
        return await awaitable
    if cancel.is_set():
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise OperationCancelledError()

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait(
            {work, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        work.cancel()
        waiter.cancel()
        raise

    if work in done:
        waiter.cancel()
        return work.result()

    work.cancel()
    await asyncio.gather(work, return_exceptions=True)
    raise OperationCancelledError()


async def iterate_cancellable[T](
    iterator: AsyncIterator[T], cancel: asyncio.Event | None
) -> AsyncIterator[T]:
    """Yield from iterator, checking cancel before and while awaiting each item."""
    while True:
        item = await run_cancellable(anext(iterator, _END), cancel)
        if item is _END:
            return
        yield item  # type: ignore[misc]
