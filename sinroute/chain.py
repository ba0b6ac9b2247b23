import asyncio
from functools import partial
from inspect import isawaitable
from typing import Callable, Iterable, List, Optional

from js import console

from sinroute.context import ActiveRouteContext
from sinroute.exceptions import HandlerTimeoutError, global_error_handler


def assemble_chain(pre: Iterable[Callable], handlers: Iterable[Callable], post: Iterable[Callable]) -> List[Callable]:
    """Global pre functions, then the route's own handlers, then global post functions."""
    return [*pre, *handlers, *post]


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))


def _relay_failure(proceeded: asyncio.Future, handler: Callable, task: asyncio.Task) -> None:
    if task.cancelled():
        if not proceeded.done():
            proceeded.cancel()
        return

    error = task.exception()
    if error is None:
        return

    if not proceeded.done():
        proceeded.set_exception(error)
    else:
        # the chain already moved on, nobody is left to receive this error
        global_error_handler(error, f"Handler '{_handler_name(handler)}' failed after proceeding")


async def run_handler(handler: Callable, context: ActiveRouteContext, timeout: Optional[float] = None) -> None:
    """
    Call handler(context, proceed) and wait until it calls proceed().

    Coroutine handlers are scheduled as tasks; the wait still ends at
    proceed(), not when the coroutine returns. An error raised before
    proceed() is re-raised here.
    """
    loop = asyncio.get_running_loop()
    proceeded = loop.create_future()

    def proceed():
        if proceeded.cancelled():
            console.warn(f"'{_handler_name(handler)}' called proceed() after timing out or being cancelled")
            return
        if proceeded.done():
            console.warn(f"proceed() called more than once by '{_handler_name(handler)}'")
            return
        proceeded.set_result(True)

    result = handler(context, proceed)

    task = None
    if isawaitable(result):
        task = asyncio.ensure_future(result)
        task.add_done_callback(partial(_relay_failure, proceeded, handler))

    if timeout is None:
        await proceeded
        return

    try:
        await asyncio.wait_for(proceeded, timeout)
    except asyncio.TimeoutError:
        if task is not None and not task.done():
            task.cancel()
        raise HandlerTimeoutError(handler, timeout) from None


async def run_chain(handlers: Iterable[Callable], context: ActiveRouteContext, timeout: Optional[float] = None) -> None:
    """Run handlers strictly one after another. The first error aborts the rest of the chain."""
    for handler in handlers:
        await run_handler(handler, context, timeout)
