"""Synchronous driver for the async-capable execution path.

Rules and validators implement their logic once, as coroutines that take an
``is_async`` flag. The synchronous entry points drive those coroutines here,
without an event loop. A coroutine that never awaits anything that suspends
completes on the first step; one that tries to suspend means asynchronous
work was reached from a synchronous call, which is a usage error.
"""

import typing

from . import errors as _errors

T = typing.TypeVar("T")


def run_synchronously(
    coro: typing.Coroutine[typing.Any, typing.Any, T], owner: object
) -> T:
    """Run ``coro`` to completion without an event loop.

    Args:
        coro: Coroutine that must not suspend
        owner: Rule or validator reported if the coroutine suspends

    Returns:
        The coroutine's return value

    Raises:
        AsyncValidatorInvokedSynchronouslyError: If the coroutine suspends
    """
    try:
        coro.send(None)
    except StopIteration as stop:
        return typing.cast(T, stop.value)
    coro.close()
    raise _errors.AsyncValidatorInvokedSynchronouslyError(owner)
