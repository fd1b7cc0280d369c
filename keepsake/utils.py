from __future__ import annotations

import inspect
import re
import typing
from starlette.concurrency import run_in_threadpool

CAMEL_TO_SNAKE_PATTERN = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    return CAMEL_TO_SNAKE_PATTERN.sub("_", name).lower()


def is_truthy(value: typing.Any) -> bool:
    """Test a loosely typed flag the way form and cookie input is submitted: True, "true" or "1"."""
    return value is True or value == "true" or value == "1"


async def run_async(fn: typing.Callable, *args: typing.Any, **kwargs: typing.Any) -> typing.Any:
    """
    Awaits a function.

    Will convert sync to async callable if needed. A sync callable returning
    an awaitable is awaited too.
    """
    if inspect.iscoroutinefunction(fn):
        return await fn(*args, **kwargs)
    result = await run_in_threadpool(fn, *args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
