"""Invoke helpers: call sync or async handlers uniformly.

Perch handlers can be ``def`` or ``async def``. Navigation is
synchronous and runs on the UI thread, so an awaitable result is driven
to completion right there with ``anyio.run`` before control returns.

Usage::

    from perch._internal.invoke import invoke

    result = invoke(handler, *args, **kwargs)
"""

import inspect
from collections.abc import Awaitable
from typing import Any

import anyio


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and run the result to completion if it's awaitable.

    Works with both sync and async callables::

        @app.endpoint("save")
        def save(data):
            storage.insert("contacts", bind(Contact, data))

        @app.endpoint("refresh")
        async def refresh():
            rows = await fetch_remote()
            navigator.navigate("list", {"rows": rows})
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = anyio.run(_await, result)
    return result
