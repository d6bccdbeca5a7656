"""Invoke helpers — call sync or async callables uniformly.

Handlers, permission predicates, middleware and counter stores can be
``def`` or ``async def``. Any code that calls one of them goes through
this helper so the sync/async check lives in exactly one place.

Usage::

    from restfluent._internal.invoke import invoke

    result = await invoke(handler, request)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately, no await needed
        def list_products(request):
            return {"data": PRODUCTS}

        # async: returns coroutine, awaited automatically
        async def list_products(request):
            return {"data": await repo.all()}

    A sync middleware that returns ``next(request)`` hands back a
    coroutine; it is awaited here as well.
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
