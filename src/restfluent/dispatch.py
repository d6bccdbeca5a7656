"""Dispatch pipeline — runs one route's middleware chain around its handler.

Built once per route at registration time. Middleware run in declaration
order: the first one declared sees the request first and the response
last. The chain is an explicit tuple walked by index; each middleware
receives a ``next`` that continues from the following index.

The terminal step calls the handler and shapes its result:

1. no handler bound           -> ``MissingHandler`` (500) returned as a value
2. ``Response`` / ``HTTPError`` returned -> passed through untouched
3. anything else              -> normalized, ``Content-Type`` defaulted,
                                 optionally wrapped in the envelope
"""

import logging
from collections.abc import Sequence
from typing import Any

from restfluent._internal.invoke import invoke
from restfluent.errors import MissingHandler
from restfluent.http.request import Request
from restfluent.http.response import Response
from restfluent.middleware.protocol import AnyResponse, Next
from restfluent.middleware.registry import MiddlewareRef, MiddlewareRegistry
from restfluent.normalize import ErrorResult, FinalResponse, classify, extract
from restfluent.routing.route import RouteDefinition

logger = logging.getLogger("restfluent.dispatch")


def envelope(body: Any, status: int) -> dict[str, Any]:
    """Wrap *body* as ``{data, status, success}``."""
    return {
        "data": body,
        "status": status,
        "success": 200 <= status < 300,
    }


class Dispatcher:
    """The callable a host invokes for each request to one route.

    Usage::

        dispatcher = build_dispatcher(route, middleware_registry)
        response = await dispatcher(request)
    """

    __slots__ = ("_middleware", "route")

    def __init__(self, route: RouteDefinition, middleware: Sequence[Any] = ()) -> None:
        self.route = route
        self._middleware = tuple(middleware)

    @property
    def middleware(self) -> tuple[Any, ...]:
        """Resolved middleware, in execution order."""
        return self._middleware

    async def __call__(self, request: Request) -> AnyResponse:
        return await self._run(0, request)

    def _next(self, index: int) -> Next:
        async def next_step(request: Request) -> AnyResponse:
            return await self._run(index, request)

        return next_step

    async def _run(self, index: int, request: Request) -> AnyResponse:
        if index >= len(self._middleware):
            return await self._terminal(request)
        mw = self._middleware[index]
        handle = getattr(mw, "handle", None)
        if callable(handle):
            return await invoke(handle, request, self._next(index + 1))
        return await invoke(mw, request, self._next(index + 1))

    async def _terminal(self, request: Request) -> AnyResponse:
        route = self.route
        if route.callback is None:
            logger.debug("No handler bound to %r", route)
            return MissingHandler()

        result = await invoke(route.callback, request)

        match classify(result):
            case FinalResponse(response=response):
                logger.debug("%r returned a Response; skipping normalization", route)
                return response
            case ErrorResult(error=error):
                logger.debug("%r returned %s; skipping normalization", route, error)
                return error
            case variant:
                normalized = extract(variant, route)

        headers = normalized.headers
        if not any(name.lower() == "content-type" for name in headers):
            headers["Content-Type"] = route.response_content_type

        body = normalized.body
        if route.use_envelope:
            body = envelope(body, normalized.status)

        return Response.build(body, normalized.status, headers)


def build_dispatcher(
    route: RouteDefinition,
    middleware: MiddlewareRegistry | None = None,
) -> Dispatcher:
    """Resolve *route*'s middleware chain and wrap it around the handler.

    References that cannot be resolved are logged and left out, so
    requests pass straight through where they would have run.
    """
    resolver = middleware or MiddlewareRegistry()
    resolved: list[Any] = []
    for ref in route.middleware_chain:
        instance = resolver.resolve(ref)
        if instance is None:
            logger.warning("Skipping unresolvable middleware %r on %r", _describe(ref), route)
            continue
        resolved.append(instance)
    return Dispatcher(route, resolved)


def _describe(ref: MiddlewareRef) -> str:
    if isinstance(ref, str):
        return ref
    return getattr(ref, "__qualname__", None) or type(ref).__qualname__
