"""Middleware protocol and Next type alias.

A middleware is anything matching one of these shapes::

    class Audit:
        async def handle(self, request: Request, next: Next) -> AnyResponse: ...

    async def audit(request: Request, next: Next) -> AnyResponse: ...

No base class required. The dispatcher checks the shape, not the lineage.

``next`` runs the rest of the chain (later middleware, then the handler)
and returns its result. A middleware may return that result unchanged,
post-process it, or return its own response without calling ``next``.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias, runtime_checkable

from restfluent.errors import HTTPError
from restfluent.http.request import Request
from restfluent.http.response import Response

# Anything the pipeline can produce: a response, or an error value
AnyResponse: TypeAlias = Response | HTTPError

# The remainder of the middleware chain
Next: TypeAlias = Callable[[Request], Awaitable[AnyResponse]]


@runtime_checkable
class Middleware(Protocol):
    """Protocol for class-based middleware.

    Example::

        class RequireJson:
            async def handle(self, request: Request, next: Next) -> AnyResponse:
                if request.content_type != "application/json":
                    return Response.build({"message": "JSON only"}, 415)
                return await next(request)

    Plain ``async def mw(request, next)`` functions are accepted as well.
    """

    async def handle(self, request: Request, next: Next) -> AnyResponse: ...
