"""Host registration interface.

The host owns route storage, request matching and network I/O. This
package only needs one thing from it: a way to register a compiled
pattern under a prefix together with a permission callback and a
dispatch callback.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias

from restfluent.errors import HTTPError
from restfluent.http.request import Request
from restfluent.http.response import Response

# Called by the host before dispatch; truthy allows the request
PermissionCallback: TypeAlias = Callable[[Request], Awaitable[Any]]

# Runs the middleware chain and handler for one request
DispatchCallback: TypeAlias = Callable[[Request], Awaitable[Response | HTTPError]]


@dataclass(frozen=True, slots=True)
class RouteOptions:
    """Everything the host needs to serve one route."""

    method: str
    permission_callback: PermissionCallback
    callback: DispatchCallback


class Host(Protocol):
    """Protocol for the host's route registrar.

    Any object with a matching ``register`` method works::

        class MyHost:
            def register(self, prefix: str, pattern: str, options: RouteOptions) -> None:
                ...
    """

    def register(self, prefix: str, pattern: str, options: RouteOptions) -> None: ...
