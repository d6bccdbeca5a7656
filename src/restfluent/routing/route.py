"""RouteDefinition — one endpoint, configured through a fluent builder.

Method and compiled pattern are fixed when the route is created. Every
other attribute is set through chainable builder calls during the
declaration phase; once the route is handed to a host it is sealed and
further builder calls raise ``ConfigurationError``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal, TYPE_CHECKING, TypeAlias

from restfluent._internal.invoke import invoke
from restfluent._internal.types import Handler, PermissionPredicate
from restfluent.config import RestConfig
from restfluent.errors import ConfigurationError
from restfluent.routing.pattern import compile_path

if TYPE_CHECKING:
    from restfluent.http.request import Request
    from restfluent.middleware.registry import MiddlewareRef

HTTPMethod: TypeAlias = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

HTTP_METHODS: tuple[HTTPMethod, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass(frozen=True, slots=True)
class ResponseKeys:
    """Keys the normalizer reads from a structured handler result."""

    data_key: str = "data"
    status_key: str = "status"
    headers_key: str = "headers"


class RouteDefinition:
    """A single route: method, compiled pattern and response shaping.

    Usage::

        route = RouteDefinition("GET", "/product/{id:int}")
        route.handler(show_product).permissions(is_admin).formatter()

    Normally created through ``RouteRegistry.get()`` and friends, which
    also apply the active group defaults.
    """

    __slots__ = (
        "_content_type",
        "_default_headers",
        "_default_status",
        "_handler",
        "_keys",
        "_method",
        "_middleware",
        "_pattern",
        "_permissions",
        "_prefix",
        "_sealed",
        "_template",
        "_use_envelope",
    )

    def __init__(self, method: HTTPMethod, template: str, config: RestConfig | None = None) -> None:
        config = config or RestConfig()
        self._method = method
        self._template = template
        self._pattern = compile_path(template)
        self._prefix = config.prefix
        self._handler: Handler | None = None
        self._content_type = config.content_type
        self._default_headers: dict[str, str] = {}
        self._middleware: list[MiddlewareRef] = []
        self._use_envelope = False
        self._default_status = config.status
        self._permissions: PermissionPredicate | None = None
        self._keys = ResponseKeys(config.data_key, config.status_key, config.headers_key)
        self._sealed = False

    def __repr__(self) -> str:
        return f"RouteDefinition({self._method} /{self._prefix}{self._pattern})"

    # -- Fixed at creation --

    @property
    def method(self) -> HTTPMethod:
        return self._method

    @property
    def template(self) -> str:
        """The template as declared, before compilation."""
        return self._template

    @property
    def pattern(self) -> str:
        """The compiled pattern handed to the host."""
        return self._pattern

    # -- Read access to builder-set values --

    @property
    def route_prefix(self) -> str:
        return self._prefix

    @property
    def callback(self) -> Handler | None:
        return self._handler

    @property
    def response_content_type(self) -> str:
        return self._content_type

    @property
    def default_headers(self) -> Mapping[str, str]:
        return self._default_headers

    @property
    def middleware_chain(self) -> tuple[MiddlewareRef, ...]:
        return tuple(self._middleware)

    @property
    def use_envelope(self) -> bool:
        return self._use_envelope

    @property
    def default_status(self) -> int:
        return self._default_status

    @property
    def permission_predicate(self) -> PermissionPredicate | None:
        return self._permissions

    @property
    def keys(self) -> ResponseKeys:
        return self._keys

    @property
    def sealed(self) -> bool:
        return self._sealed

    # -- Builder --

    def handler(self, callback: Handler, status: int = 200) -> RouteDefinition:
        """Bind the handler and the status used when it names none."""
        self._check_not_sealed()
        self._handler = callback
        self._default_status = int(status)
        return self

    def permissions(self, predicate: PermissionPredicate | None) -> RouteDefinition:
        """Set the predicate the host calls before dispatch."""
        self._check_not_sealed()
        self._permissions = predicate
        return self

    def middleware(self, middleware: MiddlewareRef | Sequence[MiddlewareRef]) -> RouteDefinition:
        """Append one middleware reference or a sequence of them."""
        self._check_not_sealed()
        if isinstance(middleware, (list, tuple)):
            self._middleware.extend(middleware)
        else:
            self._middleware.append(middleware)
        return self

    def content_type(self, content_type: str) -> RouteDefinition:
        self._check_not_sealed()
        self._content_type = content_type
        return self

    def formatter(self, on: bool = True) -> RouteDefinition:
        """Toggle wrapping of bodies in the ``{data, status, success}`` envelope."""
        self._check_not_sealed()
        self._use_envelope = bool(on)
        return self

    def status(self, on: bool = True) -> RouteDefinition:
        """Alias of ``formatter()``."""
        return self.formatter(on)

    def map(
        self,
        data_key: str = "data",
        status_key: str = "status",
        headers_key: str = "headers",
    ) -> RouteDefinition:
        """Rename the keys read from structured handler results."""
        self._check_not_sealed()
        self._keys = ResponseKeys(data_key, status_key, headers_key)
        return self

    def prefix(self, prefix: str) -> RouteDefinition:
        self._check_not_sealed()
        self._prefix = prefix
        return self

    def headers(self, headers: Mapping[str, str]) -> RouteDefinition:
        """Merge *headers* into the headers every response of this route carries."""
        self._check_not_sealed()
        self._default_headers.update(headers)
        return self

    # -- Group defaults and registration --

    def _apply_group(
        self,
        prefix: str | None,
        permissions: PermissionPredicate | None,
        middleware: Sequence[MiddlewareRef],
    ) -> None:
        """Seed the route from the group defaults active at creation.

        The group's middleware replaces the route's chain rather than
        merging with it.
        """
        if prefix:
            self._prefix = prefix
        if permissions:
            self._permissions = permissions
        self._middleware = list(middleware)

    async def check_permission(self, request: Request) -> Any:
        """Run the permission predicate; no predicate means allowed."""
        if self._permissions is None:
            return True
        return await invoke(self._permissions, request)

    def describe(self) -> tuple[str, str, str]:
        """``(prefix, method, pattern)`` as shown by route listings."""
        return self._prefix, self._method, self._pattern

    def seal(self) -> None:
        """Freeze the route. Called when it is handed to a host."""
        self._sealed = True

    def _check_not_sealed(self) -> None:
        if self._sealed:
            msg = (
                f"Cannot modify {self!r} after it has been registered with a host. "
                "Configure routes before calling register_routes()."
            )
            raise ConfigurationError(msg)
