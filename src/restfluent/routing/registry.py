"""RouteRegistry — ordered route declarations plus group defaults.

Routes are declared during bootstrap through the verb entry points and
``group()``, then handed to the host in a single registration pass.

Usage::

    routes = RouteRegistry()

    routes.get("/product/{id:int}").handler(show_product)

    def admin(routes: RouteRegistry) -> None:
        routes.post("/product").handler(create_product, 201)
        routes.delete("/product/{id:int}").handler(delete_product)

    routes.group({"prefix": "admin/v1", "permissions": is_admin}, admin)

    routes.register_routes(host)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any

from restfluent._internal.types import PermissionPredicate
from restfluent.config import RestConfig
from restfluent.dispatch import build_dispatcher
from restfluent.errors import ConfigurationError
from restfluent.host import Host, RouteOptions
from restfluent.middleware.registry import MiddlewareRef, MiddlewareRegistry
from restfluent.routing.route import HTTPMethod, RouteDefinition

logger = logging.getLogger("restfluent.routing")

_GROUP_KEYS = frozenset({"prefix", "permissions", "middleware"})


@dataclass(frozen=True, slots=True)
class GroupDefaults:
    """Attributes applied to every route declared inside a group."""

    prefix: str | None = None
    permissions: PermissionPredicate | None = None
    middleware: tuple[MiddlewareRef, ...] = ()

    def merged(self, overrides: Mapping[str, Any]) -> GroupDefaults:
        """Return a copy with only the keys present in *overrides* replaced."""
        unknown = set(overrides) - _GROUP_KEYS
        if unknown:
            msg = (
                f"Unknown group attribute(s): {', '.join(sorted(unknown))}. "
                f"Expected any of: {', '.join(sorted(_GROUP_KEYS))}."
            )
            raise ConfigurationError(msg)
        changes = dict(overrides)
        if "middleware" in changes:
            changes["middleware"] = _as_tuple(changes["middleware"])
        return replace(self, **changes)


def _as_tuple(
    middleware: MiddlewareRef | Sequence[MiddlewareRef] | None,
) -> tuple[MiddlewareRef, ...]:
    if middleware is None:
        return ()
    if isinstance(middleware, (list, tuple)):
        return tuple(middleware)
    return (middleware,)


class RouteRegistry:
    """Ordered collection of route declarations.

    Append-only while routes are being declared; read once when
    ``register_routes()`` hands them to the host. Owned by the
    application's composition root and passed to whatever declares routes.

    Thread safety:
        Declaration is expected to finish, single-threaded, before any
        request is served. The registry takes no locks.
    """

    __slots__ = ("_config", "_defaults", "_routes")

    def __init__(self, config: RestConfig | None = None) -> None:
        self._config = config or RestConfig()
        self._defaults = GroupDefaults()
        self._routes: list[RouteDefinition] = []

    @property
    def config(self) -> RestConfig:
        return self._config

    @property
    def defaults(self) -> GroupDefaults:
        """Group defaults currently in effect."""
        return self._defaults

    @property
    def routes(self) -> tuple[RouteDefinition, ...]:
        """All declared routes, in declaration order."""
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[RouteDefinition]:
        return iter(tuple(self._routes))

    # -- Verb entry points --

    def get(self, template: str) -> RouteDefinition:
        return self._add("GET", template)

    def post(self, template: str) -> RouteDefinition:
        return self._add("POST", template)

    def put(self, template: str) -> RouteDefinition:
        return self._add("PUT", template)

    def patch(self, template: str) -> RouteDefinition:
        return self._add("PATCH", template)

    def delete(self, template: str) -> RouteDefinition:
        return self._add("DELETE", template)

    def _add(self, method: HTTPMethod, template: str) -> RouteDefinition:
        route = RouteDefinition(method, template, self._config)
        defaults = self._defaults
        route._apply_group(defaults.prefix, defaults.permissions, defaults.middleware)
        self._routes.append(route)
        return route

    # -- Groups --

    @contextmanager
    def grouped(self, **overrides: Any) -> Iterator[GroupDefaults]:
        """Apply group defaults to routes declared inside the ``with`` block.

        Only the given keys are overridden; the rest are inherited from
        the group currently in effect. The previous defaults are restored
        on exit, whether the block returns or raises.
        """
        saved = self._defaults
        self._defaults = saved.merged(overrides)
        try:
            yield self._defaults
        finally:
            self._defaults = saved

    def group(
        self,
        overrides: Mapping[str, Any],
        callback: Callable[[RouteRegistry], Any],
    ) -> None:
        """Run *callback* with *overrides* applied as group defaults.

        The callback receives this registry and may declare routes or
        nested groups. Errors raised by the callback propagate after the
        previous defaults have been restored.
        """
        with self.grouped(**overrides):
            callback(self)

    # -- Registration --

    def register_routes(self, host: Host, middleware: MiddlewareRegistry | None = None) -> None:
        """Hand every declared route to *host*.

        Builds each route's dispatcher, seals the route, then calls
        ``host.register()``. Meant to run once per process, typically from
        the host's init hook; calling it again registers every route twice.
        """
        resolver = middleware or MiddlewareRegistry()
        for route in self._routes:
            dispatcher = build_dispatcher(route, resolver)
            route.seal()
            host.register(
                route.route_prefix,
                route.pattern,
                RouteOptions(
                    method=route.method,
                    permission_callback=route.check_permission,
                    callback=dispatcher,
                ),
            )
            logger.debug("Registered %s /%s%s", route.method, route.route_prefix, route.pattern)
        logger.info("Registered %d route(s)", len(self._routes))

    # -- Introspection --

    def debug_routes(self) -> list[tuple[str, str, str]]:
        """``(prefix, method, pattern)`` for every route, in declaration order."""
        return [route.describe() for route in self._routes]

    def format_routes(self) -> str:
        """Column-aligned route table for logs and debugging.

        ::

            METHOD  PREFIX    PATTERN
            GET     v1        /product/(?P<id>[0-9]+)
            POST    admin/v1  /product
        """
        rows = [(method, prefix, pattern) for prefix, method, pattern in self.debug_routes()]
        if not rows:
            return ""
        method_w = max(6, *(len(r[0]) for r in rows))  # "METHOD" header
        prefix_w = max(6, *(len(r[1]) for r in rows))  # "PREFIX" header
        fmt = f"{{:<{method_w}}}  {{:<{prefix_w}}}  {{}}"
        lines = [fmt.format("METHOD", "PREFIX", "PATTERN")]
        lines.extend(fmt.format(*row) for row in rows)
        return "\n".join(lines)

    def reset(self) -> None:
        """Forget all routes and group state. Intended for tests."""
        self._routes.clear()
        self._defaults = GroupDefaults()
