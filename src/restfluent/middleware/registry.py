"""Middleware resolution.

Routes may list middleware as instances, as classes, or by string
identifier. References are resolved once, when a route's dispatcher is
built, through a ``MiddlewareRegistry`` that maps identifiers to
factories.

A reference that cannot be resolved yields ``None``, including one
whose factory or constructor raises. The dispatcher logs it and lets
requests pass straight through that slot.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeAlias

logger = logging.getLogger("restfluent.middleware")

# Instance, class, or registered identifier
MiddlewareRef: TypeAlias = Any


class MiddlewareRegistry:
    """Maps middleware identifiers to factories.

    Usage::

        middleware = MiddlewareRegistry()
        middleware.register("throttle", lambda: RateLimitMiddleware(store))
        middleware.register("audit", AuditMiddleware)

        registry.get("/orders").middleware("throttle")

    A factory is called at most once; every route sharing an identifier
    shares the instance.
    """

    __slots__ = ("_factories", "_instances")

    def __init__(self) -> None:
        self._factories: dict[str, Callable[[], Any]] = {}
        self._instances: dict[str, Any] = {}

    def register(self, name: str, factory: Callable[[], Any]) -> None:
        """Register *factory* under *name*, replacing any previous entry."""
        self._factories[name] = factory
        self._instances.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def resolve(self, ref: MiddlewareRef) -> Any | None:
        """Turn a reference into a usable middleware, or ``None``.

        - ``str``: looked up among registered identifiers
        - class: instantiated with no arguments
        - object with a callable ``handle`` attribute, or any callable: used as-is
        """
        if isinstance(ref, str):
            return self._resolve_name(ref)
        if isinstance(ref, type):
            return _instantiate(ref)
        if _is_usable(ref):
            return ref
        return None

    def _resolve_name(self, name: str) -> Any | None:
        if name in self._instances:
            return self._instances[name]
        factory = self._factories.get(name)
        if factory is None:
            return None
        try:
            instance = factory()
        except Exception as exc:
            logger.warning("Middleware factory %r failed: %s", name, exc)
            return None
        if not _is_usable(instance):
            return None
        self._instances[name] = instance
        return instance


def _is_usable(obj: Any) -> bool:
    return callable(getattr(obj, "handle", None)) or callable(obj)


def _instantiate(cls: type) -> Any | None:
    try:
        instance = cls()
    except Exception as exc:
        logger.warning("Cannot instantiate middleware %s: %s", cls.__qualname__, exc)
        return None
    if not _is_usable(instance):
        return None
    return instance
