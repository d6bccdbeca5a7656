"""Shared type aliases used across restfluent modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: receives the request, returns any result shape
Handler: TypeAlias = Callable[..., Any]

# Permission predicate: receives the request, returns truthy to allow
PermissionPredicate: TypeAlias = Callable[..., Any]
