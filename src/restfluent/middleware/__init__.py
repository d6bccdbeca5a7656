"""Middleware — Protocol-based, no inheritance required.

A middleware is either an object with a ``handle(request, next)`` method
or any callable taking ``(request, next)``.

Built-in middleware:
    RateLimitMiddleware -- Fixed-window request ceiling backed by a counter store
"""

from restfluent.middleware.protocol import AnyResponse, Middleware, Next
from restfluent.middleware.rate_limit import RateLimitConfig, RateLimitMiddleware
from restfluent.middleware.registry import MiddlewareRef, MiddlewareRegistry

__all__ = [
    "AnyResponse",
    "Middleware",
    "MiddlewareRef",
    "MiddlewareRegistry",
    "Next",
    "RateLimitConfig",
    "RateLimitMiddleware",
]
