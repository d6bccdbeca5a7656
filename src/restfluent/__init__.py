"""restfluent — fluent route declaration and dispatch for host REST APIs.

Declare routes with typed path parameters, permissions, middleware and
response shaping, then hand them to the host's router in one pass.

Basic usage::

    from restfluent import RouteRegistry
    from restfluent.testing import LocalHost

    routes = RouteRegistry()

    routes.get("/product/{id:int}").handler(
        lambda request: {"data": {"id": int(request.path_params["id"])}}
    )

    host = LocalHost()
    routes.register_routes(host)
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "ConfigurationError",
    "HTTPError",
    "Middleware",
    "MiddlewareRegistry",
    "MissingHandler",
    "Next",
    "RateLimitConfig",
    "RateLimitMiddleware",
    "Request",
    "Response",
    "RestConfig",
    "RestFluentError",
    "RouteDefinition",
    "RouteRegistry",
    "compile_path",
    "normalize",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import restfluent`` fast while providing a clean top-level API.
    """
    if name == "RouteRegistry":
        from restfluent.routing.registry import RouteRegistry

        return RouteRegistry

    if name == "RouteDefinition":
        from restfluent.routing.route import RouteDefinition

        return RouteDefinition

    if name == "compile_path":
        from restfluent.routing.pattern import compile_path

        return compile_path

    if name == "normalize":
        from restfluent.normalize import normalize

        return normalize

    if name == "RestConfig":
        from restfluent.config import RestConfig

        return RestConfig

    if name == "Request":
        from restfluent.http.request import Request

        return Request

    if name == "Response":
        from restfluent.http.response import Response

        return Response

    if name in ("AnyResponse", "Middleware", "Next"):
        from restfluent.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "MiddlewareRegistry":
        from restfluent.middleware.registry import MiddlewareRegistry

        return MiddlewareRegistry

    if name in ("RateLimitConfig", "RateLimitMiddleware"):
        from restfluent.middleware import rate_limit as _rl

        return getattr(_rl, name)

    if name in ("ConfigurationError", "HTTPError", "MissingHandler", "RestFluentError"):
        from restfluent import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
