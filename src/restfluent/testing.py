"""In-process reference host.

``LocalHost`` implements the ``Host`` registration protocol and serves
requests without any network: it matches paths against the registered
patterns, runs the permission callback, then the route's dispatcher.
Useful for tests and for embedding the routes in something that is not
a web server.

Usage::

    host = LocalHost()
    routes.register_routes(host)

    response = await host.get("/v1/product/42")
    assert response.status == 200
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl

from restfluent.errors import Forbidden, HTTPError, MethodNotAllowed, NotFound
from restfluent.host import RouteOptions
from restfluent.http.request import Request
from restfluent.http.response import Response

logger = logging.getLogger("restfluent.host")


@dataclass(frozen=True, slots=True)
class Registration:
    """One ``register()`` call as recorded by the host."""

    prefix: str
    pattern: str
    options: RouteOptions
    regex: re.Pattern[str]

    @property
    def path(self) -> str:
        """Full pattern the request path is matched against."""
        return self.regex.pattern


def error_response(exc: HTTPError) -> Response:
    """Render an ``HTTPError`` as a JSON error response."""
    headers = {"Content-Type": "application/json", **dict(exc.headers)}
    return Response.build(exc.to_body(), exc.status, headers)


class LocalHost:
    """Host that serves registered routes in-process."""

    __slots__ = ("_registrations",)

    def __init__(self) -> None:
        self._registrations: list[Registration] = []

    @property
    def registrations(self) -> tuple[Registration, ...]:
        return tuple(self._registrations)

    def __len__(self) -> int:
        return len(self._registrations)

    def register(self, prefix: str, pattern: str, options: RouteOptions) -> None:
        """Record a route. The full path is ``/<prefix><pattern>``."""
        namespace = prefix.strip("/")
        full = f"/{namespace}{pattern}" if namespace else pattern
        self._registrations.append(
            Registration(prefix=prefix, pattern=pattern, options=options, regex=re.compile(full))
        )

    # -- Serving --

    async def handle(self, request: Request) -> Response:
        """Serve one request. Handler exceptions other than ``HTTPError`` propagate."""
        allowed: set[str] = set()
        for registration in self._registrations:
            match = registration.regex.fullmatch(request.path)
            if match is None:
                continue
            if registration.options.method != request.method:
                allowed.add(registration.options.method)
                continue
            params = {name: value for name, value in match.groupdict().items() if value is not None}
            try:
                return await self._serve(registration.options, request.with_path_params(params))
            except HTTPError as exc:
                logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
                return error_response(exc)

        error: HTTPError = MethodNotAllowed(frozenset(allowed)) if allowed else NotFound()
        logger.debug("%d %s %s", error.status, request.method, request.path)
        return error_response(error)

    async def _serve(self, options: RouteOptions, request: Request) -> Response:
        permitted = await options.permission_callback(request)
        if isinstance(permitted, HTTPError):
            raise permitted
        if not permitted:
            raise Forbidden()

        result = await options.callback(request)
        if isinstance(result, HTTPError):
            return error_response(result)
        return result

    # -- Client helpers --

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        client: tuple[str, int] | None = None,
    ) -> Response:
        """Build a ``Request`` and serve it. A ``?query`` suffix is parsed."""
        path_part, _, query_string = path.partition("?")
        request = Request.build(
            method,
            path_part,
            headers=headers,
            query=dict(parse_qsl(query_string)),
            client=client,
            body=body,
        )
        return await self.handle(request)

    async def get(self, path: str, **kwargs: Any) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Response:
        """Send a PUT request."""
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Response:
        """Send a PATCH request."""
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Response:
        """Send a DELETE request."""
        return await self.request("DELETE", path, **kwargs)
