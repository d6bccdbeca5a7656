"""Immutable HTTP request.

Frozen metadata as handed over by the host. Handlers read path
parameters, query arguments, the decoded body and any application
fields from it; middleware reads the raw server metadata.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from restfluent.http.cookies import parse_cookies
from restfluent.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``attributes`` carries arbitrary application-defined fields. The dict
    itself is mutable so middleware can stash values for the handler,
    but the field reference is frozen.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: Mapping[str, str] = field(default_factory=dict)
    path_params: Mapping[str, str] = field(default_factory=dict)
    client: tuple[str, int] | None = None
    body: Any = None
    cookies: Mapping[str, str] = field(default_factory=dict)
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)

    # -- Server metadata --

    @property
    def forwarded_for(self) -> str | None:
        """Raw ``X-Forwarded-For`` header value."""
        return self.headers.get("x-forwarded-for")

    @property
    def real_ip(self) -> str | None:
        """Raw ``X-Real-IP`` header value."""
        return self.headers.get("x-real-ip")

    @property
    def peer_address(self) -> str | None:
        """Address of the directly connected peer, if the host knows it."""
        if self.client:
            return self.client[0]
        return None

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def param(self, name: str, default: str | None = None) -> str | None:
        """Return a path parameter, falling back to the query string."""
        if name in self.path_params:
            return self.path_params[name]
        return self.query.get(name, default)

    def with_path_params(self, path_params: Mapping[str, str]) -> Request:
        """Return a copy carrying the given path parameters.

        ``attributes`` is shared with the original so values set before
        routing stay visible.
        """
        return replace(self, path_params=dict(path_params))

    # -- Factory --

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, str] | None = None,
        client: tuple[str, int] | None = None,
        body: Any = None,
    ) -> Request:
        """Create a Request from plain values, parsing cookies once."""
        hdrs = Headers(headers or {})
        return cls(
            method=method.upper(),
            path=path,
            headers=hdrs,
            query=dict(query or {}),
            client=client,
            body=body,
            cookies=parse_cookies(hdrs.get("cookie", "")),
        )
