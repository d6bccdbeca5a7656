"""Host response value with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design. A handler that returns a ``Response``
bypasses normalization entirely.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """A final HTTP response: body, status and headers.

    ``body`` is left as the handler produced it (usually JSON-serialisable
    data); encoding is the host's job.
    """

    body: Any = None
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def build(
        cls,
        body: Any = None,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Construct from a header mapping instead of pairs."""
        return cls(body=body, status=status, headers=tuple((headers or {}).items()))

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with the header set, replacing any existing value."""
        kept = tuple((k, v) for k, v in self.headers if k.lower() != name.lower())
        return replace(self, headers=(*kept, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with each header set."""
        response = self
        for name, value in headers.items():
            response = response.with_header(name, value)
        return response

    def with_body(self, body: Any) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive lookup of the first value for *name*."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return default

    @property
    def headers_dict(self) -> dict[str, str]:
        """Headers as a plain dict, original casing preserved."""
        return dict(self.headers)

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300
