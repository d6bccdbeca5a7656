"""restfluent exception hierarchy.

Shared across the registry, dispatcher, middleware and host adapters so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class RestFluentError(Exception):
    """Base for all restfluent-specific errors."""


class ConfigurationError(RestFluentError):
    """Raised when routes are declared or configured incorrectly.

    Typically raised during the declaration phase, before any request
    is served.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(RestFluentError):
    """An error that maps directly to an HTTP status code.

    May be raised by permission callbacks, middleware or handlers, or
    returned as a value. Either way the host turns it into an error
    response; the dispatcher never normalizes it.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    code: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

    def to_body(self) -> dict[str, object]:
        """Error payload in the host's ``{code, message, data}`` shape."""
        return {
            "code": self.code or f"http_{self.status}",
            "message": self.detail,
            "data": {"status": self.status},
        }


class MissingHandler(HTTPError):
    """500 — a route was dispatched with no handler bound."""

    def __init__(self, detail: str = "Route missing callback") -> None:
        super().__init__(status=500, detail=detail, code="missing_callback")


class Forbidden(HTTPError):  # noqa: N818
    """403 — the route's permission callback refused the request."""

    def __init__(self, detail: str = "Sorry, you are not allowed to do that.") -> None:
        super().__init__(status=403, detail=detail, code="rest_forbidden")


class NotFound(HTTPError):  # noqa: N818
    """404 — no registered route matched the request path."""

    def __init__(
        self, detail: str = "No route was found matching the URL and request method."
    ) -> None:
        super().__init__(status=404, detail=detail, code="rest_no_route")


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
            code="rest_method_not_allowed",
        )
