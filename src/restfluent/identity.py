"""Identity providers — who is making the request.

The rate limiter keys authenticated callers by identity rather than by
address. Providers answer two questions about a request: is the caller
authenticated, and what is their identity id.

``SignedCookieIdentity`` reads a session cookie signed with
``itsdangerous``. The cookie is expected to hold a JSON object with a
``user_id`` entry, as written by the application's login handler::

    serializer = URLSafeTimedSerializer(secret_key)
    response = response.with_header(
        "Set-Cookie", f"restfluent_session={serializer.dumps({'user_id': 42})}"
    )
"""

from typing import Any, Protocol

from itsdangerous import BadData, URLSafeTimedSerializer

from restfluent.errors import ConfigurationError
from restfluent.http.request import Request


class IdentityProvider(Protocol):
    """Protocol for identity lookup."""

    def is_authenticated(self, request: Request) -> bool: ...

    def current_identity_id(self, request: Request) -> str: ...


class AnonymousIdentity:
    """Treats every caller as unauthenticated."""

    __slots__ = ()

    def is_authenticated(self, request: Request) -> bool:  # noqa: ARG002
        return False

    def current_identity_id(self, request: Request) -> str:  # noqa: ARG002
        return ""


class SignedCookieIdentity:
    """Identity from a signed session cookie.

    Tampered, expired or malformed cookies are treated as anonymous.
    """

    __slots__ = ("_cookie_name", "_id_key", "_max_age", "_serializer")

    def __init__(
        self,
        secret_key: str,
        *,
        cookie_name: str = "restfluent_session",
        id_key: str = "user_id",
        max_age: int | None = 86400,
    ) -> None:
        if not secret_key:
            msg = "SignedCookieIdentity secret_key must not be empty."
            raise ConfigurationError(msg)
        self._serializer = URLSafeTimedSerializer(secret_key)
        self._cookie_name = cookie_name
        self._id_key = id_key
        self._max_age = max_age

    def _load(self, request: Request) -> dict[str, Any]:
        cookie_value = request.cookies.get(self._cookie_name)
        if not cookie_value:
            return {}
        try:
            data = self._serializer.loads(cookie_value, max_age=self._max_age)
        except BadData:
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def is_authenticated(self, request: Request) -> bool:
        return self._load(request).get(self._id_key) not in (None, "")

    def current_identity_id(self, request: Request) -> str:
        identity = self._load(request).get(self._id_key)
        return "" if identity is None else str(identity)

    def dumps(self, identity_id: str | int) -> str:
        """Sign a cookie value carrying *identity_id*."""
        return self._serializer.dumps({self._id_key: identity_id})
