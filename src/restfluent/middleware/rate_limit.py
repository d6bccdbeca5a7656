"""Rate limiting middleware.

Counts requests per caller in an external counter store and rejects
callers that exceed a ceiling within a window with ``429 Too Many
Requests``.

Callers are keyed by identity when authenticated, otherwise by a digest
of client address and request path. A client whose address cannot be
determined gets a fresh random key on every request and so is never
limited consistently.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass

from restfluent._internal.invoke import invoke
from restfluent.http.request import Request
from restfluent.http.response import Response
from restfluent.identity import AnonymousIdentity, IdentityProvider
from restfluent.middleware.protocol import AnyResponse, Next
from restfluent.store import CounterStore

logger = logging.getLogger("restfluent.rate_limit")


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """Configuration for request rate limiting."""

    requests: int = 60
    window_seconds: int = 60
    key_prefix: str = "rate_limit_"

    @classmethod
    def per_minutes(cls, requests: int = 60, minutes: int = 1) -> RateLimitConfig:
        """Ceiling of *requests* per window of *minutes*."""
        return cls(requests=requests, window_seconds=minutes * 60)


class RateLimitMiddleware:
    """Fixed ceiling per caller per window.

    Usage::

        store = MemoryCounterStore()
        limiter = RateLimitMiddleware(store, RateLimitConfig(requests=10, window_seconds=60))
        routes.post("/login").middleware(limiter).handler(login)

    The store read and write are not atomic; under concurrency a caller
    may get a few requests past the ceiling.
    """

    __slots__ = ("_config", "_identity", "_store")

    def __init__(
        self,
        store: CounterStore,
        config: RateLimitConfig | None = None,
        identity: IdentityProvider | None = None,
    ) -> None:
        self._store = store
        self._config = config or RateLimitConfig()
        self._identity = identity or AnonymousIdentity()

    @property
    def config(self) -> RateLimitConfig:
        return self._config

    def resolve_key(self, request: Request) -> str:
        """Counter key for *request*: identity first, then address and path."""
        prefix = self._config.key_prefix
        if self._identity.is_authenticated(request):
            return f"{prefix}user_{self._identity.current_identity_id(request)}"
        ip = resolve_client_ip(request)
        digest = hashlib.md5(f"{ip}|{request.path}".encode(), usedforsecurity=False).hexdigest()
        return f"{prefix}{digest}"

    async def handle(self, request: Request, next: Next) -> AnyResponse:
        cfg = self._config
        key = self.resolve_key(request)
        count = await invoke(self._store.get, key)

        if count is None:
            await invoke(self._store.set, key, 1, cfg.window_seconds)
            return await next(request)

        if int(count) < cfg.requests:
            await invoke(self._store.set, key, int(count) + 1, cfg.window_seconds)
            return await next(request)

        logger.info("Rate limit exceeded for %s %s (key %s)", request.method, request.path, key)
        return Response.build(
            {"message": "Too many requests"},
            429,
            {"Retry-After": str(cfg.window_seconds)},
        )


def resolve_client_ip(request: Request) -> str:
    """Best guess at the client address.

    Precedence: first ``X-Forwarded-For`` hop, ``X-Real-IP``, the peer
    address, then a random anonymous token.
    """
    forwarded = request.forwarded_for
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.real_ip:
        return request.real_ip
    if request.peer_address:
        return request.peer_address
    return f"anon_{secrets.token_hex(8)}"
