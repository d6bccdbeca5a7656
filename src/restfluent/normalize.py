"""Result normalization — maps handler return values to body, status and headers.

Handlers may return whatever shape is convenient. ``classify()`` sorts a
return value into one of four variants and ``extract()`` pulls the
response parts out of the two that need it. isinstance-based dispatch,
no magic, fully predictable.

Variants:

1. ``Response``                 -> ``FinalResponse``, sent as-is
2. ``HTTPError`` (returned)     -> ``ErrorResult``, sent as-is
3. mapping / dataclass / object -> ``StructuredResult``, keys extracted
4. anything else                -> ``ScalarResult``, becomes the body
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, is_dataclass
from typing import Any, TYPE_CHECKING, TypeAlias

from restfluent.errors import HTTPError
from restfluent.http.response import Response

if TYPE_CHECKING:
    from restfluent.routing.route import RouteDefinition

# Body keys tried, in order, after the route's configured data key
FALLBACK_BODY_KEYS: tuple[str, ...] = ("body", "response")

_SCALAR_TYPES = (
    str, bytes, bytearray, int, float, complex, list, tuple, set, frozenset, type(None),
)

_MISSING = object()


@dataclass(frozen=True, slots=True)
class NormalizedResult:
    """Body, status and headers extracted from one handler result."""

    body: Any
    status: int
    headers: dict[str, str]


@dataclass(frozen=True, slots=True)
class FinalResponse:
    response: Response


@dataclass(frozen=True, slots=True)
class ErrorResult:
    error: HTTPError


@dataclass(frozen=True, slots=True)
class StructuredResult:
    """A keyed result: a mapping, or an object with named fields.

    For mappings a key is present when it exists. For objects a field
    counts as present only when it exists and is not ``None``.
    """

    value: Any
    is_mapping: bool

    def lookup(self, key: str) -> Any:
        """Return the value at *key*, or ``_MISSING``."""
        if self.is_mapping:
            return self.value[key] if key in self.value else _MISSING
        found = getattr(self.value, key, None)
        return _MISSING if found is None else found


@dataclass(frozen=True, slots=True)
class ScalarResult:
    value: Any


HandlerResult: TypeAlias = FinalResponse | ErrorResult | StructuredResult | ScalarResult


def classify(value: Any) -> HandlerResult:
    """Sort a raw handler return value into its variant."""
    match value:
        case Response():
            return FinalResponse(value)
        case HTTPError():
            return ErrorResult(value)
        case Mapping():
            return StructuredResult(value, is_mapping=True)
        case _ if isinstance(value, _SCALAR_TYPES) or isinstance(value, type):
            return ScalarResult(value)
        case _ if is_dataclass(value) or hasattr(value, "__dict__"):
            return StructuredResult(value, is_mapping=False)
        case _:
            return ScalarResult(value)


def extract(result: HandlerResult, route: RouteDefinition) -> NormalizedResult:
    """Extract body, status and headers from a classified result.

    Route defaults fill in whatever the result does not provide. Headers
    from the result are layered over the route's default headers.
    """
    status = route.default_status
    headers = dict(route.default_headers)
    body: Any

    match result:
        case StructuredResult():
            keys = route.keys
            raw_status = result.lookup(keys.status_key)
            if raw_status is not _MISSING:
                status = _coerce_status(raw_status, status)
            raw_headers = result.lookup(keys.headers_key)
            if isinstance(raw_headers, Mapping):
                headers.update(raw_headers)
            body = _extract_body(result, keys.data_key)
            return NormalizedResult(body=body, status=status, headers=headers)
        case FinalResponse(response=response):
            body = response
        case ErrorResult(error=error):
            body = error
        case ScalarResult(value=value):
            body = value

    return NormalizedResult(body=body, status=status, headers=headers)


def normalize(value: Any, route: RouteDefinition) -> NormalizedResult:
    """Classify and extract in one step.

    Examples with default keys::

        {"data": {"ok": True}, "status": 201}  -> body={"ok": True}, status=201
        {"body": {"a": 1}}                     -> body={"a": 1}
        {"response": {"b": 2}}                 -> body={"b": 2}
        {"anything": 1}                        -> body={"anything": 1}
        "hello"                                -> body="hello"
    """
    return extract(classify(value), route)


def _extract_body(result: StructuredResult, data_key: str) -> Any:
    for key in (data_key, *FALLBACK_BODY_KEYS):
        found = result.lookup(key)
        if found is not _MISSING:
            return found
    return result.value


def _coerce_status(raw: Any, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default
