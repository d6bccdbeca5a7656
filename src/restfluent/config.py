"""Route defaults configuration.

One frozen RestConfig per registry. Every route the registry creates
starts from these values before builder calls and group defaults apply.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RestConfig:
    """Defaults applied to every route a registry creates.

    Override what you need::

        config = RestConfig(prefix="shop/v2", content_type="application/hal+json")
        registry = RouteRegistry(config)
    """

    # Namespace routes register under unless a group or .prefix() overrides it
    prefix: str = "v1"

    # Response shaping
    content_type: str = "application/json"
    status: int = 200

    # Keys the normalizer reads from structured handler results
    data_key: str = "data"
    status_key: str = "status"
    headers_key: str = "headers"
