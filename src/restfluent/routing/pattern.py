"""Path template compilation.

Turns a declarative template such as ``/product/{id:int}`` into the
anchored-by-host pattern ``/product/(?P<id>[0-9]+)`` the host matches
requests against.

Supported placeholder forms, each preceded by a slash::

    /{name}         -> /(?P<name>[a-zA-Z0-9-+_]+)
    /{name:int}     -> /(?P<name>[0-9]+)
    /{name:alpha}   -> /(?P<name>[a-zA-Z]+)
    /{name?}        -> (?:/(?P<name>[a-zA-Z0-9-+_]+))?
    /{name:int?}    -> (?:/(?P<name>[0-9]+))?

An optional placeholder swallows its leading slash, so ``/category/{slug?}``
matches both ``/category`` and ``/category/shoes``. Anything that is not a
placeholder is passed through untouched, and a template that already uses
native ``(?P<name>...)`` groups is returned as-is.
"""

import re
from dataclasses import dataclass

from restfluent.routing.params import type_pattern

_PLACEHOLDER = re.compile(r"/\{([A-Za-z_][A-Za-z0-9_]*)(?::([A-Za-z0-9_]+))?(\?)?\}")
_NATIVE_GROUP = "(?P<"


@dataclass(frozen=True, slots=True)
class TemplateParam:
    """A parsed ``{...}`` placeholder.

    ``/{id}``        -> TemplateParam("id")
    ``/{id:int}``    -> TemplateParam("id", param_type="int")
    ``/{slug?}``     -> TemplateParam("slug", optional=True)
    """

    name: str
    param_type: str | None = None
    optional: bool = False

    @property
    def pattern(self) -> str:
        """Character class the parameter's capture group uses."""
        return type_pattern(self.param_type)

    def to_regex(self) -> str:
        """Render the placeholder, including its leading slash."""
        group = f"(?P<{self.name}>{self.pattern})"
        if self.optional:
            return f"(?:/{group})?"
        return f"/{group}"


def _param_from_match(match: re.Match[str]) -> TemplateParam:
    name, param_type, optional = match.groups()
    return TemplateParam(name=name, param_type=param_type, optional=optional == "?")


def parse_template(template: str) -> list[TemplateParam]:
    """List the placeholders in *template*, left to right.

    Examples::

        "/users"                    -> []
        "/users/{id:int}"           -> [TemplateParam("id", "int")]
        "/posts/{year:int}/{slug?}" -> [TemplateParam("year", "int"),
                                        TemplateParam("slug", optional=True)]
    """
    if _NATIVE_GROUP in template:
        return []
    return [_param_from_match(m) for m in _PLACEHOLDER.finditer(template)]


def compile_path(template: str) -> str:
    """Compile a path template into a pattern with named capture groups.

    Never raises: segments that do not look like a placeholder are kept
    literally. Compiling an already-compiled pattern returns it unchanged.
    """
    if _NATIVE_GROUP in template or "{" not in template:
        return template
    return _PLACEHOLDER.sub(lambda m: _param_from_match(m).to_regex(), template)
