"""Path parameter type classes.

Built-in character classes for template segments like ``{id:int}``.
Unknown types fall back to the default class.
"""

# Letters, digits, hyphen, plus and underscore
DEFAULT_PATTERN = "[a-zA-Z0-9-+_]+"

TYPE_PATTERNS: dict[str, str] = {
    "int": "[0-9]+",
    "alpha": "[a-zA-Z]+",
}


def type_pattern(param_type: str | None) -> str:
    """Return the character class for *param_type*.

    ``None``, the empty string and unrecognised names all map to
    ``DEFAULT_PATTERN``.
    """
    if not param_type:
        return DEFAULT_PATTERN
    return TYPE_PATTERNS.get(param_type, DEFAULT_PATTERN)
