"""Path parameter conversion.

Captured values come out of the regex as percent-encoded strings and are
decoded before conversion; generated values go into the template as
percent-encoded strings.
"""

from typing import Any
from urllib.parse import quote, unquote

# Types that render as a single path segment
SCALAR_TYPES: tuple[type, ...] = (str, int, float, bool)


def is_scalar(value: Any) -> bool:
    """Return True if *value* can be substituted into a single token."""
    return isinstance(value, SCALAR_TYPES)


def convert_param(value: str, *, coerce_digits: bool = True) -> str | int:
    """Convert a captured path parameter string.

    The capture is percent-decoded first. ASCII digit-only strings then
    become ``int`` when *coerce_digits* is set; everything else passes
    through unchanged.
    """
    value = unquote(value)
    if coerce_digits and value.isascii() and value.isdigit():
        return int(value)
    return value


def split_wildcard(value: str | None) -> list[str]:
    """Split a wildcard capture into its path segments."""
    if not value:
        return []
    return [unquote(part) for part in value.split("/")]


def encode_param(value: Any, *, raw: bool = False) -> str:
    """Render a scalar (or ``None``) for substitution into a path.

    Encoding follows RFC 3986: everything except unreserved characters is
    percent-encoded, so ``/`` inside a value cannot create a new segment.
    Booleans render as ``"1"`` and ``""``.
    """
    if value is None or value is False:
        return ""
    text = "1" if value is True else str(value)
    if raw:
        return text
    return quote(text, safe="")
