"""Route template parsing and regex compilation.

A template mixes literal text with placeholders::

    /blog/{id}/edit                 plain placeholder
    /blog/{id:(\\d+)}/edit           inline subpattern
    /{:controller}/{:action}        colon-prefixed forms
    /archive{/year,month,day}       sequential-optional group

Inline forms are sugar: they desugar to ``{name}`` plus a token entry.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass

from waypath.errors import BadSubpattern, ConfigurationError

logger = logging.getLogger("waypath.routing")

DEFAULT_SUBPATTERN = r"([^/]+)"

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_OPTIONAL = re.compile(r"\{/([A-Za-z_][A-Za-z0-9_]*(?:,[A-Za-z_][A-Za-z0-9_]*)*)\}")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed piece of a route template.

    Literal:   ``/blog/``         (is_param=False)
    Param:     ``{id}``           (is_param=True, param_name="id")
    Inline:    ``{id:(\\d+)}``     (is_param=True, param_name="id", subpattern="(\\d+)")
    Optional:  ``{/year,month}``  (optional_names=("year", "month"))
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    subpattern: str | None = None
    optional_names: tuple[str, ...] = ()

    @property
    def is_literal(self) -> bool:
        return not self.is_param and not self.optional_names


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A template compiled for matching.

    ``template`` is the desugared generation template, ``regex`` the
    anchored matching expression, ``names`` the capture names in order.
    """

    template: str
    regex: re.Pattern[str]
    names: tuple[str, ...]
    wildcard: str | None = None


def parse_template(path: str) -> list[PathSegment]:
    """Split a route template into literal and placeholder segments.

    A ``{`` that does not open a well-formed placeholder is kept as
    literal text.
    """
    segments: list[PathSegment] = []
    literal: list[str] = []
    index = 0
    while index < len(path):
        if path[index] == "{":
            parsed = _parse_placeholder(path, index)
            if parsed is not None:
                segment, index = parsed
                if literal:
                    segments.append(PathSegment("".join(literal)))
                    literal = []
                segments.append(segment)
                continue
        literal.append(path[index])
        index += 1
    if literal:
        segments.append(PathSegment("".join(literal)))
    return segments


def _parse_placeholder(path: str, start: int) -> tuple[PathSegment, int] | None:
    """Parse the placeholder opening at *start*; return it and the end index."""
    optional = _OPTIONAL.match(path, start)
    if optional is not None:
        names = tuple(optional.group(1).split(","))
        return PathSegment(optional.group(0), optional_names=names), optional.end()

    pos = start + 1
    if path.startswith(":", pos):
        pos += 1
    name_match = _NAME.match(path, pos)
    if name_match is None:
        return None
    name = name_match.group()
    pos = name_match.end()

    if path.startswith("}", pos):
        return PathSegment(path[start : pos + 1], is_param=True, param_name=name), pos + 1
    if not path.startswith(":", pos):
        return None

    # Inline subpattern runs to the brace that closes the placeholder
    depth = 1
    index = pos + 1
    while index < len(path):
        char = path[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                segment = PathSegment(
                    path[start : index + 1],
                    is_param=True,
                    param_name=name,
                    subpattern=path[pos + 1 : index],
                )
                return segment, index + 1
        index += 1
    return None


def desugar_template(path: str) -> tuple[str, dict[str, str]]:
    """Reduce inline placeholders to ``{name}`` and collect their subpatterns.

    Examples::

        "/{:controller}"            -> ("/{controller}", {})
        "/{id:(\\d+)}{format}"       -> ("/{id}{format}", {"id": "(\\d+)"})
    """
    parts: list[str] = []
    tokens: dict[str, str] = {}
    for segment in parse_template(path):
        if segment.is_param and segment.param_name is not None:
            parts.append("{" + segment.param_name + "}")
            if segment.subpattern is not None:
                tokens[segment.param_name] = segment.subpattern
        else:
            parts.append(segment.value)
    return "".join(parts), tokens


def remove_param_from_path(path: str) -> str:
    """Strip every placeholder from *path*, keeping only literal text.

    ``/account/foo/{bar}/baz`` -> ``/account/foo//baz``
    ``/account/foo{/bar}``     -> ``/account/foo``
    """
    return "".join(segment.value for segment in parse_template(path) if segment.is_literal)


def compile_pattern(
    path: str,
    tokens: Mapping[str, str] | None = None,
    wildcard: str | None = None,
    *,
    default_subpattern: str = DEFAULT_SUBPATTERN,
) -> CompiledPattern:
    """Compile a route template into an anchored regex.

    Raises ``BadSubpattern`` if a token is not a capturing group, and
    ``ConfigurationError`` for any other template that cannot compile.
    """
    template, inline = desugar_template(path)
    subpatterns = {**(tokens or {}), **inline}
    segments = parse_template(template)

    if sum(1 for segment in segments if segment.optional_names) > 1:
        msg = f"Route path {path!r} has more than one optional segment group."
        raise ConfigurationError(msg)

    if wildcard is not None:
        if _NAME.fullmatch(wildcard) is None:
            msg = f"Wildcard name {wildcard!r} is not a valid param name."
            raise ConfigurationError(msg)
        segments = _trim_trailing_slash(segments)

    parts: list[str] = []
    names: list[str] = []
    for segment in segments:
        if segment.optional_names:
            parts.append(_optional_group(segment.optional_names, subpatterns, default_subpattern))
            names.extend(segment.optional_names)
        elif segment.is_param and segment.param_name is not None:
            name = segment.param_name
            parts.append(_named_group(name, subpatterns.get(name, default_subpattern)))
            names.append(name)
        else:
            parts.append(re.escape(segment.value))

    if wildcard is not None:
        parts.append(f"(?:/(?P<{wildcard}>.*))?")
        names.append(wildcard)

    source = "".join(parts)
    try:
        regex = re.compile(rf"\A{source}\Z")
    except re.error as exc:
        msg = f"Cannot compile route path {path!r}: {exc}"
        raise ConfigurationError(msg) from exc

    logger.debug("Compiled route path %r -> %s", path, regex.pattern)
    return CompiledPattern(
        template=template,
        regex=regex,
        names=tuple(names),
        wildcard=wildcard,
    )


def _named_group(name: str, subpattern: str) -> str:
    """Turn ``(...)`` into ``(?P<name>...)``."""
    if not subpattern.startswith("(") or subpattern.startswith("(?"):
        raise BadSubpattern(name, subpattern)
    return f"(?P<{name}>{subpattern[1:]}"


def _optional_group(
    names: tuple[str, ...],
    subpatterns: Mapping[str, str],
    default_subpattern: str,
) -> str:
    """Nest one optional ``/value`` group per name, innermost last."""
    group = ""
    for name in reversed(names):
        inner = _named_group(name, subpatterns.get(name, default_subpattern))
        group = f"(?:/{inner}{group})?"
    return group


def _trim_trailing_slash(segments: list[PathSegment]) -> list[PathSegment]:
    if not segments or not segments[-1].is_literal:
        return segments
    trimmed = segments[-1].value.rstrip("/")
    if trimmed:
        return [*segments[:-1], PathSegment(trimmed)]
    return segments[:-1]
