"""Path generation from routes.

The inverse of matching: a route template plus a data mapping becomes a
concrete path. Generation never consults the compiled regex, so the
output is not validated against the route's own constraints.
"""

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from waypath.errors import RouteNotFound
from waypath.routing.params import encode_param, is_scalar
from waypath.routing.route import Route

if TYPE_CHECKING:
    from waypath.routing.map import RouteMap

# Placeholders left in a desugared template: {name} and {/name,...}
_TOKEN = re.compile(r"\{/?[A-Za-z_][A-Za-z0-9_]*(?:,[A-Za-z_][A-Za-z0-9_]*)*\}")
_OPTIONAL = re.compile(r"\{/([A-Za-z_][A-Za-z0-9_]*(?:,[A-Za-z_][A-Za-z0-9_]*)*)\}")


class Generator:
    """Renders paths for routes.

    Usage::

        generator = Generator(route_map)
        generator.generate("blog.read", {"id": 42})   # "/blog/42"
        generator.generate(route, {"q": "a b"})      # "/search/a%20b"

    Keys in *data* that do not map to tokens are ignored; tokens with no
    data are left in place.
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: "RouteMap | None" = None) -> None:
        self._routes = routes

    def generate(self, route: Route | str, data: Mapping[str, Any] | None = None) -> str:
        """Generate a path with percent-encoded values."""
        return self._generate(self._resolve(route), data or {}, raw=False)

    def generate_raw(self, route: Route | str, data: Mapping[str, Any] | None = None) -> str:
        """Generate a path with values inserted as-is.

        Use when the data is already encoded or deliberately holds slashes.
        """
        return self._generate(self._resolve(route), data or {}, raw=True)

    def _resolve(self, route: Route | str) -> Route:
        if isinstance(route, Route):
            return route
        if self._routes is None:
            raise RouteNotFound(route)
        return self._routes.get_route(route)

    def _generate(self, route: Route, data: Mapping[str, Any], *, raw: bool) -> str:
        merged = self._merge_data(route, data)
        replacements = _token_replacements(merged, raw=raw)
        _add_optional_replacement(route.path, replacements, merged, raw=raw)
        path = _TOKEN.sub(lambda m: replacements.get(m.group(0), m.group(0)), route.path)
        return _add_wildcard(route, path, merged, raw=raw)

    @staticmethod
    def _merge_data(route: Route, data: Mapping[str, Any]) -> dict[str, Any]:
        merged = {**route.defaults, **data}
        if route.generate is not None:
            result = route.generate(merged)
            if result is not None:
                merged = dict(result)
        return merged


def _token_replacements(data: Mapping[str, Any], *, raw: bool) -> dict[str, str]:
    return {
        "{" + key + "}": encode_param(value, raw=raw)
        for key, value in data.items()
        if value is None or is_scalar(value)
    }


def _add_optional_replacement(
    path: str,
    replacements: dict[str, str],
    data: Mapping[str, Any],
    *,
    raw: bool,
) -> None:
    """Render the ``{/a,b,c}`` group; the first missing name ends it."""
    found = _OPTIONAL.search(path)
    if found is None:
        return
    parts: list[str] = []
    for name in found.group(1).split(","):
        value = data.get(name)
        if value is None:
            break
        if is_scalar(value):
            parts.append("/" + encode_param(value, raw=raw))
    replacements[found.group(0)] = "".join(parts)


def _add_wildcard(route: Route, path: str, data: Mapping[str, Any], *, raw: bool) -> str:
    if route.wildcard is None:
        return path
    values = data.get(route.wildcard)
    if not isinstance(values, (list, tuple)):
        return path
    path = path.rstrip("/")
    for value in values:
        if is_scalar(value):
            path += "/" + encode_param(value, raw=raw)
    return path
