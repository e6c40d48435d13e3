"""Request matching against compiled routes.

Matching is pure: a ``Route`` is never written to, every attempt returns
a fresh ``RouteMatch``. Rules run in a fixed order and stop at the first
failure.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from waypath.config import RouterConfig
from waypath.routing.params import convert_param, split_wildcard
from waypath.routing.route import Route, RouteMatch

logger = logging.getLogger("waypath.routing")

# Rule names in evaluation order; a later failure is a closer miss
RULES: tuple[str, ...] = ("routable", "path", "allows", "secure", "custom")


class Matcher:
    """Tests routes against a request path and environment.

    Usage::

        matcher = Matcher()
        result = matcher.match(route, "/blog/42", {"REQUEST_METHOD": "GET"})
        if result:
            result.values["id"]  # 42
    """

    __slots__ = ("_config",)

    def __init__(self, config: RouterConfig | None = None) -> None:
        self._config = config or RouterConfig()

    @property
    def config(self) -> RouterConfig:
        return self._config

    def is_match(self, route: Route, path: str, environ: Mapping[str, Any]) -> bool:
        return self.match(route, path, environ).matched

    def match(self, route: Route, path: str, environ: Mapping[str, Any]) -> RouteMatch:
        """Match one route.

        Raises ``BadSubpattern`` or ``ConfigurationError`` if the route's
        template cannot be compiled; every other miss is returned.
        """
        if not route.routable:
            return self._fail(route, "routable")

        values = self._match_path(route, path)
        if values is None:
            return self._fail(route, "path")

        if not self._match_allows(route, environ):
            return self._fail(route, "allows")

        if not self._match_secure(route, environ):
            return self._fail(route, "secure")

        if route.is_match is not None:
            candidate = dict(values)
            if not route.is_match(environ, candidate):
                return self._fail(route, "custom")
            values = candidate

        return RouteMatch(matched=True, route=route, values=values)

    def match_first(
        self,
        routes: Iterable[Route],
        path: str,
        environ: Mapping[str, Any],
    ) -> RouteMatch:
        """Return the first route that matches, in iteration order.

        On a miss the result carries the closest failure: the route that
        passed the most rules, earliest route on ties. With no routes at
        all, ``route`` is None.
        """
        closest: RouteMatch | None = None
        for route in routes:
            result = self.match(route, path, environ)
            if result.matched:
                return result
            if closest is None or _score(result) > _score(closest):
                closest = result
        return closest if closest is not None else RouteMatch(matched=False)

    def _match_path(self, route: Route, path: str) -> dict[str, Any] | None:
        pattern = route.compile(self._config.default_subpattern)
        found = pattern.regex.match(path)
        if found is None:
            return None

        values = dict(route.defaults)
        for name, captured in found.groupdict().items():
            if name == route.wildcard:
                values[name] = split_wildcard(captured)
            elif captured:
                values[name] = convert_param(captured, coerce_digits=self._config.coerce_digits)
        return values

    def _match_allows(self, route: Route, environ: Mapping[str, Any]) -> bool:
        if not route.allows:
            return True
        return environ.get(self._config.method_key) in route.allows

    def _match_secure(self, route: Route, environ: Mapping[str, Any]) -> bool:
        if route.secure is None:
            return True
        return route.secure == self._is_https(environ)

    def _is_https(self, environ: Mapping[str, Any]) -> bool:
        config = self._config
        if environ.get(config.https_key) == "on":
            return True
        port = environ.get(config.port_key)
        return port is not None and str(port) == str(config.secure_port)

    @staticmethod
    def _fail(route: Route, rule: str) -> RouteMatch:
        logger.debug("Route %r rejected by %s rule", route.name or route.path, rule)
        return RouteMatch(matched=False, route=route, failed_rule=rule)


def _score(result: RouteMatch) -> int:
    if result.failed_rule is None:
        return -1
    return RULES.index(result.failed_rule)
