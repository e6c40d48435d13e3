"""Router: a route map wired to a matcher and a generator.

Routes are registered during setup; ``compile()`` optionally sorts them
by specificity and freezes the map.
"""

import logging
from collections.abc import Mapping
from typing import Any

from waypath.config import RouterConfig
from waypath.errors import NoRouteMatched
from waypath.routing.generator import Generator
from waypath.routing.map import RouteMap
from waypath.routing.matcher import Matcher
from waypath.routing.route import Route, RouteMatch

logger = logging.getLogger("waypath.routing")


class Router:
    """Match requests and generate paths over one route map.

    Usage::

        router = Router()
        router.map.get("user", "/users/{id}", tokens={"id": r"(\\d+)"})
        router.compile()
        match = router.match("/users/42", {"REQUEST_METHOD": "GET"})
        router.url_for("user", id=7)   # "/users/7"
    """

    __slots__ = ("_config", "_generator", "_map", "_matcher")

    def __init__(self, config: RouterConfig | None = None, routes: RouteMap | None = None) -> None:
        self._config = config or RouterConfig()
        self._map = routes if routes is not None else RouteMap()
        self._matcher = Matcher(self._config)
        self._generator = Generator(self._map)

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def map(self) -> RouteMap:
        return self._map

    @property
    def matcher(self) -> Matcher:
        return self._matcher

    @property
    def generator(self) -> Generator:
        return self._generator

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes in matching order."""
        return list(self._map)

    def add(self, route: Route) -> Route:
        """Add a prebuilt route. Must be called before compile()."""
        return self._map.add_route(route)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        if self._config.sort_on_compile:
            self._map.sort()
        self._map.freeze()
        logger.debug("Router compiled with %d routes", len(self._map))

    def match(self, path: str, environ: Mapping[str, Any] | None = None) -> RouteMatch:
        """Return the first matching route, or the closest failure."""
        return self._matcher.match_first(self._map, path, environ or {})

    def resolve(self, path: str, environ: Mapping[str, Any] | None = None) -> RouteMatch:
        """Like ``match()``, but raise ``NoRouteMatched`` on a miss."""
        result = self.match(path, environ)
        if not result.matched:
            raise NoRouteMatched(path, result.route, result.failed_rule)
        return result

    def url_for(self, name: str, /, **data: Any) -> str:
        """Generate the path for the route named *name*."""
        return self._generator.generate(name, data)
