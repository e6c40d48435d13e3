"""Waypath exception hierarchy.

Shared across the compiler, matcher, generator and route map so every
module raises and catches the same types. Routine misses are not errors:
the matcher reports them through ``RouteMatch``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waypath.routing.route import Route


class WaypathError(Exception):
    """Base for all waypath-specific errors."""


class ConfigurationError(WaypathError):
    """Raised when a route definition cannot be compiled.

    Surfaces lazily, at the first match attempt on the offending route.
    """


class BadSubpattern(ConfigurationError):
    """A token subpattern is not wrapped in a capturing group."""

    def __init__(self, name: str, subpattern: str) -> None:
        self.name = name
        self.subpattern = subpattern
        super().__init__(
            f"Subpattern for param {name!r} must start with '(' "
            f"and be a capturing group, got {subpattern!r}."
        )


class RouteAlreadyExists(WaypathError):  # noqa: N818
    """A named route was registered twice in the same map."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route {name!r} already exists.")


class RouteNotFound(WaypathError):  # noqa: N818
    """No route is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route {name!r} not found.")


class NoRouteMatched(WaypathError):  # noqa: N818
    """No route fits the request.

    Raised only by ``Router.resolve()``. ``failed`` is the route that got
    closest to matching, ``failed_rule`` the rule it broke.
    """

    def __init__(
        self,
        path: str,
        failed: Route | None = None,
        failed_rule: str | None = None,
    ) -> None:
        self.path = path
        self.failed = failed
        self.failed_rule = failed_rule
        detail = f"No route matches {path!r}"
        if failed is not None:
            detail += f" (closest: {failed.name or failed.path!r} failed on {failed_rule})"
        super().__init__(detail)
