"""Waypath: named, parameterized route matching and path generation.

Maps request paths to route definitions and renders paths back from a
route plus data. Transport, dispatch and persistence are left to the
caller.

Basic usage::

    from waypath import Router

    router = Router()
    router.map.get("post", "/blog/{id:(\\d+)}{/format}")
    router.compile()

    match = router.match("/blog/42", {"REQUEST_METHOD": "GET"})
    match.values            # {"id": 42}
    router.url_for("post", id=7, format="json")   # "/blog/7/json"
"""

__version__ = "0.1.0-dev"
__all__ = [
    "BadSubpattern",
    "ConfigurationError",
    "GenerateHook",
    "Generator",
    "MatchHook",
    "Matcher",
    "NoRouteMatched",
    "Route",
    "RouteAlreadyExists",
    "RouteMap",
    "RouteMatch",
    "RouteNotFound",
    "Router",
    "RouterConfig",
    "WaypathError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypath`` fast while providing a clean top-level API.
    """
    if name == "RouterConfig":
        from waypath.config import RouterConfig

        return RouterConfig

    if name in (
        "GenerateHook",
        "Generator",
        "MatchHook",
        "Matcher",
        "Route",
        "RouteMap",
        "RouteMatch",
        "Router",
    ):
        from waypath import routing as _routing

        return getattr(_routing, name)

    if name in (
        "BadSubpattern",
        "ConfigurationError",
        "NoRouteMatched",
        "RouteAlreadyExists",
        "RouteNotFound",
        "WaypathError",
    ):
        from waypath import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
