"""Route set snapshots for external caching.

``dump_routes()`` turns an exported route mapping into plain lists and
dicts that ``json.dumps`` accepts (provided defaults and extras hold
JSON values). Hooks and handlers are code, not data: they are left out
and re-attached by name in ``load_routes()``::

    cached = json.dumps(dump_routes(routes.get_routes()))
    ...
    fresh = RouteMap()
    fresh.set_routes(load_routes(json.loads(cached), match_hooks={"admin": is_admin}))

Routes also pickle directly when their hooks are importable callables.
"""

from collections.abc import Mapping
from typing import Any

from waypath.routing.hooks import GenerateHook, MatchHook
from waypath.routing.route import Route

SNAPSHOT_VERSION = 1


def dump_route(route: Route) -> dict[str, Any]:
    """Snapshot one route's data fields."""
    return {
        "path": route.path,
        "name": route.name,
        "tokens": dict(route.tokens),
        "defaults": dict(route.defaults),
        "allows": sorted(route.allows),
        "secure": route.secure,
        "wildcard": route.wildcard,
        "routable": route.routable,
        "extras": dict(route.extras),
    }


def dump_routes(routes: Mapping[str | int, Route]) -> dict[str, Any]:
    """Snapshot an exported route mapping, keeping its order and keys."""
    return {
        "version": SNAPSHOT_VERSION,
        "routes": [{"key": key, **dump_route(route)} for key, route in routes.items()],
    }


def load_routes(
    snapshot: Mapping[str, Any],
    *,
    match_hooks: Mapping[str, MatchHook] | None = None,
    generate_hooks: Mapping[str, GenerateHook] | None = None,
    handlers: Mapping[str, Any] | None = None,
) -> dict[str | int, Route]:
    """Rebuild a route mapping from ``dump_routes()`` output.

    Hooks and handlers are looked up by route name.
    Raises ``ValueError`` for an unknown snapshot version.
    """
    version = snapshot.get("version")
    if version != SNAPSHOT_VERSION:
        msg = f"Unsupported route snapshot version: {version!r}"
        raise ValueError(msg)

    match_hooks = match_hooks or {}
    generate_hooks = generate_hooks or {}
    handlers = handlers or {}

    routes: dict[str | int, Route] = {}
    for entry in snapshot["routes"]:
        name = entry["name"]
        routes[entry["key"]] = Route(
            path=entry["path"],
            name=name,
            tokens=entry["tokens"],
            defaults=entry["defaults"],
            allows=frozenset(entry["allows"]),
            secure=entry["secure"],
            wildcard=entry["wildcard"],
            routable=entry["routable"],
            extras=entry["extras"],
            is_match=match_hooks.get(name),
            generate=generate_hooks.get(name),
            handler=handlers.get(name),
        )
    return routes
