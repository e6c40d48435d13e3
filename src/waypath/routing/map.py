"""Route map: the ordered registry of named routes.

Routes are declared through a map handle. Each handle carries an
immutable ``RouteScope`` (name prefix, path prefix and inherited route
settings); ``attach()`` hands a child scope to a builder callback::

    routes = RouteMap()
    routes.route("home", "/")

    def blog(group: RouteMap) -> None:
        group.tokens({"id": r"(\\d+)"})
        group.get("read", "/{id}")          # "blog.read" -> "/blog/{id}"

    routes.attach("blog.", "/blog", blog)
"""

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from waypath.errors import RouteAlreadyExists, RouteNotFound
from waypath.routing import compiler
from waypath.routing.route import Route

logger = logging.getLogger("waypath.routing")

# scheme://host/... templates are not path-prefixed
_FULL_URI = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")

# Settings that only make sense per route, never per scope
_ROUTE_ONLY = frozenset({"is_match", "generate", "handler"})


@dataclass(frozen=True, slots=True)
class RouteScope:
    """Settings inherited by every route declared in a scope.

    Dict settings merge and ``allows`` accumulates as scopes nest; scalar
    settings are replaced.
    """

    name_prefix: str = ""
    path_prefix: str = ""
    tokens: dict[str, str] = field(default_factory=dict)
    allows: frozenset[str] = frozenset()
    defaults: dict[str, Any] = field(default_factory=dict)
    secure: bool | None = None
    wildcard: str | None = None
    routable: bool = True
    extras: dict[str, Any] = field(default_factory=dict)

    def child(self, name_prefix: str, path_prefix: str) -> "RouteScope":
        """Scope for an attached group: prefixes concatenate."""
        return replace(
            self,
            name_prefix=self.name_prefix + name_prefix,
            path_prefix=self.path_prefix + path_prefix,
        )

    def updated(self, **changes: Any) -> "RouteScope":
        """Return a copy with *changes* applied using inheritance rules."""
        for key in ("tokens", "defaults", "extras"):
            if key in changes:
                changes[key] = {**getattr(self, key), **changes[key]}
        if "allows" in changes:
            allows = changes["allows"]
            if isinstance(allows, str):
                allows = (allows,)
            changes["allows"] = self.allows | frozenset(allows)
        return replace(self, **changes)

    def build(self, name: str | None, path: str, **settings: Any) -> Route:
        """Create a route in this scope. *settings* override inherited ones."""
        route_only = {key: settings.pop(key) for key in _ROUTE_ONLY & settings.keys()}
        scope = self.updated(**settings)
        full_name = scope.name_prefix + name if name else ""
        full_path = path if _FULL_URI.match(path) else scope.path_prefix + path
        return Route(
            path=full_path,
            name=full_name,
            tokens=scope.tokens,
            defaults=scope.defaults,
            allows=scope.allows,
            secure=scope.secure,
            wildcard=scope.wildcard,
            routable=scope.routable,
            extras=scope.extras,
            **route_only,
        )


class _RouteStore:
    """Registry shared by a map and every handle attached from it."""

    __slots__ = ("frozen", "next_index", "routes")

    def __init__(self) -> None:
        self.routes: dict[str | int, Route] = {}
        # Unnamed routes are keyed by position, like list appends
        self.next_index = 0
        self.frozen = False


class RouteMap:
    """Ordered collection of routes.

    Named routes are keyed by their prefixed name, unnamed ones by an
    increasing integer. Insertion order is kept until ``sort()``.
    """

    __slots__ = ("_scope", "_store")

    def __init__(self, scope: RouteScope | None = None) -> None:
        self._scope = scope or RouteScope()
        self._store = _RouteStore()

    @property
    def scope(self) -> RouteScope:
        return self._scope

    # -- Registration --

    def route(self, name: str | None, path: str, **settings: Any) -> Route:
        """Create and register a route in the current scope.

        *settings* accepts any ``Route`` field except ``path`` and
        ``name``. Raises ``RouteAlreadyExists`` if the prefixed name is
        taken.
        """
        return self.add_route(self._scope.build(name, path, **settings))

    def get(self, name: str | None, path: str, **settings: Any) -> Route:
        return self._verb("GET", name, path, settings)

    def post(self, name: str | None, path: str, **settings: Any) -> Route:
        return self._verb("POST", name, path, settings)

    def put(self, name: str | None, path: str, **settings: Any) -> Route:
        return self._verb("PUT", name, path, settings)

    def patch(self, name: str | None, path: str, **settings: Any) -> Route:
        return self._verb("PATCH", name, path, settings)

    def delete(self, name: str | None, path: str, **settings: Any) -> Route:
        return self._verb("DELETE", name, path, settings)

    def head(self, name: str | None, path: str, **settings: Any) -> Route:
        return self._verb("HEAD", name, path, settings)

    def options(self, name: str | None, path: str, **settings: Any) -> Route:
        return self._verb("OPTIONS", name, path, settings)

    def _verb(self, method: str, name: str | None, path: str, settings: dict[str, Any]) -> Route:
        allows = settings.pop("allows", ())
        if isinstance(allows, str):
            allows = (allows,)
        return self.route(name, path, allows=(method, *allows), **settings)

    def add_route(self, route: Route) -> Route:
        """Register a prebuilt route as-is (no scope applied)."""
        store = self._check_not_frozen()
        if route.name:
            if route.name in store.routes:
                raise RouteAlreadyExists(route.name)
            store.routes[route.name] = route
        else:
            store.routes[store.next_index] = route
            store.next_index += 1
        logger.debug("Registered route %r -> %s", route.name, route.path)
        return route

    def attach(
        self,
        name_prefix: str,
        path_prefix: str,
        build: Callable[["RouteMap"], None],
    ) -> None:
        """Declare a group of routes under extra name and path prefixes.

        *build* receives a handle on this map whose scope is the current
        one plus the prefixes. Settings made on that handle stay inside
        the group.
        """
        handle = RouteMap(self._scope.child(name_prefix, path_prefix))
        handle._store = self._store
        build(handle)

    # -- Scope settings (apply to routes declared afterwards) --

    def tokens(self, tokens: Mapping[str, str]) -> "RouteMap":
        return self._update_scope(tokens=dict(tokens))

    def allows(self, allows: str | Iterable[str]) -> "RouteMap":
        return self._update_scope(allows=allows)

    def defaults(self, defaults: Mapping[str, Any]) -> "RouteMap":
        return self._update_scope(defaults=dict(defaults))

    def secure(self, secure: bool | None = True) -> "RouteMap":
        return self._update_scope(secure=secure)

    def wildcard(self, wildcard: str | None) -> "RouteMap":
        return self._update_scope(wildcard=wildcard)

    def is_routable(self, routable: bool = True) -> "RouteMap":
        return self._update_scope(routable=routable)

    def extras(self, extras: Mapping[str, Any]) -> "RouteMap":
        return self._update_scope(extras=dict(extras))

    def _update_scope(self, **changes: Any) -> "RouteMap":
        self._scope = self._scope.updated(**changes)
        return self

    # -- Access --

    def get_route(self, name: str) -> Route:
        """Return the route registered under *name*.

        Raises ``RouteNotFound`` for unknown names.
        """
        try:
            return self._store.routes[name]
        except KeyError:
            raise RouteNotFound(name) from None

    def get_routes(self) -> dict[str | int, Route]:
        """Export the registry as a new ordered mapping."""
        return dict(self._store.routes)

    def set_routes(self, routes: Mapping[str | int, Route]) -> None:
        """Replace the registry wholesale, e.g. from a cached export."""
        store = self._check_not_frozen()
        store.routes = dict(routes)
        indexes = [key for key in store.routes if isinstance(key, int)]
        store.next_index = max(indexes) + 1 if indexes else 0

    def __iter__(self) -> Iterator[Route]:
        return iter(list(self._store.routes.values()))

    def __len__(self) -> int:
        return len(self._store.routes)

    def __contains__(self, name: object) -> bool:
        return name in self._store.routes

    # -- Ordering --

    def sort(self) -> None:
        """Reorder routes so longer literal paths are tried first.

        Specificity is the length of the path with every placeholder
        removed. The sort is stable, so ties keep insertion order.
        """
        items = sorted(
            self._store.routes.items(),
            key=lambda item: -len(compiler.remove_param_from_path(item[1].path)),
        )
        self._store.routes = dict(items)
        logger.debug("Sorted %d routes by specificity", len(items))

    @staticmethod
    def remove_param_from_path(path: str) -> str:
        return compiler.remove_param_from_path(path)

    # -- Lifecycle --

    def freeze(self) -> None:
        """Reject further registration on this map and all its handles."""
        self._store.frozen = True

    @property
    def frozen(self) -> bool:
        return self._store.frozen

    def _check_not_frozen(self) -> _RouteStore:
        if self._store.frozen:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        return self._store
