"""Route and RouteMatch frozen dataclasses."""

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from waypath.routing.compiler import (
    DEFAULT_SUBPATTERN,
    CompiledPattern,
    compile_pattern,
    desugar_template,
)
from waypath.routing.hooks import GenerateHook, MatchHook


class _PatternCache:
    """Compile-once cell for a route's regex.

    Keyed by the default subpattern so routers with different configs can
    share a route. Never pickled: a restored route recompiles on first use.
    """

    __slots__ = ("_lock", "_patterns")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._patterns: dict[str, CompiledPattern] = {}

    def get(self, key: str, build: Callable[[], CompiledPattern]) -> CompiledPattern:
        pattern = self._patterns.get(key)
        if pattern is not None:
            return pattern
        with self._lock:
            pattern = self._patterns.get(key)
            if pattern is None:
                pattern = build()
                self._patterns[key] = pattern
            return pattern

    def __reduce__(self) -> tuple[type, tuple[()]]:
        return (_PatternCache, ())

    def __deepcopy__(self, memo: dict[int, Any]) -> "_PatternCache":
        return _PatternCache()


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created by a ``RouteMap`` (or any external factory) and never changed
    afterwards. Inline placeholders such as ``{id:(\\d+)}`` are desugared
    on construction: ``path`` keeps ``{id}`` and ``tokens`` gains the
    subpattern.
    """

    path: str
    name: str = ""
    tokens: dict[str, str] = field(default_factory=dict)
    defaults: dict[str, Any] = field(default_factory=dict)
    allows: frozenset[str] = frozenset()
    secure: bool | None = None
    wildcard: str | None = None
    routable: bool = True
    is_match: MatchHook | None = None
    generate: GenerateHook | None = None
    handler: Any = None
    extras: dict[str, Any] = field(default_factory=dict)
    _cache: _PatternCache = field(
        default_factory=_PatternCache, init=False, repr=False, compare=False
    )

    # Mutable dict fields
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        path, inline = desugar_template(self.path)
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "name", self.name or "")
        object.__setattr__(self, "tokens", {**self.tokens, **inline})
        object.__setattr__(self, "defaults", dict(self.defaults))
        object.__setattr__(self, "extras", dict(self.extras))
        object.__setattr__(self, "allows", _methods(self.allows))

    def compile(self, default_subpattern: str = DEFAULT_SUBPATTERN) -> CompiledPattern:
        """Return the compiled pattern, compiling it on first use."""
        return self._cache.get(
            default_subpattern,
            lambda: compile_pattern(
                self.path,
                self.tokens,
                self.wildcard,
                default_subpattern=default_subpattern,
            ),
        )


def _methods(allows: str | Iterable[str]) -> frozenset[str]:
    if isinstance(allows, str):
        return frozenset({allows})
    return frozenset(allows)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a match attempt.

    Truthy only when the route matched. A failed result names the rule
    that rejected the route (``"routable"``, ``"path"``, ``"allows"``,
    ``"secure"`` or ``"custom"``).
    """

    matched: bool
    route: Route | None = None
    values: dict[str, Any] = field(default_factory=dict)
    failed_rule: str | None = None

    __hash__ = None  # type: ignore[assignment]

    def __bool__(self) -> bool:
        return self.matched

    @property
    def name(self) -> str | None:
        return self.route.name if self.route is not None else None
