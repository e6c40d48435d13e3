"""Custom match and generate hooks.

A hook is any callable matching the protocol. No base class required::

    def only_json(environ: Mapping[str, Any], values: dict[str, Any]) -> bool:
        return environ.get("HTTP_ACCEPT") == "application/json"

    def stamp_version(data: dict[str, Any]) -> dict[str, Any]:
        data.setdefault("version", "v2")
        return data
"""

from collections.abc import Mapping
from typing import Any, Protocol


class MatchHook(Protocol):
    """Veto or enrich a structural match.

    Receives the request environment and a mutable copy of the matched
    values. Return False to reject the route; writes into *values* are
    kept only when returning True.
    """

    def __call__(self, environ: Mapping[str, Any], values: dict[str, Any]) -> bool: ...


class GenerateHook(Protocol):
    """Transform generation data before token substitution.

    Receives the merged data as a mutable dict. The returned mapping
    replaces the data; returning None keeps the (possibly mutated) dict.
    """

    def __call__(self, data: dict[str, Any]) -> Mapping[str, Any] | None: ...
