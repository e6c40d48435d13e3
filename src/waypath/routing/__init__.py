"""Routing: template compilation, request matching and path generation.

Routes are declared on a ``RouteMap``, matched by a ``Matcher`` and
rendered back into paths by a ``Generator``. ``Router`` wires the three
together.
"""

from waypath.routing.compiler import (
    CompiledPattern,
    PathSegment,
    compile_pattern,
    desugar_template,
    parse_template,
    remove_param_from_path,
)
from waypath.routing.generator import Generator
from waypath.routing.hooks import GenerateHook, MatchHook
from waypath.routing.map import RouteMap, RouteScope
from waypath.routing.matcher import Matcher
from waypath.routing.route import Route, RouteMatch
from waypath.routing.router import Router
from waypath.routing.snapshot import dump_routes, load_routes

__all__ = [
    "CompiledPattern",
    "GenerateHook",
    "Generator",
    "MatchHook",
    "Matcher",
    "PathSegment",
    "Route",
    "RouteMap",
    "RouteMatch",
    "RouteScope",
    "Router",
    "compile_pattern",
    "desugar_template",
    "dump_routes",
    "load_routes",
    "parse_template",
    "remove_param_from_path",
]
