"""Freeze a Flask application into a tree of static HTML files."""

from .freezer import DestinationError, Freezer, FreezerError, FreezingUrlGenerator
from .registry import GeneratorRegistry
from .routes import LiteralUrl, NamedRoute, RouteSpec, as_route_spec, resolve_url, url_to_path
from .state import FrozenState

__all__ = [
    "DestinationError",
    "Freezer",
    "FreezerError",
    "FreezingUrlGenerator",
    "FrozenState",
    "GeneratorRegistry",
    "LiteralUrl",
    "NamedRoute",
    "RouteSpec",
    "as_route_spec",
    "resolve_url",
    "url_to_path",
]
