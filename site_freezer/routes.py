"""Route specs, URL resolution and URL-to-file mapping."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from werkzeug.routing import BuildError, Map


@dataclass(frozen=True)
class NamedRoute:
    """A route referenced by endpoint name plus the values to build it with."""

    name: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __hash__(self):
        return hash((self.name, params_key(self.params)))


def params_key(params: Mapping[str, Any]) -> tuple:
    """Hashable, order-independent form of route values."""
    return tuple(sorted((key, str(value)) for key, value in params.items()))


@dataclass(frozen=True)
class LiteralUrl:
    """A URL requested as-is."""

    url: str


RouteSpec = Union[NamedRoute, LiteralUrl]


def as_route_spec(item) -> RouteSpec:
    """Normalise one item yielded by a generator.

    Plain strings are literal URLs; ``(name,)`` and ``(name, params)``
    tuples or lists reference a named route.
    """
    if isinstance(item, (NamedRoute, LiteralUrl)):
        return item
    if isinstance(item, str):
        return LiteralUrl(item)
    if isinstance(item, (tuple, list)) and 1 <= len(item) <= 2:
        name = item[0]
        params = item[1] if len(item) == 2 else None
        return NamedRoute(name, dict(params or {}))
    raise TypeError(f"Cannot freeze {item!r}: expected a URL string or a (name, params) pair")


def resolve_url(url_map: Map, name: str, params: Optional[Mapping[str, Any]] = None, *,
                server_name: str = 'localhost', script_name: str = '/',
                url_scheme: str = 'http') -> Optional[str]:
    """Build the path for endpoint ``name``, or None if it cannot be built."""
    adapter = url_map.bind(server_name, script_name=script_name, url_scheme=url_scheme)
    try:
        return adapter.build(name, dict(params or {}))
    except (BuildError, ValueError, TypeError):
        return None


def url_to_path(url: str) -> str:
    """Map a URL to the file path it is frozen to, relative to the destination."""
    path = url.split('?', 1)[0]
    if path.endswith('/'):
        path += 'index.html'
    else:
        path += '.html'
    if not path.startswith('/'):
        path = '/' + path
    return path
