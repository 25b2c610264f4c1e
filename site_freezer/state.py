"""Bookkeeping for a single freeze pass."""

from collections import deque
from dataclasses import dataclass, field


@dataclass
class FrozenState:
    frozen_routes: set = field(default_factory=set)
    frozen_urls: set = field(default_factory=set)
    # URLs whose request is still running; a page that links to itself
    # while rendering must not be fetched again.
    in_flight: set = field(default_factory=set)
    # Routes discovered while a page rendered, frozen once that request is done.
    pending: deque = field(default_factory=deque)

    def should_skip_route(self, key) -> bool:
        return key in self.frozen_routes

    def should_skip_url(self, url: str) -> bool:
        return url in self.frozen_urls or url in self.in_flight

    def record_route(self, key):
        self.frozen_routes.add(key)

    def record_url(self, url: str):
        self.frozen_urls.add(url)

    def defer(self, route):
        self.pending.append(route)
