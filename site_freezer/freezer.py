"""Freeze a Flask application into static files.

A :class:`Freezer` asks its generators which routes and URLs to visit,
requests each one through the application's test client and writes every
successful response below the destination directory::

    freezer = Freezer(app)

    @freezer.register_generator(priority=80)
    def articles():
        for slug in get_slugs():
            yield 'article_page', {'slug': slug}

    freezer.freeze()

Configuration lives in ``app.config``:

``FREEZER_DESTINATION``
    Output directory, ``'build'`` by default.
``FREEZER_OVERRIDE_URL_GENERATOR``
    When true (the default) every ``url_for`` call made while a page
    renders during a freeze also freezes the page it points to.
``FREEZER_EXCLUDED_ROUTES``
    Endpoints the built-in generator leaves out.
``FREEZER_ACCEPTED_STATUSES``
    Response statuses worth writing, ``(200,)`` by default.
``FREEZER_SKIP_FAILING_GENERATORS``
    Log and skip a generator that raises instead of aborting the freeze.
``FREEZER_DEDUP_ROUTES_BY_PARAMS``
    Remember frozen routes by name and parameters rather than by name
    alone, so one endpoint can be frozen with several sets of values.
"""

import logging
from contextlib import contextmanager, nullcontext
from pathlib import Path

from flask import has_request_context, request

from .registry import GeneratorRegistry
from .routes import NamedRoute, as_route_spec, params_key, resolve_url, url_to_path
from .state import FrozenState

logger = logging.getLogger('site_freezer')


class FreezerError(Exception):
    """Base class for errors that stop a freeze."""


class DestinationError(FreezerError, OSError):
    """The destination directory could not be created."""


class FreezingUrlGenerator:
    """Stands in for ``app.url_for`` and freezes every route it is asked for."""

    def __init__(self, generate, freezer):
        self._generate = generate
        self._freezer = freezer

    def __call__(self, endpoint, **values):
        url = self._generate(endpoint, **values)
        if self._freezer.is_freezing:
            if endpoint.startswith('.'):
                blueprint = request.blueprint if has_request_context() else None
                endpoint = f'{blueprint}{endpoint}' if blueprint else endpoint[1:]
            params = {key: value for key, value in values.items() if not key.startswith('_')}
            self._freezer.discover_route(endpoint, params)
        return url


class Freezer:
    def __init__(self, app):
        self.app = app
        app.config.setdefault('FREEZER_DESTINATION', 'build')
        app.config.setdefault('FREEZER_OVERRIDE_URL_GENERATOR', True)
        app.config.setdefault('FREEZER_EXCLUDED_ROUTES', ())
        app.config.setdefault('FREEZER_ACCEPTED_STATUSES', (200,))
        app.config.setdefault('FREEZER_SKIP_FAILING_GENERATORS', True)
        app.config.setdefault('FREEZER_DEDUP_ROUTES_BY_PARAMS', False)

        self._generators = GeneratorRegistry()
        self._state = None

        if app.config['FREEZER_OVERRIDE_URL_GENERATOR']:
            app.url_for = FreezingUrlGenerator(app.url_for, self)
            # Templates see the url_for captured when the Jinja environment was made.
            app.jinja_env.globals['url_for'] = app.url_for

        self.register_generator(self._all_routes)

    @property
    def is_freezing(self) -> bool:
        return self._state is not None

    @property
    def destination(self) -> Path:
        return Path(self.app.config['FREEZER_DESTINATION'])

    def register_generator(self, generator=None, priority: int = 100):
        """Register a function returning routes and URLs to freeze.

        Each item it returns is either a URL string or a
        ``(endpoint, params)`` pair. Lower priorities run first.

        Called with a generator it returns the freezer, so calls chain.
        As a decorator it needs parentheses, ``@freezer.register_generator()``
        or ``@freezer.register_generator(priority=80)``, and hands the
        decorated function back unchanged.
        """
        if generator is None:
            return self._generators.register(priority=priority)
        self._generators.register(generator, priority)
        return self

    def freeze(self) -> None:
        """Freeze every route the generators produce."""
        destination = self.destination
        logger.info("Freezing %s into %s", self.app.name, destination)

        self._state = state = FrozenState()
        try:
            with self.app.app_context(), self._error_pages_disabled():
                try:
                    destination.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    raise DestinationError(f"Cannot create destination {destination}: {exc}") from exc

                for spec in self._collect_routes():
                    if isinstance(spec, NamedRoute):
                        self.freeze_route(spec.name, spec.params, state)
                    else:
                        self.freeze_url(spec.url, state)
                    self._freeze_pending(state)
        finally:
            self._state = None

        logger.info("Froze %d URLs from %d routes", len(state.frozen_urls), len(state.frozen_routes))

    def freeze_route(self, name, params=None, state=None):
        """Freeze the URL built for endpoint ``name``; unbuildable routes are skipped."""
        state = self._current_state(state)
        params = dict(params or {})
        key = self._route_key(name, params)
        if state.should_skip_route(key):
            return None

        config = self.app.config
        # Built relative to APPLICATION_ROOT; the test client prepends it.
        url = resolve_url(self.app.url_map, name, params,
                          server_name=config['SERVER_NAME'] or 'localhost',
                          url_scheme=config['PREFERRED_URL_SCHEME'])
        if url is None:
            logger.debug("Skipping route %r: no URL can be built from %r", name, params)
            return None

        state.record_route(key)
        return self.freeze_url(url, state)

    def freeze_url(self, url, state=None):
        """Fetch ``url`` and write the response; returns the file written, if any.

        Outside :meth:`freeze` each call gets its own empty state unless one
        is passed, and view exceptions still become skipped 500 responses.
        """
        state = self._current_state(state)
        if state.should_skip_url(url):
            return None

        state.in_flight.add(url)
        standalone = nullcontext() if self.is_freezing else self._error_pages_disabled()
        try:
            with standalone:
                response = self.app.test_client().get(url)
            status, body = response.status_code, response.get_data()
            response.close()
        finally:
            state.in_flight.discard(url)

        if status not in self.app.config['FREEZER_ACCEPTED_STATUSES']:
            level = logging.WARNING if status >= 500 else logging.DEBUG
            logger.log(level, "Skipping %s: status %d", url, status)
            return None

        path = self.destination / url_to_path(url).lstrip('/')
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(body)
        except OSError:
            logger.exception("Could not write %s to %s", url, path)
            return None

        state.record_url(url)
        logger.info("Froze %s -> %s", url, path)
        return path

    def discover_route(self, name, params):
        """Freeze a route linked from a page while the pass is running.

        Links found while another page is still rendering are queued and
        frozen after that request finishes, so link chains do not nest
        requests.
        """
        state = self._state
        if state is None or state.should_skip_route(self._route_key(name, params)):
            return
        if state.in_flight:
            state.defer(NamedRoute(name, params))
        else:
            self.freeze_route(name, params, state)

    def _freeze_pending(self, state):
        while state.pending:
            route = state.pending.popleft()
            self.freeze_route(route.name, route.params, state)

    def _all_routes(self):
        excluded = set(self.app.config['FREEZER_EXCLUDED_ROUTES'])
        seen = set()
        for rule in self.app.url_map.iter_rules():
            if rule.endpoint in excluded or rule.endpoint in seen:
                continue
            seen.add(rule.endpoint)
            yield NamedRoute(rule.endpoint)

    def _collect_routes(self):
        routes = []
        for generator in self._generators:
            try:
                routes.extend([as_route_spec(item) for item in generator()])
            except Exception:
                if not self.app.config['FREEZER_SKIP_FAILING_GENERATORS']:
                    raise
                logger.exception("Generator %s failed, skipping its routes",
                                 getattr(generator, '__name__', generator))
        return routes

    def _route_key(self, name, params):
        if not self.app.config['FREEZER_DEDUP_ROUTES_BY_PARAMS']:
            return name
        return name, params_key(params)

    def _current_state(self, state):
        if state is not None:
            return state
        if self._state is not None:
            return self._state
        return FrozenState()

    @contextmanager
    def _error_pages_disabled(self):
        """Turn handler exceptions into 500 responses instead of raising them."""
        app = self.app
        saved = app.debug, app.testing, app.config.get('PROPAGATE_EXCEPTIONS')
        app.debug = False
        app.testing = False
        app.config['PROPAGATE_EXCEPTIONS'] = False
        try:
            yield
        finally:
            app.debug, app.testing, app.config['PROPAGATE_EXCEPTIONS'] = saved
