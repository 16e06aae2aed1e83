"""Router — resolves the current path to a live route instance.

The outermost router owns a ``HistorySynchronizer``. On every committed
path change it resolves the path against its registry namespace and
either updates the current route in place (same matcher, only the
parameters changed) or replaces it: create the new route, ``leave()``
and dispose the old one, then ``enter()`` the new one. Then it emits
``update``.

Signals:

* ``change``: re-emitted from the synchronizer before a change commits.
  The payload is a ``RouteChangeEvent``; abort or redirect it here.
* ``update``: after each resolution that found a route.

Nested routers share their parent's synchronizer, resolve their own
namespace against the same path, and take the URL mode from the
outermost router::

    class Pages(BaseRoute):
        def enter(self) -> None:
            self.pages = self.link(
                Router(parent=self.router, config=RouterConfig(namespace="pages")).start()
            )
"""

import logging
from collections import ChainMap
from contextvars import Token
from types import TracebackType
from typing import Any

import anyio

from waypoint.config import RouterConfig
from waypoint.context import current_router, router_var
from waypoint.errors import ConfigurationError
from waypoint.history.events import RouteChangeEvent
from waypoint.history.platform import HistoryPlatform
from waypoint.history.query import QueryParams
from waypoint.history.synchronizer import CHANGE, COMMIT_CHANGE, HistorySynchronizer
from waypoint.routing.registry import RouteRegistry, default_registry
from waypoint.routing.route import BaseRoute
from waypoint.signals import Observable, SignalDispatcher

logger = logging.getLogger("waypoint.router")

UPDATE = "update"


class Router(SignalDispatcher):
    """Keeps ``current_route`` in step with the session history.

    Usage::

        history = MemoryHistory()
        with Router(history, registry=registry) as router:
            router.on("change", guard)
            router.set_path("RouteA/42")
            router.current_route.id   # "42"
    """

    _current_route = Observable(None)

    def __init__(
        self,
        platform: HistoryPlatform | None = None,
        *,
        config: RouterConfig | None = None,
        registry: RouteRegistry | None = None,
        parent: "Router | None" = None,
    ) -> None:
        super().__init__()
        self.config = config or RouterConfig()
        self.platform = platform
        self.namespace = self.config.namespace
        self.force_reload = self.config.force_reload
        self.parent = parent
        self.registry = registry
        self.history: HistorySynchronizer | None = None
        self.scope: ChainMap[str, Any] = ChainMap()
        self.started = False
        self._use_hash_urls = self.config.use_hash_urls
        self._tokens: list[Token["Router"]] = []

    # -- Lifecycle --

    def start(self) -> "Router":
        """Mount the router and resolve the current path. Returns ``self``.

        A router whose parent is given, or that starts inside another
        router's ``with`` block, nests under that router. Otherwise it
        is the outermost router and needs a platform.
        """
        if self.disposed:
            msg = "Cannot start a disposed router."
            raise RuntimeError(msg)
        if self.started:
            return self

        parent = self.parent if self.parent is not None else current_router()
        if parent is self:
            parent = None

        if parent is not None:
            if parent.history is None:
                msg = "A nested Router's parent must be started first."
                raise RuntimeError(msg)
            self.parent = parent
            self.history = parent.history
            if self.registry is None:
                self.registry = parent.registry
            self.scope = parent.scope.new_child()
            self.started = True
            self._register_history_listeners()
            self._update()
            return self

        if self.platform is None:
            msg = "The outermost Router needs a history platform, e.g. Router(MemoryHistory())."
            raise ConfigurationError(msg)
        if self.registry is None:
            self.registry = default_registry
        self.history = self.link(HistorySynchronizer(self.platform, self._use_hash_urls))
        self.started = True
        self._register_history_listeners()
        self.history.init()
        return self

    def dispose(self) -> None:
        """Dispose the current route, stop listening, release owned history."""
        if self.disposed:
            return
        route = self._current_route
        if route is not None:
            route.dispose()
        super().dispose()

    def __enter__(self) -> "Router":
        self.start()
        self._tokens.append(router_var.set(self))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        router_var.reset(self._tokens.pop())
        self.dispose()

    # -- State --

    @property
    def current_path(self) -> str:
        """The current path, without query string (and without ``#``)."""
        return self.history.path if self.history is not None else ""

    @property
    def query_params(self) -> QueryParams:
        """Query parameters of the current path; empty when there are none."""
        return self.history.query_params if self.history is not None else QueryParams()

    @property
    def current_route(self) -> BaseRoute | None:
        return self._current_route

    @property
    def history_id(self) -> str:
        """Unique id of the current history entry.

        Stable across back/forward, so it can key per-visit data such as
        scroll positions.
        """
        return self._require_history().id

    @property
    def use_hash_urls(self) -> bool:
        """Whether paths live in the URL fragment.

        Only the outermost router decides; nested routers report their
        ancestor's setting.
        """
        if self.parent is not None:
            return self.parent.use_hash_urls
        if self.history is not None:
            return self.history.use_hash_urls
        return self._use_hash_urls

    @use_hash_urls.setter
    def use_hash_urls(self, value: bool) -> None:
        if self.parent is not None:
            logger.warning(
                "use_hash_urls is inherited from the outermost router; ignoring it on nested router %r",
                self.namespace,
            )
            return
        self._use_hash_urls = value
        if self.history is not None:
            self.history.use_hash_urls = value

    # -- Navigation --

    def set_path(self, path: str, replace_state: bool = False) -> None:
        """Navigate to *path*, pushing a history entry unless *replace_state*."""
        self._require_history().set_path(path, replace_state)

    def back(self) -> None:
        self._require_history().back()

    def forward(self) -> None:
        self._require_history().forward()

    def get_state(self) -> Any:
        """Return the data stored for the current history entry."""
        return self._require_history().get_state()

    def set_state(self, data: Any) -> None:
        """Store *data* on the current history entry (e.g. a scroll position).

        Read it back with ``get_state`` when the user returns to the entry.
        """
        self._require_history().set_state(data)

    def link_href(self, to: str) -> str:
        """The ``href`` a link to *to* should carry under the current URL mode."""
        return f"#{to}" if self.use_hash_urls else to

    async def wait_for_update(self, timeout: float | None = None) -> None:
        """Wait for the next ``update`` signal.

        Raises ``TimeoutError`` if *timeout* seconds pass first.
        """
        updated = anyio.Event()
        unsubscribe = self.on(UPDATE, updated.set)
        try:
            with anyio.fail_after(timeout):
                await updated.wait()
        finally:
            unsubscribe()

    # -- Internals --

    def _require_history(self) -> HistorySynchronizer:
        if self.history is None:
            msg = "Router is not started; call start() or use it as a context manager."
            raise RuntimeError(msg)
        return self.history

    def _register_history_listeners(self) -> None:
        history = self._require_history()
        self.listen_to(history, COMMIT_CHANGE, self._update)
        self.listen_to(history, CHANGE, self._forward_change)

    def _forward_change(self, event: RouteChangeEvent) -> None:
        self.trigger(CHANGE, event)

    def _update(self) -> None:
        # A parent's update may have disposed us mid-signal
        if self.disposed:
            return

        path = self.current_path
        registry = self.registry if self.registry is not None else default_registry
        match = registry.resolve(self.namespace, path)
        if match is None:
            logger.warning("No match for path %r - make sure you specify a default route", path)
            return

        current = self._current_route
        if self.force_reload or not match.update_in_place(current, path):
            # Build first: if construction fails the old route stays mounted
            route = match.create_route(self, path)
            if current is not None:
                current.leave()
                current.dispose()
            self._current_route = route
            route.enter()

        self.trigger(UPDATE)

    def __repr__(self) -> str:
        return f"<Router namespace={self.namespace!r} path={self.current_path!r}>"
