"""HistorySynchronizer — one linear stream of path changes.

Wraps a ``HistoryPlatform`` so that native navigation (back/forward,
a typed URL) and programmatic ``set_path`` calls become the same two
signals:

* ``change``: emitted before a change is accepted. Listeners receive a
  ``RouteChangeEvent`` they may abort or redirect.
* ``commit-change``: emitted once a change is final, so the router can
  resolve the new route.

Every entry written to the platform carries a page id. Page ids grow by
one per programmatic change, which is how a later pop notification is
recognized as "back" (id - 1) or "forward" (id + 1). Aborting a back
navigation is then undone with a forward traversal, and the pop
notification that traversal causes is ignored.

Page ids are tagged with a random per-session prefix, so entries
written by an earlier load of the document are treated as unknown.
"""

import logging
import secrets
from collections.abc import Callable
from typing import Any

from waypoint.history.events import Decision, RouteChangeEvent
from waypoint.history.platform import HistoryPlatform
from waypoint.history.query import QueryParams
from waypoint.signals import Observable, SignalDispatcher

logger = logging.getLogger("waypoint.history")

CHANGE = "change"
COMMIT_CHANGE = "commit-change"

# History API writes only work for hosted documents
_WRITABLE_PROTOCOLS = frozenset({"http:", "https:"})


class HistorySynchronizer(SignalDispatcher):
    """Keeps ``path``/``query_params`` in step with the platform history.

    Usage::

        history = HistorySynchronizer(MemoryHistory())
        history.on("change", lambda event: ...)
        history.on("commit-change", lambda: print(history.path))
        history.init()
    """

    path = Observable("")
    query_params = Observable(QueryParams())
    current_page_id = Observable(None)

    def __init__(self, platform: HistoryPlatform, use_hash_urls: bool = True) -> None:
        super().__init__()
        self.platform = platform
        self.full_path: str | None = None
        # Last committed full path; None until the first commit
        self.previous_path: str | None = None
        self.ignore_next_pop_event = False

        self._session_tag = f"{secrets.token_hex(4)}_"
        self._next_page_id = 1
        self._user_state: Any = None
        self._use_hash_urls = True
        self.use_hash_urls = use_hash_urls

        platform.add_listener(self._on_platform_pop)
        self.link(lambda: platform.remove_listener(self._on_platform_pop))

    def init(self) -> None:
        """Adopt the platform's current location as the first path."""
        self._on_platform_pop(self.platform.state)

    # -- Configuration --

    @property
    def use_hash_urls(self) -> bool:
        """Whether paths live in the URL fragment. Applies from the next ``set_path``."""
        return self.platform.emulate or self._use_hash_urls

    @use_hash_urls.setter
    def use_hash_urls(self, use_hashes: bool) -> None:
        if self.platform.emulate and not use_hashes:
            logger.warning("Platform does not support the history API, so cannot disable hash URLs")
            use_hashes = True
        self._use_hash_urls = use_hashes

    @property
    def id(self) -> str:
        """Identifier of the current history entry, unique across sessions."""
        return f"{self._session_tag}{self.current_page_id}"

    # -- Navigation --

    def set_path(self, path: str, replace_state: bool = False) -> None:
        """Write *path* to the platform history, then process the change.

        Replacing is not interceptable: it is how aborts and redirects
        are applied.
        """
        url = f"#{path}" if self.use_hash_urls else path
        self.current_page_id = self._create_page_id()

        if replace_state:
            self.platform.replace_state(self._history_state(), path, url)
        else:
            self.platform.push_state(self._history_state(), path, url)

        self._update_path(path, can_intercept=not replace_state, abort_action=self.back)

    def back(self) -> None:
        self.platform.back()

    def forward(self) -> None:
        self.platform.forward()

    def get_state(self) -> Any:
        """Return the data stored on the current entry via ``set_state``."""
        return self._user_state

    def set_state(self, data: Any) -> None:
        """Store *data* on the current history entry, replacing what was there."""
        self._user_state = data
        self.platform.replace_state(self._history_state(), self.full_path or "")

    # -- Internals --

    def _create_page_id(self) -> int:
        page_id = self._next_page_id
        self._next_page_id += 1
        return page_id

    def _state_to_page_id(self, state: Any) -> int | None:
        if not isinstance(state, dict):
            return None
        entry_id = state.get("id")
        if not isinstance(entry_id, str) or not entry_id.startswith(self._session_tag):
            return None
        try:
            return int(entry_id[len(self._session_tag) :])
        except ValueError:
            return None

    def _history_state(self, page_id: int | None = None) -> dict[str, Any]:
        return {
            "id": f"{self._session_tag}{page_id or self.current_page_id}",
            "user": self._user_state,
        }

    def _read_location_path(self) -> str:
        location = self.platform.location
        if self.use_hash_urls:
            return location.hash.removeprefix("#")
        return location.pathname + location.search

    def _on_platform_pop(self, state: Any) -> None:
        new_path = self._read_location_path()
        self._user_state = state.get("user") if isinstance(state, dict) else None

        page_id = self._state_to_page_id(state)
        if page_id is None:
            # Entered directly (typed URL, external history): give the entry
            # an id in place so later pops on it can be ordered.
            page_id = self._create_page_id()
            if self.platform.location.protocol in _WRITABLE_PROTOCOLS:
                self.platform.replace_state(self._history_state(page_id), new_path)

        abort_action: Callable[[], None] | None = None
        current = self.current_page_id
        if current is not None:
            if page_id == current - 1:
                abort_action = self.forward
            elif page_id == current + 1:
                abort_action = self.back

        self.current_page_id = page_id

        if self.ignore_next_pop_event:
            self.ignore_next_pop_event = False
            return

        self._update_path(new_path, can_intercept=True, abort_action=abort_action)

    def _update_path(
        self,
        full_path: str,
        *,
        can_intercept: bool,
        abort_action: Callable[[], None] | None,
    ) -> None:
        if full_path == self.previous_path:
            return

        if can_intercept:
            event = RouteChangeEvent(full_path, self.previous_path)
            self.trigger(CHANGE, event)

            if event.decision is Decision.ABORT and abort_action is not None:
                logger.debug("Aborted change %r -> %r", self.previous_path, full_path)
                self.ignore_next_pop_event = True
                abort_action()
                return

            if event.decision is not Decision.NONE:
                logger.debug(
                    "Change %r -> %r replaced by %r (%s)",
                    self.previous_path,
                    full_path,
                    event.new_path,
                    event.decision.value,
                )
                self.set_path(event.new_path, replace_state=True)
                return

        path, query_params = QueryParams.split(full_path)
        self.full_path = full_path
        self.previous_path = full_path
        self.query_params = query_params
        self.path = path
        self.trigger(COMMIT_CHANGE)
