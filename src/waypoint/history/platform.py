"""The session-history contract, and an in-memory implementation.

The synchronizer needs very little from its platform: the current
location, a per-entry state payload, push/replace, back/forward, and a
notification when the user navigates. ``HistoryPlatform`` spells that
out; a browser bridge, a server-side shim and ``MemoryHistory`` all
satisfy it.

``MemoryHistory`` behaves like a browser tab's history stack:
``back()``, ``forward()`` and ``navigate()`` only queue the traversal,
and the pop notification is delivered later, by ``flush()`` or
``await settle()``. This mirrors the asynchronous ``popstate`` event,
so code that reacts to a notification by navigating again (an aborted
back button, for instance) sees the same ordering it would in a
browser.
"""

import contextlib
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urljoin, urlsplit

import anyio

type PopListener = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class Location:
    """The parts of the current URL the synchronizer reads."""

    href: str
    protocol: str
    pathname: str
    search: str = ""
    hash: str = ""

    @classmethod
    def parse(cls, href: str) -> "Location":
        parts = urlsplit(href)
        return cls(
            href=href,
            protocol=f"{parts.scheme}:" if parts.scheme else "",
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
        )


class HistoryPlatform(Protocol):
    """What the synchronizer requires from the platform's session history."""

    #: True when the platform only emulates history (hash URLs only).
    emulate: bool

    @property
    def location(self) -> Location: ...

    @property
    def state(self) -> Any: ...

    def push_state(self, state: Any, title: str, url: str | None = None) -> None: ...

    def replace_state(self, state: Any, title: str, url: str | None = None) -> None: ...

    def back(self) -> None: ...

    def forward(self) -> None: ...

    def add_listener(self, callback: PopListener) -> None: ...

    def remove_listener(self, callback: PopListener) -> None: ...


@dataclass(slots=True)
class HistoryEntry:
    url: str
    state: Any = None
    title: str = ""


class MemoryHistory:
    """An in-memory session history for tests and non-browser hosts.

    Usage::

        history = MemoryHistory("https://app.test/")
        router = Router(history)
        router.start()

        history.navigate("#RouteB")   # the user types a URL
        history.flush()               # deliver the pop notification
    """

    __slots__ = ("_entries", "_index", "_listeners", "_pending", "dispatched", "emulate")

    def __init__(self, url: str = "https://app.test/", *, emulate: bool = False) -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(url=url)]
        self._index = 0
        self._listeners: list[PopListener] = []
        self._pending: deque[Callable[[], None]] = deque()
        self.emulate = emulate
        # Number of pop notifications delivered so far
        self.dispatched = 0

    # -- Reading --

    @property
    def location(self) -> Location:
        return Location.parse(self._entries[self._index].url)

    @property
    def state(self) -> Any:
        return self._entries[self._index].state

    @property
    def length(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def urls(self) -> tuple[str, ...]:
        """Every entry's URL, oldest first."""
        return tuple(entry.url for entry in self._entries)

    @property
    def pending(self) -> int:
        """Number of queued traversals not yet delivered."""
        return len(self._pending)

    # -- Writing (synchronous, no notification) --

    def push_state(self, state: Any, title: str, url: str | None = None) -> None:
        current = self._entries[self._index]
        del self._entries[self._index + 1 :]
        self._entries.append(HistoryEntry(url=self._resolve(current.url, url), state=state, title=title))
        self._index += 1

    def replace_state(self, state: Any, title: str, url: str | None = None) -> None:
        current = self._entries[self._index]
        self._entries[self._index] = HistoryEntry(
            url=self._resolve(current.url, url), state=state, title=title
        )

    # -- Traversal (queued, notifies on delivery) --

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)

    def go(self, delta: int) -> None:
        self._pending.append(lambda: self._traverse(delta))

    def navigate(self, url: str) -> None:
        """Simulate the user entering *url* (same document, no state)."""
        self._pending.append(lambda: self._load(url))

    def add_listener(self, callback: PopListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: PopListener) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(callback)

    def flush(self) -> int:
        """Deliver queued traversals, including any queued while delivering.

        Returns the number of pop notifications dispatched.
        """
        before = self.dispatched
        while self._pending:
            self._pending.popleft()()
        return self.dispatched - before

    async def settle(self) -> int:
        """Async ``flush()``: yields to the event loop before each delivery."""
        before = self.dispatched
        while self._pending:
            await anyio.sleep(0)
            if self._pending:
                self._pending.popleft()()
        return self.dispatched - before

    # -- Internals --

    @staticmethod
    def _resolve(base: str, url: str | None) -> str:
        return base if url is None else urljoin(base, url)

    def _traverse(self, delta: int) -> None:
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return
        self._index = target
        self._dispatch()

    def _load(self, url: str) -> None:
        current = self._entries[self._index]
        resolved = self._resolve(current.url, url)
        if resolved == current.url:
            return
        del self._entries[self._index + 1 :]
        self._entries.append(HistoryEntry(url=resolved))
        self._index += 1
        self._dispatch()

    def _dispatch(self) -> None:
        self.dispatched += 1
        state = self.state
        for callback in tuple(self._listeners):
            callback(state)

    def __repr__(self) -> str:
        return f"<MemoryHistory {self._index + 1}/{len(self._entries)} {self._entries[self._index].url!r}>"
