"""RouteChangeEvent — the interceptable half of a path change.

A listener of the ``change`` signal receives one event per candidate
transition and may ``abort()`` it or ``redirect()`` it elsewhere. Only
the last call counts. The synchronizer consumes the event as soon as
every listener has run; do not keep a reference to it.
"""

from enum import Enum


class Decision(Enum):
    """What the listeners decided to do with a pending change."""

    NONE = "none"
    ABORT = "abort"
    REDIRECT = "redirect"


class RouteChangeEvent:
    """A pending path change, from ``old_path`` to ``new_path``.

    Usage::

        def on_change(event: RouteChangeEvent) -> None:
            if not store.username:
                event.redirect("/login?redirect=" + quote(event.new_path))
            elif has_unsaved_changes():
                event.abort()

        router.on("change", on_change)
    """

    __slots__ = ("_decision", "_new_path", "_old_path")

    def __init__(self, new_path: str, old_path: str | None) -> None:
        self._new_path = new_path
        self._old_path = old_path
        self._decision = Decision.NONE

    @property
    def old_path(self) -> str | None:
        """The last committed full path (``None`` before the first commit)."""
        return self._old_path

    @property
    def new_path(self) -> str:
        return self._new_path

    @property
    def decision(self) -> Decision:
        return self._decision

    def abort(self) -> None:
        """Abort the change - this keeps the current route."""
        self._decision = Decision.ABORT
        self._new_path = self._old_path or ""

    def redirect(self, path: str) -> None:
        """Send the change to *path* instead."""
        self._decision = Decision.REDIRECT
        self._new_path = path

    def __repr__(self) -> str:
        return (
            f"RouteChangeEvent({self._old_path!r} -> {self._new_path!r}, "
            f"decision={self._decision.value})"
        )
