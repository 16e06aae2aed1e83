"""Active-router context via ContextVar.

Provides ``router_var``: the innermost router currently mounted on this
task/thread. It plays the part of a component scope: links resolve their
``href`` against it, and a router started while another is active
becomes its nested child.

The variable is set by ``with router:`` and reset on exit. Accessing it
outside such a block raises ``LookupError``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waypoint.router import Router

router_var: ContextVar[Router] = ContextVar("waypoint_router")
"""The innermost active router. Set by ``Router.__enter__``."""


def get_router() -> Router:
    """Return the active router.

    Raises ``LookupError`` if called outside a router context.
    """
    return router_var.get()


def current_router() -> Router | None:
    """Return the active router, or ``None``."""
    return router_var.get(None)


@contextmanager
def activate(router: Router) -> Iterator[Router]:
    """Make *router* the active router for the duration of the block."""
    token = router_var.set(router)
    try:
        yield router
    finally:
        router_var.reset(token)
