"""Shared pytest fixtures for waypoint tests.

Every test gets its own ``RouteRegistry`` and ``MemoryHistory``, so no
test depends on process-wide routing state.
"""

import pytest

from waypoint.history.platform import MemoryHistory
from waypoint.routing.registry import RouteRegistry, default_registry
from waypoint.routing.route import BaseRoute


class Home(BaseRoute):
    template = "Default Route"

    @property
    def title(self) -> str:
        return "Default Route"


class RouteA(BaseRoute):
    template = "Route A: {{ id }}"

    @property
    def title(self) -> str:
        return f"Route A: {self.id}"


class RouteB(BaseRoute):
    template = "Route B"

    @property
    def title(self) -> str:
        return "Route B"


class Recorder(BaseRoute):
    """Appends enter/leave calls to ``scope["log"]``."""

    def enter(self) -> None:
        self.scope["log"].append(f"enter {type(self).__name__} {self.current_path}")

    def leave(self) -> None:
        self.scope["log"].append(f"leave {type(self).__name__} {self.current_path}")


class RecordedHome(Recorder):
    pass


class RecordedPage(Recorder):
    pass


@pytest.fixture
def registry() -> RouteRegistry:
    return RouteRegistry()


@pytest.fixture
def history() -> MemoryHistory:
    return MemoryHistory("https://app.test/")


@pytest.fixture
def basic_app(registry: RouteRegistry) -> RouteRegistry:
    """Default route, ``RouteA/:id``, and ``RouteB`` under two patterns."""
    registry.register("", "RouteA/:id", RouteA)
    registry.register("", "RouteB", RouteB)
    registry.register("", "RouteB-alt", RouteB)
    registry.register("", "$default", Home)
    return registry


@pytest.fixture
def slash_app(registry: RouteRegistry) -> RouteRegistry:
    """``basic_app`` with leading-slash patterns, for path (non-hash) URLs."""
    registry.register("", "/RouteA/:id", RouteA)
    registry.register("", "/RouteB", RouteB)
    registry.register("", "/RouteB-alt", RouteB)
    registry.register("", "$default", Home)
    return registry


@pytest.fixture
def recorded_app(registry: RouteRegistry) -> RouteRegistry:
    registry.register("", "$default", RecordedHome)
    registry.register("", "/page/:id", RecordedPage)
    registry.register("", "/other/:id", RecordedPage)
    return registry


@pytest.fixture
def clean_default_registry():
    """Clear the process-wide registry after the test."""
    yield default_registry
    default_registry.clear()
