"""Waypoint — client-side navigation with interceptable history.

Keeps an application's current route in step with a path stored in the
session history, and lets the application abort or redirect any
transition before it commits.

Basic usage::

    from waypoint import BaseRoute, MemoryHistory, RouteRegistry, Router

    registry = RouteRegistry()

    @registry.route("$default")
    class Home(BaseRoute):
        pass

    @registry.route("RouteA/:id")
    class RouteA(BaseRoute):
        def enter(self) -> None:
            print("entered", self.id)

    with Router(MemoryHistory(), registry=registry) as router:
        router.on("change", lambda event: None)
        router.set_path("RouteA/42")
"""

__version__ = "0.1.0-dev"
__all__ = [
    "BaseRoute",
    "ConfigurationError",
    "Decision",
    "HistoryPlatform",
    "HistorySynchronizer",
    "Link",
    "MemoryHistory",
    "PathMatcher",
    "QueryParams",
    "RouteChangeEvent",
    "RouteRegistry",
    "Router",
    "RouterConfig",
    "RouterContextError",
    "WaypointError",
    "default_registry",
    "register",
    "render_outlet",
    "route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from waypoint.router import Router

        return Router

    if name == "RouterConfig":
        from waypoint.config import RouterConfig

        return RouterConfig

    if name == "BaseRoute":
        from waypoint.routing.route import BaseRoute

        return BaseRoute

    if name == "PathMatcher":
        from waypoint.routing.path import PathMatcher

        return PathMatcher

    if name in ("RouteRegistry", "default_registry", "register", "route"):
        from waypoint.routing import registry as _registry

        return getattr(_registry, name)

    if name in ("RouteChangeEvent", "Decision"):
        from waypoint.history import events as _events

        return getattr(_events, name)

    if name in ("HistoryPlatform", "MemoryHistory"):
        from waypoint.history import platform as _platform

        return getattr(_platform, name)

    if name == "HistorySynchronizer":
        from waypoint.history.synchronizer import HistorySynchronizer

        return HistorySynchronizer

    if name == "QueryParams":
        from waypoint.history.query import QueryParams

        return QueryParams

    if name in ("Link", "render_outlet"):
        from waypoint import view as _view

        return getattr(_view, name)

    if name in ("WaypointError", "ConfigurationError", "RouterContextError"):
        from waypoint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
