"""BaseRoute — the live instance behind the current path."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from waypoint.errors import ConfigurationError
from waypoint.signals import SignalDispatcher

if TYPE_CHECKING:
    from waypoint.history.query import QueryParams
    from waypoint.routing.path import PathMatcher

# Set on every instance by BaseRoute and SignalDispatcher
_INSTANCE_ATTRS = frozenset({"router", "matcher", "disposed", "_observed", "_listeners", "_links"})


class BaseRoute(SignalDispatcher):
    """Base class for registered routes.

    The router creates one instance per visit. Each path parameter of
    the matching expression becomes an observable attribute, so a route
    registered as ``"RouteA/:id"`` has ``self.id``. When only parameter
    values change, the router updates those attributes in place instead
    of creating a new instance; use ``watch("id", ...)`` to react.

    Subclasses may set ``template`` (kida source) for
    ``waypoint.view.render_outlet``.
    """

    template: str = ""

    def __init__(
        self,
        router: Any,
        matcher: PathMatcher,
        values: Sequence[str | None] = (),
    ) -> None:
        super().__init__()
        self.router = router
        self.matcher = matcher
        self.check_param_names(matcher.pattern, [spec.name for spec in matcher.params])
        for spec, value in zip(matcher.params, _padded(values, len(matcher.params)), strict=True):
            self.define_observable(spec.name, value)

    @classmethod
    def check_param_names(cls, pattern: str, names: Iterable[str]) -> None:
        """Raise ``ConfigurationError`` if a parameter would shadow an attribute.

        Called when a path expression is compiled for this class, so a bad
        pattern fails at registration rather than during navigation.
        """
        for name in names:
            if name in _INSTANCE_ATTRS or hasattr(cls, name):
                msg = (
                    f"Route parameter {name!r} in {pattern!r} clashes "
                    f"with an attribute of {cls.__name__}"
                )
                raise ConfigurationError(msg)

    @property
    def params(self) -> Mapping[str, str | None]:
        """Current parameter values keyed by name."""
        return {spec.name: self._observed[spec.name] for spec in self.matcher.params}

    @property
    def scope(self) -> Any:
        return self.router.scope

    @property
    def current_path(self) -> str:
        return self.router.current_path

    @property
    def query_params(self) -> QueryParams:
        return self.router.query_params

    def update_params(self, values: Sequence[str | None]) -> None:
        """Assign new parameter values, notifying watchers of changed ones."""
        for spec, value in zip(self.matcher.params, _padded(values, len(self.matcher.params)), strict=True):
            setattr(self, spec.name, value)

    def enter(self) -> None:
        """Called after the router makes this the current route."""

    def leave(self) -> None:
        """Called before the router replaces this route with another one.

        Not called when only the parameters change.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.matcher.pattern!r} {dict(self.params)!r}>"


def _padded(values: Sequence[str | None], size: int) -> list[str | None]:
    padded = list(values[:size])
    padded.extend([None] * (size - len(padded)))
    return padded
