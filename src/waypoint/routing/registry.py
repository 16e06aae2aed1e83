"""Route registry — namespaced tables of path matchers.

Routes are registered at start-up, in order::

    registry = RouteRegistry()
    registry.register("", "$default", Home)
    registry.register("", "RouteA/:id", RouteA)

    @registry.route("RouteB-alt")
    @registry.route("RouteB")
    class RouteB(BaseRoute): ...

Registration order matters: when several expressions match a path the
last one registered wins, so application routes registered after
library routes override them.

``default_registry`` is the process-wide table used by routers that are
not given one; tests should build their own ``RouteRegistry``.
"""

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from waypoint.errors import ConfigurationError
from waypoint.routing.path import PathMatcher
from waypoint.routing.route import BaseRoute

logger = logging.getLogger("waypoint.routing")

DEFAULT_PATTERN = "$default"

# The default matcher accepts any path and captures nothing
_MATCH_ANY = re.compile(r".*", re.DOTALL)


@dataclass(slots=True)
class Namespace:
    """One routing table: ordered matchers plus an optional default."""

    matchers: list[PathMatcher] = field(default_factory=list)
    default: PathMatcher | None = None


class RouteRegistry:
    """Namespaced route tables. Mutated only by ``register`` and ``clear``."""

    __slots__ = ("_namespaces",)

    def __init__(self) -> None:
        self._namespaces: dict[str, Namespace] = {}

    @property
    def namespaces(self) -> Mapping[str, Namespace]:
        return MappingProxyType(self._namespaces)

    def register(self, namespace: str | None, pattern: str, route_type: type[BaseRoute]) -> PathMatcher:
        """Register *pattern* for *route_type* in *namespace*.

        ``"$default"`` installs the namespace's fallback route; a second
        default replaces the first (with a warning).

        Raises ``ConfigurationError`` if the pattern is invalid.
        """
        ns = self._namespaces.setdefault(namespace or "", Namespace())

        if pattern == DEFAULT_PATTERN:
            matcher = PathMatcher(
                pattern=DEFAULT_PATTERN,
                target=route_type,
                regex=_MATCH_ANY,
                params=(),
            )
            if ns.default is not None:
                logger.warning(
                    "There is already a default route ($default) in namespace %r "
                    "(%s) - %s will override it",
                    namespace or "",
                    ns.default.target.__name__,
                    route_type.__name__,
                )
            ns.default = matcher
            return matcher

        matcher = PathMatcher.compile(pattern, route_type)
        ns.matchers.append(matcher)
        return matcher

    def resolve(self, namespace: str | None, path: str) -> PathMatcher | None:
        """Return the matcher for *path*, or ``None``.

        The last registered matcher that matches wins; with no match the
        namespace's default is returned.
        """
        ns = self._namespaces.get(namespace or "")
        if ns is None:
            logger.warning("No paths registered for the namespace: %r", namespace or "")
            return None

        match: PathMatcher | None = None
        for matcher in ns.matchers:
            if matcher.test(path):
                if match is not None:
                    logger.warning(
                        "More than one match for path %r - %r overrides %r",
                        path,
                        matcher.pattern,
                        match.pattern,
                    )
                match = matcher

        return match or ns.default

    def clear(self, namespace: str | None = None) -> None:
        """Remove one namespace's routes, or every route when omitted."""
        if namespace is not None:
            self._namespaces.pop(namespace, None)
            return
        self._namespaces.clear()

    def route[R: BaseRoute](self, pattern: str, namespace: str = "") -> Callable[[type[R]], type[R]]:
        """Class decorator form of ``register``. Stackable."""
        if not pattern:
            msg = 'route() requires a path pattern - for the default route, use "$default"'
            raise ConfigurationError(msg)

        def decorator(cls: type[R]) -> type[R]:
            self.register(namespace, pattern, cls)
            return cls

        return decorator

    def describe(self) -> str:
        """One line per registration: ``[namespace] pattern -> RouteType``."""
        lines: list[str] = []
        for name, ns in self._namespaces.items():
            prefix = f"[{name}] " if name else ""
            if ns.default is not None:
                lines.append(f"{prefix}{DEFAULT_PATTERN} -> {ns.default.target.__name__}")
            lines.extend(f"{prefix}{m.pattern} -> {m.target.__name__}" for m in ns.matchers)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


default_registry = RouteRegistry()
"""Process-wide registry used by routers that are not given one."""


def register(namespace: str | None, pattern: str, route_type: type[BaseRoute]) -> PathMatcher:
    """Register on ``default_registry``."""
    return default_registry.register(namespace, pattern, route_type)


def route[R: BaseRoute](pattern: str, namespace: str = "") -> Callable[[type[R]], type[R]]:
    """Decorator registering on ``default_registry``."""
    return default_registry.route(pattern, namespace)
