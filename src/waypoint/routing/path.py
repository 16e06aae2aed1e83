"""Path expressions compiled into matchers.

A path expression is a ``/``-separated pattern::

    "RouteB"               literal segments
    "RouteA/:id"           named parameter (one segment)
    "/page/:id?"           optional parameter
    "/page/:id/:rest*"     named trailing wildcard (zero or more segments)
    "pages/*"              anonymous trailing wildcard, named "0"

Matching is case-insensitive and a trailing slash on the path is
optional. Extracted values are percent-decoded; a value that cannot be
decoded is passed through as-is so that navigation never fails on a
hand-typed URL.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

from waypoint.errors import ConfigurationError

if TYPE_CHECKING:
    from waypoint.routing.route import BaseRoute

logger = logging.getLogger("waypoint.routing")

_PARAM_RE = re.compile(r"^:(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?P<modifier>[?*]?)$")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

# Trailing slash is optional on match; \Z, unlike $, rejects a final newline
_TRAILING = r"(?:/(?=\Z))?\Z"


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """One parameter captured by a path expression.

    Named:     ``:id``     (optional=False, wildcard=False)
    Optional:  ``:id?``    (optional=True)
    Wildcard:  ``:rest*``  or ``*`` (optional=True, wildcard=True)
    """

    name: str
    optional: bool = False
    wildcard: bool = False


def parse_pattern(pattern: str) -> tuple[re.Pattern[str], tuple[ParamSpec, ...]]:
    """Compile *pattern* into a regex and its ordered parameters.

    Raises ``ConfigurationError`` if the pattern is not a valid path
    expression.
    """
    if "(" in pattern or ")" in pattern:
        msg = (
            f"Invalid route pattern {pattern!r}: custom regex groups are not "
            "supported. Use :name, :name?, :name* or *."
        )
        raise ConfigurationError(msg)

    body = pattern[:-1] if len(pattern) > 1 and pattern.endswith("/") else pattern
    parts = body.split("/")
    params: list[ParamSpec] = []
    anonymous = 0
    regex = "^"

    for index, part in enumerate(parts):
        sep = "" if index == 0 else "/"
        is_last = index == len(parts) - 1

        if part == "*" or part.startswith(":"):
            if part == "*":
                spec = ParamSpec(name=str(anonymous), optional=True, wildcard=True)
                anonymous += 1
            else:
                match = _PARAM_RE.match(part)
                if match is None:
                    msg = (
                        f"Invalid route pattern {pattern!r}: bad parameter segment "
                        f"{part!r}. Parameters look like :name, :name? or :name*."
                    )
                    raise ConfigurationError(msg)
                modifier = match.group("modifier")
                spec = ParamSpec(
                    name=match.group("name"),
                    optional=modifier in ("?", "*"),
                    wildcard=modifier == "*",
                )

            if spec.wildcard and not is_last:
                msg = f"Invalid route pattern {pattern!r}: a wildcard must be the last segment."
                raise ConfigurationError(msg)
            if any(p.name == spec.name for p in params):
                msg = f"Invalid route pattern {pattern!r}: duplicate parameter {spec.name!r}."
                raise ConfigurationError(msg)
            params.append(spec)

            if spec.wildcard:
                regex += f"(?:{sep}(.*))?"
            elif spec.optional:
                regex += f"(?:{sep}([^/]+?))?"
            else:
                regex += f"{sep}([^/]+?)"
            continue

        if ":" in part or "*" in part:
            msg = (
                f"Invalid route pattern {pattern!r}: segment {part!r} mixes "
                "literal text with a parameter."
            )
            raise ConfigurationError(msg)
        regex += sep + re.escape(part)

    return re.compile(regex + _TRAILING, re.IGNORECASE), tuple(params)


def decode_value(value: str) -> str:
    """Strictly percent-decode one path value.

    Raises ``ValueError`` for a malformed escape or invalid UTF-8.
    """
    if _BAD_ESCAPE_RE.search(value):
        msg = f"malformed percent-escape in {value!r}"
        raise ValueError(msg)
    return unquote(value, errors="strict")


@dataclass(frozen=True, slots=True, eq=False)
class PathMatcher:
    """A compiled path expression bound to a route type.

    Created once at registration time. Equality is identity: a route
    can only be updated in place by the exact matcher that created it.

    Usage::

        matcher = PathMatcher.compile("RouteA/:id", RouteA)
        matcher.test("RouteA/42")        # True
        matcher.extract("RouteA/42")     # ("42",)
    """

    pattern: str
    target: type[BaseRoute]
    regex: re.Pattern[str]
    params: tuple[ParamSpec, ...]

    @classmethod
    def compile(cls, pattern: str, target: type[BaseRoute]) -> PathMatcher:
        regex, params = parse_pattern(pattern)
        target.check_param_names(pattern, [p.name for p in params])
        return cls(pattern=pattern, target=target, regex=regex, params=params)

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.params)

    def test(self, path: str) -> bool:
        """Whether *path* matches this expression."""
        return self.regex.match(path) is not None

    def extract(self, path: str) -> tuple[str | None, ...]:
        """Return one decoded value per parameter, in declaration order.

        Missing optional segments yield ``None``. Returns ``()`` if the
        path does not match.
        """
        match = self.regex.match(path)
        if match is None:
            return ()

        values: list[str | None] = []
        for raw in match.groups():
            if raw is None:
                values.append(None)
                continue
            try:
                values.append(decode_value(raw))
            except ValueError:
                logger.warning(
                    "Invalid URI component %r in path %r (pattern %r) - "
                    "are you percent-encoding values when building paths?",
                    raw,
                    path,
                    self.pattern,
                )
                values.append(raw)
        return tuple(values)

    def create_route(self, router: Any, path: str) -> BaseRoute:
        """Build a new route instance with this matcher's parameter values."""
        return self.target(router, self, self.extract(path))

    def update_in_place(self, route: BaseRoute | None, path: str) -> bool:
        """Update *route*'s parameters if this matcher created it.

        Returns ``False`` when the route came from a different matcher
        (the caller must dispose it and create a new one).
        """
        if route is None or route.matcher is not self:
            return False
        route.update_params(self.extract(path))
        return True

    def __repr__(self) -> str:
        return f"PathMatcher({self.pattern!r} -> {self.target.__name__})"


def compile_path(pattern: str, target: type[BaseRoute]) -> PathMatcher:
    """Compile *pattern* for *target*. Shorthand for ``PathMatcher.compile``."""
    return PathMatcher.compile(pattern, target)
