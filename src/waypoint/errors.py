"""Waypoint exception hierarchy.

Shared across the registry, history and router so every module
raises and catches the same types.

Only programming errors are raised. Routing anomalies (ambiguous
matches, missing defaults, undecodable path segments) are logged and
navigation carries on with a best-effort choice.
"""


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when routing configuration is invalid.

    Typically raised at registration time for a malformed path pattern,
    or when an outermost router is started without a history platform.
    """


class RouterContextError(WaypointError):
    """Raised when a router-bound object is created outside a router.

    Links and nested routers need an active router; see
    ``waypoint.context.get_router``.
    """
