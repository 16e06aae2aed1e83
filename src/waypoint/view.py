"""Rendering seam — links and the route outlet, rendered with kida.

The router never looks at output; these helpers are the minimal
rendering collaborator:

- ``Link``: an anchor bound to the active router. Building one outside
  ``with router:`` is a programming error.
- ``render_outlet``: renders the current route's ``template``.

Example::

    class RouteA(BaseRoute):
        template = "<h1>Route A: {{ id }}</h1>"

    with Router(history, registry=registry) as router:
        Link("RouteA/42", "Open").render()   # '<a href="#RouteA/42">Open</a>'
        render_outlet(router)
"""

import html
from functools import cache
from typing import Any

from kida import Environment
from kida.template import Markup

from waypoint.context import current_router
from waypoint.errors import RouterContextError
from waypoint.router import Router

_LINK_TEMPLATE = '<a href="{{ href }}"{{ attrs }}>{{ text }}</a>'
_EMPTY_OUTLET = "<div></div>"


@cache
def _default_env() -> Environment:
    """A bare autoescaping kida Environment for inline templates."""
    return Environment(autoescape=True)


def html_attrs(attrs: dict[str, Any]) -> Markup:
    """Build an escaped attribute string; falsy values are skipped.

    ``class_`` is accepted for ``class``, and ``_`` becomes ``-`` so
    ``data_id=3`` renders as ``data-id="3"``.
    """
    parts: list[str] = []
    for name, value in attrs.items():
        if value is None or value is False or value == "":
            continue
        attr = name.rstrip("_").replace("_", "-")
        if value is True:
            parts.append(f" {html.escape(attr, quote=True)}")
        else:
            parts.append(f' {html.escape(attr, quote=True)}="{html.escape(str(value), quote=True)}"')
    return Markup("".join(parts))


class Link:
    """An anchor that navigates through the active router.

    Raises ``RouterContextError`` when created outside a router.
    """

    __slots__ = ("attrs", "router", "text", "to")

    def __init__(self, to: str, text: str = "", **attrs: Any) -> None:
        router = current_router()
        if router is None:
            msg = "Link can only be used inside an active Router (use `with router:`)"
            raise RouterContextError(msg)
        self.router: Router = router
        self.to = to
        self.text = text
        self.attrs = attrs

    @property
    def href(self) -> str:
        return self.router.link_href(self.to)

    def click(self) -> None:
        """Navigate to the link target (what an activated anchor does)."""
        self.router.set_path(self.to)

    def render(self, env: Environment | None = None) -> str:
        template = (env or _default_env()).from_string(_LINK_TEMPLATE)
        return template.render(
            {"href": self.href, "text": self.text or self.to, "attrs": html_attrs(self.attrs)}
        )


def render_outlet(router: Router, env: Environment | None = None, **context: Any) -> str:
    """Render the router's current route with its kida ``template``.

    The template sees ``route``, ``router``, ``query`` and each path
    parameter by name. Renders an empty ``<div>`` while no route is
    mounted.
    """
    route = router.current_route
    if route is None or not route.template:
        return _EMPTY_OUTLET
    template = (env or _default_env()).from_string(route.template)
    return template.render(
        {
            **context,
            **route.params,
            "route": route,
            "router": router,
            "query": router.query_params,
        }
    )
