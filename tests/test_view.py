"""Tests for waypoint.view — Link and render_outlet."""

import pytest

from waypoint.config import RouterConfig
from waypoint.errors import RouterContextError
from waypoint.history.platform import MemoryHistory
from waypoint.router import Router
from waypoint.routing.registry import RouteRegistry
from waypoint.routing.route import BaseRoute
from waypoint.view import Link, html_attrs, render_outlet


class TestHtmlAttrs:
    def test_renames(self) -> None:
        assert html_attrs({"class_": "nav", "data_id": 3}) == ' class="nav" data-id="3"'

    def test_boolean_and_falsy(self) -> None:
        assert html_attrs({"hidden": True, "disabled": False, "title": None, "rel": ""}) == " hidden"

    def test_escapes_values(self) -> None:
        assert html_attrs({"title": 'a "b" <c>'}) == ' title="a &quot;b&quot; &lt;c&gt;"'


class TestLink:
    def test_outside_router_raises(self) -> None:
        with pytest.raises(RouterContextError):
            Link("RouteB")

    def test_hash_href(self, history: MemoryHistory, basic_app: RouteRegistry) -> None:
        with Router(history, registry=basic_app):
            assert Link("RouteB").href == "#RouteB"

    def test_path_href(self, history: MemoryHistory, slash_app: RouteRegistry) -> None:
        config = RouterConfig(use_hash_urls=False)
        with Router(history, config=config, registry=slash_app):
            assert Link("/RouteB").href == "/RouteB"

    def test_click_navigates(self, history: MemoryHistory, basic_app: RouteRegistry) -> None:
        with Router(history, registry=basic_app) as router:
            Link("RouteA/7").click()
            assert router.current_route.id == "7"
            assert history.location.hash == "#RouteA/7"

    def test_render(self, history: MemoryHistory, basic_app: RouteRegistry) -> None:
        with Router(history, registry=basic_app):
            html = Link("RouteB", "Go to B", class_="nav").render()
        assert html == '<a href="#RouteB" class="nav">Go to B</a>'

    def test_render_defaults_text_to_target(
        self, history: MemoryHistory, basic_app: RouteRegistry
    ) -> None:
        with Router(history, registry=basic_app):
            assert Link("RouteB").render() == '<a href="#RouteB">RouteB</a>'

    def test_render_escapes_text(self, history: MemoryHistory, basic_app: RouteRegistry) -> None:
        with Router(history, registry=basic_app):
            html = Link("RouteB", "<b>B</b>").render()
        assert "<b>" not in html
        assert "&lt;b&gt;B&lt;/b&gt;" in html


class TestRenderOutlet:
    def test_no_route(self, history: MemoryHistory) -> None:
        router = Router(history, registry=RouteRegistry()).start()
        assert render_outlet(router) == "<div></div>"

    def test_renders_route_template(self, history: MemoryHistory, basic_app: RouteRegistry) -> None:
        router = Router(history, registry=basic_app).start()
        assert render_outlet(router) == "Default Route"

        router.set_path("RouteA/42")
        assert render_outlet(router) == "Route A: 42"

    def test_escapes_params(self, history: MemoryHistory, basic_app: RouteRegistry) -> None:
        router = Router(history, registry=basic_app).start()
        router.set_path("RouteA/%3Cx%3E")
        assert render_outlet(router) == "Route A: &lt;x&gt;"

    def test_extra_context(self, history: MemoryHistory, registry: RouteRegistry) -> None:
        class Greeting(BaseRoute):
            template = "{{ greeting }}, {{ query.get('name') }}"

        registry.register("", "/hello", Greeting)
        router = Router(history, registry=registry).start()
        router.set_path("/hello?name=ada")
        assert render_outlet(router, greeting="Hi") == "Hi, ada"
