"""Tests for routes, the sidebar tree and reading order."""

from constellation.config import Config
from constellation.models import NavItem, NavSection
from constellation.navigation import (
    load_navigation,
    missing_nav_nodes,
    page_route,
    page_sequence,
    prev_next,
    section_pages,
)

NAV = [
    NavSection(title="Start", items=[
        NavItem(id="setup", name="First-time Setup"),
        NavItem(id="extra", name="Extra Topic"),
    ]),
    NavSection(title="Again", items=[NavItem(id="setup", name="Duplicate")]),
]


class TestRoutes:
    def test_page_route(self):
        assert page_route("intro") == "/page/intro/index"
        assert page_route("intro", "features") == "/page/intro/features"


class TestSectionPages:
    def test_overview_then_subpages(self, graph):
        pages = section_pages(graph, "setup")
        assert [p.subpage_id for p in pages] == ["index", "prerequisites", "installation"]
        assert pages[0].title == "Getting Started"
        assert pages[2].route == "/page/setup/installation"

    def test_section_without_node(self, graph):
        pages = section_pages(graph, "extra", title="Extra Topic")
        assert len(pages) == 1
        assert pages[0].title == "Extra Topic"


class TestPageSequence:
    def test_sidebar_order_then_graph_only_nodes(self, graph):
        routes = [p.route for p in page_sequence(NAV, graph)]
        assert routes[:4] == [
            "/page/setup/index",
            "/page/setup/prerequisites",
            "/page/setup/installation",
            "/page/extra/index",
        ]
        assert routes[4] == "/page/intro/index"
        assert routes[-2:] == ["/page/analog/index", "/page/digital/index"]
        assert len(routes) == len(set(routes))

    def test_prev_next(self, graph):
        seq = page_sequence(NAV, graph)
        prev_page, next_page = prev_next(seq, "/page/setup/index")
        assert prev_page is None
        assert next_page.route == "/page/setup/prerequisites"

        prev_page, next_page = prev_next(seq, "/page/digital/index")
        assert prev_page.route == "/page/analog/index"
        assert next_page is None

        assert prev_next(seq, "/page/ghost/index") == (None, None)


class TestNavigationData:
    def test_missing_nav_nodes(self, graph):
        assert missing_nav_nodes(NAV, graph) == ["extra"]

    def test_shipped_navigation(self, packaged_graph):
        navigation = load_navigation(Config().resolved_navigation_path)
        assert navigation[0].title == "Getting Started"
        assert navigation[0].items[0].id == "intro"
        assert "webserver" in missing_nav_nodes(navigation, packaged_graph)
