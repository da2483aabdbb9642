"""Tests for the static site build."""

import json

import pytest
from PIL import Image

from constellation.models import ContentRecord, NavItem, NavSection
from constellation.navigation import page_sequence
from constellation.site import _script_json, build_site, render_redirect_html
from constellation.view_state import NUMBER

NAV = [NavSection(title="Start", items=[
    NavItem(id="intro", name="Introduction to TinyCore"),
    NavItem(id="setup", name="First-time Setup"),
])]

RECORDS = [
    ContentRecord(slug="intro/index", title="Introduction to TinyCore ESP32", html="<p>Welcome aboard.</p>"),
]


@pytest.fixture()
def site(config, graph):
    return build_site(config, graph=graph, navigation=NAV, records=RECORDS)


class TestBuildSite:
    def test_writes_map_and_svg(self, site):
        index = (site.output_dir / "index.html").read_text()
        assert "d3.v7.min.js" in index
        assert "Welcome aboard." in index
        assert "viewTransform.scale" in index
        assert (site.output_dir / "map.svg").read_text().startswith("<svg")

    def test_one_page_per_route(self, site, graph):
        routes = [p.route for p in page_sequence(NAV, graph)]
        assert len(site.pages) == len(routes)
        for route in routes:
            assert (site.output_dir / route.lstrip("/") / "index.html").exists()

    def test_content_and_placeholders(self, site):
        intro = (site.output_dir / "page/intro/index/index.html").read_text()
        assert "Introduction to TinyCore ESP32" in intro
        assert "<p>Welcome aboard.</p>" in intro
        features = (site.output_dir / "page/intro/features/index.html").read_text()
        assert "Content Coming Soon" in features
        assert site.placeholders == len(site.pages) - 1

    def test_prev_next_links(self, site):
        intro = (site.output_dir / "page/intro/index/index.html").read_text()
        assert "nav-button prev-button" not in intro
        assert 'href="/page/intro/overview"' in intro
        digital = (site.output_dir / "page/digital/index/index.html").read_text()
        assert "nav-button next-button" not in digital

    def test_page_records_visit(self, site):
        page = (site.output_dir / "page/setup/installation/index.html").read_text()
        assert '"section": "setup"' in page
        assert '"page": "installation"' in page
        assert '"key": "visitedPages"' in page

    def test_storage_writes_are_guarded(self, site):
        page = (site.output_dir / "page/setup/installation/index.html").read_text()
        assert "try {\n        localStorage.setItem(VISIT.key" in page
        index = (site.output_dir / "index.html").read_text()
        assert "try {\n        localStorage.setItem(KEYS.x" in index

    def test_map_restores_view_with_same_number_rule(self, site):
        index = (site.output_dir / "index.html").read_text()
        assert f"const NUMBER = /^{NUMBER.pattern}$/;" in index

    def test_section_redirects(self, site):
        assert len(site.redirects) == 4
        redirect = (site.output_dir / "page/intro/index.html").read_text()
        assert "url=/page/intro/index" in redirect

    def test_preview_image(self, site):
        with Image.open(site.preview) as img:
            assert img.size == (200, 200)
            assert img.format == "PNG"

    def test_no_preview(self, config, graph, tmp_path):
        result = build_site(config, output_dir=tmp_path / "out", graph=graph,
                            navigation=NAV, records=RECORDS, preview=False)
        assert result.preview is None
        assert not (tmp_path / "out" / "preview.png").exists()


class TestHelpers:
    def test_script_json_cannot_close_the_tag(self):
        out = _script_json({"html": "</script><script>alert(1)</script>"})
        assert "</script>" not in out
        assert json.loads(out)["html"] == "</script><script>alert(1)</script>"

    def test_redirect_honours_base_url(self, config):
        config.site.base_url = "/docs/"
        assert "url=/docs/page/setup/index" in render_redirect_html("setup", config)
