"""Tests for scene building and the SVG backend."""

import random

import pytest

from constellation.config import MapConfig
from constellation.graph import GraphDataModel
from constellation.models import ProgressSnapshot
from constellation.scene import (
    background_field,
    build_scene,
    point_count,
    progress_wedge,
    star_points,
)
from constellation.svg import clip_id, render_svg


def _scene(graph, completion=None, seed=1):
    snapshot = ProgressSnapshot(completion=completion or {})
    return build_scene(graph, snapshot, 1200, 800, MapConfig(background_stars=10), random.Random(seed))


class TestStarGeometry:
    def test_point_count_follows_difficulty(self, graph):
        assert point_count(graph.get_node("setup")) == 5
        assert point_count(graph.get_node("analog")) == 3
        assert point_count(graph.get_node("digital")) == 6

    def test_vertices_alternate_radius_starting_at_top(self):
        pts = star_points(5, 12, 6)
        assert len(pts) == 10
        assert pts[0] == (0.0, 12.0)
        outer = [round((x * x + y * y) ** 0.5, 3) for x, y in pts[::2]]
        inner = [round((x * x + y * y) ** 0.5, 3) for x, y in pts[1::2]]
        assert set(outer) == {12.0}
        assert set(inner) == {6.0}


class TestProgressWedge:
    @pytest.mark.parametrize("completion", [0, -0.5, 0.999, 1.0])
    def test_nothing_to_clip(self, completion):
        assert progress_wedge(completion, 14) is None

    def test_starts_at_twelve_o_clock(self):
        path = progress_wedge(0.25, 14)
        assert path.startswith("M 0 0 L 0 -14.0000 A 14.0000 14.0000 0 0 1 14.0000 ")
        assert path.endswith(" Z")

    def test_large_arc_past_half(self):
        assert " 0 1 1 " in progress_wedge(0.75, 14)
        assert " 0 0 1 " in progress_wedge(0.5, 14)


class TestBackgroundField:
    def test_same_seed_same_field(self):
        a = background_field(50, 1200, 800, random.Random(3))
        b = background_field(50, 1200, 800, random.Random(3))
        assert a == b

    def test_covers_twice_the_viewport(self):
        for star in background_field(200, 1200, 800, random.Random(9)):
            assert -600 <= star.x < 1800
            assert -400 <= star.y < 1200
            assert 0 <= star.radius < 1.5
            assert 0.2 <= star.opacity < 0.9


class TestBuildScene:
    def test_groups_in_declared_order(self, graph):
        scene = _scene(graph)
        assert [g.key for g in scene.groups] == ["core", "sensors"]
        assert len(scene.background) == 10

    def test_cross_group_link_resolves(self, graph):
        scene = _scene(graph)
        sensors = scene.groups[1]
        seg = next(s for s in sensors.links if s.source == "intro")
        assert (seg.x1, seg.y1, seg.x2, seg.y2) == (0, 0, -200, -150)

    def test_unresolved_link_drawn_from_origin(self):
        g = GraphDataModel.from_dict({
            "a": {
                "name": "A", "color": "#ffffff",
                "nodes": [{"id": "x", "name": "X", "x": 50, "y": 60}],
                "links": [{"source": "ghost", "target": "x"}],
            },
        })
        seg = _scene(g).groups[0].links[0]
        assert (seg.x1, seg.y1, seg.x2, seg.y2) == (0, 0, 50, 60)

    def test_partial_completion_gets_a_wedge(self, graph):
        glyph = _scene(graph, {"intro": 0.4}).glyph("intro")
        assert glyph.progress_wedge is not None
        assert not glyph.full

    def test_full_completion_fills_the_star(self, graph):
        glyph = _scene(graph, {"intro": 1.0}).glyph("intro")
        assert glyph.progress_wedge is None
        assert glyph.full

    def test_no_progress_is_plain(self, graph):
        glyph = _scene(graph).glyph("setup")
        assert glyph.progress_wedge is None
        assert not glyph.full
        assert glyph.point_count == 5
        assert glyph.color == "#6bb4ff"


class TestRenderSvg:
    def test_every_link_precedes_every_node(self, graph):
        svg = render_svg(_scene(graph))
        assert svg.count("<line") == 3
        assert svg.rindex("<line") < svg.index('class="node"')

    def test_group_ids_and_labels(self, graph):
        svg = render_svg(_scene(graph))
        assert 'id="constellation-core"' in svg
        assert 'id="constellation-sensors"' in svg
        assert ">Getting Started</text>" in svg

    def test_progress_clip_path(self, graph):
        svg = render_svg(_scene(graph, {"intro": 0.4}))
        assert f'<clipPath id="{clip_id("intro")}">' in svg
        assert f'clip-path="url(#{clip_id("intro")})"' in svg
        assert 'class="node-complete"' not in svg

    def test_default_camera_is_centered(self, graph):
        svg = render_svg(_scene(graph))
        assert 'transform="translate(600, 400) scale(0.6)"' in svg

    def test_labels_escaped(self):
        g = GraphDataModel.from_dict({
            "a": {"name": "A", "color": "#ffffff", "nodes": [{"id": "x", "name": "I/O & <Pins>", "x": 0, "y": 0}]},
        })
        assert "I/O &amp; &lt;Pins&gt;" in render_svg(_scene(g))
