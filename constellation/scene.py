"""Project the constellation graph onto a drawable scene.

``build_scene`` is a pure function of the graph, a progress snapshot and a
random source; drawing backends (``svg``, ``preview``) only read the result.
The scene is rebuilt in full whenever the graph or progress changes.
"""

import logging
import math
import random

from constellation.config import MapConfig
from constellation.graph import GraphDataModel
from constellation.models import (
    BackgroundStar,
    GroupLayer,
    LinkSegment,
    Node,
    NodeGlyph,
    ProgressSnapshot,
    Scene,
)

logger = logging.getLogger(__name__)

FULL_COMPLETION = 0.999
WEDGE_MARGIN = 2.0  # wedge radius beyond the star tips so clipping never trims them


def point_count(node: Node) -> int:
    """Star points for a node: difficulty + 3.

    A missing difficulty is already 3 at the model level, so an explicit 0
    still draws a 3-point star.
    """
    return node.difficulty + 3


def star_points(
    points: int,
    outer_radius: float,
    inner_radius: float,
    cx: float = 0.0,
    cy: float = 0.0,
) -> list[tuple[float, float]]:
    """Vertices of a star polygon alternating outer and inner radius."""
    step = math.pi / points
    vertices = []
    for i in range(points * 2):
        r = outer_radius if i % 2 == 0 else inner_radius
        vertices.append((
            round(cx + r * math.sin(i * step), 4),
            round(cy + r * math.cos(i * step), 4),
        ))
    return vertices


def progress_wedge(completion: float, radius: float) -> str | None:
    """SVG path of a pie wedge from 12 o'clock sweeping clockwise.

    Returns None when there is nothing to clip (no progress) or the star is
    drawn unclipped (full completion).
    """
    if completion <= 0 or completion >= FULL_COMPLETION:
        return None
    angle = completion * 2 * math.pi
    end_x = radius * math.sin(angle)
    end_y = -radius * math.cos(angle)
    large_arc = 1 if completion > 0.5 else 0
    return (
        f"M 0 0 L 0 {-radius:.4f} "
        f"A {radius:.4f} {radius:.4f} 0 {large_arc} 1 {end_x:.4f} {end_y:.4f} Z"
    )


def background_field(
    count: int,
    width: float,
    height: float,
    rng: random.Random,
) -> list[BackgroundStar]:
    """Scatter faint points over twice the viewport, centered on it."""
    stars = []
    for _ in range(count):
        stars.append(BackgroundStar(
            x=rng.random() * width * 2 - width / 2,
            y=rng.random() * height * 2 - height / 2,
            radius=rng.random() * 1.5,
            opacity=rng.random() * 0.7 + 0.2,
        ))
    return stars


def _glyph(node: Node, color: str, completion: float, config: MapConfig) -> NodeGlyph:
    points = point_count(node)
    completion = max(0.0, min(1.0, completion))
    return NodeGlyph(
        node_id=node.id,
        label=node.name,
        x=node.x,
        y=node.y,
        color=color,
        difficulty=node.difficulty,
        point_count=points,
        star_points=star_points(points, config.star_outer_radius, config.star_inner_radius),
        base_opacity=config.star_base_opacity,
        completion=completion,
        progress_wedge=progress_wedge(completion, config.star_outer_radius + WEDGE_MARGIN),
        full=completion >= FULL_COMPLETION,
        label_offset=config.label_offset,
    )


def build_scene(
    graph: GraphDataModel,
    progress: ProgressSnapshot,
    width: float,
    height: float,
    config: MapConfig | None = None,
    rng: random.Random | None = None,
) -> Scene:
    if config is None:
        config = MapConfig()
    if rng is None:
        rng = random.Random(config.seed)

    scene = Scene(
        width=width,
        height=height,
        background=background_field(config.background_stars, width, height, rng),
    )

    for key, group in graph.groups.items():
        layer = GroupLayer(key=key, name=group.name, color=group.color)
        for link in group.links:
            (x1, y1), (x2, y2) = graph.resolve_link(link)
            layer.links.append(LinkSegment(
                source=link.source, target=link.target, x1=x1, y1=y1, x2=x2, y2=y2,
            ))
        for node in group.nodes:
            layer.nodes.append(
                _glyph(node, group.color, progress.completion_for(node.id), config)
            )
        scene.groups.append(layer)

    logger.debug(
        "Built scene: %d groups, %d background stars",
        len(scene.groups), len(scene.background),
    )
    return scene
