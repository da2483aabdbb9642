"""SVG drawing backend for a built scene."""

import logging

from constellation.models import NodeGlyph, Scene, ViewTransform

logger = logging.getLogger(__name__)

BACKGROUND = "#0b1021"
LINK_STROKE = "rgba(255, 255, 255, 0.35)"
STAR_STROKE = "rgba(255, 255, 255, 0.6)"


def _esc(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;").replace("'", "&#39;")


def _num(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".")


def _points_attr(points: list[tuple[float, float]]) -> str:
    return " ".join(f"{_num(x)},{_num(y)}" for x, y in points)


def clip_id(node_id: str) -> str:
    return f"wedge-{node_id}"


def _node(glyph: NodeGlyph) -> str:
    pts = _points_attr(glyph.star_points)
    parts = [
        f'<g class="node" data-id="{_esc(glyph.node_id)}" '
        f'transform="translate({_num(glyph.x)}, {_num(glyph.y)})">',
        f'<polygon class="node-star" points="{pts}" fill="{glyph.color}" '
        f'fill-opacity="{glyph.base_opacity}" stroke="{STAR_STROKE}" stroke-width="1"/>',
    ]
    if glyph.progress_wedge:
        parts.append(
            f'<polygon class="node-progress" points="{pts}" fill="{glyph.color}" '
            f'clip-path="url(#{_esc(clip_id(glyph.node_id))})"/>'
        )
    if glyph.full:
        parts.append(f'<polygon class="node-complete" points="{pts}" fill="{glyph.color}"/>')
    parts.append(f'<circle cx="0" cy="0" r="{_num(glyph.dot_radius)}" fill="white"/>')
    parts.append(
        f'<text class="node-label" x="0" y="{_num(glyph.label_offset)}" '
        f'text-anchor="middle" fill="white">{_esc(glyph.label)}</text>'
    )
    parts.append("</g>")
    return "".join(parts)


def render_svg(scene: Scene, transform: ViewTransform | None = None) -> str:
    """Draw the scene as a standalone SVG document.

    Links for every group are emitted before any node, so no node is covered
    by another group's link.
    """
    if transform is None:
        transform = ViewTransform(translate_x=scene.width / 2, translate_y=scene.height / 2, scale=0.6)

    clips = [
        f'<clipPath id="{_esc(clip_id(glyph.node_id))}"><path d="{glyph.progress_wedge}"/></clipPath>'
        for group in scene.groups
        for glyph in group.nodes
        if glyph.progress_wedge
    ]

    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(scene.width)}" '
        f'height="{_num(scene.height)}" viewBox="0 0 {_num(scene.width)} {_num(scene.height)}">',
        f"<defs>{''.join(clips)}</defs>",
        f'<rect width="100%" height="100%" fill="{BACKGROUND}"/>',
        f'<g class="viewport" transform="translate({_num(transform.translate_x)}, '
        f'{_num(transform.translate_y)}) scale({transform.scale})">',
        '<g class="background">',
    ]
    for star in scene.background:
        lines.append(
            f'<circle class="background-star" cx="{_num(star.x)}" cy="{_num(star.y)}" '
            f'r="{_num(star.radius)}" fill="white" opacity="{_num(star.opacity)}"/>'
        )
    lines.append("</g>")

    lines.append('<g class="links">')
    for group in scene.groups:
        lines.append(
            f'<g class="constellation-group" data-group="{_esc(group.key)}" '
            f'id="constellation-{_esc(group.key)}-links">'
        )
        for seg in group.links:
            lines.append(
                f'<line class="link" x1="{_num(seg.x1)}" y1="{_num(seg.y1)}" '
                f'x2="{_num(seg.x2)}" y2="{_num(seg.y2)}" stroke="{LINK_STROKE}"/>'
            )
        lines.append("</g>")
    lines.append("</g>")

    lines.append('<g class="nodes">')
    for group in scene.groups:
        lines.append(
            f'<g class="constellation-group" data-group="{_esc(group.key)}" '
            f'id="constellation-{_esc(group.key)}">'
        )
        lines.extend(_node(glyph) for glyph in group.nodes)
        lines.append("</g>")
    lines.append("</g>")

    lines.append("</g></svg>")
    return "\n".join(lines)
