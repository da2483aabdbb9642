"""PNG preview of the constellation scene, used as the site's social card."""

import logging
from pathlib import Path

from PIL import Image, ImageColor, ImageDraw, ImageFont

from constellation.models import NodeGlyph, Scene

logger = logging.getLogger(__name__)

_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"

BG = (11, 16, 33)
LINK = (255, 255, 255, 90)
STAR_OUTLINE = (255, 255, 255, 150)
LABEL = (230, 237, 243, 255)

PADDING = 80


def _font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype(_FONT_REGULAR, size)
    except OSError:
        return ImageFont.load_default()


def _rgba(color: str, alpha: float) -> tuple[int, int, int, int]:
    r, g, b = ImageColor.getrgb(color)[:3]
    return (r, g, b, int(round(alpha * 255)))


def _fit(scene: Scene, size: int) -> tuple[float, float, float]:
    """Scale and offset that fit every node (plus labels) inside the square canvas."""
    xs = [g.x for layer in scene.groups for g in layer.nodes]
    ys = [g.y for layer in scene.groups for g in layer.nodes]
    if not xs:
        return 1.0, size / 2, size / 2
    span = max(max(xs) - min(xs), max(ys) - min(ys), 1.0)
    k = (size - 2 * PADDING) / span
    ox = size / 2 - k * (min(xs) + max(xs)) / 2
    oy = size / 2 - k * (min(ys) + max(ys)) / 2
    return k, ox, oy


def _draw_glyph(img: Image.Image, glyph: NodeGlyph, k: float, ox: float, oy: float, font) -> None:
    cx, cy = ox + glyph.x * k, oy + glyph.y * k
    # stars keep their on-screen size regardless of the fit scale
    pts = [(cx + px * 1.5, cy + py * 1.5) for px, py in glyph.star_points]

    layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    draw.polygon(pts, fill=_rgba(glyph.color, glyph.base_opacity), outline=STAR_OUTLINE)
    img.alpha_composite(layer)

    if glyph.full:
        solid = Image.new("RGBA", img.size, (0, 0, 0, 0))
        ImageDraw.Draw(solid).polygon(pts, fill=_rgba(glyph.color, 1.0))
        img.alpha_composite(solid)
    elif glyph.completion > 0:
        solid = Image.new("RGBA", img.size, (0, 0, 0, 0))
        ImageDraw.Draw(solid).polygon(pts, fill=_rgba(glyph.color, 1.0))
        mask = Image.new("L", img.size, 0)
        r = 30
        # PIL angles run clockwise from 3 o'clock; -90 is 12 o'clock
        ImageDraw.Draw(mask).pieslice(
            [cx - r, cy - r, cx + r, cy + r],
            start=-90, end=-90 + glyph.completion * 360, fill=255,
        )
        clipped = Image.new("RGBA", img.size, (0, 0, 0, 0))
        clipped.paste(solid, (0, 0), mask)
        img.alpha_composite(clipped)

    draw = ImageDraw.Draw(img)
    draw.ellipse([cx - 3, cy - 3, cx + 3, cy + 3], fill=(255, 255, 255, 255))
    width = draw.textlength(glyph.label, font=font)
    draw.text((cx - width / 2, cy + glyph.label_offset * 1.2), glyph.label, fill=LABEL, font=font)


def render_preview(scene: Scene, output_path: Path, size: int = 1200) -> Path:
    """Draw the scene to a square PNG. Returns output path."""
    img = Image.new("RGBA", (size, size), BG + (255,))
    k, ox, oy = _fit(scene, size)
    draw = ImageDraw.Draw(img)

    # background field spans the scene viewport; stretch it over the card
    sx = size / max(scene.width, 1.0)
    sy = size / max(scene.height, 1.0)
    for star in scene.background:
        x = (star.x + scene.width / 2) * sx / 2
        y = (star.y + scene.height / 2) * sy / 2
        r = max(star.radius, 0.5)
        draw.ellipse([x - r, y - r, x + r, y + r], fill=(255, 255, 255, int(star.opacity * 255)))

    links = Image.new("RGBA", img.size, (0, 0, 0, 0))
    link_draw = ImageDraw.Draw(links)
    for layer in scene.groups:
        for seg in layer.links:
            link_draw.line(
                [(ox + seg.x1 * k, oy + seg.y1 * k), (ox + seg.x2 * k, oy + seg.y2 * k)],
                fill=LINK, width=2,
            )
    img.alpha_composite(links)

    font = _font(16)
    for layer in scene.groups:
        for glyph in layer.nodes:
            _draw_glyph(img, glyph, k, ox, oy, font)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.convert("RGB").save(str(output_path))
    logger.info("Preview saved to %s (%dx%d)", output_path, size, size)
    return output_path
