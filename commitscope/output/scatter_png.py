"""Scatterplot PNG: the explorer's current scene drawn with Pillow."""

import logging
from pathlib import Path

from PIL import Image, ImageColor, ImageDraw, ImageFont

from commitscope.renderer import Scene

logger = logging.getLogger(__name__)

# --- Fonts ---

_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


def _font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    try:
        return ImageFont.truetype(_FONT_REGULAR, size)
    except OSError:
        return ImageFont.load_default()


# --- Colors ---

BG = (255, 255, 255)
AXIS = (40, 40, 40)
GRID = (225, 225, 225)
SELECTED = (255, 107, 107)


def _fill(color: str, opacity: float) -> tuple[int, int, int, int]:
    r, g, b = ImageColor.getrgb(color)[:3]
    return r, g, b, int(round(255 * opacity))


def render_scatter_png(scene: Scene, output_path: Path, scale: int = 1) -> Path:
    """Render the scene as a PNG image. `scale` multiplies every dimension."""
    s = max(scale, 1)
    width, height = scene.width * s, scene.height * s
    area = scene.area

    img = Image.new("RGBA", (width, height), BG + (255,))
    draw = ImageDraw.Draw(img)
    tick_font = _font(10 * s)

    # --- Gridlines ---
    for y in scene.gridlines:
        draw.line([(area.left * s, y * s), (area.right * s, y * s)], fill=GRID, width=1)

    # --- Axes ---
    draw.line([(area.left * s, area.bottom * s), (area.right * s, area.bottom * s)], fill=AXIS, width=s)
    draw.line([(area.left * s, area.top * s), (area.left * s, area.bottom * s)], fill=AXIS, width=s)

    for t in scene.x_ticks:
        x = t.position * s
        draw.line([(x, area.bottom * s), (x, (area.bottom + 6) * s)], fill=AXIS, width=s)
        tw = draw.textlength(t.label, font=tick_font)
        draw.text((x - tw / 2, (area.bottom + 9) * s), t.label, font=tick_font, fill=AXIS)

    for t in scene.y_ticks:
        y = t.position * s
        draw.line([((area.left - 6) * s, y), (area.left * s, y)], fill=AXIS, width=s)
        tw = draw.textlength(t.label, font=tick_font)
        draw.text(((area.left - 9) * s - tw, y - 6 * s), t.label, font=tick_font, fill=AXIS)

    # --- Dots (draw order: largest first) ---
    dots = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    dots_draw = ImageDraw.Draw(dots)
    for c in scene.circles:
        fill = SELECTED + (int(round(255 * c.opacity)),) if c.selected else _fill(scene.color, c.opacity)
        box = [(c.cx - c.r) * s, (c.cy - c.r) * s, (c.cx + c.r) * s, (c.cy + c.r) * s]
        dots_draw.ellipse(box, fill=fill)
    img = Image.alpha_composite(img, dots)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.convert("RGB").save(str(output_path), "PNG")
    logger.info("Scatterplot saved to %s (%dx%d, %d dots)", output_path, width, height, len(scene.circles))
    return output_path
