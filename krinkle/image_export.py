from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from .config import BACKGROUND_COLOR, RenderOptions
from .geometry2d import Color, TilePolygon, Vec2
from .renderer import TilingRenderer
from .viewport import Viewport

logger = logging.getLogger(__name__)


class PillowSurface:
    """Surface rysujące do obrazu PIL (przezroczyste wypełnienia są mieszane)."""

    def __init__(self, image: Image.Image) -> None:
        self.image = image
        self._draw = ImageDraw.Draw(image, "RGBA")
        self._fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def size(self) -> tuple[int, int]:
        return self.image.size

    def clear(self, color: Color) -> None:
        w, h = self.image.size
        self._draw.rectangle([0, 0, w, h], fill=color)

    def polygon(self, points: Sequence[Vec2], fill: Color | None, stroke: Color | None, width: float) -> None:
        if len(points) < 2:
            return
        if len(points) == 2:
            if stroke is not None:
                self.line(points[0], points[1], stroke, width)
            return
        self._draw.polygon(list(points), fill=fill, outline=stroke, width=max(1, round(width)))

    def line(self, a: Vec2, b: Vec2, color: Color, width: float) -> None:
        self._draw.line([a, b], fill=color, width=max(1, round(width)))

    def circle(self, center: Vec2, radius: float, fill: Color, stroke: Color | None) -> None:
        x, y = center
        self._draw.ellipse([x - radius, y - radius, x + radius, y + radius], fill=fill, outline=stroke)

    def text(self, pos: Vec2, text: str, color: Color, size: int) -> None:
        font = self._font(size)
        left, top, right, bottom = self._draw.textbbox((0, 0), text, font=font)
        x = pos[0] - (right - left) / 2 - left
        y = pos[1] - (bottom - top) / 2 - top
        self._draw.text((x, y), text, fill=color, font=font)

    def _font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        if size not in self._fonts:
            self._fonts[size] = ImageFont.load_default(size=size)
        return self._fonts[size]


def render_view(renderer: TilingRenderer) -> Image.Image:
    """Renderuje bieżący widok (te same przesunięcie i skala co na ekranie)."""
    state = renderer.viewport.state
    image = Image.new("RGB", (max(1, state.width), max(1, state.height)), BACKGROUND_COLOR[:3])
    renderer.draw(PillowSurface(image))
    return image


def render_to_image(
    polygons: list[TilePolygon],
    mode: str = "prototile",
    size: tuple[int, int] = (800, 600),
    options: RenderOptions | None = None,
) -> Image.Image:
    width, height = size
    renderer = TilingRenderer(Viewport(width, height), options)
    renderer.set_display_data(polygons, mode)
    renderer.auto_center()
    return render_view(renderer)


def save_png(image: Image.Image, path: str | Path) -> Path:
    path = Path(path)
    image.save(path, format="PNG", optimize=True)
    logger.info(f"Saved {image.size[0]}x{image.size[1]} image to {path}")
    return path
