from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from .config import (
    AXIS_COLOR,
    AXIS_EXTENT,
    BACKGROUND_COLOR,
    COPY_INDEX_OFFSET,
    END_MARKER,
    HOVER_DEPTH_FILL,
    HOVER_WEDGE_FILL,
    LABEL_COLOR,
    LABEL_SIZE,
    MARKER_RADIUS,
    START_MARKER,
    STROKE_WIDTH,
    WARNING_STROKE,
    RenderOptions,
)
from .geometry2d import Color, Mat3, TilePolygon, Vec2, mat3_apply_to_point, midpoint
from .krinkle import MODES, UnsupportedModeError
from .viewport import Viewport


class Surface(Protocol):
    """Powierzchnia rysowania we współrzędnych ekranu (piksele)."""

    def size(self) -> tuple[int, int]: ...

    def clear(self, color: Color) -> None: ...

    def polygon(self, points: Sequence[Vec2], fill: Color | None, stroke: Color | None, width: float) -> None: ...

    def line(self, a: Vec2, b: Vec2, color: Color, width: float) -> None: ...

    def circle(self, center: Vec2, radius: float, fill: Color, stroke: Color | None) -> None: ...

    def text(self, pos: Vec2, text: str, color: Color, size: int) -> None: ...


@dataclass(frozen=True)
class HoverTarget:
    wedge_index: int | None
    depth: int | None


def wedge_label(wedge_index: int) -> str:
    if wedge_index >= COPY_INDEX_OFFSET:
        return f"W{wedge_index - COPY_INDEX_OFFSET}'"
    return f"W{wedge_index}"


class TilingRenderer:
    def __init__(self, viewport: Viewport | None = None, options: RenderOptions | None = None) -> None:
        self.viewport = viewport or Viewport()
        self.options = options or RenderOptions()
        self.polygons: list[TilePolygon] = []
        self.mode = "prototile"
        self.hover: HoverTarget | None = None

    def set_display_data(self, polygons: list[TilePolygon], mode: str = "prototile") -> bool:
        """Podmienia dane do rysowania. Zwraca True, gdy wyczyszczono podświetlenie."""
        if mode not in MODES:
            raise UnsupportedModeError(f"Unsupported mode: {mode!r}")
        self.polygons = polygons
        self.mode = mode
        return self.clear_hover()

    def auto_center(self, polygons: Sequence[TilePolygon] | None = None) -> bool:
        return self.viewport.auto_center(self.polygons if polygons is None else polygons)

    # Hover
    def hit_test(self, screen_pos: Vec2) -> HoverTarget | None:
        if self.mode != "tiling":
            return None
        world = self.viewport.screen_to_world(screen_pos)
        # od wierzchu: ostatnio narysowany wielokąt jest na górze
        for poly in reversed(self.polygons):
            if poly.contains(world):
                return HoverTarget(wedge_index=poly.meta.wedge_index, depth=poly.meta.r)
        return None

    def update_hover(self, screen_pos: Vec2) -> bool:
        """Zwraca True tylko wtedy, gdy zmienił się wskazywany klin/wiersz."""
        target = self.hit_test(screen_pos)
        if target == self.hover:
            return False
        self.hover = target
        return True

    def clear_hover(self) -> bool:
        if self.hover is None:
            return False
        self.hover = None
        return True

    def wedge_centroids(self) -> dict[int, Vec2]:
        sums: dict[int, list[float]] = {}
        for poly in self.polygons:
            if poly.is_empty():
                continue
            key = poly.meta.wedge_index if poly.meta.wedge_index is not None else 0
            cx, cy = poly.centroid()
            acc = sums.setdefault(key, [0.0, 0.0, 0.0])
            acc[0] += cx
            acc[1] += cy
            acc[2] += 1
        return {key: (acc[0] / acc[2], acc[1] / acc[2]) for key, acc in sums.items()}

    # Drawing
    def draw(self, surface: Surface) -> None:
        surface.clear(BACKGROUND_COLOR)
        m = self.viewport.matrix()
        self._draw_axes(surface, m)

        for poly in self.polygons:
            if poly.is_empty():
                continue
            stroke = WARNING_STROKE if poly.meta.has_short_period else poly.stroke
            surface.polygon(self._to_screen(m, poly.points), poly.fill, stroke, STROKE_WIDTH)

        if self.hover is not None:
            self._draw_hover(surface, m, self.hover)

        if self.mode == "prototile":
            if self.options.show_edges:
                self._draw_edge_indices(surface, m)
        else:
            if self.options.show_wedge_labels:
                self._draw_wedge_labels(surface, m)
            if self.options.show_tile_labels:
                self._draw_tile_labels(surface, m)

    def _to_screen(self, m: Mat3, points: Sequence[Vec2]) -> list[Vec2]:
        return [mat3_apply_to_point(m, p) for p in points]

    def _draw_axes(self, surface: Surface, m: Mat3) -> None:
        surface.line(
            mat3_apply_to_point(m, (-AXIS_EXTENT, 0.0)),
            mat3_apply_to_point(m, (AXIS_EXTENT, 0.0)),
            AXIS_COLOR,
            1.0,
        )
        surface.line(
            mat3_apply_to_point(m, (0.0, -AXIS_EXTENT)),
            mat3_apply_to_point(m, (0.0, AXIS_EXTENT)),
            AXIS_COLOR,
            1.0,
        )

    def _draw_hover(self, surface: Surface, m: Mat3, hover: HoverTarget) -> None:
        for poly in self.polygons:
            if poly.is_empty():
                continue
            if hover.wedge_index is not None and poly.meta.wedge_index == hover.wedge_index:
                surface.polygon(self._to_screen(m, poly.points), HOVER_WEDGE_FILL, None, 0.0)
            if hover.depth is not None and poly.meta.r == hover.depth:
                surface.polygon(self._to_screen(m, poly.points), HOVER_DEPTH_FILL, None, 0.0)

    def _draw_edge_indices(self, surface: Surface, m: Mat3) -> None:
        for poly in self.polygons:
            if poly.is_empty():
                continue
            pts = self._to_screen(m, poly.points)
            for i in range(len(pts) - 1):
                surface.text(midpoint(pts[i], pts[i + 1]), str(i), LABEL_COLOR, LABEL_SIZE)
            surface.circle(pts[0], MARKER_RADIUS, START_MARKER, LABEL_COLOR)
            surface.circle(pts[-1], MARKER_RADIUS, END_MARKER, LABEL_COLOR)

    def _draw_wedge_labels(self, surface: Surface, m: Mat3) -> None:
        for wedge_index, center in sorted(self.wedge_centroids().items()):
            surface.text(mat3_apply_to_point(m, center), wedge_label(wedge_index), LABEL_COLOR, LABEL_SIZE + 4)

    def _draw_tile_labels(self, surface: Surface, m: Mat3) -> None:
        for poly in self.polygons:
            if poly.is_empty() or poly.meta.tile_index is None:
                continue
            surface.text(mat3_apply_to_point(m, poly.centroid()), str(poly.meta.tile_index), LABEL_COLOR, LABEL_SIZE - 3)
