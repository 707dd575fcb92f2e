from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .config import ViewportConfig
from .geometry2d import (
    Bounds,
    Mat3,
    TilePolygon,
    Vec2,
    mat3_apply_to_point,
    mat3_mul,
    mat3_scale,
    mat3_translate,
    polygons_bounds,
)


@dataclass
class ViewportState:
    width: int = 800
    height: int = 600
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    is_dragging: bool = False
    last_pos: Vec2 = (0.0, 0.0)
    # True dopóki użytkownik nie przesunie/przybliży widoku po dopasowaniu
    auto_fit: bool = True


class Viewport:
    """Przesuwanie i przybliżanie nieskończonego płótna.

    screen = world * scale + offset
    """

    def __init__(self, width: int = 800, height: int = 600, config: ViewportConfig | None = None) -> None:
        self.config = config or ViewportConfig()
        self.state = ViewportState(
            width=width,
            height=height,
            offset_x=width / 2,
            offset_y=height / 2,
        )

    @property
    def scale(self) -> float:
        return self.state.scale

    def center(self) -> Vec2:
        return (self.state.width / 2, self.state.height / 2)

    def _clamp_scale(self, scale: float) -> float:
        return max(self.config.min_scale, min(self.config.max_scale, scale))

    def matrix(self) -> Mat3:
        s = self.state
        return mat3_mul(mat3_translate(s.offset_x, s.offset_y), mat3_scale(s.scale, s.scale))

    def inverse_matrix(self) -> Mat3:
        s = self.state
        inv = 1.0 / s.scale
        return mat3_mul(mat3_scale(inv, inv), mat3_translate(-s.offset_x, -s.offset_y))

    def world_to_screen(self, p: Vec2) -> Vec2:
        return mat3_apply_to_point(self.matrix(), p)

    def screen_to_world(self, p: Vec2) -> Vec2:
        return mat3_apply_to_point(self.inverse_matrix(), p)

    # Pan
    def press(self, pos: Vec2) -> None:
        self.state.is_dragging = True
        self.state.last_pos = pos

    def move(self, pos: Vec2) -> bool:
        s = self.state
        if not s.is_dragging:
            return False
        dx = pos[0] - s.last_pos[0]
        dy = pos[1] - s.last_pos[1]
        s.offset_x += dx
        s.offset_y += dy
        s.last_pos = pos
        s.auto_fit = False
        return True

    def release(self) -> None:
        self.state.is_dragging = False

    # Zoom
    def zoom(self, delta_y: float) -> bool:
        """Zmienia skalę o -delta_y * czułość, względem środka widoku."""
        s = self.state
        new_scale = self._clamp_scale(s.scale - delta_y * self.config.zoom_sensitivity)
        if new_scale == s.scale:
            return False
        cx, cy = self.center()
        ratio = new_scale / s.scale
        s.offset_x = cx - (cx - s.offset_x) * ratio
        s.offset_y = cy - (cy - s.offset_y) * ratio
        s.scale = new_scale
        s.auto_fit = False
        return True

    def resize(self, width: int, height: int) -> None:
        s = self.state
        s.offset_x += (width - s.width) / 2
        s.offset_y += (height - s.height) / 2
        s.width = width
        s.height = height

    # Auto-center
    def fit_bounds(self, bounds: Bounds) -> None:
        min_x, min_y, max_x, max_y = bounds
        pad = self.config.fit_padding
        target_w = (max_x - min_x) + pad * 2
        target_h = (max_y - min_y) + pad * 2

        s = self.state
        scale_x = s.width / target_w
        scale_y = s.height / target_h
        s.scale = self._clamp_scale(min(scale_x, scale_y, self.config.max_fit_scale))

        cx = (min_x + max_x) / 2
        cy = (min_y + max_y) / 2
        s.offset_x = s.width / 2 - cx * s.scale
        s.offset_y = s.height / 2 - cy * s.scale
        s.auto_fit = True

    def auto_center(self, polygons: Iterable[TilePolygon]) -> bool:
        bounds = polygons_bounds(polygons)
        if bounds is None:
            return False
        self.fit_bounds(bounds)
        return True
