"""
Stałe i ustawienia domyślne eksploratora parkietaży Krinkle.

Wszystkie wartości są tylko w pamięci; nic nie jest zapisywane na dysk.
"""
from __future__ import annotations

from dataclasses import dataclass

from .geometry2d import Color


# Geometria
EDGE_LENGTH = 100.0
COPY_INDEX_OFFSET = 10000

# Widok
MIN_SCALE = 0.1
MAX_SCALE = 20.0
ZOOM_SENSITIVITY = 0.001
FIT_PADDING = 50.0
MAX_FIT_SCALE = 5.0
AXIS_EXTENT = 10000.0

# Kolory (RGBA)
BACKGROUND_COLOR: Color = (13, 17, 23, 255)
AXIS_COLOR: Color = (48, 54, 61, 255)
PROTOTILE_FILL: Color = (88, 166, 255, 102)
PROTOTILE_STROKE: Color = (88, 166, 255, 255)
TILE_FILLS: tuple[Color, Color, Color] = (
    (88, 166, 255, 110),
    (63, 185, 80, 110),
    (210, 153, 34, 110),
)
TILE_STROKE: Color = (230, 237, 243, 170)
WARNING_STROKE: Color = (255, 166, 0, 255)
HOVER_WEDGE_FILL: Color = (255, 215, 0, 110)
HOVER_DEPTH_FILL: Color = (255, 77, 77, 90)
LABEL_COLOR: Color = (255, 255, 255, 255)
START_MARKER: Color = (255, 77, 77, 255)
END_MARKER: Color = (77, 148, 255, 255)

STROKE_WIDTH = 2.0
LABEL_SIZE = 14
MARKER_RADIUS = 6.0


@dataclass(frozen=True)
class ViewportConfig:
    min_scale: float = MIN_SCALE
    max_scale: float = MAX_SCALE
    zoom_sensitivity: float = ZOOM_SENSITIVITY
    fit_padding: float = FIT_PADDING
    max_fit_scale: float = MAX_FIT_SCALE


@dataclass
class RenderOptions:
    show_edges: bool = True
    show_wedge_labels: bool = False
    show_tile_labels: bool = False


# k, m, t, rows, tryb offset, tryb rysowania
DEFAULT_PARAMS = {
    "k": 5,
    "m": 2,
    "t": 2,
    "rows": 3,
    "is_offset": False,
    "mode": "prototile",
}
