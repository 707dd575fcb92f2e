from __future__ import annotations

from dataclasses import dataclass, field, replace
from math import cos, hypot, sin
from typing import Iterable, Sequence


Mat3 = tuple[tuple[float, float, float], tuple[float, float, float], tuple[float, float, float]]
Vec2 = tuple[float, float]
Color = tuple[int, int, int, int]
Bounds = tuple[float, float, float, float]


def mat3_identity() -> Mat3:
    return (
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, 0.0, 1.0),
    )


def mat3_mul(a: Mat3, b: Mat3) -> Mat3:
    return tuple(
        tuple(sum(a[i][k] * b[k][j] for k in range(3)) for j in range(3))
        for i in range(3)
    )  # type: ignore[return-value]


def mat3_apply_to_point(m: Mat3, p: Vec2) -> Vec2:
    x, y = p
    hx = m[0][0] * x + m[0][1] * y + m[0][2]
    hy = m[1][0] * x + m[1][1] * y + m[1][2]
    hw = m[2][0] * x + m[2][1] * y + m[2][2]
    if abs(hw) < 1e-12:
        return (hx, hy)
    return (hx / hw, hy / hw)


def mat3_translate(dx: float, dy: float) -> Mat3:
    return (
        (1.0, 0.0, dx),
        (0.0, 1.0, dy),
        (0.0, 0.0, 1.0),
    )


def mat3_rotate(angle_rad: float) -> Mat3:
    c = cos(angle_rad)
    s = sin(angle_rad)
    return (
        (c, -s, 0.0),
        (s, c, 0.0),
        (0.0, 0.0, 1.0),
    )


def mat3_scale(sx: float, sy: float) -> Mat3:
    return (
        (sx, 0.0, 0.0),
        (0.0, sy, 0.0),
        (0.0, 0.0, 1.0),
    )


def around_point(point: Vec2, transform: Mat3) -> Mat3:
    """Builds T(p) * transform * T(-p)."""
    px, py = point
    return mat3_mul(mat3_translate(px, py), mat3_mul(transform, mat3_translate(-px, -py)))


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(v: Vec2, s: float) -> Vec2:
    return (v[0] * s, v[1] * s)


def vec_length(v: Vec2) -> float:
    return hypot(v[0], v[1])


def vec_sum(vectors: Iterable[Vec2]) -> Vec2:
    sx = 0.0
    sy = 0.0
    for x, y in vectors:
        sx += x
        sy += y
    return (sx, sy)


def midpoint(a: Vec2, b: Vec2) -> Vec2:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def point_in_polygon(point: Vec2, polygon: Sequence[Vec2]) -> bool:
    """Ray casting algorithm. Polygon may be convex or concave."""
    x, y = point
    inside = False
    n = len(polygon)
    if n < 3:
        return False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        intersect = ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi + 1e-12) + xi)
        if intersect:
            inside = not inside
        j = i
    return inside


def merge_bounds(boxes: Iterable[Bounds]) -> Bounds | None:
    result: Bounds | None = None
    for min_x, min_y, max_x, max_y in boxes:
        if result is None:
            result = (min_x, min_y, max_x, max_y)
            continue
        result = (
            min(result[0], min_x),
            min(result[1], min_y),
            max(result[2], max_x),
            max(result[3], max_y),
        )
    return result


@dataclass
class TileMeta:
    closure_error: float | None = None
    has_short_period: bool = False
    r: int | None = None
    c: int | None = None
    tile_index: int | None = None
    wedge_index: int | None = None
    is_copy: bool = False


@dataclass
class TilePolygon:
    points: list[Vec2]
    fill: Color
    stroke: Color | None = None
    meta: TileMeta = field(default_factory=TileMeta)

    def is_empty(self) -> bool:
        return not self.points

    def transformed(self, m: Mat3, **meta_changes) -> "TilePolygon":
        return TilePolygon(
            points=[mat3_apply_to_point(m, p) for p in self.points],
            fill=self.fill,
            stroke=self.stroke,
            meta=replace(self.meta, **meta_changes),
        )

    def centroid(self) -> Vec2:
        if not self.points:
            return (0.0, 0.0)
        sx, sy = vec_sum(self.points)
        n = len(self.points)
        return (sx / n, sy / n)

    def bounds(self) -> Bounds | None:
        if not self.points:
            return None
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def contains(self, p: Vec2) -> bool:
        return point_in_polygon(p, self.points)


def polygons_bounds(polygons: Iterable[TilePolygon]) -> Bounds | None:
    return merge_bounds(b for b in (poly.bounds() for poly in polygons) if b is not None)
