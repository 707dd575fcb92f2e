"""
Generator geometrii parkietaży Modulo Krinkle.

Na podstawie "Modulo Krinkle Tiling" (arXiv:2506.07638). Z parametrów
całkowitych (m, k, n) budowany jest prototyl, z prototyli klin (układ
trójkątny), a z klinów pełny parkietaż wokół środka.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from math import cos, pi, sin

from .config import (
    COPY_INDEX_OFFSET,
    EDGE_LENGTH,
    PROTOTILE_FILL,
    PROTOTILE_STROKE,
    TILE_FILLS,
    TILE_STROKE,
)
from .geometry2d import (
    TileMeta,
    TilePolygon,
    Vec2,
    around_point,
    mat3_identity,
    mat3_mul,
    mat3_rotate,
    mat3_scale,
    mat3_translate,
    midpoint,
    vec_add,
    vec_length,
    vec_scale,
    vec_sub,
    vec_sum,
)

logger = logging.getLogger(__name__)

MODES = ("prototile", "wedge", "tiling")


class UnsupportedModeError(ValueError):
    pass


class ParameterError(ValueError):
    pass


@dataclass
class KrinkleSequences:
    """Ciągi kierunków dolnego i górnego brzegu prototylu."""

    k: int
    lower: list[int]
    upper: list[int]
    short_period: bool = False

    @property
    def lower_body(self) -> list[int]:
        # wartość końcowa (k) jest dopisywana tylko do pełnego ciągu
        return list(self.lower) if self.short_period else self.lower[:-1]

    @property
    def upper_body(self) -> list[int]:
        return list(self.upper) if self.short_period else self.upper[:-1]


def build_sequences(m: int, k: int) -> KrinkleSequences:
    """
    Buduje ciągi kierunków dla parametrów (m, k).

    lower: (j * m) mod k dla j w [0, k), potem k
    upper: k, potem (j * m) mod k dla j w [1, k), potem 0

    Jeśli któryś wyraz (poza pierwszym) wynosi 0 przed końcem ciągu,
    budowa jest przerywana, a short_period ustawiane na True.
    """
    if k <= 0:
        return KrinkleSequences(k=k, lower=[], upper=[])

    short_period = False

    lower: list[int] = []
    for j in range(k):
        d = (j * m) % k
        if j > 0 and d == 0:
            short_period = True
            break
        lower.append(d)
    else:
        lower.append(k)

    upper: list[int] = [k]
    for j in range(1, k):
        d = (j * m) % k
        if d == 0:
            short_period = True
            break
        upper.append(d)
    else:
        upper.append(0)

    return KrinkleSequences(k=k, lower=lower, upper=upper, short_period=short_period)


def direction_vector(d: int, n: int, length: float = EDGE_LENGTH) -> Vec2:
    """Wektor kroku dla indeksu kierunku d (kąt d * 2π / n)."""
    angle = d * 2 * pi / n
    return (cos(angle) * length, sin(angle) * length)


def _build_prototile(m: int, k: int, n: int) -> tuple[TilePolygon | None, KrinkleSequences | None]:
    if n < k:
        logger.error(f"Parameter Error: n must be >= k (n={n}, k={k})")
    if k <= 0 or n == 0:
        logger.warning(f"Degenerate parameters (m={m}, k={k}, n={n}), no prototile generated")
        return None, None

    seq = build_sequences(m, k)

    origin: Vec2 = (0.0, 0.0)
    path: list[Vec2] = [origin]
    current = origin

    # Do przodu wzdłuż dolnego brzegu (razem z wyrazem końcowym)
    for d in seq.lower:
        current = vec_add(current, direction_vector(d, n))
        path.append(current)

    # Wstecz wzdłuż górnego brzegu, z powrotem w stronę początku
    for d in reversed(seq.upper):
        current = vec_sub(current, direction_vector(d, n))
        path.append(current)

    closure_error = vec_length(current)
    if seq.short_period:
        logger.warning(f"Short period for m={m}, k={k}: sequence returns to 0 early")
    logger.debug(f"Prototile (m={m}, k={k}, n={n}): {len(path)} points, closure error {closure_error:.4f}")

    polygon = TilePolygon(
        points=path,
        fill=PROTOTILE_FILL,
        stroke=PROTOTILE_STROKE,
        meta=TileMeta(closure_error=closure_error, has_short_period=seq.short_period),
    )
    return polygon, seq


def generate_prototile(m: int, k: int, n: int) -> list[TilePolygon]:
    """
    Generuje pojedynczy prototyl (klin 0).

    Args:
        m: krok
        k: moduł
        n: rząd symetrii

    Returns:
        lista z jednym wielokątem albo pusta lista, gdy nie da się
        wyznaczyć żadnego punktu (k <= 0 lub n == 0)
    """
    polygon, _ = _build_prototile(m, k, n)
    return [polygon] if polygon is not None else []


def _build_wedge(m: int, k: int, n: int, rows: int) -> tuple[list[TilePolygon], KrinkleSequences | None]:
    base, seq = _build_prototile(m, k, n)
    if base is None or seq is None:
        return [], None

    d0 = vec_sum(direction_vector(d, n) for d in seq.lower_body)
    d1 = vec_sub(direction_vector(k, n), direction_vector(0, n))

    tiles: list[TilePolygon] = []
    tile_index = 0
    for r in range(rows):
        for c in range(r + 1):
            shift = vec_add(vec_scale(d0, r), vec_scale(d1, c))
            tiles.append(
                TilePolygon(
                    points=[vec_add(p, shift) for p in base.points],
                    fill=TILE_FILLS[(r + c) % 3],
                    stroke=TILE_STROKE,
                    meta=TileMeta(
                        r=r,
                        c=c,
                        has_short_period=seq.short_period,
                        tile_index=tile_index,
                        closure_error=base.meta.closure_error,
                    ),
                )
            )
            tile_index += 1
    return tiles, seq


def generate_wedge(m: int, k: int, n: int, rows: int) -> list[TilePolygon]:
    """
    Generuje klin: `rows` wierszy prototyli ułożonych w trójkąt.

    Kafel (r, c) jest przesunięty o r * d0 + c * d1, gdzie d0 to suma
    wektorów dolnego brzegu, a d1 = v(k) - v(0).
    """
    tiles, _ = _build_wedge(m, k, n, rows)
    return tiles


def generate_tiling(m: int, k: int, n: int, rows: int, is_offset: bool = False) -> list[TilePolygon]:
    """
    Generuje parkietaż przez doklejanie kolejnych klinów do frontu.

    Front to lista kierunków krawędzi odsłoniętych po dotychczas
    ułożonych klinach. Klin i doklejany jest do pierwszej krawędzi frontu
    o kierunku i, obrócony o i * 2π / n. W trybie offset układana jest
    tylko połowa klinów, a druga połowa powstaje przez odbicie
    środkowe względem środka pierwszej krawędzi klina 0.
    """
    wedge, seq = _build_wedge(m, k, n, rows)
    if not wedge or seq is None:
        return []

    w_limit = n // 2 if is_offset else n
    step = 2 * pi / n
    front = list(seq.upper_body)

    tiles = [poly.transformed(mat3_identity(), wedge_index=0) for poly in wedge]
    placed = 1
    for i in range(1, w_limit):
        try:
            j_star = front.index(i)
        except ValueError:
            logger.warning(f"Wedge {i}: no front edge with direction {i}, skipping")
            continue

        anchor = vec_sum(direction_vector(d, n) for d in front[:j_star])
        placement = mat3_mul(mat3_translate(*anchor), mat3_rotate(i * step))
        tiles.extend(poly.transformed(placement, wedge_index=i) for poly in wedge)
        front[j_star] = i + k
        placed += 1

    if is_offset:
        pivot = midpoint((0.0, 0.0), direction_vector(0, n))
        reflection = around_point(pivot, mat3_scale(-1.0, -1.0))
        copies = [
            poly.transformed(
                reflection,
                wedge_index=poly.meta.wedge_index + COPY_INDEX_OFFSET,
                is_copy=True,
            )
            for poly in tiles
        ]
        tiles.extend(copies)

    logger.info(f"Tiling (m={m}, k={k}, n={n}, rows={rows}, offset={is_offset}): "
                f"{placed}/{max(w_limit, 1)} wedges, {len(tiles)} tiles")
    return tiles


@dataclass(frozen=True)
class TilingParams:
    """Parametry wejściowe okna: n wyznaczane jest z k, m i mnożnika t."""

    k: int
    m: int
    t: int
    rows: int = 1
    is_offset: bool = False

    @property
    def n(self) -> int:
        if self.is_offset:
            return 2 * (self.t * self.k - self.m)
        return self.k * self.t

    def validate(self) -> None:
        if self.k < 1:
            raise ParameterError("Błąd: k musi być >= 1")
        if self.rows < 1:
            raise ParameterError("Błąd: liczba wierszy musi być >= 1")
        if self.n < self.k:
            raise ParameterError(f"Błąd: n ({self.n}) musi być >= k ({self.k})")

    def describe(self) -> str:
        return f"(m, k, n) = ({self.m}, {self.k}, {self.n})"


class KrinkleGenerator:
    """Przechowuje ostatnio wygenerowany zestaw wielokątów."""

    def __init__(self) -> None:
        self.polygons: list[TilePolygon] = []
        self.mode = "prototile"

    def generate(
        self,
        mode: str,
        m: int,
        k: int,
        n: int,
        rows: int = 1,
        is_offset: bool = False,
    ) -> list[TilePolygon]:
        if mode == "prototile":
            polygons = generate_prototile(m, k, n)
        elif mode == "wedge":
            polygons = generate_wedge(m, k, n, rows)
        elif mode == "tiling":
            polygons = generate_tiling(m, k, n, rows, is_offset)
        else:
            raise UnsupportedModeError(f"Unsupported mode: {mode!r}")
        self.mode = mode
        self.polygons = polygons
        return polygons

    def generate_from_params(self, params: TilingParams, mode: str) -> list[TilePolygon]:
        params.validate()
        return self.generate(mode, params.m, params.k, params.n, params.rows, params.is_offset)

    def closure_error(self) -> float:
        if not self.polygons or self.polygons[0].meta.closure_error is None:
            return 0.0
        return self.polygons[0].meta.closure_error

    def has_short_period(self) -> bool:
        return any(poly.meta.has_short_period for poly in self.polygons)
