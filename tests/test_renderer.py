from __future__ import annotations

import pytest

from krinkle.config import (
    BACKGROUND_COLOR,
    HOVER_DEPTH_FILL,
    HOVER_WEDGE_FILL,
    STROKE_WIDTH,
    WARNING_STROKE,
    RenderOptions,
)
from krinkle.geometry2d import TilePolygon
from krinkle.krinkle import UnsupportedModeError, generate_prototile, generate_tiling, generate_wedge
from krinkle.renderer import HoverTarget, TilingRenderer, wedge_label
from krinkle.viewport import Viewport


class RecordingSurface:
    def __init__(self, width: int = 800, height: int = 600) -> None:
        self._size = (width, height)
        self.calls: list[tuple] = []

    def size(self) -> tuple[int, int]:
        return self._size

    def clear(self, color) -> None:
        self.calls.append(("clear", color))

    def polygon(self, points, fill, stroke, width) -> None:
        self.calls.append(("polygon", list(points), fill, stroke, width))

    def line(self, a, b, color, width) -> None:
        self.calls.append(("line", a, b, color, width))

    def circle(self, center, radius, fill, stroke) -> None:
        self.calls.append(("circle", center, radius, fill, stroke))

    def text(self, pos, text, color, size) -> None:
        self.calls.append(("text", pos, text, color, size))

    def of_kind(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]

    def texts(self) -> list[str]:
        return [c[2] for c in self.of_kind("text")]


def _renderer(polygons, mode: str, options: RenderOptions | None = None) -> TilingRenderer:
    renderer = TilingRenderer(Viewport(800, 600), options or RenderOptions())
    renderer.set_display_data(polygons, mode)
    renderer.auto_center()
    return renderer


def test_unknown_mode_is_rejected() -> None:
    renderer = TilingRenderer()
    with pytest.raises(UnsupportedModeError):
        renderer.set_display_data([], "hexagon")


def test_prototile_draw_passes() -> None:
    renderer = _renderer(generate_prototile(1, 4, 4), "prototile")
    surface = RecordingSurface()
    renderer.draw(surface)

    assert surface.calls[0] == ("clear", BACKGROUND_COLOR)
    assert len(surface.of_kind("line")) == 2
    assert len(surface.of_kind("polygon")) == 1
    assert surface.texts() == [str(i) for i in range(10)]
    assert len(surface.of_kind("circle")) == 2


def test_edge_overlay_can_be_hidden() -> None:
    renderer = _renderer(generate_prototile(1, 4, 4), "prototile", RenderOptions(show_edges=False))
    surface = RecordingSurface()
    renderer.draw(surface)
    assert surface.texts() == []
    assert surface.of_kind("circle") == []


def test_stroke_width_is_constant_on_screen() -> None:
    renderer = _renderer(generate_prototile(2, 5, 5), "prototile")
    first = RecordingSurface()
    renderer.draw(first)
    renderer.viewport.zoom(-3000)
    second = RecordingSurface()
    renderer.draw(second)
    assert first.of_kind("polygon")[0][4] == STROKE_WIDTH
    assert second.of_kind("polygon")[0][4] == STROKE_WIDTH


def test_empty_polygons_are_skipped() -> None:
    renderer = TilingRenderer(Viewport(800, 600))
    renderer.set_display_data([TilePolygon(points=[], fill=(0, 0, 0, 255))], "prototile")
    assert not renderer.auto_center()
    surface = RecordingSurface()
    renderer.draw(surface)
    assert surface.of_kind("polygon") == []
    assert surface.texts() == []


def test_short_period_is_stroked_as_warning() -> None:
    renderer = _renderer(generate_prototile(2, 4, 8), "prototile")
    surface = RecordingSurface()
    renderer.draw(surface)
    assert surface.of_kind("polygon")[0][3] == WARNING_STROKE


def test_wedge_and_tile_labels() -> None:
    options = RenderOptions(show_edges=True, show_wedge_labels=True, show_tile_labels=True)
    renderer = _renderer(generate_wedge(2, 5, 10, 3), "wedge", options)
    surface = RecordingSurface()
    renderer.draw(surface)
    texts = surface.texts()
    assert texts.count("W0") == 1
    assert sorted(t for t in texts if t.isdigit()) == [str(i) for i in range(6)]


def test_offset_wedge_labels_mark_copies() -> None:
    renderer = _renderer(generate_tiling(1, 1, 4, 1, is_offset=True), "tiling", RenderOptions(show_wedge_labels=True))
    surface = RecordingSurface()
    renderer.draw(surface)
    assert sorted(surface.texts()) == ["W0", "W0'", "W1", "W1'"]
    assert wedge_label(10003) == "W3'"


def _top_tile_screen_pos(renderer: TilingRenderer):
    top = renderer.polygons[-1]
    return top, renderer.viewport.world_to_screen(top.centroid())


def test_hit_test_is_topmost_and_idempotent() -> None:
    renderer = _renderer(generate_tiling(1, 1, 4, 2), "tiling")
    top, pos = _top_tile_screen_pos(renderer)

    first = renderer.hit_test(pos)
    second = renderer.hit_test(pos)
    assert first == HoverTarget(wedge_index=top.meta.wedge_index, depth=top.meta.r)
    assert first == second


def test_hit_test_outside_tiling_mode_is_none() -> None:
    renderer = _renderer(generate_wedge(1, 1, 4, 2), "wedge")
    assert renderer.hit_test((400.0, 300.0)) is None
    assert not renderer.update_hover((400.0, 300.0))


def test_update_hover_reports_identity_changes_only() -> None:
    renderer = _renderer(generate_tiling(1, 1, 4, 2), "tiling")
    _, pos = _top_tile_screen_pos(renderer)

    assert renderer.update_hover(pos)
    assert not renderer.update_hover(pos)
    assert renderer.hover is not None

    far = renderer.viewport.world_to_screen((1e6, 1e6))
    assert renderer.update_hover(far)
    assert renderer.hover is None
    assert not renderer.clear_hover()


def test_hover_highlights_wedge_and_depth() -> None:
    renderer = _renderer(generate_tiling(1, 1, 4, 2), "tiling")
    renderer.hover = HoverTarget(wedge_index=1, depth=0)
    surface = RecordingSurface()
    renderer.draw(surface)

    fills = [c[2] for c in surface.of_kind("polygon")]
    same_wedge = sum(1 for p in renderer.polygons if p.meta.wedge_index == 1)
    same_depth = sum(1 for p in renderer.polygons if p.meta.r == 0)
    assert fills.count(HOVER_WEDGE_FILL) == same_wedge
    assert fills.count(HOVER_DEPTH_FILL) == same_depth


def test_set_display_data_resets_hover() -> None:
    renderer = _renderer(generate_tiling(1, 1, 4, 2), "tiling")
    renderer.hover = HoverTarget(wedge_index=0, depth=0)
    assert renderer.set_display_data(generate_tiling(1, 1, 4, 1), "tiling")
    assert renderer.hover is None
    # nothing was highlighted, so there is no change to report
    assert not renderer.set_display_data(generate_tiling(1, 1, 4, 1), "tiling")


def test_hit_test_finds_tile_of_multi_step_prototile() -> None:
    renderer = _renderer(generate_tiling(2, 5, 10, 3), "tiling")
    world = (0.0, 50.0)
    assert renderer.polygons[0].contains(world)

    target = renderer.hit_test(renderer.viewport.world_to_screen(world))
    assert target is not None
    assert any(
        p.contains(world) and p.meta.wedge_index == target.wedge_index and p.meta.r == target.depth
        for p in renderer.polygons
    )
    assert renderer.update_hover(renderer.viewport.world_to_screen(world))
    assert renderer.hover == target
