from __future__ import annotations

import pytest

from krinkle.config import MAX_FIT_SCALE, MAX_SCALE, MIN_SCALE
from krinkle.geometry2d import TilePolygon
from krinkle.krinkle import generate_tiling
from krinkle.viewport import Viewport


def _square(size: float, x0: float = 0.0, y0: float = 0.0) -> TilePolygon:
    return TilePolygon(
        points=[(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)],
        fill=(0, 0, 0, 255),
    )


def test_initial_view_centers_origin() -> None:
    vp = Viewport(800, 600)
    assert vp.world_to_screen((0.0, 0.0)) == (400.0, 300.0)
    assert vp.scale == 1.0
    assert not vp.state.is_dragging


def test_pan_follows_pointer_one_to_one() -> None:
    vp = Viewport(800, 600)
    assert not vp.move((50.0, 50.0))

    vp.press((10.0, 10.0))
    assert vp.state.is_dragging
    assert vp.move((30.0, 50.0))
    assert (vp.state.offset_x, vp.state.offset_y) == (420.0, 340.0)
    assert vp.move((25.0, 45.0))
    assert (vp.state.offset_x, vp.state.offset_y) == (415.0, 335.0)

    vp.release()
    assert not vp.state.is_dragging
    assert not vp.move((0.0, 0.0))
    assert not vp.state.auto_fit


def test_zoom_step_and_clamp() -> None:
    vp = Viewport(800, 600)
    assert vp.zoom(-100)
    assert vp.scale == pytest.approx(1.1)

    vp.zoom(-1e6)
    assert vp.scale == MAX_SCALE
    assert not vp.zoom(-100)

    vp.zoom(1e6)
    assert vp.scale == MIN_SCALE


def test_zoom_is_anchored_on_viewport_center() -> None:
    vp = Viewport(800, 600)
    vp.press((0.0, 0.0))
    vp.move((-123.0, 77.0))
    vp.release()
    before = vp.screen_to_world((400.0, 300.0))
    vp.zoom(-500)
    after = vp.screen_to_world((400.0, 300.0))
    assert after[0] == pytest.approx(before[0])
    assert after[1] == pytest.approx(before[1])


def test_screen_world_round_trip() -> None:
    vp = Viewport(640, 480)
    vp.zoom(-250)
    vp.press((0.0, 0.0))
    vp.move((13.0, -7.0))
    sx, sy = vp.world_to_screen((37.5, -12.0))
    wx, wy = vp.screen_to_world((sx, sy))
    assert wx == pytest.approx(37.5)
    assert wy == pytest.approx(-12.0)


def test_auto_center_caps_scale_for_small_content() -> None:
    vp = Viewport(800, 600)
    assert vp.auto_center([_square(1.0)])
    assert vp.scale == MAX_FIT_SCALE
    sx, sy = vp.world_to_screen((0.5, 0.5))
    assert sx == pytest.approx(400.0)
    assert sy == pytest.approx(300.0)


def test_auto_center_fits_large_content_with_padding() -> None:
    vp = Viewport(800, 600)
    vp.auto_center([_square(1000.0, x0=-200.0, y0=300.0)])
    assert vp.scale == pytest.approx(600 / 1100)
    sx, sy = vp.world_to_screen((300.0, 800.0))
    assert sx == pytest.approx(400.0)
    assert sy == pytest.approx(300.0)


@pytest.mark.parametrize("rows", [1, 3])
def test_auto_center_scale_never_exceeds_cap(rows: int) -> None:
    vp = Viewport(1920, 1080)
    vp.auto_center(generate_tiling(1, 1, 4, rows))
    assert vp.scale <= MAX_FIT_SCALE


def test_auto_center_ignores_empty_input() -> None:
    vp = Viewport(800, 600)
    vp.zoom(-100)
    assert not vp.auto_center([])
    assert not vp.auto_center([TilePolygon(points=[], fill=(0, 0, 0, 255))])
    assert vp.scale == pytest.approx(1.1)


def test_auto_center_restores_auto_fit() -> None:
    vp = Viewport(800, 600)
    vp.zoom(-100)
    assert not vp.state.auto_fit
    vp.auto_center([_square(10.0)])
    assert vp.state.auto_fit


def test_resize_keeps_center_point() -> None:
    vp = Viewport(800, 600)
    vp.auto_center([_square(10.0, x0=40.0, y0=40.0)])
    vp.resize(1000, 500)
    cx, cy = vp.screen_to_world((500.0, 250.0))
    assert cx == pytest.approx(45.0)
    assert cy == pytest.approx(45.0)
