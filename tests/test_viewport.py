from __future__ import annotations

import pytest

from segstudio.core.errors import InvalidInputError
from segstudio.editor.viewport import Viewport


def test_screen_to_image_inverts_pan_and_zoom() -> None:
    vp = Viewport(zoom=2.0, pan_x=10.0, pan_y=20.0)
    assert vp.screen_to_image(30, 40, 100, 100) == (10, 10)
    assert vp.image_to_screen(10, 10) == (30.0, 40.0)


def test_screen_to_image_clamps_to_bounds() -> None:
    vp = Viewport(zoom=0.5)
    assert vp.screen_to_image(-50, 9999, 64, 48) == (0, 47)


def test_zoom_steps_are_clamped() -> None:
    vp = Viewport()
    for _ in range(30):
        vp.zoom_in()
    assert vp.zoom == pytest.approx(5.0)
    for _ in range(60):
        vp.zoom_out()
    assert vp.zoom == pytest.approx(0.1)
    vp.reset()
    assert (vp.zoom, vp.pan_x, vp.pan_y) == (1.0, 0.0, 0.0)


def test_fit_scales_down_and_centres() -> None:
    vp = Viewport()
    vp.fit(1000, 500, 500, 500)
    assert vp.zoom == pytest.approx(0.5)
    assert (vp.pan_x, vp.pan_y) == (pytest.approx(0.0), pytest.approx(125.0))


def test_fit_never_scales_up() -> None:
    vp = Viewport()
    vp.fit(100, 100, 800, 600)
    assert vp.zoom == 1.0
    assert (vp.pan_x, vp.pan_y) == (350.0, 250.0)


def test_invalid_zoom_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        Viewport(zoom=0.0).screen_to_image(1, 1, 10, 10)


def test_half_pixel_clicks_round_up() -> None:
    vp = Viewport(zoom=2.0)
    assert [vp.screen_to_image(s, s, 100, 100) for s in (1, 3, 5, 7)] == [
        (1, 1),
        (2, 2),
        (3, 3),
        (4, 4),
    ]
