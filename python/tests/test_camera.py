"""Camera transforms, pan and bounded zoom."""

from __future__ import annotations

import pytest

from backend.models.camera import (
    DEFAULT_ZOOM,
    SCALE_K,
    ZOOM_MAX,
    ZOOM_MIN,
    CameraModel,
    Viewport,
)

VIEWPORT = Viewport(800, 600)
CENTER = VIEWPORT.center()


def test_defaults() -> None:
    camera = CameraModel()

    assert camera.translate == [0.0, 0.0]
    assert camera.zoom_level == DEFAULT_ZOOM
    assert camera.inv_scale == 2 * SCALE_K


def test_screen_centre_maps_to_translate() -> None:
    camera = CameraModel(translate=[3.0, -5.0])

    assert camera.screen_to_world(CENTER, VIEWPORT) == (3.0, 5.0)


def test_world_to_screen_inverts_screen_to_world() -> None:
    camera = CameraModel(translate=[7.25, 1.5], zoom_level=2.5)
    for point in [(0, 0), (123, 456), (800, 600)]:
        world = camera.screen_to_world(point, VIEWPORT)
        back = camera.world_to_screen(world, VIEWPORT)
        assert back == pytest.approx(point)


def test_key_step_is_about_one_cell_by_default() -> None:
    assert CameraModel().key_step() == pytest.approx(0.999)


def test_pan_keeps_the_grabbed_point_under_the_pointer() -> None:
    camera = CameraModel(zoom_level=3.0)
    grabbed = camera.screen_to_world((100, 100), VIEWPORT)

    camera.pan(30, -20)

    assert camera.screen_to_world((130, 80), VIEWPORT) == pytest.approx(grabbed)


@pytest.mark.parametrize("delta", [0.25, -0.25, 1.0, -1.5])
@pytest.mark.parametrize("anchor", [(0, 0), (400, 300), (650, 120)])
def test_zoom_keeps_anchor_fixed(delta: float, anchor: tuple[float, float]) -> None:
    camera = CameraModel(translate=[2.0, -3.0], zoom_level=2.0)
    before = camera.screen_to_world(anchor, VIEWPORT)

    assert camera.zoom(delta, anchor, CENTER)

    assert camera.screen_to_world(anchor, VIEWPORT) == pytest.approx(before)


def test_positive_delta_zooms_in() -> None:
    camera = CameraModel()
    camera.zoom(0.5, CENTER, CENTER)

    assert camera.zoom_level == 0.5
    assert camera.inv_scale < 2 * SCALE_K


def test_zoom_out_rejected_at_upper_bound() -> None:
    camera = CameraModel(translate=[1.5, 2.5], zoom_level=ZOOM_MAX)
    translate, inv_scale = list(camera.translate), camera.inv_scale

    assert not camera.zoom(-1, (10, 10), CENTER)

    assert camera.zoom_level == ZOOM_MAX
    assert camera.translate == translate
    assert camera.inv_scale == inv_scale


def test_zoom_in_rejected_at_lower_bound() -> None:
    camera = CameraModel(translate=[1.5, 2.5], zoom_level=ZOOM_MIN)
    translate, inv_scale = list(camera.translate), camera.inv_scale

    assert not camera.zoom(1, (10, 10), CENTER)

    assert camera.zoom_level == ZOOM_MIN
    assert camera.translate == translate
    assert camera.inv_scale == inv_scale


def test_overshoot_clamps_level_but_not_scale() -> None:
    camera = CameraModel(zoom_level=6.5)
    inv_scale = camera.inv_scale

    assert not camera.zoom(-1, CENTER, CENTER)

    assert camera.zoom_level == ZOOM_MAX
    assert camera.inv_scale == inv_scale


def test_zero_delta_is_a_no_op() -> None:
    camera = CameraModel()

    assert not camera.zoom(0, (5, 5), CENTER)
    assert camera.zoom_level == DEFAULT_ZOOM


def test_level_stays_in_bounds_under_any_sequence() -> None:
    camera = CameraModel()
    for delta in [3, 3, 3, -4, -4, -4, -4, 2.5, 0.75, -9, 12]:
        camera.zoom(delta, (200, 100), CENTER)
        assert ZOOM_MIN <= camera.zoom_level <= ZOOM_MAX


def test_level_outside_bounds_rejected_on_construction() -> None:
    with pytest.raises(ValueError):
        CameraModel(zoom_level=ZOOM_MAX + 1)
