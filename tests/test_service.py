import logging

import numpy as np
import pytest
from PIL import Image

from api.render_api import RenderConfigBuilder
from fractals.base import RenderSettings, ViewerSettings
from fractals.generators import DiskJuliaGenerator
from fractals.julia import QuadraticJuliaSet
from fractals.mandelbrot import mandelbrot_set
from renderers.renderer_core import RgbaRenderer
from rendering.service import RenderService
from ui.view_components import DragTracker
from utils.coords import Coords, Frame, Resolution
from utils.enums import PixelFormat


@pytest.fixture()
def static_service(executor):
    service = RenderService(32, 16, mandelbrot_set,
                            settings=RenderSettings(max_iterations=40),
                            executor=executor)
    frames, logs = [], []
    service.on_frame = frames.append
    service.on_log = logs.append
    service.frames, service.logs = frames, logs
    return service


@pytest.fixture()
def animated_service(executor):
    return RenderService(16, 16, DiskJuliaGenerator(period=240.0),
                         settings=RenderSettings(max_iterations=40),
                         executor=executor)


def test_static_service_state(static_service):
    assert not static_service.is_animated
    assert static_service.paused
    assert static_service.resolution() == Resolution(32, 16)
    assert static_service.frame() == Frame.complete(Resolution(32, 16))


def test_draw_emits_numbered_frames(static_service):
    static_service.draw()
    static_service.draw()
    assert [evt.seq for evt in static_service.frames] == [1, 2]
    evt = static_service.frames[-1]
    assert (evt.width, evt.height) == (32, 16)
    assert evt.data.shape == (16, 32, 4)

    reference = RgbaRenderer(Resolution(32, 16), max_iterations=40)
    reference.render(mandelbrot_set)
    np.testing.assert_array_equal(evt.data, reference.pixels())


def test_translate_renders_exposed_edges_only_when_paused(static_service):
    static_service.draw()
    assert static_service.translate(5, -3) is False
    assert len(static_service.frames) == 2

    reference = RgbaRenderer(Resolution(32, 16), static_service.frame(), max_iterations=40)
    reference.render(mandelbrot_set)
    np.testing.assert_array_equal(static_service.pixels(), reference.pixels())


def test_translate_beyond_screen_asks_for_full_draw(static_service):
    before = static_service.frame()
    assert static_service.translate(32, 0) is True
    assert static_service.frame() == before.translated(32, 0)
    assert static_service.frames == []


def test_center_on_moves_pixel_to_middle(static_service):
    res = static_service.resolution()
    target = static_service.frame().number_at(res, Coords(3, 12))
    static_service.center_on(3, 12)
    assert static_service.frame().center == target


def test_zoom_uses_coarse_or_fine_factor(static_service):
    scale = static_service.frame().pixel_scale
    static_service.zoom_in()
    assert static_service.frame().pixel_scale == pytest.approx(scale * 0.9)
    static_service.zoom_out()
    assert static_service.frame().pixel_scale == pytest.approx(scale)
    static_service.toggle_fine_controls()
    static_service.zoom_in()
    assert static_service.frame().pixel_scale == pytest.approx(scale * 0.99)
    static_service.reset_frame()
    assert static_service.frame() == Frame.complete(Resolution(32, 16))


def test_resize_replaces_buffer(static_service):
    static_service.resize(10, 6)
    assert static_service.pixels().shape == (6, 10, 4)
    static_service.draw()
    assert static_service.frames[-1].width == 10


def test_static_service_ignores_animation_controls(static_service):
    static_service.toggle_pause()
    assert static_service.step() is False
    assert static_service.tick(1.0) is False
    assert static_service.tick(2.0) is False
    assert static_service.logs == []


def test_animation_ticks_with_wall_time(animated_service):
    assert animated_service.is_animated
    assert not animated_service.paused
    assert animated_service.tick(10.0) is False
    assert animated_service.tick(70.0) is True
    assert animated_service.animation.elapsed == pytest.approx(60.0)
    assert animated_service.fractal == QuadraticJuliaSet(DiskJuliaGenerator()(60.0).constant)


def test_running_animation_always_needs_full_draw(animated_service):
    assert animated_service.translate(1, 1) is True


def test_pause_and_step(animated_service, caplog):
    logs = []
    animated_service.on_log = logs.append
    with caplog.at_level(logging.INFO, logger="rendering.service"):
        animated_service.toggle_pause()
    assert animated_service.paused
    assert [evt.message for evt in logs] == ["Paused"]
    assert "Paused" in caplog.text

    assert animated_service.tick(1.0) is False
    assert animated_service.tick(5.0) is False
    assert animated_service.step() is True
    assert animated_service.animation.elapsed == pytest.approx(0.010)
    animated_service.toggle_fine_controls()
    assert animated_service.step(backward=True) is True
    assert animated_service.animation.elapsed == pytest.approx(0.009)

    # Paused animations pan incrementally like static sets.
    animated_service.draw()
    assert animated_service.translate(2, 2) is False


def test_step_ignored_while_running(animated_service):
    assert animated_service.step() is False
    assert animated_service.animation.elapsed == 0.0


def test_set_fractal_swaps_the_active_set(static_service, julia_set):
    static_service.set_fractal(julia_set)
    static_service.draw()
    reference = RgbaRenderer(Resolution(32, 16), max_iterations=40)
    reference.render(julia_set)
    np.testing.assert_array_equal(static_service.pixels(), reference.pixels())


def test_save_and_high_res_save(tmp_path, executor):
    viewer = ViewerSettings(high_res_scale=3, save_location=str(tmp_path / "out.png"))
    service = RenderService(8, 6, mandelbrot_set,
                            settings=RenderSettings(max_iterations=30),
                            viewer_settings=viewer, executor=executor)
    service.draw()
    before = service.pixels().copy()

    path = service.save()
    with Image.open(path) as image:
        assert image.size == (8, 6)
        assert image.mode == "RGBA"

    high = service.high_res_save(str(tmp_path / "big.png"))
    with Image.open(high) as image:
        assert image.size == (24, 18)
        assert image.mode == "RGB"
    np.testing.assert_array_equal(service.pixels(), before)


def test_builder_assembles_service(tmp_path):
    service = (RenderConfigBuilder()
               .size(12, 10)
               .fractal(DiskJuliaGenerator(period=10.0))
               .max_iterations(25)
               .pixel_format("rgb")
               .threads(2)
               .zoom_factors(0.5, 0.75)
               .save_location(str(tmp_path / "x.png"), high_res_scale=2)
               .build())
    try:
        assert service.resolution() == Resolution(12, 10)
        assert service.is_animated
        assert service.settings.max_iterations == 25
        assert service.settings.pixel_format is PixelFormat.RGB
        assert service.executor.num_threads == 2
        assert service.viewer_settings.high_res_scale == 2
        service.zoom_in()
        assert service.frame().pixel_scale == pytest.approx(0.4 * 0.5)
        service.draw()
        assert service.pixels().shape == (10, 12, 3)
    finally:
        service.close()


@pytest.mark.parametrize("preset, size", [("720p", (1280, 720)), ("640x480", (640, 480)), (" 1080P ", (1920, 1080))])
def test_builder_resolution_presets(preset, size):
    assert RenderConfigBuilder._compute_size(preset) == size


def test_builder_rejects_unknown_preset():
    with pytest.raises(ValueError):
        RenderConfigBuilder().resolution("8k")


def test_drag_tracker_reports_offsets():
    drag = DragTracker()
    assert drag.update(5, 5) is None
    drag.begin(10, 10)
    assert drag.active
    assert drag.update(13, 8) == (3, -2)
    assert drag.update(13, 8) == (0, 0)
    drag.end()
    assert drag.update(20, 20) is None
