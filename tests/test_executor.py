import numpy as np
import pytest

from fractals.base import EscapeTimeSet
from fractals.mandelbrot import mandelbrot_set
from renderers.renderer_core import FrameRenderer, RgbaRenderer
from rendering.executor import RenderExecutor, partition
from rendering.exposed import exposed_regions
from utils.coords import Coords, Rectangle, Resolution
from utils.enums import PixelFormat


@pytest.mark.parametrize(
    "total, parts, expected",
    [
        (10, 1, [(0, 10)]),
        (10, 3, [(0, 3), (3, 6), (6, 10)]),
        (12, 4, [(0, 3), (3, 6), (6, 9), (9, 12)]),
        # More parts than items: leading chunks are empty.
        (2, 4, [(0, 0), (0, 0), (0, 0), (0, 2)]),
    ],
)
def test_partition(total, parts, expected):
    assert partition(total, parts) == expected


def test_partition_covers_every_index_once():
    chunks = partition(1003, 7)
    covered = [i for start, end in chunks for i in range(start, end)]
    assert covered == list(range(1003))


def test_thread_count_validation():
    with pytest.raises(ValueError):
        RenderExecutor(0)
    with RenderExecutor(1) as single:
        assert single.num_workers == 0
    with RenderExecutor(3) as pooled:
        assert pooled.num_workers == 2


def test_close_is_idempotent():
    executor = RenderExecutor(3)
    executor.close()
    executor.close()


@pytest.mark.parametrize("threads", [1, 2, 4, 7])
@pytest.mark.parametrize("fmt", list(PixelFormat))
def test_threaded_render_matches_single_threaded(threads, fmt, julia_set):
    res = Resolution(37, 23)
    reference = FrameRenderer(res, pixel_format=fmt, max_iterations=70)
    reference.render(julia_set)

    renderer = FrameRenderer(res, pixel_format=fmt, max_iterations=70)
    with RenderExecutor(threads) as executor:
        executor.render(renderer, julia_set)
    np.testing.assert_array_equal(renderer.pixels(), reference.pixels())


def test_render_region_of_whole_screen_equals_render(executor):
    res = Resolution(20, 15)
    full = RgbaRenderer(res, max_iterations=50)
    executor.render(full, mandelbrot_set)
    region = RgbaRenderer(res, max_iterations=50)
    executor.render_region(region, res.screen_coords(), mandelbrot_set)
    np.testing.assert_array_equal(region.pixels(), full.pixels())


def test_render_region_ignores_empty_regions(executor):
    renderer = RgbaRenderer(Resolution(4, 4))
    executor.render_region(renderer, Rectangle(Coords(2, 2), Coords(2, 4)), mandelbrot_set)
    executor.render_region(renderer, [], mandelbrot_set)
    assert not renderer.pixels().any()


def test_render_missing_edges_fills_only_exposed_strips(executor, dyadic_frame):
    res = Resolution(16, 12)
    renderer = RgbaRenderer(res, dyadic_frame, max_iterations=40)
    executor.render_missing_edges(renderer, mandelbrot_set, 3, -2)

    expected = np.zeros((12, 16), dtype=bool)
    for region in exposed_regions(res, 3, -2):
        for x, y in region:
            expected[y, x] = True
    rendered = renderer.pixels()[:, :, 3] == 255
    np.testing.assert_array_equal(rendered, expected)


@pytest.mark.parametrize("dx, dy", [(16, 0), (0, -12), (40, 3)])
def test_degenerate_pan_renders_whole_frame(executor, dyadic_frame, dx, dy):
    res = Resolution(16, 12)
    renderer = RgbaRenderer(res, dyadic_frame, max_iterations=40)
    executor.render(renderer, mandelbrot_set)
    renderer.translate_frame(dx, dy)
    renderer.translate_pixels(dx, dy)
    executor.render_missing_edges(renderer, mandelbrot_set, dx, dy)

    reference = RgbaRenderer(res, dyadic_frame.translated(dx, dy), max_iterations=40)
    reference.render(mandelbrot_set)
    np.testing.assert_array_equal(renderer.pixels(), reference.pixels())


@pytest.mark.parametrize("dx, dy", [(1, 0), (-5, 0), (0, 7), (4, 4), (-15, 11), (6, -3)])
def test_incremental_pan_matches_full_render(executor, dyadic_frame, julia_set, dx, dy):
    res = Resolution(16, 12)
    renderer = RgbaRenderer(res, dyadic_frame, max_iterations=60)
    executor.render(renderer, julia_set)
    renderer.translate_frame(dx, dy)
    renderer.translate_pixels(dx, dy)
    executor.render_missing_edges(renderer, julia_set, dx, dy)

    reference = RgbaRenderer(res, dyadic_frame.translated(dx, dy), max_iterations=60)
    executor.render(reference, julia_set)
    np.testing.assert_array_equal(renderer.pixels(), reference.pixels())


class _BrokenSet(EscapeTimeSet):
    def iterations_before_escape(self, max_iterations, point):
        raise RuntimeError("broken")

    def kernel_args(self):
        raise RuntimeError("broken")


@pytest.mark.parametrize("threads", [1, 3])
def test_worker_errors_reach_the_caller(threads):
    renderer = RgbaRenderer(Resolution(8, 8))
    with RenderExecutor(threads) as executor:
        with pytest.raises(RuntimeError, match="broken"):
            executor.render(renderer, _BrokenSet())
