import numpy as np
import pytest

from mandelview.colors import color_for
from mandelview.iteration import iterate
from mandelview.renderer import present, render_frame, sample_axes
from mandelview.viewport import SurfaceSize, ViewState


def test_sample_axes_follow_render_transform():
    view = ViewState(scale=0.5)
    surface = SurfaceSize(90, 61)
    xs, ys = sample_axes(view, surface)

    assert xs.shape == (45,)
    assert ys.shape == (30,)
    for px in (0, 7, 44):
        assert xs[px] == view.fractal_x(px, surface)
    for py in (0, 13, 29):
        assert ys[py] == view.fractal_y(py, surface)


def test_center_and_corner_pixels():
    view = ViewState(zoom=10.0, scale=1.0)
    surface = SurfaceSize(40, 30)
    buffer = render_frame(view, surface)

    assert buffer.rgba.shape == (30, 40, 4)
    assert buffer.counts[15, 20] == 100
    assert tuple(buffer.rgba[15, 20]) == (0, 0, 0, 255)
    # (-2.5, -1.5) lies outside radius two
    assert buffer.counts[0, 0] == 0
    assert tuple(buffer.rgba[0, 0, :3]) == color_for(0, 100)


def test_render_matches_per_pixel_pipeline():
    view = ViewState(center_x=-0.75, center_y=0.05, zoom=40.0, scale=0.5, max_iterations=60)
    surface = SurfaceSize(64, 48)
    buffer = render_frame(view, surface)

    assert (buffer.width, buffer.height) == (32, 24)
    for py in range(0, 24, 5):
        for px in range(0, 32, 3):
            n = iterate(view.fractal_x(px, surface), view.fractal_y(py, surface), 60)
            assert buffer.counts[py, px] == n
            assert tuple(buffer.rgba[py, px, :3]) == color_for(n, 60)
    assert np.all(buffer.rgba[..., 3] == 255)


def test_buffer_keeps_rendered_view():
    view = ViewState(scale=0.2)
    buffer = render_frame(view, SurfaceSize(50, 50))
    assert buffer.view is view


def test_zero_surface_gives_empty_raster():
    buffer = render_frame(ViewState(), SurfaceSize(0, 0))
    assert buffer.is_empty
    assert buffer.rgba.shape == (0, 0, 4)


def test_present_stretches_to_surface():
    view = ViewState(zoom=20.0, scale=0.5)
    surface = SurfaceSize(60, 40)
    buffer = render_frame(view, surface)
    image = present(buffer, surface)

    assert image.size == (60, 40)
    assert image.mode == "RGBA"
    assert image.getpixel((0, 0)) == tuple(int(c) for c in buffer.rgba[0, 0])
    assert image.getpixel((59, 39)) == tuple(int(c) for c in buffer.rgba[-1, -1])


def test_present_bilinear():
    surface = SurfaceSize(30, 20)
    buffer = render_frame(ViewState(zoom=10.0, scale=0.5), surface)
    assert present(buffer, surface, "bilinear").size == (30, 20)


def test_present_empty_raster_is_black_surface():
    surface = SurfaceSize(1, 1)
    buffer = render_frame(ViewState(scale=0.5), surface)
    assert buffer.is_empty
    image = present(buffer, surface)
    assert image.size == (1, 1)
    assert image.getpixel((0, 0)) == (0, 0, 0, 255)


def test_present_returns_fresh_images():
    surface = SurfaceSize(20, 20)
    first = present(render_frame(ViewState(zoom=5.0, scale=1.0), surface), surface)
    second = present(render_frame(ViewState(zoom=5.0, scale=1.0, center_x=1.0), surface), surface)
    assert first is not second
    assert first.getpixel((10, 10)) == (0, 0, 0, 255)
    assert second.getpixel((10, 10)) != (0, 0, 0, 255)


def test_unknown_resample():
    buffer = render_frame(ViewState(), SurfaceSize(4, 4))
    with pytest.raises(ValueError):
        present(buffer, SurfaceSize(4, 4), "lanczos")
