import numpy as np
import pytest

from mandelview.iteration import escape_counts, iterate


@pytest.mark.parametrize("zx, zy", [(2.5, 0.0), (0.0, -2.1), (-2.5, -1.5), (1.5, 1.5), (3.0, 4.0)])
def test_points_outside_radius_two_escape_immediately(zx, zy):
    assert iterate(zx, zy, 100) == 0


def test_interior_point_reaches_budget():
    assert iterate(-0.5, 0.0, 100) == 100
    assert iterate(0.0, 0.0, 7) == 7


def test_boundary_of_horizon_is_inside():
    # -2 is a fixed point of the orbit at |z|^2 == 4
    assert iterate(-2.0, 0.0, 50) == 50


def test_count_grows_with_budget_until_escape():
    # orbit of c=1: 1, 2, 5 -> escapes after two steps
    assert [iterate(1.0, 0.0, m) for m in (1, 2, 3, 10, 100)] == [1, 2, 2, 2, 2]


def test_count_is_monotonic_in_budget():
    counts = [iterate(-0.75, 0.1, m) for m in range(1, 200)]
    assert counts == sorted(counts)
    assert counts[-1] < 199


def test_non_positive_budget_rejected():
    with pytest.raises(ValueError):
        iterate(0.0, 0.0, 0)
    with pytest.raises(ValueError):
        escape_counts(np.zeros(2), np.zeros(2), -1)


def test_grid_matches_scalar_iteration():
    xs = np.linspace(-2.0, 1.0, 13)
    ys = np.linspace(-1.2, 1.2, 9)
    counts = escape_counts(xs, ys, 50)

    assert counts.shape == (9, 13)
    assert counts.dtype == np.int32
    expected = np.array([[iterate(x, y, 50) for x in xs] for y in ys])
    np.testing.assert_array_equal(counts, expected)


def test_empty_grid():
    counts = escape_counts(np.array([]), np.linspace(0, 1, 4), 10)
    assert counts.shape == (4, 0)


def test_kernel_traced_once_across_raster_shapes():
    from mandelview.iteration import _escape_run
    from mandelview.renderer import render_frame
    from mandelview.viewport import SurfaceSize, ViewState

    surface = SurfaceSize(101, 77)
    for scale in (0.2, 0.3, 0.4, 0.5, 0.7, 0.9, 1.0):
        render_frame(ViewState(zoom=30.0, scale=scale, max_iterations=20), surface)
    escape_counts(np.linspace(-2, 1, 5), np.linspace(-1, 1, 3), 40)

    assert _escape_run.experimental_get_tracing_count() == 1
