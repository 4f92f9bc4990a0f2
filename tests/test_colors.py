import numpy as np
import pytest

from mandelview.colors import color_for, colorize, heatmap_rgba, parse_hex_color


@pytest.mark.parametrize("max_iterations", [1, 2, 30, 100, 5000])
def test_interior_is_black(max_iterations):
    assert color_for(max_iterations, max_iterations) == (0, 0, 0)


def test_escape_at_zero_is_black():
    assert color_for(0, 100) == (0, 0, 0)


def test_heatmap_values():
    # t = 0.5
    assert color_for(50, 100) == (31, 90, 127)
    assert color_for(99, 100) == (247, 251, 252)


def test_channels_monotonic_in_escape_fraction():
    colors = [color_for(n, 100) for n in range(100)]
    for channel in range(3):
        values = [color[channel] for color in colors]
        assert values == sorted(values)
        assert all(0 <= v <= 255 for v in values)


def test_counts_above_budget_are_interior():
    assert color_for(150, 100) == (0, 0, 0)


def test_vectorized_heatmap_matches_scalar():
    counts = np.arange(101).reshape(1, -1)
    rgba = heatmap_rgba(counts, 100)

    assert rgba.shape == (1, 101, 4)
    assert rgba.dtype == np.uint8
    assert np.all(rgba[..., 3] == 255)
    for n in range(101):
        assert tuple(int(c) for c in rgba[0, n, :3]) == color_for(n, 100)


def test_inside_color_applies_only_to_interior():
    counts = np.array([[0, 5, 10]])
    rgba = heatmap_rgba(counts, 10, inside_color=(1, 2, 3))
    assert tuple(rgba[0, 2, :3]) == (1, 2, 3)
    assert tuple(rgba[0, 1, :3]) == color_for(5, 10)


def test_matplotlib_palette():
    counts = np.array([[0, 3, 7, 10]])
    rgba = colorize(counts, 10, palette="viridis")

    assert rgba.shape == (1, 4, 4)
    assert tuple(rgba[0, 3]) == (0, 0, 0, 255)
    assert tuple(rgba[0, 0, :3]) != (0, 0, 0)


def test_unknown_palette():
    with pytest.raises(ValueError):
        colorize(np.zeros((2, 2), dtype=np.int32), 10, palette="no-such-palette")


def test_parse_hex_color():
    assert parse_hex_color("#00bfff") == (0, 191, 255)
    assert parse_hex_color("102030") == (16, 32, 48)
    with pytest.raises(ValueError):
        parse_hex_color("#abc")
    with pytest.raises(ValueError):
        parse_hex_color("#gg0000")
