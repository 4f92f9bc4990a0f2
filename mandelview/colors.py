"""Mapping escape counts to colors."""

from __future__ import annotations

import math

import numpy as np
from matplotlib import colormaps

HEATMAP = "heatmap"
BLACK = (0, 0, 0)

Color = tuple[int, int, int]


def _channel(value: float) -> int:
    return min(max(int(math.floor(value)), 0), 255)


def color_for(escape_count: int, max_iterations: int) -> Color:
    """Heatmap color for a single escape count.

    Points that never escaped are black; the rest follow
    ``(t**3, t**1.5, t)`` scaled to 255 with ``t = escape_count / max_iterations``.
    """

    if max_iterations <= 0:
        raise ValueError("max_iterations must be positive.")
    if escape_count >= max_iterations:
        return BLACK

    t = min(max(escape_count / max_iterations, 0.0), 1.0)
    return (
        _channel(255 * t ** 3),
        _channel(255 * t ** 1.5),
        _channel(255 * t),
    )


def _escape_fraction(counts: np.ndarray, max_iterations: int) -> tuple[np.ndarray, np.ndarray]:
    if max_iterations <= 0:
        raise ValueError("max_iterations must be positive.")
    counts = np.asarray(counts)
    inside = counts >= max_iterations
    t = np.clip(counts.astype(np.float64) / np.float64(max_iterations), 0.0, 1.0)
    return t, inside


def _to_rgba(rgb: np.ndarray, inside: np.ndarray, inside_color: Color) -> np.ndarray:
    rgba = np.empty(inside.shape + (4,), dtype=np.uint8)
    for k in (0, 1, 2):
        rgba[..., k] = np.where(inside, inside_color[k], rgb[..., k])
    rgba[..., 3] = 255
    return rgba


def heatmap_rgba(counts: np.ndarray, max_iterations: int, inside_color: Color = BLACK) -> np.ndarray:
    """Vectorized :func:`color_for` returning an ``(h, w, 4)`` uint8 array."""

    t, inside = _escape_fraction(counts, max_iterations)
    rgb = np.stack(
        (
            np.floor(255.0 * t ** 3),
            np.floor(255.0 * t ** 1.5),
            np.floor(255.0 * t),
        ),
        axis=-1,
    )
    rgb = np.clip(rgb, 0, 255).astype(np.uint8)
    return _to_rgba(rgb, inside, inside_color)


def get_colormap(name: str):
    try:
        return colormaps[name]
    except KeyError as exc:
        raise ValueError(f"Unknown palette '{name}'.") from exc


def colorize(
    counts: np.ndarray,
    max_iterations: int,
    palette: str = HEATMAP,
    inside_color: Color = BLACK,
) -> np.ndarray:
    """Color a grid of escape counts with the heatmap or a matplotlib colormap."""

    if palette == HEATMAP:
        return heatmap_rgba(counts, max_iterations, inside_color)

    cmap = get_colormap(palette)
    t, inside = _escape_fraction(counts, max_iterations)
    rgb = np.uint8(np.clip(np.asarray(cmap(t))[..., :3] * 255, 0, 255))
    return _to_rgba(rgb, inside, inside_color)


def parse_hex_color(hex_color: str) -> Color:
    """Parse ``#RRGGBB`` into an RGB tuple."""

    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError('inside_color must be in the form #RRGGBB.')
    try:
        return tuple(int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError as exc:
        raise ValueError('inside_color must contain only hexadecimal digits.') from exc
