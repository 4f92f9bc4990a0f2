"""Rendering primitives for explorer frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import PIL.Image

from .colors import BLACK, HEATMAP, Color, colorize
from .iteration import escape_counts
from .viewport import SurfaceSize, ViewState

RESAMPLE_FILTERS = {
    "nearest": PIL.Image.Resampling.NEAREST,
    "bilinear": PIL.Image.Resampling.BILINEAR,
}


@dataclass(frozen=True)
class PixelBuffer:
    """Colored raster produced by one render pass."""

    rgba: np.ndarray
    counts: np.ndarray
    view: ViewState

    @property
    def width(self) -> int:
        return int(self.rgba.shape[1])

    @property
    def height(self) -> int:
        return int(self.rgba.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.rgba.size == 0

    def to_image(self) -> PIL.Image.Image:
        return PIL.Image.fromarray(self.rgba)


def sample_axes(view: ViewState, surface: SurfaceSize) -> tuple[np.ndarray, np.ndarray]:
    """Fractal coordinates of every raster column and row."""

    w, h = view.raster_size(surface)
    step = np.float64(view.zoom) * np.float64(view.scale)
    xs = (np.arange(w, dtype=np.float64) - w / 2) / step + np.float64(view.center_x)
    ys = (np.arange(h, dtype=np.float64) - h / 2) / step + np.float64(view.center_y)
    return xs, ys


def render_frame(
    view: ViewState,
    surface: SurfaceSize,
    *,
    palette: str = HEATMAP,
    inside_color: Color = BLACK,
    device: Optional[str] = None,
) -> PixelBuffer:
    """Render the downscaled raster for ``view`` on ``surface``."""

    xs, ys = sample_axes(view, surface)
    counts = escape_counts(xs, ys, view.max_iterations, device=device)
    rgba = colorize(counts, view.max_iterations, palette, inside_color)
    return PixelBuffer(rgba=rgba, counts=counts, view=view)


def present(buffer: PixelBuffer, surface: SurfaceSize, resample: str = "nearest") -> PIL.Image.Image:
    """Stretch ``buffer`` over the full surface as a new opaque image."""

    try:
        resample_filter = RESAMPLE_FILTERS[resample]
    except KeyError as exc:
        raise ValueError(f"Unknown resample filter '{resample}'.") from exc

    size = (surface.width, surface.height)
    if buffer.is_empty or surface.is_empty:
        return PIL.Image.new("RGBA", size, BLACK + (255,))
    return buffer.to_image().resize(size, resample=resample_filter)
