"""View state of the explorer and its pixel/fractal coordinate transforms."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

DEFAULT_CENTER_X = -0.5
DEFAULT_CENTER_Y = 0.0
DEFAULT_ZOOM = 200.0
DEFAULT_SCALE = 0.5
DEFAULT_MAX_ITERATIONS = 100


@dataclass(frozen=True)
class SurfaceSize:
    """Dimensions of the presentation surface in device pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Surface dimensions must not be negative.")

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class ViewState:
    """Immutable snapshot of the viewport.

    Two coordinate spaces are involved. Render space is the downscaled raster
    of ``floor(W*scale) x floor(H*scale)`` pixels and divides by
    ``zoom * scale``; pointer space is the full device-pixel surface and
    divides by ``zoom`` alone.
    """

    center_x: float = DEFAULT_CENTER_X
    center_y: float = DEFAULT_CENTER_Y
    zoom: float = DEFAULT_ZOOM
    scale: float = DEFAULT_SCALE
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def raster_size(self, surface: SurfaceSize) -> tuple[int, int]:
        return (
            int(math.floor(surface.width * self.scale)),
            int(math.floor(surface.height * self.scale)),
        )

    def fractal_x(self, px: float, surface: SurfaceSize) -> float:
        w, _ = self.raster_size(surface)
        return (px - w / 2) / (self.zoom * self.scale) + self.center_x

    def fractal_y(self, py: float, surface: SurfaceSize) -> float:
        _, h = self.raster_size(surface)
        return (py - h / 2) / (self.zoom * self.scale) + self.center_y

    def pointer_to_fractal(self, x: float, y: float, surface: SurfaceSize) -> tuple[float, float]:
        return (
            (x - surface.width / 2) / self.zoom + self.center_x,
            (y - surface.height / 2) / self.zoom + self.center_y,
        )


def _valid_zoom(zoom: float) -> bool:
    return math.isfinite(zoom) and zoom > 0


@dataclass
class Viewport:
    """The single mutable view of the explorer.

    Mutators replace :attr:`state` with a new :class:`ViewState`, so snapshots
    handed to the renderer never change underneath it.
    """

    state: ViewState = field(default_factory=ViewState)
    defaults: ViewState = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not _valid_zoom(self.state.zoom):
            raise ValueError("zoom must be a positive finite number.")
        if not (0 < self.state.scale <= 1):
            raise ValueError("scale must lie in (0, 1].")
        if self.state.max_iterations <= 0:
            raise ValueError("max_iterations must be positive.")
        self.defaults = self.state

    @property
    def center_x(self) -> float:
        return self.state.center_x

    @property
    def center_y(self) -> float:
        return self.state.center_y

    @property
    def zoom(self) -> float:
        return self.state.zoom

    @property
    def scale(self) -> float:
        return self.state.scale

    @property
    def max_iterations(self) -> int:
        return self.state.max_iterations

    def snapshot(self) -> ViewState:
        return self.state

    def pan(self, dx: float, dy: float) -> None:
        """Move the center by ``(-dx, -dy)`` fractal units."""

        self.state = replace(
            self.state,
            center_x=self.state.center_x - dx,
            center_y=self.state.center_y - dy,
        )

    def set_zoom(self, zoom: float) -> bool:
        if not _valid_zoom(zoom):
            return False
        self.state = replace(self.state, zoom=float(zoom))
        return True

    def set_scale(self, scale: float) -> bool:
        """Set the resolution scale, clamping values above 1."""

        if not math.isfinite(scale) or scale <= 0:
            return False
        self.state = replace(self.state, scale=min(float(scale), 1.0))
        return True

    def set_max_iterations(self, max_iterations: int) -> bool:
        if max_iterations <= 0:
            return False
        self.state = replace(self.state, max_iterations=int(max_iterations))
        return True

    def zoom_at(self, x: float, y: float, factor: float, surface: SurfaceSize) -> bool:
        """Multiply the zoom by ``factor`` keeping the point under ``(x, y)`` fixed.

        ``(x, y)`` is in full-resolution device pixels. A step that would leave
        the zoom zero or non-finite is rejected and nothing changes.
        """

        new_zoom = self.state.zoom * factor
        if not _valid_zoom(new_zoom):
            return False

        x_before, y_before = self.state.pointer_to_fractal(x, y, surface)
        x_after, y_after = replace(self.state, zoom=new_zoom).pointer_to_fractal(x, y, surface)
        self.state = replace(
            self.state,
            center_x=self.state.center_x + (x_before - x_after),
            center_y=self.state.center_y + (y_before - y_after),
            zoom=new_zoom,
        )
        return True

    def reset(self) -> None:
        self.state = self.defaults
