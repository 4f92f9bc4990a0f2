"""Public API for the interactive Mandelbrot explorer."""

from .colors import colorize, color_for, heatmap_rgba, parse_hex_color
from .controller import DragState, InteractionController, PointerEvent
from .export import write_snapshot
from .iteration import escape_counts, iterate
from .panel import PanelState, quality_label
from .renderer import PixelBuffer, present, render_frame, sample_axes
from .scheduler import RenderScheduler, RenderTicket
from .viewport import SurfaceSize, ViewState, Viewport

__all__ = [
    "DragState",
    "InteractionController",
    "PanelState",
    "PixelBuffer",
    "PointerEvent",
    "RenderScheduler",
    "RenderTicket",
    "SurfaceSize",
    "ViewState",
    "Viewport",
    "color_for",
    "colorize",
    "escape_counts",
    "heatmap_rgba",
    "iterate",
    "parse_hex_color",
    "present",
    "quality_label",
    "render_frame",
    "sample_axes",
    "write_snapshot",
]
