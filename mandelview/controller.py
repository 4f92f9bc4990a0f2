"""Translation of pointer, wheel and panel input into viewport changes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .scheduler import RenderScheduler
from .viewport import DEFAULT_MAX_ITERATIONS, SurfaceSize, Viewport

DRAG_MAX_ITERATIONS = 30
WHEEL_ZOOM_OUT = 0.9
WHEEL_ZOOM_IN = 1.1
BUTTON_ZOOM = 1.5
MIN_QUALITY = 0.2
MAX_QUALITY = 1.0
QUALITY_STEP = 0.1

POINTER_KINDS = ("down", "move", "up", "leave", "wheel")


@dataclass(frozen=True)
class PointerEvent:
    """Pointer or wheel input in device pixels relative to the surface."""

    kind: str
    x: float
    y: float
    delta_y: Optional[float] = None

    def __post_init__(self) -> None:
        if self.kind not in POINTER_KINDS:
            raise ValueError(f"Unknown pointer event '{self.kind}'.")
        if self.kind == "wheel" and self.delta_y is None:
            raise ValueError("wheel events need delta_y.")


@dataclass
class DragState:
    last_x: float
    last_y: float
    active: bool = True


class InteractionController:
    """Idle/Dragging state machine driving a :class:`Viewport`.

    While a drag is in progress the iteration budget drops to
    ``drag_iterations``; releasing restores ``full_iterations`` and
    requests one full-quality render.
    """

    def __init__(
        self,
        viewport: Viewport,
        scheduler: RenderScheduler,
        surface: SurfaceSize = SurfaceSize(0, 0),
        *,
        full_iterations: int = DEFAULT_MAX_ITERATIONS,
        drag_iterations: int = DRAG_MAX_ITERATIONS,
    ) -> None:
        if full_iterations <= 0 or drag_iterations <= 0:
            raise ValueError("Iteration budgets must be positive.")
        self.viewport = viewport
        self.scheduler = scheduler
        self.surface = surface
        self.full_iterations = full_iterations
        self.drag_iterations = drag_iterations
        self.drag: Optional[DragState] = None

    @property
    def dragging(self) -> bool:
        return self.drag is not None and self.drag.active

    def handle(self, event: PointerEvent) -> None:
        if event.kind == "down":
            self.pointer_down(event.x, event.y)
        elif event.kind == "move":
            self.pointer_move(event.x, event.y)
        elif event.kind == "up":
            self.pointer_up()
        elif event.kind == "leave":
            self.pointer_leave()
        else:
            self.wheel(event.x, event.y, event.delta_y)

    def pointer_down(self, x: float, y: float) -> None:
        self.drag = DragState(last_x=x, last_y=y)
        self.viewport.set_max_iterations(self.drag_iterations)

    def pointer_move(self, x: float, y: float) -> bool:
        if not self.dragging:
            return False
        zoom = self.viewport.zoom
        dx = (x - self.drag.last_x) / zoom
        dy = (y - self.drag.last_y) / zoom
        self.viewport.pan(dx, dy)
        self.drag.last_x = x
        self.drag.last_y = y
        self.scheduler.request("pan")
        return True

    def pointer_up(self) -> None:
        if self.drag is None:
            return
        self.drag = None
        self.viewport.set_max_iterations(self.full_iterations)
        self.scheduler.request("release")

    def pointer_leave(self) -> None:
        self.pointer_up()

    def wheel(self, x: float, y: float, delta_y: float) -> bool:
        # zero delta carries no direction (horizontal scrolling)
        if delta_y == 0:
            return False
        factor = WHEEL_ZOOM_OUT if delta_y > 0 else WHEEL_ZOOM_IN
        if not self.viewport.zoom_at(x, y, factor, self.surface):
            return False
        self.scheduler.request("wheel")
        return True

    def zoom_in(self) -> bool:
        if not self.viewport.set_zoom(self.viewport.zoom * BUTTON_ZOOM):
            return False
        self.scheduler.request("zoom")
        return True

    def reset(self) -> None:
        self.viewport.reset()
        if self.dragging:
            self.viewport.set_max_iterations(self.drag_iterations)
        self.scheduler.request("reset")

    def set_quality(self, scale: float) -> float:
        scale = min(max(scale, MIN_QUALITY), MAX_QUALITY)
        self.viewport.set_scale(round(scale, 2))
        self.scheduler.request("quality")
        return self.viewport.scale

    def step_quality(self, steps: int) -> float:
        return self.set_quality(self.viewport.scale + steps * QUALITY_STEP)

    def resize(self, surface: SurfaceSize) -> None:
        self.surface = surface
        self.scheduler.request("resize")
