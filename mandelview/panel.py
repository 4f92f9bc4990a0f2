"""Visibility state of the on-screen control panel."""

from __future__ import annotations

from typing import Optional

from .viewport import SurfaceSize

INITIAL_HIDE_DELAY = 5.0
LEAVE_HIDE_DELAY = 3.0
REVEAL_FRACTION = 0.2


class PanelState:
    """Auto-hiding panel; ``now`` is a monotonic time in seconds."""

    def __init__(
        self,
        now: float,
        *,
        initial_delay: float = INITIAL_HIDE_DELAY,
        leave_delay: float = LEAVE_HIDE_DELAY,
    ) -> None:
        self.visible = True
        self.show_instructions = False
        self.leave_delay = leave_delay
        self.hide_at: Optional[float] = now + initial_delay

    def in_reveal_region(self, x: float, y: float, surface: SurfaceSize) -> bool:
        return 0 <= x < surface.width * REVEAL_FRACTION and 0 <= y < surface.height * REVEAL_FRACTION

    def reveal(self) -> None:
        self.hide_at = None
        self.visible = True

    def pointer_moved(self, x: float, y: float, surface: SurfaceSize) -> bool:
        """Reveal the panel when the pointer reaches the top-left corner."""

        if not self.in_reveal_region(x, y, surface):
            return False
        changed = not self.visible or self.hide_at is not None
        self.reveal()
        return changed

    def pointer_left(self, now: float) -> None:
        self.hide_at = now + self.leave_delay

    def tick(self, now: float) -> bool:
        """Apply a due hide; returns True when visibility changed."""

        if self.hide_at is None or now < self.hide_at:
            return False
        self.hide_at = None
        if not self.visible:
            return False
        self.visible = False
        return True

    def toggle_instructions(self) -> bool:
        self.show_instructions = not self.show_instructions
        return self.show_instructions


def quality_label(scale: float) -> str:
    return f"Quality: {scale * 100:.0f}%"
