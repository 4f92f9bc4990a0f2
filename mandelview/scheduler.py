"""Coalescing of render requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RenderTicket:
    generation: int
    reason: str


class RenderScheduler:
    """Keep at most one pending render; newer requests supersede older ones."""

    def __init__(self) -> None:
        self._generation = 0
        self._taken = 0
        self._reason = ""
        self.superseded = 0

    @property
    def pending(self) -> bool:
        return self._generation > self._taken

    def request(self, reason: str = "") -> None:
        if self.pending:
            self.superseded += 1
        self._generation += 1
        self._reason = reason

    def take(self) -> Optional[RenderTicket]:
        """Hand out the newest request, or ``None`` when nothing is pending."""

        if not self.pending:
            return None
        self._taken = self._generation
        return RenderTicket(self._generation, self._reason)

    def is_current(self, ticket: RenderTicket) -> bool:
        return ticket.generation == self._generation
