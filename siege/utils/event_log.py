"""Append-only turn log consumed by the debrief and the API event feed."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any

from siege.core.enums import EventCategory, Impact
from siege.core.models import Vector2


@dataclass(frozen=True, slots=True)
class TurnEvent:
    """A single structured entry in the turn log."""

    turn: int
    category: EventCategory
    description: str
    impact: Impact = Impact.LOW
    actor_id: str | None = None
    target_id: str | None = None
    position: Vector2 | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "turn": self.turn,
            "category": self.category.value,
            "description": self.description,
            "impact": self.impact.value,
            "actor_id": self.actor_id,
            "target_id": self.target_id,
            "position": [self.position.x, self.position.y] if self.position else None,
        }


class EventLog:
    """Unbounded append-only log. The engine never reads it back.

    All entries are kept until ``clear()`` on restart. Mutation happens only
    inside the turn step, so no locking is needed.
    """

    __slots__ = ("_buffer",)

    def __init__(self) -> None:
        self._buffer: deque[TurnEvent] = deque()

    def __len__(self) -> int:
        return len(self._buffer)

    def append(self, event: TurnEvent) -> None:
        self._buffer.append(event)

    def since_turn(self, turn: int) -> list[TurnEvent]:
        """Return all events with turn >= *turn*."""
        return [e for e in self._buffer if e.turn >= turn]

    def for_turn(self, turn: int) -> list[TurnEvent]:
        return [e for e in self._buffer if e.turn == turn]

    def latest(self, count: int = 50) -> list[TurnEvent]:
        """Return the *count* most recent events."""
        items = list(self._buffer)
        return items[-count:]

    def all(self) -> list[TurnEvent]:
        return list(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()
