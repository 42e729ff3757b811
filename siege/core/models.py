"""Core data models: Vector2, Placement, Structure, Attacker, Commander."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from siege.core.enums import Personality, StructureType


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def distance(self, other: Vector2) -> float:
        """Euclidean distance over tile coordinates."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


# Up, down, left, right; also the neighbour tie-break order
STEP_OFFSETS: tuple[Vector2, ...] = (
    Vector2(0, -1),
    Vector2(0, 1),
    Vector2(-1, 0),
    Vector2(1, 0),
)


@dataclass(frozen=True, slots=True)
class Placement:
    """A queued build action: what to build, where, and for whom."""

    structure_type: StructureType
    pos: Vector2
    owner_id: str


@dataclass(slots=True)
class Structure:
    """A placed building. ``pos`` is the top-left tile of its footprint."""

    structure_id: int
    structure_type: StructureType
    pos: Vector2
    owner_id: str
    revealed: bool = False


@dataclass(slots=True)
class Attacker:
    """An enemy walking toward the base (or a decoy)."""

    id: int
    pos: Vector2
    label: str
    target: Vector2
    home_target: Vector2  # base corner assigned at spawn
    is_distracted: bool = False
    marked_for_death: bool = False

    def copy(self) -> Attacker:
        return Attacker(
            id=self.id, pos=self.pos, label=self.label, target=self.target,
            home_target=self.home_target, is_distracted=self.is_distracted,
            marked_for_death=self.marked_for_death,
        )


@dataclass(slots=True)
class Commander:
    """An AI commander with a personality and one build queue per act."""

    id: str
    name: str
    personality: Personality
    order: int = 0
    interpretation: str = ""
    last_command: str = ""
    build_queues: dict[int, list[Placement]] = field(
        default_factory=lambda: {1: [], 2: [], 3: []}
    )
    cursors: dict[int, int] = field(default_factory=lambda: {1: 0, 2: 0, 3: 0})

    def next_action(self, act: int) -> Placement | None:
        """Return the pending action for *act*, or None when the queue is spent."""
        queue = self.build_queues.get(act, [])
        cursor = self.cursors.get(act, 0)
        if cursor >= len(queue):
            return None
        return queue[cursor]

    def advance(self, act: int) -> None:
        self.cursors[act] = self.cursors.get(act, 0) + 1

    def set_queue(self, act: int, plan: list[Placement]) -> None:
        self.build_queues[act] = list(plan)
        self.cursors[act] = 0

    def copy(self) -> Commander:
        return Commander(
            id=self.id, name=self.name, personality=self.personality,
            order=self.order, interpretation=self.interpretation,
            last_command=self.last_command,
            build_queues={a: list(q) for a, q in self.build_queues.items()},
            cursors=dict(self.cursors),
        )


# Roster offered in the draft phase
DEFAULT_ROSTER: tuple[tuple[str, str, Personality], ...] = (
    ("larry", "Larry", Personality.LITERAL),
    ("paul", "Paul", Personality.PARANOID),
    ("olivia", "Olivia", Personality.OPTIMISTIC),
    ("ruth", "Ruth", Personality.RUTHLESS),
    ("tom", "Tom", Personality.TRICKSTER),
)

DEFAULT_DRAFT: tuple[str, ...] = ("larry", "paul", "olivia")


def make_commanders(ids: list[str] | tuple[str, ...]) -> list[Commander]:
    """Build commanders from roster ids; request order becomes processing order."""
    roster = {cid: (name, pers) for cid, name, pers in DEFAULT_ROSTER}
    commanders: list[Commander] = []
    for order, cid in enumerate(ids):
        name, pers = roster[cid]
        commanders.append(Commander(id=cid, name=name, personality=pers, order=order))
    return commanders
