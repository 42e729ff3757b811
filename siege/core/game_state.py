"""Mutable authoritative game state, only mutated by the turn scheduler
and the phase handlers that feed it."""

from __future__ import annotations

from typing import TYPE_CHECKING

from siege.core.enums import EventCategory, GamePhase, Impact, StructureType
from siege.core.grid import Grid
from siege.core.models import Attacker, Commander, Placement, Structure, Vector2
from siege.utils.event_log import EventLog, TurnEvent

if TYPE_CHECKING:
    from siege.config import SiegeConfig

ACTS = (1, 2, 3)


class GameState:
    """The single source of truth for one siege."""

    __slots__ = (
        "grid", "wood", "base_health", "max_health", "turn", "max_turns",
        "act", "phase", "intermission", "game_over", "victory",
        "kills_per_act", "wood_spent_per_act", "base_threatened_act2",
        "act_bonuses", "intermissions_reached", "structures", "attackers",
        "commanders", "enabled_types", "events",
        "_next_attacker_id", "_next_structure_id",
    )

    def __init__(self, config: SiegeConfig) -> None:
        self.grid: Grid = Grid(config.grid_size, Vector2(config.base_x, config.base_y))
        self.wood: int = config.initial_wood
        self.base_health: int = config.base_max_health
        self.max_health: int = config.base_max_health
        self.turn: int = 0
        self.max_turns: int = config.max_turns
        self.act: int = 1
        self.phase: GamePhase = GamePhase.DRAFT
        self.intermission: bool = False
        self.game_over: bool = False
        self.victory: bool = False
        self.kills_per_act: dict[int, int] = {a: 0 for a in ACTS}
        self.wood_spent_per_act: dict[int, int] = {a: 0 for a in ACTS}
        self.base_threatened_act2: bool = False
        self.act_bonuses: dict[int, int] = {}
        self.intermissions_reached: set[int] = set()
        self.structures: list[Structure] = []
        self.attackers: list[Attacker] = []
        self.commanders: list[Commander] = []
        self.enabled_types: list[StructureType] = []
        self.events: EventLog = EventLog()
        self._next_attacker_id: int = 1
        self._next_structure_id: int = 1

    # -- log --

    def emit(
        self,
        category: EventCategory,
        description: str,
        impact: Impact = Impact.LOW,
        actor_id: str | None = None,
        target_id: str | None = None,
        position: Vector2 | None = None,
    ) -> TurnEvent:
        event = TurnEvent(
            turn=self.turn,
            category=category,
            description=description,
            impact=impact,
            actor_id=actor_id,
            target_id=target_id,
            position=position,
        )
        self.events.append(event)
        return event

    # -- economy --

    def add_wood(self, amount: int) -> None:
        self.wood += amount

    def spend_wood(self, amount: int) -> bool:
        """Deduct *amount* if affordable. Wood never goes negative."""
        if amount > self.wood:
            return False
        self.wood -= amount
        self.wood_spent_per_act[self.act] = self.wood_spent_per_act.get(self.act, 0) + amount
        return True

    # -- base --

    def damage_base(self, amount: int = 1) -> None:
        self.base_health = max(0, self.base_health - amount)
        if self.act == 2:
            self.base_threatened_act2 = True

    # -- structures --

    def place_structure(self, placement: Placement, revealed: bool = True) -> Structure:
        structure = Structure(
            structure_id=self._next_structure_id,
            structure_type=placement.structure_type,
            pos=placement.pos,
            owner_id=placement.owner_id,
            revealed=revealed,
        )
        self._next_structure_id += 1
        self.structures.append(structure)
        return structure

    def remove_structure(self, structure: Structure) -> None:
        self.structures = [s for s in self.structures if s.structure_id != structure.structure_id]

    def structures_of_type(self, structure_type: StructureType) -> list[Structure]:
        return [s for s in self.structures if s.structure_type == structure_type]

    def reveal_all(self) -> None:
        for s in self.structures:
            s.revealed = True

    # -- attackers --

    def allocate_attacker_id(self) -> int:
        aid = self._next_attacker_id
        self._next_attacker_id += 1
        return aid

    def add_attacker(self, attacker: Attacker) -> None:
        self.attackers.append(attacker)

    def remove_attacker(self, attacker_id: int) -> Attacker | None:
        for i, a in enumerate(self.attackers):
            if a.id == attacker_id:
                return self.attackers.pop(i)
        return None

    def record_kill(self) -> None:
        self.kills_per_act[self.act] = self.kills_per_act.get(self.act, 0) + 1

    @property
    def total_kills(self) -> int:
        return sum(self.kills_per_act.values())

    # -- commanders --

    def ordered_commanders(self) -> list[Commander]:
        """Commanders in their explicit processing order."""
        return sorted(self.commanders, key=lambda c: c.order)

    def commander(self, commander_id: str) -> Commander | None:
        for c in self.commanders:
            if c.id == commander_id:
                return c
        return None
