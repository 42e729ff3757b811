"""Immutable snapshot of the game state for API readers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping

from siege.core.enums import GamePhase, StructureType
from siege.core.game_state import GameState
from siege.core.models import Attacker, Commander, Structure


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of the game, safe to hand to the presentation layer.

    Structures, attackers and commanders are copied so later turns cannot
    mutate what a reader is holding.
    """

    turn: int
    max_turns: int
    act: int
    phase: GamePhase
    wood: int
    base_health: int
    max_health: int
    intermission: bool
    game_over: bool
    victory: bool
    paused: bool
    grid_size: int
    base: tuple[int, int]
    structures: tuple[Structure, ...]
    attackers: tuple[Attacker, ...]
    commanders: tuple[Commander, ...]
    enabled_types: tuple[StructureType, ...]
    kills_per_act: Mapping[int, int]
    wood_spent_per_act: Mapping[int, int]
    act_bonuses: Mapping[int, int]

    @classmethod
    def from_state(cls, state: GameState, paused: bool = True) -> Snapshot:
        return cls(
            turn=state.turn,
            max_turns=state.max_turns,
            act=state.act,
            phase=state.phase,
            wood=state.wood,
            base_health=state.base_health,
            max_health=state.max_health,
            intermission=state.intermission,
            game_over=state.game_over,
            victory=state.victory,
            paused=paused,
            grid_size=state.grid.size,
            base=(state.grid.base.x, state.grid.base.y),
            structures=tuple(replace(s) for s in state.structures),
            attackers=tuple(a.copy() for a in state.attackers),
            commanders=tuple(c.copy() for c in state.ordered_commanders()),
            enabled_types=tuple(state.enabled_types),
            kills_per_act=MappingProxyType(dict(state.kills_per_act)),
            wood_spent_per_act=MappingProxyType(dict(state.wood_spent_per_act)),
            act_bonuses=MappingProxyType(dict(state.act_bonuses)),
        )

    def visible_structures(self) -> tuple[Structure, ...]:
        """Structures the presentation layer may draw."""
        if self.game_over or self.phase == GamePhase.DEBRIEF:
            return self.structures
        return tuple(s for s in self.structures if s.revealed)
