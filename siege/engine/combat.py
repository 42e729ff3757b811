"""Combat resolution: tower fire with a one-turn telegraph, and farm output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from siege.core.enums import EventCategory, Impact, StructureType

if TYPE_CHECKING:
    from siege.config import SiegeConfig
    from siege.core.game_state import GameState
    from siege.core.models import Attacker, Structure

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CombatResult:
    """What the combat phase did this turn."""

    enemies_killed: int = 0
    towers_fired: int = 0
    marked_ids: list[int] = field(default_factory=list)


class CombatResolver:
    """Applies tower targeting and passive production to the game state.

    Resolution order inside the tower phase:
    1. Remove every attacker already marked for death (marked last turn).
    2. Each tower, in placement order, marks the nearest unmarked attacker
       within range. Ties go to the attacker stored first.
    """

    __slots__ = ("_config",)

    def __init__(self, config: SiegeConfig) -> None:
        self._config = config

    def resolve(self, state: GameState) -> CombatResult:
        result = CombatResult()
        result.enemies_killed = self._sweep_marked(state)

        for tower in state.structures_of_type(StructureType.TOWER):
            target = self._nearest_unmarked(tower, state.attackers)
            if target is None:
                continue
            target.marked_for_death = True
            result.towers_fired += 1
            result.marked_ids.append(target.id)
            state.emit(
                EventCategory.TOWER_ATTACK,
                f"Tower fires at {target.label}! (will destroy next turn)",
                impact=Impact.MEDIUM,
                actor_id=tower.owner_id,
                target_id=str(target.id),
                position=tower.pos,
            )
            logger.debug("Turn %d: tower at %s marked attacker #%d", state.turn, tower.pos, target.id)

        return result

    def produce_wood(self, state: GameState) -> int:
        """Add every farm's yield to the shared wood; one log entry per turn."""
        farms = state.structures_of_type(StructureType.FARM)
        produced = len(farms) * self._config.farm_yield
        if produced > 0:
            state.add_wood(produced)
            state.emit(
                EventCategory.FARM_PRODUCTION,
                f"Farms generated {produced} wood!",
                impact=Impact.LOW,
            )
        return produced

    # -- internals --

    @staticmethod
    def _sweep_marked(state: GameState) -> int:
        marked = [a for a in state.attackers if a.marked_for_death]
        for attacker in marked:
            state.remove_attacker(attacker.id)
            state.record_kill()
            state.emit(
                EventCategory.ENEMY_DESTROYED,
                f"{attacker.label} was destroyed by tower fire!",
                impact=Impact.MEDIUM,
                target_id=str(attacker.id),
                position=attacker.pos,
            )
        if marked:
            logger.debug("Turn %d: %d marked attackers destroyed", state.turn, len(marked))
        return len(marked)

    def _nearest_unmarked(self, tower: Structure, attackers: list[Attacker]) -> Attacker | None:
        best: Attacker | None = None
        best_dist = float("inf")
        for attacker in attackers:
            if attacker.marked_for_death:
                continue
            dist = tower.pos.distance(attacker.pos)
            if dist <= self._config.tower_range and dist < best_dist:
                best = attacker
                best_dist = dist
        return best
