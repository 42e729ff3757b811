"""Enemy spawning, targeting and greedy movement.

Attackers do not path-find. Each turn every attacker (in spawn order):
  1. resolves a target: the nearest decoy on a coin flip, otherwise the
     nearest base corner (ties keep the corner it was assigned at spawn);
  2. looks at its four orthogonal neighbours and steps to the one closest
     to that target, if any neighbour is strictly closer than staying put;
  3. damages the base when the step lands on it, or detonates a mine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator

from siege.core.enums import Domain, EventCategory, Impact, StructureType
from siege.core.grid import tile_index
from siege.core.models import STEP_OFFSETS, Attacker, Vector2
from siege.core.structures import blocks_movement

if TYPE_CHECKING:
    from siege.config import SiegeConfig
    from siege.core.game_state import GameState
    from siege.core.models import Structure
    from siege.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

ATTACKER_LABELS: tuple[str, ...] = (
    "Confused Invader",
    "Polite Raider",
    "Suspicious Scout",
    "Lost Tourist",
    "Reluctant Warrior",
    "Overeager Recruit",
    "Misguided Merchant",
    "Wayward Wanderer",
    "Baffled Bandit",
    "Friendly Foe",
)


class StepOutcome(str, Enum):
    SKIPPED = "skipped"
    STAYED = "stayed"
    MOVED = "moved"
    REACHED_BASE = "reached_base"
    MINE = "mine"


@dataclass(slots=True)
class EnemyTurnResult:
    base_damaged: bool = False
    moved_count: int = 0
    mines_triggered: int = 0


def _dist2(a: Vector2, b: Vector2) -> int:
    """Squared Euclidean distance; same ordering as the real distance, exact ties."""
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy


class EnemyMovement:
    """Spawns waves and advances attackers one tile per turn."""

    __slots__ = ("_config", "_rng")

    def __init__(self, config: SiegeConfig, rng: DeterministicRNG) -> None:
        self._config = config
        self._rng = rng

    # -- spawning --

    def spawn_for_turn(self, state: GameState) -> int:
        """Spawn the wave scheduled for the current turn of the current act."""
        size = self._config.waves_for_act(state.act).get(state.turn, 0)
        if size:
            self.spawn_wave(state, size)
        return size

    def spawn_wave(self, state: GameState, size: int) -> list[Attacker]:
        corners = state.grid.base_corners()
        turn = state.turn
        spawned: list[Attacker] = []
        for _ in range(size):
            aid = state.allocate_attacker_id()
            x = self._rng.randint(Domain.SPAWN, aid, turn, self._config.spawn_min_x, self._config.spawn_max_x)
            corner = self._rng.pick(Domain.TARGET, aid, turn, corners)
            label = self._rng.pick(Domain.LABEL, aid, turn, ATTACKER_LABELS)
            attacker = Attacker(id=aid, pos=Vector2(x, 0), label=label, target=corner, home_target=corner)
            state.add_attacker(attacker)
            spawned.append(attacker)
            state.emit(
                EventCategory.ENEMY_SPAWN,
                f"{label} appeared at the northern border!",
                actor_id=str(aid),
                position=attacker.pos,
            )
        logger.info("Turn %d: spawned wave of %d (act %d)", turn, size, state.act)
        return spawned

    # -- movement --

    def process_enemy_turn(self, state: GameState) -> EnemyTurnResult:
        """Move every attacker once, without pacing."""
        result = EnemyTurnResult()
        for _ in self.iter_enemy_turn(state, result):
            pass
        return result

    def iter_enemy_turn(self, state: GameState, result: EnemyTurnResult) -> Iterator[StepOutcome]:
        """Move attackers one at a time, yielding after each so callers can pace.

        Stops early once the base has fallen.
        """
        index = tile_index(state.structures)
        for attacker in list(state.attackers):
            if state.base_health <= 0:
                return
            outcome = self.step_attacker(state, attacker, index, result)
            if outcome is StepOutcome.SKIPPED:
                continue
            yield outcome

    def step_attacker(
        self,
        state: GameState,
        attacker: Attacker,
        index: dict[tuple[int, int], Structure],
        result: EnemyTurnResult,
    ) -> StepOutcome:
        if attacker.marked_for_death:
            return StepOutcome.SKIPPED

        target = self.resolve_target(state, attacker)
        dest = self.choose_step(state, attacker.pos, target, index)

        if dest == attacker.pos:
            return StepOutcome.STAYED

        if state.grid.is_base(dest):
            state.damage_base(1)
            state.remove_attacker(attacker.id)
            result.base_damaged = True
            state.emit(
                EventCategory.BASE_DAMAGED,
                f"{attacker.label} reached the base and dealt damage!",
                impact=Impact.HIGH,
                actor_id=str(attacker.id),
                position=dest,
            )
            logger.info("Turn %d: base hit by #%d, health=%d", state.turn, attacker.id, state.base_health)
            return StepOutcome.REACHED_BASE

        structure = index.get((dest.x, dest.y))
        if structure is not None and structure.structure_type == StructureType.MINE:
            state.remove_structure(structure)
            index.pop((dest.x, dest.y), None)
            state.remove_attacker(attacker.id)
            state.record_kill()
            result.mines_triggered += 1
            state.emit(
                EventCategory.MINE_EXPLOSION,
                f"{attacker.label} stepped on a mine! BOOM!",
                impact=Impact.MEDIUM,
                actor_id=str(attacker.id),
                target_id=structure.owner_id,
                position=dest,
            )
            logger.debug("Turn %d: mine at %s took out #%d", state.turn, dest, attacker.id)
            return StepOutcome.MINE

        attacker.pos = dest
        result.moved_count += 1
        state.emit(
            EventCategory.ENEMY_MOVE,
            f"{attacker.label} advanced to [{dest.x}, {dest.y}]",
            actor_id=str(attacker.id),
            position=dest,
        )
        return StepOutcome.MOVED

    # -- targeting --

    def resolve_target(self, state: GameState, attacker: Attacker) -> Vector2:
        """Pick this turn's target and record it on the attacker."""
        decoy = self._nearest_decoy(state, attacker.pos)
        if decoy is not None and self._rng.chance(
            Domain.DISTRACTION, attacker.id, state.turn, self._config.decoy_distraction_chance,
        ):
            state.emit(
                EventCategory.ENEMY_DISTRACTED,
                f"{attacker.label} is distracted by the decoy at [{decoy.pos.x}, {decoy.pos.y}]!",
                actor_id=str(attacker.id),
                target_id=decoy.owner_id,
                position=decoy.pos,
            )
            attacker.target = decoy.pos
            attacker.is_distracted = True
            return decoy.pos

        corner = self._nearest_corner(state, attacker)
        attacker.target = corner
        attacker.is_distracted = False
        return corner

    @staticmethod
    def _nearest_decoy(state: GameState, pos: Vector2) -> Structure | None:
        best: Structure | None = None
        best_d = None
        for decoy in state.structures_of_type(StructureType.DECOY):
            d = _dist2(pos, decoy.pos)
            if best_d is None or d < best_d:
                best, best_d = decoy, d
        return best

    @staticmethod
    def _nearest_corner(state: GameState, attacker: Attacker) -> Vector2:
        corners = state.grid.base_corners()
        best_d = min(_dist2(attacker.pos, c) for c in corners)
        if _dist2(attacker.pos, attacker.home_target) == best_d:
            return attacker.home_target
        for c in corners:
            if _dist2(attacker.pos, c) == best_d:
                return c
        return attacker.home_target

    # -- step selection --

    @staticmethod
    def choose_step(
        state: GameState,
        pos: Vector2,
        target: Vector2,
        index: dict[tuple[int, int], Structure],
    ) -> Vector2:
        """Neighbour strictly closer to *target* than *pos*, else *pos*.

        Mines are enterable (and detonate); every other blocking structure
        is impassable.
        """
        best = pos
        best_d = _dist2(pos, target)
        for offset in STEP_OFFSETS:
            cand = pos + offset
            if not state.grid.in_bounds(cand):
                continue
            structure = index.get((cand.x, cand.y))
            if (
                structure is not None
                and blocks_movement(structure.structure_type)
                and structure.structure_type != StructureType.MINE
            ):
                continue
            d = _dist2(cand, target)
            if d < best_d:
                best, best_d = cand, d
        return best
