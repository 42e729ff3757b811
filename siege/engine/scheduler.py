"""TurnScheduler: the turn/act state machine and its auto-advance timer.

Turn cycle (fixed order, every turn):
  1. Advance the turn counter
  2. Passive production (farms)
  3. Scheduled spawn for the current act
  4. Enemy movement, one attacker at a time
  5. Commander builds, one queued action per commander
  6. Combat (sweep marked attackers, then towers mark new ones)
  7. End checks: defeat, max-turns game over, intermission + act bonus

Everything runs on one asyncio event loop. The only suspension points are
the pacing delays inside a turn and the gap between automatic turns; the
``_turn_in_progress`` guard keeps the timer from re-entering a turn whose
delays are still pending, and ``_run_id`` identifies the current
auto-advance run so a cancelled run never starts another turn.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable

from siege.ai.personalities import get_strategy
from siege.core.enums import BuildFailure, EventCategory, GamePhase, Impact
from siege.core.grid import placement_problem
from siege.core.structures import structure_cost
from siege.engine.combat import CombatResolver, CombatResult
from siege.engine.movement import EnemyMovement, EnemyTurnResult

if TYPE_CHECKING:
    from siege.config import SiegeConfig
    from siege.core.game_state import GameState
    from siege.core.models import Attacker, Commander, Placement
    from siege.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(slots=True)
class BuildOutcome:
    """One commander's build attempt for one turn."""

    commander_id: str
    placement: Placement
    failure: BuildFailure | None = None

    @property
    def placed(self) -> bool:
        return self.failure is None


@dataclass(slots=True)
class TurnResult:
    """Everything one processed turn did."""

    turn: int
    act: int
    produced: int = 0
    spawned: int = 0
    enemy: EnemyTurnResult = field(default_factory=EnemyTurnResult)
    builds: list[BuildOutcome] = field(default_factory=list)
    combat: CombatResult | None = None
    game_over: bool = False
    intermission: bool = False
    # End-of-turn state, captured before anything else can run
    wood: int = 0
    base_health: int = 0
    attackers: tuple[Attacker, ...] = ()


class TurnScheduler:
    """Owns turn processing for one GameState.

    Auto-advance is a single task per run. ``pause()`` and the terminal /
    intermission checks end the run by bumping ``_run_id``; a turn that is
    already running finishes (skipping any remaining pacing delays) but no
    further turn is started for that run.
    """

    __slots__ = (
        "_config",
        "_state",
        "_movement",
        "_combat",
        "_sleep",
        "_paused",
        "_turn_in_progress",
        "_run_id",
        "_task",
    )

    def __init__(
        self,
        config: SiegeConfig,
        state: GameState,
        rng: DeterministicRNG,
        sleep: SleepFn | None = None,
    ) -> None:
        self._config = config
        self._state = state
        self._movement = EnemyMovement(config, rng)
        self._combat = CombatResolver(config)
        self._sleep: SleepFn = sleep or asyncio.sleep
        self._paused = True
        self._turn_in_progress = False
        self._run_id = 0
        self._task: asyncio.Task | None = None

    # -- properties --

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def turn_in_progress(self) -> bool:
        return self._turn_in_progress

    @property
    def running(self) -> bool:
        """True while an auto-advance task is alive."""
        return self._task is not None and not self._task.done()

    def can_advance(self) -> bool:
        s = self._state
        return (
            s.phase == GamePhase.EXECUTE
            and not s.game_over
            and not s.intermission
            and s.turn < s.max_turns
        )

    # -- turn processing --

    async def process_turn(self, pace: bool = True, run_id: int | None = None) -> TurnResult | None:
        """Run one full turn. Returns None when a turn cannot run right now."""
        if self._turn_in_progress or not self.can_advance():
            return None
        self._turn_in_progress = True
        try:
            return await self._run_turn(pace, run_id)
        finally:
            self._turn_in_progress = False

    async def _run_turn(self, pace: bool, run_id: int | None) -> TurnResult:
        state = self._state
        state.turn += 1
        result = TurnResult(turn=state.turn, act=state.act)
        state.emit(EventCategory.TURN_START, f"Turn {state.turn} begins (Act {state.act}).")

        result.produced = self._combat.produce_wood(state)
        result.spawned = self._movement.spawn_for_turn(state)

        for _ in self._movement.iter_enemy_turn(state, result.enemy):
            await self._pace(self._config.attacker_step_delay, pace, run_id)

        if state.base_health > 0:
            commanders = state.ordered_commanders()
            for i, commander in enumerate(commanders):
                outcome = self.execute_build(commander)
                if outcome is not None:
                    result.builds.append(outcome)
                    if i < len(commanders) - 1:
                        await self._pace(self._config.build_step_delay, pace, run_id)
            result.combat = self._combat.resolve(state)

        self._check_end(result)
        result.wood = state.wood
        result.base_health = state.base_health
        result.attackers = tuple(a.copy() for a in state.attackers)
        logger.info(
            "Turn %d (act %d): wood=%d health=%d attackers=%d structures=%d",
            state.turn, state.act, state.wood, state.base_health,
            len(state.attackers), len(state.structures),
        )
        return result

    async def _pace(self, delay: float, pace: bool, run_id: int | None) -> None:
        if not pace or delay <= 0:
            return
        if run_id is not None and run_id != self._run_id:
            return  # stale run
        await self._sleep(delay)

    def execute_build(self, commander: Commander) -> BuildOutcome | None:
        """Consume the commander's next queued action for the current act.

        The cursor advances whether or not the build succeeds.
        """
        state = self._state
        act = state.act
        placement = commander.next_action(act)
        if placement is None:
            return None
        commander.advance(act)

        strategy = get_strategy(commander.personality)
        stype = placement.structure_type
        pos = placement.pos

        state.emit(
            EventCategory.COMMANDER_THOUGHT,
            f"{commander.name}: {strategy.build_thought(placement)}",
            actor_id=commander.id,
            position=pos,
        )

        failure: BuildFailure | None = None
        if structure_cost(stype) > state.wood:
            failure = BuildFailure.NO_WOOD
        else:
            failure = placement_problem(state.grid, stype, pos.x, pos.y, state.structures)

        if failure is not None:
            state.emit(
                EventCategory.BUILDING_FAILED,
                f"{commander.name} couldn't build a {stype.value}: {strategy.failure_thought(failure)}",
                actor_id=commander.id,
                position=pos,
            )
            logger.debug("Turn %d: %s failed %s at %s (%s)", state.turn, commander.id, stype.value, pos, failure.value)
            return BuildOutcome(commander.id, placement, failure)

        state.spend_wood(structure_cost(stype))
        state.place_structure(placement, revealed=True)
        state.emit(
            EventCategory.BUILDING_PLACED,
            f"{commander.name} built a {stype.value}. {strategy.success_thought(placement)}",
            actor_id=commander.id,
            position=pos,
        )
        logger.debug("Turn %d: %s placed %s at %s", state.turn, commander.id, stype.value, pos)
        return BuildOutcome(commander.id, placement)

    # -- end conditions --

    def _check_end(self, result: TurnResult) -> None:
        state = self._state
        if state.base_health <= 0:
            self._finish(victory=False)
        elif state.turn >= state.max_turns:
            self._finish(victory=state.base_health > 0)
        elif state.turn in self._config.intermission_turns and state.turn not in state.intermissions_reached:
            self._enter_intermission()
        result.game_over = state.game_over
        result.intermission = state.intermission

    def _finish(self, victory: bool) -> None:
        state = self._state
        state.game_over = True
        state.victory = victory
        state.phase = GamePhase.DEBRIEF
        state.reveal_all()
        if victory:
            state.emit(
                EventCategory.VICTORY,
                f"The base held for {state.turn} turns. Victory!",
                impact=Impact.HIGH,
            )
        else:
            state.emit(
                EventCategory.DEFEAT,
                f"The base has fallen on turn {state.turn}.",
                impact=Impact.HIGH,
            )
        logger.info("Game over at turn %d: %s", state.turn, "victory" if victory else "defeat")
        self._halt()

    def _enter_intermission(self) -> None:
        state = self._state
        state.intermissions_reached.add(state.turn)
        bonus = self.act_bonus(state.act)
        if bonus > 0:
            state.add_wood(bonus)
            state.act_bonuses[state.act] = bonus
            state.emit(
                EventCategory.ACT_BONUS,
                f"Act {state.act} bonus: +{bonus} wood!",
                impact=Impact.MEDIUM,
            )
        state.intermission = True
        state.emit(
            EventCategory.INTERMISSION,
            f"Act {state.act} complete. Awaiting new orders.",
            impact=Impact.MEDIUM,
        )
        logger.info("Intermission after turn %d (act %d), bonus=%d", state.turn, state.act, bonus)
        self._halt()

    def act_bonus(self, act: int) -> int:
        """Wood earned at the end of *act*."""
        state = self._state
        cfg = self._config
        if act == 1 and state.kills_per_act.get(1, 0) >= cfg.act1_kill_threshold:
            return cfg.act1_bonus_wood
        if act == 2 and not state.base_threatened_act2:
            return cfg.act2_bonus_wood
        return 0

    def resume_intermission(self, plans: dict[str, list[Placement]], auto_resume: bool = True) -> bool:
        """Leave the intermission and activate the next act's queues."""
        state = self._state
        if not state.intermission or state.game_over:
            return False
        state.act += 1
        for commander in state.commanders:
            commander.set_queue(state.act, plans.get(commander.id, []))
        state.intermission = False
        state.emit(
            EventCategory.ACT_START,
            f"Act {state.act} begins!",
            impact=Impact.MEDIUM,
        )
        logger.info("Act %d started at turn %d", state.act, state.turn)
        if auto_resume:
            self.resume()
        return True

    # -- auto-advance --

    def resume(self) -> bool:
        """Start automatic turn advancement. Requires a running event loop."""
        if not self._paused or not self.can_advance():
            return False
        self._paused = False
        self._run_id += 1
        self._task = asyncio.get_running_loop().create_task(self._auto_advance(self._run_id))
        logger.info("Auto-advance resumed at turn %d", self._state.turn)
        return True

    def pause(self) -> bool:
        if self._paused:
            return False
        self._halt()
        logger.info("Auto-advance paused at turn %d", self._state.turn)
        return True

    async def step(self) -> TurnResult | None:
        """Process exactly one turn; only while paused."""
        if not self._paused or self._turn_in_progress:
            return None
        return await self.process_turn(pace=True)

    async def fast_forward(self) -> list[TurnResult]:
        """Run turns without pacing until game over or the next intermission."""
        if self._turn_in_progress or not self.can_advance():
            return []
        self._halt()
        results: list[TurnResult] = []
        while self.can_advance():
            result = await self.process_turn(pace=False)
            if result is None:
                break
            results.append(result)
        logger.info("Fast-forwarded %d turns to turn %d", len(results), self._state.turn)
        return results

    def stop(self) -> None:
        """Cancel auto-advance unconditionally (used on restart)."""
        self._paused = True
        self._run_id += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _halt(self) -> None:
        """End the current run; cancel its task only when it is between turns."""
        self._paused = True
        self._run_id += 1
        task = self._task
        if task is None or task.done():
            return
        if not self._turn_in_progress and task is not asyncio.current_task():
            task.cancel()

    async def _auto_advance(self, run_id: int) -> None:
        while run_id == self._run_id and self.can_advance():
            await self._sleep(self._config.turn_interval)
            if run_id != self._run_id:
                break
            await self.process_turn(pace=True, run_id=run_id)
        logger.debug("Auto-advance run %d finished", run_id)
