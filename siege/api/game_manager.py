"""GameManager: owns one siege and drives it through its phases.

draft → curate → teach → execute (acts 1-3 with intermissions) → debrief.

All mutation happens on the server's event loop: phase handlers run
synchronously or await the interpretation service, and turn processing
is delegated to the TurnScheduler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Sequence

from siege.ai.action_plan import derive_action_plan, derive_skip_plan
from siege.ai.interpreter import CommandInterpreter
from siege.ai.personalities import get_strategy, register_all_personalities
from siege.core.enums import GamePhase, StructureType
from siege.core.game_state import GameState
from siege.core.models import DEFAULT_ROSTER, make_commanders
from siege.core.snapshot import Snapshot
from siege.engine.build_plan import generate_all_plans
from siege.engine.debrief import Debrief, build_debrief
from siege.engine.scheduler import TurnScheduler
from siege.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    import httpx

    from siege.config import SiegeConfig
    from siege.core.models import Placement
    from siege.engine.scheduler import TurnResult
    from siege.utils.event_log import EventLog

logger = logging.getLogger(__name__)

ENABLED_TYPE_COUNT = 3
MAX_COMMANDERS = len(DEFAULT_ROSTER)


class GameFlowError(ValueError):
    """A phase handler was called out of order."""


class SelectionError(GameFlowError):
    """A draft or curation request named an invalid selection."""


class GameManager:
    """Lifecycle of a single siege.

    Provides:
      - phase handlers (draft / curate / teach / intermission)
      - turn controls (start / pause / resume / step / fast-forward / reset)
      - read access (snapshot, event log, debrief)
    """

    def __init__(
        self,
        config: SiegeConfig,
        api_key: str | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self.config = config
        self._api_key = api_key
        self._sleep = sleep
        self._interpreter = CommandInterpreter(config, transport)

        self._rng: DeterministicRNG | None = None
        self._state: GameState | None = None
        self._scheduler: TurnScheduler | None = None

        register_all_personalities()
        self._build()

    # -- public properties --

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def scheduler(self) -> TurnScheduler:
        return self._scheduler

    @property
    def event_log(self) -> EventLog:
        return self._state.events

    @property
    def paused(self) -> bool:
        return self._scheduler.paused

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def get_snapshot(self) -> Snapshot:
        return Snapshot.from_state(self._state, paused=self._scheduler.paused)

    # -- phase handlers --

    def draft(self, commander_ids: Sequence[str]) -> None:
        """Pick the commanders; request order becomes processing order."""
        self._require_phase(GamePhase.DRAFT)
        known = {cid for cid, _, _ in DEFAULT_ROSTER}
        ids = list(commander_ids)
        if not 1 <= len(ids) <= MAX_COMMANDERS:
            raise SelectionError(f"Draft between 1 and {MAX_COMMANDERS} commanders.")
        if len(set(ids)) != len(ids):
            raise SelectionError("Each commander can only be drafted once.")
        unknown = [cid for cid in ids if cid not in known]
        if unknown:
            raise SelectionError(f"Unknown commanders: {', '.join(unknown)}")

        self._state.commanders = make_commanders(ids)
        self._state.phase = GamePhase.CURATE
        logger.info("Drafted commanders: %s", ", ".join(ids))

    def curate(self, types: Sequence[str | StructureType]) -> None:
        """Enable exactly three distinct structure types."""
        self._require_phase(GamePhase.CURATE)
        try:
            selected = [StructureType(t) for t in types]
        except ValueError as exc:
            raise SelectionError(str(exc)) from exc
        if len(selected) != ENABLED_TYPE_COUNT or len(set(selected)) != ENABLED_TYPE_COUNT:
            raise SelectionError(f"Select exactly {ENABLED_TYPE_COUNT} different structure types.")

        self._state.enabled_types = selected
        self._state.phase = GamePhase.TEACH
        logger.info("Enabled structures: %s", ", ".join(t.value for t in selected))

    async def teach(self, command: str, api_key: str | None = None) -> dict[str, str]:
        """Interpret the opening order and fill every act-1 queue."""
        self._require_phase(GamePhase.TEACH)
        state = self._state
        commanders = state.ordered_commanders()
        texts = await self._interpreter.interpret_all(command, commanders, api_key or self._api_key)
        if state is not self._state or state.phase != GamePhase.TEACH:
            raise GameFlowError("The game changed while orders were being interpreted.")

        for commander in commanders:
            commander.interpretation = texts[commander.id]
            commander.last_command = command

        plans = generate_all_plans(
            commanders,
            state.enabled_types,
            state.wood,
            state.structures,
            state.grid,
            self._rng,
            max_actions=self._config.initial_plan_actions,
        )
        for commander in commanders:
            commander.set_queue(1, plans.get(commander.id, []))

        state.phase = GamePhase.EXECUTE
        logger.info(
            "Orders received; act 1 plans: %s",
            ", ".join(f"{cid}={len(p)}" for cid, p in plans.items()),
        )
        return texts

    async def resume_intermission(
        self,
        command: str | None,
        api_key: str | None = None,
        auto_resume: bool = True,
    ) -> dict[str, str] | None:
        """Plan the next act from a new order (or none) and leave the intermission.

        Returns each commander's reading of the order, or None when there
        is no intermission to leave.
        """
        state = self._state
        if not state.intermission or state.game_over:
            return None

        commanders = state.ordered_commanders()
        if command:
            texts = await self._interpreter.interpret_all(command, commanders, api_key or self._api_key)
            if state is not self._state or not state.intermission:
                return None
        else:
            texts = {c.id: get_strategy(c.personality).skip_thought for c in commanders}

        next_act = state.act + 1
        base = state.grid.base
        cap = self._config.act_plan_actions
        plans: dict[str, list[Placement]] = {}
        for commander in commanders:
            if command:
                commander.interpretation = texts[commander.id]
                commander.last_command = command
                plans[commander.id] = derive_action_plan(
                    commander.interpretation, commander.personality, state.enabled_types,
                    next_act, commander.id, base, max_actions=cap,
                )
            else:
                plans[commander.id] = derive_skip_plan(
                    commander.personality, commander.interpretation, state.enabled_types,
                    next_act, commander.id, base, max_actions=cap,
                )

        self._scheduler.resume_intermission(plans, auto_resume=auto_resume)
        return texts

    def debrief(self) -> Debrief:
        self._require_phase(GamePhase.DEBRIEF)
        return build_debrief(self._state)

    # -- controls --

    def start(self) -> bool:
        return self._scheduler.resume()

    def pause(self) -> bool:
        return self._scheduler.pause()

    def resume(self) -> bool:
        return self._scheduler.resume()

    async def step(self) -> TurnResult | None:
        return await self._scheduler.step()

    async def fast_forward(self) -> list[TurnResult]:
        return await self._scheduler.fast_forward()

    def reset(self) -> None:
        """Throw the current siege away and start over from the draft."""
        self._scheduler.stop()
        self._build()
        logger.info("GameManager reset.")

    def shutdown(self) -> None:
        self._scheduler.stop()

    # -- internals --

    def _build(self) -> None:
        self._rng = DeterministicRNG(self._config.seed)
        self._state = GameState(self._config)
        self._scheduler = TurnScheduler(self._config, self._state, self._rng, sleep=self._sleep)

    def _require_phase(self, phase: GamePhase) -> None:
        if self._state.phase != phase:
            raise GameFlowError(
                f"Expected phase '{phase.value}', current phase is '{self._state.phase.value}'."
            )
