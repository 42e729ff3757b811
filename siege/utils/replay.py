"""Turn-log export: records each processed turn and flushes to JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from siege.core.game_state import GameState
    from siege.engine.scheduler import TurnResult

logger = logging.getLogger(__name__)


class TurnLogRecorder:
    """Accumulates per-turn summaries and the events each turn emitted."""

    __slots__ = ("_path", "_turns", "_seed")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._turns: list[dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self._turns)

    def record_turn(self, result: TurnResult, state: GameState) -> None:
        """Append *result*; the turn's events are looked up in *state*."""
        self._turns.append(
            {
                "turn": result.turn,
                "act": result.act,
                "wood": result.wood,
                "base_health": result.base_health,
                "attackers": [
                    {"id": a.id, "pos": [a.pos.x, a.pos.y], "marked": a.marked_for_death}
                    for a in result.attackers
                ],
                "builds": [
                    {
                        "commander": b.commander_id,
                        "type": b.placement.structure_type.value,
                        "pos": [b.placement.pos.x, b.placement.pos.y],
                        "failure": b.failure.value if b.failure else None,
                    }
                    for b in result.builds
                ],
                "events": [e.to_dict() for e in state.events.for_turn(result.turn)],
            }
        )

    def flush(self, state: GameState) -> None:
        """Write accumulated data to disk."""
        log = {
            "version": "1.0",
            "seed": self._seed,
            "total_turns": len(self._turns),
            "victory": state.victory,
            "base_health": state.base_health,
            "turns": self._turns,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(log, indent=2), encoding="utf-8")
        logger.info("Turn log saved to %s (%d turns)", self._path, len(self._turns))
