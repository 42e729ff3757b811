"""GET /api/v1/state and /events: live siege data polled by the UI."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from siege.api.dependencies import get_game_manager
from siege.api.game_manager import GameManager
from siege.api.schemas import (
    AttackerSchema,
    CommanderSchema,
    EventSchema,
    GameStateResponse,
    StructureSchema,
)
from siege.core.structures import STRUCTURE_SPECS

router = APIRouter()


def serialize_commander(c) -> CommanderSchema:
    return CommanderSchema(
        id=c.id,
        name=c.name,
        personality=c.personality.value,
        order=c.order,
        interpretation=c.interpretation,
        last_command=c.last_command,
        queued={act: len(q) for act, q in c.build_queues.items()},
        cursors=dict(c.cursors),
    )


@router.get("/state", response_model=GameStateResponse)
def get_state(
    manager: GameManager = Depends(get_game_manager),
) -> GameStateResponse:
    snap = manager.get_snapshot()

    structures = []
    for s in snap.visible_structures():
        spec = STRUCTURE_SPECS[s.structure_type]
        structures.append(StructureSchema(
            structure_id=s.structure_id,
            structure_type=s.structure_type.value,
            x=s.pos.x,
            y=s.pos.y,
            width=spec.width,
            height=spec.height,
            owner_id=s.owner_id,
            revealed=s.revealed,
        ))

    attackers = [
        AttackerSchema(
            id=a.id, label=a.label, x=a.pos.x, y=a.pos.y,
            target_x=a.target.x, target_y=a.target.y,
            is_distracted=a.is_distracted, marked_for_death=a.marked_for_death,
        )
        for a in snap.attackers
    ]

    return GameStateResponse(
        phase=snap.phase.value,
        turn=snap.turn,
        max_turns=snap.max_turns,
        act=snap.act,
        wood=snap.wood,
        base_health=snap.base_health,
        max_health=snap.max_health,
        paused=snap.paused,
        intermission=snap.intermission,
        game_over=snap.game_over,
        victory=snap.victory,
        grid_size=snap.grid_size,
        base=list(snap.base),
        enabled_types=[t.value for t in snap.enabled_types],
        kills_per_act=dict(snap.kills_per_act),
        act_bonuses=dict(snap.act_bonuses),
        structures=structures,
        attackers=attackers,
        commanders=[serialize_commander(c) for c in snap.commanders],
    )


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since_turn: int = Query(0, ge=0, description="Only return events since this turn"),
    limit: int = Query(200, ge=1, le=5000, description="Maximum number of events"),
    manager: GameManager = Depends(get_game_manager),
) -> list[EventSchema]:
    events = manager.event_log.since_turn(since_turn)[-limit:]
    return [EventSchema(**e.to_dict()) for e in events]
