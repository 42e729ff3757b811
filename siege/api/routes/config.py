"""GET /api/v1/config: expose the siege configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from siege.api.dependencies import get_game_manager
from siege.api.game_manager import GameManager
from siege.api.routes.state import serialize_commander
from siege.api.schemas import SiegeConfigResponse, StructureSpecSchema
from siege.core.models import DEFAULT_ROSTER, make_commanders
from siege.core.structures import STRUCTURE_SPECS

router = APIRouter()


@router.get("/config", response_model=SiegeConfigResponse)
def get_config(
    manager: GameManager = Depends(get_game_manager),
) -> SiegeConfigResponse:
    cfg = manager.config
    roster = make_commanders([cid for cid, _, _ in DEFAULT_ROSTER])
    return SiegeConfigResponse(
        seed=cfg.seed,
        grid_size=cfg.grid_size,
        base_x=cfg.base_x,
        base_y=cfg.base_y,
        initial_wood=cfg.initial_wood,
        base_max_health=cfg.base_max_health,
        max_turns=cfg.max_turns,
        intermission_turns=list(cfg.intermission_turns),
        tower_range=cfg.tower_range,
        farm_yield=cfg.farm_yield,
        decoy_distraction_chance=cfg.decoy_distraction_chance,
        initial_plan_actions=cfg.initial_plan_actions,
        act_plan_actions=cfg.act_plan_actions,
        turn_interval=cfg.turn_interval,
        attacker_step_delay=cfg.attacker_step_delay,
        build_step_delay=cfg.build_step_delay,
        interpreter_model=cfg.interpreter_model,
        roster=[serialize_commander(c) for c in roster],
        structures=[
            StructureSpecSchema(
                structure_type=spec.structure_type.value,
                width=spec.width,
                height=spec.height,
                cost=spec.cost,
                blocks_movement=spec.blocks_movement,
                description=spec.description,
            )
            for spec in STRUCTURE_SPECS.values()
        ],
    )
