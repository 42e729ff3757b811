"""POST /api/v1/control/{action}: turn controls during the execute phase."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends

from siege.api.dependencies import get_game_manager
from siege.api.game_manager import GameManager
from siege.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    fast_forward = "fast_forward"
    reset = "reset"


@router.post("/control/{action}", response_model=ControlResponse)
async def control(
    action: ControlAction,
    manager: GameManager = Depends(get_game_manager),
) -> ControlResponse:
    turn = manager.state.turn

    match action:
        case ControlAction.start | ControlAction.resume:
            if not manager.start():
                return ControlResponse(status="noop", message="Nothing to resume.", turn=turn)
            return ControlResponse(status="ok", message="Siege running.", turn=turn)

        case ControlAction.pause:
            if not manager.pause():
                return ControlResponse(status="noop", message="Already paused.", turn=turn)
            return ControlResponse(status="ok", message="Siege paused.", turn=turn)

        case ControlAction.step:
            result = await manager.step()
            if result is None:
                return ControlResponse(status="noop", message="Step is only available while paused.", turn=turn)
            return ControlResponse(status="ok", message="Single turn executed.", turn=result.turn)

        case ControlAction.fast_forward:
            results = await manager.fast_forward()
            if not results:
                return ControlResponse(status="noop", message="Nothing to fast-forward.", turn=turn)
            return ControlResponse(
                status="ok",
                message=f"Fast-forwarded {len(results)} turns.",
                turn=manager.state.turn,
            )

        case ControlAction.reset:
            manager.reset()
            return ControlResponse(status="ok", message="Siege reset.", turn=manager.state.turn)
