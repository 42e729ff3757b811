"""Phase handlers: draft, curate, teach, intermission orders, debrief."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from siege.api.dependencies import get_game_manager
from siege.api.game_manager import GameFlowError, GameManager, SelectionError
from siege.api.schemas import (
    CurateRequest,
    DebriefResponse,
    DraftRequest,
    IntermissionRequest,
    PhaseResponse,
    TeachRequest,
)

router = APIRouter()


def _flow_error(exc: GameFlowError) -> HTTPException:
    status = 422 if isinstance(exc, SelectionError) else 409
    return HTTPException(status_code=status, detail=str(exc))


def _phase(
    manager: GameManager,
    interpretations: dict[str, str] | None = None,
    status: str = "ok",
) -> PhaseResponse:
    state = manager.state
    return PhaseResponse(
        status=status, phase=state.phase.value, act=state.act, interpretations=interpretations or {},
    )


@router.post("/draft", response_model=PhaseResponse)
def draft(
    body: DraftRequest,
    manager: GameManager = Depends(get_game_manager),
) -> PhaseResponse:
    try:
        manager.draft(body.commanders)
    except GameFlowError as exc:
        raise _flow_error(exc) from exc
    return _phase(manager)


@router.post("/curate", response_model=PhaseResponse)
def curate(
    body: CurateRequest,
    manager: GameManager = Depends(get_game_manager),
) -> PhaseResponse:
    try:
        manager.curate(body.types)
    except GameFlowError as exc:
        raise _flow_error(exc) from exc
    return _phase(manager)


@router.post("/teach", response_model=PhaseResponse)
async def teach(
    body: TeachRequest,
    manager: GameManager = Depends(get_game_manager),
) -> PhaseResponse:
    try:
        texts = await manager.teach(body.command, api_key=body.api_key)
    except GameFlowError as exc:
        raise _flow_error(exc) from exc
    return _phase(manager, texts)


@router.post("/intermission", response_model=PhaseResponse)
async def intermission(
    body: IntermissionRequest,
    manager: GameManager = Depends(get_game_manager),
) -> PhaseResponse:
    texts = await manager.resume_intermission(
        body.command, api_key=body.api_key, auto_resume=body.resume,
    )
    if texts is None:
        return _phase(manager, status="noop")
    return _phase(manager, texts)


@router.get("/debrief", response_model=DebriefResponse)
def debrief(
    manager: GameManager = Depends(get_game_manager),
) -> DebriefResponse:
    try:
        summary = manager.debrief()
    except GameFlowError as exc:
        raise _flow_error(exc) from exc
    return DebriefResponse(**asdict(summary))
