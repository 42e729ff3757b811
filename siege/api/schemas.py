"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- State ---

class StructureSchema(BaseModel):
    structure_id: int
    structure_type: str
    x: int
    y: int
    width: int
    height: int
    owner_id: str
    revealed: bool


class AttackerSchema(BaseModel):
    id: int
    label: str
    x: int
    y: int
    target_x: int
    target_y: int
    is_distracted: bool = False
    marked_for_death: bool = False


class CommanderSchema(BaseModel):
    id: str
    name: str
    personality: str
    order: int
    interpretation: str = ""
    last_command: str = ""
    queued: dict[int, int] = Field(default_factory=dict)
    cursors: dict[int, int] = Field(default_factory=dict)


class EventSchema(BaseModel):
    turn: int
    category: str
    description: str
    impact: str = "low"
    actor_id: str | None = None
    target_id: str | None = None
    position: list[int] | None = None


class GameStateResponse(BaseModel):
    phase: str
    turn: int
    max_turns: int
    act: int
    wood: int
    base_health: int
    max_health: int
    paused: bool
    intermission: bool
    game_over: bool
    victory: bool
    grid_size: int
    base: list[int]
    enabled_types: list[str] = Field(default_factory=list)
    kills_per_act: dict[int, int] = Field(default_factory=dict)
    act_bonuses: dict[int, int] = Field(default_factory=dict)
    structures: list[StructureSchema] = Field(default_factory=list)
    attackers: list[AttackerSchema] = Field(default_factory=list)
    commanders: list[CommanderSchema] = Field(default_factory=list)


# --- Phases ---

class DraftRequest(BaseModel):
    commanders: list[str] = Field(..., min_length=1)


class CurateRequest(BaseModel):
    types: list[str]


class TeachRequest(BaseModel):
    command: str = Field(..., min_length=1, max_length=500)
    api_key: str | None = None


class IntermissionRequest(BaseModel):
    command: str | None = Field(None, max_length=500)
    api_key: str | None = None
    resume: bool = True


class PhaseResponse(BaseModel):
    status: str = "ok"
    phase: str
    act: int
    interpretations: dict[str, str] = Field(default_factory=dict)


# --- Debrief ---

class CommanderSummarySchema(BaseModel):
    commander_id: str
    name: str
    personality: str
    interpretation: str
    wood_used: int
    structures: dict[str, int]
    reaction: str


class MomentSchema(BaseModel):
    turn: int
    category: str
    description: str
    score: int


class HighlightSchema(BaseModel):
    category: str
    commander_id: str
    name: str
    description: str
    score: int


class DebriefResponse(BaseModel):
    victory: bool
    turns_played: int
    wood_remaining: int
    total_kills: int
    kills_per_act: dict[int, int]
    act_bonuses: dict[int, int]
    total_structures: int
    commanders: list[CommanderSummarySchema]
    top_moments: list[MomentSchema]
    highlights: list[HighlightSchema] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    turn: int = 0


# --- Config ---

class StructureSpecSchema(BaseModel):
    structure_type: str
    width: int
    height: int
    cost: int
    blocks_movement: bool
    description: str


class SiegeConfigResponse(BaseModel):
    seed: int
    grid_size: int
    base_x: int
    base_y: int
    initial_wood: int
    base_max_health: int
    max_turns: int
    intermission_turns: list[int]
    tower_range: float
    farm_yield: int
    decoy_distraction_chance: float
    initial_plan_actions: int
    act_plan_actions: int
    turn_interval: float
    attacker_step_delay: float
    build_step_delay: float
    interpreter_model: str
    roster: list[CommanderSchema] = Field(default_factory=list)
    structures: list[StructureSpecSchema] = Field(default_factory=list)
