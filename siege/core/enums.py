"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class StructureType(str, Enum):
    """Placeable structure kinds."""

    WALL = "wall"
    TOWER = "tower"
    DECOY = "decoy"
    MINE = "mine"
    FARM = "farm"


@unique
class Personality(str, Enum):
    """Commander personalities."""

    LITERAL = "literal"
    PARANOID = "paranoid"
    OPTIMISTIC = "optimistic"
    RUTHLESS = "ruthless"
    TRICKSTER = "trickster"


@unique
class GamePhase(str, Enum):
    """Outer game phases, in order."""

    DRAFT = "draft"
    CURATE = "curate"
    TEACH = "teach"
    EXECUTE = "execute"
    DEBRIEF = "debrief"


@unique
class EventCategory(str, Enum):
    """Turn log categories."""

    TURN_START = "turn_start"
    ENEMY_SPAWN = "enemy_spawn"
    ENEMY_MOVE = "enemy_move"
    ENEMY_DISTRACTED = "enemy_distracted"
    COMMANDER_THOUGHT = "commander_thought"
    BUILDING_PLACED = "building_placed"
    BUILDING_FAILED = "building_failed"
    FARM_PRODUCTION = "farm_production"
    MINE_EXPLOSION = "mine_explosion"
    TOWER_ATTACK = "tower_attack"
    ENEMY_DESTROYED = "enemy_destroyed"
    BASE_DAMAGED = "base_damaged"
    ACT_BONUS = "act_bonus"
    INTERMISSION = "intermission"
    ACT_START = "act_start"
    VICTORY = "victory"
    DEFEAT = "defeat"


@unique
class Impact(str, Enum):
    """How prominently the presentation layer should show an event."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@unique
class BuildFailure(str, Enum):
    """Why a queued build was skipped."""

    NO_WOOD = "no_wood"
    OCCUPIED = "occupied"
    OFF_GRID = "off_grid"


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    SPAWN = 0
    TARGET = 1
    LABEL = 2
    DISTRACTION = 3
    PLACEMENT = 4
