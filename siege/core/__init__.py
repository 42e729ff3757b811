"""Core data models and the grid/occupancy model."""

from siege.core.enums import (
    BuildFailure,
    Domain,
    EventCategory,
    GamePhase,
    Impact,
    Personality,
    StructureType,
)
from siege.core.models import Attacker, Commander, Placement, Structure, Vector2
from siege.core.structures import STRUCTURE_SPECS, StructureSpec
from siege.core.grid import Grid

__all__ = [
    "Attacker",
    "BuildFailure",
    "Commander",
    "Domain",
    "EventCategory",
    "GamePhase",
    "Grid",
    "Impact",
    "Personality",
    "Placement",
    "STRUCTURE_SPECS",
    "Structure",
    "StructureSpec",
    "StructureType",
    "Vector2",
]
