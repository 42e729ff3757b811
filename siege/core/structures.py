"""Structure definitions: footprint, cost, and movement blocking.

Every structure occupies a width×height rectangle whose top-left tile is
its placement origin:
  - Wall:  3×1, blocks movement
  - Tower: 1×1, marks attackers in range for death
  - Decoy: 1×1, lures attackers, does not block
  - Mine:  1×1, destroys itself and the attacker that steps on it
  - Farm:  1×2, produces wood every turn
"""

from __future__ import annotations

from dataclasses import dataclass

from siege.core.enums import StructureType


@dataclass(frozen=True, slots=True)
class StructureSpec:
    """Static definition of a structure type."""

    structure_type: StructureType
    width: int
    height: int
    cost: int
    blocks_movement: bool
    description: str


STRUCTURE_SPECS: dict[StructureType, StructureSpec] = {
    StructureType.WALL: StructureSpec(
        StructureType.WALL, 3, 1, 4, True, "A clear boundary. Blocks enemy movement.",
    ),
    StructureType.TOWER: StructureSpec(
        StructureType.TOWER, 1, 1, 8, True, "Elevated perspective. Fires on nearby enemies.",
    ),
    StructureType.DECOY: StructureSpec(
        StructureType.DECOY, 1, 1, 5, False, "A point of interest. Distracts half of all enemies.",
    ),
    StructureType.MINE: StructureSpec(
        StructureType.MINE, 1, 1, 6, True, "A buried surprise. Explodes on contact.",
    ),
    StructureType.FARM: StructureSpec(
        StructureType.FARM, 1, 2, 10, True, "For the long game. Produces wood every turn.",
    ),
}

DEFENSIVE_TYPES: frozenset[StructureType] = frozenset(
    {StructureType.WALL, StructureType.TOWER, StructureType.MINE}
)
FRIENDLY_TYPES: frozenset[StructureType] = frozenset(
    {StructureType.FARM, StructureType.DECOY}
)


def structure_cost(structure_type: StructureType) -> int:
    return STRUCTURE_SPECS[structure_type].cost


def blocks_movement(structure_type: StructureType) -> bool:
    return STRUCTURE_SPECS[structure_type].blocks_movement
