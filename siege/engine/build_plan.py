"""Build Plan Generator: the secret act-1 plan of every commander.

Each commander walks its personality's candidate tiles and preferred
structure types in lockstep, accepting a placement only when it is
affordable from the remaining budget, fits on the grid, and does not
collide with the base, pre-existing structures, or anything already
accepted (by itself or by an earlier commander).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from siege.ai.personalities import get_strategy
from siege.core.grid import placement_problem
from siege.core.models import Commander, Placement
from siege.core.structures import structure_cost

if TYPE_CHECKING:
    from siege.core.enums import StructureType
    from siege.core.grid import Grid
    from siege.core.models import Structure
    from siege.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

DEFAULT_MAX_ACTIONS = 10


def generate_plan(
    commander: Commander,
    enabled_types: Sequence[StructureType],
    wood_budget: int,
    existing: Iterable[Structure | Placement],
    grid: Grid,
    rng: DeterministicRNG,
    max_actions: int = DEFAULT_MAX_ACTIONS,
) -> list[Placement]:
    """Return the ordered placements *commander* would make with *wood_budget*."""
    if not enabled_types or max_actions <= 0:
        return []

    strategy = get_strategy(commander.personality)
    base = grid.base
    # Twice as many tiles as slots, then drop origins that are off the grid
    positions = [
        p for p in strategy.candidate_positions(base, grid.size, max_actions * 2, rng, commander.order)
        if grid.in_bounds(p)
    ]
    types = strategy.preferred_types(list(enabled_types), max_actions)

    taken: list[Structure | Placement] = list(existing)
    remaining = wood_budget
    plan: list[Placement] = []

    for i in range(min(max_actions, len(positions), len(types))):
        structure_type = types[i]
        pos = positions[i]
        cost = structure_cost(structure_type)

        if cost > remaining:
            continue
        if placement_problem(grid, structure_type, pos.x, pos.y, taken) is not None:
            continue

        placement = Placement(structure_type=structure_type, pos=pos, owner_id=commander.id)
        plan.append(placement)
        taken.append(placement)
        remaining -= cost

    logger.debug(
        "Plan for %s (%s): %d placements, %d/%d wood",
        commander.id, commander.personality.value, len(plan), wood_budget - remaining, wood_budget,
    )
    return plan


def generate_all_plans(
    commanders: Sequence[Commander],
    enabled_types: Sequence[StructureType],
    total_wood: int,
    existing: Iterable[Structure | Placement],
    grid: Grid,
    rng: DeterministicRNG,
    max_actions: int = DEFAULT_MAX_ACTIONS,
) -> dict[str, list[Placement]]:
    """Split *total_wood* evenly and plan every commander in order.

    Each commander's accepted placements are fed forward as occupied tiles
    for the next, so plans never collide with one another.
    """
    plans: dict[str, list[Placement]] = {}
    if not commanders:
        return plans

    per_commander = total_wood // len(commanders)
    remaining = total_wood
    taken: list[Structure | Placement] = list(existing)

    for commander in commanders:
        plan = generate_plan(
            commander,
            enabled_types,
            min(per_commander, remaining),
            taken,
            grid,
            rng,
            max_actions=max_actions,
        )
        remaining -= sum(structure_cost(p.structure_type) for p in plan)
        taken.extend(plan)
        plans[commander.id] = plan

    return plans
