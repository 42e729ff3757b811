"""Engine layer: build plans, movement, combat, turn scheduling, debrief."""

from siege.engine.build_plan import generate_all_plans, generate_plan
from siege.engine.combat import CombatResolver
from siege.engine.movement import EnemyMovement
from siege.engine.scheduler import TurnScheduler
from siege.engine.debrief import build_debrief

__all__ = [
    "CombatResolver",
    "EnemyMovement",
    "TurnScheduler",
    "build_debrief",
    "generate_all_plans",
    "generate_plan",
]
