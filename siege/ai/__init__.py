"""AI layer: personality strategies, order interpretation, action plans."""

from siege.ai.personalities import PersonalityStrategy, get_strategy
from siege.ai.action_plan import derive_action_plan, derive_skip_plan
from siege.ai.interpreter import CommandInterpreter

__all__ = [
    "CommandInterpreter",
    "PersonalityStrategy",
    "derive_action_plan",
    "derive_skip_plan",
    "get_strategy",
]
