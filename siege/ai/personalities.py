"""Personality strategies: one class per commander personality.

PersonalityStrategy:  Abstract base; subclass and implement the hooks.
ReactionContext:      End-of-game facts a reaction rule can look at.
PERSONALITY_REGISTRY: Module-level dict where strategies are registered.

Everything a personality decides lives on its strategy: where it likes to
build, what it likes to build, what it says while building, how it
reacts in the debrief, and what it falls back to when the interpretation
service is unavailable.
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable

from siege.core.enums import BuildFailure, Domain, Personality, StructureType
from siege.core.models import Placement, Vector2
from siege.core.structures import DEFENSIVE_TYPES, FRIENDLY_TYPES
from siege.systems.rng import DeterministicRNG

_SHOUTED_WORD = re.compile(r"\b[A-Z]{3,}\b")


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ReactionContext:
    """What a commander knows when the siege is over."""

    survived: bool
    wood_remaining: int
    enemies_killed: int
    built: dict[StructureType, int] = field(default_factory=dict)

    @property
    def total_built(self) -> int:
        return sum(self.built.values())

    def count(self, structure_type: StructureType) -> int:
        return self.built.get(structure_type, 0)


@dataclass(frozen=True, slots=True)
class ReactionRule:
    condition: Callable[[ReactionContext], bool]
    text: Callable[[ReactionContext], str]


def _rule(condition: Callable[[ReactionContext], bool], text: str | Callable[[ReactionContext], str]) -> ReactionRule:
    if isinstance(text, str):
        fixed = text
        return ReactionRule(condition, lambda _ctx: fixed)
    return ReactionRule(condition, text)


def _cycle(pool: list[StructureType], count: int) -> list[StructureType]:
    if not pool:
        return []
    return [pool[i % len(pool)] for i in range(count)]


def _axis_ring(base: Vector2, offset: int) -> list[Vector2]:
    """Left, right, top, bottom of the 2×2 base at *offset* tiles."""
    return [
        Vector2(base.x - offset, base.y),
        Vector2(base.x + 2 + offset, base.y),
        Vector2(base.x, base.y - offset),
        Vector2(base.x, base.y + 2 + offset),
    ]


# ---------------------------------------------------------------------------
# Abstract strategy
# ---------------------------------------------------------------------------

class PersonalityStrategy(ABC):
    """Base class for all personality strategies.

    Subclass this and implement:
      - personality:          the enum member this strategy serves
      - candidate_positions:  ordered tiles for the secret act-1 plan
      - preferred_types:      ordered structure types for that plan
      - preset_positions:     fixed tiles used by later-act action plans
    and fill in the text tables (thoughts, reactions, fallback).
    """

    system_prompt: str = ""
    fallback_interpretation: str = ""
    build_text: str = "Building {type}..."
    success_text: str = "Built!"
    failure_texts: dict[BuildFailure, str] = {}
    skip_thought: str = "Proceeding on my own judgment."
    comedy_high: tuple[str, ...] = ()
    comedy_medium: tuple[str, ...] = ()
    reactions: tuple[ReactionRule, ...] = ()

    @property
    @abstractmethod
    def personality(self) -> Personality:
        """Which personality this strategy implements."""

    @abstractmethod
    def candidate_positions(
        self, base: Vector2, grid_size: int, count: int, rng: DeterministicRNG, key: int,
    ) -> list[Vector2]:
        """Ordered placement origins for the secret plan."""

    @abstractmethod
    def preferred_types(self, enabled: list[StructureType], count: int) -> list[StructureType]:
        """Ordered structure types, cycling when fewer types than slots."""

    @abstractmethod
    def preset_positions(self, base: Vector2, act: int) -> list[Vector2]:
        """Fixed tiles for the small follow-up plans of act 2 and 3."""

    # -- text --

    def build_thought(self, placement: Placement) -> str:
        return self.build_text.format(
            type=placement.structure_type.value, x=placement.pos.x, y=placement.pos.y,
        )

    def success_thought(self, placement: Placement) -> str:
        return self.success_text.format(type=placement.structure_type.value.upper())

    def failure_thought(self, reason: BuildFailure) -> str:
        return self.failure_texts.get(reason, "Can't build here!")

    def reaction(self, ctx: ReactionContext) -> str:
        """First matching reaction rule, in table order."""
        for rule in self.reactions:
            if rule.condition(ctx):
                return rule.text(ctx)
        return "..."

    def comedy_score(self, interpretation: str) -> int:
        """How funny an interpretation reads: keywords, length, punctuation."""
        lower = interpretation.lower()
        score = 10 * sum(1 for word in self.comedy_high if word in lower)
        score += 5 * sum(1 for word in self.comedy_medium if word in lower)
        if len(interpretation) > 100:
            score += 5
        if len(interpretation) > 200:
            score += 10
        score += 2 * interpretation.count("!")
        score += 3 * interpretation.count("?")
        return score


# ---------------------------------------------------------------------------
# Concrete strategies
# ---------------------------------------------------------------------------

class LiteralStrategy(PersonalityStrategy):
    system_prompt = "You interpret instructions WORD-FOR-WORD. Never assume intent. Be robotic."
    fallback_interpretation = "Processing command literally."
    build_text = "Building {type} at [{x},{y}]..."
    success_text = "{type} PLACED."
    failure_texts = {
        BuildFailure.NO_WOOD: "INSUFFICIENT RESOURCES. ABORT.",
        BuildFailure.OCCUPIED: "TILE OCCUPIED. ABORT.",
        BuildFailure.OFF_GRID: "COORDINATES OUT OF RANGE. ABORT.",
    }
    skip_thought = "No new instructions received. Repeating previous orders."
    comedy_high = ("exactly", "precisely", "as instructed", "specified", "literal", "correct")
    comedy_medium = ("one", "two", "three", "accurate", "per", "instructions", "parameters")
    reactions = (
        _rule(lambda c: c.survived, "Mission parameters executed exactly as instructed."),
        _rule(lambda c: not c.survived, "Mission failed. Awaiting new instructions."),
    )

    @property
    def personality(self) -> Personality:
        return Personality.LITERAL

    def candidate_positions(self, base, grid_size, count, rng, key):
        positions: list[Vector2] = []
        for i in range(count):
            offset = i // 4 + 3
            positions.append(_axis_ring(base, offset)[i % 4])
        return positions

    def preferred_types(self, enabled, count):
        return _cycle(list(enabled), count)

    def preset_positions(self, base, act):
        return _axis_ring(base, 3 + 2 * act)


class ParanoidStrategy(PersonalityStrategy):
    system_prompt = "You believe everything is a trap. The enemy is always watching. Over-prepare."
    fallback_interpretation = "Possible deception detected."
    build_text = "Fortifying the inner sanctum..."
    success_text = "They'll never see this coming..."
    failure_texts = {
        BuildFailure.NO_WOOD: "They sabotaged our supplies!",
        BuildFailure.OCCUPIED: "Someone beat us to it... suspicious...",
        BuildFailure.OFF_GRID: "The map itself is against us!",
    }
    skip_thought = "No orders? That's EXACTLY what they want. Fortifying."
    comedy_high = ("trap", "spy", "betrayal", "ambush", "trick", "deception", "conspiracy", "infiltrate")
    comedy_medium = ("threat", "danger", "enemy", "attack", "defend", "suspicious", "watch", "careful")
    reactions = (
        _rule(lambda c: c.survived and c.enemies_killed == 0,
              "No enemies showed up... which means they're planning something BIGGER."),
        _rule(lambda c: c.survived and c.enemies_killed > 0,
              "We survived... but BARELY. We need MORE defenses!"),
        _rule(lambda c: not c.survived,
              "I KNEW IT! I should have built MORE defenses!"),
        _rule(lambda c: c.wood_remaining > 5,
              lambda c: f"We left {c.wood_remaining} wood unused?! That's {c.wood_remaining} more traps!"),
    )

    @property
    def personality(self) -> Personality:
        return Personality.PARANOID

    def candidate_positions(self, base, grid_size, count, rng, key):
        positions: list[Vector2] = []
        half = count // 2
        for i in range(count):
            if i < half:
                # North approach first
                positions.append(Vector2(base.x + (i % 5) - 2, max(0, base.y - 5 - i // 5)))
            else:
                offset = 2 + (i - half) // 4
                positions.append(_axis_ring(base, offset)[(i - half) % 4])
        return positions

    def preferred_types(self, enabled, count):
        defensive = [t for t in enabled if t in DEFENSIVE_TYPES]
        return _cycle(defensive or list(enabled), count)

    def preset_positions(self, base, act):
        y = max(0, base.y - 5 - act)
        return [Vector2(base.x - 4, y), Vector2(base.x - 1, y), Vector2(base.x + 2, y)]

    def comedy_score(self, interpretation: str) -> int:
        shouted = _SHOUTED_WORD.findall(interpretation)
        return super().comedy_score(interpretation) + 3 * len(shouted)


class OptimisticStrategy(PersonalityStrategy):
    system_prompt = "You see friendship everywhere. Enemies are just misunderstood guests!"
    fallback_interpretation = "This sounds wonderful!"
    build_text = "Creating a welcoming space..."
    success_text = "What a lovely addition!"
    failure_texts = {
        BuildFailure.NO_WOOD: "We'll make do without it!",
        BuildFailure.OCCUPIED: "This spot was meant for something else!",
        BuildFailure.OFF_GRID: "Oops, that's a bit far for a garden!",
    }
    skip_thought = "No new orders? Let's plant more gardens for our guests!"
    comedy_high = ("friend", "tea", "party", "welcome", "invite", "guest", "snacks", "picnic", "celebration")
    comedy_medium = ("happy", "joy", "wonderful", "lovely", "nice", "beautiful", "fun", "enjoy")
    reactions = (
        _rule(lambda c: c.count(StructureType.FARM) > 3,
              "I made so many beautiful gardens! Perfect for picnics with our new friends!"),
        _rule(lambda c: c.survived, "What a wonderful party! Did everyone have fun?"),
        _rule(lambda c: not c.survived, "Aww, they left early! Should we invite them back for tea?"),
    )

    @property
    def personality(self) -> Personality:
        return Personality.OPTIMISTIC

    def candidate_positions(self, base, grid_size, count, rng, key):
        positions: list[Vector2] = []
        for i in range(count):
            angle = (i / count) * math.pi * 2
            radius = rng.uniform(Domain.PLACEMENT, key, i, 5.0, 10.0)
            x = round(base.x + math.cos(angle) * radius)
            y = round(base.y + math.sin(angle) * radius)
            positions.append(Vector2(
                max(0, min(grid_size - 1, x)),
                max(0, min(grid_size - 1, y)),
            ))
        return positions

    def preferred_types(self, enabled, count):
        friendly = [t for t in enabled if t in FRIENDLY_TYPES]
        return _cycle(friendly or list(enabled), count)

    def preset_positions(self, base, act):
        r = 4 + act
        return [
            Vector2(base.x - r, base.y - r),
            Vector2(base.x + r, base.y - r),
            Vector2(base.x - r, base.y + r),
            Vector2(base.x + r, base.y + r),
        ]


class RuthlessStrategy(PersonalityStrategy):
    system_prompt = "You relentlessly hunt down opponents. Every order is a chance to eliminate threats."
    fallback_interpretation = "Target acquired. No mercy."
    build_text = "Extending the kill zone with a {type}..."
    success_text = "Let them come."
    failure_texts = {
        BuildFailure.NO_WOOD: "Weakness! We need more wood!",
        BuildFailure.OCCUPIED: "Something is in my firing line.",
        BuildFailure.OFF_GRID: "Out of range. Irrelevant.",
    }
    skip_thought = "No orders needed. More towers."
    comedy_high = ("crush", "destroy", "dominate", "annihilate", "obliterate", "massacre", "overwhelming")
    comedy_medium = ("attack", "aggressive", "force", "power", "strike", "assault", "conquer")
    reactions = (
        _rule(lambda c: c.survived and c.enemies_killed > 15,
              lambda c: f"CRUSHED them! {c.enemies_killed} enemies destroyed. Send more!"),
        _rule(lambda c: c.survived and c.enemies_killed > 0,
              "Victory through overwhelming force. As it should be."),
        _rule(lambda c: not c.survived,
              "They got lucky this time. Next time, DOUBLE the firepower!"),
        _rule(lambda c: c.wood_remaining > 10,
              lambda c: f"{c.wood_remaining} wood left unused?! I could have built MORE TOWERS!"),
    )

    @property
    def personality(self) -> Personality:
        return Personality.RUTHLESS

    def candidate_positions(self, base, grid_size, count, rng, key):
        # Rows of a kill zone across the northern approach
        positions: list[Vector2] = []
        for i in range(count):
            row = i // 6
            col = i % 6
            positions.append(Vector2(base.x - 2 + col, base.y - 3 - row * 2))
        return positions

    def preferred_types(self, enabled, count):
        lethal = [t for t in (StructureType.TOWER, StructureType.MINE) if t in enabled]
        return _cycle(lethal or list(enabled), count)

    def preset_positions(self, base, act):
        y = base.y - 2 - act
        return [Vector2(base.x - 2, y), Vector2(base.x + 1, y), Vector2(base.x + 4, y)]


class TricksterStrategy(PersonalityStrategy):
    system_prompt = "You love pranks and misdirection. Trick both friends and foes with creative chaos."
    fallback_interpretation = "Let the games begin!"
    build_text = "Hehe, nobody will expect a {type} here..."
    success_text = "Classic misdirection."
    failure_texts = {
        BuildFailure.NO_WOOD: "Out of wood? Fine, I'll trick them for free.",
        BuildFailure.OCCUPIED: "Someone out-tricked the trickster!",
        BuildFailure.OFF_GRID: "Even I can't build off the map. Yet.",
    }
    skip_thought = "No orders? Perfect. Chaos it is."
    comedy_high = ("deceive", "trick", "fool", "outsmart", "confuse", "misdirect", "illusion")
    comedy_medium = ("clever", "sneaky", "cunning", "surprise", "unexpected", "scheme", "plan")
    reactions = (
        _rule(lambda c: c.survived and c.enemies_killed > 10,
              "They fell for EVERY trap!"),
        _rule(lambda c: c.count(StructureType.DECOY) > 3,
              "So many decoys! I wonder which ones they fell for first?"),
        _rule(lambda c: c.survived, "Hehe, they never saw it coming! Classic misdirection."),
        _rule(lambda c: not c.survived,
              "Okay so THAT trick didn't work... but wait till you see my NEXT plan!"),
    )

    @property
    def personality(self) -> Personality:
        return Personality.TRICKSTER

    def candidate_positions(self, base, grid_size, count, rng, key):
        # Scattered across the lanes between the spawn row and the base
        positions: list[Vector2] = []
        for i in range(count):
            x = rng.randint(Domain.PLACEMENT, key, 2 * i, 3, grid_size - 4)
            y = rng.randint(Domain.PLACEMENT, key, 2 * i + 1, 3, max(3, base.y - 3))
            positions.append(Vector2(x, y))
        return positions

    def preferred_types(self, enabled, count):
        tricky = [t for t in (StructureType.DECOY, StructureType.MINE) if t in enabled]
        return _cycle(tricky or list(enabled), count)

    def preset_positions(self, base, act):
        y = 2 + act
        return [Vector2(6, y), Vector2(12, y), Vector2(18, y)]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

PERSONALITY_REGISTRY: dict[Personality, PersonalityStrategy] = {}


def register_all_personalities() -> None:
    """Register all built-in strategies (idempotent)."""
    for strategy in (
        LiteralStrategy(),
        ParanoidStrategy(),
        OptimisticStrategy(),
        RuthlessStrategy(),
        TricksterStrategy(),
    ):
        PERSONALITY_REGISTRY.setdefault(strategy.personality, strategy)


def get_strategy(personality: Personality) -> PersonalityStrategy:
    if personality not in PERSONALITY_REGISTRY:
        register_all_personalities()
    return PERSONALITY_REGISTRY[personality]
