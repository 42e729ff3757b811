"""Action-plan derivation for acts 2 and 3.

Turns a commander's interpreted order into at most a handful of
placements: keyword counts pick the structure types, the personality's
preset tiles pick the positions. Pure; occupancy and wood are checked
by the scheduler when each action is executed.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Sequence

from siege.ai.personalities import get_strategy
from siege.core.enums import Personality, StructureType
from siege.core.models import Placement
from siege.core.structures import DEFENSIVE_TYPES, FRIENDLY_TYPES

if TYPE_CHECKING:
    from siege.core.models import Vector2

DEFAULT_ACTION_CAP = 3

_TYPE_PATTERNS: dict[StructureType, re.Pattern[str]] = {
    StructureType.WALL: re.compile(r"\b(?:wall|barrier|fortif|fence)", re.IGNORECASE),
    StructureType.TOWER: re.compile(r"\b(?:tower|watch|archer|turret|lookout)", re.IGNORECASE),
    StructureType.DECOY: re.compile(r"\b(?:decoy|sign|welcome|distract|fake|landmark)", re.IGNORECASE),
    StructureType.MINE: re.compile(r"\b(?:mine|trap|explosive|boom|surprise)", re.IGNORECASE),
    StructureType.FARM: re.compile(r"\b(?:farm|garden|crop|harvest|grow)", re.IGNORECASE),
}
_DEFENSE_PATTERN = re.compile(r"\b(?:defen|protect|guard|secure|safe)", re.IGNORECASE)
_WELCOME_PATTERN = re.compile(r"\b(?:welcom|friend|peace|guest|party|invite)", re.IGNORECASE)

_NUMBER_WORDS = {"one": 1, "two": 2, "three": 3, "single": 1, "couple": 2}
_COUNT_PATTERN = re.compile(r"\b(one|two|three|single|couple|[1-3])\b", re.IGNORECASE)


def keyword_scores(text: str, enabled_types: Sequence[StructureType]) -> dict[StructureType, int]:
    """Occurrence score per enabled type, including defense/welcome boosts."""
    defense = len(_DEFENSE_PATTERN.findall(text))
    welcome = len(_WELCOME_PATTERN.findall(text))
    scores: dict[StructureType, int] = {}
    for stype in enabled_types:
        score = len(_TYPE_PATTERNS[stype].findall(text))
        if stype in DEFENSIVE_TYPES:
            score += defense
        if stype in FRIENDLY_TYPES:
            score += welcome
        scores[stype] = score
    return scores


def requested_count(text: str) -> int | None:
    """First explicit count of 1-3 in *text* ("two towers", "3 walls")."""
    m = _COUNT_PATTERN.search(text)
    if m is None:
        return None
    word = m.group(1).lower()
    return int(word) if word.isdigit() else _NUMBER_WORDS[word]


def derive_action_plan(
    interpretation: str,
    personality: Personality,
    enabled_types: Sequence[StructureType],
    act: int,
    owner_id: str,
    base: Vector2,
    max_actions: int = DEFAULT_ACTION_CAP,
) -> list[Placement]:
    """Ordered placements for *act*, at most *max_actions* long."""
    enabled = list(dict.fromkeys(enabled_types))
    if not enabled or max_actions <= 0:
        return []

    strategy = get_strategy(personality)
    cap = max_actions
    if personality == Personality.LITERAL:
        n = requested_count(interpretation)
        if n is not None:
            cap = min(cap, n)

    positions = strategy.preset_positions(base, act)
    count = min(cap, len(positions))
    types = _ranked_types(interpretation, strategy.preferred_types(enabled, count), enabled, count)

    return [
        Placement(structure_type=types[i], pos=positions[i], owner_id=owner_id)
        for i in range(min(count, len(types)))
    ]


def derive_skip_plan(
    personality: Personality,
    last_interpretation: str,
    enabled_types: Sequence[StructureType],
    act: int,
    owner_id: str,
    base: Vector2,
    max_actions: int = DEFAULT_ACTION_CAP,
) -> list[Placement]:
    """Plan for a commander who got no new orders: reuse the last reading."""
    text = last_interpretation or get_strategy(personality).fallback_interpretation
    return derive_action_plan(text, personality, enabled_types, act, owner_id, base, max_actions)


def _ranked_types(
    text: str,
    preferred: list[StructureType],
    enabled: list[StructureType],
    count: int,
) -> list[StructureType]:
    scores = keyword_scores(text, enabled)
    mentioned = [t for t in enabled if scores[t] > 0]
    if not mentioned:
        return preferred[:count]

    order = list(dict.fromkeys(preferred + enabled))
    mentioned.sort(key=lambda t: (-scores[t], order.index(t)))
    return [mentioned[i % len(mentioned)] for i in range(count)]
