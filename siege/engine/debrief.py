"""End-of-siege summary: outcome, per-commander tallies, reactions, highlights."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from siege.ai.personalities import ReactionContext, get_strategy
from siege.core.enums import EventCategory, Personality, StructureType
from siege.core.structures import structure_cost

if TYPE_CHECKING:
    from siege.core.game_state import GameState
    from siege.core.models import Commander
    from siege.utils.event_log import TurnEvent

MOMENT_SCORES: dict[EventCategory, int] = {
    EventCategory.BASE_DAMAGED: 100,
    EventCategory.MINE_EXPLOSION: 50,
    EventCategory.TOWER_ATTACK: 20,
    EventCategory.ENEMY_DESTROYED: 10,
}

TOP_MOMENTS = 3


@dataclass(frozen=True, slots=True)
class CommanderSummary:
    commander_id: str
    name: str
    personality: str
    interpretation: str
    wood_used: int
    structures: dict[str, int]
    reaction: str


@dataclass(frozen=True, slots=True)
class Moment:
    turn: int
    category: str
    description: str
    score: int


@dataclass(frozen=True, slots=True)
class Debrief:
    victory: bool
    turns_played: int
    wood_remaining: int
    total_kills: int
    kills_per_act: dict[int, int]
    act_bonuses: dict[int, int]
    total_structures: int
    commanders: tuple[CommanderSummary, ...]
    top_moments: tuple[Moment, ...]
    highlights: tuple[Highlight, ...] = ()


def score_event(event: TurnEvent) -> int:
    return MOMENT_SCORES.get(event.category, 0)


def top_moments(events: list[TurnEvent], count: int = TOP_MOMENTS) -> list[Moment]:
    """Highest-scoring events; earlier events win ties."""
    scored = [(score_event(e), i, e) for i, e in enumerate(events)]
    scored = [t for t in scored if t[0] > 0]
    scored.sort(key=lambda t: (-t[0], t[1]))
    return [
        Moment(turn=e.turn, category=e.category.value, description=e.description, score=s)
        for s, _, e in scored[:count]
    ]


# ---------------------------------------------------------------------------
# Highlights
# ---------------------------------------------------------------------------

QUOTE_THRESHOLD = 20


@dataclass(frozen=True, slots=True)
class Absurdity:
    score: int
    reason: str


@dataclass(frozen=True, slots=True)
class Highlight:
    category: str
    commander_id: str
    name: str
    description: str
    score: int


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def detect_absurd_builds(counts: Counter[StructureType], command: str) -> list[Absurdity]:
    """Builds that make little sense for *command*, in a fixed rule order."""
    lower = command.lower()
    farms = counts[StructureType.FARM]
    mines = counts[StructureType.MINE]
    decoys = counts[StructureType.DECOY]
    walls = counts[StructureType.WALL]
    total = sum(counts.values())
    found: list[Absurdity] = []

    if farms > 0 and ("defend" in lower or "attack" in lower):
        found.append(Absurdity(farms * 10, f"Built {_plural(farms, 'farm')} that do literally nothing"))
    if mines > 5:
        found.append(Absurdity((mines - 5) * 8, f"Built {mines} mines (preparing for WW3)"))
    if decoys > 0 and "attack" in lower:
        found.append(Absurdity(decoys * 12, f"Built {_plural(decoys, 'decoy')} instead of attacking"))
    if walls + counts[StructureType.TOWER] == 0 and "defend" in lower:
        found.append(Absurdity(20, "Built zero defensive structures"))
    if total > 0 and farms == total:
        found.append(Absurdity(30, "Built ONLY farms (pure optimism)"))
    if walls > 10:
        found.append(Absurdity((walls - 10) * 5, f"Built {walls} walls (paranoid fortress)"))
    return found


def build_highlights(state: GameState) -> list[Highlight]:
    """Most absurd build, one highlight per showcase personality, quote of the day."""
    commanders = state.ordered_commanders()
    counts = {
        c.id: Counter(s.structure_type for s in state.structures if s.owner_id == c.id)
        for c in commanders
    }
    highlights: list[Highlight] = []

    best: tuple[int, Commander, list[Absurdity]] | None = None
    for c in commanders:
        found = detect_absurd_builds(counts[c.id], c.last_command)
        total = sum(a.score for a in found)
        if total > (best[0] if best else 0):
            best = (total, c, found)
    if best is not None:
        total, c, found = best
        highlights.append(Highlight("Most Absurd Build", c.id, c.name, found[0].reason, total))

    by_personality = {c.personality: c for c in reversed(commanders)}

    paranoid = by_personality.get(Personality.PARANOID)
    if paranoid is not None:
        mines = counts[paranoid.id][StructureType.MINE]
        walls = counts[paranoid.id][StructureType.WALL]
        if mines > 3 or walls > 8:
            text = (
                f"Built {mines} mines (preparing for apocalypse)" if mines > walls
                else f"Built {walls} walls (fortress mentality)"
            )
            highlights.append(Highlight(
                "Most Paranoid Moment", paranoid.id, paranoid.name, text, mines * 10 + walls * 5,
            ))

    literal = by_personality.get(Personality.LITERAL)
    if literal is not None:
        built = sum(counts[literal.id].values())
        if built <= 3:
            highlights.append(Highlight(
                "Most Literal Interpretation", literal.id, literal.name,
                f"Built exactly {_plural(built, 'structure')} (no more, no less)", 50,
            ))

    optimistic = by_personality.get(Personality.OPTIMISTIC)
    if optimistic is not None:
        farms = counts[optimistic.id][StructureType.FARM]
        decoys = counts[optimistic.id][StructureType.DECOY]
        if farms > 2 or decoys > 2:
            text = (
                f"Built {farms} farms (they're just decorative)" if farms > decoys
                else f'Built {decoys} decoys (to guide "guests")'
            )
            highlights.append(Highlight(
                "Most Optimistic Delusion", optimistic.id, optimistic.name, text, farms * 15 + decoys * 10,
            ))

    quote: tuple[int, Commander] | None = None
    for c in commanders:
        score = get_strategy(c.personality).comedy_score(c.interpretation)
        if score > (quote[0] if quote else 0):
            quote = (score, c)
    if quote is not None and quote[0] > QUOTE_THRESHOLD:
        score, c = quote
        highlights.append(Highlight("Quote of the Day", c.id, c.name, c.interpretation, score))

    return highlights


def build_debrief(state: GameState) -> Debrief:
    """Summarise a finished (or abandoned) siege."""
    survived = state.base_health > 0
    summaries: list[CommanderSummary] = []

    for commander in state.ordered_commanders():
        owned = [s for s in state.structures if s.owner_id == commander.id]
        counts = Counter(s.structure_type for s in owned)
        ctx = ReactionContext(
            survived=survived,
            wood_remaining=state.wood,
            enemies_killed=state.total_kills,
            built=dict(counts),
        )
        summaries.append(CommanderSummary(
            commander_id=commander.id,
            name=commander.name,
            personality=commander.personality.value,
            interpretation=commander.interpretation,
            wood_used=sum(structure_cost(s.structure_type) for s in owned),
            structures={t.value: n for t, n in counts.items()},
            reaction=get_strategy(commander.personality).reaction(ctx),
        ))

    return Debrief(
        victory=state.victory,
        turns_played=state.turn,
        wood_remaining=state.wood,
        total_kills=state.total_kills,
        kills_per_act=dict(state.kills_per_act),
        act_bonuses=dict(state.act_bonuses),
        total_structures=len(state.structures),
        commanders=tuple(summaries),
        top_moments=tuple(top_moments(state.events.all())),
        highlights=tuple(build_highlights(state)),
    )
