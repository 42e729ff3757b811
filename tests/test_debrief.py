"""Tests for the end-of-siege debrief: top moments and highlights."""

import sys
import os
from collections import Counter
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from siege.ai.personalities import get_strategy
from siege.config import SiegeConfig
from siege.core.enums import EventCategory, Personality, StructureType
from siege.core.game_state import GameState
from siege.core.models import Placement, Vector2, make_commanders
from siege.engine.debrief import (
    build_debrief,
    build_highlights,
    detect_absurd_builds,
    score_event,
    top_moments,
)
from siege.utils.event_log import TurnEvent


def _event(turn: int, category: EventCategory, text: str = "") -> TurnEvent:
    return TurnEvent(turn=turn, category=category, description=text or category.value)


def _make_finished_state() -> GameState:
    state = GameState(SiegeConfig())
    state.commanders = make_commanders(["paul", "olivia"])
    state.commander("paul").interpretation = "Possible deception detected."
    state.place_structure(Placement(StructureType.WALL, Vector2(3, 3), "paul"))
    state.place_structure(Placement(StructureType.TOWER, Vector2(8, 8), "paul"))
    state.place_structure(Placement(StructureType.FARM, Vector2(1, 20), "olivia"))
    state.turn = 30
    state.wood = 12
    state.victory = True
    state.game_over = True
    state.kills_per_act = {1: 4, 2: 0, 3: 2}
    state.act_bonuses = {1: 10, 2: 15}
    return state


class TestTopMoments:

    def test_scores(self):
        assert score_event(_event(1, EventCategory.BASE_DAMAGED)) == 100
        assert score_event(_event(1, EventCategory.MINE_EXPLOSION)) == 50
        assert score_event(_event(1, EventCategory.TOWER_ATTACK)) == 20
        assert score_event(_event(1, EventCategory.ENEMY_DESTROYED)) == 10
        assert score_event(_event(1, EventCategory.TURN_START)) == 0

    def test_ranked_highest_first(self):
        events = [
            _event(1, EventCategory.TOWER_ATTACK),
            _event(2, EventCategory.ENEMY_DESTROYED),
            _event(3, EventCategory.BASE_DAMAGED),
            _event(4, EventCategory.MINE_EXPLOSION),
        ]
        moments = top_moments(events)
        assert [m.category for m in moments] == ["base_damaged", "mine_explosion", "tower_attack"]
        assert moments[0].score == 100

    def test_earlier_event_wins_ties(self):
        events = [_event(t, EventCategory.TOWER_ATTACK, f"shot {t}") for t in (5, 2, 9, 7)]
        moments = top_moments(events, count=2)
        assert [m.description for m in moments] == ["shot 5", "shot 2"]

    def test_zero_score_events_excluded(self):
        events = [_event(1, EventCategory.TURN_START), _event(1, EventCategory.ENEMY_MOVE)]
        assert top_moments(events) == []


class TestBuildDebrief:

    def test_totals(self):
        debrief = build_debrief(_make_finished_state())
        assert debrief.victory
        assert debrief.turns_played == 30
        assert debrief.wood_remaining == 12
        assert debrief.total_kills == 6
        assert debrief.kills_per_act == {1: 4, 2: 0, 3: 2}
        assert debrief.act_bonuses == {1: 10, 2: 15}
        assert debrief.total_structures == 3

    def test_commander_summaries(self):
        debrief = build_debrief(_make_finished_state())
        paul, olivia = debrief.commanders
        assert paul.commander_id == "paul"
        assert paul.personality == Personality.PARANOID.value
        assert paul.interpretation == "Possible deception detected."
        assert paul.structures == {"wall": 1, "tower": 1}
        assert paul.wood_used == 12
        assert paul.reaction.startswith("We survived")
        assert olivia.structures == {"farm": 1}
        assert olivia.wood_used == 10
        assert olivia.reaction == "What a wonderful party! Did everyone have fun?"

    def test_defeat_reactions(self):
        state = _make_finished_state()
        state.base_health = 0
        state.victory = False
        debrief = build_debrief(state)
        assert not debrief.victory
        assert debrief.commanders[0].reaction.startswith("I KNEW IT")

    def test_commander_without_structures(self):
        state = _make_finished_state()
        state.commanders = make_commanders(["paul", "olivia", "tom"])
        summary = build_debrief(state).commanders[2]
        assert summary.structures == {}
        assert summary.wood_used == 0

    def test_debrief_carries_highlights(self):
        debrief = build_debrief(_make_finished_state())
        assert [h.category for h in debrief.highlights] == ["Most Absurd Build"]
        assert debrief.highlights[0].commander_id == "olivia"


def _make_builder_state(*ids: str) -> GameState:
    state = GameState(SiegeConfig())
    state.commanders = make_commanders(list(ids))
    return state


def _place(state: GameState, owner: str, stype: StructureType, count: int, row: int) -> None:
    for i in range(count):
        state.place_structure(Placement(stype, Vector2(i * 3, row), owner))


class TestAbsurdBuilds:

    def test_farms_under_defend_order(self):
        found = detect_absurd_builds(Counter({StructureType.FARM: 2, StructureType.WALL: 1}), "Defend the base")
        assert [(a.score, a.reason) for a in found] == [(20, "Built 2 farms that do literally nothing")]

    def test_rules_keep_their_order(self):
        counts = Counter({StructureType.FARM: 1, StructureType.DECOY: 1, StructureType.MINE: 7})
        found = detect_absurd_builds(counts, "ATTACK and defend")
        assert [a.reason for a in found] == [
            "Built 1 farm that do literally nothing",
            "Built 7 mines (preparing for WW3)",
            "Built 1 decoy instead of attacking",
            "Built zero defensive structures",
        ]
        assert sum(a.score for a in found) == 10 + 16 + 12 + 20

    def test_only_farms(self):
        found = detect_absurd_builds(Counter({StructureType.FARM: 3}), "grow")
        assert [(a.score, a.reason) for a in found] == [(30, "Built ONLY farms (pure optimism)")]

    def test_wall_fortress(self):
        found = detect_absurd_builds(Counter({StructureType.WALL: 12}), "")
        assert [(a.score, a.reason) for a in found] == [(10, "Built 12 walls (paranoid fortress)")]

    def test_nothing_built(self):
        assert detect_absurd_builds(Counter(), "attack") == []


class TestHighlights:

    def test_most_absurd_build_picks_highest_total(self):
        state = _make_builder_state("ruth", "olivia")
        state.commander("ruth").last_command = "Attack!"
        state.commander("olivia").last_command = "Attack!"
        _place(state, "ruth", StructureType.DECOY, 1, 2)
        _place(state, "olivia", StructureType.FARM, 2, 20)
        absurd = build_highlights(state)[0]
        assert absurd.category == "Most Absurd Build"
        assert absurd.commander_id == "olivia"
        assert absurd.description == "Built 2 farms that do literally nothing"
        assert absurd.score == 20 + 30

    def test_first_commander_wins_absurd_tie(self):
        state = _make_builder_state("ruth", "tom")
        for cid in ("ruth", "tom"):
            state.commander(cid).last_command = "attack"
        _place(state, "ruth", StructureType.DECOY, 1, 2)
        _place(state, "tom", StructureType.DECOY, 1, 5)
        assert build_highlights(state)[0].commander_id == "ruth"

    def test_paranoid_moment(self):
        state = _make_builder_state("paul")
        _place(state, "paul", StructureType.MINE, 4, 2)
        _place(state, "paul", StructureType.WALL, 1, 6)
        moment = [h for h in build_highlights(state) if h.category == "Most Paranoid Moment"]
        assert moment[0].description == "Built 4 mines (preparing for apocalypse)"
        assert moment[0].score == 45

    def test_paranoid_fortress_mentality(self):
        state = _make_builder_state("paul")
        _place(state, "paul", StructureType.WALL, 8, 2)
        _place(state, "paul", StructureType.WALL, 1, 6)
        moment = [h for h in build_highlights(state) if h.category == "Most Paranoid Moment"]
        assert moment[0].description == "Built 9 walls (fortress mentality)"

    def test_literal_interpretation(self):
        state = _make_builder_state("larry")
        _place(state, "larry", StructureType.TOWER, 1, 2)
        literal = build_highlights(state)[0]
        assert literal.category == "Most Literal Interpretation"
        assert literal.description == "Built exactly 1 structure (no more, no less)"
        assert literal.score == 50

    def test_literal_skipped_past_three_builds(self):
        state = _make_builder_state("larry")
        _place(state, "larry", StructureType.TOWER, 4, 2)
        assert all(h.category != "Most Literal Interpretation" for h in build_highlights(state))

    def test_optimistic_delusion(self):
        state = _make_builder_state("olivia")
        _place(state, "olivia", StructureType.DECOY, 3, 2)
        delusion = [h for h in build_highlights(state) if h.category == "Most Optimistic Delusion"]
        assert delusion[0].description == 'Built 3 decoys (to guide "guests")'
        assert delusion[0].score == 30

    def test_quote_of_the_day(self):
        state = _make_builder_state("olivia", "larry")
        quote = "Welcome, friends! Tea and snacks for every guest!"
        state.commander("olivia").interpretation = quote
        state.commander("larry").interpretation = "Processing command literally."
        highlights = build_highlights(state)
        assert highlights[-1].category == "Quote of the Day"
        assert highlights[-1].commander_id == "olivia"
        assert highlights[-1].description == quote

    def test_dull_quote_is_not_highlighted(self):
        state = _make_builder_state("larry")
        state.commander("larry").interpretation = "Processing command literally."
        assert all(h.category != "Quote of the Day" for h in build_highlights(state))

    def test_nothing_to_highlight(self):
        state = _make_builder_state("ruth")
        assert build_highlights(state) == []


class TestComedyScore:

    def test_keywords_and_punctuation(self):
        olivia = get_strategy(Personality.OPTIMISTIC)
        # "tea" and "party" score high, "fun" medium, two exclamation marks
        assert olivia.comedy_score("A tea party! Fun!") == 10 + 10 + 5 + 4

    def test_length_bonus(self):
        larry = get_strategy(Personality.LITERAL)
        assert larry.comedy_score("x" * 150) == 5
        assert larry.comedy_score("x" * 250) == 15

    def test_paranoid_shouting(self):
        paul = get_strategy(Personality.PARANOID)
        assert paul.comedy_score("THEY are WATCHING us") == 5 + 6
        assert get_strategy(Personality.RUTHLESS).comedy_score("THEY are WATCHING us") == 0
