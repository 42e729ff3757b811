"""Tests for spawning, targeting, greedy steps, mines and base arrival."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from siege.config import SiegeConfig
from siege.core.enums import EventCategory, StructureType
from siege.core.game_state import GameState
from siege.core.models import Attacker, Placement, Vector2
from siege.engine.movement import ATTACKER_LABELS, EnemyMovement
from siege.systems.rng import DeterministicRNG


def _make_state(turn: int = 1) -> GameState:
    state = GameState(SiegeConfig())
    state.turn = turn
    return state


def _make_movement(seed: int = 42) -> EnemyMovement:
    return EnemyMovement(SiegeConfig(), DeterministicRNG(seed))


def _add_attacker(state: GameState, x: int, y: int, home: tuple = (12, 12)) -> Attacker:
    corner = Vector2(*home)
    attacker = Attacker(
        id=state.allocate_attacker_id(), pos=Vector2(x, y), label="Polite Raider",
        target=corner, home_target=corner,
    )
    state.add_attacker(attacker)
    return attacker


def _build(state: GameState, stype: StructureType, x: int, y: int):
    return state.place_structure(Placement(stype, Vector2(x, y), "tom"))


class TestGreedyStep:

    def test_moves_toward_nearest_corner(self):
        state = _make_state()
        attacker = _add_attacker(state, 10, 0)
        result = _make_movement().process_enemy_turn(state)
        assert attacker.pos == Vector2(10, 1)
        assert attacker.target == Vector2(12, 12)
        assert result.moved_count == 1
        assert not result.base_damaged

    def test_blocked_attacker_stays_put(self):
        state = _make_state()
        _build(state, StructureType.WALL, 11, 10)
        attacker = _add_attacker(state, 12, 9)
        result = _make_movement().process_enemy_turn(state)
        assert attacker.pos == Vector2(12, 9)
        assert result.moved_count == 0

    def test_every_wall_tile_blocks(self):
        state = _make_state()
        # Wall origin is two tiles left of the attacker's path
        _build(state, StructureType.WALL, 10, 10)
        attacker = _add_attacker(state, 12, 9)
        _make_movement().process_enemy_turn(state)
        assert attacker.pos == Vector2(12, 9)

    def test_decoy_does_not_block(self):
        state = _make_state()
        _build(state, StructureType.DECOY, 12, 10)
        attacker = _add_attacker(state, 12, 9)
        _make_movement().process_enemy_turn(state)
        assert attacker.pos == Vector2(12, 10)

    def test_marked_attacker_does_not_move(self):
        state = _make_state()
        attacker = _add_attacker(state, 10, 0)
        attacker.marked_for_death = True
        result = _make_movement().process_enemy_turn(state)
        assert attacker.pos == Vector2(10, 0)
        assert result.moved_count == 0

    def test_stays_in_bounds(self):
        state = _make_state()
        attacker = _add_attacker(state, 0, 0)
        movement = _make_movement()
        for turn in range(1, 30):
            state.turn = turn
            movement.process_enemy_turn(state)
            if attacker not in state.attackers:
                break
            assert state.grid.in_bounds(attacker.pos)


class TestMines:

    def test_mine_and_attacker_removed_together(self):
        state = _make_state()
        mine = _build(state, StructureType.MINE, 12, 10)
        attacker = _add_attacker(state, 12, 9)
        result = _make_movement().process_enemy_turn(state)

        assert result.mines_triggered == 1
        assert attacker not in state.attackers
        assert mine not in state.structures
        assert state.kills_per_act[1] == 1
        explosions = [e for e in state.events.all() if e.category == EventCategory.MINE_EXPLOSION]
        assert len(explosions) == 1

    def test_spent_mine_does_not_trigger_twice(self):
        state = _make_state()
        _build(state, StructureType.MINE, 12, 10)
        first = _add_attacker(state, 12, 9)
        second = _add_attacker(state, 12, 9)
        result = _make_movement().process_enemy_turn(state)
        assert result.mines_triggered == 1
        assert first not in state.attackers
        assert second.pos == Vector2(12, 10)


class TestBaseArrival:

    def test_base_damage_removes_attacker(self):
        state = _make_state()
        attacker = _add_attacker(state, 12, 11)
        result = _make_movement().process_enemy_turn(state)
        assert result.base_damaged
        assert state.base_health == 2
        assert attacker not in state.attackers

    def test_turn_stops_when_base_falls(self):
        state = _make_state()
        state.base_health = 1
        _add_attacker(state, 12, 11)
        survivor = _add_attacker(state, 13, 11, home=(13, 12))
        _make_movement().process_enemy_turn(state)
        assert state.base_health == 0
        # The turn stops once the base has fallen
        assert survivor.pos == Vector2(13, 11)

    def test_act2_damage_sets_threatened_flag(self):
        state = _make_state(turn=9)
        state.act = 2
        _add_attacker(state, 12, 11)
        _make_movement().process_enemy_turn(state)
        assert state.base_threatened_act2


class TestTargeting:

    def test_distraction_points_at_decoy(self):
        for seed in range(20):
            state = _make_state()
            decoy = _build(state, StructureType.DECOY, 4, 4)
            attacker = _add_attacker(state, 4, 0)
            _make_movement(seed).process_enemy_turn(state)
            if attacker.is_distracted:
                assert attacker.target == decoy.pos
            else:
                assert attacker.target in state.grid.base_corners()

    def test_distraction_is_roughly_half(self):
        distracted = 0
        trials = 200
        for seed in range(trials):
            state = _make_state()
            _build(state, StructureType.DECOY, 4, 4)
            attacker = _add_attacker(state, 4, 0)
            _make_movement(seed).process_enemy_turn(state)
            distracted += attacker.is_distracted
        assert 0.3 * trials < distracted < 0.7 * trials

    def test_every_distraction_is_logged(self):
        state = _make_state()
        _build(state, StructureType.DECOY, 4, 8)
        attacker = _add_attacker(state, 4, 0)
        movement = _make_movement()
        distracted_turns = 0
        for turn in range(1, 6):
            state.turn = turn
            movement.process_enemy_turn(state)
            distracted_turns += attacker.is_distracted
        logged = [e for e in state.events.all() if e.category == EventCategory.ENEMY_DISTRACTED]
        # One entry per successful roll, repeated rolls included
        assert len(logged) == distracted_turns
        assert all(e.actor_id == str(attacker.id) for e in logged)

    def test_repeat_distraction_by_same_decoy_is_logged(self):
        config = SiegeConfig(decoy_distraction_chance=1.0)
        state = GameState(config)
        _build(state, StructureType.DECOY, 4, 8)
        attacker = _add_attacker(state, 4, 0)
        movement = EnemyMovement(config, DeterministicRNG(42))
        for turn in range(1, 4):
            state.turn = turn
            movement.process_enemy_turn(state)
        logged = [e for e in state.events.all() if e.category == EventCategory.ENEMY_DISTRACTED]
        assert [e.turn for e in logged] == [1, 2, 3]
        assert attacker.pos == Vector2(4, 3)


class TestSpawning:

    def test_scheduled_wave(self):
        state = _make_state(turn=1)
        spawned = _make_movement().spawn_for_turn(state)
        assert spawned == 2
        assert len(state.attackers) == 2
        corners = state.grid.base_corners()
        for a in state.attackers:
            assert a.pos.y == 0
            assert 5 <= a.pos.x <= 20
            assert a.home_target in corners
            assert a.target == a.home_target
            assert a.label in ATTACKER_LABELS

    def test_unscheduled_turn(self):
        state = _make_state(turn=2)
        assert _make_movement().spawn_for_turn(state) == 0
        assert state.attackers == []

    def test_act_schedule_is_per_act(self):
        state = _make_state(turn=9)
        assert _make_movement().spawn_for_turn(state) == 0
        state.act = 2
        assert _make_movement().spawn_for_turn(state) == 3

    def test_spawn_deterministic(self):
        a = _make_state()
        b = _make_state()
        _make_movement(5).spawn_for_turn(a)
        _make_movement(5).spawn_for_turn(b)
        assert [(x.pos, x.label, x.home_target) for x in a.attackers] == \
            [(x.pos, x.label, x.home_target) for x in b.attackers]

    def test_ids_unique(self):
        state = _make_state(turn=1)
        movement = _make_movement()
        movement.spawn_for_turn(state)
        state.turn = 3
        movement.spawn_for_turn(state)
        ids = [a.id for a in state.attackers]
        assert len(ids) == len(set(ids)) == 4
