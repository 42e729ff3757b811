"""Tests for the seeded siege RNG."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from siege.core.enums import Domain
from siege.systems.rng import DeterministicRNG


class TestDeterministicRNG:

    def test_same_key_same_draw(self):
        a, b = DeterministicRNG(42), DeterministicRNG(42)
        assert a.uniform(Domain.SPAWN, 3, 7) == b.uniform(Domain.SPAWN, 3, 7)
        assert a.randint(Domain.SPAWN, 3, 7, 1, 24) == b.randint(Domain.SPAWN, 3, 7, 1, 24)

    def test_domains_are_separate(self):
        rng = DeterministicRNG(42)
        draws = {rng.uniform(d, 1, 1) for d in Domain}
        assert len(draws) == len(Domain)

    def test_seed_changes_draws(self):
        draws = [DeterministicRNG(seed).uniform(Domain.TARGET, 0, 1) for seed in range(5)]
        assert len(set(draws)) == 5

    def test_uniform_bounds(self):
        rng = DeterministicRNG(7)
        for turn in range(200):
            assert 5.0 <= rng.uniform(Domain.PLACEMENT, 0, turn, 5.0, 10.0) < 10.0

    def test_randint_covers_inclusive_range(self):
        rng = DeterministicRNG(7)
        seen = {rng.randint(Domain.SPAWN, key, 1, 1, 3) for key in range(300)}
        assert seen == {1, 2, 3}

    def test_chance_extremes(self):
        rng = DeterministicRNG(7)
        assert all(rng.chance(Domain.DISTRACTION, k, 1, 1.0) for k in range(50))
        assert not any(rng.chance(Domain.DISTRACTION, k, 1, 0.0) for k in range(50))

    def test_pick(self):
        rng = DeterministicRNG(7)
        items = ("north", "south", "east", "west")
        assert rng.pick(Domain.LABEL, 2, 3, items) in items
        with pytest.raises(ValueError):
            rng.pick(Domain.LABEL, 2, 3, ())
