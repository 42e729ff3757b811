"""Engine systems: deterministic RNG."""

from siege.systems.rng import DeterministicRNG

__all__ = ["DeterministicRNG"]
