"""Seeded, stateless randomness for the siege.

A draw is keyed by (domain, key, turn): the domain says what is being
decided (spawn column, corner, label, decoy roll, placement jitter), the
key says for whom (attacker id, commander plan slot) and the turn says
when. Two sieges with the same seed and the same commands make the same
draws no matter how the turns were paced, paused or fast-forwarded.
"""

from __future__ import annotations

import struct
from typing import Sequence, TypeVar

import xxhash

from siege.core.enums import Domain

T = TypeVar("T")

# seed, domain, key, turn
_PACK = struct.Struct("<qiqi")
_SPAN = float(1 << 64)


class DeterministicRNG:
    """Draws are pure functions of the seed and the draw key."""

    __slots__ = ("_seed",)

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _unit(self, domain: Domain, key: int, turn: int) -> float:
        digest = xxhash.xxh64_intdigest(_PACK.pack(self._seed, domain.value, key, turn))
        return digest / _SPAN

    def uniform(self, domain: Domain, key: int, turn: int, low: float = 0.0, high: float = 1.0) -> float:
        """Float in [low, high)."""
        return low + self._unit(domain, key, turn) * (high - low)

    def randint(self, domain: Domain, key: int, turn: int, low: int, high: int) -> int:
        """Integer in [low, high], both ends included."""
        return low + int(self._unit(domain, key, turn) * (high - low + 1))

    def chance(self, domain: Domain, key: int, turn: int, probability: float = 0.5) -> bool:
        return self._unit(domain, key, turn) < probability

    def pick(self, domain: Domain, key: int, turn: int, items: Sequence[T]) -> T:
        if not items:
            raise ValueError(f"cannot pick from an empty sequence ({domain.name})")
        return items[self.randint(domain, key, turn, 0, len(items) - 1)]
