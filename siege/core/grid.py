"""Grid & occupancy model.

Pure functions over a square tile grid with a fixed 2×2 base. Nothing here
mutates state; callers validate with these helpers and then mutate the
structure list themselves.
"""

from __future__ import annotations

from typing import Iterable, Protocol, TypeVar

from siege.core.enums import BuildFailure, StructureType
from siege.core.models import Vector2
from siege.core.structures import STRUCTURE_SPECS

BASE_SIZE = 2


class _Footprinted(Protocol):
    structure_type: StructureType
    pos: Vector2


T = TypeVar("T", bound=_Footprinted)


class Grid:
    """Square tile grid with the base's exclusion zone."""

    __slots__ = ("size", "base")

    def __init__(self, size: int, base: Vector2) -> None:
        self.size = size
        self.base = base

    # -- bounds --

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    # -- base --

    def is_base_xy(self, x: int, y: int) -> bool:
        bx, by = self.base.x, self.base.y
        return bx <= x < bx + BASE_SIZE and by <= y < by + BASE_SIZE

    def is_base(self, pos: Vector2) -> bool:
        return self.is_base_xy(pos.x, pos.y)

    def base_corners(self) -> tuple[Vector2, ...]:
        """The four base tiles, in spawn-assignment order."""
        bx, by = self.base.x, self.base.y
        return (
            Vector2(bx, by),
            Vector2(bx, by + 1),
            Vector2(bx + 1, by),
            Vector2(bx + 1, by + 1),
        )


def footprint(structure_type: StructureType, x: int, y: int) -> list[Vector2]:
    """All tiles covered by a structure whose top-left tile is (x, y)."""
    spec = STRUCTURE_SPECS[structure_type]
    return [
        Vector2(x + dx, y + dy)
        for dx in range(spec.width)
        for dy in range(spec.height)
    ]


def fits_on_grid(grid: Grid, structure_type: StructureType, x: int, y: int) -> bool:
    spec = STRUCTURE_SPECS[structure_type]
    return x >= 0 and y >= 0 and x + spec.width <= grid.size and y + spec.height <= grid.size


def tile_index(items: Iterable[T]) -> dict[tuple[int, int], T]:
    """Map every footprint tile to the structure (or placement) covering it."""
    index: dict[tuple[int, int], T] = {}
    for item in items:
        for tile in footprint(item.structure_type, item.pos.x, item.pos.y):
            index[(tile.x, tile.y)] = item
    return index


def is_occupied(grid: Grid, items: Iterable[_Footprinted], x: int, y: int) -> bool:
    """True if (x, y) is a base tile or lies inside any footprint in *items*."""
    if grid.is_base_xy(x, y):
        return True
    for item in items:
        spec = STRUCTURE_SPECS[item.structure_type]
        px, py = item.pos.x, item.pos.y
        if px <= x < px + spec.width and py <= y < py + spec.height:
            return True
    return False


def placement_problem(
    grid: Grid,
    structure_type: StructureType,
    x: int,
    y: int,
    items: Iterable[_Footprinted],
) -> BuildFailure | None:
    """Return why a footprint cannot go at (x, y), or None if it fits."""
    if not fits_on_grid(grid, structure_type, x, y):
        return BuildFailure.OFF_GRID
    existing = list(items)
    for tile in footprint(structure_type, x, y):
        if is_occupied(grid, existing, tile.x, tile.y):
            return BuildFailure.OCCUPIED
    return None
