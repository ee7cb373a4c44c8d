# workspace.py
# Boundary with the tile editor: any object with width, height and has_tile(x, y)
# can be turned into a working matrix (tile present = 1, empty = 0).

from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Tuple
import numpy as np

from .matrix import Point, ValidationError


@dataclass(frozen=True)
class TileGrid:
    width: int
    height: int
    tiles: FrozenSet[Point] = field(default_factory=frozenset)   # occupied (x,y) cells

    @classmethod
    def from_points(cls, width: int, height: int, points: Iterable[Point]) -> "TileGrid":
        return cls(width, height, frozenset((int(x), int(y)) for x, y in points))

    def has_tile(self, x: int, y: int) -> bool:
        return (x, y) in self.tiles


def matrix_dimensions(workspace) -> Tuple[int, int]:
    """(rows, columns) = (height, width)."""
    if workspace is None:
        raise ValidationError("workspace must not be None")
    return int(workspace.height), int(workspace.width)

def to_working_matrix(workspace) -> np.ndarray:
    """[height][width] matrix, cell (y,x) = 1 when a tile is placed there."""
    rows, cols = matrix_dimensions(workspace)
    m = np.zeros((rows, cols), dtype=np.int64)
    for y in range(rows):
        for x in range(cols):
            if workspace.has_tile(x, y):
                m[y, x] = 1
    return m
