# matrix.py
# shared value types: validation, foreground masks, 8-neighbour counting

from __future__ import annotations
from typing import Tuple
import numpy as np

Point = Tuple[int, int]   # (x, y) = (column, row)

NBRS8 = [(-1,-1),(-1,0),(-1,1),(0,-1),(0,1),(1,-1),(1,0),(1,1)]   # (dy, dx)
NBRS4 = [(-1,0),(1,0),(0,-1),(0,1)]


class ValidationError(ValueError):
    """Bad argument detected before any computation starts."""


class OutOfBoundsError(ValidationError, IndexError):
    """Coordinates outside the matrix."""


def as_matrix(matrix, name: str = "matrix") -> np.ndarray:
    """Validate a 2-D integer matrix and return an int64 copy."""
    if matrix is None:
        raise ValidationError(f"{name} must not be None")
    try:
        raw = np.asarray(matrix)
    except ValueError as e:   # ragged rows
        raise ValidationError(f"{name} must be rectangular: {e}") from e
    if raw.ndim != 2:
        raise ValidationError(f"{name} must be 2-D, got shape {raw.shape}")
    if raw.size and raw.dtype.kind not in "biu":
        raise ValidationError(f"{name} must hold integers, got dtype {raw.dtype}")
    return raw.astype(np.int64)

def foreground(matrix: np.ndarray) -> np.ndarray:
    """uint8 mask, 1 where the cell equals 1; every other value is background."""
    return (matrix == 1).astype(np.uint8)

def neighbour_counts(fg: np.ndarray) -> np.ndarray:
    """Number of foreground 8-neighbours of every cell (outside the matrix counts as 0)."""
    H, W = fg.shape
    padded = np.pad(fg.astype(np.int32), 1, mode='constant', constant_values=0)
    deg = np.zeros((H, W), dtype=np.int32)
    for dy, dx in NBRS8:
        deg += padded[1+dy:1+dy+H, 1+dx:1+dx+W]
    return deg

def in_bounds(matrix: np.ndarray, x: int, y: int) -> bool:
    H, W = matrix.shape
    return 0 <= x < W and 0 <= y < H
