# morphology.py
# 3x3 binary dilation / erosion; border cells are copied through unchanged

from __future__ import annotations
import numpy as np

from .matrix import as_matrix, foreground


def _window_sums(fg: np.ndarray) -> np.ndarray:
    """Sum of the full 3x3 window around each interior cell."""
    H, W = fg.shape
    s = np.zeros((max(H - 2, 0), max(W - 2, 0)), dtype=np.int32)
    for dy in range(3):
        for dx in range(3):
            s += fg[dy:dy + H - 2, dx:dx + W - 2]
    return s

def dilate(matrix) -> np.ndarray:
    """Interior cell -> 1 if any cell of its 3x3 window is foreground."""
    fg = foreground(as_matrix(matrix)).astype(np.int64)
    out = fg.copy()
    if fg.shape[0] > 2 and fg.shape[1] > 2:
        out[1:-1, 1:-1] = (_window_sums(fg) > 0).astype(np.int64)
    return out

def erode(matrix) -> np.ndarray:
    """Interior cell -> 1 only if its whole 3x3 window is foreground."""
    fg = foreground(as_matrix(matrix)).astype(np.int64)
    out = fg.copy()
    if fg.shape[0] > 2 and fg.shape[1] > 2:
        out[1:-1, 1:-1] = (_window_sums(fg) == 9).astype(np.int64)
    return out

def close(matrix) -> np.ndarray:
    """Dilate then erode, bridging one-cell gaps."""
    return erode(dilate(matrix))
