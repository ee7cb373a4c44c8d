# topology.py
# connected fragments (8-connected), labelled matrices, holes, 4-connected canvases

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import List, Tuple
import logging
import numpy as np
from skimage.measure import label as sklabel

from .matrix import NBRS4, NBRS8, Point, ValidationError, as_matrix, foreground

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fragment:
    id: int                       # 1-based, raster-scan discovery order
    pixel_count: int
    pixels: Tuple[Point, ...]     # (x,y) in flood-fill order
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    def __str__(self) -> str:
        return (f"Fragment {self.id}: {self.pixel_count} pixels, "
                f"BBox: ({self.min_x},{self.min_y})-({self.max_x},{self.max_y})")


@dataclass(frozen=True)
class FragmentStatistics:
    fragment_count: int = 0
    average_size: float = 0.0
    largest_size: int = 0
    smallest_size: int = 0
    total_pixels: int = 0

# --- flood fill --------------------------------------------------------------

def _flood_fill(fg: np.ndarray, visited: np.ndarray, x0: int, y0: int) -> List[Point]:
    """Explicit-stack 8-connected fill from (x0,y0); marks visited, returns (x,y) pixels."""
    H, W = fg.shape
    stack = [(x0, y0)]
    pixels: List[Point] = []
    while stack:
        x, y = stack.pop()
        if x < 0 or x >= W or y < 0 or y >= H or visited[y, x] or not fg[y, x]:
            continue
        visited[y, x] = True
        pixels.append((x, y))
        for dy, dx in NBRS8:
            stack.append((x + dx, y + dy))
    return pixels

def _components(matrix):
    """Yield pixel lists of each 8-connected foreground component in raster order."""
    fg = foreground(as_matrix(matrix))
    H, W = fg.shape
    visited = np.zeros((H, W), dtype=bool)
    for y in range(H):
        for x in range(W):
            if fg[y, x] and not visited[y, x]:
                yield _flood_fill(fg, visited, x, y)

# --- public API --------------------------------------------------------------

def detect_fragments(matrix) -> List[Fragment]:
    """Every 8-connected component of 1-cells, numbered from 1 in raster order."""
    fragments: List[Fragment] = []
    for fid, pixels in enumerate(_components(matrix), start=1):
        xs = [p[0] for p in pixels]; ys = [p[1] for p in pixels]
        fragments.append(Fragment(
            id=fid, pixel_count=len(pixels), pixels=tuple(pixels),
            min_x=min(xs), max_x=max(xs), min_y=min(ys), max_y=max(ys),
        ))
    logger.debug("detected %d fragments", len(fragments))
    return fragments

def create_labeled_matrix(matrix) -> np.ndarray:
    """Same traversal as detect_fragments, writing fragment ids into a new matrix."""
    m = as_matrix(matrix)
    labeled = np.zeros(m.shape, dtype=np.int64)
    for fid, pixels in enumerate(_components(m), start=1):
        for x, y in pixels:
            labeled[y, x] = fid
    return labeled

def calculate_statistics(fragments) -> FragmentStatistics:
    if fragments is None:
        raise ValidationError("fragments must not be None")
    if not fragments:
        return FragmentStatistics()
    sizes = [f.pixel_count for f in fragments]
    return FragmentStatistics(
        fragment_count=len(sizes),
        average_size=sum(sizes) / len(sizes),
        largest_size=max(sizes),
        smallest_size=min(sizes),
        total_pixels=sum(sizes),
    )

def count_holes(matrix) -> int:
    """Background regions fully enclosed by foreground (not reachable from the border)."""
    fg = foreground(as_matrix(matrix)).astype(bool)
    labels = sklabel(~np.pad(fg, 2, constant_values=False), connectivity=2)
    border = set(np.unique(np.r_[labels[0,:], labels[-1,:], labels[:,0], labels[:,-1]])); border.discard(0)
    all_ids = set(np.unique(labels)); all_ids.discard(0)
    return len([i for i in all_ids if i not in border])

# --- canvases: 4-connected filled / empty regions ----------------------------

@dataclass(frozen=True)
class Canvas:
    id: int
    cells: Tuple[Point, ...]      # (x,y) in BFS order
    filled: bool

    @property
    def size(self) -> int:
        return len(self.cells)

    def bounding_box(self) -> Tuple[int, int, int, int]:
        """(min_x, max_x, min_y, max_y); zeros for an empty canvas."""
        if not self.cells:
            return (0, 0, 0, 0)
        xs = [c[0] for c in self.cells]; ys = [c[1] for c in self.cells]
        return (min(xs), max(xs), min(ys), max(ys))

    def __str__(self) -> str:
        return f"Canvas #{self.id}: {self.size} cells ({'Filled' if self.filled else 'Empty'})"

def detect_canvases(matrix, filled: bool = True) -> List[Canvas]:
    """4-connected regions of filled (==1) cells, or of empty cells when filled=False."""
    fg = foreground(as_matrix(matrix)).astype(bool)
    target = fg if filled else ~fg
    H, W = target.shape
    visited = np.zeros((H, W), dtype=bool)
    canvases: List[Canvas] = []
    for y in range(H):
        for x in range(W):
            if visited[y, x] or not target[y, x]:
                continue
            q = deque([(x, y)]); visited[y, x] = True
            cells: List[Point] = []
            while q:
                cx, cy = q.popleft()
                cells.append((cx, cy))
                for dy, dx in NBRS4:
                    nx, ny = cx + dx, cy + dy
                    if 0 <= ny < H and 0 <= nx < W and target[ny, nx] and not visited[ny, nx]:
                        visited[ny, nx] = True; q.append((nx, ny))
            canvases.append(Canvas(id=len(canvases) + 1, cells=tuple(cells), filled=filled))
    return canvases

def canvas_summary(canvases: List[Canvas]) -> str:
    if not canvases:
        return "No canvases detected"
    filled = [c for c in canvases if c.filled]
    empty = [c for c in canvases if not c.filled]
    largest = max(canvases, key=lambda c: c.size)
    smallest = min(canvases, key=lambda c: c.size)
    return "\n".join([
        f"Total Canvases: {len(canvases)}",
        f"  Filled Regions: {len(filled)} ({sum(c.size for c in filled)} cells)",
        f"  Empty Regions: {len(empty)} ({sum(c.size for c in empty)} cells)",
        "",
        f"Largest: Canvas #{largest.id} ({largest.size} cells)",
        f"Smallest: Canvas #{smallest.id} ({smallest.size} cells)",
    ])
