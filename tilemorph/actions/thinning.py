# tilemorph/actions/thinning.py
# Iterative thinning to 1-px skeletons (Zhang-Suen, K3M) and skeleton metrics.
# Dependencies: numpy, scikit-image
#
# Only interior cells are tested, the outermost row/column is never removed.
# Every pass evaluates all candidates on the state before the pass and deletes
# them together.

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Tuple
import logging
import numpy as np
from skimage.measure import label as sklabel

from ..config import D
from ..matrix import ValidationError, as_matrix, foreground, neighbour_counts

logger = logging.getLogger(__name__)

Rule = Callable[[List[np.ndarray], np.ndarray, np.ndarray], np.ndarray]


@dataclass(frozen=True)
class SkeletonMetrics:
    skeleton_pixels: int
    endpoints: int     # exactly 1 neighbour
    junctions: int     # 3 or more neighbours
    branches: int      # reported as the junction count, no segment tracing
    components: int    # 8-connected skeleton pieces

# --- neighbourhood -----------------------------------------------------------

def _interior_neighbours(img: np.ndarray) -> List[np.ndarray]:
    """P2..P9 for every interior cell: N, NE, E, SE, S, SW, W, NW."""
    return [
        img[:-2, 1:-1],  # P2 north
        img[:-2, 2:],    # P3 north-east
        img[1:-1, 2:],   # P4 east
        img[2:, 2:],     # P5 south-east
        img[2:, 1:-1],   # P6 south
        img[2:, :-2],    # P7 south-west
        img[1:-1, :-2],  # P8 west
        img[:-2, :-2],   # P9 north-west
    ]

def _transitions(p: List[np.ndarray]) -> np.ndarray:
    """A(P1): 0->1 transitions walking P2..P9 and back to P2."""
    seq = p + [p[0]]
    a = np.zeros_like(p[0], dtype=np.int32)
    for i in range(8):
        a += (seq[i] == 0) & (seq[i + 1] == 1)
    return a

def _run_pass(img: np.ndarray, rule: Rule) -> bool:
    """Delete every interior pixel matched by rule; return True if any was deleted."""
    if img.shape[0] < 3 or img.shape[1] < 3:
        return False
    p = _interior_neighbours(img)
    b = sum(q.astype(np.int32) for q in p)
    a = _transitions(p)
    kill = (img[1:-1, 1:-1] == 1) & rule(p, b, a)
    if not kill.any():
        return False
    img[1:-1, 1:-1][kill] = 0
    return True

def _thin(matrix, passes: List[Rule], max_iterations: int | None, name: str) -> Tuple[np.ndarray, int]:
    if max_iterations is None:
        max_iterations = D.MAX_ITERATIONS
    if max_iterations < 1:
        raise ValidationError(f"max_iterations must be >= 1, got {max_iterations}")
    img = foreground(as_matrix(matrix))
    iterations = 0
    changed = True
    while changed and iterations < max_iterations:
        changed = False
        for rule in passes:
            if _run_pass(img, rule):
                changed = True
        iterations += 1
    if changed:
        logger.warning("%s stopped at the iteration cap (%d) before converging", name, max_iterations)
    else:
        logger.debug("%s converged after %d iterations", name, iterations)
    return img.astype(np.int64), iterations

# --- Zhang-Suen --------------------------------------------------------------

def _core(b, a):
    return (b >= 2) & (b <= 6) & (a == 1)

def _zs_step1(p, b, a):
    p2, p3, p4, p5, p6, p7, p8, p9 = p
    return _core(b, a) & (p2 * p4 * p6 == 0) & (p4 * p6 * p8 == 0)

def _zs_step2(p, b, a):
    p2, p3, p4, p5, p6, p7, p8, p9 = p
    return _core(b, a) & (p2 * p4 * p8 == 0) & (p2 * p6 * p8 == 0)

def zhang_suen_with_iterations(matrix, max_iterations: int | None = None) -> Tuple[np.ndarray, int]:
    """
    Zhang-Suen thinning. One iteration = two sub-passes; repeats until an
    iteration removes nothing or max_iterations is reached.
    Returns (skeleton, iterations).
    """
    return _thin(matrix, [_zs_step1, _zs_step2], max_iterations, "Zhang-Suen")

def zhang_suen_thinning(matrix, max_iterations: int | None = None) -> np.ndarray:
    skeleton, _ = zhang_suen_with_iterations(matrix, max_iterations)
    return skeleton

# --- K3M ---------------------------------------------------------------------

def _k3m_phase0(p, b, a):
    # single-neighbour pixels are ends of lines and stay
    return (b != 1) & _core(b, a)

def _k3m_north(p, b, a):
    p2, p3, p4, p5, p6, p7, p8, p9 = p
    return _core(b, a) & (p2 == 0) & ((p4 == 0) | (p6 == 0) | (p8 == 0))

def _k3m_east(p, b, a):
    p2, p3, p4, p5, p6, p7, p8, p9 = p
    return _core(b, a) & (p4 == 0) & ((p2 == 0) | (p6 == 0) | (p8 == 0))

def _k3m_south(p, b, a):
    p2, p3, p4, p5, p6, p7, p8, p9 = p
    return _core(b, a) & (p6 == 0) & ((p2 == 0) | (p4 == 0) | (p8 == 0))

def _k3m_west(p, b, a):
    p2, p3, p4, p5, p6, p7, p8, p9 = p
    return _core(b, a) & (p8 == 0) & ((p2 == 0) | (p4 == 0) | (p6 == 0))

def _k3m_diagonal(p, b, a):
    p2, p3, p4, p5, p6, p7, p8, p9 = p
    return _core(b, a) & (p2 * p4 * p6 == 0) & (p4 * p6 * p8 == 0)

K3M_PHASES: List[Rule] = [_k3m_phase0, _k3m_north, _k3m_east, _k3m_south, _k3m_west, _k3m_diagonal]

def k3m_with_iterations(matrix, max_iterations: int | None = None) -> Tuple[np.ndarray, int]:
    """
    K3M-style thinning. One iteration = phase 0, the four directional border
    phases (N, E, S, W) and a diagonal clean-up; each phase sees the result of
    the previous one. Returns (skeleton, iterations).
    """
    return _thin(matrix, K3M_PHASES, max_iterations, "K3M")

def k3m_thinning(matrix, max_iterations: int | None = None) -> np.ndarray:
    skeleton, _ = k3m_with_iterations(matrix, max_iterations)
    return skeleton

# --- metrics -----------------------------------------------------------------

def calculate_skeleton_metrics(skeleton) -> SkeletonMetrics:
    """Pixel, endpoint (deg 1) and junction (deg >= 3) counts of a skeleton."""
    fg = foreground(as_matrix(skeleton, "skeleton"))
    on = fg.astype(bool)
    deg = neighbour_counts(fg)
    junctions = int(np.sum(on & (deg >= 3)))
    comps = int(sklabel(on, connectivity=2).max()) if on.any() else 0
    return SkeletonMetrics(
        skeleton_pixels=int(on.sum()),
        endpoints=int(np.sum(on & (deg == 1))),
        junctions=junctions,
        branches=junctions,
        components=comps,
    )
