# tilemorph/actions/junctions.py
# Crossing-number classification of skeleton pixels and branch statistics.
# Dependencies: numpy

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List
import logging
import math
import numpy as np

from ..matrix import OutOfBoundsError, Point, as_matrix, foreground, in_bounds, neighbour_counts

logger = logging.getLogger(__name__)


class PointClass(Enum):
    BACKGROUND = "Background"
    ISOLATED = "Isolated"               # 0 neighbours
    ENDPOINT = "Endpoint"               # 1
    REGULAR = "Regular"                 # 2
    BIFURCATION = "Bifurcation"         # 3
    CROSSING = "Crossing"               # 4
    COMPLEX_JUNCTION = "ComplexJunction"  # 5+

def class_for_degree(deg: int) -> PointClass:
    if deg == 0: return PointClass.ISOLATED
    if deg == 1: return PointClass.ENDPOINT
    if deg == 2: return PointClass.REGULAR
    if deg == 3: return PointClass.BIFURCATION
    if deg == 4: return PointClass.CROSSING
    return PointClass.COMPLEX_JUNCTION


@dataclass
class BranchDetection:
    endpoints: List[Point] = field(default_factory=list)        # (x,y), raster order
    bifurcations: List[Point] = field(default_factory=list)
    crossings: List[Point] = field(default_factory=list)
    regular: List[Point] = field(default_factory=list)
    complex_junctions: List[Point] = field(default_factory=list)

    @property
    def endpoint_count(self) -> int: return len(self.endpoints)
    @property
    def bifurcation_count(self) -> int: return len(self.bifurcations)
    @property
    def crossing_count(self) -> int: return len(self.crossings)
    @property
    def regular_count(self) -> int: return len(self.regular)

    @property
    def total_branch_points(self) -> int:
        """Endpoints + bifurcations + crossings."""
        return self.endpoint_count + self.bifurcation_count + self.crossing_count


@dataclass
class BranchAnalysis:
    detection: BranchDetection
    average_endpoint_distance: float      # mean pairwise distance, 0 with < 2 points
    average_bifurcation_distance: float
    branch_complexity: float              # bifurcations / total branch points
    branch_density: float                 # branch points per 100 skeleton pixels
    total_skeleton_pixels: int

    @property
    def endpoint_count(self) -> int: return self.detection.endpoint_count
    @property
    def bifurcation_count(self) -> int: return self.detection.bifurcation_count
    @property
    def crossing_count(self) -> int: return self.detection.crossing_count
    @property
    def total_branch_points(self) -> int: return self.detection.total_branch_points

# --- classification ----------------------------------------------------------

def classify_point(matrix, x: int, y: int) -> PointClass:
    """Class of the pixel at column x, row y from its 8-neighbour count."""
    m = as_matrix(matrix)
    if not in_bounds(m, x, y):
        raise OutOfBoundsError(f"({x},{y}) is outside a {m.shape[1]}x{m.shape[0]} matrix")
    if m[y, x] != 1:
        return PointClass.BACKGROUND
    fg = foreground(m)
    d =int(fg[max(0, y-1):y+2, max(0, x-1):x+2].sum()) - 1
    return class_for_degree(d)

def detect_branches(matrix) -> BranchDetection:
    """Bucket every skeleton pixel by class, scanning rows top to bottom."""
    fg = foreground(as_matrix(matrix))
    deg = neighbour_counts(fg)
    res = BranchDetection()
    buckets = {
        PointClass.ENDPOINT: res.endpoints,
        PointClass.BIFURCATION: res.bifurcations,
        PointClass.CROSSING: res.crossings,
        PointClass.REGULAR: res.regular,
        PointClass.COMPLEX_JUNCTION: res.complex_junctions,
    }
    ys, xs = np.nonzero(fg)
    for y, x in zip(ys.tolist(), xs.tolist()):
        bucket = buckets.get(class_for_degree(int(deg[y, x])))
        if bucket is not None:
            bucket.append((x, y))
    return res

def average_pairwise_distance(points: List[Point]) -> float:
    """Mean Euclidean distance over all unordered pairs; 0 with fewer than two points."""
    n = len(points)
    if n < 2:
        return 0.0
    total = 0.0
    for i in range(n):
        xi, yi = points[i]
        for j in range(i + 1, n):
            total += math.hypot(xi - points[j][0], yi - points[j][1])
    return total / (n * (n - 1) / 2)

def analyze_branch_structure(matrix) -> BranchAnalysis:
    m = as_matrix(matrix)
    det = detect_branches(m)
    total = det.total_branch_points
    pixels = int(foreground(m).sum())
    analysis = BranchAnalysis(
        detection=det,
        average_endpoint_distance=average_pairwise_distance(det.endpoints),
        average_bifurcation_distance=average_pairwise_distance(det.bifurcations),
        branch_complexity=det.bifurcation_count / total if total > 0 else 0.0,
        branch_density=total * 100.0 / pixels if pixels > 0 else 0.0,
        total_skeleton_pixels=pixels,
    )
    logger.debug("branch points: %d endpoints, %d bifurcations, %d crossings",
                 det.endpoint_count, det.bifurcation_count, det.crossing_count)
    return analysis

# --- debug SVG ---------------------------------------------------------------

def _svg_header(size):  # size = (W,H)
    W, H = size
    return [f'<svg xmlns="http://www.w3.org/2000/svg" width="{W}" height="{H}" viewBox="0 0 {W} {H}">']

def _svg_circle(x, y, r=0.45, stroke="#f0f", width=0.1, fill="none"):
    return f'<circle cx="{x + 0.5:.2f}" cy="{y + 0.5:.2f}" r="{r:.2f}" fill="{fill}" stroke="{stroke}" stroke-width="{width}"/>'

def _svg_footer(): return ["</svg>"]

def export_branch_debug(skeleton, detection: BranchDetection, out_path: str) -> str:
    """
    SVG with:
      - skeleton pixels (grey squares),
      - endpoints (green), bifurcations (magenta), crossings (blue), complex junctions (red).
    """
    fg = foreground(as_matrix(skeleton, "skeleton"))
    H, W = fg.shape
    parts = _svg_header((W, H))
    ys, xs = np.nonzero(fg)
    for y, x in zip(ys.tolist(), xs.tolist()):
        parts.append(f'<rect x="{x}" y="{y}" width="1" height="1" fill="#bbb"/>')
    for pts, colour in ((detection.endpoints, "#00aa00"), (detection.bifurcations, "#ff00ff"),
                        (detection.crossings, "#3366ff"), (detection.complex_junctions, "#ff0000")):
        for (x, y) in pts:
            parts.append(_svg_circle(x, y, stroke=colour))
    parts += _svg_footer()
    with open(out_path, "w") as f:
        f.write("\n".join(parts))
    return out_path
