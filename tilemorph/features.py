# features.py
# Grid-level aggregation: branch counts + grid size -> density, complexity, score

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import math
import numpy as np

from .matrix import Point, as_matrix, foreground


@dataclass
class GridFeatures:
    grid_width: int = 0
    grid_height: int = 0
    total_square_count: int = 0
    total_entity_count: int = 0
    endpoint_count: int = 0
    bifurcation_count: int = 0
    crossing_count: int = 0
    total_branch_points: int = 0
    total_skeleton_pixels: int = 0
    branch_density: float = 0.0               # branch points per 100 skeleton pixels
    branch_complexity: float = 0.0            # (1*E + 2*B + 3*C) / branch points
    average_endpoint_distance: float = 0.0    # to the grid centre
    average_bifurcation_distance: float = 0.0
    # (branch points*10 + squares*2 + density*5) / (width*height)
    complexity_score: float = 0.0

    def report(self) -> str:
        rule = "=" * 42
        return "\n".join([
            "Grid Features Analysis",
            rule,
            f"Workspace Size: {self.grid_width} x {self.grid_height}",
            f"Total Squares: {self.total_square_count}",
            f"Total Entities: {self.total_entity_count}",
            "",
            "Branch Structure:",
            f"  Endpoints: {self.endpoint_count}",
            f"  Bifurcations: {self.bifurcation_count}",
            f"  Crossings: {self.crossing_count}",
            f"  Total Branch Points: {self.total_branch_points}",
            "",
            "Skeleton Properties:",
            f"  Total Skeleton Pixels: {self.total_skeleton_pixels}",
            f"  Branch Density: {self.branch_density:.2f} per 100 pixels",
            f"  Branch Complexity: {self.branch_complexity:.3f}",
            f"  Avg Endpoint Distance: {self.average_endpoint_distance:.2f} pixels",
            f"  Avg Bifurcation Distance: {self.average_bifurcation_distance:.2f} pixels",
            "",
            f"Complexity Score: {self.complexity_score:.2f}",
            rule,
        ])

    def __str__(self) -> str:
        return self.report()


def average_center_distance(points: Optional[List[Point]], width: int, height: int) -> float:
    """Mean distance from (x,y) points to (width/2, height/2); 0 for no points."""
    if not points:
        return 0.0
    cx, cy = width / 2.0, height / 2.0
    return sum(math.hypot(x - cx, y - cy) for x, y in points) / len(points)

def count_skeleton_pixels(skeleton) -> int:
    if skeleton is None:
        return 0
    return int(foreground(as_matrix(skeleton, "skeleton")).sum())

def calculate_grid_features(
    width: int,
    height: int,
    square_count: int,
    entity_count: int,
    endpoints: Optional[List[Point]],
    bifurcations: Optional[List[Point]],
    crossings: Optional[List[Point]],
    skeleton: Optional[np.ndarray],
) -> GridFeatures:
    """
    Combine already-computed branch points with grid size into one record.
    Missing lists / skeleton count as empty; every zero denominator yields 0.
    """
    e = len(endpoints or []); b = len(bifurcations or []); c = len(crossings or [])
    f = GridFeatures(
        grid_width=width,
        grid_height=height,
        total_square_count=square_count,
        total_entity_count=entity_count,
        endpoint_count=e,
        bifurcation_count=b,
        crossing_count=c,
        total_branch_points=e + b + c,
        total_skeleton_pixels=count_skeleton_pixels(skeleton),
    )

    # density and weighted complexity only make sense on a non-empty skeleton
    if f.total_skeleton_pixels > 0:
        f.branch_density = f.total_branch_points * 100.0 / f.total_skeleton_pixels
        if f.total_branch_points > 0:
            f.branch_complexity = (e * 1.0 + b * 2.0 + c * 3.0) / f.total_branch_points

    f.average_endpoint_distance = average_center_distance(endpoints, width, height)
    f.average_bifurcation_distance = average_center_distance(bifurcations, width, height)

    if width > 0 and height > 0:
        f.complexity_score = (f.total_branch_points * 10.0 + square_count * 2.0
                              + f.branch_density * 5.0) / (width * height)
    return f
