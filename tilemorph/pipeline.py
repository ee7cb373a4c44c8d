# pipeline.py
# Orchestration: run preprocessing, fragmentation, thinning, branch analysis
# and grid aggregation on one matrix and collect the results.

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import logging
import numpy as np

from .config import D
from .matrix import ValidationError, as_matrix, foreground
from .binarise import preprocess
from .topology import (
    Fragment,
    FragmentStatistics,
    calculate_statistics,
    count_holes,
    detect_fragments,
)
from .actions.thinning import (
    SkeletonMetrics,
    calculate_skeleton_metrics,
    k3m_with_iterations,
    zhang_suen_with_iterations,
)
from .actions.junctions import BranchAnalysis, analyze_branch_structure
from .features import GridFeatures, calculate_grid_features
from .workspace import to_working_matrix
from .io_save_load import save_json

logger = logging.getLogger(__name__)

THINNING = {
    "zhang-suen": zhang_suen_with_iterations,
    "k3m": k3m_with_iterations,
}


@dataclass
class AnalysisReport:
    matrix: np.ndarray              # working matrix after optional preprocessing
    fragments: List[Fragment]
    fragment_stats: FragmentStatistics
    holes: int
    method: str
    skeleton: np.ndarray
    iterations: int
    skeleton_metrics: SkeletonMetrics
    branches: BranchAnalysis
    features: GridFeatures

    def summary(self) -> dict:
        """Flat scalar row, handy for tables and JSON dumps."""
        return {
            "method": self.method,
            "fragments": self.fragment_stats.fragment_count,
            "largest_fragment": self.fragment_stats.largest_size,
            "holes": self.holes,
            "iterations": self.iterations,
            "skeleton_pixels": self.skeleton_metrics.skeleton_pixels,
            "endpoints": self.branches.endpoint_count,
            "bifurcations": self.branches.bifurcation_count,
            "crossings": self.branches.crossing_count,
            "branch_density": self.features.branch_density,
            "branch_complexity": self.features.branch_complexity,
            "complexity_score": self.features.complexity_score,
        }


def analyse_matrix(
    matrix,
    *,
    square_count: Optional[int] = None,
    entity_count: int = 0,
    kernel_size: Optional[int] = None,
    method: Optional[str] = None,
    max_iterations: Optional[int] = None,
    out_json: Optional[str] = None,
) -> AnalysisReport:
    """
    Full structural analysis of one matrix:
      - preprocess (median + Otsu) only when kernel_size is given
      - fragments + statistics + holes on the working matrix
      - skeleton (method 'zhang-suen' or 'k3m') + metrics
      - branch analysis on the skeleton, then grid features
    square_count defaults to the number of foreground cells.
    """
    method = method or D.THINNING_METHOD
    if method not in THINNING:
        raise ValidationError(f"unknown thinning method {method!r}; use one of {sorted(THINNING)}")
    m = as_matrix(matrix)
    if kernel_size is not None:
        m = preprocess(m, kernel_size)

    fragments = detect_fragments(m)
    stats = calculate_statistics(fragments)
    holes = count_holes(m)

    skeleton, iterations = THINNING[method](m, max_iterations)
    metrics = calculate_skeleton_metrics(skeleton)
    branches = analyze_branch_structure(skeleton)

    H, W = m.shape
    if square_count is None:
        square_count = int(foreground(m).sum())
    det = branches.detection
    features = calculate_grid_features(
        W, H, square_count, entity_count,
        det.endpoints, det.bifurcations, det.crossings, skeleton,
    )
    report = AnalysisReport(
        matrix=m, fragments=fragments, fragment_stats=stats, holes=holes,
        method=method, skeleton=skeleton, iterations=iterations,
        skeleton_metrics=metrics, branches=branches, features=features,
    )
    logger.info("analysed %dx%d grid: %d fragments, %d skeleton pixels, score %.2f",
                W, H, stats.fragment_count, metrics.skeleton_pixels, features.complexity_score)
    if out_json:
        save_json(out_json, {"summary": report.summary(), "features": features,
                             "fragment_stats": stats, "skeleton_metrics": metrics})
    return report

def analyse_workspace(workspace, **kwargs) -> AnalysisReport:
    """Convert an editor workspace (tile present = 1) and analyse it."""
    return analyse_matrix(to_working_matrix(workspace), **kwargs)
