from .thinning import (
    SkeletonMetrics,
    zhang_suen_thinning,
    zhang_suen_with_iterations,
    k3m_thinning,
    k3m_with_iterations,
    calculate_skeleton_metrics,
)

from .junctions import (
    PointClass,
    BranchDetection,
    BranchAnalysis,
    classify_point,
    detect_branches,
    analyze_branch_structure,
    average_pairwise_distance,
    export_branch_debug,
)
