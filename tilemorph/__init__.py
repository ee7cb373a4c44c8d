# tilemorph/__init__.py

__version__ = "0.1.0"

# Shared types & tunables
from .matrix import ValidationError, OutOfBoundsError, Point
from .config import Defaults, D

# Preprocessing
from .binarise import (
    apply_median_filter,
    otsu_threshold,
    apply_otsu_binarization,
    preprocess,
    apply_fixed_threshold,
    apply_local_threshold,
)
from .morphology import dilate, erode, close

# Fragmentation & topology
from .topology import (
    Fragment,
    FragmentStatistics,
    detect_fragments,
    create_labeled_matrix,
    calculate_statistics,
    count_holes,
    Canvas,
    detect_canvases,
    canvas_summary,
)

# Skeletons & branch points
from .actions import (
    SkeletonMetrics,
    zhang_suen_thinning,
    zhang_suen_with_iterations,
    k3m_thinning,
    k3m_with_iterations,
    calculate_skeleton_metrics,
    PointClass,
    BranchDetection,
    BranchAnalysis,
    classify_point,
    detect_branches,
    analyze_branch_structure,
    average_pairwise_distance,
    export_branch_debug,
)

# Aggregation
from .features import GridFeatures, calculate_grid_features, average_center_distance

# Editor boundary, I/O, orchestration
from .workspace import TileGrid, matrix_dimensions, to_working_matrix
from .io_save_load import save_json, to_jsonable
from .pipeline import AnalysisReport, analyse_matrix, analyse_workspace
