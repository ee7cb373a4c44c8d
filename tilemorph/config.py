# config.py
# Tunable defaults for every stage, kept in one place so they can be changed
# without touching the algorithms.

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Defaults:
    # Thinning (Zhang-Suen, K3M): upper bound on full iterations
    MAX_ITERATIONS: int = 1000

    # Median filter
    MEDIAN_KERNEL: int = 3

    # Global / local thresholding
    FIXED_THRESHOLD: int = 128
    LOCAL_WINDOW: int = 15
    NIBLACK_K: float = -0.2
    SAUVOLA_K: float = 0.34
    PHANSALKAR_K: float = 0.25
    PHANSALKAR_P: float = 2.0
    PHANSALKAR_Q: float = 10.0
    DYNAMIC_RANGE: float = 128.0   # R in Sauvola / Phansalkar

    # Thinning method used by the pipeline
    THINNING_METHOD: str = "zhang-suen"

D = Defaults()
