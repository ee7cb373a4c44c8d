# binarise.py
# noise reduction & thresholding on integer matrices

from __future__ import annotations
import logging
import numpy as np

from .config import D
from .matrix import ValidationError, as_matrix

logger = logging.getLogger(__name__)

LOCAL_METHODS = ("niblack", "sauvola", "phansalkar")


def _check_window(size, name: str) -> int:
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise ValidationError(f"{name} must be an integer, got {size!r}")
    if size < 1 or size % 2 == 0:
        raise ValidationError(f"{name} must be a positive odd number, got {size}")
    return int(size)

# --- median filter -----------------------------------------------------------

def apply_median_filter(matrix, kernel_size: int | None = None) -> np.ndarray:
    """
    Median of the kernel_size x kernel_size window around every cell.
    The window is clipped to the matrix (no padding), so border cells use fewer
    values; with an even count the lower-middle value is taken.
    """
    if kernel_size is None:
        kernel_size = D.MEDIAN_KERNEL
    m = as_matrix(matrix)
    k = _check_window(kernel_size, "kernel_size")
    H, W = m.shape
    o = k // 2
    out = np.zeros_like(m)
    for y in range(H):
        for x in range(W):
            vals = np.sort(m[max(0, y-o):y+o+1, max(0, x-o):x+o+1], axis=None)
            out[y, x] = vals[vals.size // 2]
    return out

# --- Otsu --------------------------------------------------------------------

def otsu_threshold(matrix) -> int:
    """
    Threshold maximising between-class variance over the histogram [0, max].
    Only a strictly larger variance moves the threshold, so ties keep the lowest
    t; a single-valued matrix never produces a two-sided split and returns 0.
    """
    m = as_matrix(matrix)
    if m.size == 0:
        return 0
    if m.min() < 0:
        raise ValidationError("Otsu thresholding needs non-negative values")
    hist = np.bincount(m.ravel(), minlength=int(m.max()) + 1).astype(np.float64)
    total = m.size
    sum_total = np.dot(np.arange(hist.size), hist)
    sumB = wB = 0.0; var_max = 0.0; thr = 0
    for t in range(hist.size):
        wB += hist[t]
        if wB == 0: continue
        wF = total - wB
        if wF == 0: break
        sumB += t*hist[t]
        mB = sumB / wB;  mF = (sum_total - sumB) / wF
        var_between = wB * wF * (mB - mF) ** 2
        if var_between > var_max: var_max, thr = var_between, t
    return thr

def apply_otsu_binarization(matrix) -> tuple[np.ndarray, int]:
    """Return (binarized, threshold) with value > threshold -> 1."""
    m = as_matrix(matrix)
    thr = otsu_threshold(m)
    logger.debug("otsu threshold %d on %s matrix", thr, m.shape)
    return (m > thr).astype(np.int64), thr

def preprocess(matrix, kernel_size: int | None = None) -> np.ndarray:
    """Median filter followed by Otsu binarization."""
    filtered = apply_median_filter(matrix, kernel_size)
    binarized, _ = apply_otsu_binarization(filtered)
    return binarized

# --- fixed & local thresholds ------------------------------------------------

def apply_fixed_threshold(matrix, threshold: int | None = None) -> np.ndarray:
    if threshold is None:
        threshold = D.FIXED_THRESHOLD
    m = as_matrix(matrix)
    return (m > threshold).astype(np.int64)

def _window_mean_std(m: np.ndarray, window: int) -> tuple[np.ndarray, np.ndarray]:
    """Mean and std of the clipped window around each cell, via integral images."""
    H, W = m.shape
    o = window // 2
    a = m.astype(np.float64)
    ii = np.zeros((H + 1, W + 1)); ii[1:, 1:] = a.cumsum(0).cumsum(1)
    ii2 = np.zeros((H + 1, W + 1)); ii2[1:, 1:] = (a * a).cumsum(0).cumsum(1)
    r0 = np.clip(np.arange(H) - o, 0, H); r1 = np.clip(np.arange(H) + o + 1, 0, H)
    c0 = np.clip(np.arange(W) - o, 0, W); c1 = np.clip(np.arange(W) + o + 1, 0, W)

    def box(t):
        return (t[np.ix_(r1, c1)] - t[np.ix_(r0, c1)]
                - t[np.ix_(r1, c0)] + t[np.ix_(r0, c0)])

    n = np.outer(r1 - r0, c1 - c0).astype(np.float64)
    mean = box(ii) / n
    var = box(ii2) / n - mean ** 2
    return mean, np.sqrt(np.clip(var, 0.0, None))

def apply_local_threshold(matrix, method: str = "sauvola", window: int | None = None,
                          k: float | None = None) -> np.ndarray:
    """
    Niblack / Sauvola / Phansalkar thresholding over a clipped window.
      niblack:    T = mean + k*std
      sauvola:    T = mean * (1 + k*(std/R - 1))
      phansalkar: T = mean * (1 + p*exp(-q*mean/255) + k*(std/R - 1))
    Cells with value > T become 1.
    """
    if method not in LOCAL_METHODS:
        raise ValidationError(f"unknown local threshold method {method!r}; use one of {LOCAL_METHODS}")
    m = as_matrix(matrix)
    window = _check_window(D.LOCAL_WINDOW if window is None else window, "window")
    if m.size == 0:
        return m.copy()
    mean, std = _window_mean_std(m, window)
    R = D.DYNAMIC_RANGE
    if method == "niblack":
        k = D.NIBLACK_K if k is None else k
        T = mean + k * std
    elif method == "sauvola":
        k = D.SAUVOLA_K if k is None else k
        T = mean * (1 + k * (std / R - 1))
    else:
        k = D.PHANSALKAR_K if k is None else k
        T = mean * (1 + D.PHANSALKAR_P * np.exp(-D.PHANSALKAR_Q * mean / 255) + k * (std / R - 1))
    return (m > T).astype(np.int64)
