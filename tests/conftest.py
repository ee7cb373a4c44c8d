"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest


LINE_1X5 = [[1, 1, 1, 1, 1]]

PLUS_5X5 = [
    [0, 0, 1, 0, 0],
    [0, 0, 1, 0, 0],
    [1, 1, 1, 1, 1],
    [0, 0, 1, 0, 0],
    [0, 0, 1, 0, 0],
]

T_SHAPE = [
    [0, 0, 1, 0, 0],
    [0, 0, 1, 0, 0],
    [1, 1, 1, 1, 1],
    [0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0],
]

Y_SHAPE = [
    [1, 0, 1],
    [0, 1, 0],
    [0, 1, 0],
    [0, 1, 0],
]

# low cluster 10-28, high cluster 80-98
GRAY_CLUSTERS = [
    [10, 15, 20, 25],
    [12, 18, 22, 28],
    [80, 85, 90, 95],
    [82, 88, 92, 98],
]

RING_5X5 = [
    [0, 0, 0, 0, 0],
    [0, 1, 1, 1, 0],
    [0, 1, 0, 1, 0],
    [0, 1, 1, 1, 0],
    [0, 0, 0, 0, 0],
]


def padded_block(width: int, height: int, margin: int = 1) -> np.ndarray:
    """All-foreground width x height block surrounded by a zero margin."""
    m = np.zeros((height + 2 * margin, width + 2 * margin), dtype=np.int64)
    m[margin:margin + height, margin:margin + width] = 1
    return m


@pytest.fixture
def line_1x5() -> np.ndarray:
    return np.array(LINE_1X5)


@pytest.fixture
def plus_5x5() -> np.ndarray:
    return np.array(PLUS_5X5)


@pytest.fixture
def t_shape() -> np.ndarray:
    return np.array(T_SHAPE)


@pytest.fixture
def y_shape() -> np.ndarray:
    return np.array(Y_SHAPE)


@pytest.fixture
def gray_clusters() -> np.ndarray:
    return np.array(GRAY_CLUSTERS)


@pytest.fixture
def ring_5x5() -> np.ndarray:
    return np.array(RING_5X5)


@pytest.fixture
def square_3x3() -> np.ndarray:
    return padded_block(3, 3)


@pytest.fixture
def random_binary() -> np.ndarray:
    rng = np.random.default_rng(1234)
    return (rng.random((24, 31)) > 0.55).astype(np.int64)
