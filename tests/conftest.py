"""Shared fixtures for the chebflow test suite."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add the repository root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def arange_6x4():
    """6x4 array filled with 0, 1, ..., 23 in row-major order."""
    return np.arange(24, dtype=float).reshape(6, 4)


def fdma_test_matrix(n):
    """Dense matrix with non-zero diagonals at offsets -2, 0, 2 and 4."""
    mat = np.zeros((n, n))
    for i in range(n):
        j = i + 1.0
        mat[i, i] = 0.5 * j
        if i > 1:
            mat[i, i - 2] = 10.0 * j
        if i < n - 2:
            mat[i, i + 2] = 1.5 * j
        if i < n - 4:
            mat[i, i + 4] = 2.5 * j
    return mat


@pytest.fixture
def fdma_matrix():
    return fdma_test_matrix
