"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def square_matrix(rng):
    """Well-conditioned random 6 x 6 matrix."""
    return rng.standard_normal((6, 6)) + 6.0 * np.eye(6)


@pytest.fixture
def tall_matrix(rng):
    """Random 8 x 5 matrix (full column rank with probability 1)."""
    return rng.standard_normal((8, 5))


@pytest.fixture
def spd_matrix(rng):
    """Random symmetric positive definite 5 x 5 matrix."""
    b = rng.standard_normal((5, 5))
    return b @ b.T + 5.0 * np.eye(5)


@pytest.fixture
def symmetric_matrix(rng):
    """Random symmetric (indefinite) 6 x 6 matrix."""
    b = rng.standard_normal((6, 6))
    return (b + b.T) / 2.0


@pytest.fixture
def cholesky_example():
    """Known SPD matrix with an integer Cholesky factor."""
    a = np.array([[4.0, 12.0, -16.0], [12.0, 37.0, -43.0], [-16.0, -43.0, 98.0]])
    l = np.array([[2.0, 0.0, 0.0], [6.0, 1.0, 0.0], [-8.0, 5.0, 3.0]])
    return a, l
