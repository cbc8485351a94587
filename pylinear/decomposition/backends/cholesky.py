"""
Cholesky factorization kernel.

Computes the lower factor L of a square matrix row by row. The
factorization never fails: it records whether the input was symmetric
with every pivot strictly positive, and a non-positive pivot contributes
sqrt(max(d, 0)) to the diagonal so the loop can continue.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular


@dataclass(frozen=True)
class CholeskyFactors:
    """
    Attributes:
        l: Lower triangular factor (n x n)
        is_spd: Input was exactly symmetric and every pivot was > 0
        min_pivot: Smallest pivot d seen (inf for an empty matrix)
    """
    l: NDArray[np.floating[Any]]
    is_spd: bool
    min_pivot: float


def cholesky_lower(a: NDArray[np.floating[Any]]) -> CholeskyFactors:
    """Row-oriented Cholesky on a square array."""
    n = a.shape[0]
    l = np.zeros((n, n), dtype=np.float64)
    is_spd = a.shape[0] == a.shape[1]
    min_pivot = float('inf')

    # Division by a zero diagonal yields inf/nan entries; is_spd is already False
    with np.errstate(divide='ignore', invalid='ignore'):
        for j in range(n):
            d = 0.0
            for k in range(j):
                s = (a[j, k] - np.dot(l[k, :k], l[j, :k])) / l[k, k]
                l[j, k] = s
                d += s * s
                is_spd = is_spd and a[k, j] == a[j, k]
            d = a[j, j] - d
            min_pivot = min(min_pivot, float(d))
            is_spd = is_spd and d > 0.0
            l[j, j] = np.sqrt(max(d, 0.0))

    return CholeskyFactors(l=l, is_spd=bool(is_spd), min_pivot=min_pivot)


def cholesky_solve(
    l: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """Solve L L' X = B by forward then backward substitution."""
    y = solve_triangular(l, b, lower=True, check_finite=False)
    return solve_triangular(l, y, lower=True, trans='T', check_finite=False)


def determinant(l: NDArray[np.floating[Any]]) -> float:
    """det(A) = prod(diag(L))**2."""
    return float(np.prod(np.diagonal(l)) ** 2)
