"""
LU factorization kernels with partial pivoting.

Both kernels factor an m x n array (m >= n) as A[piv, :] = L U and pack L
(unit diagonal, not stored) and U into one m x n array:

    gaussian  right-looking elimination, the trailing block is updated
              after each pivot
    crout     left-looking, each column is finished with dot products
              against the columns already computed, then pivoted

The pivot of column k is the first row holding the largest |value| at or
below the diagonal. A zero pivot is left in place; the factorization then
reports itself singular instead of failing.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular


@dataclass(frozen=True)
class LUFactors:
    """
    Packed LU factors.

    Attributes:
        lu: m x n array, strict lower part holds L, upper part holds U
        piv: Row permutation, row i of L U is row piv[i] of A
        pivot_sign: +1 or -1, parity of the permutation
    """
    lu: NDArray[np.floating[Any]]
    piv: NDArray[np.intp]
    pivot_sign: int


def _swap_rows(lu: NDArray, piv: NDArray, p: int, k: int) -> None:
    lu[[p, k], :] = lu[[k, p], :]
    piv[[p, k]] = piv[[k, p]]


def lu_gaussian(a: NDArray[np.floating[Any]]) -> LUFactors:
    """Gaussian elimination with partial pivoting on a copy of a."""
    lu = np.array(a, dtype=np.float64)
    m, n = lu.shape
    piv = np.arange(m, dtype=np.intp)
    sign = 1

    for k in range(n):
        p = k + int(np.argmax(np.abs(lu[k:, k])))
        if p != k:
            _swap_rows(lu, piv, p, k)
            sign = -sign
        pivot = lu[k, k]
        if pivot != 0.0:
            lu[k + 1:, k] /= pivot
            lu[k + 1:, k + 1:] -= np.outer(lu[k + 1:, k], lu[k, k + 1:])

    return LUFactors(lu=lu, piv=piv, pivot_sign=sign)


def lu_crout(a: NDArray[np.floating[Any]]) -> LUFactors:
    """Crout (left-looking, dot product) elimination with partial pivoting."""
    lu = np.array(a, dtype=np.float64)
    m, n = lu.shape
    piv = np.arange(m, dtype=np.intp)
    sign = 1
    col = np.empty(m, dtype=np.float64)

    for j in range(n):
        col[:] = lu[:, j]
        # Rows are finished in order; row i reads entries 0..min(i, j) of
        # the column, which earlier rows have already updated.
        for i in range(m):
            kmax = min(i, j)
            col[i] -= np.dot(lu[i, :kmax], col[:kmax])
            lu[i, j] = col[i]

        p = j + int(np.argmax(np.abs(col[j:])))
        if p != j:
            _swap_rows(lu, piv, p, j)
            sign = -sign

        pivot = lu[j, j]
        if pivot != 0.0:
            lu[j + 1:, j] /= pivot

    return LUFactors(lu=lu, piv=piv, pivot_sign=sign)


def is_non_singular(lu: NDArray[np.floating[Any]]) -> bool:
    """True when no diagonal entry of U is exactly zero."""
    n = lu.shape[1]
    return bool(np.all(np.diagonal(lu)[:n] != 0.0))


def lower(lu: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Unit lower trapezoidal factor (m x n)."""
    m, n = lu.shape
    l = np.tril(lu, -1)
    idx = np.arange(min(m, n))
    l[idx, idx] = 1.0
    return l


def upper(lu: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Upper triangular factor (n x n)."""
    n = lu.shape[1]
    return np.triu(lu[:n, :n])


def determinant(lu: NDArray[np.floating[Any]], pivot_sign: int) -> float:
    """pivot_sign times the product of U's diagonal."""
    return float(pivot_sign * np.prod(np.diagonal(lu)))


def lu_solve(
    lu: NDArray[np.floating[Any]],
    piv: NDArray[np.intp],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A X = B from square packed factors.

    Rows of b are permuted by piv, then a unit lower solve and an upper
    solve run on all right-hand sides at once.
    """
    x = np.array(b[piv, :], dtype=np.float64)
    x = solve_triangular(lu, x, lower=True, unit_diagonal=True, check_finite=False)
    return solve_triangular(lu, x, lower=False, check_finite=False)
