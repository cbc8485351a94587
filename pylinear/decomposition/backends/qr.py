"""
Householder QR kernels.

The factorization of an m x n array (m >= n) is stored compactly: column k
of the packed array holds the k-th Householder vector on and below the
diagonal, the strict upper part holds R, and R's diagonal is kept apart
in r_diag. Q and R are formed only on request.
"""

from dataclasses import dataclass
import math
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular


@dataclass(frozen=True)
class QRFactors:
    """
    Packed Householder factors.

    Attributes:
        qr: m x n array of Householder vectors and the strict upper part of R
        r_diag: Diagonal of R (length n)
    """
    qr: NDArray[np.floating[Any]]
    r_diag: NDArray[np.floating[Any]]


def qr_householder(a: NDArray[np.floating[Any]]) -> QRFactors:
    """Householder QR on a copy of a."""
    qr = np.array(a, dtype=np.float64)
    m, n = qr.shape
    r_diag = np.zeros(n, dtype=np.float64)

    for k in range(n):
        # 2-norm of the k-th column below the diagonal, without overflow
        nrm = 0.0
        for i in range(k, m):
            nrm = math.hypot(nrm, qr[i, k])

        if nrm != 0.0:
            if qr[k, k] < 0.0:
                nrm = -nrm
            qr[k:, k] /= nrm
            qr[k, k] += 1.0

            v = qr[k:, k]
            for j in range(k + 1, n):
                s = -np.dot(v, qr[k:, j]) / qr[k, k]
                qr[k:, j] += s * v
        r_diag[k] = -nrm

    return QRFactors(qr=qr, r_diag=r_diag)


def is_full_rank(r_diag: NDArray[np.floating[Any]]) -> bool:
    """True when no diagonal entry of R is exactly zero."""
    return bool(np.all(r_diag != 0.0))


def householder_vectors(qr: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Lower trapezoidal array whose columns are the Householder vectors."""
    return np.tril(qr)


def upper(qr: NDArray[np.floating[Any]], r_diag: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """R (n x n)."""
    n = qr.shape[1]
    r = np.triu(qr[:n, :n], 1)
    r[np.arange(n), np.arange(n)] = r_diag
    return r


def orthogonal(qr: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """Economy Q (m x n), built by applying the reflections to I backwards."""
    m, n = qr.shape
    q = np.zeros((m, n), dtype=np.float64)
    for k in range(n - 1, -1, -1):
        q[k, k] = 1.0
        if qr[k, k] != 0.0:
            v = qr[k:, k]
            s = -(v @ q[k:, k:]) / qr[k, k]
            q[k:, k:] += np.outer(v, s)
    return q


def qr_solve(
    qr: NDArray[np.floating[Any]],
    r_diag: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Least squares solution of A X = B from full-rank factors.

    Computes Q'B one reflection at a time, then solves R X = (Q'B)[:n].
    """
    n = qr.shape[1]
    x = np.array(b, dtype=np.float64)
    for k in range(n):
        v = qr[k:, k]
        s = -(v @ x[k:, :]) / qr[k, k]
        x[k:, :] += np.outer(v, s)
    return solve_triangular(upper(qr, r_diag), x[:n, :], lower=False, check_finite=False)
