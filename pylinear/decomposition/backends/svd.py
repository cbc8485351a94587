"""
Singular value decomposition kernel.

LINPACK's dsvdc as adapted by JAMA: Householder bidiagonalization of an
m x n array (m >= n), then implicitly shifted QR sweeps on the bidiagonal
(Golub and Kahan). Each pass classifies the trailing block:

    case 1   s[p-1] and e[k-1] negligible, k < p: deflate s[p-1]
    case 2   s[k] negligible, k < p: split at k
    case 3   e[k-1] negligible, s[k..p-1] not: one QR sweep
    case 4   e[p-2] negligible: s[p-1] converged, made non-negative and
             moved into descending order

Negligibility is relative to the neighbouring diagonal entries plus an
underflow guard of 2**-966.
"""

from dataclasses import dataclass
import math
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import ConvergenceError
from pylinear.core.compute.precision import EPSILON_64, TINY
from pylinear.core.compute.tolerances import MAX_SWEEPS_PER_VALUE

FloatArray = NDArray[np.floating[Any]]


@dataclass(frozen=True)
class SVDFactors:
    """
    Economy factors A = U diag(s) V'.

    Attributes:
        u: m x n, orthonormal columns
        s: Singular values, descending and non-negative (length n)
        v: n x n orthogonal
        sweeps: QR sweeps performed
    """
    u: FloatArray
    s: FloatArray
    v: FloatArray
    sweeps: int


def _rotate(mat: FloatArray, j: int, k: int, cs: float, sn: float) -> None:
    """Columns (j, k) <- (cs*j + sn*k, -sn*j + cs*k)."""
    left = mat[:, j].copy()
    mat[:, j] = cs * left + sn * mat[:, k]
    mat[:, k] = -sn * left + cs * mat[:, k]


def _bidiagonalize(a: FloatArray) -> tuple[FloatArray, FloatArray, FloatArray, FloatArray, int, int]:
    """Reduce a to bidiagonal form; returns (s, e, u, v, nct, nrt)."""
    m, n = a.shape
    s = np.zeros(n, dtype=np.float64)
    e = np.zeros(n, dtype=np.float64)
    u = np.zeros((m, n), dtype=np.float64)
    v = np.zeros((n, n), dtype=np.float64)
    work = np.zeros(m, dtype=np.float64)

    nct = min(m - 1, n)
    nrt = max(0, n - 2)
    for k in range(max(nct, nrt)):
        if k < nct:
            # Column transformation; the k-th diagonal goes to s[k]
            nrm = 0.0
            for i in range(k, m):
                nrm = math.hypot(nrm, a[i, k])
            if nrm != 0.0:
                if a[k, k] < 0.0:
                    nrm = -nrm
                a[k:, k] /= nrm
                a[k, k] += 1.0
            s[k] = -nrm

        if k < nct and s[k] != 0.0:
            col = a[k:, k]
            t = -(col @ a[k:, k + 1:]) / a[k, k]
            a[k:, k + 1:] += np.outer(col, t)
        # Row k of a feeds the row transformation
        e[k + 1:] = a[k, k + 1:]

        if k < nct:
            u[k:, k] = a[k:, k]

        if k < nrt:
            # Row transformation; the k-th superdiagonal goes to e[k]
            nrm = 0.0
            for i in range(k + 1, n):
                nrm = math.hypot(nrm, e[i])
            if nrm != 0.0:
                if e[k + 1] < 0.0:
                    nrm = -nrm
                e[k + 1:] /= nrm
                e[k + 1] += 1.0
            e[k] = -nrm
            if k + 1 < m and e[k] != 0.0:
                work[k + 1:] = a[k + 1:, k + 1:] @ e[k + 1:]
                a[k + 1:, k + 1:] += np.outer(work[k + 1:], -e[k + 1:] / e[k + 1])
            v[k + 1:, k] = e[k + 1:]

    # Final bidiagonal of order p = n
    p = n
    if nct < n:
        s[nct] = a[nct, nct]
    if m < p:
        s[p - 1] = 0.0
    if nrt + 1 < p:
        e[nrt] = a[nrt, p - 1]
    e[p - 1] = 0.0

    # Generate U
    for j in range(nct, n):
        u[:, j] = 0.0
        u[j, j] = 1.0
    for k in range(nct - 1, -1, -1):
        if s[k] != 0.0:
            col = u[k:, k]
            t = -(col @ u[k:, k + 1:]) / u[k, k]
            u[k:, k + 1:] += np.outer(col, t)
            u[k:, k] = -u[k:, k]
            u[k, k] += 1.0
            u[:max(k - 1, 0), k] = 0.0
        else:
            u[:, k] = 0.0
            u[k, k] = 1.0

    # Generate V
    for k in range(n - 1, -1, -1):
        if k < nrt and e[k] != 0.0:
            col = v[k + 1:, k]
            t = -(col @ v[k + 1:, k + 1:]) / v[k + 1, k]
            v[k + 1:, k + 1:] += np.outer(col, t)
        v[:, k] = 0.0
        v[k, k] = 1.0

    return s, e, u, v, nct, nrt


def svd_golub_kahan(a: FloatArray, max_sweeps: int = MAX_SWEEPS_PER_VALUE) -> SVDFactors:
    """
    Economy SVD of an m x n array with m >= n (a is not modified).

    Args:
        a: Input array
        max_sweeps: Passes allowed per singular value before giving up

    Raises:
        ConvergenceError: If a singular value does not converge
    """
    a = np.array(a, dtype=np.float64)
    m, n = a.shape
    if n == 0:
        return SVDFactors(
            u=np.zeros((m, 0)), s=np.zeros(0), v=np.zeros((0, 0)), sweeps=0)

    s, e, u, v, _, _ = _bidiagonalize(a)
    eps = EPSILON_64

    p = n
    pp = p - 1
    passes = 0
    total = 0
    while p > 0:
        # Find k: the largest index below p-1 whose e[k] is negligible
        k = p - 2
        while k >= 0:
            threshold = TINY + eps * (abs(s[k]) + abs(s[k + 1]))
            # Written as not(>) so a NaN ends the scan
            if not abs(e[k]) > threshold:
                e[k] = 0.0
                break
            k -= 1

        if k == p - 2:
            kase = 4
        else:
            ks = p - 1
            while ks > k:
                t = (abs(e[ks]) if ks != p else 0.0) + (abs(e[ks - 1]) if ks != k + 1 else 0.0)
                if abs(s[ks]) <= TINY + eps * t:
                    s[ks] = 0.0
                    break
                ks -= 1
            if ks == k:
                kase = 3
            elif ks == p - 1:
                kase = 1
            else:
                kase = 2
                k = ks
        k += 1

        if kase != 4:
            if passes >= max_sweeps:
                raise ConvergenceError(
                    f"svd: singular value {p - 1} did not converge in {max_sweeps} sweeps",
                    iterations=passes,
                    final_change=float(abs(e[p - 2])) if p >= 2 else None,
                    reason='max_iterations',
                    threshold=TINY + eps * float(abs(s[p - 2]) + abs(s[p - 1])) if p >= 2 else None,
                )
            passes += 1
            total += 1

        if kase == 1:
            # Deflate negligible s[p-1]
            f = e[p - 2]
            e[p - 2] = 0.0
            for j in range(p - 2, k - 1, -1):
                t = math.hypot(s[j], f)
                cs = s[j] / t
                sn = f / t
                s[j] = t
                if j != k:
                    f = -sn * e[j - 1]
                    e[j - 1] = cs * e[j - 1]
                _rotate(v, j, p - 1, cs, sn)

        elif kase == 2:
            # Split at negligible s[k-1]
            f = e[k - 1]
            e[k - 1] = 0.0
            for j in range(k, p):
                t = math.hypot(s[j], f)
                cs = s[j] / t
                sn = f / t
                s[j] = t
                f = -sn * e[j]
                e[j] = cs * e[j]
                _rotate(u, j, k - 1, cs, sn)

        elif kase == 3:
            # Shift from the trailing 2 x 2 block
            scale = max(abs(s[p - 1]), abs(s[p - 2]), abs(e[p - 2]), abs(s[k]), abs(e[k]))
            sp = s[p - 1] / scale
            spm1 = s[p - 2] / scale
            epm1 = e[p - 2] / scale
            sk = s[k] / scale
            ek = e[k] / scale
            b = ((spm1 + sp) * (spm1 - sp) + epm1 * epm1) / 2.0
            c = (sp * epm1) * (sp * epm1)
            shift = 0.0
            if b != 0.0 or c != 0.0:
                shift = math.sqrt(b * b + c)
                if b < 0.0:
                    shift = -shift
                shift = c / (b + shift)
            f = (sk + sp) * (sk - sp) + shift
            g = sk * ek

            # Chase zeros
            for j in range(k, p - 1):
                t = math.hypot(f, g)
                cs = f / t
                sn = g / t
                if j != k:
                    e[j - 1] = t
                f = cs * s[j] + sn * e[j]
                e[j] = cs * e[j] - sn * s[j]
                g = sn * s[j + 1]
                s[j + 1] = cs * s[j + 1]
                _rotate(v, j, j + 1, cs, sn)

                t = math.hypot(f, g)
                cs = f / t
                sn = g / t
                s[j] = t
                f = cs * e[j] + sn * s[j + 1]
                s[j + 1] = -sn * e[j] + cs * s[j + 1]
                g = sn * e[j + 1]
                e[j + 1] = cs * e[j + 1]
                if j < m - 1:
                    _rotate(u, j, j + 1, cs, sn)
            e[p - 2] = f

        else:
            # Convergence: make s[k] non-negative, then bubble it into place
            if s[k] <= 0.0:
                s[k] = -s[k] if s[k] < 0.0 else 0.0
                v[:pp + 1, k] = -v[:pp + 1, k]
            while k < pp:
                if s[k] >= s[k + 1]:
                    break
                s[k], s[k + 1] = s[k + 1], s[k]
                if k < n - 1:
                    v[:, [k, k + 1]] = v[:, [k + 1, k]]
                if k < m - 1:
                    u[:, [k, k + 1]] = u[:, [k + 1, k]]
                k += 1
            passes = 0
            p -= 1

    return SVDFactors(u=u, s=s, v=v, sweeps=total)


def rank_tolerance(s: FloatArray, n_rows: int, n_cols: int) -> float:
    """max(rows, cols) * s[0] * eps."""
    if s.shape[0] == 0:
        return 0.0
    return max(n_rows, n_cols) * float(s[0]) * EPSILON_64


def numerical_rank(s: FloatArray, n_rows: int, n_cols: int) -> int:
    """Number of singular values above rank_tolerance."""
    return int(np.sum(s > rank_tolerance(s, n_rows, n_cols)))
