"""
Eigenvalue kernels for real square matrices.

Symmetric input:
    tred2   Householder reduction to tridiagonal form, accumulating the
            orthogonal transformation
    tql2    implicit QL iteration on the tridiagonal matrix; eigenvalues
            are then sorted ascending with their vectors

General input:
    orthes  orthogonal reduction to upper Hessenberg form
    hqr2    shifted double QR iteration to real Schur form, followed by
            back substitution for the eigenvectors; Wilkinson's ad hoc
            shifts are applied at iterations 10 and 30 on one value

After Bowdler, Martin, Reinsch and Wilkinson, Handbook for Automatic
Computation Vol. II, and the EISPACK routines of the same names.

Every kernel works in place on arrays it is given; callers pass copies.
"""

import math
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import ConvergenceError
from pylinear.core.compute.precision import EPSILON_64
from pylinear.core.compute.tolerances import MAX_SWEEPS_PER_VALUE

FloatArray = NDArray[np.floating[Any]]


def cdiv(xr: float, xi: float, yr: float, yi: float) -> tuple[float, float]:
    """Complex division (xr + i xi) / (yr + i yi), scaled to avoid overflow."""
    if abs(yr) > abs(yi):
        r = yi / yr
        d = yr + r * yi
        return (xr + r * xi) / d, (xi - r * xr) / d
    r = yr / yi
    d = yi + r * yr
    return (r * xr + xi) / d, (r * xi - xr) / d


# ═══════════════════════════════════════════════════════════════════════
# Symmetric path
# ═══════════════════════════════════════════════════════════════════════


def tred2(v: FloatArray) -> tuple[FloatArray, FloatArray]:
    """
    Reduce a symmetric matrix to tridiagonal form.

    Args:
        v: n x n symmetric array (n >= 1), overwritten with the
           accumulated orthogonal transformation

    Returns:
        (d, e): diagonal and subdiagonal (e[0] == 0, e[i] couples i-1, i)
    """
    n = v.shape[0]
    d = v[n - 1, :].copy()
    e = np.zeros(n, dtype=np.float64)

    for i in range(n - 1, 0, -1):
        scale = float(np.sum(np.abs(d[:i])))
        h = 0.0
        if scale == 0.0:
            e[i] = d[i - 1]
            d[:i] = v[i - 1, :i]
            v[i, :i] = 0.0
            v[:i, i] = 0.0
        else:
            # Householder vector
            d[:i] /= scale
            h = float(np.dot(d[:i], d[:i]))
            f = d[i - 1]
            g = math.sqrt(h)
            if f > 0:
                g = -g
            e[i] = scale * g
            h = h - f * g
            d[i - 1] = f - g
            e[:i] = 0.0

            # Similarity transformation of the remaining columns
            for j in range(i):
                f = d[j]
                v[j, i] = f
                g = e[j] + v[j, j] * f
                if j + 1 < i:
                    g += np.dot(v[j + 1:i, j], d[j + 1:i])
                    e[j + 1:i] += v[j + 1:i, j] * f
                e[j] = g

            e[:i] /= h
            f = float(np.dot(e[:i], d[:i]))
            hh = f / (h + h)
            e[:i] -= hh * d[:i]
            for j in range(i):
                f = d[j]
                g = e[j]
                v[j:i, j] -= f * e[j:i] + g * d[j:i]
                d[j] = v[i - 1, j]
                v[i, j] = 0.0
        d[i] = h

    # Accumulate transformations
    for i in range(n - 1):
        v[n - 1, i] = v[i, i]
        v[i, i] = 1.0
        h = d[i + 1]
        if h != 0.0:
            d[:i + 1] = v[:i + 1, i + 1] / h
            g = v[:i + 1, i + 1] @ v[:i + 1, :i + 1]
            v[:i + 1, :i + 1] -= np.outer(d[:i + 1], g)
        v[:i + 1, i + 1] = 0.0

    d[:] = v[n - 1, :]
    v[n - 1, :] = 0.0
    v[n - 1, n - 1] = 1.0
    e[0] = 0.0
    return d, e


def tql2(
    d: FloatArray,
    e: FloatArray,
    v: FloatArray,
    max_sweeps: int = MAX_SWEEPS_PER_VALUE,
) -> int:
    """
    Diagonalize a symmetric tridiagonal matrix by implicit QL sweeps.

    On return d holds the eigenvalues in ascending order and the columns
    of v the matching eigenvectors.

    Args:
        d: Diagonal, overwritten with the eigenvalues
        e: Subdiagonal as returned by tred2, destroyed
        v: Transformation from tred2, overwritten with the eigenvectors
        max_sweeps: Sweeps allowed per eigenvalue

    Returns:
        Total number of sweeps performed

    Raises:
        ConvergenceError: If an eigenvalue does not deflate in max_sweeps
    """
    n = d.shape[0]
    e[:n - 1] = e[1:]
    e[n - 1] = 0.0

    f = 0.0
    tst1 = 0.0
    eps = EPSILON_64
    total = 0
    for l in range(n):
        # Find a negligible subdiagonal element
        tst1 = max(tst1, abs(d[l]) + abs(e[l]))
        m = l
        while m < n:
            if abs(e[m]) <= eps * tst1:
                break
            m += 1

        if m > l:
            sweeps = 0
            while True:
                if sweeps >= max_sweeps:
                    raise ConvergenceError(
                        f"tql2: eigenvalue {l} did not converge in {max_sweeps} sweeps",
                        iterations=sweeps,
                        final_change=float(abs(e[l])),
                        reason='max_iterations',
                        threshold=eps * tst1,
                    )
                sweeps += 1

                # Implicit shift
                g = d[l]
                p = (d[l + 1] - g) / (2.0 * e[l])
                r = math.hypot(p, 1.0)
                if p < 0:
                    r = -r
                d[l] = e[l] / (p + r)
                d[l + 1] = e[l] * (p + r)
                dl1 = d[l + 1]
                h = g - d[l]
                d[l + 2:] -= h
                f = f + h

                # Implicit QL transformation
                p = d[m]
                c = c2 = c3 = 1.0
                el1 = e[l + 1]
                s = s2 = 0.0
                for i in range(m - 1, l - 1, -1):
                    c3 = c2
                    c2 = c
                    s2 = s
                    g = c * e[i]
                    h = c * p
                    r = math.hypot(p, e[i])
                    e[i + 1] = s * r
                    s = e[i] / r
                    c = p / r
                    p = c * d[i] - s * g
                    d[i + 1] = h + s * (c * g + s * d[i])

                    right = v[:, i + 1].copy()
                    v[:, i + 1] = s * v[:, i] + c * right
                    v[:, i] = c * v[:, i] - s * right

                p = -s * s2 * c3 * el1 * e[l] / dl1
                e[l] = s * p
                d[l] = c * p
                if not abs(e[l]) > eps * tst1:
                    break
            total += sweeps
        d[l] = d[l] + f
        e[l] = 0.0

    # Selection sort, ascending, moving the vectors along
    for i in range(n - 1):
        k = i + int(np.argmin(d[i:]))
        if k != i:
            d[i], d[k] = d[k], d[i]
            v[:, [i, k]] = v[:, [k, i]]
    return total


# ═══════════════════════════════════════════════════════════════════════
# General path
# ═══════════════════════════════════════════════════════════════════════


def orthes(h: FloatArray) -> FloatArray:
    """
    Reduce a square matrix to upper Hessenberg form in place.

    Returns:
        The accumulated orthogonal transformation V with A = V H V'
    """
    n = h.shape[0]
    low = 0
    high = n - 1
    ort = np.zeros(n, dtype=np.float64)

    for m in range(low + 1, high):
        scale = float(np.sum(np.abs(h[m:high + 1, m - 1])))
        if scale != 0.0:
            # Householder transformation
            ort[m:high + 1] = h[m:high + 1, m - 1] / scale
            hh = float(np.dot(ort[m:high + 1], ort[m:high + 1]))
            g = math.sqrt(hh)
            if ort[m] > 0:
                g = -g
            hh = hh - ort[m] * g
            ort[m] = ort[m] - g

            # H = (I - u u'/h) H (I - u u'/h)
            u = ort[m:high + 1]
            f = (u @ h[m:high + 1, m:]) / hh
            h[m:high + 1, m:] -= np.outer(u, f)
            f = (h[:high + 1, m:high + 1] @ u) / hh
            h[:high + 1, m:high + 1] -= np.outer(f, u)

            ort[m] = scale * ort[m]
            h[m, m - 1] = scale * g

    v = np.eye(n, dtype=np.float64)
    for m in range(high - 1, low, -1):
        if h[m, m - 1] != 0.0:
            ort[m + 1:high + 1] = h[m + 1:high + 1, m - 1]
            u = ort[m:high + 1]
            # Double division avoids possible underflow
            g = ((u @ v[m:high + 1, m:high + 1]) / ort[m]) / h[m, m - 1]
            v[m:high + 1, m:high + 1] += np.outer(u, g)
    return v


def hqr2(
    h: FloatArray,
    v: FloatArray,
    max_sweeps: int = MAX_SWEEPS_PER_VALUE,
) -> tuple[FloatArray, FloatArray, int]:
    """
    Real Schur form and eigenvectors of an upper Hessenberg matrix.

    Args:
        h: Hessenberg matrix from orthes, destroyed
        v: Transformation from orthes, overwritten with the eigenvectors
           (a complex pair re +/- i im occupies two columns, re then im)
        max_sweeps: QR sweeps allowed per eigenvalue

    Returns:
        (real, imag, sweeps): eigenvalue parts and total sweeps performed

    Raises:
        ConvergenceError: If an eigenvalue does not deflate in max_sweeps
    """
    nn = h.shape[0]
    n = nn - 1
    low = 0
    high = nn - 1
    eps = EPSILON_64
    exshift = 0.0
    p = q = r = s = z = 0.0
    w = x = y = 0.0
    d = np.zeros(nn, dtype=np.float64)
    e = np.zeros(nn, dtype=np.float64)

    norm = 0.0
    for i in range(nn):
        norm += float(np.sum(np.abs(h[i, max(i - 1, 0):])))

    # Outer loop over eigenvalue index
    sweeps = 0
    total = 0
    while n >= low:
        # Look for a single small subdiagonal element
        l = n
        while l > low:
            s = abs(h[l - 1, l - 1]) + abs(h[l, l])
            if s == 0.0:
                s = norm
            if abs(h[l, l - 1]) < eps * s:
                break
            l -= 1

        if l == n:
            # One root found
            h[n, n] = h[n, n] + exshift
            d[n] = h[n, n]
            e[n] = 0.0
            n -= 1
            sweeps = 0

        elif l == n - 1:
            # Two roots found
            w = h[n, n - 1] * h[n - 1, n]
            p = (h[n - 1, n - 1] - h[n, n]) / 2.0
            q = p * p + w
            z = math.sqrt(abs(q))
            h[n, n] = h[n, n] + exshift
            h[n - 1, n - 1] = h[n - 1, n - 1] + exshift
            x = h[n, n]

            if q >= 0:
                # Real pair
                z = p + z if p >= 0 else p - z
                d[n - 1] = x + z
                d[n] = d[n - 1]
                if z != 0.0:
                    d[n] = x - w / z
                e[n - 1] = 0.0
                e[n] = 0.0
                x = h[n, n - 1]
                s = abs(x) + abs(z)
                p = x / s
                q = z / s
                r = math.sqrt(p * p + q * q)
                p = p / r
                q = q / r

                upper_row = h[n - 1, n - 1:].copy()
                h[n - 1, n - 1:] = q * upper_row + p * h[n, n - 1:]
                h[n, n - 1:] = q * h[n, n - 1:] - p * upper_row

                left = h[:n + 1, n - 1].copy()
                h[:n + 1, n - 1] = q * left + p * h[:n + 1, n]
                h[:n + 1, n] = q * h[:n + 1, n] - p * left

                left = v[low:high + 1, n - 1].copy()
                v[low:high + 1, n - 1] = q * left + p * v[low:high + 1, n]
                v[low:high + 1, n] = q * v[low:high + 1, n] - p * left
            else:
                # Complex pair
                d[n - 1] = x + p
                d[n] = x + p
                e[n - 1] = z
                e[n] = -z
            n -= 2
            sweeps = 0

        else:
            if sweeps >= max_sweeps:
                raise ConvergenceError(
                    f"hqr2: eigenvalue {n} did not converge in {max_sweeps} sweeps",
                    iterations=sweeps,
                    final_change=float(abs(h[n, n - 1])),
                    reason='max_iterations',
                    threshold=eps * float(abs(h[n - 1, n - 1]) + abs(h[n, n])),
                )

            # Form shift
            x = h[n, n]
            y = h[n - 1, n - 1]
            w = h[n, n - 1] * h[n - 1, n]
            diag = np.arange(low, n + 1)

            if sweeps == 10:
                # Wilkinson's original ad hoc shift
                exshift += x
                h[diag, diag] -= x
                s = abs(h[n, n - 1]) + abs(h[n - 1, n - 2])
                x = y = 0.75 * s
                w = -0.4375 * s * s
            elif sweeps == 30:
                # MATLAB's ad hoc shift
                s = (y - x) / 2.0
                s = s * s + w
                if s > 0:
                    s = math.sqrt(s)
                    if y < x:
                        s = -s
                    s = x - w / ((y - x) / 2.0 + s)
                    h[diag, diag] -= s
                    exshift += s
                    x = y = w = 0.964

            sweeps += 1
            total += 1

            # Look for two consecutive small subdiagonal elements
            m = n - 2
            while m >= l:
                z = h[m, m]
                r = x - z
                s = y - z
                p = (r * s - w) / h[m + 1, m] + h[m, m + 1]
                q = h[m + 1, m + 1] - z - r - s
                r = h[m + 2, m + 1]
                s = abs(p) + abs(q) + abs(r)
                p = p / s
                q = q / s
                r = r / s
                if m == l:
                    break
                if abs(h[m, m - 1]) * (abs(q) + abs(r)) < eps * (
                        abs(p) * (abs(h[m - 1, m - 1]) + abs(z) + abs(h[m + 1, m + 1]))):
                    break
                m -= 1

            for i in range(m + 2, n + 1):
                h[i, i - 2] = 0.0
                if i > m + 2:
                    h[i, i - 3] = 0.0

            # Double QR step on rows l:n and columns m:n
            for k in range(m, n):
                notlast = k != n - 1
                if k != m:
                    p = h[k, k - 1]
                    q = h[k + 1, k - 1]
                    r = h[k + 2, k - 1] if notlast else 0.0
                    x = abs(p) + abs(q) + abs(r)
                    if x == 0.0:
                        continue
                    p = p / x
                    q = q / x
                    r = r / x

                s = math.sqrt(p * p + q * q + r * r)
                if p < 0:
                    s = -s
                if s != 0:
                    if k != m:
                        h[k, k - 1] = -s * x
                    elif l != m:
                        h[k, k - 1] = -h[k, k - 1]
                    p = p + s
                    x = p / s
                    y = q / s
                    z = r / s
                    q = q / p
                    r = r / p

                    # Row modification
                    row = h[k, k:] + q * h[k + 1, k:]
                    if notlast:
                        row += r * h[k + 2, k:]
                        h[k + 2, k:] -= row * z
                    h[k, k:] -= row * x
                    h[k + 1, k:] -= row * y

                    # Column modification
                    top = min(n, k + 3) + 1
                    col = x * h[:top, k] + y * h[:top, k + 1]
                    if notlast:
                        col += z * h[:top, k + 2]
                        h[:top, k + 2] -= col * r
                    h[:top, k] -= col
                    h[:top, k + 1] -= col * q

                    # Accumulate transformations
                    col = x * v[low:high + 1, k] + y * v[low:high + 1, k + 1]
                    if notlast:
                        col += z * v[low:high + 1, k + 2]
                        v[low:high + 1, k + 2] -= col * r
                    v[low:high + 1, k] -= col
                    v[low:high + 1, k + 1] -= col * q

    if norm == 0.0:
        return d, e, total

    _back_substitute(h, d, e, norm)

    # Back transformation to eigenvectors of the original matrix
    for j in range(nn - 1, low - 1, -1):
        top = min(j, high) + 1
        v[low:high + 1, j] = v[low:high + 1, low:top] @ h[low:top, j]
    return d, e, total


def _back_substitute(h: FloatArray, d: FloatArray, e: FloatArray, norm: float) -> None:
    """Eigenvectors of the quasi-triangular Schur form, written into h."""
    nn = h.shape[0]
    eps = EPSILON_64
    r = s = z = 0.0

    for n in range(nn - 1, -1, -1):
        p = d[n]
        q = e[n]

        if q == 0:
            # Real vector
            l = n
            h[n, n] = 1.0
            for i in range(n - 1, -1, -1):
                w = h[i, i] - p
                r = np.dot(h[i, l:n + 1], h[l:n + 1, n])
                if e[i] < 0.0:
                    z = w
                    s = r
                else:
                    l = i
                    if e[i] == 0.0:
                        if w != 0.0:
                            h[i, n] = -r / w
                        else:
                            h[i, n] = -r / (eps * norm)
                    else:
                        # Solve real equations
                        x = h[i, i + 1]
                        y = h[i + 1, i]
                        q = (d[i] - p) * (d[i] - p) + e[i] * e[i]
                        t = (x * s - z * r) / q
                        h[i, n] = t
                        if abs(x) > abs(z):
                            h[i + 1, n] = (-r - w * t) / x
                        else:
                            h[i + 1, n] = (-s - y * t) / z

                    # Overflow control
                    t = abs(h[i, n])
                    if (eps * t) * t > 1:
                        h[i:n + 1, n] /= t

        elif q < 0:
            # Complex vector, last component imaginary
            l = n - 1
            if abs(h[n, n - 1]) > abs(h[n - 1, n]):
                h[n - 1, n - 1] = q / h[n, n - 1]
                h[n - 1, n] = -(h[n, n] - p) / h[n, n - 1]
            else:
                h[n - 1, n - 1], h[n - 1, n] = cdiv(0.0, -h[n - 1, n], h[n - 1, n - 1] - p, q)
            h[n, n - 1] = 0.0
            h[n, n] = 1.0

            for i in range(n - 2, -1, -1):
                ra = np.dot(h[i, l:n + 1], h[l:n + 1, n - 1])
                sa = np.dot(h[i, l:n + 1], h[l:n + 1, n])
                w = h[i, i] - p

                if e[i] < 0.0:
                    z = w
                    r = ra
                    s = sa
                else:
                    l = i
                    if e[i] == 0:
                        h[i, n - 1], h[i, n] = cdiv(-ra, -sa, w, q)
                    else:
                        # Solve complex equations
                        x = h[i, i + 1]
                        y = h[i + 1, i]
                        vr = (d[i] - p) * (d[i] - p) + e[i] * e[i] - q * q
                        vi = (d[i] - p) * 2.0 * q
                        if vr == 0.0 and vi == 0.0:
                            vr = eps * norm * (abs(w) + abs(q) + abs(x) + abs(y) + abs(z))
                        h[i, n - 1], h[i, n] = cdiv(
                            x * r - z * ra + q * sa, x * s - z * sa - q * ra, vr, vi)
                        if abs(x) > abs(z) + abs(q):
                            h[i + 1, n - 1] = (-ra - w * h[i, n - 1] + q * h[i, n]) / x
                            h[i + 1, n] = (-sa - w * h[i, n] - q * h[i, n - 1]) / x
                        else:
                            h[i + 1, n - 1], h[i + 1, n] = cdiv(
                                -r - y * h[i, n - 1], -s - y * h[i, n], z, q)

                    # Overflow control
                    t = max(abs(h[i, n - 1]), abs(h[i, n]))
                    if (eps * t) * t > 1:
                        h[i:n + 1, n - 1] /= t
                        h[i:n + 1, n] /= t


def block_diagonal(real: FloatArray, imag: FloatArray) -> FloatArray:
    """
    Real block diagonal eigenvalue matrix D with A V = V D.

    A complex pair re +/- i im becomes the 2 x 2 block [[re, im], [-im, re]].
    """
    n = real.shape[0]
    dm = np.diag(real).astype(np.float64)
    for i in range(n):
        if imag[i] > 0:
            dm[i, i + 1] = imag[i]
        elif imag[i] < 0:
            dm[i, i - 1] = imag[i]
    return dm
