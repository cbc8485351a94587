"""
Reductions over vectors and matrices.

Vector reductions return a float (or int for arg-extrema). Matrix
reductions take an axis:

    axis=None   reduce over every element, returns a scalar
    axis=0      reduce each column, returns a DenseVector of size cols
    axis=1      reduce each row, returns a DenseVector of size rows

The nan* variants skip non-finite values (NaN and +-inf). min/max and the
arg-extrema skip NaN and break ties by first occurrence.
"""

from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import ValidationError, DimensionError
from pylinear.core.protocols import Vector, Matrix
from pylinear.core.validation import check_axis, check_same_size
from pylinear.dense.coerce import to_operand, to_vector, to_matrix
from pylinear.dense.vector import DenseVector
from pylinear.dense.matrix import DenseMatrix


# ═══════════════════════════════════════════════════════════════════════
# 1-D kernels
# ═══════════════════════════════════════════════════════════════════════


def _finite(v: NDArray[np.float64]) -> NDArray[np.float64]:
    return v[np.isfinite(v)]


def _sum(v: NDArray[np.float64]) -> float:
    return float(np.sum(v))


def _nansum(v: NDArray[np.float64]) -> float:
    return float(np.sum(_finite(v)))


def _prod(v: NDArray[np.float64]) -> float:
    return float(np.prod(v))


def _nanprod(v: NDArray[np.float64]) -> float:
    return float(np.prod(_finite(v)))


def _nancount(v: NDArray[np.float64]) -> int:
    return int(np.count_nonzero(np.isfinite(v)))


def _mean(v: NDArray[np.float64]) -> float:
    """Mean with a second correction pass over the residuals."""
    n = v.size
    if n == 0:
        return float('nan')
    m = np.sum(v) / n
    if not np.isfinite(m):
        return float(m)
    return float(m + np.sum(v - m) / n)


def _nanmean(v: NDArray[np.float64]) -> float:
    return _mean(_finite(v))


def _variance(v: NDArray[np.float64]) -> float:
    """
    Sample variance by the shifted two-pass formula.

        (sum((x - m)^2) - (sum(x - m))^2 / n) / (n - 1)

    Fewer than two values give NaN.
    """
    n = v.size
    if n < 2:
        return float('nan')
    m = _mean(v)
    d = v - m
    return float((np.sum(d * d) - np.sum(d) ** 2 / n) / (n - 1))


def _nanvariance(v: NDArray[np.float64]) -> float:
    return _variance(_finite(v))


def _require_values(v: NDArray[np.float64], name: str) -> None:
    if v.size == 0:
        raise ValidationError(f"{name}: empty operand has no extremum")


def _argmin(v: NDArray[np.float64]) -> int:
    _require_values(v, 'argmin')
    valid = np.flatnonzero(~np.isnan(v))
    if valid.size == 0:
        return 0
    return int(valid[np.argmin(v[valid])])


def _argmax(v: NDArray[np.float64]) -> int:
    _require_values(v, 'argmax')
    valid = np.flatnonzero(~np.isnan(v))
    if valid.size == 0:
        return 0
    return int(valid[np.argmax(v[valid])])


def _min(v: NDArray[np.float64]) -> float:
    _require_values(v, 'min')
    return float(v[_argmin(v)])


def _max(v: NDArray[np.float64]) -> float:
    _require_values(v, 'max')
    return float(v[_argmax(v)])


# ═══════════════════════════════════════════════════════════════════════
# Axis dispatch
# ═══════════════════════════════════════════════════════════════════════


def _reduce(x: Any, axis: int | None, kernel: Callable[[NDArray[np.float64]], Any], name: str):
    operand = to_operand(x, 'x')
    vals = np.asarray(operand.values(), dtype=np.float64)
    if not isinstance(operand, Matrix):
        return kernel(vals)
    if axis is None:
        return kernel(vals.ravel())
    check_axis(axis, name)
    lines = vals.T if axis == 0 else vals
    out = np.array([kernel(line) for line in lines], dtype=np.float64)
    return DenseVector(out.reshape(-1))


def sum(x: Any, axis: int | None = None):
    """Sum of all elements; NaN propagates."""
    return _reduce(x, axis, _sum, 'sum')


def nansum(x: Any, axis: int | None = None):
    """Sum of finite elements."""
    return _reduce(x, axis, _nansum, 'nansum')


def prod(x: Any, axis: int | None = None):
    return _reduce(x, axis, _prod, 'prod')


def nanprod(x: Any, axis: int | None = None):
    return _reduce(x, axis, _nanprod, 'nanprod')


def nancount(x: Any, axis: int | None = None):
    """Number of finite elements."""
    return _reduce(x, axis, _nancount, 'nancount')


def mean(x: Any, axis: int | None = None):
    """Arithmetic mean (NaN for an empty operand)."""
    return _reduce(x, axis, _mean, 'mean')


def nanmean(x: Any, axis: int | None = None):
    return _reduce(x, axis, _nanmean, 'nanmean')


def variance(x: Any, axis: int | None = None):
    """Sample variance, shifted two-pass; NaN when fewer than two values."""
    return _reduce(x, axis, _variance, 'variance')


def nanvariance(x: Any, axis: int | None = None):
    return _reduce(x, axis, _nanvariance, 'nanvariance')


def sd(x: Any, axis: int | None = None):
    """Sample standard deviation."""
    return _reduce(x, axis, lambda v: float(np.sqrt(_variance(v))), 'sd')


def min(x: Any, axis: int | None = None):
    return _reduce(x, axis, _min, 'min')


def max(x: Any, axis: int | None = None):
    return _reduce(x, axis, _max, 'max')


def argmin(x: Any, axis: int | None = None):
    """
    Index of the smallest element, first occurrence wins.

    For matrices with axis=None the index is into the row-major flattening.
    Per-axis results come back as a DenseVector of (float) indexes.
    """
    return _reduce(x, axis, _argmin, 'argmin')


def argmax(x: Any, axis: int | None = None):
    return _reduce(x, axis, _argmax, 'argmax')


# ═══════════════════════════════════════════════════════════════════════
# Running and normalizing transforms (in place)
# ═══════════════════════════════════════════════════════════════════════


def cumsum(x: Any) -> Vector:
    """Replace each element by the running sum; returns x."""
    v = to_vector(x, 'x')
    v.assign(np.cumsum(v.values()))
    return v


def cumprod(x: Any) -> Vector:
    """Replace each element by the running product; returns x."""
    v = to_vector(x, 'x')
    v.assign(np.cumprod(v.values()))
    return v


def norm(x: Any, p: float = 2.0) -> float:
    """
    p-norm of a vector.

    p <= 0 returns the element count, p = inf returns max |x| ignoring
    NaN, otherwise (sum |x|^p)^(1/p).
    """
    v = np.asarray(to_vector(x, 'x').values(), dtype=np.float64)
    if p <= 0:
        return float(v.size)
    if np.isposinf(p):
        a = np.abs(v[~np.isnan(v)])
        return float(a.max()) if a.size else float('nan')
    if p == 1:
        return float(np.sum(np.abs(v)))
    if p == 2:
        return float(np.sqrt(np.sum(v * v)))
    return float(np.sum(np.abs(v) ** p) ** (1.0 / p))


def normalize(x: Any, p: float = 2.0) -> Vector:
    """Divide x in place by its p-norm (no-op for a zero norm); returns x."""
    v = to_vector(x, 'x')
    n = norm(v, p)
    if n > 0:
        v.assign(v.values() / n)
    return v


# ═══════════════════════════════════════════════════════════════════════
# Products and matrix scalars
# ═══════════════════════════════════════════════════════════════════════


def dot(x: Any, y: Any) -> float:
    """Inner product of two vectors of equal size."""
    a = to_vector(x, 'x')
    b = to_vector(y, 'y')
    check_same_size(a.size(), b.size(), 'dot')
    return float(np.dot(a.values(), b.values()))


def dot_bilinear(x: Any, m: Any, y: Any = None) -> float:
    """x' M y (y defaults to x)."""
    a = to_vector(x, 'x')
    b = a if y is None else to_vector(y, 'y')
    mat = to_matrix(m, 'm')
    if mat.rows() != a.size() or mat.cols() != b.size():
        raise DimensionError(
            f"dot_bilinear: matrix {(mat.rows(), mat.cols())} does not match "
            f"vectors of size ({a.size()}, {b.size()})",
            expected=(a.size(), b.size()),
            actual=(mat.rows(), mat.cols()),
        )
    return float(a.values() @ (np.asarray(mat.values()) @ b.values()))


def dot_bilinear_diag(x: Any, d: Any, y: Any = None) -> float:
    """x' diag(d) y (y defaults to x)."""
    a = to_vector(x, 'x')
    b = a if y is None else to_vector(y, 'y')
    w = to_vector(d, 'd')
    check_same_size(a.size(), w.size(), 'dot_bilinear_diag')
    check_same_size(a.size(), b.size(), 'dot_bilinear_diag')
    return float(np.sum(a.values() * w.values() * b.values()))


def trace(m: Any) -> float:
    """Sum of the main diagonal of a square matrix."""
    mat = to_matrix(m, 'm')
    if mat.rows() != mat.cols():
        raise DimensionError(
            f"trace: matrix must be square, got {(mat.rows(), mat.cols())}",
            expected=(mat.rows(), mat.rows()),
            actual=(mat.rows(), mat.cols()),
        )
    return float(np.trace(np.asarray(mat.values())))


def diag(m: Any) -> DenseVector:
    """Copy of the main diagonal (length min(rows, cols))."""
    mat = to_matrix(m, 'm')
    return DenseVector(np.array(np.diagonal(np.asarray(mat.values())), dtype=np.float64))


def scatter(m: Any) -> DenseMatrix:
    """Scatter matrix sum_i (x_i - mean)(x_i - mean)' over rows."""
    mat = to_matrix(m, 'm')
    vals = np.asarray(mat.values(), dtype=np.float64)
    centered = vals - np.array([_mean(c) for c in vals.T], dtype=np.float64)[np.newaxis, :]
    return DenseMatrix.wrap(np.ascontiguousarray(centered.T @ centered))


def is_symmetric(m: Any) -> bool:
    """Square and exactly equal to its transpose."""
    mat = to_matrix(m, 'm')
    if mat.rows() != mat.cols():
        return False
    vals = np.asarray(mat.values())
    return bool(np.array_equal(vals, vals.T))
