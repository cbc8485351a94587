"""
Strategy dispatch for products.

This module provides dot() (public API) and strategy selection.
"""

from typing import Any, Literal
import warnings

import numpy as np

from pylinear.core.exceptions import ValidationError
from pylinear.core.protocols import is_matrix
from pylinear.core.compute.timing import Timer, optional_section
from pylinear.core.compute.workers import resolve_workers
from pylinear.core.validation import check_conformant, check_same_size
from pylinear.dense.coerce import to_operand, to_matrix, to_vector
from pylinear.dense.vector import DenseVector
from pylinear.dense.matrix import DenseMatrix
from pylinear.multiply import kernels


# Type alias for strategy selection
StrategyChoice = Literal['auto', 'ijk', 'ikj', 'jama', 'row_parallel', 'tiled', 'strassen']

STRATEGIES = ('auto', 'ijk', 'ikj', 'jama', 'row_parallel', 'tiled', 'strassen')

# rows * inner * cols at which 'auto' switches to the thread pool
PARALLEL_MIN_WORK = 1 << 21


def dot(
    a: Any,
    b: Any,
    *,
    strategy: StrategyChoice = 'auto',
    max_workers: int | None = None,
    leaf_size: int = kernels.STRASSEN_LEAF_SIZE,
    timer: Timer | None = None,
) -> float | DenseVector | DenseMatrix:
    """
    Product of two operands.

    vector . vector  -> float (inner product)
    matrix . vector  -> DenseVector
    vector . matrix  -> DenseVector (x' A)
    matrix . matrix  -> DenseMatrix

    Args:
        a: Left operand (Vector, Matrix, or 1-D / 2-D array-like)
        b: Right operand
        strategy: Multiplication kernel:
            - 'auto': 'row_parallel' for large products when more than one
              worker is available, else 'tiled'
            - 'ijk', 'ikj', 'jama': naive loop orders
            - 'row_parallel': thread pool over row blocks
            - 'tiled': cache-blocked product
            - 'strassen': padded Strassen recursion
        max_workers: Thread count for parallel kernels (default
            PYLINEAR_NUM_WORKERS or the CPU count)
        leaf_size: Strassen recursion leaf
        timer: When given, the kernel that ran is timed as a section named
            after it ('inner', 'matvec_naive', 'matvec_parallel' or the
            matrix strategy 'auto' resolved to)

    Returns:
        The product; operands are never modified

    Raises:
        DimensionError: If the inner dimensions differ (names both shapes)
        ValidationError: If the strategy is unknown

    Example:
        >>> from pylinear.multiply import dot
        >>> dot([[1, 2], [3, 4]], [[5, 6], [7, 8]], strategy='strassen').values()
        array([[19., 22.],
               [43., 50.]])
    """
    if strategy not in STRATEGIES:
        raise ValidationError(
            f"strategy: unknown {strategy!r}, expected one of {STRATEGIES}"
        )
    left = to_operand(a, 'a')
    right = to_operand(b, 'b')
    left_is_matrix = is_matrix(left)
    right_is_matrix = is_matrix(right)

    if not left_is_matrix and not right_is_matrix:
        check_same_size(left.size(), right.size(), 'dot')
        with optional_section(timer, 'inner'):
            return float(np.dot(left.values(), right.values()))

    if left_is_matrix and not right_is_matrix:
        check_conformant((left.rows(), left.cols()), (right.size(),), 'dot')
        return DenseVector(_matvec(np.asarray(left.values()), right.values(), strategy, max_workers, timer))

    if not left_is_matrix:
        check_conformant((left.size(),), (right.rows(), right.cols()), 'dot')
        at = np.asarray(right.values()).T
        return DenseVector(_matvec(at, left.values(), strategy, max_workers, timer))

    check_conformant((left.rows(), left.cols()), (right.rows(), right.cols()), 'dot')
    a_vals = np.asarray(left.values(), dtype=np.float64)
    b_vals = np.asarray(right.values(), dtype=np.float64)
    name, kernel = _get_strategy(strategy, a_vals.shape, b_vals.shape, max_workers, leaf_size)
    with optional_section(timer, name):
        c = kernel(a_vals, b_vals)
    return DenseMatrix.wrap(np.ascontiguousarray(c))


def _matvec(
    a_vals: np.ndarray,
    x_vals: np.ndarray,
    strategy: str,
    max_workers: int | None,
    timer: Timer | None,
) -> np.ndarray:
    """Matrix-vector product; only the naive and row-parallel kernels apply."""
    if strategy in ('auto', 'row_parallel'):
        workers = resolve_workers(max_workers)
        if strategy == 'row_parallel' or (
                a_vals.shape[0] * a_vals.shape[1] >= PARALLEL_MIN_WORK and workers > 1):
            with optional_section(timer, 'matvec_parallel'):
                return kernels.matvec_parallel(a_vals, x_vals, max_workers=workers)
    elif strategy not in ('ijk', 'ikj', 'jama'):
        warnings.warn(
            f"strategy {strategy!r} has no matrix-vector kernel; using the naive product",
            UserWarning,
            stacklevel=3,
        )
    with optional_section(timer, 'matvec_naive'):
        return kernels.matvec_naive(a_vals, x_vals)


def _get_strategy(
    choice: StrategyChoice,
    a_shape: tuple[int, int],
    b_shape: tuple[int, int],
    max_workers: int | None,
    leaf_size: int = kernels.STRASSEN_LEAF_SIZE,
):
    """
    Select the matrix-matrix kernel.

    Args:
        choice: User's strategy preference
        a_shape: Left operand shape
        b_shape: Right operand shape
        max_workers: Thread count override
        leaf_size: Strassen recursion leaf

    Returns:
        (name, callable) where callable(a, b) -> product

    Raises:
        ValidationError: If unknown strategy specified
    """
    if choice == 'auto':
        workers = resolve_workers(max_workers)
        work = a_shape[0] * a_shape[1] * b_shape[1]
        if work >= PARALLEL_MIN_WORK and workers > 1:
            return 'row_parallel', lambda a, b: kernels.row_parallel(a, b, max_workers=workers)
        return 'tiled', kernels.tiled

    elif choice == 'ijk':
        return 'ijk', kernels.ijk

    elif choice == 'ikj':
        return 'ikj', kernels.ikj

    elif choice == 'jama':
        return 'jama', kernels.jama

    elif choice == 'row_parallel':
        workers = resolve_workers(max_workers)
        return 'row_parallel', lambda a, b: kernels.row_parallel(a, b, max_workers=workers)

    elif choice == 'tiled':
        return 'tiled', kernels.tiled

    elif choice == 'strassen':
        return 'strassen', lambda a, b: kernels.strassen(a, b, leaf_size=leaf_size)

    else:
        raise ValidationError(f"Unknown strategy: {choice!r}")


def dot_diag(a: Any, v: Any) -> DenseMatrix:
    """A . diag(v): column j of A scaled by v[j]."""
    mat = to_matrix(a, 'a')
    vec = to_vector(v, 'v')
    check_same_size(mat.cols(), vec.size(), 'dot_diag')
    return DenseMatrix.wrap(np.ascontiguousarray(
        np.asarray(mat.values()) * vec.values()[np.newaxis, :]))


def dot_diag_t(a: Any, v: Any) -> DenseMatrix:
    """diag(v) . A: row i of A scaled by v[i]."""
    mat = to_matrix(a, 'a')
    vec = to_vector(v, 'v')
    check_same_size(mat.rows(), vec.size(), 'dot_diag_t')
    return DenseMatrix.wrap(np.ascontiguousarray(
        np.asarray(mat.values()) * vec.values()[:, np.newaxis]))
