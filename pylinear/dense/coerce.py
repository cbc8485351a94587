"""
Coercion of caller inputs into vectors and matrices.

Public entry points accept either library containers or plain array-likes.
Library containers pass through untouched (so in-place operations reach
their storage); array-likes are wrapped, aliasing float64 ndarrays.
"""

from typing import Any

from pylinear.core.protocols import Vector, Matrix, is_matrix, is_vector
from pylinear.core.validation import check_array, check_1d, check_2d
from pylinear.dense.vector import DenseVector
from pylinear.dense.matrix import DenseMatrix


def to_vector(x: Any, name: str) -> Vector:
    """Vector as-is, or a DenseVector over a 1-D array-like."""
    if isinstance(x, Vector):
        return x
    arr = check_array(x, name)
    check_1d(arr, name)
    return DenseVector.wrap(arr)


def to_matrix(x: Any, name: str) -> Matrix:
    """Matrix as-is, or a DenseMatrix over a 2-D array-like."""
    if isinstance(x, Matrix):
        return x
    arr = check_array(x, name)
    check_2d(arr, name)
    return DenseMatrix.wrap(arr)


def to_operand(x: Any, name: str) -> Vector | Matrix:
    """Vector or matrix, decided by the input's dimensionality."""
    if is_vector(x) or is_matrix(x):
        return x
    arr = check_array(x, name)
    if arr.ndim == 1:
        return DenseVector.wrap(arr)
    check_2d(arr, name)
    return DenseMatrix.wrap(arr)
