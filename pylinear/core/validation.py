"""
Input validation utilities for pylinear.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Shape errors name both the expected and the actual shape
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pylinear.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.float64]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with float64 dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not (np.issubdtype(result.dtype, np.number) or result.dtype == np.bool_):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: complex dtype {result.dtype}, only real doubles are supported"
        )

    if result.dtype != np.float64:
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}",
            expected=ndim,
            actual=array.ndim,
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_same_size(size_a: int, size_b: int, name: str) -> None:
    """
    Verify two vector operands have the same length.

    Args:
        size_a: Length of the first operand
        size_b: Length of the second operand
        name: Operation name for error messages

    Raises:
        DimensionError: If the lengths differ; the message names both
    """
    if size_a != size_b:
        raise DimensionError(
            f"{name}: vector sizes do not match ({size_a} vs {size_b})",
            expected=size_a,
            actual=size_b,
        )


def check_same_shape(
    shape_a: tuple[int, int],
    shape_b: tuple[int, int],
    name: str,
) -> None:
    """
    Verify two matrix operands have identical shapes.

    Raises:
        DimensionError: If the shapes differ; the message names both
    """
    if tuple(shape_a) != tuple(shape_b):
        raise DimensionError(
            f"{name}: matrix shapes do not match ({tuple(shape_a)} vs {tuple(shape_b)})",
            expected=tuple(shape_a),
            actual=tuple(shape_b),
        )


def check_conformant(
    shape_a: tuple[int, ...],
    shape_b: tuple[int, ...],
    name: str,
) -> None:
    """
    Verify the inner dimensions of a product agree.

    shape_a's last dimension must equal shape_b's first dimension.

    Raises:
        DimensionError: If the inner dimensions differ; the message names
            both operand shapes
    """
    if shape_a[-1] != shape_b[0]:
        raise DimensionError(
            f"{name}: inner dimensions do not agree, "
            f"{tuple(shape_a)} cannot multiply {tuple(shape_b)}",
            expected=tuple(shape_a),
            actual=tuple(shape_b),
        )


def check_axis(axis: int, name: str) -> None:
    """
    Verify a matrix axis argument is 0 or 1.

    Raises:
        ValidationError: If axis is anything else
    """
    if axis not in (0, 1):
        raise ValidationError(f"{name}: axis must be 0 or 1, got {axis!r}")


def check_index(index: int, size: int, name: str) -> int:
    """
    Verify a logical index lies in [0, size).

    Returns:
        The index as a plain int

    Raises:
        IndexError: If the index is out of range
    """
    i = int(index)
    if i < 0 or i >= size:
        raise IndexError(f"{name}: index {i} out of range for size {size}")
    return i


def check_indexes(
    indexes: ArrayLike,
    size: int,
    name: str,
) -> NDArray[np.intp]:
    """
    Validate an array of logical indexes against a size.

    Returns:
        1-D intp array of the indexes

    Raises:
        ValidationError: If the indexes are not integral
        IndexError: If any index is out of range
    """
    idx = np.asarray(indexes)
    if idx.size == 0:
        return np.zeros(0, dtype=np.intp)
    if not np.issubdtype(idx.dtype, np.integer):
        raise ValidationError(f"{name}: indexes must be integers, got dtype {idx.dtype}")
    idx = idx.astype(np.intp).ravel()
    bad = (idx < 0) | (idx >= size)
    if np.any(bad):
        raise IndexError(
            f"{name}: indexes {idx[bad].tolist()} out of range for size {size}"
        )
    return idx
