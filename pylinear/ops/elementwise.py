"""
Elementwise arithmetic.

Every binary operation comes in two forms:

    add(x, y)             x <- x + y, returns x
    add_into(x, y, out)   out <- x + y, returns out; x is untouched

The right operand may be a scalar, a vector of the same size, a matrix
of the same shape, or (for a matrix left operand) a vector broadcast
along an axis:

    axis=0   vector size == cols, applied to every row
    axis=1   vector size == rows, applied to every column

Shapes are checked before any element is written. Division follows
IEEE 754: x/0 gives +-inf and 0/0 gives NaN.
"""

from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import DimensionError
from pylinear.core.protocols import Vector, Matrix
from pylinear.core.validation import (
    check_array,
    check_axis,
    check_same_size,
    check_same_shape,
)
from pylinear.dense.coerce import to_operand

_UFUNCS = {
    'add': np.add,
    'sub': np.subtract,
    'mul': np.multiply,
    'div': np.divide,
}


def _is_scalar(value: Any) -> bool:
    return np.isscalar(value) or (isinstance(value, np.ndarray) and value.ndim == 0)


def _shape_of(x: Vector | Matrix) -> tuple[int, ...]:
    if isinstance(x, Matrix):
        return (x.rows(), x.cols())
    return (x.size(),)


def _right_values(
    left: Vector | Matrix,
    right: Any,
    axis: int,
    name: str,
) -> float | NDArray[np.float64]:
    """Right operand as a scalar or an array broadcastable to left's shape."""
    if _is_scalar(right):
        return float(right)

    if isinstance(right, (Vector, Matrix)):
        vals = np.asarray(right.values(), dtype=np.float64)
    else:
        vals = check_array(right, 'other')

    if isinstance(left, Matrix):
        rows, cols = left.rows(), left.cols()
        if vals.ndim == 2:
            check_same_shape((rows, cols), vals.shape, name)
            return vals
        if vals.ndim != 1:
            raise DimensionError(
                f"{name}: cannot combine matrix {(rows, cols)} with operand of shape {vals.shape}",
                expected=(rows, cols),
                actual=vals.shape,
            )
        check_axis(axis, name)
        if axis == 0:
            if vals.size != cols:
                raise DimensionError(
                    f"{name}: axis=0 needs a vector of size {cols} for matrix "
                    f"{(rows, cols)}, got size {vals.size}",
                    expected=cols,
                    actual=vals.size,
                )
            return vals[np.newaxis, :]
        if vals.size != rows:
            raise DimensionError(
                f"{name}: axis=1 needs a vector of size {rows} for matrix "
                f"{(rows, cols)}, got size {vals.size}",
                expected=rows,
                actual=vals.size,
            )
        return vals[:, np.newaxis]

    if vals.ndim != 1:
        raise DimensionError(
            f"{name}: cannot combine vector of size {left.size()} with operand of shape {vals.shape}",
            expected=(left.size(),),
            actual=vals.shape,
        )
    check_same_size(left.size(), vals.size, name)
    return vals


def _compute(op: str, x: Any, other: Any, axis: int) -> tuple[Vector | Matrix, NDArray[np.float64]]:
    left = to_operand(x, 'x')
    right = _right_values(left, other, axis, op)
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        result = _UFUNCS[op](left.values(), right)
    return left, result


def _check_target(left: Vector | Matrix, target: Vector | Matrix, name: str) -> None:
    left_shape, target_shape = _shape_of(left), _shape_of(target)
    if left_shape != target_shape:
        raise DimensionError(
            f"{name}: target shape {target_shape} does not match operand shape {left_shape}",
            expected=left_shape,
            actual=target_shape,
        )


def _inplace(op: str, x: Any, other: Any, axis: int) -> Vector | Matrix:
    left, result = _compute(op, x, other, axis)
    left.assign(result)
    return left


def _into(op: str, x: Any, other: Any, out: Any, axis: int) -> Vector | Matrix:
    left = to_operand(x, 'x')
    target = to_operand(out, 'out')
    _check_target(left, target, f"{op}_into")
    _, result = _compute(op, left, other, axis)
    target.assign(result)
    return target


def add(x: Any, other: Any, axis: int = 0) -> Vector | Matrix:
    """x <- x + other; returns x."""
    return _inplace('add', x, other, axis)


def sub(x: Any, other: Any, axis: int = 0) -> Vector | Matrix:
    """x <- x - other; returns x."""
    return _inplace('sub', x, other, axis)


def mul(x: Any, other: Any, axis: int = 0) -> Vector | Matrix:
    """x <- x * other (elementwise); returns x."""
    return _inplace('mul', x, other, axis)


def div(x: Any, other: Any, axis: int = 0) -> Vector | Matrix:
    """x <- x / other (elementwise, IEEE semantics); returns x."""
    return _inplace('div', x, other, axis)


def add_into(x: Any, other: Any, out: Any, axis: int = 0) -> Vector | Matrix:
    """out <- x + other; returns out."""
    return _into('add', x, other, out, axis)


def sub_into(x: Any, other: Any, out: Any, axis: int = 0) -> Vector | Matrix:
    """out <- x - other; returns out."""
    return _into('sub', x, other, out, axis)


def mul_into(x: Any, other: Any, out: Any, axis: int = 0) -> Vector | Matrix:
    """out <- x * other; returns out."""
    return _into('mul', x, other, out, axis)


def div_into(x: Any, other: Any, out: Any, axis: int = 0) -> Vector | Matrix:
    """out <- x / other; returns out."""
    return _into('div', x, other, out, axis)


def _apply_values(values: NDArray[np.float64], fn: Callable[[float], float]) -> NDArray[np.float64]:
    if isinstance(fn, np.ufunc):
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            return fn(values)
    flat = np.fromiter((fn(float(v)) for v in values.ravel()), dtype=np.float64, count=values.size)
    return flat.reshape(values.shape)


def apply(x: Any, fn: Callable[[float], float]) -> Vector | Matrix:
    """
    x <- fn(x) elementwise; returns x.

    numpy ufuncs run vectorized; any other callable is applied per element.
    """
    left = to_operand(x, 'x')
    left.assign(_apply_values(left.values(), fn))
    return left


def apply_into(x: Any, fn: Callable[[float], float], out: Any) -> Vector | Matrix:
    """out <- fn(x) elementwise; returns out."""
    left = to_operand(x, 'x')
    target = to_operand(out, 'out')
    _check_target(left, target, 'apply_into')
    target.assign(_apply_values(left.values(), fn))
    return target


def fma(x: Any, a: float, y: Any) -> Vector | Matrix:
    """x <- x + a * y; returns x."""
    left = to_operand(x, 'x')
    right = _right_values(left, y, 0, 'fma')
    left.assign(left.values() + float(a) * right)
    return left


def _cut_values(values: NDArray[np.float64], low: float, high: float) -> NDArray[np.float64]:
    lo = None if np.isnan(low) else low
    hi = None if np.isnan(high) else high
    if lo is None and hi is None:
        return np.array(values, dtype=np.float64)
    return np.clip(values, lo, hi)


def cut(x: Any, low: float = np.nan, high: float = np.nan) -> Vector | Matrix:
    """
    Clamp every element into [low, high] in place; returns x.

    A NaN bound means unbounded on that side. NaN elements stay NaN.
    """
    left = to_operand(x, 'x')
    left.assign(_cut_values(left.values(), low, high))
    return left


def cut_into(x: Any, out: Any, low: float = np.nan, high: float = np.nan) -> Vector | Matrix:
    """Clamp x into [low, high], writing the result into out; returns out."""
    left = to_operand(x, 'x')
    target = to_operand(out, 'out')
    _check_target(left, target, 'cut_into')
    target.assign(_cut_values(left.values(), low, high))
    return target


def neg(x: Any) -> Vector | Matrix:
    return apply(x, np.negative)


def absolute(x: Any) -> Vector | Matrix:
    return apply(x, np.abs)


def sqrt(x: Any) -> Vector | Matrix:
    return apply(x, np.sqrt)


def exp(x: Any) -> Vector | Matrix:
    return apply(x, np.exp)


def log(x: Any) -> Vector | Matrix:
    return apply(x, np.log)
