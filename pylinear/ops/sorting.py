"""
In-place quicksort for doubles, direct and indirect.

Three-way partitioning quicksort after Bentley and McIlroy, "Engineering
a Sort Function" (1993):

    fewer than 16 elements     selection sort
    up to 128 elements         pivot is the median of first, middle, last
    more than 128 elements     pivot is the pseudomedian of 9

Elements equal to the pivot are swapped to both ends during partitioning
and then moved to the middle, so runs of duplicates are never recursed on.

Ordering is total: NaN compares greater than every number and equal to
itself, so NaN sorts last (first when reverse=True).

The indirect variant sorts a permutation of indexes by the values they
point at, leaving the values untouched. stabilize() then orders each run
of equal values by index, which makes the indirect sort stable.
"""

from typing import Any, Callable, MutableSequence, Sequence

import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import DimensionError
from pylinear.core.protocols import Vector
from pylinear.dense.coerce import to_vector

QUICKSORT_NO_REC = 16
QUICKSORT_MEDIAN_OF_9 = 128

Comparator = Callable[[Any, Any], int]


def compare_doubles(a: float, b: float) -> int:
    """Total order on doubles with NaN largest."""
    if a != a:
        return 0 if b != b else 1
    if b != b:
        return -1
    return (a > b) - (a < b)


def _value_comparator(reverse: bool) -> Comparator:
    if reverse:
        return lambda a, b: compare_doubles(b, a)
    return compare_doubles


# ═══════════════════════════════════════════════════════════════════════
# Kernel (operates on a Python list with an item comparator)
# ═══════════════════════════════════════════════════════════════════════


def _swap(x: list, a: int, b: int) -> None:
    x[a], x[b] = x[b], x[a]


def _vecswap(x: list, a: int, b: int, n: int) -> None:
    for k in range(n):
        _swap(x, a + k, b + k)


def _med3(x: list, a: int, b: int, c: int, cmp: Comparator) -> int:
    ab = cmp(x[a], x[b])
    ac = cmp(x[a], x[c])
    bc = cmp(x[b], x[c])
    if ab < 0:
        return b if bc < 0 else (c if ac < 0 else a)
    return b if bc > 0 else (c if ac > 0 else a)


def _selection_sort(x: list, lo: int, hi: int, cmp: Comparator) -> None:
    for i in range(lo, hi - 1):
        m = i
        for j in range(i + 1, hi):
            if cmp(x[j], x[m]) < 0:
                m = j
        if m != i:
            _swap(x, i, m)


def _quicksort(x: list, lo: int, hi: int, cmp: Comparator) -> None:
    n = hi - lo
    if n < QUICKSORT_NO_REC:
        _selection_sort(x, lo, hi, cmp)
        return

    m = lo + n // 2
    left = lo
    right = hi - 1
    if n > QUICKSORT_MEDIAN_OF_9:
        s = n // 8
        left = _med3(x, left, left + s, left + 2 * s, cmp)
        m = _med3(x, m - s, m, m + s, cmp)
        right = _med3(x, right - 2 * s, right - s, right, cmp)
    m = _med3(x, left, m, right, cmp)
    pivot = x[m]

    # Invariant: pivot* (<pivot)* ... (>pivot)* pivot*
    a = b = lo
    c = d = hi - 1
    while True:
        while b <= c:
            comparison = cmp(x[b], pivot)
            if comparison > 0:
                break
            if comparison == 0:
                _swap(x, a, b)
                a += 1
            b += 1
        while c >= b:
            comparison = cmp(x[c], pivot)
            if comparison < 0:
                break
            if comparison == 0:
                _swap(x, c, d)
                d -= 1
            c -= 1
        if b > c:
            break
        _swap(x, b, c)
        b += 1
        c -= 1

    s = min(a - lo, b - a)
    _vecswap(x, lo, b - s, s)
    s = min(d - c, hi - d - 1)
    _vecswap(x, b, hi - s, s)

    s = b - a
    if s > 1:
        _quicksort(x, lo, lo + s, cmp)
    s = d - c
    if s > 1:
        _quicksort(x, hi - s, hi, cmp)


def _resolve_range(n: int, start: int, end: int | None) -> tuple[int, int]:
    end = n if end is None else end
    if start < 0 or end > n or start > end:
        raise IndexError(f"sort range [{start}, {end}) invalid for size {n}")
    return start, end


# ═══════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════


def quicksort(
    x: MutableSequence[float],
    start: int = 0,
    end: int | None = None,
    reverse: bool = False,
) -> None:
    """
    Sort x[start:end] in place.

    Args:
        x: List or 1-D ndarray of doubles
        start: First position (inclusive)
        end: Last position (exclusive), default len(x)
        reverse: Descending order when True
    """
    start, end = _resolve_range(len(x), start, end)
    buf = [float(v) for v in x[start:end]]
    _quicksort(buf, 0, len(buf), _value_comparator(reverse))
    x[start:end] = buf


def quicksort_indirect(
    perm: MutableSequence[int],
    values: Sequence[float],
    start: int = 0,
    end: int | None = None,
    reverse: bool = False,
) -> None:
    """
    Sort perm[start:end] in place so values[perm[i]] is ordered.

    values is only read.
    """
    start, end = _resolve_range(len(perm), start, end)
    vals = [float(v) for v in values]
    base = _value_comparator(reverse)
    buf = [int(p) for p in perm[start:end]]
    _quicksort(buf, 0, len(buf), lambda i, j: base(vals[i], vals[j]))
    perm[start:end] = buf


def stabilize(
    perm: MutableSequence[int],
    values: Sequence[float],
    start: int = 0,
    end: int | None = None,
) -> None:
    """
    Order each run of equal values[perm[i]] by ascending index.

    Assumes perm[start:end] already sorts values. Afterwards equal values
    keep their original relative order.
    """
    start, end = _resolve_range(len(perm), start, end)
    curr = start
    for i in range(start + 1, end + 1):
        if i == end or compare_doubles(float(values[perm[i]]), float(values[perm[curr]])) != 0:
            if i - curr > 1:
                perm[curr:i] = sorted(int(p) for p in perm[curr:i])
            curr = i


def sort_values(x: Any, reverse: bool = False) -> Vector:
    """Sort a vector's values in place; returns the vector."""
    v = to_vector(x, 'x')
    buf = [float(a) for a in v.values()]
    _quicksort(buf, 0, len(buf), _value_comparator(reverse))
    v.assign(buf)
    return v


def sort_indexes(
    x: Any,
    reverse: bool = False,
    stable: bool = True,
    perm: Sequence[int] | None = None,
) -> NDArray[np.intp]:
    """
    Permutation that sorts a vector, without touching it.

    Args:
        x: Vector or 1-D array-like
        reverse: Descending order when True
        stable: Keep equal values in index order
        perm: Starting permutation (default identity); must have x's size

    Returns:
        Array p with x[p[0]] <= x[p[1]] <= ...
    """
    v = to_vector(x, 'x')
    vals = [float(a) for a in v.values()]
    if perm is None:
        order = list(range(len(vals)))
    else:
        order = [int(p) for p in perm]
        if len(order) != len(vals):
            raise DimensionError(
                f"sort_indexes: permutation size {len(order)} does not match vector size {len(vals)}",
                expected=len(vals),
                actual=len(order),
            )
    quicksort_indirect(order, vals, reverse=reverse)
    if stable:
        stabilize(order, vals)
    return np.asarray(order, dtype=np.intp)
