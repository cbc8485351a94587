"""
Vector layouts.

Every vector is a fixed-size view over physical storage plus an indexing
rule mapping logical position i to a physical location:

    DenseVector   array[offset + i]
    StrideVector  array[offset + i * stride]
    MapVector     array[indexes[i]]
    VarVector     store[i] for an external ColumnStore

Views created by map() share the backing storage, so writes through a
view are visible through the source and vice versa. copy() always returns
an independent DenseVector.
"""

from __future__ import annotations

from typing import Any, Iterator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylinear.core.exceptions import ValidationError
from pylinear.core.layouts import (
    LAYOUT_DENSE,
    LAYOUT_STRIDE,
    LAYOUT_MAP,
    LAYOUT_VAR,
    CAPABILITY_VIEW_VALUES,
    CAPABILITY_CONTIGUOUS,
)
from pylinear.core.protocols import ColumnStore
from pylinear.core.compute.tolerances import DEFAULT_EQUALS_TOL
from pylinear.core.validation import (
    check_array,
    check_1d,
    check_index,
    check_indexes,
    check_same_size,
)


class _VectorBase:
    """Operations shared by every vector layout."""

    _capabilities: frozenset[str] = frozenset()
    _layout: str = ''

    @property
    def layout(self) -> str:
        return self._layout

    def size(self) -> int:
        raise NotImplementedError

    def get(self, i: int) -> float:
        raise NotImplementedError

    def set(self, i: int, value: float) -> None:
        raise NotImplementedError

    def values(self) -> NDArray[np.float64]:
        raise NotImplementedError

    def assign(self, values: ArrayLike) -> None:
        raise NotImplementedError

    def map(self, indexes: ArrayLike) -> '_VectorBase':
        raise NotImplementedError

    def inc(self, i: int, value: float) -> None:
        self.set(i, self.get(i) + value)

    def supports(self, capability: str) -> bool:
        return capability in self._capabilities

    def copy(self) -> DenseVector:
        """Deep copy into a fresh dense vector."""
        return DenseVector(np.array(self.values(), dtype=np.float64))

    def map_copy(self, indexes: ArrayLike) -> DenseVector:
        """Copy of the selected logical positions."""
        idx = check_indexes(indexes, self.size(), 'indexes')
        return DenseVector(np.array(self.values()[idx], dtype=np.float64))

    def as_matrix(self, by_rows: bool = False):
        """Copy into a (size x 1) matrix, or (1 x size) when by_rows."""
        from pylinear.dense.matrix import DenseMatrix

        vals = np.array(self.values(), dtype=np.float64)
        shape = (1, vals.size) if by_rows else (vals.size, 1)
        return DenseMatrix.wrap(vals.reshape(shape))

    def deep_equals(self, other: Any, tol: float = DEFAULT_EQUALS_TOL) -> bool:
        """Same size and every element within tol (NaN equals NaN)."""
        if not hasattr(other, 'size') or not callable(other.size):
            return False
        if self.size() != other.size():
            return False
        a = self.values()
        b = np.asarray(other.values())
        return bool(np.all((np.abs(a - b) <= tol) | (np.isnan(a) & np.isnan(b))))

    def __len__(self) -> int:
        return self.size()

    def __getitem__(self, i: int) -> float:
        return self.get(i)

    def __setitem__(self, i: int, value: float) -> None:
        self.set(i, value)

    def __iter__(self) -> Iterator[float]:
        for x in self.values():
            yield float(x)

    def __array__(self, dtype=None, copy=None) -> NDArray:
        vals = self.values()
        if copy:
            vals = np.array(vals)
        return vals if dtype is None else vals.astype(dtype)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size()}, values={self.values()!r})"


class DenseVector(_VectorBase):
    """
    Contiguous run of a backing array: logical i -> array[offset + i].

    Construction:
        DenseVector.zeros(5)
        DenseVector.wrap([1.0, 2.0, 3.0])     # aliases float64 ndarrays
        DenseVector(array, offset=2, size=3)  # window into an existing array
    """

    _layout = LAYOUT_DENSE
    _capabilities = frozenset({CAPABILITY_VIEW_VALUES, CAPABILITY_CONTIGUOUS})

    def __init__(
        self,
        array: NDArray[np.float64],
        offset: int = 0,
        size: int | None = None,
    ):
        if array.dtype != np.float64 or array.ndim != 1:
            raise ValidationError(
                f"array: expected 1D float64 storage, got {array.ndim}D {array.dtype}"
            )
        if size is None:
            size = array.size - offset
        if offset < 0 or size < 0 or offset + size > array.size:
            raise ValidationError(
                f"DenseVector: window [{offset}, {offset + size}) "
                f"exceeds storage of length {array.size}"
            )
        self._array = array
        self._offset = int(offset)
        self._size = int(size)

    # === Factories ===

    @classmethod
    def zeros(cls, size: int) -> DenseVector:
        return cls(np.zeros(size, dtype=np.float64))

    @classmethod
    def ones(cls, size: int) -> DenseVector:
        return cls(np.ones(size, dtype=np.float64))

    @classmethod
    def fill(cls, size: int, value: float) -> DenseVector:
        return cls(np.full(size, value, dtype=np.float64))

    @classmethod
    def wrap(cls, values: ArrayLike) -> DenseVector:
        """
        Vector over the given values.

        A 1-D float64 ndarray is aliased, not copied; anything else is
        converted into fresh storage.
        """
        if isinstance(values, np.ndarray) and values.dtype == np.float64 \
                and values.ndim == 1 and values.flags.c_contiguous:
            return cls(values)
        arr = check_array(values, 'values')
        check_1d(arr, 'values')
        return cls(np.ascontiguousarray(arr))

    @classmethod
    def copy_of(cls, source: Any) -> DenseVector:
        """Independent copy of any vector or 1-D array-like."""
        if hasattr(source, 'values') and callable(source.values):
            return cls(np.array(source.values(), dtype=np.float64))
        arr = check_array(source, 'source')
        check_1d(arr, 'source')
        return cls(np.array(arr, dtype=np.float64))

    @classmethod
    def seq(cls, start: float, end: float | None = None, step: float = 1.0) -> DenseVector:
        """Values start, start + step, ... below end (seq(n) is 0..n-1)."""
        if end is None:
            start, end = 0.0, start
        return cls(np.arange(start, end, step, dtype=np.float64))

    @classmethod
    def random(
        cls,
        size: int,
        distribution: Any = None,
        seed: int | np.random.Generator | None = None,
    ) -> DenseVector:
        """
        Vector of draws from a scipy.stats frozen distribution.

        Args:
            size: Number of elements
            distribution: Frozen distribution (default standard normal)
            seed: Seed or Generator passed as random_state
        """
        from scipy import stats

        dist = stats.norm() if distribution is None else distribution
        draws = np.asarray(dist.rvs(size=size, random_state=seed), dtype=np.float64)
        return cls(np.ascontiguousarray(draws.reshape(size)))

    # === Element access ===

    def size(self) -> int:
        return self._size

    def get(self, i: int) -> float:
        return float(self._array[self._offset + check_index(i, self._size, 'get')])

    def set(self, i: int, value: float) -> None:
        self._array[self._offset + check_index(i, self._size, 'set')] = value

    def inc(self, i: int, value: float) -> None:
        self._array[self._offset + check_index(i, self._size, 'inc')] += value

    def values(self) -> NDArray[np.float64]:
        return self._array[self._offset:self._offset + self._size]

    def assign(self, values: ArrayLike) -> None:
        vals = np.asarray(values, dtype=np.float64)
        if vals.ndim != 0:
            check_same_size(self._size, vals.size, 'assign')
            vals = vals.reshape(-1)
        self._array[self._offset:self._offset + self._size] = vals

    def map(self, indexes: ArrayLike) -> MapVector:
        idx = check_indexes(indexes, self._size, 'indexes')
        return MapVector(self._array, self._offset + idx)


class StrideVector(_VectorBase):
    """
    Strided walk over a backing array: logical i -> array[offset + i * stride].

    Used for matrix rows of column-major storage and matrix columns of
    row-major storage.
    """

    _layout = LAYOUT_STRIDE

    def __init__(
        self,
        array: NDArray[np.float64],
        offset: int,
        stride: int,
        size: int,
    ):
        if array.dtype != np.float64 or array.ndim != 1:
            raise ValidationError(
                f"array: expected 1D float64 storage, got {array.ndim}D {array.dtype}"
            )
        if stride < 1:
            raise ValidationError(f"stride: expected >= 1, got {stride}")
        if size < 0 or offset < 0 or (size > 0 and offset + (size - 1) * stride >= array.size):
            raise ValidationError(
                f"StrideVector: offset {offset} stride {stride} size {size} "
                f"exceeds storage of length {array.size}"
            )
        self._array = array
        self._offset = int(offset)
        self._stride = int(stride)
        self._size = int(size)
        caps = {CAPABILITY_VIEW_VALUES}
        if self._stride == 1:
            caps.add(CAPABILITY_CONTIGUOUS)
        self._capabilities = frozenset(caps)

    def size(self) -> int:
        return self._size

    def _pos(self, i: int, name: str) -> int:
        return self._offset + check_index(i, self._size, name) * self._stride

    def get(self, i: int) -> float:
        return float(self._array[self._pos(i, 'get')])

    def set(self, i: int, value: float) -> None:
        self._array[self._pos(i, 'set')] = value

    def inc(self, i: int, value: float) -> None:
        self._array[self._pos(i, 'inc')] += value

    def values(self) -> NDArray[np.float64]:
        if self._size == 0:
            return self._array[0:0]
        end = self._offset + (self._size - 1) * self._stride + 1
        return self._array[self._offset:end:self._stride]

    def assign(self, values: ArrayLike) -> None:
        vals = np.asarray(values, dtype=np.float64)
        if vals.ndim != 0:
            check_same_size(self._size, vals.size, 'assign')
            vals = vals.reshape(-1)
        self.values()[...] = vals

    def map(self, indexes: ArrayLike) -> MapVector:
        idx = check_indexes(indexes, self._size, 'indexes')
        return MapVector(self._array, self._offset + idx * self._stride)


class MapVector(_VectorBase):
    """
    Index-mapped view: logical i -> array[indexes[i]].

    values() returns a copy since fancy indexing cannot alias; writes go
    through set() or assign().
    """

    _layout = LAYOUT_MAP

    def __init__(self, array: NDArray[np.float64], indexes: ArrayLike):
        if array.dtype != np.float64 or array.ndim != 1:
            raise ValidationError(
                f"array: expected 1D float64 storage, got {array.ndim}D {array.dtype}"
            )
        self._array = array
        self._indexes = check_indexes(indexes, array.size, 'indexes')

    def size(self) -> int:
        return int(self._indexes.size)

    def get(self, i: int) -> float:
        return float(self._array[self._indexes[check_index(i, self.size(), 'get')]])

    def set(self, i: int, value: float) -> None:
        self._array[self._indexes[check_index(i, self.size(), 'set')]] = value

    def inc(self, i: int, value: float) -> None:
        self._array[self._indexes[check_index(i, self.size(), 'inc')]] += value

    def values(self) -> NDArray[np.float64]:
        return self._array[self._indexes]

    def assign(self, values: ArrayLike) -> None:
        vals = np.asarray(values, dtype=np.float64)
        if vals.ndim != 0:
            check_same_size(self.size(), vals.size, 'assign')
            vals = vals.reshape(-1)
        self._array[self._indexes] = vals

    def map(self, indexes: ArrayLike) -> MapVector:
        idx = check_indexes(indexes, self.size(), 'indexes')
        return MapVector(self._array, self._indexes[idx])


class _MappedStore:
    """ColumnStore exposing selected positions of another store."""

    def __init__(self, store: ColumnStore, indexes: NDArray[np.intp]):
        self._store = store
        self._indexes = indexes

    def __len__(self) -> int:
        return int(self._indexes.size)

    def __getitem__(self, i: int) -> float:
        return self._store[int(self._indexes[i])]

    def __setitem__(self, i: int, value: float) -> None:
        self._store[int(self._indexes[i])] = value


class VarVector(_VectorBase):
    """
    Vector backed by an external column store.

    Any object with __len__, __getitem__ and __setitem__ works: lists,
    array.array('d'), another vector, or a matrix line adapter. The size
    is fixed when the vector is created.
    """

    _layout = LAYOUT_VAR

    def __init__(self, store: ColumnStore):
        if not isinstance(store, ColumnStore):
            raise ValidationError(
                f"store: expected a mutable sequence, got {type(store).__name__}"
            )
        self._store = store
        self._size = len(store)

    def size(self) -> int:
        return self._size

    def get(self, i: int) -> float:
        return float(self._store[check_index(i, self._size, 'get')])

    def set(self, i: int, value: float) -> None:
        self._store[check_index(i, self._size, 'set')] = float(value)

    def values(self) -> NDArray[np.float64]:
        return np.fromiter(
            (self._store[i] for i in range(self._size)),
            dtype=np.float64,
            count=self._size,
        )

    def assign(self, values: ArrayLike) -> None:
        vals = np.asarray(values, dtype=np.float64)
        if vals.ndim == 0:
            vals = np.full(self._size, float(vals))
        check_same_size(self._size, vals.size, 'assign')
        for i, x in enumerate(vals.reshape(-1)):
            self._store[i] = float(x)

    def map(self, indexes: ArrayLike) -> VarVector:
        idx = check_indexes(indexes, self._size, 'indexes')
        return VarVector(_MappedStore(self._store, idx))
