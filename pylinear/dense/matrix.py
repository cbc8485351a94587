"""
Matrix layouts.

    DenseMatrix   one flat array, element (i, j) at
                  offset + i * row_stride + j * col_stride. Covers
                  row-major, column-major, transposed and sub-range views.
    StripeMatrix  one array per row (array-of-rows) or per column
                  (array-of-cols).
    MapMatrix     index-mapped view over any matrix.

Row, column, range, mapped and transposed views alias the source storage.
copy() is always deep and normalizes to a row-major DenseMatrix.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from numpy.lib.stride_tricks import as_strided
from numpy.typing import ArrayLike, NDArray

from pylinear.core.exceptions import ValidationError, DimensionError
from pylinear.core.layouts import (
    LAYOUT_ROW_MAJOR,
    LAYOUT_COL_MAJOR,
    LAYOUT_STRIDED,
    LAYOUT_ROW_STRIPES,
    LAYOUT_COL_STRIPES,
    LAYOUT_MAPPED,
    CAPABILITY_VIEW_VALUES,
    CAPABILITY_CONTIGUOUS,
)
from pylinear.core.protocols import Matrix
from pylinear.core.compute.tolerances import DEFAULT_EQUALS_TOL
from pylinear.core.validation import (
    check_array,
    check_2d,
    check_index,
    check_indexes,
    check_same_shape,
)
from pylinear.dense.vector import (
    DenseVector,
    StrideVector,
    VarVector,
    _VectorBase,
)


def _check_range(start: int, end: int, size: int, name: str) -> tuple[int, int]:
    start, end = int(start), int(end)
    if start < 0 or end > size or start > end:
        raise IndexError(f"{name}: range [{start}, {end}) invalid for size {size}")
    return start, end


def _as_line(values: Any) -> NDArray[np.float64]:
    """1-D float64 array from a vector or a 1-D array-like."""
    if isinstance(values, _VectorBase):
        return np.array(values.values(), dtype=np.float64)
    arr = check_array(values, 'line')
    return arr.reshape(-1)


def _matrix_values(values: ArrayLike, shape: tuple[int, int]) -> NDArray[np.float64]:
    vals = np.asarray(values, dtype=np.float64)
    if vals.ndim != 0:
        check_same_shape(shape, vals.shape, 'assign')
    return vals


class _MatrixLine:
    """ColumnStore over one row (axis=0) or one column (axis=1) of a matrix."""

    def __init__(self, matrix: '_MatrixBase', index: int, axis: int):
        self._matrix = matrix
        self._index = index
        self._axis = axis

    def __len__(self) -> int:
        return self._matrix.cols() if self._axis == 0 else self._matrix.rows()

    def __getitem__(self, k: int) -> float:
        if self._axis == 0:
            return self._matrix.get(self._index, k)
        return self._matrix.get(k, self._index)

    def __setitem__(self, k: int, value: float) -> None:
        if self._axis == 0:
            self._matrix.set(self._index, k, value)
        else:
            self._matrix.set(k, self._index, value)


class _MatrixBase:
    """Operations shared by every matrix layout."""

    _capabilities: frozenset[str] = frozenset()
    _layout: str = ''

    @property
    def layout(self) -> str:
        return self._layout

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows(), self.cols())

    def rows(self) -> int:
        raise NotImplementedError

    def cols(self) -> int:
        raise NotImplementedError

    def get(self, i: int, j: int) -> float:
        raise NotImplementedError

    def set(self, i: int, j: int, value: float) -> None:
        raise NotImplementedError

    def values(self) -> NDArray[np.float64]:
        raise NotImplementedError

    def assign(self, values: ArrayLike) -> None:
        raise NotImplementedError

    def t(self, copy: bool = False) -> '_MatrixBase':
        raise NotImplementedError

    def inc(self, i: int, j: int, value: float) -> None:
        self.set(i, j, self.get(i, j) + value)

    def supports(self, capability: str) -> bool:
        return capability in self._capabilities

    def copy(self) -> DenseMatrix:
        """Deep copy into a fresh row-major DenseMatrix."""
        return DenseMatrix.wrap(np.array(self.values(), dtype=np.float64, order='C'))

    # === Line views ===

    def map_row(self, i: int, copy: bool = False) -> _VectorBase:
        i = check_index(i, self.rows(), 'map_row')
        line = VarVector(_MatrixLine(self, i, 0))
        return line.copy() if copy else line

    def map_col(self, j: int, copy: bool = False) -> _VectorBase:
        j = check_index(j, self.cols(), 'map_col')
        line = VarVector(_MatrixLine(self, j, 1))
        return line.copy() if copy else line

    # === Sub-matrix views ===

    def map_rows(self, indexes: ArrayLike, copy: bool = False) -> _MatrixBase:
        idx = check_indexes(indexes, self.rows(), 'map_rows')
        view = MapMatrix(self, idx, None)
        return view.copy() if copy else view

    def map_cols(self, indexes: ArrayLike, copy: bool = False) -> _MatrixBase:
        idx = check_indexes(indexes, self.cols(), 'map_cols')
        view = MapMatrix(self, None, idx)
        return view.copy() if copy else view

    def range_rows(self, start: int, end: int, copy: bool = False) -> _MatrixBase:
        start, end = _check_range(start, end, self.rows(), 'range_rows')
        return self.map_rows(np.arange(start, end), copy=copy)

    def range_cols(self, start: int, end: int, copy: bool = False) -> _MatrixBase:
        start, end = _check_range(start, end, self.cols(), 'range_cols')
        return self.map_cols(np.arange(start, end), copy=copy)

    def remove_rows(self, indexes: ArrayLike, copy: bool = False) -> _MatrixBase:
        drop = check_indexes(indexes, self.rows(), 'remove_rows')
        keep = np.setdiff1d(np.arange(self.rows()), drop)
        return self.map_rows(keep, copy=copy)

    def remove_cols(self, indexes: ArrayLike, copy: bool = False) -> _MatrixBase:
        drop = check_indexes(indexes, self.cols(), 'remove_cols')
        keep = np.setdiff1d(np.arange(self.cols()), drop)
        return self.map_cols(keep, copy=copy)

    def deep_equals(self, other: Any, tol: float = DEFAULT_EQUALS_TOL) -> bool:
        """Same shape and every element within tol (NaN equals NaN)."""
        if not isinstance(other, Matrix):
            return False
        if self.shape != (other.rows(), other.cols()):
            return False
        a = self.values()
        b = np.asarray(other.values())
        return bool(np.all((np.abs(a - b) <= tol) | (np.isnan(a) & np.isnan(b))))

    def __array__(self, dtype=None, copy=None) -> NDArray:
        vals = self.values()
        if copy:
            vals = np.array(vals)
        return vals if dtype is None else vals.astype(dtype)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.shape}, layout={self.layout!r})"


def _strides_for(order: str, rows: int, cols: int) -> tuple[int, int]:
    if order == 'row':
        return cols, 1
    if order == 'col':
        return 1, rows
    raise ValidationError(f"order: expected 'row' or 'col', got {order!r}")


class DenseMatrix(_MatrixBase):
    """
    Matrix over one flat float64 array with offset and strides.

    Element (i, j) lives at array[offset + i * row_stride + j * col_stride].
    Row-major storage has (row_stride, col_stride) = (cols, 1), column-major
    has (1, rows); transposes swap the strides and sub-ranges shift the
    offset, all in O(1) without copying.

    Construction:
        DenseMatrix.zeros(3, 4)
        DenseMatrix.zeros(3, 4, order='col')
        DenseMatrix.wrap(np_array)          # aliases contiguous float64 arrays
        DenseMatrix.from_rows([[1, 2], [3, 4]])
        DenseMatrix.identity(5)
    """

    _capabilities = frozenset({CAPABILITY_VIEW_VALUES})

    def __init__(
        self,
        array: NDArray[np.float64],
        rows: int,
        cols: int,
        offset: int = 0,
        row_stride: int | None = None,
        col_stride: int | None = None,
    ):
        if array.dtype != np.float64 or array.ndim != 1:
            raise ValidationError(
                f"array: expected 1D float64 storage, got {array.ndim}D {array.dtype}"
            )
        if row_stride is None and col_stride is None:
            row_stride, col_stride = cols, 1
        if row_stride is None or col_stride is None or row_stride < 0 or col_stride < 0:
            raise ValidationError(
                f"strides: expected two non-negative strides, got ({row_stride}, {col_stride})"
            )
        if rows < 0 or cols < 0 or offset < 0:
            raise ValidationError(
                f"DenseMatrix: invalid shape ({rows}, {cols}) or offset {offset}"
            )
        if rows > 0 and cols > 0:
            last = offset + (rows - 1) * row_stride + (cols - 1) * col_stride
            if last >= array.size:
                raise ValidationError(
                    f"DenseMatrix: shape ({rows}, {cols}) with strides "
                    f"({row_stride}, {col_stride}) exceeds storage of length {array.size}"
                )
        self._array = array
        self._rows = int(rows)
        self._cols = int(cols)
        self._offset = int(offset)
        self._row_stride = int(row_stride)
        self._col_stride = int(col_stride)

    # === Factories ===

    @classmethod
    def zeros(cls, rows: int, cols: int, order: str = 'row') -> DenseMatrix:
        rs, cs = _strides_for(order, rows, cols)
        return cls(np.zeros(rows * cols, dtype=np.float64), rows, cols, 0, rs, cs)

    @classmethod
    def ones(cls, rows: int, cols: int, order: str = 'row') -> DenseMatrix:
        return cls.fill(rows, cols, 1.0, order=order)

    @classmethod
    def fill(cls, rows: int, cols: int, value: float, order: str = 'row') -> DenseMatrix:
        rs, cs = _strides_for(order, rows, cols)
        return cls(np.full(rows * cols, value, dtype=np.float64), rows, cols, 0, rs, cs)

    @classmethod
    def wrap(cls, values: ArrayLike) -> DenseMatrix:
        """
        Matrix over the given 2-D values.

        A C- or Fortran-contiguous float64 ndarray is aliased (row-major or
        column-major respectively); anything else is copied row-major.
        """
        if isinstance(values, np.ndarray) and values.dtype == np.float64 and values.ndim == 2:
            rows, cols = values.shape
            if values.flags.c_contiguous:
                return cls(values.reshape(-1), rows, cols)
            if values.flags.f_contiguous:
                return cls(values.reshape(-1, order='F'), rows, cols, 0, 1, rows)
        arr = check_array(values, 'values')
        check_2d(arr, 'values')
        rows, cols = arr.shape
        return cls(np.ascontiguousarray(arr).reshape(-1), rows, cols)

    @classmethod
    def copy_of(cls, source: Any) -> DenseMatrix:
        """Independent row-major copy of any matrix or 2-D array-like."""
        if isinstance(source, Matrix):
            return cls.wrap(np.array(source.values(), dtype=np.float64, order='C'))
        arr = check_array(source, 'source')
        check_2d(arr, 'source')
        return cls.wrap(np.array(arr, dtype=np.float64, order='C'))

    @classmethod
    def from_rows(cls, rows: Sequence[Any]) -> DenseMatrix:
        """Stack vectors or 1-D array-likes as rows."""
        lines = [_as_line(r) for r in rows]
        if not lines:
            return cls.zeros(0, 0)
        _check_line_sizes(lines, 'from_rows')
        return cls.wrap(np.vstack(lines))

    @classmethod
    def from_cols(cls, cols: Sequence[Any]) -> DenseMatrix:
        """Stack vectors or 1-D array-likes as columns (column-major storage)."""
        lines = [_as_line(c) for c in cols]
        if not lines:
            return cls.zeros(0, 0)
        _check_line_sizes(lines, 'from_cols')
        return cls.wrap(np.asfortranarray(np.column_stack(lines)))

    @classmethod
    def identity(cls, n: int) -> DenseMatrix:
        return cls.wrap(np.eye(n, dtype=np.float64))

    @classmethod
    def diagonal(cls, values: Any) -> DenseMatrix:
        """Square matrix with the given values on the diagonal."""
        return cls.wrap(np.diag(_as_line(values)))

    @classmethod
    def random(
        cls,
        rows: int,
        cols: int,
        distribution: Any = None,
        seed: int | np.random.Generator | None = None,
    ) -> DenseMatrix:
        """Matrix of draws from a scipy.stats frozen distribution (default N(0, 1))."""
        from scipy import stats

        dist = stats.norm() if distribution is None else distribution
        draws = np.asarray(dist.rvs(size=rows * cols, random_state=seed), dtype=np.float64)
        return cls(np.ascontiguousarray(draws.reshape(rows * cols)), rows, cols)

    # === Shape and layout ===

    @property
    def layout(self) -> str:
        if self._col_stride == 1 and (self._row_stride == self._cols or self._rows <= 1):
            return LAYOUT_ROW_MAJOR
        if self._row_stride == 1 and (self._col_stride == self._rows or self._cols <= 1):
            return LAYOUT_COL_MAJOR
        return LAYOUT_STRIDED

    def supports(self, capability: str) -> bool:
        if capability == CAPABILITY_CONTIGUOUS:
            return self.layout in (LAYOUT_ROW_MAJOR, LAYOUT_COL_MAJOR)
        return capability in self._capabilities

    def rows(self) -> int:
        return self._rows

    def cols(self) -> int:
        return self._cols

    # === Element access ===

    def _pos(self, i: int, j: int, name: str) -> int:
        return (self._offset
                + check_index(i, self._rows, name) * self._row_stride
                + check_index(j, self._cols, name) * self._col_stride)

    def get(self, i: int, j: int) -> float:
        return float(self._array[self._pos(i, j, 'get')])

    def set(self, i: int, j: int, value: float) -> None:
        self._array[self._pos(i, j, 'set')] = value

    def inc(self, i: int, j: int, value: float) -> None:
        self._array[self._pos(i, j, 'inc')] += value

    def values(self) -> NDArray[np.float64]:
        """2-D view aliasing the backing storage."""
        if self._rows == 0 or self._cols == 0:
            return np.zeros((self._rows, self._cols), dtype=np.float64)
        item = self._array.itemsize
        return as_strided(
            self._array[self._offset:],
            shape=(self._rows, self._cols),
            strides=(self._row_stride * item, self._col_stride * item),
        )

    def assign(self, values: ArrayLike) -> None:
        vals = _matrix_values(values, self.shape)
        if self._rows and self._cols:
            self.values()[...] = vals

    # === Views ===

    def map_row(self, i: int, copy: bool = False) -> _VectorBase:
        i = check_index(i, self._rows, 'map_row')
        start = self._offset + i * self._row_stride
        if self._col_stride == 1:
            line = DenseVector(self._array, start, self._cols)
        elif self._cols == 0:
            line = DenseVector(self._array, 0, 0)
        else:
            line = StrideVector(self._array, start, self._col_stride, self._cols)
        return line.copy() if copy else line

    def map_col(self, j: int, copy: bool = False) -> _VectorBase:
        j = check_index(j, self._cols, 'map_col')
        start = self._offset + j * self._col_stride
        if self._row_stride == 1:
            line = DenseVector(self._array, start, self._rows)
        elif self._rows == 0:
            line = DenseVector(self._array, 0, 0)
        else:
            line = StrideVector(self._array, start, self._row_stride, self._rows)
        return line.copy() if copy else line

    def range_rows(self, start: int, end: int, copy: bool = False) -> DenseMatrix:
        start, end = _check_range(start, end, self._rows, 'range_rows')
        view = DenseMatrix(
            self._array, end - start, self._cols,
            self._offset + start * self._row_stride if end > start else 0,
            self._row_stride, self._col_stride,
        )
        return view.copy() if copy else view

    def range_cols(self, start: int, end: int, copy: bool = False) -> DenseMatrix:
        start, end = _check_range(start, end, self._cols, 'range_cols')
        view = DenseMatrix(
            self._array, self._rows, end - start,
            self._offset + start * self._col_stride if end > start else 0,
            self._row_stride, self._col_stride,
        )
        return view.copy() if copy else view

    def t(self, copy: bool = False) -> DenseMatrix:
        """Transpose view (swapped strides), or a row-major copy."""
        view = DenseMatrix(
            self._array, self._cols, self._rows,
            self._offset, self._col_stride, self._row_stride,
        )
        return view.copy() if copy else view


def _check_line_sizes(lines: list[NDArray[np.float64]], name: str) -> None:
    sizes = {line.size for line in lines}
    if len(sizes) > 1:
        raise DimensionError(f"{name}: lines have different sizes {sorted(sizes)}")


class StripeMatrix(_MatrixBase):
    """
    Matrix stored as one array per row (by_rows=True) or per column.

    Lines along the stripe direction are DenseVector views of a single
    stripe; lines across stripes are variable-backed views. Transposing
    flips the stripe direction without copying.
    """

    def __init__(
        self,
        stripes: Sequence[NDArray[np.float64]],
        by_rows: bool = True,
        line_size: int | None = None,
    ):
        stripes = list(stripes)
        for k, s in enumerate(stripes):
            if not isinstance(s, np.ndarray) or s.dtype != np.float64 or s.ndim != 1:
                raise ValidationError(f"stripes[{k}]: expected 1D float64 array")
        if stripes:
            _check_line_sizes(stripes, 'StripeMatrix')
            line_size = stripes[0].size
        elif line_size is None:
            line_size = 0
        self._stripes = stripes
        self._by_rows = bool(by_rows)
        self._line_size = int(line_size)

    @classmethod
    def zeros(cls, rows: int, cols: int, by_rows: bool = True) -> StripeMatrix:
        n, m = (rows, cols) if by_rows else (cols, rows)
        return cls([np.zeros(m, dtype=np.float64) for _ in range(n)], by_rows, m)

    @classmethod
    def from_rows(cls, rows: Sequence[Any]) -> StripeMatrix:
        return cls([np.ascontiguousarray(_as_line(r)) for r in rows], True)

    @classmethod
    def from_cols(cls, cols: Sequence[Any]) -> StripeMatrix:
        return cls([np.ascontiguousarray(_as_line(c)) for c in cols], False)

    @property
    def layout(self) -> str:
        return LAYOUT_ROW_STRIPES if self._by_rows else LAYOUT_COL_STRIPES

    def rows(self) -> int:
        return len(self._stripes) if self._by_rows else self._line_size

    def cols(self) -> int:
        return self._line_size if self._by_rows else len(self._stripes)

    def _locate(self, i: int, j: int, name: str) -> tuple[int, int]:
        i = check_index(i, self.rows(), name)
        j = check_index(j, self.cols(), name)
        return (i, j) if self._by_rows else (j, i)

    def get(self, i: int, j: int) -> float:
        s, k = self._locate(i, j, 'get')
        return float(self._stripes[s][k])

    def set(self, i: int, j: int, value: float) -> None:
        s, k = self._locate(i, j, 'set')
        self._stripes[s][k] = value

    def inc(self, i: int, j: int, value: float) -> None:
        s, k = self._locate(i, j, 'inc')
        self._stripes[s][k] += value

    def values(self) -> NDArray[np.float64]:
        """Copy of the contents as a 2-D array."""
        block = np.zeros((len(self._stripes), self._line_size), dtype=np.float64)
        for k, s in enumerate(self._stripes):
            block[k] = s
        return block if self._by_rows else np.ascontiguousarray(block.T)

    def assign(self, values: ArrayLike) -> None:
        vals = _matrix_values(values, self.shape)
        if vals.ndim == 0:
            for s in self._stripes:
                s[:] = vals
            return
        block = vals if self._by_rows else vals.T
        for k, s in enumerate(self._stripes):
            s[:] = block[k]

    def map_row(self, i: int, copy: bool = False) -> _VectorBase:
        if not self._by_rows:
            return super().map_row(i, copy=copy)
        line = DenseVector(self._stripes[check_index(i, self.rows(), 'map_row')])
        return line.copy() if copy else line

    def map_col(self, j: int, copy: bool = False) -> _VectorBase:
        if self._by_rows:
            return super().map_col(j, copy=copy)
        line = DenseVector(self._stripes[check_index(j, self.cols(), 'map_col')])
        return line.copy() if copy else line

    def t(self, copy: bool = False) -> _MatrixBase:
        view = StripeMatrix(self._stripes, not self._by_rows, self._line_size)
        return view.copy() if copy else view


class MapMatrix(_MatrixBase):
    """
    Index-mapped view: (i, j) -> source(row_indexes[i], col_indexes[j]).

    None for either index array selects every row (column) of the source.
    Views compose: mapping a MapMatrix maps its index arrays rather than
    stacking another layer.
    """

    _layout = LAYOUT_MAPPED

    def __init__(
        self,
        source: _MatrixBase,
        row_indexes: ArrayLike | None = None,
        col_indexes: ArrayLike | None = None,
    ):
        if not isinstance(source, Matrix):
            raise ValidationError(
                f"source: expected a matrix, got {type(source).__name__}"
            )
        self._source = source
        self._row_idx = (np.arange(source.rows(), dtype=np.intp) if row_indexes is None
                         else check_indexes(row_indexes, source.rows(), 'row_indexes'))
        self._col_idx = (np.arange(source.cols(), dtype=np.intp) if col_indexes is None
                         else check_indexes(col_indexes, source.cols(), 'col_indexes'))

    def rows(self) -> int:
        return int(self._row_idx.size)

    def cols(self) -> int:
        return int(self._col_idx.size)

    def _locate(self, i: int, j: int, name: str) -> tuple[int, int]:
        return (int(self._row_idx[check_index(i, self.rows(), name)]),
                int(self._col_idx[check_index(j, self.cols(), name)]))

    def get(self, i: int, j: int) -> float:
        return self._source.get(*self._locate(i, j, 'get'))

    def set(self, i: int, j: int, value: float) -> None:
        si, sj = self._locate(i, j, 'set')
        self._source.set(si, sj, value)

    def inc(self, i: int, j: int, value: float) -> None:
        si, sj = self._locate(i, j, 'inc')
        self._source.inc(si, sj, value)

    def values(self) -> NDArray[np.float64]:
        """Copy of the selected block."""
        return np.ascontiguousarray(
            np.asarray(self._source.values())[np.ix_(self._row_idx, self._col_idx)]
        )

    def assign(self, values: ArrayLike) -> None:
        vals = _matrix_values(values, self.shape)
        if self._source.supports(CAPABILITY_VIEW_VALUES):
            self._source.values()[np.ix_(self._row_idx, self._col_idx)] = vals
            return
        block = np.broadcast_to(vals, self.shape)
        for a, si in enumerate(self._row_idx):
            for b, sj in enumerate(self._col_idx):
                self._source.set(int(si), int(sj), float(block[a, b]))

    def map_rows(self, indexes: ArrayLike, copy: bool = False) -> _MatrixBase:
        idx = check_indexes(indexes, self.rows(), 'map_rows')
        view = MapMatrix(self._source, self._row_idx[idx], self._col_idx)
        return view.copy() if copy else view

    def map_cols(self, indexes: ArrayLike, copy: bool = False) -> _MatrixBase:
        idx = check_indexes(indexes, self.cols(), 'map_cols')
        view = MapMatrix(self._source, self._row_idx, self._col_idx[idx])
        return view.copy() if copy else view

    def t(self, copy: bool = False) -> _MatrixBase:
        view = MapMatrix(self._source.t(), self._col_idx, self._row_idx)
        return view.copy() if copy else view
