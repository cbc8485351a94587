"""
DecompositionDesign: validated input for the factorizations.

Wraps the matrix to be factorized. The array is always a private float64
copy, so a factorization never writes through to the caller's storage and
later edits to that storage never reach a finished factorization.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylinear.core.exceptions import DimensionError, ValidationError
from pylinear.core.protocols import Matrix
from pylinear.core.validation import check_array, check_2d, check_finite


@dataclass(frozen=True)
class DecompositionDesign:
    """
    Design for a decomposition.

    Construction:
        DecompositionDesign.from_matrix(DenseMatrix.identity(3))
        DecompositionDesign.from_array([[4.0, 2.0], [2.0, 3.0]])
    """
    _a: NDArray[np.floating[Any]]
    _n_rows: int
    _n_cols: int
    _name: str

    @classmethod
    def from_array(cls, data, *, name: str = 'A') -> DecompositionDesign:
        """
        Build a design from a 2-D array-like.

        Parameters
        ----------
        data : array-like
            Matrix to factorize.
        name : str
            Name used in error messages.
        """
        arr = check_array(data, name)
        check_2d(arr, name)
        return cls._build(np.array(arr, dtype=np.float64, order='C'), name)

    @classmethod
    def from_matrix(cls, matrix: Matrix, *, name: str = 'A') -> DecompositionDesign:
        """Build a design from any Matrix layout (values are copied)."""
        return cls._build(np.array(matrix.values(), dtype=np.float64, order='C'), name)

    @classmethod
    def _build(cls, a: NDArray, name: str) -> DecompositionDesign:
        """Internal builder with validation."""
        if a.ndim != 2:
            raise ValidationError(f"{name}: must be 2D, got {a.ndim}D")
        check_finite(a, name)
        n_rows, n_cols = a.shape
        return cls(_a=a, _n_rows=n_rows, _n_cols=n_cols, _name=name)

    @property
    def a(self) -> NDArray[np.floating[Any]]:
        """Private copy of the matrix (n_rows x n_cols)."""
        return self._a

    @property
    def n_rows(self) -> int:
        return self._n_rows

    @property
    def n_cols(self) -> int:
        return self._n_cols

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_square(self) -> bool:
        return self._n_rows == self._n_cols

    @property
    def is_symmetric(self) -> bool:
        """Exact symmetry, A[i, j] == A[j, i] for every pair."""
        return self.is_square and bool(np.array_equal(self._a, self._a.T))

    def require_square(self, operation: str) -> None:
        """Raise DimensionError unless the matrix is square."""
        if not self.is_square:
            raise DimensionError(
                f"{operation}: matrix {self._name} must be square, got "
                f"({self._n_rows}, {self._n_cols})",
                expected=(self._n_rows, self._n_rows),
                actual=(self._n_rows, self._n_cols),
            )

    def require_tall(self, operation: str) -> None:
        """Raise DimensionError unless rows >= cols."""
        if self._n_rows < self._n_cols:
            raise DimensionError(
                f"{operation}: matrix {self._name} needs rows >= cols, got "
                f"({self._n_rows}, {self._n_cols})",
                expected=(self._n_cols, self._n_cols),
                actual=(self._n_rows, self._n_cols),
            )

    def __repr__(self) -> str:
        return f"DecompositionDesign(n_rows={self._n_rows}, n_cols={self._n_cols})"
