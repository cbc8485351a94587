"""
Decomposition solution types.

Contains the parameter payloads produced by backends and the user-facing
solution wrappers. Payload arrays are read-only; every accessor that
returns a matrix or vector hands out a fresh copy, so a solution never
aliases caller storage and is safe to share across threads.
"""

from dataclasses import dataclass
from typing import Any, Mapping, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pylinear.core.result import Result
from pylinear.core.exceptions import (
    DimensionError,
    NotPositiveDefiniteError,
    SingularMatrixError,
    ValidationError,
)
from pylinear.core.compute.precision import safe_ratio
from pylinear.core.protocols import is_vector
from pylinear.dense.coerce import to_operand
from pylinear.dense.vector import DenseVector
from pylinear.dense.matrix import DenseMatrix
from pylinear.multiply import dot, dot_diag
from pylinear.decomposition.backends import lu as lu_kernels
from pylinear.decomposition.backends import qr as qr_kernels
from pylinear.decomposition.backends import cholesky as cholesky_kernels
from pylinear.decomposition.backends.eigen import block_diagonal
from pylinear.decomposition.backends.svd import numerical_rank, rank_tolerance

if TYPE_CHECKING:
    from pylinear.decomposition.design import DecompositionDesign


def _rhs(b: Any, n_rows: int, operation: str) -> tuple[NDArray[np.floating[Any]], bool]:
    """Right-hand side as a 2-D array, plus whether it came in as a vector."""
    operand = to_operand(b, 'B')
    as_vector = is_vector(operand)
    values = np.array(operand.values(), dtype=np.float64)
    if as_vector:
        values = values.reshape(-1, 1)
    if values.shape[0] != n_rows:
        raise DimensionError(
            f"{operation}: right-hand side has {values.shape[0]} rows, expected {n_rows}",
            expected=n_rows,
            actual=values.shape[0],
        )
    return values, as_vector


def _wrap(x: NDArray[np.floating[Any]], as_vector: bool) -> DenseVector | DenseMatrix:
    if as_vector:
        return DenseVector(np.array(x[:, 0], dtype=np.float64))
    return DenseMatrix.wrap(np.array(x, dtype=np.float64, order='C'))


class _SolutionBase:
    """Accessors shared by every decomposition solution."""

    _result: Result[Any]

    @property
    def info(self) -> Mapping[str, Any]:
        return self._result.info

    @property
    def timing(self) -> Mapping[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings


# ═══════════════════════════════════════════════════════════════════════
# LU
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LUParams:
    """
    Parameter payload for LU.

    lu packs the unit lower factor below the diagonal and U on and above it.
    """
    lu: NDArray[np.floating[Any]]
    pivots: NDArray[np.intp]
    pivot_sign: int
    is_non_singular: bool
    method: str


@dataclass(frozen=True)
class LUSolution(_SolutionBase):
    """
    LU factorization with partial pivoting: A[pivots, :] = L U.

    A singular factorization is kept and can be inspected; only solve()
    and inv() refuse it.
    """
    _result: Result[LUParams]
    _design: 'DecompositionDesign'

    @property
    def l(self) -> DenseMatrix:
        """Unit lower trapezoidal factor (rows x cols)."""
        return DenseMatrix.wrap(lu_kernels.lower(self._result.params.lu))

    @property
    def u(self) -> DenseMatrix:
        """Upper triangular factor (cols x cols)."""
        return DenseMatrix.wrap(lu_kernels.upper(self._result.params.lu))

    @property
    def pivots(self) -> NDArray[np.intp]:
        return self._result.params.pivots.copy()

    @property
    def pivot_sign(self) -> int:
        return self._result.params.pivot_sign

    @property
    def is_non_singular(self) -> bool:
        return self._result.params.is_non_singular

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def permutation_matrix(self) -> DenseMatrix:
        """P with P A = L U."""
        piv = self._result.params.pivots
        p = np.zeros((piv.size, piv.size), dtype=np.float64)
        p[np.arange(piv.size), piv] = 1.0
        return DenseMatrix.wrap(p)

    def det(self) -> float:
        """Determinant; square matrices only."""
        self._design.require_square('LU.det')
        params = self._result.params
        return lu_kernels.determinant(params.lu, params.pivot_sign)

    def solve(self, b: Any) -> DenseVector | DenseMatrix:
        """
        Solve A X = B.

        Args:
            b: Vector or matrix with as many rows as A

        Returns:
            DenseVector for a vector right-hand side, else DenseMatrix

        Raises:
            DimensionError: If A is not square or B's rows do not match
            SingularMatrixError: If the factorization is singular
        """
        self._design.require_square('LU.solve')
        values, as_vector = _rhs(b, self._design.n_rows, 'LU.solve')
        params = self._result.params
        if not params.is_non_singular:
            raise SingularMatrixError(
                f"LU.solve: matrix {self._design.name} is singular",
                matrix_name=self._design.name,
                expected_rank=self._design.n_cols,
            )
        return _wrap(lu_kernels.lu_solve(params.lu, params.pivots, values), as_vector)

    def inv(self) -> DenseMatrix:
        """Inverse of A, as solve(I)."""
        return self.solve(DenseMatrix.identity(self._design.n_rows))

    def __repr__(self) -> str:
        return (
            f"LUSolution(shape=({self._design.n_rows}, {self._design.n_cols}), "
            f"method={self.method!r}, non_singular={self.is_non_singular})"
        )


# ═══════════════════════════════════════════════════════════════════════
# QR
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class QRParams:
    """Householder vectors packed with R's strict upper part, plus R's diagonal."""
    qr: NDArray[np.floating[Any]]
    r_diag: NDArray[np.floating[Any]]
    is_full_rank: bool


@dataclass(frozen=True)
class QRSolution(_SolutionBase):
    """Householder QR: A = Q R with Q (rows x cols) and R (cols x cols)."""
    _result: Result[QRParams]
    _design: 'DecompositionDesign'

    @property
    def h(self) -> DenseMatrix:
        """Householder vectors, one per column (lower trapezoidal)."""
        return DenseMatrix.wrap(qr_kernels.householder_vectors(self._result.params.qr))

    @property
    def q(self) -> DenseMatrix:
        return DenseMatrix.wrap(qr_kernels.orthogonal(self._result.params.qr))

    @property
    def r(self) -> DenseMatrix:
        params = self._result.params
        return DenseMatrix.wrap(qr_kernels.upper(params.qr, params.r_diag))

    @property
    def r_diag(self) -> DenseVector:
        return DenseVector(self._result.params.r_diag.copy())

    @property
    def is_full_rank(self) -> bool:
        return self._result.params.is_full_rank

    def solve(self, b: Any) -> DenseVector | DenseMatrix:
        """
        Least squares solution of A X = B.

        Raises:
            DimensionError: If B's rows do not match A's
            SingularMatrixError: If A is rank deficient
        """
        values, as_vector = _rhs(b, self._design.n_rows, 'QR.solve')
        params = self._result.params
        if not params.is_full_rank:
            rank = int(np.sum(params.r_diag != 0.0))
            raise SingularMatrixError(
                f"QR.solve: matrix {self._design.name} is rank deficient: "
                f"rank={rank}, expected={self._design.n_cols}",
                matrix_name=self._design.name,
                rank=rank,
                expected_rank=self._design.n_cols,
            )
        return _wrap(qr_kernels.qr_solve(params.qr, params.r_diag, values), as_vector)

    def __repr__(self) -> str:
        return (
            f"QRSolution(shape=({self._design.n_rows}, {self._design.n_cols}), "
            f"full_rank={self.is_full_rank})"
        )


# ═══════════════════════════════════════════════════════════════════════
# Cholesky
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class CholeskyParams:
    l: NDArray[np.floating[Any]]
    is_spd: bool
    min_pivot: float


@dataclass(frozen=True)
class CholeskySolution(_SolutionBase):
    """Cholesky factorization A = L L' with an SPD flag set during the pass."""
    _result: Result[CholeskyParams]
    _design: 'DecompositionDesign'

    @property
    def l(self) -> DenseMatrix:
        return DenseMatrix.wrap(self._result.params.l.copy())

    @property
    def is_spd(self) -> bool:
        return self._result.params.is_spd

    def _require_spd(self, operation: str) -> None:
        params = self._result.params
        if not params.is_spd:
            raise NotPositiveDefiniteError(
                f"{operation}: matrix {self._design.name} is not symmetric positive definite",
                matrix_name=self._design.name,
                min_eigenvalue=params.min_pivot,
            )

    def solve(self, b: Any) -> DenseVector | DenseMatrix:
        """
        Solve A X = B by forward then backward substitution.

        Raises:
            DimensionError: If B's rows do not match A's
            NotPositiveDefiniteError: If A failed the SPD checks
        """
        values, as_vector = _rhs(b, self._design.n_rows, 'Cholesky.solve')
        self._require_spd('Cholesky.solve')
        return _wrap(cholesky_kernels.cholesky_solve(self._result.params.l, values), as_vector)

    def inv(self) -> DenseMatrix:
        return self.solve(DenseMatrix.identity(self._design.n_rows))

    def det(self) -> float:
        """prod(diag(L))**2; meaningful only for SPD input."""
        self._require_spd('Cholesky.det')
        return cholesky_kernels.determinant(self._result.params.l)

    def __repr__(self) -> str:
        return f"CholeskySolution(n={self._design.n_rows}, spd={self.is_spd})"


# ═══════════════════════════════════════════════════════════════════════
# Eigen
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class EigenParams:
    """
    Eigenvalues as real and imaginary parts, eigenvectors as columns of v.

    Symmetric input: real ascending, imag zero. General input: order as
    produced by the Schur iteration; a complex pair occupies two adjacent
    entries and two columns of v (real part, then imaginary part).
    """
    real: NDArray[np.floating[Any]]
    imag: NDArray[np.floating[Any]]
    v: NDArray[np.floating[Any]]
    is_symmetric: bool


@dataclass(frozen=True)
class EigenSolution(_SolutionBase):
    """Eigen decomposition A V = V D."""
    _result: Result[EigenParams]
    _design: 'DecompositionDesign'

    @property
    def real(self) -> DenseVector:
        return DenseVector(self._result.params.real.copy())

    @property
    def imag(self) -> DenseVector:
        return DenseVector(self._result.params.imag.copy())

    @property
    def v(self) -> DenseMatrix:
        return DenseMatrix.wrap(self._result.params.v.copy())

    @property
    def d(self) -> DenseMatrix:
        """Block diagonal eigenvalue matrix; 2 x 2 blocks for complex pairs."""
        params = self._result.params
        return DenseMatrix.wrap(block_diagonal(params.real, params.imag))

    @property
    def is_symmetric(self) -> bool:
        return self._result.params.is_symmetric

    def power(self, p: float) -> DenseMatrix:
        """
        A**p as V diag(lambda**p) V'.

        Raises:
            ValidationError: If A is not symmetric
        """
        if not self.is_symmetric:
            raise ValidationError(
                f"Eigen.power: matrix {self._design.name} is not symmetric"
            )
        params = self._result.params
        with np.errstate(invalid='ignore', divide='ignore'):
            scaled = np.power(params.real, p)
        v = DenseMatrix.wrap(params.v.copy())
        return dot(dot_diag(v, scaled), v.t())

    def __repr__(self) -> str:
        return f"EigenSolution(n={self._design.n_rows}, symmetric={self.is_symmetric})"


# ═══════════════════════════════════════════════════════════════════════
# SVD
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SVDParams:
    """Economy factors A = U diag(s) V', s descending and non-negative."""
    u: NDArray[np.floating[Any]]
    s: NDArray[np.floating[Any]]
    v: NDArray[np.floating[Any]]


@dataclass(frozen=True)
class SVDSolution(_SolutionBase):
    """Singular value decomposition."""
    _result: Result[SVDParams]
    _design: 'DecompositionDesign'

    @property
    def u(self) -> DenseMatrix:
        return DenseMatrix.wrap(self._result.params.u.copy())

    @property
    def s(self) -> DenseMatrix:
        """Diagonal matrix of singular values."""
        return DenseMatrix.diagonal(self._result.params.s)

    @property
    def singular_values(self) -> DenseVector:
        return DenseVector(self._result.params.s.copy())

    @property
    def v(self) -> DenseMatrix:
        return DenseMatrix.wrap(self._result.params.v.copy())

    def norm2(self) -> float:
        """Largest singular value (0 for an empty matrix)."""
        s = self._result.params.s
        return float(s[0]) if s.size else 0.0

    def cond(self) -> float:
        """s_max / s_min; inf for a singular matrix."""
        s = self._result.params.s
        if s.size == 0:
            return float('nan')
        return safe_ratio(float(s[0]), float(s[-1]))

    def inverse_cond(self) -> float:
        """s_min / s_max; 0 for a singular matrix."""
        s = self._result.params.s
        if s.size == 0:
            return float('nan')
        return safe_ratio(float(s[-1]), float(s[0]))

    def rank_tolerance(self) -> float:
        return rank_tolerance(self._result.params.s, self._design.n_rows, self._design.n_cols)

    def rank(self) -> int:
        """Number of singular values above max(rows, cols) * s[0] * eps."""
        return numerical_rank(self._result.params.s, self._design.n_rows, self._design.n_cols)

    def __repr__(self) -> str:
        return (
            f"SVDSolution(shape=({self._design.n_rows}, {self._design.n_cols}), "
            f"rank={self.rank()})"
        )
