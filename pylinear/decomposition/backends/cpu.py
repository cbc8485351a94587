"""
CPU backends for the decompositions.

Each backend implements the Backend protocol for
DecompositionDesign -> *Params: it runs the kernels from the sibling
modules on the design's private copy, times the phases, and records
non-fatal numerical findings as warnings on the Result.
"""

from typing import Any
import numpy as np

from pylinear.core.result import Result
from pylinear.core.compute.timing import Timer
from pylinear.core.compute.tolerances import MAX_SWEEPS_PER_VALUE
from pylinear.decomposition.design import DecompositionDesign
from pylinear.decomposition.solution import (
    LUParams,
    QRParams,
    CholeskyParams,
    EigenParams,
    SVDParams,
)
from pylinear.decomposition.backends import lu as lu_kernels
from pylinear.decomposition.backends import qr as qr_kernels
from pylinear.decomposition.backends import cholesky as cholesky_kernels
from pylinear.decomposition.backends import eigen as eigen_kernels
from pylinear.decomposition.backends import svd as svd_kernels


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


class CPULUBackend:
    """
    LU with partial pivoting.

    method='gaussian' eliminates right-looking; method='crout' finishes
    one column at a time with dot products.
    """

    def __init__(self, method: str = 'gaussian'):
        self._method = method

    @property
    def name(self) -> str:
        return f'cpu_lu_{self._method}'

    def solve(self, design: DecompositionDesign) -> Result[LUParams]:
        with Timer() as timer:
            with timer.section('factorization'):
                if self._method == 'crout':
                    factors = lu_kernels.lu_crout(design.a)
                else:
                    factors = lu_kernels.lu_gaussian(design.a)
                non_singular = lu_kernels.is_non_singular(factors.lu)

        warnings: tuple[str, ...] = ()
        if not non_singular:
            warnings = (f"matrix {design.name} is singular: U has a zero pivot",)

        params = LUParams(
            lu=_frozen(factors.lu),
            pivots=_frozen(factors.piv),
            pivot_sign=factors.pivot_sign,
            is_non_singular=non_singular,
            method=self._method,
        )
        info: dict[str, Any] = {
            'method': self._method,
            'is_non_singular': non_singular,
            'pivot_sign': factors.pivot_sign,
        }
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )


class CPUQRBackend:
    """Householder QR."""

    @property
    def name(self) -> str:
        return 'cpu_qr_householder'

    def solve(self, design: DecompositionDesign) -> Result[QRParams]:
        with Timer() as timer:
            with timer.section('householder'):
                factors = qr_kernels.qr_householder(design.a)
                full_rank = qr_kernels.is_full_rank(factors.r_diag)

        warnings: tuple[str, ...] = ()
        if not full_rank:
            warnings = (f"matrix {design.name} is rank deficient: R has a zero diagonal entry",)

        params = QRParams(
            qr=_frozen(factors.qr),
            r_diag=_frozen(factors.r_diag),
            is_full_rank=full_rank,
        )
        return Result(
            params=params,
            info={'method': 'householder', 'is_full_rank': full_rank},
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )


class CPUCholeskyBackend:
    """Row-oriented Cholesky with an SPD flag."""

    @property
    def name(self) -> str:
        return 'cpu_cholesky'

    def solve(self, design: DecompositionDesign) -> Result[CholeskyParams]:
        with Timer() as timer:
            with timer.section('factorization'):
                factors = cholesky_kernels.cholesky_lower(design.a)

        warnings: tuple[str, ...] = ()
        if not factors.is_spd:
            warnings = (
                f"matrix {design.name} is not symmetric positive definite "
                f"(smallest pivot {factors.min_pivot:.6g})",
            )

        params = CholeskyParams(
            l=_frozen(factors.l),
            is_spd=factors.is_spd,
            min_pivot=factors.min_pivot,
        )
        return Result(
            params=params,
            info={'method': 'cholesky', 'is_spd': factors.is_spd},
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )


class CPUEigenBackend:
    """
    Eigen decomposition.

    Symmetric input takes tred2 + tql2; anything else takes
    orthes + hqr2. Symmetry is exact equality of A and A'.
    """

    def __init__(self, max_sweeps: int = MAX_SWEEPS_PER_VALUE):
        self._max_sweeps = max_sweeps
        self._symmetric: bool | None = None

    @property
    def name(self) -> str:
        if self._symmetric is None:
            return 'cpu_eigen'
        return 'cpu_eigen_symmetric' if self._symmetric else 'cpu_eigen_general'

    def solve(self, design: DecompositionDesign) -> Result[EigenParams]:
        """
        Raises:
            ConvergenceError: If an eigenvalue needs more than max_sweeps sweeps
        """
        with Timer() as timer:
            n = design.n_rows
            symmetric = design.is_symmetric
            self._symmetric = symmetric

            if n == 0:
                real = np.zeros(0)
                imag = np.zeros(0)
                v = np.zeros((0, 0))
                sweeps = 0
            elif symmetric:
                v = np.array(design.a, dtype=np.float64)
                with timer.section('tridiagonalize'):
                    real, e = eigen_kernels.tred2(v)
                with timer.section('diagonalize'):
                    sweeps = eigen_kernels.tql2(real, e, v, max_sweeps=self._max_sweeps)
                imag = np.zeros(n, dtype=np.float64)
            else:
                h = np.array(design.a, dtype=np.float64)
                with timer.section('hessenberg'):
                    v = eigen_kernels.orthes(h)
                with timer.section('schur'):
                    real, imag, sweeps = eigen_kernels.hqr2(h, v, max_sweeps=self._max_sweeps)

        n_complex = int(np.sum(imag != 0.0))
        params = EigenParams(
            real=_frozen(real),
            imag=_frozen(imag),
            v=_frozen(v),
            is_symmetric=symmetric,
        )
        info: dict[str, Any] = {
            'method': 'tred2_tql2' if symmetric else 'orthes_hqr2',
            'is_symmetric': symmetric,
            'iterations': sweeps,
            'n_complex': n_complex,
        }
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


class CPUSVDBackend:
    """
    Golub-Kahan SVD.

    Wide input (rows < cols) is decomposed through its transpose with the
    roles of U and V exchanged.
    """

    def __init__(self, max_sweeps: int = MAX_SWEEPS_PER_VALUE):
        self._max_sweeps = max_sweeps

    @property
    def name(self) -> str:
        return 'cpu_svd'

    def solve(self, design: DecompositionDesign) -> Result[SVDParams]:
        """
        Raises:
            ConvergenceError: If a singular value needs more than max_sweeps passes
        """
        with Timer() as timer:
            transposed = design.n_rows < design.n_cols
            a = design.a.T if transposed else design.a
            with timer.section('golub_kahan'):
                factors = svd_kernels.svd_golub_kahan(a, max_sweeps=self._max_sweeps)
            with timer.section('rank'):
                rank = svd_kernels.numerical_rank(factors.s, design.n_rows, design.n_cols)

        u, v = (factors.v, factors.u) if transposed else (factors.u, factors.v)

        warnings: tuple[str, ...] = ()
        full = min(design.n_rows, design.n_cols)
        if rank < full:
            warnings = (f"matrix {design.name} is rank deficient: rank={rank}, expected={full}",)

        params = SVDParams(
            u=_frozen(np.ascontiguousarray(u)),
            s=_frozen(factors.s),
            v=_frozen(np.ascontiguousarray(v)),
        )
        info: dict[str, Any] = {
            'method': 'golub_kahan',
            'iterations': factors.sweeps,
            'rank': rank,
            'transposed': transposed,
        }
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )
