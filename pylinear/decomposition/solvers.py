"""
Solver dispatch for decompositions.

Provides one public factory per decomposition: lu(), qr(), cholesky(),
eigen() and svd(). Each accepts a Matrix or a 2-D array-like, factors a
private copy and returns an immutable solution.
"""

from __future__ import annotations

from typing import Any, Literal

from pylinear.core.exceptions import ValidationError
from pylinear.core.protocols import Matrix
from pylinear.core.compute.tolerances import MAX_SWEEPS_PER_VALUE
from pylinear.decomposition.design import DecompositionDesign
from pylinear.decomposition.solution import (
    LUSolution,
    QRSolution,
    CholeskySolution,
    EigenSolution,
    SVDSolution,
)
from pylinear.decomposition.backends.cpu import (
    CPULUBackend,
    CPUQRBackend,
    CPUCholeskyBackend,
    CPUEigenBackend,
    CPUSVDBackend,
)


LUMethod = Literal['gaussian', 'crout']
LU_METHODS = ('gaussian', 'crout')


def _ensure_design(a: Any | DecompositionDesign) -> DecompositionDesign:
    """Convert a matrix or raw array to a DecompositionDesign if needed."""
    if isinstance(a, DecompositionDesign):
        return a
    if isinstance(a, Matrix):
        return DecompositionDesign.from_matrix(a)
    return DecompositionDesign.from_array(a)


def _check_max_sweeps(max_sweeps: int) -> None:
    if max_sweeps < 1:
        raise ValidationError(f"max_sweeps: must be >= 1, got {max_sweeps}")


def _get_lu_backend(method: LUMethod) -> CPULUBackend:
    """Select the LU elimination variant."""
    if method == 'gaussian':
        return CPULUBackend('gaussian')
    elif method == 'crout':
        return CPULUBackend('crout')
    raise ValidationError(f"method: unknown {method!r}, expected one of {LU_METHODS}")


def lu(a: Any, *, method: LUMethod = 'gaussian') -> LUSolution:
    """
    LU factorization with partial pivoting.

    Args:
        a: Matrix or 2-D array-like with rows >= cols
        method: 'gaussian' (right-looking elimination) or 'crout'
            (left-looking dot-product variant)

    Returns:
        LUSolution; a singular input is reported by is_non_singular,
        not by an exception

    Raises:
        DimensionError: If rows < cols
        ValidationError: If method is unknown or the input is not finite

    Example:
        >>> from pylinear.decomposition import lu
        >>> f = lu([[4.0, 3.0], [6.0, 3.0]])
        >>> f.det()
        -6.0
    """
    be = _get_lu_backend(method)
    design = _ensure_design(a)
    design.require_tall('lu')
    return LUSolution(_result=be.solve(design), _design=design)


def qr(a: Any) -> QRSolution:
    """
    Householder QR factorization.

    Raises:
        DimensionError: If rows < cols
    """
    design = _ensure_design(a)
    design.require_tall('qr')
    return QRSolution(_result=CPUQRBackend().solve(design), _design=design)


def cholesky(a: Any) -> CholeskySolution:
    """
    Cholesky factorization A = L L'.

    Input that is not symmetric positive definite still factors; the
    solution's is_spd flag is False and solve() raises.

    Raises:
        DimensionError: If A is not square

    Example:
        >>> from pylinear.decomposition import cholesky
        >>> c = cholesky([[4, 12, -16], [12, 37, -43], [-16, -43, 98]])
        >>> c.l.values()
        array([[ 2.,  0.,  0.],
               [ 6.,  1.,  0.],
               [-8.,  5.,  3.]])
    """
    design = _ensure_design(a)
    design.require_square('cholesky')
    return CholeskySolution(_result=CPUCholeskyBackend().solve(design), _design=design)


def eigen(a: Any, *, max_sweeps: int = MAX_SWEEPS_PER_VALUE) -> EigenSolution:
    """
    Eigenvalues and eigenvectors of a real square matrix.

    Args:
        a: Square matrix or 2-D array-like
        max_sweeps: QR/QL sweeps allowed per eigenvalue

    Raises:
        DimensionError: If A is not square
        ConvergenceError: If an eigenvalue needs more than max_sweeps sweeps
    """
    _check_max_sweeps(max_sweeps)
    design = _ensure_design(a)
    design.require_square('eigen')
    be = CPUEigenBackend(max_sweeps=max_sweeps)
    return EigenSolution(_result=be.solve(design), _design=design)


def svd(a: Any, *, max_sweeps: int = MAX_SWEEPS_PER_VALUE) -> SVDSolution:
    """
    Economy singular value decomposition A = U S V'.

    Any shape is accepted; with k = min(rows, cols), U is rows x k, S is
    k x k and V is cols x k.

    Args:
        a: Matrix or 2-D array-like
        max_sweeps: QR passes allowed per singular value

    Raises:
        ConvergenceError: If a singular value does not converge

    Example:
        >>> from pylinear.decomposition import svd
        >>> svd([[3.0, 0.0], [0.0, 4.0]]).singular_values.values()
        array([4., 3.])
    """
    _check_max_sweeps(max_sweeps)
    design = _ensure_design(a)
    be = CPUSVDBackend(max_sweeps=max_sweeps)
    return SVDSolution(_result=be.solve(design), _design=design)
