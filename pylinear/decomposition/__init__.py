"""
Matrix decompositions.

Public API:
    lu(A, method='gaussian') -> LUSolution
    qr(A) -> QRSolution
    cholesky(A) -> CholeskySolution
    eigen(A, max_sweeps=100) -> EigenSolution
    svd(A, max_sweeps=100) -> SVDSolution

Every factory copies its input; solutions are immutable and hand out
fresh matrices and vectors. Singular, rank deficient and non-SPD inputs
factor without error and are reported through flags (is_non_singular,
is_full_rank, is_spd); solve() raises when the flag says it cannot.
"""

from pylinear.decomposition.design import DecompositionDesign
from pylinear.decomposition.solution import (
    LUParams,
    LUSolution,
    QRParams,
    QRSolution,
    CholeskyParams,
    CholeskySolution,
    EigenParams,
    EigenSolution,
    SVDParams,
    SVDSolution,
)
from pylinear.decomposition.solvers import lu, qr, cholesky, eigen, svd, LU_METHODS

__all__ = [
    # Solvers
    "lu",
    "qr",
    "cholesky",
    "eigen",
    "svd",
    "LU_METHODS",
    # Design
    "DecompositionDesign",
    # Solutions
    "LUSolution",
    "QRSolution",
    "CholeskySolution",
    "EigenSolution",
    "SVDSolution",
    # Params
    "LUParams",
    "QRParams",
    "CholeskyParams",
    "EigenParams",
    "SVDParams",
]
