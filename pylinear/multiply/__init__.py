"""
Matrix multiplication engine.

Public API:
    dot(a, b, *, strategy='auto', max_workers=None, leaf_size=64)
    dot_diag(A, v), dot_diag_t(A, v)
    STRATEGIES

Every strategy computes the same product up to rounding:

    >>> from pylinear.multiply import dot
    >>> c1 = dot(a, b, strategy='ijk')
    >>> c2 = dot(a, b, strategy='strassen')
    >>> c1.deep_equals(c2, tol=1e-9)
    True
"""

from pylinear.multiply.solvers import (
    dot,
    dot_diag,
    dot_diag_t,
    STRATEGIES,
    PARALLEL_MIN_WORK,
)
from pylinear.multiply import kernels

__all__ = [
    "dot",
    "dot_diag",
    "dot_diag_t",
    "STRATEGIES",
    "PARALLEL_MIN_WORK",
    "kernels",
]
