"""
PyLinear: dense linear algebra for Python.

Vectors and matrices over shared float64 storage with cheap views,
elementwise and reduction operations, several multiplication strategies
and a suite of classical decompositions.

Submodules:
    dense: Vector and matrix layouts and views
    ops: Elementwise arithmetic, reductions and sorting
    multiply: Matrix products with selectable strategies
    decomposition: LU, QR, Cholesky, eigen and singular value decompositions
"""

__version__ = "0.1.0"

from pylinear import core
from pylinear import dense
from pylinear import ops
from pylinear import multiply
from pylinear import decomposition

__all__ = [
    "__version__",
    "core",
    "dense",
    "ops",
    "multiply",
    "decomposition",
]
