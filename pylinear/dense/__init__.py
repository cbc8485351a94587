"""
Storage and view layer.

Vectors and matrices over a single backing array with an index-mapping
rule. Views (rows, columns, ranges, index maps, transposes) alias the
storage of their source; copy() always produces independent dense storage.

Public API:
    DenseVector, StrideVector, MapVector, VarVector
    DenseMatrix, StripeMatrix, MapMatrix
    to_vector(x), to_matrix(x)

Example:
    >>> from pylinear.dense import DenseMatrix
    >>> m = DenseMatrix.from_rows([[1, 2, 3], [4, 5, 6]])
    >>> col = m.map_col(1)
    >>> col.set(0, 20.0)
    >>> m.get(0, 1)
    20.0
"""

from pylinear.dense.vector import DenseVector, StrideVector, MapVector, VarVector
from pylinear.dense.matrix import DenseMatrix, StripeMatrix, MapMatrix
from pylinear.dense.coerce import to_vector, to_matrix, to_operand

__all__ = [
    "DenseVector",
    "StrideVector",
    "MapVector",
    "VarVector",
    "DenseMatrix",
    "StripeMatrix",
    "MapMatrix",
    "to_vector",
    "to_matrix",
    "to_operand",
]
