"""
Tests for the Vector / Matrix protocol helpers.
"""

import numpy as np

from pylinear.core.protocols import Matrix, Vector, is_matrix, is_vector
from pylinear.dense import DenseMatrix, DenseVector, MapMatrix, StripeMatrix, VarVector


class TestProtocolHelpers:

    def test_vectors(self):
        v = DenseVector.wrap(np.arange(4.0))
        assert is_vector(v)
        assert is_vector(v.map([0, 2]))
        assert is_vector(VarVector([1.0, 2.0]))
        assert not is_matrix(v)

    def test_matrices(self):
        m = DenseMatrix.wrap(np.eye(3))
        assert is_matrix(m)
        assert is_matrix(m.t())
        assert is_matrix(StripeMatrix.from_rows([[1.0, 2.0], [3.0, 4.0]]))
        assert is_matrix(MapMatrix(m, [0, 1], [2]))
        assert not is_vector(m)

    def test_plain_arrays_are_neither(self):
        assert not is_vector(np.arange(3.0))
        assert not is_matrix(np.eye(2))
        assert not is_vector([1.0, 2.0])

    def test_runtime_checkable(self):
        assert isinstance(DenseVector.zeros(2), Vector)
        assert isinstance(DenseMatrix.zeros(2, 2), Matrix)
