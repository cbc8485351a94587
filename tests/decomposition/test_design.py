"""
Tests for DecompositionDesign.
"""

import numpy as np
import pytest

from pylinear.core.exceptions import DimensionError, ValidationError
from pylinear.dense import DenseMatrix
from pylinear.decomposition import DecompositionDesign, lu


class TestConstruction:

    def test_from_array_copies(self):
        data = np.array([[1.0, 2.0], [3.0, 4.0]])
        design = DecompositionDesign.from_array(data)
        data[0, 0] = 99.0
        assert design.a[0, 0] == 1.0
        assert design.n_rows == 2
        assert design.n_cols == 2
        assert design.name == 'A'

    def test_from_matrix_copies_view(self):
        m = DenseMatrix.wrap(np.arange(6.0).reshape(2, 3))
        design = DecompositionDesign.from_matrix(m.t())
        np.testing.assert_array_equal(design.a, np.arange(6.0).reshape(2, 3).T)
        m.set(0, 0, -1.0)
        assert design.a[0, 0] == 0.0

    def test_integer_input_promoted(self):
        design = DecompositionDesign.from_array([[1, 2], [3, 4]])
        assert design.a.dtype == np.float64

    def test_non_finite_rejected_with_counts(self):
        with pytest.raises(ValidationError, match=r"K: contains non-finite values \(1 NaN, 2 Inf\)"):
            DecompositionDesign.from_array([[np.nan, 2.0], [np.inf, -np.inf]], name='K')

    def test_non_finite_view_rejected(self):
        m = DenseMatrix.wrap(np.array([[1.0, np.inf], [3.0, 4.0]]))
        with pytest.raises(ValidationError, match="0 NaN, 1 Inf"):
            DecompositionDesign.from_matrix(m.t())

    def test_solver_accepts_design(self, square_matrix):
        design = DecompositionDesign.from_array(square_matrix, name='K')
        assert lu(design).info['is_non_singular'] is True


class TestShape:

    def test_symmetry_is_exact(self):
        assert DecompositionDesign.from_array([[1.0, 2.0], [2.0, 1.0]]).is_symmetric
        assert not DecompositionDesign.from_array([[1.0, 2.0], [2.0 + 1e-15, 1.0]]).is_symmetric
        assert not DecompositionDesign.from_array(np.ones((2, 3))).is_symmetric

    def test_require_square(self):
        design = DecompositionDesign.from_array(np.ones((2, 3)), name='K')
        with pytest.raises(DimensionError, match="matrix K must be square") as exc_info:
            design.require_square("eigen")
        assert exc_info.value.actual == (2, 3)

    def test_require_tall(self):
        DecompositionDesign.from_array(np.ones((3, 2))).require_tall("qr")
        with pytest.raises(DimensionError, match="rows >= cols"):
            DecompositionDesign.from_array(np.ones((2, 3))).require_tall("qr")

    def test_repr(self):
        design = DecompositionDesign.from_array(np.ones((4, 2)))
        assert repr(design) == "DecompositionDesign(n_rows=4, n_cols=2)"
