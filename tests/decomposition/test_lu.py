"""
Tests for LU factorization.

Validates:
    - P A = L U for both elimination variants, square and tall
    - Gaussian and Crout produce the same factors
    - Singular input factors, sets is_non_singular False, warns, and
      refuses solve()/inv()
    - det, solve (vector and matrix right-hand sides), inv
    - Shape errors (wide input, mismatched right-hand side)
"""

import numpy as np
import pytest

from pylinear.core.exceptions import DimensionError, SingularMatrixError, ValidationError
from pylinear.dense import DenseMatrix, DenseVector
from pylinear.decomposition import LU_METHODS, lu


# ═══════════════════════════════════════════════════════════════════════
# Factorization
# ═══════════════════════════════════════════════════════════════════════


class TestFactors:

    @pytest.mark.parametrize("method", LU_METHODS)
    def test_reconstructs_square(self, square_matrix, method):
        f = lu(square_matrix, method=method)
        pa = f.permutation_matrix.values() @ square_matrix
        np.testing.assert_allclose(f.l.values() @ f.u.values(), pa, rtol=1e-10, atol=1e-12)

    @pytest.mark.parametrize("method", LU_METHODS)
    def test_reconstructs_tall(self, tall_matrix, method):
        f = lu(tall_matrix, method=method)
        assert f.l.shape == (8, 5)
        assert f.u.shape == (5, 5)
        np.testing.assert_allclose(
            f.l.values() @ f.u.values(), tall_matrix[f.pivots], rtol=1e-10, atol=1e-12
        )

    def test_factor_shapes(self, square_matrix):
        f = lu(square_matrix)
        l, u = f.l.values(), f.u.values()
        np.testing.assert_array_equal(np.diag(l), np.ones(6))
        np.testing.assert_array_equal(np.triu(l, 1), np.zeros((6, 6)))
        np.testing.assert_array_equal(np.tril(u, -1), np.zeros((6, 6)))
        assert np.all(np.abs(np.tril(l, -1)) <= 1.0)

    def test_methods_agree(self, square_matrix):
        g = lu(square_matrix, method='gaussian')
        c = lu(square_matrix, method='crout')
        np.testing.assert_array_equal(g.pivots, c.pivots)
        assert g.l.deep_equals(c.l, tol=1e-10)
        assert g.u.deep_equals(c.u, tol=1e-10)

    def test_metadata(self, square_matrix):
        f = lu(square_matrix, method='crout')
        assert f.method == 'crout'
        assert f.backend_name == 'cpu_lu_crout'
        assert f.info['is_non_singular'] is True
        assert 'factorization' in f.timing
        assert f.warnings == ()

    def test_input_not_modified(self, square_matrix):
        before = square_matrix.copy()
        lu(square_matrix)
        np.testing.assert_array_equal(square_matrix, before)

    def test_accepts_matrix_views(self, square_matrix):
        m = DenseMatrix.wrap(square_matrix)
        f = lu(m.t())
        np.testing.assert_allclose(
            f.l.values() @ f.u.values(), square_matrix.T[f.pivots], rtol=1e-10, atol=1e-12
        )

    def test_factors_are_fresh_copies(self, square_matrix):
        f = lu(square_matrix)
        l = f.l
        l.set(0, 0, 99.0)
        assert f.l.get(0, 0) == 1.0


# ═══════════════════════════════════════════════════════════════════════
# Determinant, solve, inverse
# ═══════════════════════════════════════════════════════════════════════


class TestSolve:

    def test_det_example(self):
        assert lu([[4.0, 3.0], [6.0, 3.0]]).det() == pytest.approx(-6.0)

    @pytest.mark.parametrize("method", LU_METHODS)
    def test_det_matches_numpy(self, square_matrix, method):
        assert lu(square_matrix, method=method).det() == pytest.approx(
            np.linalg.det(square_matrix), rel=1e-10
        )

    def test_solve_vector(self, square_matrix, rng):
        b = rng.standard_normal(6)
        x = lu(square_matrix).solve(b)
        assert isinstance(x, DenseVector)
        np.testing.assert_allclose(square_matrix @ x.values(), b, atol=1e-10)

    def test_solve_matrix(self, square_matrix, rng):
        b = rng.standard_normal((6, 3))
        x = lu(square_matrix, method='crout').solve(DenseMatrix.wrap(b))
        assert x.shape == (6, 3)
        np.testing.assert_allclose(square_matrix @ x.values(), b, atol=1e-10)

    def test_inv(self, square_matrix):
        inv = lu(square_matrix).inv()
        np.testing.assert_allclose(inv.values() @ square_matrix, np.eye(6), atol=1e-10)

    def test_rhs_rows_mismatch(self, square_matrix):
        with pytest.raises(DimensionError, match="right-hand side has 5 rows"):
            lu(square_matrix).solve(np.ones(5))

    def test_tall_solve_rejected(self, tall_matrix):
        f = lu(tall_matrix)
        with pytest.raises(DimensionError, match="square"):
            f.solve(np.ones(8))
        with pytest.raises(DimensionError, match="square"):
            f.det()


# ═══════════════════════════════════════════════════════════════════════
# Singular and invalid input
# ═══════════════════════════════════════════════════════════════════════


class TestSingular:

    @pytest.mark.parametrize("method", LU_METHODS)
    def test_singular_factors_without_error(self, method):
        f = lu([[1.0, 2.0], [2.0, 4.0]], method=method)
        assert f.is_non_singular is False
        assert f.det() == 0.0
        assert any("singular" in w for w in f.warnings)

    def test_singular_solve_raises(self):
        f = lu([[1.0, 2.0], [2.0, 4.0]])
        with pytest.raises(SingularMatrixError) as exc_info:
            f.solve([1.0, 1.0])
        assert exc_info.value.matrix_name == "A"
        with pytest.raises(SingularMatrixError):
            f.inv()

    def test_zero_matrix(self):
        f = lu(np.zeros((3, 3)))
        assert not f.is_non_singular


class TestInvalidInput:

    def test_wide_rejected(self):
        with pytest.raises(DimensionError, match="rows >= cols"):
            lu(np.ones((2, 3)))

    def test_unknown_method(self):
        with pytest.raises(ValidationError, match="unknown 'doolittle'"):
            lu(np.eye(2), method='doolittle')

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError, match="non-finite"):
            lu([[1.0, np.nan], [0.0, 1.0]])

    def test_one_dimensional_rejected(self):
        with pytest.raises(DimensionError):
            lu([1.0, 2.0])
