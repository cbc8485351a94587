"""
Tests for Householder QR.

Validates:
    - A = Q R with orthonormal Q and upper triangular R
    - Householder vectors are lower trapezoidal
    - Least squares solve matches numpy.linalg.lstsq
    - Rank deficient input factors, warns, and refuses solve()
"""

import numpy as np
import pytest

from pylinear.core.exceptions import DimensionError, SingularMatrixError
from pylinear.dense import DenseVector
from pylinear.decomposition import qr


class TestFactors:

    def test_reconstructs_tall(self, tall_matrix):
        f = qr(tall_matrix)
        q, r = f.q.values(), f.r.values()
        assert q.shape == (8, 5)
        assert r.shape == (5, 5)
        np.testing.assert_allclose(q @ r, tall_matrix, rtol=1e-10, atol=1e-12)

    def test_q_orthonormal(self, square_matrix):
        q = qr(square_matrix).q.values()
        np.testing.assert_allclose(q.T @ q, np.eye(6), atol=1e-12)

    def test_r_upper_triangular(self, tall_matrix):
        f = qr(tall_matrix)
        r = f.r.values()
        np.testing.assert_array_equal(np.tril(r, -1), np.zeros((5, 5)))
        np.testing.assert_array_equal(np.diag(r), f.r_diag.values())

    def test_householder_vectors_lower(self, tall_matrix):
        h = qr(tall_matrix).h.values()
        assert h.shape == (8, 5)
        np.testing.assert_array_equal(np.triu(h, 1), np.zeros((8, 5)))

    def test_r_matches_numpy_up_to_sign(self, tall_matrix):
        r = qr(tall_matrix).r.values()
        r_np = np.linalg.qr(tall_matrix, mode='reduced')[1]
        np.testing.assert_allclose(np.abs(r), np.abs(r_np), rtol=1e-10, atol=1e-12)

    def test_metadata(self, tall_matrix):
        f = qr(tall_matrix)
        assert f.is_full_rank
        assert f.backend_name == 'cpu_qr_householder'
        assert 'householder' in f.timing


class TestSolve:

    def test_least_squares_vector(self, tall_matrix, rng):
        b = rng.standard_normal(8)
        x = qr(tall_matrix).solve(b)
        assert isinstance(x, DenseVector)
        expected = np.linalg.lstsq(tall_matrix, b, rcond=None)[0]
        np.testing.assert_allclose(x.values(), expected, rtol=1e-10, atol=1e-12)

    def test_least_squares_matrix(self, tall_matrix, rng):
        b = rng.standard_normal((8, 2))
        x = qr(tall_matrix).solve(b)
        expected = np.linalg.lstsq(tall_matrix, b, rcond=None)[0]
        np.testing.assert_allclose(x.values(), expected, rtol=1e-10, atol=1e-12)

    def test_square_solve_exact(self, square_matrix, rng):
        b = rng.standard_normal(6)
        x = qr(square_matrix).solve(b)
        np.testing.assert_allclose(square_matrix @ x.values(), b, atol=1e-10)

    def test_rhs_rows_mismatch(self, tall_matrix):
        with pytest.raises(DimensionError, match="expected 8"):
            qr(tall_matrix).solve(np.ones(5))


class TestRankDeficient:

    @pytest.fixture
    def deficient(self):
        return np.array([[1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])

    def test_flag_and_warning(self, deficient):
        f = qr(deficient)
        assert f.is_full_rank is False
        assert any("rank deficient" in w for w in f.warnings)
        np.testing.assert_allclose(f.q.values() @ f.r.values(), deficient, atol=1e-12)

    def test_solve_raises(self, deficient):
        with pytest.raises(SingularMatrixError) as exc_info:
            qr(deficient).solve([1.0, 2.0, 3.0])
        assert exc_info.value.rank == 1
        assert exc_info.value.expected_rank == 2

    def test_wide_rejected(self):
        with pytest.raises(DimensionError, match="rows >= cols"):
            qr(np.ones((2, 4)))
