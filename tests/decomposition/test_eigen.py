"""
Tests for the eigen decomposition.

Validates:
    - Symmetric path: ascending real eigenvalues, orthonormal V, A V = V D
    - General path: A V = V D with 2 x 2 blocks for complex pairs
    - Eigenvalues agree with numpy
    - power() for symmetric input only
    - Iteration cap raises ConvergenceError; bad caps are rejected
"""

import numpy as np
import pytest

from pylinear.core.exceptions import ConvergenceError, DimensionError, ValidationError
from pylinear.decomposition import eigen


# ═══════════════════════════════════════════════════════════════════════
# Symmetric input
# ═══════════════════════════════════════════════════════════════════════


class TestSymmetric:

    def test_ascending_and_matches_numpy(self, symmetric_matrix):
        f = eigen(symmetric_matrix)
        real = f.real.values()
        assert f.is_symmetric
        assert np.all(np.diff(real) >= 0.0)
        np.testing.assert_allclose(real, np.linalg.eigvalsh(symmetric_matrix), atol=1e-10)
        np.testing.assert_array_equal(f.imag.values(), np.zeros(6))

    def test_av_equals_vd(self, symmetric_matrix):
        f = eigen(symmetric_matrix)
        v, d = f.v.values(), f.d.values()
        np.testing.assert_allclose(symmetric_matrix @ v, v @ d, atol=1e-10)

    def test_v_orthonormal(self, spd_matrix):
        v = eigen(spd_matrix).v.values()
        np.testing.assert_allclose(v.T @ v, np.eye(5), atol=1e-12)

    def test_metadata(self, symmetric_matrix):
        f = eigen(symmetric_matrix)
        assert f.backend_name == 'cpu_eigen_symmetric'
        assert f.info['method'] == 'tred2_tql2'
        assert f.info['n_complex'] == 0
        assert f.info['iterations'] > 0
        assert {'tridiagonalize', 'diagonalize'} <= set(f.timing)

    def test_diagonal_input(self):
        f = eigen(np.diag([3.0, 1.0, 2.0]))
        np.testing.assert_allclose(f.real.values(), [1.0, 2.0, 3.0], atol=1e-12)
        np.testing.assert_allclose(np.abs(f.v.values()), np.eye(3)[:, [1, 2, 0]], atol=1e-12)

    def test_one_by_one(self):
        f = eigen([[7.0]])
        assert f.real.values()[0] == 7.0
        assert abs(f.v.get(0, 0)) == 1.0

    def test_empty(self):
        f = eigen(np.zeros((0, 0)))
        assert f.real.size() == 0
        assert f.d.shape == (0, 0)


# ═══════════════════════════════════════════════════════════════════════
# General (nonsymmetric) input
# ═══════════════════════════════════════════════════════════════════════


class TestGeneral:

    def test_rotation_complex_pair(self):
        a = np.array([[0.0, -1.0], [1.0, 0.0]])
        f = eigen(a)
        assert not f.is_symmetric
        np.testing.assert_allclose(f.real.values(), [0.0, 0.0], atol=1e-14)
        np.testing.assert_allclose(np.sort(f.imag.values()), [-1.0, 1.0], atol=1e-14)
        assert f.info['n_complex'] == 2
        v, d = f.v.values(), f.d.values()
        np.testing.assert_allclose(a @ v, v @ d, atol=1e-12)

    def test_random_av_equals_vd(self, rng):
        a = rng.standard_normal((7, 7))
        f = eigen(a)
        v, d = f.v.values(), f.d.values()
        np.testing.assert_allclose(a @ v, v @ d, atol=1e-9)

    def test_eigenvalues_match_numpy(self, rng):
        a = rng.standard_normal((6, 6))
        f = eigen(a)
        ours = np.sort_complex(f.real.values() + 1j * f.imag.values())
        theirs = np.sort_complex(np.linalg.eigvals(a))
        np.testing.assert_allclose(ours, theirs, atol=1e-9)

    def test_upper_triangular(self):
        a = np.array([[1.0, 2.0, 3.0], [0.0, 4.0, 5.0], [0.0, 0.0, 6.0]])
        f = eigen(a)
        np.testing.assert_allclose(np.sort(f.real.values()), [1.0, 4.0, 6.0], atol=1e-12)
        v, d = f.v.values(), f.d.values()
        np.testing.assert_allclose(a @ v, v @ d, atol=1e-10)

    def test_metadata(self, rng):
        f = eigen(rng.standard_normal((4, 4)))
        assert f.backend_name == 'cpu_eigen_general'
        assert f.info['method'] == 'orthes_hqr2'
        assert {'hessenberg', 'schur'} <= set(f.timing)

    def test_zero_matrix(self):
        a = np.zeros((3, 3))
        a[0, 1] = 1.0
        f = eigen(a)
        np.testing.assert_array_equal(f.real.values(), np.zeros(3))


# ═══════════════════════════════════════════════════════════════════════
# power() and errors
# ═══════════════════════════════════════════════════════════════════════


class TestPower:

    def test_square_root(self, spd_matrix):
        root = eigen(spd_matrix).power(0.5).values()
        np.testing.assert_allclose(root @ root, spd_matrix, rtol=1e-9, atol=1e-10)

    def test_integer_power(self, symmetric_matrix):
        sq = eigen(symmetric_matrix).power(2).values()
        np.testing.assert_allclose(sq, symmetric_matrix @ symmetric_matrix, atol=1e-10)

    def test_inverse_power(self, spd_matrix):
        inv = eigen(spd_matrix).power(-1).values()
        np.testing.assert_allclose(inv @ spd_matrix, np.eye(5), atol=1e-10)

    def test_nonsymmetric_rejected(self, rng):
        with pytest.raises(ValidationError, match="not symmetric"):
            eigen(rng.standard_normal((3, 3))).power(2)


class TestErrors:

    def test_non_square(self):
        with pytest.raises(DimensionError, match="square"):
            eigen(np.ones((2, 3)))

    @pytest.mark.parametrize("sweeps", [0, -5])
    def test_bad_max_sweeps(self, sweeps):
        with pytest.raises(ValidationError, match="max_sweeps"):
            eigen(np.eye(2), max_sweeps=sweeps)

    def test_symmetric_cap(self, symmetric_matrix):
        with pytest.raises(ConvergenceError) as exc_info:
            eigen(symmetric_matrix, max_sweeps=1)
        assert exc_info.value.reason == 'max_iterations'
        assert exc_info.value.iterations == 1

    def test_general_cap(self, rng):
        with pytest.raises(ConvergenceError) as exc_info:
            eigen(rng.standard_normal((6, 6)), max_sweeps=1)
        assert exc_info.value.reason == 'max_iterations'
