"""
Tests for reductions.

Validates:
    - Scalar and per-axis reductions on vectors and matrices
    - nan* variants skip non-finite values
    - Arg-extrema skip NaN and break ties by first occurrence
    - Norm special cases (p <= 0, p = inf)
    - Products: dot, bilinear forms, trace, diag, scatter
"""

import math

import numpy as np
import pytest

from pylinear.core.exceptions import DimensionError, ValidationError
from pylinear.dense import DenseMatrix, DenseVector
from pylinear.ops import reductions as R


@pytest.fixture
def m23():
    return DenseMatrix.from_rows([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])


# ═══════════════════════════════════════════════════════════════════════
# Sums and moments
# ═══════════════════════════════════════════════════════════════════════


class TestSums:

    def test_sum_and_prod(self):
        assert R.sum([1.0, 2.0, 3.0]) == 6.0
        assert R.prod([1.0, 2.0, 3.0]) == 6.0

    def test_sum_propagates_nan(self):
        assert math.isnan(R.sum([1.0, np.nan]))
        assert math.isnan(R.prod([2.0, np.nan]))
        assert math.isnan(R.mean([1.0, np.nan, 3.0]))
        assert math.isnan(R.variance([1.0, np.nan, 3.0]))

    def test_nan_variants_skip_non_finite(self):
        x = [1.0, np.nan, 2.0, np.inf]
        assert R.nansum(x) == 3.0
        assert R.nanprod(x) == 2.0
        assert R.nancount(x) == 2
        assert R.nanmean(x) == 1.5

    def test_matrix_axes(self, m23):
        assert R.sum(m23) == 21.0
        np.testing.assert_array_equal(R.sum(m23, axis=0).values(), [5.0, 7.0, 9.0])
        np.testing.assert_array_equal(R.sum(m23, axis=1).values(), [6.0, 15.0])

    def test_bad_axis(self, m23):
        with pytest.raises(ValidationError, match="axis"):
            R.sum(m23, axis=3)


class TestMoments:

    def test_mean(self):
        assert R.mean([1.0, 2.0, 3.0, 4.0]) == 2.5

    def test_mean_empty_is_nan(self):
        assert math.isnan(R.mean(DenseVector.zeros(0)))

    def test_variance(self):
        assert R.variance([1.0, 2.0, 3.0, 4.0]) == pytest.approx(5.0 / 3.0)
        assert R.sd([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]) == pytest.approx(
            np.std([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0], ddof=1)
        )

    def test_variance_single_value_is_nan(self):
        assert math.isnan(R.variance([3.0]))

    def test_variance_large_offset(self, rng):
        """Shifted two-pass formula keeps precision under a large mean."""
        x = 1e9 + rng.standard_normal(1000)
        assert R.variance(x) == pytest.approx(np.var(x, ddof=1), rel=1e-9)

    def test_nanvariance(self):
        assert R.nanvariance([1.0, np.nan, 3.0]) == pytest.approx(2.0)

    def test_column_variance(self, m23):
        np.testing.assert_allclose(R.variance(m23, axis=0).values(), [4.5, 4.5, 4.5])


# ═══════════════════════════════════════════════════════════════════════
# Extrema
# ═══════════════════════════════════════════════════════════════════════


class TestExtrema:

    def test_first_occurrence(self):
        assert R.argmin([3.0, 1.0, 1.0]) == 1
        assert R.argmax([5.0, 2.0, 5.0]) == 0

    def test_nan_skipped(self):
        x = [np.nan, 2.0, 1.0, np.nan]
        assert R.argmin(x) == 2
        assert R.argmax(x) == 1
        assert R.min(x) == 1.0
        assert R.max(x) == 2.0

    def test_all_nan(self):
        assert R.argmin([np.nan, np.nan]) == 0
        assert math.isnan(R.min([np.nan, np.nan]))

    def test_empty_raises(self):
        with pytest.raises(ValidationError, match="empty"):
            R.min(DenseVector.zeros(0))

    def test_matrix_argmin_row_major(self, m23):
        assert R.argmax(m23) == 5
        np.testing.assert_array_equal(R.argmin(m23, axis=1).values(), [0.0, 0.0])


# ═══════════════════════════════════════════════════════════════════════
# Running transforms and norms
# ═══════════════════════════════════════════════════════════════════════


class TestRunning:

    def test_cumsum_in_place(self):
        v = DenseVector.wrap([1.0, 2.0, 3.0])
        assert R.cumsum(v) is v
        np.testing.assert_array_equal(v.values(), [1.0, 3.0, 6.0])

    def test_cumprod(self):
        np.testing.assert_array_equal(R.cumprod([1.0, 2.0, 3.0]).values(), [1.0, 2.0, 6.0])


class TestNorm:

    def test_p_norms(self):
        x = [3.0, -4.0]
        assert R.norm(x) == 5.0
        assert R.norm(x, 1) == 7.0
        assert R.norm(x, 3) == pytest.approx((27.0 + 64.0) ** (1.0 / 3.0))

    def test_zero_p_is_size(self):
        assert R.norm([1.0, 2.0, 3.0], 0) == 3.0

    def test_inf_ignores_nan(self):
        assert R.norm([1.0, np.nan, -7.0], np.inf) == 7.0

    def test_normalize(self):
        v = R.normalize(DenseVector.wrap([3.0, 4.0]))
        np.testing.assert_allclose(v.values(), [0.6, 0.8])

    def test_normalize_zero_vector(self):
        v = R.normalize(DenseVector.zeros(2))
        np.testing.assert_array_equal(v.values(), [0.0, 0.0])


# ═══════════════════════════════════════════════════════════════════════
# Products and matrix scalars
# ═══════════════════════════════════════════════════════════════════════


class TestProducts:

    def test_dot(self):
        assert R.dot([1.0, 2.0], [3.0, 4.0]) == 11.0

    def test_dot_size_mismatch(self):
        with pytest.raises(DimensionError, match=r"2 vs 3"):
            R.dot([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_bilinear(self):
        m = [[2.0, 0.0], [0.0, 3.0]]
        assert R.dot_bilinear([1.0, 1.0], m) == 5.0
        assert R.dot_bilinear([1.0, 0.0], m, [0.0, 1.0]) == 0.0
        assert R.dot_bilinear_diag([1.0, 2.0], [2.0, 3.0]) == 14.0

    def test_bilinear_shape(self):
        with pytest.raises(DimensionError):
            R.dot_bilinear([1.0, 1.0], np.eye(3))

    def test_trace_and_diag(self, m23):
        assert R.trace([[1.0, 2.0], [3.0, 4.0]]) == 5.0
        np.testing.assert_array_equal(R.diag(m23).values(), [1.0, 5.0])
        with pytest.raises(DimensionError, match="square"):
            R.trace(m23)

    def test_scatter(self, rng):
        x = rng.standard_normal((20, 3))
        expected = np.cov(x, rowvar=False) * 19
        np.testing.assert_allclose(R.scatter(x).values(), expected, rtol=1e-10)

    def test_is_symmetric(self, m23):
        assert R.is_symmetric([[1.0, 2.0], [2.0, 1.0]])
        assert not R.is_symmetric([[1.0, 2.0], [2.0001, 1.0]])
        assert not R.is_symmetric(m23)
