"""
Tests for the pylinear exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyLinearError)
    - Diagnostic attributes on DimensionError, SingularMatrixError,
      NotPositiveDefiniteError, ConvergenceError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pylinear.core.exceptions import (
    ConvergenceError,
    DimensionError,
    NotPositiveDefiniteError,
    NumericalError,
    PyLinearError,
    SingularMatrixError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyLinearError."""

    @pytest.mark.parametrize("exc", [
        ValidationError("bad input"),
        DimensionError("wrong shape"),
        NumericalError("failed"),
        SingularMatrixError("singular"),
        NotPositiveDefiniteError("not PD"),
        ConvergenceError("stuck", iterations=100),
    ])
    def test_is_pylinear_error(self, exc):
        assert isinstance(exc, PyLinearError)

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_singular_matrix_error_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise SingularMatrixError("singular")

    def test_not_positive_definite_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise NotPositiveDefiniteError("not PD")

    def test_convergence_error_is_not_numerical_error(self):
        """ConvergenceError inherits from PyLinearError, not NumericalError."""
        err = ConvergenceError("did not converge", iterations=100)
        assert not isinstance(err, NumericalError)

    def test_kinds_are_distinguishable(self):
        """Callers can branch on each failure kind separately."""
        kinds = {DimensionError, SingularMatrixError, ConvergenceError, NotPositiveDefiniteError}
        for kind in kinds:
            for other in kinds - {kind}:
                assert not issubclass(kind, other)


# ═══════════════════════════════════════════════════════════════════════
# DimensionError
# ═══════════════════════════════════════════════════════════════════════


class TestDimensionError:

    def test_shapes_as_attributes(self):
        err = DimensionError("dot: (2, 3) cannot multiply (4, 5)", expected=(2, 3), actual=(4, 5))
        assert err.expected == (2, 3)
        assert err.actual == (4, 5)
        assert "(2, 3)" in str(err)

    def test_defaults_are_none(self):
        err = DimensionError("wrong shape")
        assert err.expected is None
        assert err.actual is None


# ═══════════════════════════════════════════════════════════════════════
# SingularMatrixError
# ═══════════════════════════════════════════════════════════════════════


class TestSingularMatrixError:
    """SingularMatrixError carries matrix diagnostic attributes."""

    def test_all_attributes(self):
        err = SingularMatrixError(
            "A is singular",
            matrix_name="A",
            condition_number=1e18,
            rank=3,
            expected_rank=5,
        )
        assert str(err) == "A is singular"
        assert err.matrix_name == "A"
        assert err.condition_number == 1e18
        assert err.rank == 3
        assert err.expected_rank == 5

    def test_defaults_are_none(self):
        err = SingularMatrixError("singular")
        assert err.matrix_name is None
        assert err.condition_number is None
        assert err.rank is None
        assert err.expected_rank is None


# ═══════════════════════════════════════════════════════════════════════
# NotPositiveDefiniteError
# ═══════════════════════════════════════════════════════════════════════


class TestNotPositiveDefiniteError:

    def test_all_attributes(self):
        err = NotPositiveDefiniteError(
            "Cholesky failed",
            matrix_name="A",
            min_eigenvalue=-0.001,
        )
        assert str(err) == "Cholesky failed"
        assert err.matrix_name == "A"
        assert err.min_eigenvalue == -0.001

    def test_catchable_with_attributes(self):
        with pytest.raises(NotPositiveDefiniteError) as exc_info:
            raise NotPositiveDefiniteError("not PD", matrix_name="S", min_eigenvalue=-1e-8)
        assert exc_info.value.min_eigenvalue == pytest.approx(-1e-8)


# ═══════════════════════════════════════════════════════════════════════
# ConvergenceError
# ═══════════════════════════════════════════════════════════════════════


class TestConvergenceError:
    """ConvergenceError carries iteration diagnostics."""

    def test_all_attributes(self):
        err = ConvergenceError(
            "tql2 did not converge",
            iterations=100,
            final_change=1e-4,
            reason="max_iterations",
            threshold=1e-15,
        )
        assert err.iterations == 100
        assert err.final_change == 1e-4
        assert err.reason == "max_iterations"
        assert err.threshold == 1e-15

    def test_required_iterations(self):
        err = ConvergenceError("failed", 42)
        assert err.iterations == 42

    def test_defaults_are_none(self):
        err = ConvergenceError("failed", iterations=10)
        assert err.final_change is None
        assert err.reason is None
        assert err.threshold is None
