"""
Exception hierarchy for pylinear.

All exceptions inherit from PyLinearError so callers can catch any
library-specific error in one place. Kernels raise the most specific
class that applies.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages name both the expected and the actual value
    - Shape errors are raised before any computation starts
    - Singular and non-SPD states are recorded on the factorization and
      raised only when a solve needs them
"""


class PyLinearError(Exception):
    """Base exception for all pylinear errors."""
    pass


class ValidationError(PyLinearError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks
    (non-numeric data, unknown strategy names, empty reductions).
    """
    pass


class DimensionError(ValidationError):
    """
    Operand shapes are incorrect or inconsistent.

    Raised when vector lengths differ, when matrix shapes are not
    conformant for an operation, or when a factorization gets a matrix
    of the wrong shape.

    Attributes:
        expected: The shape (or size) the operation required, if known
        actual: The shape (or size) it received, if known
    """

    def __init__(
        self,
        message: str,
        expected: tuple[int, ...] | int | None = None,
        actual: tuple[int, ...] | int | None = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class NumericalError(PyLinearError):
    """
    Numerical computation failed.

    Base class for errors arising from the numerical state of a
    factorization rather than from its inputs' shapes.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or rank deficient.

    Raised by solve() and inv() on LU and QR factorizations whose
    recorded state says no unique solution exists.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Rank required for a unique solution
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not symmetric positive definite.

    Raised by CholeskySolution.solve() when the factorized input failed
    the symmetry or positive-pivot checks.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        min_eigenvalue: Smallest pivot (or eigenvalue) seen, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue


class ConvergenceError(PyLinearError):
    """
    Iterative algorithm failed to converge.

    Raised when the eigenvalue or singular value QR iterations exceed
    their iteration cap without deflating.

    Attributes:
        iterations: Number of iterations completed
        final_change: Size of the last off-diagonal element, if known
        reason: Why convergence failed (e.g., 'max_iterations')
        threshold: The deflation threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
