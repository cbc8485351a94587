"""
Core infrastructure for pylinear.

This module provides shared abstractions and utilities used by the
storage, operations, multiplication and decomposition layers.

Key components:
    protocols: Vector, Matrix, ColumnStore, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    layouts: Layout tags and capability strings
    compute: Worker sizing, timing, precision, tolerances
"""

from pylinear.core.protocols import Vector, Matrix, ColumnStore, Backend
from pylinear.core.result import Result
from pylinear.core.exceptions import (
    PyLinearError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
)

__all__ = [
    # Protocols
    "Vector",
    "Matrix",
    "ColumnStore",
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyLinearError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
]
