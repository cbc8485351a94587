"""
Core protocols for pylinear.

These define the structural interfaces that every storage layout and every
factorization backend satisfies. We use Protocol (structural typing) rather
than ABC (nominal typing) so user containers can take part without
inheriting from library classes.

Design Principles:
    - Minimal contracts: indexed access, bulk access, views, copies
    - Capability-driven: use supports() for layout-specific features
    - Layout-agnostic: algorithms only see get/set/values, never offsets
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Type variables for generic payloads
P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type


@runtime_checkable
class ColumnStore(Protocol):
    """
    External mutable sequence of doubles backing a variable vector.

    Python lists, array.array('d') and 1-D numpy arrays all qualify.
    """

    def __len__(self) -> int:
        ...

    def __getitem__(self, index: int) -> float:
        ...

    def __setitem__(self, index: int, value: float) -> None:
        ...


@runtime_checkable
class Vector(Protocol):
    """
    Fixed-size sequence of doubles over some physical storage.

    Logical position i maps to a physical location through the layout's
    indexing rule; algorithms never see that rule. Views returned by map()
    share storage with their source, so writes through either are visible
    through both.
    """

    @property
    def layout(self) -> str:
        """Layout tag from pylinear.core.layouts."""
        ...

    def size(self) -> int:
        ...

    def get(self, i: int) -> float:
        ...

    def set(self, i: int, value: float) -> None:
        ...

    def inc(self, i: int, value: float) -> None:
        ...

    def values(self) -> NDArray[np.float64]:
        """
        Logical contents as a 1-D array.

        Aliases storage when supports('view_values') is True, otherwise a
        fresh copy.
        """
        ...

    def assign(self, values: ArrayLike) -> None:
        """Bulk write of all logical positions."""
        ...

    def copy(self) -> 'Vector':
        ...

    def map(self, indexes: ArrayLike) -> 'Vector':
        ...

    def supports(self, capability: str) -> bool:
        """
        Check if this vector supports a given capability.

        Note:
            Unknown capabilities MUST return False, never raise.
        """
        ...


@runtime_checkable
class Matrix(Protocol):
    """
    Fixed-shape two-dimensional array of doubles over some physical storage.

    Row, column, range and transpose views alias the source storage;
    copy() always produces an independent row-major matrix.
    """

    @property
    def layout(self) -> str:
        ...

    def rows(self) -> int:
        ...

    def cols(self) -> int:
        ...

    def get(self, i: int, j: int) -> float:
        ...

    def set(self, i: int, j: int, value: float) -> None:
        ...

    def inc(self, i: int, j: int, value: float) -> None:
        ...

    def values(self) -> NDArray[np.float64]:
        ...

    def assign(self, values: ArrayLike) -> None:
        ...

    def copy(self) -> 'Matrix':
        ...

    def map_row(self, i: int) -> Vector:
        ...

    def map_col(self, j: int) -> Vector:
        ...

    def t(self, copy: bool = False) -> 'Matrix':
        ...

    def supports(self, capability: str) -> bool:
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for factorization backends.

    Each backend takes a validated DecompositionDesign and produces a
    factorization payload inside a Result envelope. Backends are stateless;
    all configuration is passed at construction time.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{factorization}[_{variant}]'
        Examples: 'cpu_lu_gaussian', 'cpu_qr_householder', 'cpu_svd'
        """
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Run the factorization.

        Raises:
            ConvergenceError: If an iterative core exceeds its cap
            DimensionError: If the design has the wrong shape
        """
        ...


def is_vector(obj: Any) -> bool:
    """True if obj satisfies the Vector protocol."""
    return isinstance(obj, Vector) and not isinstance(obj, Matrix)


def is_matrix(obj: Any) -> bool:
    """True if obj satisfies the Matrix protocol."""
    return isinstance(obj, Matrix)
