"""
Generic result container for pylinear factorizations.

Every backend returns its payload inside a Result envelope so timing,
warnings and provenance are handled the same way for LU, QR, Cholesky,
eigen and singular value decompositions.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, iterations, flags)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) so a solution can be shared across threads;
      info, timing and provenance are read-only mapping proxies
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TypeVar, Generic, Any, Mapping

import numpy as np

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Library versions that produced a result."""
    from pylinear import __version__

    return {
        'pylinear_version': __version__,
        'numpy_version': np.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for factorizations.

    Type Parameters:
        P: The factorization-specific parameter payload type

    Attributes:
        params: Factorization payload (factors, pivots, flags)
        info: Structured metadata (method, iterations, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Library versions used to compute the result

    Examples:
        >>> Result(
        ...     params=LUParams(lu=lu, pivots=piv, pivot_sign=1),
        ...     info={'method': 'gaussian', 'is_non_singular': True},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_lu_gaussian'
        ... )
    """
    params: P
    info: Mapping[str, Any]
    timing: Mapping[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: Mapping[str, str] = field(default_factory=_default_provenance)

    def __post_init__(self):
        object.__setattr__(self, 'info', MappingProxyType(dict(self.info)))
        if self.timing is not None:
            object.__setattr__(self, 'timing', MappingProxyType(dict(self.timing)))
        object.__setattr__(self, 'provenance', MappingProxyType(dict(self.provenance)))
        object.__setattr__(self, 'warnings', tuple(self.warnings))

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
