"""
Shared compute infrastructure for pylinear.

This module provides worker sizing, timing utilities, precision constants
and iteration caps shared by the multiplication kernels and the
factorization backends.

IMPORTANT: This is NOT where factorization kernels live. Those go in
decomposition/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    workers: Worker count and row partitioning for parallel kernels
    timing: Execution timing utilities
    precision: Machine epsilon, underflow guard, safe_ratio
    tolerances: Comparison tolerance and iteration caps
"""

from pylinear.core.compute.workers import (
    default_workers,
    resolve_workers,
    row_chunks,
)
from pylinear.core.compute.timing import Timer, optional_section

__all__ = [
    # Workers
    "default_workers",
    "resolve_workers",
    "row_chunks",
    # Timing
    "Timer",
    "optional_section",
]
