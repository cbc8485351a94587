"""
Comparison tolerance and iteration caps.

DEFAULT_EQUALS_TOL is the deep_equals() default for vectors and matrices.
MAX_SWEEPS_PER_VALUE bounds the QR sweeps tql2, hqr2 and the SVD loop may
spend on one eigenvalue or singular value before giving up.
"""

# Default absolute tolerance for deep_equals()
DEFAULT_EQUALS_TOL = 1e-12

# Iteration cap per eigenvalue / singular value before ConvergenceError
MAX_SWEEPS_PER_VALUE = 100
