"""
Numerical precision constants.

Machine epsilon and the underflow guard used by the iterative eigen and
singular value cores, plus the ratio used for condition numbers.
"""

import numpy as np


# Machine epsilon for float64, 2**-52
EPSILON_64: float = float(np.finfo(np.float64).eps)

# Underflow guard for deflation tests in the SVD iteration
TINY: float = 2.0 ** -966.0


def safe_ratio(numerator: float, denominator: float) -> float:
    """
    numerator / denominator, with x/0 giving inf (or nan for 0/0).

    Used for condition numbers, where a zero smallest singular value means
    an infinitely ill-conditioned matrix rather than an error.
    """
    if denominator == 0.0:
        return float('nan') if numerator == 0.0 else float('inf')
    return numerator / denominator
