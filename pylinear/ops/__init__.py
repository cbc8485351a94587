"""
Elementwise arithmetic, reductions and sorting.

Public API:
    elementwise: add/sub/mul/div (in place), add_into/sub_into/mul_into/
                 div_into (write to a target), apply, apply_into, fma,
                 cut, cut_into, neg, absolute, sqrt, exp, log
    reductions:  sum, nansum, prod, nanprod, nancount, mean, nanmean,
                 variance, nanvariance, sd, min, max, argmin, argmax,
                 cumsum, cumprod, norm, normalize, dot, dot_bilinear,
                 dot_bilinear_diag, trace, diag, scatter, is_symmetric
    sorting:     quicksort, quicksort_indirect, stabilize, sort_values,
                 sort_indexes

Reductions shadow builtins (sum, min, max), so import the module rather
than the names:

    >>> from pylinear.ops import reductions as R
    >>> R.variance([1.0, 2.0, 3.0, 4.0])
    1.6666666666666667
"""

from pylinear.ops import elementwise, reductions, sorting
from pylinear.ops.elementwise import (
    add,
    sub,
    mul,
    div,
    add_into,
    sub_into,
    mul_into,
    div_into,
    apply,
    apply_into,
    fma,
    cut,
    cut_into,
)
from pylinear.ops.sorting import (
    quicksort,
    quicksort_indirect,
    stabilize,
    sort_values,
    sort_indexes,
)

__all__ = [
    "elementwise",
    "reductions",
    "sorting",
    "add",
    "sub",
    "mul",
    "div",
    "add_into",
    "sub_into",
    "mul_into",
    "div_into",
    "apply",
    "apply_into",
    "fma",
    "cut",
    "cut_into",
    "quicksort",
    "quicksort_indirect",
    "stabilize",
    "sort_values",
    "sort_indexes",
]
