"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, rejection of non-numeric data
    - check_finite: NaN/Inf detection
    - check_ndim / check_1d / check_2d
    - check_same_size / check_same_shape / check_conformant: both operands
      named in the message
    - check_axis / check_index / check_indexes
"""

import numpy as np
import pytest

from pylinear.core.exceptions import DimensionError, ValidationError
from pylinear.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_axis,
    check_conformant,
    check_finite,
    check_index,
    check_indexes,
    check_ndim,
    check_same_shape,
    check_same_size,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to float64 and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "x")
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_float64_array_not_copied(self):
        arr = np.array([1.0, 2.0])
        assert check_array(arr, "x") is arr

    def test_float32_promoted(self):
        result = check_array(np.array([1.0, 2.0], dtype=np.float32), "x")
        assert result.dtype == np.float64

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="x"):
            check_array([1, "a", None], "x")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array(["a", "b"], "x")

    def test_rejects_complex(self):
        with pytest.raises(ValidationError, match="complex"):
            check_array(np.array([1 + 2j]), "x")


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0]), "x")

    def test_nan_and_inf_counted(self):
        with pytest.raises(ValidationError, match=r"1 NaN, 1 Inf"):
            check_finite(np.array([1.0, np.nan, np.inf]), "x")


class TestCheckNdim:

    def test_check_1d_passes(self):
        check_1d(np.zeros(3), "x")

    def test_check_2d_rejects_1d(self):
        with pytest.raises(DimensionError) as exc_info:
            check_2d(np.zeros(3), "A")
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 1

    def test_wrong_ndim_message(self):
        with pytest.raises(DimensionError, match=r"expected 1D array, got 2D"):
            check_ndim(np.zeros((2, 2)), 1, "x")


# ═══════════════════════════════════════════════════════════════════════
# Shape agreement
# ═══════════════════════════════════════════════════════════════════════


class TestShapeChecks:

    def test_same_size_passes(self):
        check_same_size(3, 3, "add")

    def test_same_size_reports_both(self):
        with pytest.raises(DimensionError, match=r"3 vs 4"):
            check_same_size(3, 4, "add")

    def test_same_shape_reports_both(self):
        with pytest.raises(DimensionError, match=r"\(2, 3\) vs \(3, 2\)"):
            check_same_shape((2, 3), (3, 2), "add")

    def test_conformant_passes(self):
        check_conformant((2, 3), (3, 5), "dot")
        check_conformant((2, 3), (3,), "dot")

    def test_conformant_reports_both_shapes(self):
        with pytest.raises(DimensionError) as exc_info:
            check_conformant((2, 3), (4, 5), "dot")
        message = str(exc_info.value)
        assert "(2, 3)" in message
        assert "(4, 5)" in message
        assert exc_info.value.expected == (2, 3)
        assert exc_info.value.actual == (4, 5)


class TestIndexChecks:

    @pytest.mark.parametrize("axis", [0, 1])
    def test_axis_passes(self, axis):
        check_axis(axis, "sum")

    def test_axis_rejects_other(self):
        with pytest.raises(ValidationError, match="axis must be 0 or 1"):
            check_axis(2, "sum")

    def test_index_in_range(self):
        assert check_index(np.int64(2), 3, "get") == 2

    @pytest.mark.parametrize("i", [-1, 3])
    def test_index_out_of_range(self, i):
        with pytest.raises(IndexError, match="out of range"):
            check_index(i, 3, "get")

    def test_indexes_converted(self):
        idx = check_indexes([2, 0], 3, "map")
        assert idx.dtype == np.intp
        np.testing.assert_array_equal(idx, [2, 0])

    def test_indexes_empty(self):
        assert check_indexes([], 3, "map").size == 0

    def test_indexes_out_of_range(self):
        with pytest.raises(IndexError, match=r"\[5\]"):
            check_indexes([0, 5], 3, "map")

    def test_indexes_must_be_integral(self):
        with pytest.raises(ValidationError, match="integers"):
            check_indexes([0.5], 3, "map")
