"""
Tests for shared compute infrastructure.

Validates:
    - Timer section accumulation, call counts and error states
    - Worker count resolution (env override, bad values)
    - Row partitioning used by the parallel kernels
    - safe_ratio
"""

import math

import pytest

from pylinear.core.compute.precision import EPSILON_64, safe_ratio
from pylinear.core.compute.timing import Timer, optional_section
from pylinear.core.compute.workers import (
    WORKERS_ENV_VAR,
    default_workers,
    fixed_chunks,
    resolve_workers,
    row_chunks,
)
from pylinear.core.exceptions import ValidationError


# ═══════════════════════════════════════════════════════════════════════
# Timer
# ═══════════════════════════════════════════════════════════════════════


class TestTimer:

    def test_sections_recorded(self):
        timer = Timer()
        timer.start()
        with timer.section('factorization'):
            pass
        with timer.section('factorization'):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'factorization'}
        assert result['total_seconds'] >= 0.0

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()

    def test_context_manager(self):
        with Timer() as timer:
            with timer.section('householder'):
                pass
        assert set(timer.result()) == {'total_seconds', 'householder'}

    def test_context_manager_stops_on_error(self):
        timer = Timer()
        with pytest.raises(ZeroDivisionError):
            with timer:
                1 / 0
        assert timer.result()['total_seconds'] >= 0.0

    def test_call_counts(self):
        with Timer() as timer:
            for _ in range(3):
                with timer.section('sweep'):
                    pass
            with timer.section('rank'):
                pass
        assert timer.calls() == {'sweep': 3, 'rank': 1}

    def test_total_seconds_reserved(self):
        timer = Timer()
        with pytest.raises(ValueError, match="reserved"):
            with timer.section('total_seconds'):
                pass

    def test_restart_clears_total(self):
        timer = Timer()
        timer.start()
        timer.stop()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()

    def test_optional_section(self):
        with optional_section(None, 'tiled'):
            pass
        with Timer() as timer:
            with optional_section(timer, 'tiled'):
                pass
        assert timer.calls() == {'tiled': 1}


# ═══════════════════════════════════════════════════════════════════════
# Workers
# ═══════════════════════════════════════════════════════════════════════


class TestWorkers:

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv(WORKERS_ENV_VAR, '3')
        assert default_workers() == 3
        assert resolve_workers(None) == 3

    @pytest.mark.parametrize("value", ['zero', '0', '-2'])
    def test_bad_env_override(self, monkeypatch, value):
        monkeypatch.setenv(WORKERS_ENV_VAR, value)
        with pytest.raises(ValidationError, match=WORKERS_ENV_VAR):
            default_workers()

    def test_default_is_positive(self, monkeypatch):
        monkeypatch.delenv(WORKERS_ENV_VAR, raising=False)
        assert default_workers() >= 1

    def test_resolve_explicit(self):
        assert resolve_workers(2) == 2

    def test_resolve_rejects_zero(self):
        with pytest.raises(ValidationError):
            resolve_workers(0)

    def test_row_chunks_cover_all_rows(self):
        chunks = row_chunks(10, 3)
        assert chunks == [(0, 4), (4, 7), (7, 10)]

    def test_row_chunks_more_parts_than_rows(self):
        assert row_chunks(2, 8) == [(0, 1), (1, 2)]

    def test_row_chunks_empty(self):
        assert row_chunks(0, 4) == []

    def test_fixed_chunks(self):
        assert fixed_chunks(5, 2) == [(0, 2), (2, 4), (4, 5)]


# ═══════════════════════════════════════════════════════════════════════
# Precision
# ═══════════════════════════════════════════════════════════════════════


class TestPrecision:

    def test_epsilon(self):
        assert EPSILON_64 == 2.0 ** -52

    def test_safe_ratio(self):
        assert safe_ratio(6.0, 3.0) == 2.0
        assert safe_ratio(1.0, 0.0) == math.inf
        assert math.isnan(safe_ratio(0.0, 0.0))

