"""
Phase timing for factorizations and products.

A decomposition backend wraps its whole run in a Timer and times each
phase (reduction, QR sweeps, rank determination) as a named section; the
result lands in Result.timing. dot() accepts an optional Timer and records
the kernel it dispatched to under the kernel's name, so callers comparing
strategies can see which one actually ran.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Wall-clock timer with named, accumulating sections.

    Usage:
        with Timer() as timer:
            with timer.section('tridiagonalize'):
                d, e = tred2(v)
            with timer.section('diagonalize'):
                tql2(d, e, v)
        timer.result()
        # {'total_seconds': 0.004, 'tridiagonalize': 0.001, 'diagonalize': 0.003}

    Entering the same section twice adds to its time and its call count;
    calls() reports the counts.
    """

    def __init__(self):
        self._sections: dict[str, float] = {}
        self._calls: dict[str, int] = {}
        self._start_time: float | None = None
        self._total: float | None = None

    def __enter__(self) -> 'Timer':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self) -> None:
        self._start_time = time.perf_counter()
        self._total = None

    def stop(self) -> None:
        if self._start_time is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._start_time

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time one phase; 'total_seconds' is reserved for the overall run."""
        if name == 'total_seconds':
            raise ValueError("'total_seconds' is reserved for the overall time")
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self._sections[name] = self._sections.get(name, 0.0) + elapsed
            self._calls[name] = self._calls.get(name, 0) + 1

    def calls(self) -> dict[str, int]:
        """How many times each section was entered."""
        return dict(self._calls)

    def result(self) -> dict[str, float]:
        """
        Overall and per-section seconds.

        Raises:
            RuntimeError: If the timer is still running
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        result = {'total_seconds': self._total}
        result.update(self._sections)
        return result


@contextmanager
def optional_section(timer: Timer | None, name: str) -> Iterator[None]:
    """timer.section(name) when a timer was supplied, else nothing."""
    if timer is None:
        yield
        return
    with timer.section(name):
        yield
