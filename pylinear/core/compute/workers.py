"""
Worker-pool sizing for the parallel multiplication kernels.

Provides the worker count and the row partitioning shared by the
row-parallel matrix product and the blocked matrix-vector product.
"""

import os

from pylinear.core.exceptions import ValidationError

# Environment variable overriding the default worker count
WORKERS_ENV_VAR = 'PYLINEAR_NUM_WORKERS'


def default_workers() -> int:
    """
    Number of worker threads for parallel kernels.

    Reads PYLINEAR_NUM_WORKERS when set, else os.cpu_count().

    Raises:
        ValidationError: If the environment override is not a positive int
    """
    override = os.environ.get(WORKERS_ENV_VAR)
    if override is not None:
        try:
            n = int(override)
        except ValueError as e:
            raise ValidationError(
                f"{WORKERS_ENV_VAR}: expected a positive integer, got {override!r}"
            ) from e
        if n < 1:
            raise ValidationError(
                f"{WORKERS_ENV_VAR}: expected a positive integer, got {n}"
            )
        return n
    return os.cpu_count() or 1


def resolve_workers(max_workers: int | None) -> int:
    """
    Resolve a caller's max_workers argument.

    None means default_workers(); anything else must be >= 1.
    """
    if max_workers is None:
        return default_workers()
    if int(max_workers) < 1:
        raise ValidationError(f"max_workers: expected >= 1, got {max_workers}")
    return int(max_workers)


def row_chunks(n_rows: int, parts: int) -> list[tuple[int, int]]:
    """
    Split [0, n_rows) into at most `parts` contiguous half-open ranges.

    Ranges are disjoint, cover every row, and differ in length by at most
    one. Empty input yields an empty list.
    """
    if n_rows <= 0:
        return []
    parts = max(1, min(parts, n_rows))
    base, extra = divmod(n_rows, parts)
    chunks = []
    start = 0
    for k in range(parts):
        end = start + base + (1 if k < extra else 0)
        chunks.append((start, end))
        start = end
    return chunks


def fixed_chunks(n_rows: int, block: int) -> list[tuple[int, int]]:
    """Split [0, n_rows) into consecutive ranges of `block` rows."""
    return [(s, min(s + block, n_rows)) for s in range(0, n_rows, block)]
