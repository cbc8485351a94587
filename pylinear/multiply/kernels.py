"""
Matrix multiplication kernels.

Every kernel takes 2-D float64 arrays a (m x n) and b (n x p), returns a
fresh (m x p) array, and never writes to its inputs. All strategies
compute the same product; they differ only in loop order, blocking and
parallelism. The innermost loop of each kernel is a numpy vector
operation.

    ijk           c[i, j] = a[i, :] . b[:, j]
    ikj           c[i, :] += a[i, k] * b[k, :], skipping zero a[i, k]
    jama          column j of b cached, then c[i, j] = a[i, :] . col
    row_parallel  disjoint row blocks of c computed on a thread pool
    tiled         T x T blocks, T the smallest power of two >= sqrt(n)
    strassen      operands zero-padded to a power of two, seven recursive
                  products, ikj at or below the leaf size
"""

from concurrent.futures import ThreadPoolExecutor
import math

import numpy as np
from numpy.typing import NDArray

from pylinear.core.compute.workers import row_chunks, fixed_chunks

# Default recursion leaf for Strassen
STRASSEN_LEAF_SIZE = 64

# Rows per task for the blocked matrix-vector product
MATVEC_BLOCK_ROWS = 16

FloatArray = NDArray[np.float64]


def _empty(a: FloatArray, b: FloatArray) -> FloatArray:
    return np.zeros((a.shape[0], b.shape[1]), dtype=np.float64)


def ijk(a: FloatArray, b: FloatArray) -> FloatArray:
    """Textbook order: one inner product per output element."""
    c = _empty(a, b)
    for i in range(a.shape[0]):
        row = a[i]
        for j in range(b.shape[1]):
            c[i, j] = np.dot(row, b[:, j])
    return c


def _ikj_rows(a: FloatArray, b: FloatArray, c: FloatArray, start: int, end: int) -> None:
    for i in range(start, end):
        out = c[i]
        for k in range(a.shape[1]):
            aik = a[i, k]
            if aik != 0.0:
                out += aik * b[k]


def ikj(a: FloatArray, b: FloatArray) -> FloatArray:
    """Row-streaming order; zero multipliers are skipped."""
    c = _empty(a, b)
    _ikj_rows(a, b, c, 0, a.shape[0])
    return c


def jama(a: FloatArray, b: FloatArray) -> FloatArray:
    """Column-caching order: column j of b is copied once and reused."""
    c = _empty(a, b)
    col = np.empty(b.shape[0], dtype=np.float64)
    for j in range(b.shape[1]):
        col[:] = b[:, j]
        for i in range(a.shape[0]):
            c[i, j] = np.dot(a[i], col)
    return c


def row_parallel(a: FloatArray, b: FloatArray, max_workers: int = 1) -> FloatArray:
    """
    Rows of the product split into contiguous blocks on a thread pool.

    Each task owns a disjoint slice c[start:end], so no locking is needed.
    Block products go through numpy, which releases the GIL.
    """
    c = _empty(a, b)
    chunks = row_chunks(a.shape[0], max_workers)
    if len(chunks) <= 1:
        if chunks:
            np.dot(a, b, out=c)
        return c

    def work(bounds: tuple[int, int]) -> None:
        start, end = bounds
        c[start:end] = a[start:end] @ b

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        # list() re-raises the first worker exception
        list(pool.map(work, chunks))
    return c


def tile_size(inner: int) -> int:
    """Smallest power of two >= sqrt(inner), at least 1."""
    if inner <= 1:
        return 1
    return 1 << math.ceil(math.log2(math.sqrt(inner)))


def tiled(a: FloatArray, b: FloatArray) -> FloatArray:
    """Blocked product over T x T tiles of the three loop dimensions."""
    m, n = a.shape
    p = b.shape[1]
    t = tile_size(n)
    c = _empty(a, b)
    for ii in range(0, m, t):
        i_end = min(ii + t, m)
        for kk in range(0, n, t):
            k_end = min(kk + t, n)
            a_blk = a[ii:i_end, kk:k_end]
            for jj in range(0, p, t):
                j_end = min(jj + t, p)
                c[ii:i_end, jj:j_end] += a_blk @ b[kk:k_end, jj:j_end]
    return c


def next_power_of_two(n: int) -> int:
    size = 1
    while size < n:
        size *= 2
    return size


def _pad(mat: FloatArray, size: int) -> FloatArray:
    if mat.shape == (size, size):
        return np.array(mat, dtype=np.float64)
    padded = np.zeros((size, size), dtype=np.float64)
    padded[:mat.shape[0], :mat.shape[1]] = mat
    return padded


def _strassen_recursive(a: FloatArray, b: FloatArray, leaf_size: int) -> FloatArray:
    n = a.shape[0]
    if n <= leaf_size:
        return ikj(a, b)

    mid = n // 2
    a11, a12 = a[:mid, :mid], a[:mid, mid:]
    a21, a22 = a[mid:, :mid], a[mid:, mid:]
    b11, b12 = b[:mid, :mid], b[:mid, mid:]
    b21, b22 = b[mid:, :mid], b[mid:, mid:]

    m1 = _strassen_recursive(a11 + a22, b11 + b22, leaf_size)
    m2 = _strassen_recursive(a21 + a22, b11, leaf_size)
    m3 = _strassen_recursive(a11, b12 - b22, leaf_size)
    m4 = _strassen_recursive(a22, b21 - b11, leaf_size)
    m5 = _strassen_recursive(a11 + a12, b22, leaf_size)
    m6 = _strassen_recursive(a21 - a11, b11 + b12, leaf_size)
    m7 = _strassen_recursive(a12 - a22, b21 + b22, leaf_size)

    c = np.empty_like(a)
    c[:mid, :mid] = m1 + m4 - m5 + m7
    c[:mid, mid:] = m3 + m5
    c[mid:, :mid] = m2 + m4
    c[mid:, mid:] = m1 - m2 + m3 + m6
    return c


def strassen(a: FloatArray, b: FloatArray, leaf_size: int = STRASSEN_LEAF_SIZE) -> FloatArray:
    """
    Strassen product for any conformant shapes.

    Both operands are zero-padded to a square of the next power of two
    covering every dimension; the padding contributes only zeros and is
    cropped from the result.
    """
    m, n = a.shape
    p = b.shape[1]
    if m == 0 or n == 0 or p == 0:
        return _empty(a, b)
    size = next_power_of_two(max(m, n, p))
    c = _strassen_recursive(_pad(a, size), _pad(b, size), max(1, leaf_size))
    return np.ascontiguousarray(c[:m, :p])


def matvec_naive(a: FloatArray, x: NDArray[np.float64]) -> NDArray[np.float64]:
    """y[i] = a[i, :] . x"""
    y = np.zeros(a.shape[0], dtype=np.float64)
    for i in range(a.shape[0]):
        y[i] = np.dot(a[i], x)
    return y


def matvec_parallel(
    a: FloatArray,
    x: NDArray[np.float64],
    max_workers: int = 1,
    block_rows: int = MATVEC_BLOCK_ROWS,
) -> NDArray[np.float64]:
    """Matrix-vector product over fixed row blocks on a thread pool."""
    y = np.zeros(a.shape[0], dtype=np.float64)
    chunks = fixed_chunks(a.shape[0], block_rows)
    if max_workers <= 1 or len(chunks) <= 1:
        for start, end in chunks:
            y[start:end] = a[start:end] @ x
        return y

    def work(bounds: tuple[int, int]) -> None:
        start, end = bounds
        y[start:end] = a[start:end] @ x

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        list(pool.map(work, chunks))
    return y
