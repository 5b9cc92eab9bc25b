"""
Dense square matrix buffers.

A matrix is a C-contiguous (row-major) float64 `np.ndarray` of shape (N, N).
Buffers are always fully initialized: outputs start zero-filled so a kernel
that skips a write leaves a deterministic 0.0 behind.
"""

from __future__ import annotations

import numpy as np

from matmul_harness.errors import AllocationError


Matrix = np.ndarray

DTYPE = np.float64


def alloc_matrix(n: int) -> Matrix:
    """Allocate a zero-filled (n, n) float64 buffer, or raise AllocationError."""
    try:
        return np.zeros((int(n), int(n)), dtype=DTYPE, order="C")
    except (MemoryError, ValueError, OverflowError) as e:
        raise AllocationError("Allocation failed") from e


def as_readonly(m: Matrix) -> Matrix:
    """Return a non-writeable view of `m` (the buffer itself is untouched)."""
    v = m.view()
    v.flags.writeable = False
    return v


def check_square(m: Matrix, n: int, *, name: str = "matrix") -> None:
    if tuple(np.shape(m)) != (int(n), int(n)):
        raise ValueError(f"{name} must have shape ({n}, {n}), got {tuple(np.shape(m))}")


__all__ = ["Matrix", "DTYPE", "alloc_matrix", "as_readonly", "check_square"]
