"""
Reference matmul: the ground truth every candidate is judged against.

Plain triple loop, float64 accumulation in ascending k, one write per cell.
No BLAS: `A @ B` may reorder the k-sum per platform, and the reference must be
bit-identical everywhere.
"""

from __future__ import annotations

from matmul_harness.matrix import Matrix, alloc_matrix


def matmul_ref(A: Matrix, B: Matrix, C: Matrix, N: int) -> None:
    """In-place form, C[i, j] = sum_k A[i, k] * B[k, j]."""
    cols = B.T.tolist()
    for i in range(N):
        a_row = A[i].tolist()
        for j in range(N):
            b_col = cols[j]
            acc = 0.0
            for k in range(N):
                acc += a_row[k] * b_col[k]
            C[i, j] = acc


def multiply(A: Matrix, B: Matrix, N: int) -> Matrix:
    C = alloc_matrix(N)
    matmul_ref(A, B, C, N)
    return C


reference_io = {
    "kernel_name": "reference",
    "bug_class": None,
    "description": "float64 accumulation, ascending k",
}


__all__ = ["matmul_ref", "multiply", "reference_io"]
