from __future__ import annotations

from matmul_harness.matrix import Matrix


def matmul_broken_B(A: Matrix, B: Matrix, C: Matrix, N: int) -> None:
    for i in range(N):
        for j in range(N):
            acc = 0.0
            for k in range(N):
                # BUG (intentional): A[k, i] instead of A[i, k], so this
                # computes A.T @ B. Invisible whenever A is symmetric.
                acc += float(A[k, i]) * float(B[k, j])
            C[i, j] = acc


broken_b_io = {
    "kernel_name": "broken_B",
    "bug_class": "swapped_index",
    "description": "reads A transposed; with B = I the result is A.T, not A",
}


__all__ = ["matmul_broken_B", "broken_b_io"]
