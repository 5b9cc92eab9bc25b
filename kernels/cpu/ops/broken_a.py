from __future__ import annotations

from matmul_harness.matrix import Matrix


def matmul_broken_A(A: Matrix, B: Matrix, C: Matrix, N: int) -> None:
    for i in range(N):
        for j in range(N):
            acc = 0.0
            for k in range(N):
                acc += float(A[i, k]) * float(B[k, j])
            # BUG (intentional): the store `C[i, j] = acc` is missing.


broken_a_io = {
    "kernel_name": "broken_A",
    "bug_class": "missing_write",
    "description": "computes every dot product but never stores it; C stays zero",
}


__all__ = ["matmul_broken_A", "broken_a_io"]
