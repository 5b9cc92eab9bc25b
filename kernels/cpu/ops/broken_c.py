from __future__ import annotations

import numpy as np

from matmul_harness.matrix import Matrix


def matmul_broken_C(A: Matrix, B: Matrix, C: Matrix, N: int) -> None:
    for i in range(N):
        for j in range(N):
            # BUG (intentional): operands and accumulator narrowed to float32.
            acc = np.float32(0.0)
            for k in range(N):
                acc = np.float32(acc + np.float32(A[i, k]) * np.float32(B[k, j]))
            C[i, j] = np.float64(acc)


broken_c_io = {
    "kernel_name": "broken_C",
    "bug_class": "reduced_precision",
    "description": "float32 accumulation; exact for small integer inputs, drifts otherwise",
}


__all__ = ["matmul_broken_C", "broken_c_io"]
