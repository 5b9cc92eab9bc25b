"""
CPU candidate kernels.

Pure-Python loop kernels with the in-place signature `fn(A, B, C, N) -> None`.
Each lives in `cpu/ops/<name>.py` next to a small metadata dict.
"""
