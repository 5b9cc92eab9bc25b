"""
Intentionally flawed candidates. Each one runs to completion without raising
and produces wrong output only for some inputs:

- broken_a: never writes C
- broken_b: reads A transposed
- broken_c: accumulates in float32
"""

from .broken_a import broken_a_io, matmul_broken_A
from .broken_b import broken_b_io, matmul_broken_B
from .broken_c import broken_c_io, matmul_broken_C

__all__ = [
    "matmul_broken_A",
    "matmul_broken_B",
    "matmul_broken_C",
    "broken_a_io",
    "broken_b_io",
    "broken_c_io",
]
