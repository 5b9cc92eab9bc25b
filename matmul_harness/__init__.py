"""
Core types shared by the harness packages (`kernels`, `pipeline`, `verify`).

Keep this package dependency-light: numpy only.
"""

from .errors import (
    AllocationError,
    HarnessError,
    InvalidArgumentError,
    UnknownKernelError,
    UnknownScenarioError,
)
from .matrix import Matrix, alloc_matrix, as_readonly

__version__ = "0.1.0"

__all__ = [
    "AllocationError",
    "HarnessError",
    "InvalidArgumentError",
    "UnknownKernelError",
    "UnknownScenarioError",
    "Matrix",
    "alloc_matrix",
    "as_readonly",
]
