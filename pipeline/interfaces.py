"""
Kernel-under-test boundary shared by pipeline/verify/scripts.

A candidate is any callable with the in-place matmul signature. The harness
treats it as opaque: it may skip writes, index wrongly, or lose precision.
The harness only promises fully-formed inputs and a pre-zeroed output, and
reads that output back untouched afterwards.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Protocol

from matmul_harness.matrix import Matrix, alloc_matrix, as_readonly


class MatmulKernel(Protocol):
    def __call__(self, A: Matrix, B: Matrix, C: Matrix, N: int) -> None: ...


@dataclass(frozen=True)
class KernelSpec:
    """
    A named candidate kernel plus the metadata its module ships with.
    """

    name: str
    fn: MatmulKernel
    bug_class: Optional[str] = None
    description: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_io(cls, fn: MatmulKernel, io: Dict[str, Any]) -> "KernelSpec":
        return cls(
            name=str(io["kernel_name"]),
            fn=fn,
            bug_class=io.get("bug_class"),
            description=str(io.get("description", "")),
            meta={k: v for k, v in io.items() if k not in ("kernel_name", "bug_class", "description")},
        )

    def to_json_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d.pop("fn")
        return d


def run_kernel(kernel: MatmulKernel, A: Matrix, B: Matrix, N: int, *, out: Matrix | None = None) -> Matrix:
    """
    Run `kernel` on (A, B) and return what it left in C.

    C is `out` when given (it must already be zeroed) or a fresh zeroed buffer.

    A and B are passed as read-only views, so a kernel that tries to write its
    inputs fails loudly instead of corrupting the reference's operands.
    """
    C = alloc_matrix(N) if out is None else out
    kernel(as_readonly(A), as_readonly(B), C, N)
    return C


__all__ = ["MatmulKernel", "KernelSpec", "run_kernel"]
