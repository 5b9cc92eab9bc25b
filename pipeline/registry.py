"""
Candidate kernel registry (kernel_name -> KernelSpec).

A simple in-process dict. The harness itself never picks a kernel: callers
(CLI entry points, the kill matrix) look one up and pass it in explicitly.
"""

from __future__ import annotations

import importlib
from typing import Dict, List

from matmul_harness.errors import UnknownKernelError
from pipeline.interfaces import KernelSpec

_REGISTRY: Dict[str, KernelSpec] = {}

_BUILTINS_LOADED = False


def register(spec: KernelSpec) -> None:
    _REGISTRY[spec.name] = spec


def _load_builtins() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    _BUILTINS_LOADED = True
    ops = importlib.import_module("kernels.cpu.ops")
    ref = importlib.import_module("kernels.reference")
    for fn, io in (
        (ops.matmul_broken_A, ops.broken_a_io),
        (ops.matmul_broken_B, ops.broken_b_io),
        (ops.matmul_broken_C, ops.broken_c_io),
        (ref.matmul_ref, ref.reference_io),
    ):
        _REGISTRY.setdefault(str(io["kernel_name"]), KernelSpec.from_io(fn, io))


def get(name: str) -> KernelSpec:
    _load_builtins()
    if name not in _REGISTRY:
        raise UnknownKernelError(name, names())
    return _REGISTRY[name]


def names() -> List[str]:
    _load_builtins()
    return sorted(_REGISTRY)


def candidates() -> List[KernelSpec]:
    """Registered kernels that carry a known bug (the reference is excluded)."""
    return [get(n) for n in names() if _REGISTRY[n].bug_class is not None]


__all__ = ["register", "get", "names", "candidates"]
