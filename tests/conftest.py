from __future__ import annotations

import sys
from pathlib import Path

# Ensure repo root is importable for all tests, regardless of nested test layout.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from pipeline import registry
from pipeline.interfaces import KernelSpec


@pytest.fixture
def broken_a() -> KernelSpec:
    return registry.get("broken_A")


@pytest.fixture
def broken_b() -> KernelSpec:
    return registry.get("broken_B")


@pytest.fixture
def broken_c() -> KernelSpec:
    return registry.get("broken_C")


@pytest.fixture
def reference_kernel() -> KernelSpec:
    return registry.get("reference")
