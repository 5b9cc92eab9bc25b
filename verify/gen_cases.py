"""
Deterministic input generation for the matmul harness.

A scenario is a pure function N -> (A, B). Scenario name and N fully determine
both matrices: there is no hidden state, and the `random` scenario uses a
fixed 32-bit LCG (not numpy's RNG) so its values are bit-reproducible on any
platform.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Callable, Dict, Iterator, List, Sequence, Tuple

import numpy as np

from matmul_harness.errors import AllocationError, UnknownScenarioError
from matmul_harness.matrix import DTYPE, Matrix


_U32 = 0xFFFFFFFF

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
DEFAULT_SEED = 123456789


class Lcg32:
    """
    32-bit unsigned linear-congruential generator.

    state' = (state * 1103515245 + 12345) mod 2**32. Iterating yields the
    successive states (the seed itself is never yielded).
    """

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self.state = int(seed) & _U32

    def next_state(self) -> int:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) & _U32
        return self.state

    def draw(self, modulus: int, offset: int, scale: float) -> float:
        # state is unsigned, so `>> 16` leaves 0..65535 and the signed and
        # unsigned readings agree.
        hi = self.next_state() >> 16
        return float(hi % modulus - offset) / scale

    def __iter__(self) -> Iterator[int]:
        while True:
            yield self.next_state()


def _fill_increment(n: int) -> Tuple[Matrix, Matrix]:
    i, j = np.indices((n, n))
    a = (i * n + j + 1).astype(DTYPE)
    b = ((i + j) % 7 - 3).astype(DTYPE)
    return a, b


def _fill_identity(n: int) -> Tuple[Matrix, Matrix]:
    return np.eye(n, dtype=DTYPE), np.eye(n, dtype=DTYPE)


def _fill_random(n: int) -> Tuple[Matrix, Matrix]:
    a = np.empty((n, n), dtype=DTYPE)
    b = np.empty((n, n), dtype=DTYPE)
    rng = Lcg32(DEFAULT_SEED)
    # One draw for A then one for B per cell, row-major.
    for i in range(n):
        for j in range(n):
            a[i, j] = rng.draw(97, 48, 3.0)
            b[i, j] = rng.draw(61, 30, 4.0)
    return a, b


def _fill_pattern(n: int) -> Tuple[Matrix, Matrix]:
    i, j = np.indices((n, n))
    return (i + 1).astype(DTYPE), (j + 2).astype(DTYPE)


_SCENARIOS: Dict[str, Callable[[int], Tuple[Matrix, Matrix]]] = {
    "increment": _fill_increment,
    "identity": _fill_identity,
    "random": _fill_random,
    "pattern": _fill_pattern,
}

SCENARIOS: Tuple[str, ...] = tuple(_SCENARIOS)


def generate(scenario_name: str, n: int) -> Tuple[Matrix, Matrix]:
    """
    Build the (A, B) input pair for `scenario_name` at dimension `n`.

    `n` is trusted to be a positive int; rejecting n <= 0 is the caller's job.
    Both matrices are freshly allocated, C-contiguous float64.
    """
    fill = _SCENARIOS.get(scenario_name)
    if fill is None:
        raise UnknownScenarioError(scenario_name, SCENARIOS)
    try:
        a, b = fill(int(n))
    except (MemoryError, ValueError) as e:
        raise AllocationError("Allocation failed") from e
    return np.ascontiguousarray(a, dtype=DTYPE), np.ascontiguousarray(b, dtype=DTYPE)


@dataclass(frozen=True)
class ScenarioCase:
    scenario: str
    n: int
    __test__ = False  # prevent pytest from treating this as a test container


# Small sizes hit the N=1 scalar case and both sides of the truncation rule
# (N > 6); 33 is large enough for float32 drift on `random`.
EDGE_SIZES = [1, 2, 3, 6, 7, 8, 16, 33]


def generate_cases(
    scenarios: Sequence[str] | None = None,
    sizes: Sequence[int] | None = None,
    *,
    limit: int | None = None,
) -> List[ScenarioCase]:
    """
    Deterministic Cartesian product of scenarios x sizes, scenario-major.

    Unknown scenario names fail here, before any kernel runs.
    """
    names = list(scenarios) if scenarios is not None else list(SCENARIOS)
    for name in names:
        if name not in _SCENARIOS:
            raise UnknownScenarioError(name, SCENARIOS)
    ns = [int(s) for s in (sizes if sizes is not None else EDGE_SIZES)]
    bad = [s for s in ns if s <= 0]
    if bad:
        raise ValueError(f"sizes must be positive, got {bad}")
    cases: List[ScenarioCase] = []
    for name, n in product(names, ns):
        cases.append(ScenarioCase(scenario=name, n=n))
        if limit is not None and len(cases) >= limit:
            break
    return cases


__all__ = [
    "DEFAULT_SEED",
    "EDGE_SIZES",
    "Lcg32",
    "SCENARIOS",
    "ScenarioCase",
    "generate",
    "generate_cases",
]
