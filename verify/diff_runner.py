"""
Differential runner: candidate kernel vs reference on the same inputs.

`compare` is the numeric core. It visits every cell (no early exit), so the
sum is exact for the given row-major order and the report always carries the
full reference/candidate pair set for diagnostics.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple

import numpy as np

from kernels.reference import matmul_ref
from matmul_harness.matrix import Matrix, alloc_matrix, as_readonly, check_square
from pipeline.interfaces import MatmulKernel, run_kernel
from verify.gen_cases import ScenarioCase, generate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DivergenceReport:
    n: int
    max_abs_diff: float
    sum_abs_diff: float
    reference: Matrix
    candidate: Matrix
    first_bad_index: Tuple[int, int] | None = None

    def pairs(self) -> Iterator[Tuple[int, int, float, float]]:
        """Yield (i, j, ref, candidate) for every cell, row-major."""
        for i in range(self.n):
            for j in range(self.n):
                yield i, j, float(self.reference[i, j]), float(self.candidate[i, j])

    def to_json_dict(self, *, include_pairs: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "n": int(self.n),
            "max_abs_diff": json_float(self.max_abs_diff),
            "sum_abs_diff": json_float(self.sum_abs_diff),
            "first_bad_index": list(self.first_bad_index) if self.first_bad_index is not None else None,
        }
        if include_pairs:
            d["reference"] = _json_matrix(self.reference)
            d["candidate"] = _json_matrix(self.candidate)
        return d


def json_float(x: float) -> float | None:
    """Strict-JSON view of a float: inf and NaN become None (null)."""
    x = float(x)
    return x if math.isfinite(x) else None


def _json_matrix(m: Matrix) -> list:
    return [[json_float(v) for v in row] for row in m.tolist()]


def compare(c_ref: Matrix, c_test: Matrix, n: int) -> DivergenceReport:
    """
    Element-wise |C_ref - C_test| over all n*n cells.

    max_abs_diff is the largest cell difference; sum_abs_diff adds the cell
    differences sequentially in row-major order. A cell that is NaN on one
    side only makes both aggregates NaN (it never compares as "no
    difference"); the same inf or NaN on both sides counts as 0.
    """
    check_square(c_ref, n, name="C_ref")
    check_square(c_test, n, name="C_test")
    ref = np.array(c_ref, dtype=np.float64, copy=True)
    cand = np.array(c_test, dtype=np.float64, copy=True)

    with np.errstate(invalid="ignore", over="ignore"):
        # Identical cells (same inf, or NaN on both sides) differ by 0.0;
        # inf - inf would otherwise read as NaN.
        same = (ref == cand) | (np.isnan(ref) & np.isnan(cand))
        diff = np.where(same, 0.0, np.abs(ref - cand)).ravel(order="C").tolist()
    max_abs = 0.0
    total = 0.0
    bad_flat = None
    for idx, d in enumerate(diff):
        total += d
        if d > max_abs or (math.isnan(d) and not math.isnan(max_abs)):
            max_abs = d
            bad_flat = idx
    bad = None if bad_flat is None else (bad_flat // int(n), bad_flat % int(n))

    return DivergenceReport(
        n=int(n),
        max_abs_diff=float(max_abs),
        sum_abs_diff=float(total),
        reference=as_readonly(ref),
        candidate=as_readonly(cand),
        first_bad_index=bad,
    )


def run_diff(kernel: MatmulKernel, case: ScenarioCase) -> DivergenceReport:
    """
    Generate the case inputs, run candidate and reference, compare.

    All four buffers exist before any kernel runs, so an allocation failure
    aborts the run before computation. Candidate first, then reference: both
    read the same A, B and write disjoint, freshly zeroed outputs.
    """
    a, b = generate(case.scenario, case.n)
    c_test = alloc_matrix(case.n)
    c_ref = alloc_matrix(case.n)
    run_kernel(kernel, a, b, case.n, out=c_test)
    matmul_ref(as_readonly(a), as_readonly(b), c_ref, case.n)
    report = compare(c_ref, c_test, case.n)
    logger.debug(
        "diff scenario=%s n=%d max_abs=%.6e sum_abs=%.6e",
        case.scenario,
        case.n,
        report.max_abs_diff,
        report.sum_abs_diff,
    )
    return report


__all__ = ["DivergenceReport", "compare", "json_float", "run_diff"]
