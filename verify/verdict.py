"""
Verdict reporting: divergence + tolerance -> MATCH / MISMATCH, plus the
console rendering of a run.

The gate is global and single: MISMATCH iff max_abs_diff > tolerance (a diff
exactly equal to the tolerance is a MATCH). A NaN max diff is never a MATCH.
The sample table is cosmetic and truncated for large N; it never feeds back
into the verdict.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, List

from verify.diff_runner import DivergenceReport, json_float
from verify.tolerances import Tolerance, normalize_tolerance

# After emitting row index >= TRUNCATE_AFTER_ROW, stop if N > TRUNCATE_MIN_N.
TRUNCATE_AFTER_ROW = 5
TRUNCATE_MIN_N = 6


class Verdict(str, enum.Enum):
    MATCH = "match"
    MISMATCH = "mismatch"

    @property
    def exit_code(self) -> int:
        return 0 if self is Verdict.MATCH else 2


@dataclass(frozen=True)
class VerdictReport:
    verdict: Verdict
    tolerance: float
    divergence: DivergenceReport

    @property
    def ok(self) -> bool:
        return self.verdict is Verdict.MATCH

    def to_json_dict(self, *, include_pairs: bool = False) -> Dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "ok": bool(self.ok),
            "tolerance": json_float(self.tolerance),
            "divergence": self.divergence.to_json_dict(include_pairs=include_pairs),
        }


def report(divergence: DivergenceReport, tolerance: float | Tolerance | None = None) -> VerdictReport:
    tol = tolerance if isinstance(tolerance, Tolerance) else normalize_tolerance(tolerance)
    # `not (x <= tol)` is `x > tol` for numbers, and also catches NaN.
    mismatch = not (divergence.max_abs_diff <= tol.atol)
    return VerdictReport(
        verdict=Verdict.MISMATCH if mismatch else Verdict.MATCH,
        tolerance=float(tol.atol),
        divergence=divergence,
    )


def render_samples(divergence: DivergenceReport) -> List[str]:
    """
    One `(i,j): ref | candidate` line per cell, row by row, cut off with
    `... (truncated)` after row 5 when N > 6.
    """
    n = divergence.n
    lines: List[str] = []
    for i, j, ref, cand in divergence.pairs():
        lines.append("(%2d,%2d): %12.6g | %12.6g" % (i, j, ref, cand))
        if j == n - 1 and i >= TRUNCATE_AFTER_ROW and n > TRUNCATE_MIN_N:
            lines.append("... (truncated)")
            break
    return lines


def render_stdout(vr: VerdictReport, *, impl: str, scenario: str) -> str:
    d = vr.divergence
    lines = [
        "Matrix multiply test (impl: %s, N=%d, scenario=%s)" % (impl, d.n, scenario),
        "Max abs difference: %.6e" % d.max_abs_diff,
        "Sum abs difference: %.6e" % d.sum_abs_diff,
        "",
        "Sample entries (i,j): ref | broken",
    ]
    lines.extend(render_samples(d))
    if vr.ok:
        lines.append("")
        lines.append("No significant difference detected (within tolerance %.6e)." % vr.tolerance)
    return "\n".join(lines) + "\n"


def render_stderr(vr: VerdictReport) -> str:
    """The DETECTED diagnostic for a MISMATCH; empty for a MATCH."""
    if vr.ok:
        return ""
    return "\nDETECTED: numerical mismatch (max diff %.6e > tol %.6e)\n" % (vr.divergence.max_abs_diff, vr.tolerance)


__all__ = [
    "TRUNCATE_AFTER_ROW",
    "TRUNCATE_MIN_N",
    "Verdict",
    "VerdictReport",
    "report",
    "render_samples",
    "render_stdout",
    "render_stderr",
]
