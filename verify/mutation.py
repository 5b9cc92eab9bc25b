"""
Kill matrix: how much falsification power does each scenario have?

Runs every candidate kernel over every (scenario, N) case and records the
verdict. A candidate is "killed" when at least one case reports MISMATCH; a
survivor is a bug the scenario set cannot see. The reference kernel is a
useful control: it must survive everything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from pipeline.interfaces import KernelSpec
from verify.diff_runner import json_float, run_diff
from verify.gen_cases import ScenarioCase
from verify.tolerances import Tolerance, normalize_tolerance
from verify.verdict import Verdict, report

logger = logging.getLogger(__name__)


@dataclass
class KillOutcome:
    kernel: str
    scenario: str
    n: int
    verdict: Verdict
    max_abs_diff: float
    first_bad_index: tuple[int, int] | None = None

    @property
    def killed(self) -> bool:
        return self.verdict is Verdict.MISMATCH

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "kernel": self.kernel,
            "scenario": self.scenario,
            "n": int(self.n),
            "verdict": self.verdict.value,
            "max_abs_diff": json_float(self.max_abs_diff),
            "first_bad_index": list(self.first_bad_index) if self.first_bad_index is not None else None,
        }


@dataclass
class KillMatrixReport:
    tolerance: float
    kernels: List[str]
    outcomes: List[KillOutcome] = field(default_factory=list)

    @property
    def killed_kernels(self) -> List[str]:
        return [k for k in self.kernels if any(o.killed for o in self.outcomes if o.kernel == k)]

    @property
    def survived_kernels(self) -> List[str]:
        killed = set(self.killed_kernels)
        return [k for k in self.kernels if k not in killed]

    @property
    def total(self) -> int:
        return len(self.kernels)

    @property
    def killed(self) -> int:
        return len(self.killed_kernels)

    @property
    def survived(self) -> int:
        return self.total - self.killed

    @property
    def kill_rate(self) -> float:
        return 0.0 if self.total == 0 else float(self.killed) / float(self.total)

    @property
    def killed_by_scenario(self) -> Dict[str, List[str]]:
        """scenario -> kernels it kills (at any N), in kernel order."""
        out: Dict[str, List[str]] = {}
        for o in self.outcomes:
            out.setdefault(o.scenario, [])
            if o.killed and o.kernel not in out[o.scenario]:
                out[o.scenario].append(o.kernel)
        return out

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "tolerance": json_float(self.tolerance),
            "total": int(self.total),
            "killed": int(self.killed),
            "survived": int(self.survived),
            "kill_rate": float(self.kill_rate),
            "killed_kernels": list(self.killed_kernels),
            "survived_kernels": list(self.survived_kernels),
            "killed_by_scenario": self.killed_by_scenario,
            "outcomes": [o.to_json_dict() for o in self.outcomes],
        }


def run_kill_matrix(
    kernels: Sequence[KernelSpec],
    cases: Sequence[ScenarioCase],
    *,
    tolerance: float | Tolerance | None = None,
) -> KillMatrixReport:
    tol = tolerance if isinstance(tolerance, Tolerance) else normalize_tolerance(tolerance)
    rep = KillMatrixReport(tolerance=float(tol.atol), kernels=[k.name for k in kernels])
    for spec in kernels:
        for case in cases:
            vr = report(run_diff(spec.fn, case), tol)
            rep.outcomes.append(
                KillOutcome(
                    kernel=spec.name,
                    scenario=case.scenario,
                    n=int(case.n),
                    verdict=vr.verdict,
                    max_abs_diff=float(vr.divergence.max_abs_diff),
                    first_bad_index=vr.divergence.first_bad_index,
                )
            )
        logger.info("kernel=%s killed=%s", spec.name, spec.name in rep.killed_kernels)
    return rep


__all__ = ["KillOutcome", "KillMatrixReport", "run_kill_matrix"]
