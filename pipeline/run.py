"""
One harness run: generate -> candidate -> reference -> compare -> verdict.

Strictly sequential and self-contained. Every buffer is allocated fresh for
the run and dropped with it; nothing is cached between runs, so the same
(kernel, scenario, N) always reproduces the same buffers and verdict.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field

from matmul_harness.errors import InvalidArgumentError
from pipeline.interfaces import MatmulKernel
from verify.diff_runner import run_diff
from verify.gen_cases import ScenarioCase
from verify.tolerances import DEFAULT_TOLERANCE, Tolerance, normalize_tolerance
from verify.verdict import VerdictReport, report

logger = logging.getLogger(__name__)

DEFAULT_N = 6
DEFAULT_SCENARIO = "increment"
DEFAULT_KERNEL = "broken_A"


@dataclass(frozen=True)
class HarnessConfig:
    n: int = DEFAULT_N
    scenario: str = DEFAULT_SCENARIO
    tolerance: Tolerance = field(default_factory=lambda: Tolerance(DEFAULT_TOLERANCE))
    kernel: str | None = None

    @property
    def impl_label(self) -> str:
        return self.kernel if self.kernel is not None else f"{DEFAULT_KERNEL} (default)"


def run_harness(
    kernel: MatmulKernel,
    *,
    n: int = DEFAULT_N,
    scenario: str = DEFAULT_SCENARIO,
    tolerance: float | Tolerance | None = None,
) -> VerdictReport:
    """
    Run `kernel` against the reference on one scenario and classify the result.

    Raises InvalidArgumentError for n <= 0, UnknownScenarioError for an
    unknown scenario and AllocationError if a buffer cannot be allocated; all
    of these fire before any kernel runs. A mismatch is returned, not raised.
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n <= 0:
        raise InvalidArgumentError(f"N must be a positive integer, got {n!r}")
    n = int(n)
    tol = tolerance if isinstance(tolerance, Tolerance) else normalize_tolerance(tolerance)

    logger.info("run scenario=%s n=%d tol=%.6e", scenario, n, tol.atol)
    divergence = run_diff(kernel, ScenarioCase(scenario=scenario, n=n))
    vr = report(divergence, tol)
    logger.info("verdict=%s max_abs=%.6e", vr.verdict.value, divergence.max_abs_diff)
    return vr


__all__ = ["DEFAULT_KERNEL", "DEFAULT_N", "DEFAULT_SCENARIO", "HarnessConfig", "run_harness"]
