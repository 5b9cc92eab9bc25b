"""
Command-line entry point: `matmul-harness [N] [scenario] [tolerance]`.

Exit codes:
  0 - no significant difference (MATCH)
  2 - mismatch detected (MISMATCH)
  1 - internal error / invalid usage

The kernel under test is an explicit argument of `main`. The `test-run-a/b/c`
entry points each bind one candidate, one program per kernel variant;
`--kernel` picks any registered kernel by name.
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Optional, Sequence

from matmul_harness.errors import HarnessError, InvalidArgumentError
from matmul_harness.logging_config import setup_logging
from pipeline import registry
from pipeline.interfaces import KernelSpec
from pipeline.run import DEFAULT_KERNEL, DEFAULT_N, DEFAULT_SCENARIO, HarnessConfig, run_harness
from verify.tolerances import parse_tolerance
from verify.verdict import render_stderr, render_stdout

logger = logging.getLogger(__name__)

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


class _UsageError(InvalidArgumentError):
    pass


class _HarnessArgumentParser(argparse.ArgumentParser):
    # argparse exits with status 2 on bad usage, which would read as MISMATCH.
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


def usage(prog: str) -> str:
    return (
        f"Usage: {prog} [N] [scenario] [tolerance] [--kernel NAME] [--json] [-v]\n"
        f"  N: matrix dimension (default {DEFAULT_N})\n"
        f"  scenario: increment | identity | random | pattern (default {DEFAULT_SCENARIO})\n"
        "  tolerance: max-diff tolerance (default 1e-12)\n"
    )


def parse_dim(text: str) -> int:
    """Leading-integer parse of N ("8x" -> 8); anything <= 0 is rejected."""
    m = _INT_PREFIX_RE.match(str(text))
    n = int(m.group(1)) if m else 0
    if n <= 0:
        raise InvalidArgumentError(f"invalid N: {text!r}")
    return n


def _build_parser(prog: str) -> argparse.ArgumentParser:
    # -h/--help go through usage (exit 1); exit 0 is reserved for MATCH.
    ap = _HarnessArgumentParser(prog=prog, add_help=False, description="Differential test of a matmul kernel against the float64 reference.")
    ap.add_argument("--kernel", default=None, help=f"registered kernel name (default {DEFAULT_KERNEL})")
    ap.add_argument("--json", action="store_true", help="print the verdict report as JSON instead of text")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO logs, -vv for DEBUG")
    return ap


def parse_config(argv: Sequence[str], *, prog: str = "matmul-harness", kernel: str | None = None) -> tuple[HarnessConfig, argparse.Namespace]:
    ap = _build_parser(prog)
    # Positionals are collected from the leftovers so "-1" or "-1e-3" reach
    # the N/tolerance parsers instead of being read as unknown flags.
    args, positional = ap.parse_known_args(list(argv))
    if any(p in ("-h", "--help") for p in positional):
        raise _UsageError("help requested")
    if len(positional) > 3:
        raise _UsageError(f"too many arguments: {positional[3:]}")
    if args.kernel is not None and kernel is not None and args.kernel != kernel:
        raise _UsageError(f"this program is bound to kernel {kernel!r}")

    n = parse_dim(positional[0]) if len(positional) >= 1 else DEFAULT_N
    scenario = positional[1] if len(positional) >= 2 else DEFAULT_SCENARIO
    tol = parse_tolerance(positional[2] if len(positional) >= 3 else None)
    cfg = HarnessConfig(n=n, scenario=scenario, tolerance=tol, kernel=kernel or args.kernel)
    return cfg, args


def main(argv: Optional[Sequence[str]] = None, *, kernel: KernelSpec | None = None, prog: str | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    prog = prog or Path(sys.argv[0]).name or "matmul-harness"

    try:
        cfg, args = parse_config(argv, prog=prog, kernel=(kernel.name if kernel is not None else None))
    except InvalidArgumentError:
        sys.stderr.write(usage(prog))
        return 1

    if args.verbose:
        setup_logging("DEBUG" if args.verbose > 1 else "INFO")

    try:
        spec = kernel if kernel is not None else registry.get(cfg.kernel or DEFAULT_KERNEL)
        vr = run_harness(spec.fn, n=cfg.n, scenario=cfg.scenario, tolerance=cfg.tolerance)
    except InvalidArgumentError:
        sys.stderr.write(usage(prog))
        return 1
    except HarnessError as e:
        logger.debug("setup failed", exc_info=True)
        sys.stderr.write(f"{e}\n")
        hint = getattr(e, "hint", None)
        if hint:
            sys.stderr.write(f"  hint: {hint}\n")
        return 1

    if args.json:
        payload = {"impl": cfg.impl_label, "scenario": cfg.scenario, **vr.to_json_dict()}
        sys.stdout.write(json.dumps(payload, indent=2, allow_nan=False) + "\n")
    else:
        sys.stdout.write(render_stdout(vr, impl=cfg.impl_label, scenario=cfg.scenario))
    sys.stdout.flush()
    sys.stderr.write(render_stderr(vr))
    return vr.verdict.exit_code


def _bound(name: str, argv: Optional[Sequence[str]] = None) -> int:
    return main(argv, kernel=registry.get(name))


def main_a(argv: Optional[Sequence[str]] = None) -> int:
    return _bound("broken_A", argv)


def main_b(argv: Optional[Sequence[str]] = None) -> int:
    return _bound("broken_B", argv)


def main_c(argv: Optional[Sequence[str]] = None) -> int:
    return _bound("broken_C", argv)


__all__ = ["main", "main_a", "main_b", "main_c", "parse_config", "parse_dim", "usage"]


if __name__ == "__main__":
    raise SystemExit(main())
