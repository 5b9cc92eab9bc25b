"""
Kill matrix over the bundled candidates: which scenario catches which bug.

Runs every registered candidate (plus the reference as a control) on every
scenario x size and prints a table, or writes the JSON report with --json.
Exit status is 0 when every buggy candidate is killed and the reference
survives, 1 otherwise.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from matmul_harness.errors import HarnessError  # noqa: E402
from matmul_harness.logging_config import setup_logging  # noqa: E402
from pipeline import registry  # noqa: E402
from verify.gen_cases import EDGE_SIZES, SCENARIOS, generate_cases  # noqa: E402
from verify.mutation import KillMatrixReport, run_kill_matrix  # noqa: E402
from verify.tolerances import parse_tolerance  # noqa: E402


def _print_table(title: str, rows: List[List[str]]) -> None:
    print(f"\n{title}")
    if not rows:
        print("(empty)")
        return
    widths = [max(len(r[i]) for r in rows) for i in range(len(rows[0]))]
    for ridx, r in enumerate(rows):
        print("  " + "  ".join(c.ljust(widths[i]) for i, c in enumerate(r)))
        if ridx == 0:
            print("  " + "  ".join("-" * w for w in widths))


def _render(rep: KillMatrixReport, scenarios: List[str]) -> None:
    rows = [["kernel"] + scenarios + ["killed"]]
    for k in rep.kernels:
        row = [k]
        for s in scenarios:
            outs = [o for o in rep.outcomes if o.kernel == k and o.scenario == s]
            kills = [o for o in outs if o.killed]
            if kills:
                worst = max(kills, key=lambda o: o.max_abs_diff)
                row.append(f"KILL n>={min(o.n for o in kills)} ({worst.max_abs_diff:.1e})")
            else:
                row.append("-")
        row.append("yes" if k in rep.killed_kernels else "no")
        rows.append(row)
    _print_table(f"Kill matrix (tol {rep.tolerance:.1e})", rows)
    print(f"\nkilled {rep.killed}/{rep.total} (kill rate {rep.kill_rate:.0%})")


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--kernel", action="append", default=None, help="kernel name (repeatable; default: all registered)")
    ap.add_argument("--scenario", action="append", default=None, choices=list(SCENARIOS))
    ap.add_argument("--sizes", default=",".join(str(s) for s in EDGE_SIZES), help="comma-separated N values")
    ap.add_argument("--tolerance", default=None)
    ap.add_argument("--json", default=None, help="write the report JSON to this path (otherwise print text)")
    ap.add_argument("-v", "--verbose", action="count", default=0)
    args = ap.parse_args()

    if args.verbose:
        setup_logging("DEBUG" if args.verbose > 1 else "INFO")

    try:
        sizes = [int(s) for s in str(args.sizes).split(",") if s.strip()]
        names = args.kernel or registry.names()
        kernels = [registry.get(n) for n in names]
        scenarios = list(args.scenario or SCENARIOS)
        cases = generate_cases(scenarios, sizes)
    except (HarnessError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(1)

    rep = run_kill_matrix(kernels, cases, tolerance=parse_tolerance(args.tolerance))

    if args.json:
        Path(args.json).write_text(json.dumps(rep.to_json_dict(), indent=2, ensure_ascii=False, allow_nan=False), encoding="utf-8")
        print(args.json)
    else:
        _render(rep, scenarios)

    expected_survivors = {k.name for k in kernels if k.bug_class is None}
    ok = set(rep.survived_kernels) == expected_survivors
    raise SystemExit(0 if ok else 1)


if __name__ == "__main__":
    main()
