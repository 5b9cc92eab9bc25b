import json

import numpy as np
import pytest

from matmul_harness.errors import InvalidArgumentError
from pipeline.cli import main, main_a, main_b, main_c, parse_config, parse_dim
from pipeline.interfaces import KernelSpec


def test_defaults(capsys):
    rc = main([])
    out, err = capsys.readouterr()
    assert rc == 2
    assert out.splitlines()[0] == "Matrix multiply test (impl: broken_A (default), N=6, scenario=increment)"
    assert "DETECTED: numerical mismatch" in err


def test_identity_missing_write_end_to_end(capsys, broken_a):
    rc = main(["4", "identity"], kernel=broken_a)
    out, err = capsys.readouterr()
    assert rc == 2
    assert out.splitlines()[0] == "Matrix multiply test (impl: broken_A, N=4, scenario=identity)"
    assert "Max abs difference: 1.000000e+00" in out
    assert err == "\nDETECTED: numerical mismatch (max diff 1.000000e+00 > tol 1.000000e-12)\n"


def test_float_accumulation_small_n_passes(capsys):
    rc = main_c(["5", "increment"])
    out, err = capsys.readouterr()
    assert rc == 0
    assert "Max abs difference: 0.000000e+00" in out
    assert out.rstrip("\n").endswith("No significant difference detected (within tolerance 1.000000e-12).")
    assert err == ""


def test_bound_entry_points(capsys):
    assert main_a(["3", "pattern"]) == 2
    assert main_b(["3", "identity"]) == 0
    assert main_b(["3", "pattern"]) == 2
    out, _ = capsys.readouterr()
    assert "impl: broken_B, N=3, scenario=pattern" in out


def test_kernel_option(capsys):
    rc = main(["3", "random", "--kernel", "reference"])
    out, _ = capsys.readouterr()
    assert rc == 0
    assert "impl: reference" in out


def test_truncated_table(capsys):
    main(["7", "pattern", "--kernel", "reference"])
    out, _ = capsys.readouterr()
    assert "... (truncated)" in out
    assert "( 6, 0):" not in out


@pytest.mark.parametrize("argv", [["0"], ["-3"], ["abc"], ["1", "2", "3", "4"], ["--kernel"]])
def test_invalid_invocation_exit_1(capsys, argv):
    rc = main(argv)
    out, err = capsys.readouterr()
    assert rc == 1
    assert out == ""
    assert err.startswith("Usage: ")


def test_unknown_scenario_exit_1(capsys):
    rc = main(["3", "bogus"])
    out, err = capsys.readouterr()
    assert rc == 1
    assert out == ""
    assert err.splitlines()[0] == "Unknown scenario 'bogus'"


def test_unknown_kernel_exit_1(capsys):
    rc = main(["3", "identity", "--kernel", "broken_Z"])
    _, err = capsys.readouterr()
    assert rc == 1
    assert "Unknown kernel 'broken_Z'" in err


def test_bound_program_rejects_other_kernel(capsys):
    assert main_a(["3", "identity", "--kernel", "broken_B"]) == 1


@pytest.mark.parametrize("tol", ["-1", "abc", "-1e-3"])
def test_bad_tolerance_falls_back_to_default(capsys, tol):
    rc = main(["2", "identity", tol, "--kernel", "reference"])
    out, _ = capsys.readouterr()
    assert rc == 0
    assert "within tolerance 1.000000e-12" in out


def test_tolerance_can_absorb_the_diff(capsys):
    assert main(["4", "identity", "1.0"]) == 0
    assert main(["4", "identity", "0.999"]) == 2


def test_json_output(capsys):
    rc = main(["4", "identity", "--json", "--kernel", "broken_A"])
    out, err = capsys.readouterr()
    assert rc == 2
    payload = json.loads(out)
    assert payload["impl"] == "broken_A"
    assert payload["scenario"] == "identity"
    assert payload["verdict"] == "mismatch"
    assert payload["divergence"]["max_abs_diff"] == 1.0
    assert "DETECTED" in err


def test_parse_dim():
    assert parse_dim("8") == 8
    assert parse_dim(" 12abc") == 12
    with pytest.raises(InvalidArgumentError):
        parse_dim("x")
    with pytest.raises(InvalidArgumentError):
        parse_dim("0")


def test_parse_config_defaults():
    cfg, args = parse_config([])
    assert (cfg.n, cfg.scenario, cfg.tolerance.atol, cfg.kernel) == (6, "increment", 1e-12, None)
    assert cfg.impl_label == "broken_A (default)"
    assert args.json is False


@pytest.mark.parametrize("argv", [["-h"], ["--help"], ["4", "identity", "-h"]])
def test_help_prints_usage_and_exits_1(capsys, argv):
    rc = main(argv)
    out, err = capsys.readouterr()
    assert rc == 1
    assert out == ""
    assert err.startswith("Usage: ")


def _nan_kernel(A, B, C, N):
    C[:, :] = np.nan


def test_json_output_is_strict_with_nan(capsys):
    spec = KernelSpec(name="nan_fill", fn=_nan_kernel, bug_class="nan")
    rc = main(["3", "increment", "--json"], kernel=spec)
    out, _ = capsys.readouterr()
    assert rc == 2
    assert "NaN" not in out
    payload = json.loads(out)
    assert payload["impl"] == "nan_fill"
    assert payload["divergence"]["max_abs_diff"] is None
    assert payload["divergence"]["sum_abs_diff"] is None
