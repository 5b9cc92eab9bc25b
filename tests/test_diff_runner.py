import numpy as np
import pytest

from verify.diff_runner import compare, json_float, run_diff
from verify.gen_cases import SCENARIOS, ScenarioCase, generate
from verify.verdict import Verdict, report


@pytest.mark.parametrize("name", SCENARIOS)
def test_compare_self_is_zero(name):
    a, _ = generate(name, 5)
    rep = compare(a, a.copy(), 5)
    assert rep.max_abs_diff == 0.0
    assert rep.sum_abs_diff == 0.0
    assert rep.first_bad_index is None


def test_compare_max_sum_and_first_bad_index():
    ref = np.array([[1.0, 2.0], [3.0, 4.0]])
    cand = np.array([[1.0, 2.5], [1.0, 6.0]])
    rep = compare(ref, cand, 2)
    assert rep.max_abs_diff == 2.0
    assert rep.sum_abs_diff == 4.5
    # ties keep the first cell in row-major order
    assert rep.first_bad_index == (1, 0)


def test_compare_keeps_every_pair():
    ref = np.arange(9, dtype=np.float64).reshape(3, 3)
    cand = np.zeros((3, 3))
    rep = compare(ref, cand, 3)
    pairs = list(rep.pairs())
    assert len(pairs) == 9
    assert pairs[0] == (0, 0, 0.0, 0.0)
    assert pairs[-1] == (2, 2, 8.0, 0.0)
    assert rep.sum_abs_diff == float(sum(range(9)))


def test_compare_copies_inputs():
    ref = np.ones((2, 2))
    cand = np.zeros((2, 2))
    rep = compare(ref, cand, 2)
    ref[0, 0] = 100.0
    assert rep.reference[0, 0] == 1.0
    assert not rep.reference.flags.writeable


def test_compare_nan_is_never_zero():
    ref = np.zeros((2, 2))
    cand = np.zeros((2, 2))
    cand[1, 1] = np.nan
    rep = compare(ref, cand, 2)
    assert np.isnan(rep.max_abs_diff)
    assert np.isnan(rep.sum_abs_diff)
    assert rep.first_bad_index == (1, 1)


def test_compare_rejects_wrong_shape():
    with pytest.raises(ValueError):
        compare(np.zeros((2, 2)), np.zeros((3, 3)), 2)


def test_compare_n1():
    rep = compare(np.array([[3.0]]), np.array([[1.0]]), 1)
    assert rep.max_abs_diff == 2.0 and rep.sum_abs_diff == 2.0
    assert rep.first_bad_index == (0, 0)


def test_run_diff_identity_missing_write(broken_a):
    rep = run_diff(broken_a.fn, ScenarioCase("identity", 4))
    assert rep.max_abs_diff == 1.0
    assert rep.sum_abs_diff == 4.0
    assert np.array_equal(rep.candidate, np.zeros((4, 4)))
    assert np.array_equal(rep.reference, np.eye(4))


def test_run_diff_swapped_index(broken_b):
    # ref [[-7,-4],[-17,-10]] vs A.T @ B [[-9,-5],[-14,-8]]
    rep = run_diff(broken_b.fn, ScenarioCase("increment", 2))
    assert rep.max_abs_diff == 3.0
    assert rep.sum_abs_diff == 8.0
    assert rep.first_bad_index == (1, 0)


def test_run_diff_reference_against_itself(reference_kernel):
    for name in SCENARIOS:
        rep = run_diff(reference_kernel.fn, ScenarioCase(name, 7))
        assert rep.max_abs_diff == 0.0


def test_divergence_json():
    rep = compare(np.eye(2), np.zeros((2, 2)), 2)
    d = rep.to_json_dict()
    assert d == {"n": 2, "max_abs_diff": 1.0, "sum_abs_diff": 2.0, "first_bad_index": [0, 0]}
    assert rep.to_json_dict(include_pairs=True)["reference"] == [[1.0, 0.0], [0.0, 1.0]]


def test_compare_self_with_inf_and_nan_is_zero():
    c = np.array([[np.inf, -np.inf], [np.nan, 2.0]])
    rep = compare(c, c.copy(), 2)
    assert rep.max_abs_diff == 0.0
    assert rep.sum_abs_diff == 0.0
    assert rep.first_bad_index is None
    assert report(rep).verdict is Verdict.MATCH


def test_compare_inf_against_other_values():
    ref = np.array([[np.inf, np.inf], [np.nan, 0.0]])
    cand = np.array([[1.0, -np.inf], [0.0, 0.0]])
    rep = compare(ref, cand, 2)
    assert np.isnan(rep.max_abs_diff)
    assert np.isnan(rep.sum_abs_diff)
    assert rep.first_bad_index == (1, 0)
    rep = compare(ref[:1, :1], cand[:1, :1], 1)
    assert rep.max_abs_diff == np.inf


def test_divergence_json_maps_non_finite_to_null():
    ref = np.array([[np.inf, 0.0], [0.0, 0.0]])
    cand = np.array([[np.nan, 0.0], [0.0, 0.0]])
    d = compare(ref, cand, 2).to_json_dict(include_pairs=True)
    assert d["max_abs_diff"] is None and d["sum_abs_diff"] is None
    assert d["reference"][0] == [None, 0.0]
    assert d["candidate"][0] == [None, 0.0]
    assert json_float(1.5) == 1.5
