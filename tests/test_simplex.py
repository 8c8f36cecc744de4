"""Tests for the two-phase tableau solver.

Covers:
1. Known optima (max, min, equality, redundant rows)
2. Infeasible and unbounded classification
3. Step budget semantics (TimedOut)
4. Pivot rule tie-breaks and the unit-column invariant
5. Debug trace and determinism
"""

import pytest

from ratsimplex.generator import GeneratorConfig, ProblemGenerator
from ratsimplex.model import Constraint, LinearProgram
from ratsimplex.rational import ExactRational as Q
from ratsimplex.simplex import (
    Infeasible,
    Optimal,
    SimplexSolver,
    TimedOut,
    Unbounded,
    build_tableau,
    solve,
)


def lp_of(c, rows, maximize=True):
    lp = LinearProgram(c, maximize=maximize)
    for coeffs, sense, rhs in rows:
        lp.add_constraint(Constraint(coeffs, sense, rhs))
    return lp


def known_optimum():
    # maximize 3x + 2y, x + y <= 4, x <= 2
    return lp_of([3, 2], [([1, 1], "<=", 4), ([1, 0], "<=", 2)])


def assert_unit_column(tab, row, col):
    for i, r in enumerate(tab.T):
        assert r[col] == (1 if i == row else 0)


def test_known_optimum():
    res = solve(known_optimum())
    assert res == Optimal(solution=(Q(2), Q(2)), objective_value=Q(10))
    assert res.status == "optimal"


def test_minimization():
    """
    minimize    x + y
    subject to  x + 2y >= 4
                3x + y >= 6
    Optimum at the intersection x = 8/5, y = 6/5 with value 14/5.
    """
    lp = lp_of([1, 1], [([1, 2], ">=", 4), ([3, 1], ">=", 6)], maximize=False)
    res = solve(lp)
    assert isinstance(res, Optimal)
    assert res.solution == (Q(8, 5), Q(6, 5))
    assert res.objective_value == Q(14, 5)


def test_maximization_with_equality():
    """
    maximize    3x + 2y
    subject to  2x + y = 18
                2x + 3y <= 42
    Optimum x = 3, y = 12, z = 33.
    """
    lp = lp_of([3, 2], [([2, 1], "=", 18), ([2, 3], "<=", 42)])
    res = solve(lp)
    assert res == Optimal(solution=(Q(3), Q(12)), objective_value=Q(33))


def test_minimize_negative_objective():
    lp = lp_of([-1], [([1], "<=", 3)], maximize=False)
    assert solve(lp) == Optimal(solution=(Q(3),), objective_value=Q(-3))


def test_fractional_optimum():
    # maximize 2x + y, 3x + 2y <= 7, x <= 2      ->  x = 2, y = 1/2
    lp = lp_of([2, 1], [([3, 2], "<=", 7), ([1, 0], "<=", 2)])
    res = solve(lp)
    assert res == Optimal(solution=(Q(2), Q(1, 2)), objective_value=Q(9, 2))


def test_redundant_equality_keeps_zero_artificial():
    # second row is twice the first; an artificial stays basic at zero
    lp = lp_of([1, 2], [([1, 1], "=", 2), ([2, 2], "=", 4)])
    res = solve(lp)
    assert res == Optimal(solution=(Q(0), Q(2)), objective_value=Q(4))


def test_infeasible():
    lp = lp_of([1], [([1], ">=", 5), ([1], "<=", 3)])
    res = solve(lp)
    assert res == Infeasible()
    assert res.status == "infeasible"


def test_infeasible_equalities():
    lp = lp_of([1, 1], [([1, 1], "=", 5), ([1, 1], "=", 6)])
    assert solve(lp) == Infeasible()


def test_unbounded_without_constraints():
    res = solve(lp_of([1], []))
    assert res == Unbounded()
    assert res.status == "unbounded"


def test_unbounded_direction():
    lp = lp_of([1, 1], [([0, 1], "<=", 3)])
    assert solve(lp) == Unbounded()


def test_unbounded_after_phase_one():
    lp = lp_of([1, 1], [([1, -1], ">=", 1)])
    assert solve(lp) == Unbounded()


def test_zero_steps_times_out():
    res = solve(known_optimum(), max_steps=0)
    assert res == TimedOut()
    assert res.status == "timed_out"


def test_zero_steps_phase_one_times_out():
    lp = lp_of([1], [([1], ">=", 5), ([1], "<=", 3)])
    assert solve(lp, max_steps=0) == TimedOut()


def test_already_optimal_needs_no_pivot():
    lp = lp_of([-1], [([1], "<=", 5)])
    assert solve(lp, max_steps=0) == Optimal(solution=(Q(0),), objective_value=Q(0))


def test_step_budget_boundary():
    # two pivots plus the final optimality check
    solver = SimplexSolver()
    solver.solve(known_optimum())
    assert solver.steps == 3
    assert solve(known_optimum(), max_steps=3) == Optimal(solution=(Q(2), Q(2)), objective_value=Q(10))
    assert solve(known_optimum(), max_steps=2) == TimedOut()


def test_exhausted_budget_reports_timeout_not_unbounded():
    lp = lp_of([1], [])
    assert solve(lp, max_steps=1) == TimedOut()
    assert solve(lp, max_steps=2) == Unbounded()


def test_negative_rhs_is_flipped():
    # -x <= -2 means x >= 2
    lp = lp_of([1], [([-1], "<=", -2), ([1], "<=", 5)], maximize=False)
    assert solve(lp) == Optimal(solution=(Q(2),), objective_value=Q(2))


def test_negative_rhs_ge_needs_no_phase_one(capsys):
    lp = lp_of([3, 2], [([-1, -1], ">=", -4), ([1, 0], "<=", 2)])
    res = solve(lp, debug=True)
    out = capsys.readouterr().out
    assert res == Optimal(solution=(Q(2), Q(2)), objective_value=Q(10))
    assert "=== After Phase I ===" not in out


def test_standard_form_layout():
    lp = lp_of([1, 1], [([1, 0], ">=", 1), ([0, 1], "<=", 2), ([1, 1], "=", 3)])
    tab, n_art = build_tableau(lp)
    assert n_art == 2
    # x1 x2 | e1 s2 | a1 a3 | RHS
    assert tab.var_names == ["x1", "x2", "e1", "s2", "a1", "a3"]
    assert tab.cols == 7
    assert tab.basis == [4, 3, 5]
    assert tab.T[0] == [1, 0, -1, 0, 1, 0, 1]
    # phase I row: +1 on artificials minus every artificial row
    assert tab.T[-1] == [-2, -1, 1, 0, 0, 0, -4]


def test_no_artificials_skips_phase_one(capsys):
    res = solve(known_optimum(), debug=True)
    out = capsys.readouterr().out
    assert isinstance(res, Optimal)
    assert "Initial Tableau" in out
    assert "=== After Phase I ===" not in out
    assert "Before Phase II" in out
    assert "After Phase II" in out


def test_phase_one_trace(capsys):
    lp = lp_of([3, 2], [([2, 1], "=", 18), ([2, 3], "<=", 42)])
    solve(lp, debug=True)
    out = capsys.readouterr().out
    assert "=== After Phase I ===" in out
    assert "Basis:" in out


def test_debug_does_not_change_outcome(capsys):
    lp = lp_of([1, 1], [([1, 2], ">=", 4), ([3, 1], ">=", 6)], maximize=False)
    assert solve(lp, debug=True) == solve(lp, debug=False)


def test_entering_tie_takes_lowest_column():
    lp = lp_of([1, 1], [([1, 1], "<=", 2)])
    assert solve(lp) == Optimal(solution=(Q(2), Q(0)), objective_value=Q(2))


def test_leaving_tie_takes_lowest_row():
    lp = lp_of([1], [([1], "<=", 2), ([2], "<=", 4)])
    tab, _ = build_tableau(lp)
    assert tab.choose_leaving(0) == 0


def test_most_negative_entering():
    tab, _ = build_tableau(lp_of([1, 1], [([1, 1], "<=", 2)]))
    tab.T[-1] = [Q(-1), Q(-5, 2), Q(0), Q(0)]
    assert tab.choose_entering() == 1
    tab.T[-1] = [Q(0), Q(1), Q(0), Q(0)]
    assert tab.choose_entering() is None


def test_unit_column_after_each_pivot():
    lp = lp_of([3, 2, 1], [
        ([2, 1, 1], "=", 18),
        ([2, 3, 0], "<=", 42),
        ([1, 0, 1], ">=", 2),
    ])
    tab, _ = build_tableau(lp)
    pivots = 0
    while True:
        j = tab.choose_entering()
        if j is None:
            break
        i = tab.choose_leaving(j)
        assert i is not None
        tab.pivot(i, j)
        pivots += 1
        assert_unit_column(tab, i, j)
        assert tab.basis[i] == j
    assert pivots > 0


def test_pivot_rejects_zero_element():
    tab, _ = build_tableau(known_optimum())
    with pytest.raises(RuntimeError):
        tab.pivot(1, 1)


def test_determinism_on_generated_programs():
    config = GeneratorConfig(variables=8, constraints=6)
    for seed in (1, 2, 3):
        first = solve(ProblemGenerator(seed, config).generate())
        second = solve(ProblemGenerator(seed, config).generate())
        assert first == second


def test_solver_instances_do_not_share_state():
    solver = SimplexSolver()
    a = solver.solve(known_optimum())
    solver.solve(lp_of([1], []))
    b = solver.solve(known_optimum())
    assert a == b


def test_misaligned_constraint_is_rejected():
    lp = lp_of([1, 1], [([1, 1], "<=", 4)])
    # bypass add_constraint's length check
    lp.constraints = lp.constraints + (Constraint([1, 0, 0], "<=", 3),)
    with pytest.raises(ValueError):
        solve(lp)


def test_sense_cannot_flip_after_construction():
    lp = lp_of([1], [([1], "<=", 3)])
    with pytest.raises(AttributeError):
        lp.maximize = False
    assert solve(lp) == Optimal(solution=(Q(3),), objective_value=Q(3))
