from __future__ import annotations

"""
Two-phase tableau Simplex over exact rationals.

- Maximizes internally; minimization uses the objective negated once at
  model construction and flips the final value back.
- Constraints: <=, >=, =; every decision variable is >= 0.
- Phase I minimizes the artificial mass, Phase II optimizes the real
  objective. Phase I is skipped when no artificial variable is needed.
- Pivoting: most negative reduced cost enters (lowest column on ties),
  minimum ratio leaves (lowest row on ties). This path is part of the
  contract: reference results depend on it, so no anti-cycling variant.
- A global step budget bounds both phases; exhausting it yields TimedOut.

Tableau layout per row: [x1..xn, slack/surplus..., artificial..., RHS],
last row is the objective row.
"""

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple, Union

from .model import Constraint, LinearProgram, Relation
from .rational import ONE, ZERO, ExactRational

DEFAULT_MAX_STEPS = 200


# --- outcomes ---

@dataclass(frozen=True)
class Optimal:
    solution: Tuple[ExactRational, ...]  # values for the original n variables
    objective_value: ExactRational
    status: ClassVar[str] = "optimal"


@dataclass(frozen=True)
class Infeasible:
    status: ClassVar[str] = "infeasible"


@dataclass(frozen=True)
class Unbounded:
    status: ClassVar[str] = "unbounded"


@dataclass(frozen=True)
class TimedOut:
    status: ClassVar[str] = "timed_out"


LPOutcome = Union[Optimal, Infeasible, Unbounded, TimedOut]


class Tableau:
    def __init__(self, mat: List[List[ExactRational]], basis: List[int], var_names: List[str]):
        self.T = mat                      # (m+1) x cols, objective row last
        self.basis = basis                # basic column per constraint row
        self.var_names = var_names        # one per non-RHS column
        self.steps = 0

    @property
    def m(self) -> int:
        return len(self.T) - 1

    @property
    def cols(self) -> int:
        return len(self.T[0])

    @property
    def rhs(self) -> int:
        return self.cols - 1

    def objective_value(self) -> ExactRational:
        return self.T[-1][-1]

    def choose_entering(self) -> Optional[int]:
        obj_row = self.T[-1]
        best_j = None
        best_val = ZERO
        for j in range(self.rhs):
            if obj_row[j] < best_val:
                best_val = obj_row[j]
                best_j = j
        return best_j

    def choose_leaving(self, enter_j: int) -> Optional[int]:
        best_i = None
        best_ratio = None
        for i in range(self.m):
            aij = self.T[i][enter_j]
            if aij > ZERO:
                ratio = self.T[i][-1] / aij
                if best_ratio is None or ratio < best_ratio:
                    best_ratio = ratio
                    best_i = i
        return best_i

    def pivot(self, row: int, col: int):
        piv = self.T[row][col]
        if piv.is_zero():
            raise RuntimeError("Zero pivot encountered")
        self.T[row] = [v / piv for v in self.T[row]]
        pivot_row = self.T[row]
        for i in range(self.m + 1):
            if i == row:
                continue
            coeff = self.T[i][col]
            if coeff.is_zero():
                continue
            self.T[i] = [v - coeff * p for v, p in zip(self.T[i], pivot_row)]
        self.basis[row] = col

    def optimize(self, max_steps: int) -> bool:
        """Pivot until optimal. False when unbounded or out of steps."""
        while True:
            self.steps += 1
            enter_j = self.choose_entering()
            if enter_j is None:
                return True
            leave_i = self.choose_leaving(enter_j)
            if leave_i is None:
                return False
            self.pivot(leave_i, enter_j)
            if self.steps >= max_steps:
                return False

    def drop_columns(self, count: int):
        """Remove the `count` columns just before RHS."""
        if count == 0:
            return
        keep = self.rhs - count
        self.T = [row[:keep] + [row[-1]] for row in self.T]
        self.var_names = self.var_names[:keep]

    def format(self, title: str) -> str:
        headers = self.var_names + ["RHS"]
        cells = [[str(v) for v in row] for row in self.T]
        colw = max(6, max(len(s) for s in headers + [c for row in cells for c in row]) + 2)
        basis = [self.var_names[j] if j < len(self.var_names) else f"#{j}" for j in self.basis]
        lines = [f"\n=== {title} ===", f"Basis: {basis}"]
        lines.append(" ".join(f"{h:>{colw}}" for h in headers))
        lines.append("-" * (len(headers) * (colw + 1)))
        for i, row in enumerate(cells):
            if i == self.m:
                lines.append("-" * (len(headers) * (colw + 1)))
            lines.append(" ".join(f"{c:>{colw}}" for c in row))
        return "\n".join(lines)

    def print_tableau(self, title: str):
        print(self.format(title))


def build_tableau(lp: LinearProgram) -> Tuple[Tableau, int]:
    """Standard form plus Phase I objective row. Returns (tableau, #artificials)."""
    n = lp.num_vars
    constraints: List[Constraint] = [c.normalized() for c in lp.constraints]
    m = len(constraints)

    n_slack = sum(1 for c in constraints if c.relation in (Relation.LE, Relation.GE))
    n_art = sum(1 for c in constraints if c.relation in (Relation.GE, Relation.EQ))
    cols = n + n_slack + n_art + 1

    T = [[ZERO] * cols for _ in range(m + 1)]
    basis = [0] * m
    slack_names: List[str] = []
    art_names: List[str] = []
    slack_j = n
    art_j = n + n_slack
    for i, con in enumerate(constraints):
        if len(con.coefficients) != n:
            raise ValueError(f"constraint {i+1} has {len(con.coefficients)} coefficients, objective has {n}")
        T[i][:n] = list(con.coefficients)
        if con.relation is Relation.LE:
            T[i][slack_j] = ONE
            basis[i] = slack_j
            slack_names.append(f"s{i+1}")
            slack_j += 1
        elif con.relation is Relation.GE:
            # surplus plus artificial
            T[i][slack_j] = -ONE
            slack_names.append(f"e{i+1}")
            slack_j += 1
            T[i][art_j] = ONE
            basis[i] = art_j
            art_names.append(f"a{i+1}")
            art_j += 1
        else:
            T[i][art_j] = ONE
            basis[i] = art_j
            art_names.append(f"a{i+1}")
            art_j += 1
        T[i][-1] = con.rhs

    # Phase I: minimize the sum of artificials, reduced against their rows
    first_art = n + n_slack
    zrow = [ONE if first_art <= j < cols - 1 else ZERO for j in range(cols)]
    for i in range(m):
        if basis[i] >= first_art:
            zrow = [z - v for z, v in zip(zrow, T[i])]
    T[-1] = zrow

    var_names = [f"x{j+1}" for j in range(n)] + slack_names + art_names
    return Tableau(T, basis, var_names), n_art


def is_feasible(tab: Tableau) -> bool:
    return tab.objective_value().is_zero()


def reset_objective(tab: Tableau, lp: LinearProgram):
    """Phase II objective row: -c, reduced against the current basis."""
    c = lp.max_objective
    n = lp.num_vars
    zrow = [ZERO] * tab.cols
    for j in range(n):
        zrow[j] = -c[j]
    for i, var in enumerate(tab.basis):
        if var < n and not c[var].is_zero():
            zrow = [z + c[var] * v for z, v in zip(zrow, tab.T[i])]
    tab.T[-1] = zrow


def extract_solution(tab: Tableau, lp: LinearProgram) -> Optimal:
    n = lp.num_vars
    values = [ZERO] * n
    for i, var in enumerate(tab.basis):
        if var < n:
            values[var] = tab.T[i][-1]
    z = tab.objective_value()
    if not lp.maximize:
        z = -z
    return Optimal(solution=tuple(values), objective_value=z)


class SimplexSolver:
    """Two-phase solver. One tableau per `solve` call, owned by that call."""

    def __init__(self, max_steps: int = DEFAULT_MAX_STEPS, debug: bool = False):
        self.max_steps = max_steps
        self.debug = debug
        self.steps = 0

    def _failure(self, tab: Tableau) -> LPOutcome:
        return TimedOut() if tab.steps >= self.max_steps else Unbounded()

    def solve(self, lp: LinearProgram) -> LPOutcome:
        tab, n_art = build_tableau(lp)
        try:
            return self._run(tab, lp, n_art)
        finally:
            self.steps = tab.steps

    def _run(self, tab: Tableau, lp: LinearProgram, n_art: int) -> LPOutcome:
        if self.debug:
            tab.print_tableau("Initial Tableau")

        if n_art > 0:
            finished = tab.optimize(self.max_steps)
            if self.debug:
                tab.print_tableau("After Phase I")
            if not finished:
                return self._failure(tab)
            if not is_feasible(tab):
                return Infeasible()
            tab.drop_columns(n_art)

        reset_objective(tab, lp)
        if self.debug:
            tab.print_tableau("Before Phase II")

        finished = tab.optimize(self.max_steps)
        if self.debug:
            tab.print_tableau("After Phase II")
        if not finished:
            return self._failure(tab)
        return extract_solution(tab, lp)


def solve(lp: LinearProgram, max_steps: int = DEFAULT_MAX_STEPS, debug: bool = False) -> LPOutcome:
    return SimplexSolver(max_steps=max_steps, debug=debug).solve(lp)
