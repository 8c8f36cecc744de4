from __future__ import annotations

"""Feasible region plot for two-variable models (display only, floats)."""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from .model import LinearProgram, Relation
from .simplex import LPOutcome, Optimal

TOL = 1e-9


def _satisfied(lhs, rhs: float, relation: Relation):
    if relation is Relation.LE:
        return lhs <= rhs + TOL
    if relation is Relation.GE:
        return lhs >= rhs - TOL
    return np.abs(lhs - rhs) <= TOL


def _corner_points(A, b):
    """Pairwise intersections of constraint lines and the axes."""
    lines = [(a1, a2, bi) for (a1, a2), bi in zip(A, b)]
    lines += [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]
    pts = []
    for i in range(len(lines)):
        for j in range(i + 1, len(lines)):
            a1, a2, bi = lines[i]
            c1, c2, bj = lines[j]
            det = a1 * c2 - a2 * c1
            if abs(det) < 1e-12:
                continue
            pts.append(((bi * c2 - a2 * bj) / det, (a1 * bj - bi * c1) / det))
    return pts


def plot_2d(lp: LinearProgram, outcome: Optional[LPOutcome] = None):
    """Constraints, shaded feasible region and optimum. None unless n == 2."""
    if lp.num_vars != 2:
        return None

    A = [[float(v) for v in con.coefficients] for con in lp.constraints]
    b = [float(con.rhs) for con in lp.constraints]
    rels = [con.relation for con in lp.constraints]

    def feasible(p):
        x, y = p
        if x < -TOL or y < -TOL:
            return False
        return all(_satisfied(row[0] * x + row[1] * y, bi, r) for row, bi, r in zip(A, b, rels))

    corners = [p for p in _corner_points(A, b) if feasible(p)]
    if isinstance(outcome, Optimal):
        corners.append(tuple(float(v) for v in outcome.solution))
    if not corners:
        return None

    xmax = max(1.0, max(p[0] for p in corners)) * 1.2
    ymax = max(1.0, max(p[1] for p in corners)) * 1.2
    grid_x = np.linspace(0.0, xmax, 400)

    fig, ax = plt.subplots(figsize=(6, 6))
    colors = plt.rcParams["axes.prop_cycle"].by_key()["color"]
    for i, ((a1, a2), bi, r) in enumerate(zip(A, b, rels)):
        c = colors[i % len(colors)]
        label = f"Constraint {i+1}: {a1:g}x1 + {a2:g}x2 {r.value} {bi:g}"
        if abs(a2) < 1e-12:
            if abs(a1) > 1e-12:
                ax.axvline(bi / a1, color=c, alpha=0.7, label=label)
        else:
            ax.plot(grid_x, (bi - a1 * grid_x) / a2, color=c, alpha=0.7, label=label)

    X, Y = np.meshgrid(np.linspace(0.0, xmax, 200), np.linspace(0.0, ymax, 200))
    mask = np.ones_like(X, dtype=bool)
    for row, bi, r in zip(A, b, rels):
        mask &= _satisfied(row[0] * X + row[1] * Y, bi, r)
    ax.contourf(X, Y, mask, levels=[0.5, 1.5], colors=["#e8f7ff"], alpha=0.5)

    bx, by = zip(*corners)
    ax.scatter(bx, by, s=25, color="#444444", alpha=0.8, label="BFS")

    if isinstance(outcome, Optimal):
        xopt, yopt = (float(v) for v in outcome.solution)
        zopt = float(outcome.objective_value)
        c1, c2 = (float(v) for v in lp.objective)
        if abs(c2) > 1e-12:
            ax.plot(grid_x, (zopt - c1 * grid_x) / c2, "r--", label="iso-objective")
        elif abs(c1) > 1e-12:
            ax.axvline(zopt / c1, color="red", linestyle="--", label="iso-objective")
        ax.plot([xopt], [yopt], "ro", label=f"optimal ({outcome.solution[0]}, {outcome.solution[1]})")
        ax.annotate(f"Z* = {outcome.objective_value}", (xopt, yopt), textcoords="offset points", xytext=(8, 8))

    ax.set_xlim(0.0, xmax)
    ax.set_ylim(0.0, ymax)
    ax.set_xlabel("x1")
    ax.set_ylabel("x2")
    ax.set_title("Constraints, Feasible Region, Iso-objective")
    ax.legend(loc="best", fontsize=8)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig
