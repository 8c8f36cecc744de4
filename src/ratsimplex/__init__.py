"""Exact-arithmetic two-phase tableau Simplex."""

from .model import Constraint, LinearProgram, Relation
from .rational import DivisionByZero, ExactRational, InvalidFormat, R, RationalError, fmt_out
from .simplex import Infeasible, LPOutcome, Optimal, SimplexSolver, TimedOut, Unbounded, solve

__all__ = [
    "Constraint",
    "DivisionByZero",
    "ExactRational",
    "Infeasible",
    "InvalidFormat",
    "LPOutcome",
    "LinearProgram",
    "Optimal",
    "R",
    "RationalError",
    "Relation",
    "SimplexSolver",
    "TimedOut",
    "Unbounded",
    "fmt_out",
    "solve",
]
