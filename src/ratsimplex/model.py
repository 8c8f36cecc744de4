from __future__ import annotations

"""
Linear program data model.

All decision variables are implicitly >= 0. Constraint order matters:
it fixes the row order of the tableau and therefore which vertex the
solver lands on when several are optimal.

Dict / JSON shape (same as the CLI input):
{
  "c": [3, 2],                  # objective coefficients (length n)
  "A": [[1, 1], [1, 0]],        # constraint rows (m x n)
  "b": [4, 2],                  # right-hand sides (length m)
  "senses": ["<=", "<="],       # entries in {"<=", ">=", "="}
  "maximize": true
}
Numbers may be ints, decimals or rational literal strings such as "3/4".
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Tuple

from .rational import ExactRational, Num, R


class Relation(Enum):
    LE = "<="
    GE = ">="
    EQ = "="

    @classmethod
    def parse(cls, text) -> Relation:
        if isinstance(text, Relation):
            return text
        key = str(text).strip().lower()
        aliases = {
            "<=": cls.LE, "le": cls.LE,
            ">=": cls.GE, "ge": cls.GE,
            "=": cls.EQ, "==": cls.EQ, "eq": cls.EQ,
        }
        if key not in aliases:
            raise ValueError("sense must be one of <=, >=, =")
        return aliases[key]

    def mirrored(self) -> Relation:
        if self is Relation.LE:
            return Relation.GE
        if self is Relation.GE:
            return Relation.LE
        return self


@dataclass(frozen=True, init=False)
class Constraint:
    coefficients: Tuple[ExactRational, ...]
    relation: Relation
    rhs: ExactRational

    def __init__(self, coefficients: Iterable[Num], relation, rhs: Num):
        object.__setattr__(self, "coefficients", tuple(R(v) for v in coefficients))
        object.__setattr__(self, "relation", Relation.parse(relation))
        object.__setattr__(self, "rhs", R(rhs))

    def normalized(self) -> Constraint:
        """Same constraint with a non-negative right-hand side."""
        if self.rhs >= 0:
            return self
        return Constraint([-v for v in self.coefficients], self.relation.mirrored(), -self.rhs)


@dataclass
class LinearProgram:
    objective: Tuple[ExactRational, ...]
    maximize: bool = True
    constraints: Tuple[Constraint, ...] = field(default_factory=tuple)
    # maximisation form of the objective, fixed at construction
    max_objective: Tuple[ExactRational, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.objective = tuple(R(v) for v in self.objective)
        self.maximize = bool(self.maximize)
        if self.maximize:
            self.max_objective = self.objective
        else:
            self.max_objective = tuple(-v for v in self.objective)
        given = tuple(self.constraints)
        self.constraints = ()
        for c in given:
            self.add_constraint(c)

    def __setattr__(self, name, value):
        # objective and sense are fixed once max_objective exists
        if name in ("objective", "maximize", "max_objective") and "max_objective" in self.__dict__:
            raise AttributeError(f"{name} is fixed at construction")
        super().__setattr__(name, value)

    @property
    def num_vars(self) -> int:
        return len(self.objective)

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    def add_constraint(self, constraint: Constraint) -> None:
        if len(constraint.coefficients) != self.num_vars:
            raise ValueError(
                f"constraint has {len(constraint.coefficients)} coefficients, "
                f"objective has {self.num_vars}"
            )
        self.constraints = self.constraints + (constraint,)

    @classmethod
    def from_dict(cls, cfg: Dict[str, object]) -> LinearProgram:
        for key in ("c", "A", "b", "senses"):
            if key not in cfg:
                raise ValueError(f"missing LP field: {key!r}")
        A, b, senses = cfg["A"], cfg["b"], cfg["senses"]
        if not (len(A) == len(b) == len(senses)):
            raise ValueError("A, b and senses must have the same length")
        lp = cls(objective=cfg["c"], maximize=cfg.get("maximize", True))
        for row, rhs, sense in zip(A, b, senses):
            lp.add_constraint(Constraint(row, sense, rhs))
        return lp

    def to_dict(self) -> Dict[str, object]:
        return {
            "c": [str(v) for v in self.objective],
            "A": [[str(v) for v in con.coefficients] for con in self.constraints],
            "b": [str(con.rhs) for con in self.constraints],
            "senses": [con.relation.value for con in self.constraints],
            "maximize": self.maximize,
        }
