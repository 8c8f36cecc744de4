from __future__ import annotations

"""
Deterministic random linear programs.

The stream comes from a 64-bit linear congruential generator whose state
wraps like a signed 64-bit integer, so the same seed always produces the
same coefficients on every platform. Multiplier from L'Ecuyer, "Tables of
linear congruential generators of different sizes and good lattice
structure", Table 4.
"""

from dataclasses import dataclass
from typing import Union

from .model import Constraint, LinearProgram, Relation
from .rational import ZERO, ExactRational

_MASK64 = (1 << 64) - 1
_INT64_MAX = (1 << 63) - 1


class LCG:
    MULTIPLIER = 3935559000370003845
    INCREMENT = 0xFACED  # any odd number

    def __init__(self, seed: int):
        self.state = _to_int64(seed)

    def step(self) -> int:
        """Advance and return the new state as a signed 64-bit value."""
        self.state = _to_int64(self.MULTIPLIER * self.state + self.INCREMENT)
        return self.state

    def next_double(self) -> float:
        """Uniform-ish double in [0, 1]."""
        return float(self.step() & _INT64_MAX) / float(_INT64_MAX)


def _to_int64(x: int) -> int:
    x &= _MASK64
    return x - (1 << 64) if x > _INT64_MAX else x


@dataclass(frozen=True)
class GeneratorConfig:
    variables: int = 50
    constraints: int = 50
    nonzero_coefficient_chance: float = 0.2
    eq_chance: float = 0.05
    ge_chance: float = 0.1


class ProblemGenerator:
    def __init__(self, rng: Union[LCG, int], config: GeneratorConfig = GeneratorConfig()):
        self.rng = rng if isinstance(rng, LCG) else LCG(rng)
        self.config = config

    def random_coefficient(self, center: int) -> ExactRational:
        """Integer in [center - 128, center + 127]."""
        return ExactRational((self.rng.step() >> 56) + center)

    def random_relation(self) -> Relation:
        r = self.rng.next_double()
        if r < self.config.eq_chance:
            return Relation.EQ
        if r < self.config.eq_chance + self.config.ge_chance:
            return Relation.GE
        return Relation.LE

    def generate(self) -> LinearProgram:
        cfg = self.config
        objective = [self.random_coefficient(0) for _ in range(cfg.variables)]
        lp = LinearProgram(objective, maximize=True)
        for _ in range(cfg.constraints):
            coefficients = []
            for _ in range(cfg.variables):
                if self.rng.next_double() < cfg.nonzero_coefficient_chance:
                    coefficients.append(self.random_coefficient(64))
                else:
                    coefficients.append(ZERO)
            relation = self.random_relation()
            rhs = self.random_coefficient(128)
            lp.add_constraint(Constraint(coefficients, relation, rhs))
        return lp
