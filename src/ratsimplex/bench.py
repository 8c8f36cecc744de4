from __future__ import annotations

"""
Batch benchmark: generate many random programs from one seeded stream,
solve each, and aggregate outcome counts plus the exact sum of optimal
objective values. With default parameters the aggregate is checked
against known reference values.
"""

from dataclasses import dataclass, field
from typing import List

from .generator import LCG, GeneratorConfig, ProblemGenerator
from .rational import ZERO, ExactRational
from .simplex import DEFAULT_MAX_STEPS, Infeasible, Optimal, SimplexSolver, TimedOut, Unbounded

DEFAULT_PROGRAM_COUNT = 10
DEFAULT_SEED = 42

# hold only for the default parameters
EXPECTED_SUM = ExactRational.parse(
    "2890528279780327546890920560296572053017582970462229169962737102270355639494297269989090972103025110388363"
    "/2775065187046933750458072200920143470609500555385545496730279581456018896727786579265533127822441171840"
)
EXPECTED_FEASIBLE = 3
EXPECTED_INFEASIBLE = 7
EXPECTED_UNBOUNDED = 0
EXPECTED_TIMED_OUT = 0


@dataclass(frozen=True)
class BenchmarkConfig:
    program_count: int = DEFAULT_PROGRAM_COUNT
    seed: int = DEFAULT_SEED
    max_steps: int = DEFAULT_MAX_STEPS
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)

    def __post_init__(self):
        if self.program_count <= 0:
            raise ValueError("program_count must be positive")

    @property
    def is_default(self) -> bool:
        return self == BenchmarkConfig()


@dataclass(frozen=True)
class Check:
    name: str
    expected: object
    actual: object

    @property
    def ok(self) -> bool:
        return self.expected == self.actual


@dataclass
class BenchmarkResult:
    feasible: int = 0
    infeasible: int = 0
    unbounded: int = 0
    timed_out: int = 0
    objective_sum: ExactRational = ZERO

    @property
    def total(self) -> int:
        return self.feasible + self.infeasible + self.unbounded + self.timed_out

    def record(self, outcome) -> None:
        if isinstance(outcome, Optimal):
            self.feasible += 1
            self.objective_sum = self.objective_sum + outcome.objective_value
        elif isinstance(outcome, Infeasible):
            self.infeasible += 1
        elif isinstance(outcome, Unbounded):
            self.unbounded += 1
        elif isinstance(outcome, TimedOut):
            self.timed_out += 1
        else:
            raise TypeError(f"unknown outcome: {outcome!r}")

    def validate(self, config: BenchmarkConfig) -> List[Check]:
        if config.is_default:
            return [
                Check("real sum compared to expected sum", EXPECTED_SUM, self.objective_sum),
                Check("expected feasible", EXPECTED_FEASIBLE, self.feasible),
                Check("expected infeasible", EXPECTED_INFEASIBLE, self.infeasible),
                Check("expected unbounded", EXPECTED_UNBOUNDED, self.unbounded),
                Check("expected timed out", EXPECTED_TIMED_OUT, self.timed_out),
            ]
        return [Check("programs run", config.program_count, self.total)]


def run_benchmark(config: BenchmarkConfig = BenchmarkConfig(), verbose: bool = False) -> BenchmarkResult:
    gen = ProblemGenerator(LCG(config.seed), config.generator)
    result = BenchmarkResult()
    for k in range(config.program_count):
        lp = gen.generate()
        solver = SimplexSolver(max_steps=config.max_steps)
        outcome = solver.solve(lp)
        result.record(outcome)
        if verbose:
            print(f"Program {k+1}: {outcome.status} after {solver.steps} steps")
    return result
