import argparse
import json
import sys
from decimal import Decimal

from .bench import BenchmarkConfig, run_benchmark
from .generator import GeneratorConfig
from .model import LinearProgram
from .rational import fmt_out
from .simplex import DEFAULT_MAX_STEPS, Optimal, SimplexSolver


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ratsimplex", description="Exact two-phase tableau Simplex")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("solve", help="Solve an LP described by a JSON file")
    s.add_argument("json", help="Path to JSON file describing the LP")
    s.add_argument("--sense", choices=["max", "min"], default=None, help="Objective sense (default: use JSON or max)")
    s.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS, help="Pivot step budget for both phases")
    s.add_argument("--debug", action="store_true", help="Print the tableau at each phase boundary")
    s.add_argument("--graph", action="store_true", help="Plot constraints and optimum (2 variables only)")

    b = sub.add_parser("bench", help="Solve a batch of seeded random LPs")
    b.add_argument("--program-count", type=int, default=BenchmarkConfig.program_count)
    b.add_argument("--seed", type=int, default=BenchmarkConfig.seed)
    b.add_argument("--max-steps", type=int, default=DEFAULT_MAX_STEPS)
    b.add_argument("--variables", type=int, default=GeneratorConfig.variables)
    b.add_argument("--constraints", type=int, default=GeneratorConfig.constraints)
    b.add_argument("-v", "--verbose", action="store_true", help="Print each program's outcome")
    return p


def cmd_solve(args, parser) -> int:
    try:
        with open(args.json, "r") as f:
            # Decimal keeps JSON fractions exact until they become rationals
            cfg = json.load(f, parse_float=Decimal)
    except (OSError, json.JSONDecodeError) as e:
        parser.error(f"cannot read {args.json}: {e}")

    # CLI sense overrides JSON; JSON falls back to max
    if args.sense is not None:
        cfg["maximize"] = args.sense == "max"
    lp = LinearProgram.from_dict(cfg)

    solver = SimplexSolver(max_steps=args.max_steps, debug=args.debug)
    res = solver.solve(lp)

    print("\n=== Result ===")
    print("Status:", res.status)
    if isinstance(res, Optimal):
        print("Optimal value:", fmt_out(res.objective_value))
        print("Solution x:", [fmt_out(v) for v in res.solution])
    print("Steps:", solver.steps)

    if args.graph:
        from .plot import plot_2d
        import matplotlib.pyplot as plt

        if plot_2d(lp, res) is None:
            print("Graph only supports 2 variables with a non-empty feasible region.")
        else:
            plt.show()
    return 0


def cmd_bench(args) -> int:
    config = BenchmarkConfig(
        program_count=args.program_count,
        seed=args.seed,
        max_steps=args.max_steps,
        generator=GeneratorConfig(variables=args.variables, constraints=args.constraints),
    )
    result = run_benchmark(config, verbose=args.verbose)

    print("\n=== Benchmark ===")
    print("Optimal:", result.feasible)
    print("Infeasible:", result.infeasible)
    print("Unbounded:", result.unbounded)
    print("Timed out:", result.timed_out)
    print("Objective sum:", fmt_out(result.objective_sum))

    failed = 0
    for check in result.validate(config):
        mark = "ok" if check.ok else "FAILED"
        print(f"[{mark}] {check.name}: expected {check.expected}, got {check.actual}")
        failed += not check.ok
    return 1 if failed else 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "solve":
        return cmd_solve(args, parser)
    return cmd_bench(args)


if __name__ == "__main__":
    sys.exit(main())
