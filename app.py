import json
import io
from contextlib import redirect_stdout
from decimal import Decimal

import streamlit as st

from ratsimplex import LinearProgram, Optimal, SimplexSolver, fmt_out
from ratsimplex.bench import BenchmarkConfig, run_benchmark
from ratsimplex.generator import GeneratorConfig
from ratsimplex.plot import plot_2d
from ratsimplex.simplex import DEFAULT_MAX_STEPS

st.set_page_config(page_title="Exact Simplex", layout="wide")
st.title("Exact Two-Phase Simplex")

# Sidebar options
with st.sidebar:
    st.header("Options")
    mode = st.radio("Mode", ["Solve", "Benchmark"], index=0)
    max_steps = st.number_input("Max steps", min_value=0, value=DEFAULT_MAX_STEPS, step=10)
    if mode == "Solve":
        is_min = st.checkbox("Minimize (default: Maximize)", value=False)
        show_trace = st.checkbox("Show tableau trace", value=True)
        show_graph = st.checkbox("Show graph (2 variables only)", value=True)
    else:
        program_count = st.number_input("Programs", min_value=1, value=BenchmarkConfig.program_count)
        seed = st.number_input("Seed", value=BenchmarkConfig.seed, step=1)
        variables = st.number_input("Variables", min_value=1, value=GeneratorConfig.variables)
        constraints = st.number_input("Constraints", min_value=0, value=GeneratorConfig.constraints)

default_json = {
    "c": [3, 2],
    "A": [[1, 1], [1, 0]],
    "b": [4, 2],
    "senses": ["<=", "<="],
    "maximize": True
}

if mode == "Solve":
    st.subheader("Model JSON")
    json_text = st.text_area("Edit LP JSON here (numbers may be \"p/q\" strings)",
                             json.dumps(default_json, indent=2), height=260)
    if st.button("Solve"):
        try:
            cfg = json.loads(json_text, parse_float=Decimal)
            if is_min:
                cfg["maximize"] = False
            lp = LinearProgram.from_dict(cfg)
        except Exception as e:
            st.error(f"Invalid LP: {e}")
        else:
            solver = SimplexSolver(max_steps=int(max_steps), debug=show_trace)
            buf = io.StringIO()
            with redirect_stdout(buf):
                res = solver.solve(lp)

            if show_trace:
                st.subheader("Tableaux")
                st.code(buf.getvalue())
            st.subheader("Result")
            st.json({
                "status": res.status,
                "optimal_value": fmt_out(res.objective_value) if isinstance(res, Optimal) else None,
                "solution": [fmt_out(v) for v in res.solution] if isinstance(res, Optimal) else [],
                "steps": solver.steps,
            })

            st.subheader("Graph")
            fig = plot_2d(lp, res) if show_graph else None
            if fig is not None:
                st.pyplot(fig)
            else:
                st.info("Graph available only for 2 variables with a feasible region.")
else:
    if st.button("Run benchmark"):
        config = BenchmarkConfig(
            program_count=int(program_count),
            seed=int(seed),
            max_steps=int(max_steps),
            generator=GeneratorConfig(variables=int(variables), constraints=int(constraints)),
        )
        with st.spinner("Solving..."):
            buf = io.StringIO()
            with redirect_stdout(buf):
                result = run_benchmark(config, verbose=True)
        st.code(buf.getvalue())
        st.json({
            "optimal": result.feasible,
            "infeasible": result.infeasible,
            "unbounded": result.unbounded,
            "timed_out": result.timed_out,
            "objective_sum": fmt_out(result.objective_sum),
        })
        for check in result.validate(config):
            msg = f"{check.name}: expected {check.expected}, got {check.actual}"
            if check.ok:
                st.success(msg)
            else:
                st.error(msg)
