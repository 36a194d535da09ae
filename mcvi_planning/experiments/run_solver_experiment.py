"""MCVI solve-and-evaluate experiment runner.

Builds a case study, runs the solver until convergence or budget, executes
the resulting policy graph with Monte Carlo trials, and saves the root
bound history plus evaluation metrics.

Usage:
    python -m mcvi_planning.experiments.run_solver_experiment <config_module>

Example:
    python -m mcvi_planning.experiments.run_solver_experiment configs.tiger_prelim
"""

import sys
import time
import importlib
from dataclasses import asdict
from typing import Any, Dict

from .experiment_io import build_metadata, save_experiment_results

from ..Solver import MCVISolver
from ..MonteCarlo import PolicyEvaluator


# ============================================================
# Helpers
# ============================================================

def summarize(solver: MCVISolver, policy, metrics) -> Dict[str, Any]:
    """Collect everything worth saving from a finished run."""
    root = solver.root_node
    return {
        "iterations": len(solver.history),
        "root_upper": root.upper,
        "root_lower": root.lower,
        "root_gap": root.upper - root.lower,
        "tree_size": len(solver.tree),
        "belief_nodes": solver.tree.num_belief_nodes(),
        "action_nodes": solver.tree.num_action_nodes(),
        "graph_size": len(policy.graph),
        "history": [asdict(r) for r in solver.history],
        "evaluation": {k: v for k, v in asdict(metrics).items() if k != "returns"},
    }


def print_report(summary: Dict[str, Any], case_study_name: str):
    print("\n" + "=" * 70)
    print(f"RESULTS: {case_study_name.upper()}")
    print("=" * 70)
    print(f"  Iterations:   {summary['iterations']}")
    print(f"  Root bounds:  [{summary['root_lower']:.4f}, {summary['root_upper']:.4f}] "
          f"(gap {summary['root_gap']:.4f})")
    print(f"  Tree:         {summary['belief_nodes']} belief / {summary['action_nodes']} action nodes")
    print(f"  Policy graph: {summary['graph_size']} controller nodes")
    ev = summary["evaluation"]
    print(f"  Mean return:  {ev['mean_return']:.4f}  "
          f"CI [{ev['ci_low']:.4f}, {ev['ci_high']:.4f}]  over {ev['num_trials']} trials")


def try_plot(solver: MCVISolver, metrics, config):
    """Save convergence and return-distribution plots next to the results file."""
    try:
        import matplotlib
        matplotlib.use("Agg")
    except ImportError:
        print("\nmatplotlib not available, skipping plots.")
        return

    from ..MonteCarlo.visualization import plot_convergence, plot_return_distribution

    plot_path = config.results_path.replace(".json", ".png")
    plot_convergence(
        solver.history,
        save_path=plot_path,
        show=False,
        title=f"MCVI Root Bounds ({config.case_study_name.upper()})",
    )

    root = solver.root_node
    plot_return_distribution(
        metrics,
        bounds=(root.lower, root.upper),
        save_path=config.results_path.replace(".json", "_returns.png"),
        show=False,
    )


def run_experiment(config, verbose: bool = False, progress: bool = True, plot: bool = True) -> Dict[str, Any]:
    """Solve and evaluate one configured case study; returns the summary."""
    print("=" * 70)
    print(f"MCVI EXPERIMENT: {config.case_study_name.upper()}")
    print(f"Iterations: {config.n_iter}, Branching: {config.obs_branch}, Seed: {config.seed}")
    print(f"Particles: {config.num_particles}, States/backup: {config.num_state}, "
          f"Eval rollouts: {config.num_eval_belief}")
    print("=" * 70)

    # 1. Build problem
    print(f"\nBuilding {config.case_study_name.upper()} problem...")
    model, lbound, ubound = config.build_problem_fn(**config.problem_kwargs)
    print(f"  Actions: {len(model.action_space())}, Discount: {model.discount}")

    # 2. Solve
    print("\nSolving...")
    solver = MCVISolver(config.solver_config(lbound, ubound), verbose=verbose)
    t0 = time.time()
    policy = solver.solve(model, progress=progress)
    solve_time = time.time() - t0
    root = solver.root_node
    print(f"  Done in {solve_time:.1f}s: upper={root.upper:.4f}, lower={root.lower:.4f}")

    # 3. Evaluate
    print(f"\nEvaluating policy over {config.eval_trials} trials...")
    evaluator = PolicyEvaluator(model)
    metrics = evaluator.evaluate(
        policy,
        num_trials=config.eval_trials,
        max_steps=config.eval_max_steps,
        seed=config.seed,
    )

    # 4. Report and save
    summary = summarize(solver, policy, metrics)
    print_report(summary, config.case_study_name)

    metadata = build_metadata(config, extra={"solve_time_s": solve_time})
    save_experiment_results(config.results_path, summary, metadata, history=solver.history)
    print(f"\nResults saved to {config.results_path}")

    if plot:
        try_plot(solver, metrics, config)

    return summary


# ============================================================
# Main
# ============================================================

def main():
    if len(sys.argv) < 2:
        print("Usage: python -m mcvi_planning.experiments.run_solver_experiment <config_module>")
        print("Example: python -m mcvi_planning.experiments.run_solver_experiment configs.tiger_prelim")
        sys.exit(1)

    config_module_name = sys.argv[1]
    try:
        config_module = importlib.import_module(f".{config_module_name}", package="mcvi_planning.experiments")
    except ImportError as e:
        print(f"Error loading config: {e}")
        sys.exit(1)

    run_experiment(config_module.config)

    print("\n" + "=" * 70)
    print("EXPERIMENT COMPLETE")
    print("=" * 70)


if __name__ == "__main__":
    main()
