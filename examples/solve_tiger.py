"""Example: Solve the Tiger POMDP with MCVI and execute the policy graph.

This script demonstrates:
1. Building the Tiger POMDP with its reference bounds
2. Running the solver and watching the root bounds close
3. Reading the resulting policy graph
4. Evaluating the policy by Monte Carlo simulation
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mcvi_planning.CaseStudies.Tiger import build_tiger_problem
from mcvi_planning.Solver import MCVISolver, SolverConfig
from mcvi_planning.MonteCarlo import PolicyEvaluator


def describe_graph(policy):
    """Print every controller node reachable from the root."""
    graph = policy.graph
    if graph.root is None:
        print("  (no controller node improved on the root lower bound)")
        return

    seen = set()
    stack = [graph.root]
    while stack:
        idx = stack.pop()
        if idx in seen:
            continue
        seen.add(idx)
        node = graph.nodes[idx]
        edges = ", ".join(f"{o} -> {t}" for o, t in sorted(node.edges.items()))
        print(f"  [{idx}] {node.action:<11s} {edges}")
        stack.extend(node.edges.values())


def main():
    print("=" * 60)
    print("MCVI on Tiger")
    print("=" * 60)

    model, lbound, ubound = build_tiger_problem(discount=0.95)
    print(f"\n  States: {model.states}")
    print(f"  Actions: {model.action_space()}")
    print(f"  Discount: {model.discount}")

    config = SolverConfig(
        lbound, ubound,
        n_iter=30,
        num_particles=200,
        obs_branch=4,
        num_state=200,
        num_prune_obs=200,
        num_eval_belief=500,
        num_obs=4,
        max_depth=8,
        seed=0,
    )
    solver = MCVISolver(config, verbose=False)

    print("\nSolving...")
    policy = solver.solve(model, progress=True)
    root = solver.root_node
    print(f"  Root bounds: [{root.lower:.4f}, {root.upper:.4f}] after {len(solver.history)} iterations")
    print(f"  Tree: {len(solver.tree)} nodes, policy graph: {len(policy.graph)} nodes")

    print("\nPolicy graph (from root):")
    describe_graph(policy)

    print("\nEvaluating...")
    metrics = PolicyEvaluator(model).evaluate(policy, num_trials=2000, max_steps=50, seed=1)
    print(metrics)


if __name__ == "__main__":
    main()
