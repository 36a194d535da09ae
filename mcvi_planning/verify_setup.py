#!/usr/bin/env python3
"""Check that dependencies import and that a tiny solve converges."""

import sys
from importlib import import_module

REQUIRED = [
    ('numpy', 'NumPy'),
    ('scipy', 'SciPy'),
    ('matplotlib', 'Matplotlib'),
    ('tqdm', 'tqdm'),
]

PROJECT = [
    'mcvi_planning.Models',
    'mcvi_planning.Propagators',
    'mcvi_planning.PolicyGraph',
    'mcvi_planning.Solver',
    'mcvi_planning.MonteCarlo',
    'mcvi_planning.CaseStudies',
]


def check_modules():
    ok = True
    print("Dependencies")
    print("-" * 50)
    for module_name, display_name in REQUIRED:
        try:
            mod = import_module(module_name)
            print(f"✓ {display_name:20s} (version {getattr(mod, '__version__', 'unknown')})")
        except ImportError as e:
            print(f"✗ {display_name:20s} MISSING ({e})")
            ok = False

    print("\nProject modules")
    print("-" * 50)
    for module_name in PROJECT:
        try:
            import_module(module_name)
            print(f"✓ {module_name}")
        except ImportError as e:
            print(f"✗ {module_name} FAILED ({e})")
            ok = False
    return ok


def check_solve():
    """Stop-or-wait with loose bounds should close its root gap."""
    from mcvi_planning.Solver import MCVISolver, SolverConfig
    from mcvi_planning.CaseStudies.Toy import build_stop_or_wait_problem, optimal_value

    model, lbound, ubound = build_stop_or_wait_problem()
    config = SolverConfig(
        lbound, ubound, n_iter=200, num_particles=10, obs_branch=2,
        num_state=10, num_prune_obs=10, num_eval_belief=10, num_obs=1,
        max_depth=5, seed=0,
    )
    solver = MCVISolver(config)
    solver.solve(model)
    root = solver.root_node

    print("\nSmoke solve")
    print("-" * 50)
    print(f"  iterations: {len(solver.history)}, bounds: [{root.lower:.4f}, {root.upper:.4f}], "
          f"optimal: {optimal_value():.4f}")
    converged = root.upper - root.lower < config.convergence_gap
    print("✓ converged" if converged else "✗ did not converge")
    return converged


def main():
    ok = check_modules()
    if ok:
        ok = check_solve()

    print()
    print("-" * 50)
    if ok:
        print("✓ All checks passed! Environment is ready.")
        return 0
    print("✗ Some checks failed. Please review errors above.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
