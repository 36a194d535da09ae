"""Monte Carlo evaluation of policies produced by the solver.

Modules
-------
data_structures
    PolicyTrialResult and PolicyEvaluationMetrics dataclasses
evaluator
    Trial execution, metric aggregation and the PolicyEvaluator class
visualization
    Plotting functions for solver convergence and return distributions
"""

from .data_structures import PolicyTrialResult, PolicyEvaluationMetrics

from .evaluator import (
    run_single_trial,
    compute_policy_metrics,
    PolicyEvaluator,
)

from .visualization import plot_convergence, plot_return_distribution

__all__ = [
    "PolicyTrialResult",
    "PolicyEvaluationMetrics",
    "run_single_trial",
    "compute_policy_metrics",
    "PolicyEvaluator",
    "plot_convergence",
    "plot_return_distribution",
]
