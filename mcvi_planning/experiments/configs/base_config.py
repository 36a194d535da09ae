"""Base configuration classes for experiments."""

from dataclasses import dataclass
from typing import Callable, Optional

from ...Solver import SolverConfig


@dataclass
class SolverExperimentConfig:
    """Configuration for solve-then-evaluate experiments."""

    # Case study; build_problem_fn returns (model, lower_bound, upper_bound)
    case_study_name: str
    build_problem_fn: Callable

    # Solver hyperparameters
    seed: int
    n_iter: int
    num_particles: int
    obs_branch: int
    num_state: int
    num_prune_obs: int
    num_eval_belief: int
    num_obs: int

    # Policy evaluation
    eval_trials: int
    eval_max_steps: int

    # Output
    results_path: str

    # Optional stopping controls
    convergence_gap: float = 0.1
    max_depth: Optional[int] = None
    time_limit: Optional[float] = None

    # Optional build_problem kwargs
    problem_kwargs: dict = None

    def __post_init__(self):
        if self.problem_kwargs is None:
            self.problem_kwargs = {}

    def solver_config(self, lbound, ubound) -> SolverConfig:
        """SolverConfig for the given bound estimators."""
        return SolverConfig(
            lbound=lbound,
            ubound=ubound,
            n_iter=self.n_iter,
            num_particles=self.num_particles,
            obs_branch=self.obs_branch,
            num_state=self.num_state,
            num_prune_obs=self.num_prune_obs,
            num_eval_belief=self.num_eval_belief,
            num_obs=self.num_obs,
            convergence_gap=self.convergence_gap,
            max_depth=self.max_depth,
            time_limit=self.time_limit,
            seed=self.seed,
        )
