"""Preliminary MCVI experiment configuration for Tiger."""

from .base_config import SolverExperimentConfig
from ...CaseStudies.Tiger import build_tiger_problem


config = SolverExperimentConfig(
    case_study_name="tiger",
    build_problem_fn=build_tiger_problem,
    seed=42,
    n_iter=50,
    num_particles=200,  # Reduced for prelim
    obs_branch=4,
    num_state=100,  # Reduced for prelim
    num_prune_obs=50,
    num_eval_belief=200,  # Reduced for prelim
    num_obs=2,  # Tiger has two observations
    eval_trials=1000,
    eval_max_steps=50,
    results_path="./data/prelim/tiger_mcvi_results.json",
    max_depth=10,
    time_limit=300.0,
    problem_kwargs={"discount": 0.95},
)
