"""Stop-or-wait toy configuration with loose constant bounds."""

from .base_config import SolverExperimentConfig
from ...CaseStudies.Toy import build_stop_or_wait_problem


config = SolverExperimentConfig(
    case_study_name="stop_or_wait",
    build_problem_fn=build_stop_or_wait_problem,
    seed=0,
    n_iter=200,
    num_particles=10,
    obs_branch=2,
    num_state=10,
    num_prune_obs=10,
    num_eval_belief=10,
    num_obs=1,
    eval_trials=100,
    eval_max_steps=10,
    results_path="./data/prelim/stop_or_wait_results.json",
    max_depth=5,
    problem_kwargs={"discount": 0.5, "stop_reward": 10.0},
)
