"""Solver hyperparameters."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SolverConfig:
    """
    Hyperparameters:

    - `n_iter`            : Number of search iterations
    - `num_particles`     : Number of particles in the root belief
    - `obs_branch`        : Branching factor (belief children per action node)
    - `num_state`         : Number of states sampled from a belief per backup
    - `num_prune_obs`     : Successor states used to score each observation edge
    - `num_eval_belief`   : Rollouts used to evaluate a new controller node
    - `num_obs`           : Distinct observations tracked per backed-up action

    Bounds:

    - `lbound`            : Lower bound estimator, `lbound.bound(model, belief)`
                            and `lbound.state_bound(model, state)` are called.
    - `ubound`            : Upper bound estimator, `ubound.bound(model, belief)`.

    Stopping and safety:

    - `convergence_gap`   : Stop once root upper - lower drops below this
    - `max_depth`         : Do not expand belief nodes at or beyond this depth.
                            When None, the solver uses the smallest depth d
                            with discount**d * (initial root gap) below
                            `convergence_gap` (see Solver.search.depth_cap)
    - `max_rollout_depth` : Controller steps per rollout
    - `time_limit`        : Wall-clock budget in seconds for one solve() call
    - `check_bounds`      : Raise if a backup leaves lower > upper
    - `seed`              : Seed for the solver's random generator

    `check_bounds` is off by default. Lower bounds come from a finite number
    of rollouts, so with a tight upper bound a noisy estimate can land
    slightly above it without anything being wrong. Turn it on to catch
    inconsistent bound estimators, or for problems where rollouts are
    deterministic.
    """
    lbound: object
    ubound: object
    n_iter: int = 100
    num_particles: int = 500
    obs_branch: int = 8
    num_state: int = 500
    num_prune_obs: int = 1000
    num_eval_belief: int = 5000
    num_obs: int = 50
    convergence_gap: float = 0.1
    max_depth: Optional[int] = None
    max_rollout_depth: int = 100
    time_limit: Optional[float] = None
    check_bounds: bool = False
    seed: Optional[int] = None

    def __post_init__(self):
        for name in ("n_iter", "num_particles", "obs_branch", "num_state",
                     "num_prune_obs", "num_eval_belief", "num_obs", "max_rollout_depth"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.convergence_gap < 0:
            raise ValueError(f"convergence_gap must be non-negative, got {self.convergence_gap}")
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {self.time_limit}")
