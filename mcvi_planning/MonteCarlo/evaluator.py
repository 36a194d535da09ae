"""Monte Carlo evaluation of policy graphs.

Executes an MCVIPolicy against the generative model it was planned for and
reports the discounted return, using the same value convention as the
solver (an action with reward r at step t contributes discount^(t+1) * r).
"""

from typing import Dict, Hashable, List, Optional

import numpy as np
from scipy import stats

from ..PolicyGraph import MCVIPolicy
from .data_structures import PolicyTrialResult, PolicyEvaluationMetrics


def run_single_trial(
    trial_id: int,
    model,
    policy: MCVIPolicy,
    initial_state: Hashable,
    rng: np.random.Generator,
    max_steps: int,
    store_trajectory: bool = False,
) -> PolicyTrialResult:
    """Run the policy from a concrete initial state.

    Parameters
    ----------
    trial_id : int
        Trial identifier
    model : POMDPModel
        Generative model
    policy : MCVIPolicy
        Policy to execute (starts at its graph root)
    initial_state : hashable
        Starting state
    rng : np.random.Generator
        Randomness source
    max_steps : int
        Maximum number of actions
    store_trajectory : bool
        Whether to store the full trajectory

    Returns
    -------
    PolicyTrialResult
    """
    gamma = model.discount
    state = initial_state
    node = policy.initial_node()
    total = 0.0
    scale = 1.0
    steps = 0
    outcome = "horizon"
    trajectory = []

    for step in range(max_steps):
        if node is None:
            outcome = "no_controller"
            break

        action = policy.action(node)
        next_state, r = model.sample_transition(state, action, rng)
        scale *= gamma
        total += scale * r
        steps = step + 1

        if model.is_terminal(action):
            if store_trajectory:
                trajectory.append((state, action, r, None))
            outcome = "terminal"
            break

        obs = model.generate_observation(next_state, rng)
        if store_trajectory:
            trajectory.append((state, action, r, obs))
        node = policy.next_node(node, obs)
        state = next_state

    return PolicyTrialResult(
        trial_id=trial_id,
        outcome=outcome,
        discounted_return=total,
        steps_completed=steps,
        trajectory=trajectory,
    )


def compute_policy_metrics(
    results: List[PolicyTrialResult], confidence: float = 0.95
) -> PolicyEvaluationMetrics:
    """Aggregate trial results into PolicyEvaluationMetrics."""
    n = len(results)
    if n == 0:
        return PolicyEvaluationMetrics(
            num_trials=0, mean_return=0.0, std_return=0.0, ci_low=0.0, ci_high=0.0,
            terminal_rate=0.0, no_controller_rate=0.0, mean_steps=0.0,
            confidence=confidence,
        )

    returns = np.array([r.discounted_return for r in results])
    mean = float(np.mean(returns))
    std = float(np.std(returns, ddof=1)) if n > 1 else 0.0

    if n > 1 and std > 0:
        lo, hi = stats.t.interval(confidence, n - 1, loc=mean, scale=std / np.sqrt(n))
    else:
        lo, hi = mean, mean

    return PolicyEvaluationMetrics(
        num_trials=n,
        mean_return=mean,
        std_return=std,
        ci_low=float(lo),
        ci_high=float(hi),
        terminal_rate=sum(r.outcome == "terminal" for r in results) / n,
        no_controller_rate=sum(r.outcome == "no_controller" for r in results) / n,
        mean_steps=float(np.mean([r.steps_completed for r in results])),
        returns=returns.tolist(),
        confidence=confidence,
    )


class PolicyEvaluator:
    """High-level interface for Monte Carlo policy evaluation.

    Initial states are drawn from `initial_distribution` if given, else from
    the policy graph's root belief, else from the model's initial state
    distribution.
    """

    def __init__(self, model, initial_distribution: Optional[Dict[Hashable, float]] = None):
        self.model = model
        self.initial_distribution = initial_distribution

    def _initial_distribution(self, policy: MCVIPolicy) -> Dict[Hashable, float]:
        for dist in (self.initial_distribution, policy.graph.root_belief):
            if dist is not None:
                return dist
        dist = self.model.initial_state_distribution()
        if dist is None:
            raise ValueError("No initial state distribution available for evaluation")
        return dist

    def run_trials(
        self,
        policy: MCVIPolicy,
        num_trials: int,
        max_steps: int = 100,
        seed: Optional[int] = None,
        store_trajectories: bool = False,
    ) -> List[PolicyTrialResult]:
        rng = np.random.default_rng(seed)
        dist = self._initial_distribution(policy)
        states = list(dist.keys())
        probs = np.array([dist[s] for s in states], dtype=float)
        probs = probs / probs.sum()

        results = []
        for trial_id in range(num_trials):
            s0 = states[rng.choice(len(states), p=probs)]
            results.append(run_single_trial(
                trial_id, self.model, policy, s0, rng, max_steps, store_trajectories
            ))
        return results

    def evaluate(
        self,
        policy: MCVIPolicy,
        num_trials: int = 1000,
        max_steps: int = 100,
        seed: Optional[int] = None,
        confidence: float = 0.95,
    ) -> PolicyEvaluationMetrics:
        """Run `num_trials` executions and aggregate their discounted returns."""
        results = self.run_trials(policy, num_trials, max_steps, seed)
        return compute_policy_metrics(results, confidence)
