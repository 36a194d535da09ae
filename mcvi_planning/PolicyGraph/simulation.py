"""Rollouts of controller nodes from concrete states."""

from typing import Hashable, Optional

import numpy as np

from .graph import ControllerNode, PolicyGraph


def simulate_controller(
    graph: PolicyGraph,
    node: Optional[ControllerNode],
    state: Hashable,
    model,
    lower_bound,
    rng: np.random.Generator,
    max_depth: int = 100,
) -> float:
    """Discounted value of running the controller from `node` in `state`.

    The rollout follows edges until a terminal action is taken. When there is
    no controller node (missing edge, or `node` is None) or the depth cap is
    reached, the remaining value is the lower bound's value for the state.

    Parameters
    ----------
    graph : PolicyGraph
        Graph the edges index into.
    node : ControllerNode or None
        Starting controller node.
    state : hashable
        Starting state.
    model : POMDPModel
        Generative model.
    lower_bound : BoundEstimator
        Fallback value estimator.
    rng : np.random.Generator
        Randomness source.
    max_depth : int
        Maximum number of controller steps.

    Returns
    -------
    float
        Sum over steps t of discount^(t+1) * r_t, plus the discounted
        fallback value.
    """
    gamma = model.discount
    scale = 1.0
    total = 0.0
    for _ in range(max_depth):
        if node is None:
            return total + scale * lower_bound.state_bound(model, state)

        state, r = model.sample_transition(state, node.action, rng)
        scale *= gamma
        total += scale * r
        if model.is_terminal(node.action):
            return total

        obs = model.generate_observation(state, rng)
        node = graph.get(node.edges.get(obs))

    return total + scale * lower_bound.state_bound(model, state)


def evaluate_controller(
    graph: PolicyGraph,
    node: Optional[ControllerNode],
    belief,
    model,
    lower_bound,
    rng: np.random.Generator,
    num_samples: int,
    max_depth: int = 100,
) -> float:
    """Average rollout value of `node` over states sampled from `belief`."""
    total = 0.0
    for _ in range(num_samples):
        s = belief.sample(rng)
        total += simulate_controller(graph, node, s, model, lower_bound, rng, max_depth)
    return total / num_samples
