"""Monte Carlo backup of a belief against the current policy graph.

For a belief b and every action a, the backup estimates

    Q(b, a) = discount * ( E[r] + sum_o P(o | b, a) * max_n V(n, b_ao) )

where n ranges over the controller nodes already in the graph plus the
lower-bound fallback (no node). The best action together with its chosen
edges becomes a candidate controller node, whose value is then re-estimated
on fresh samples of b. The candidate is not registered here; the caller
decides whether it improves on the current lower bound.
"""

from dataclasses import dataclass
from typing import Hashable, List, Optional, Tuple

import numpy as np

from .graph import ControllerNode, MCVIPolicy, PolicyGraph
from .scratch import Scratch
from .simulation import simulate_controller, evaluate_controller


@dataclass
class MonteCarloBackup:
    """Callable belief backup.

    Parameters
    ----------
    lower_bound : BoundEstimator
        Value used where the controller has no plan.
    num_state : int
        States sampled from the belief for the one-step lookahead.
    num_prune_obs : int
        Maximum successor states used to score each observation edge.
    num_eval_belief : int
        Rollouts used to evaluate the resulting controller node.
    max_rollout_depth : int
        Controller steps per rollout before falling back to the lower bound.
    """
    lower_bound: object
    num_state: int = 500
    num_prune_obs: int = 1000
    num_eval_belief: int = 5000
    max_rollout_depth: int = 100

    def __call__(
        self,
        belief,
        policy: MCVIPolicy,
        model,
        rng: np.random.Generator,
        scratch: Scratch,
    ) -> Tuple[ControllerNode, float]:
        graph = policy.graph
        states = [belief.sample(rng) for _ in range(self.num_state)]

        best_node = None
        best_q = -np.inf
        with scratch.acquire():
            for a in model.action_space():
                node, q = self._backup_action(a, states, graph, model, rng, scratch)
                if q > best_q:
                    best_node, best_q = node, q

        value = evaluate_controller(
            graph, best_node, belief, model, self.lower_bound, rng,
            self.num_eval_belief, self.max_rollout_depth,
        )
        return best_node, value

    def _backup_action(
        self,
        action,
        states: List[Hashable],
        graph: PolicyGraph,
        model,
        rng: np.random.Generator,
        scratch: Scratch,
    ) -> Tuple[ControllerNode, float]:
        """One-step lookahead for a single action."""
        scratch.reset()
        n = len(states)
        terminal = model.is_terminal(action)
        reward_total = 0.0
        overflow = []

        for s in states:
            s_next, r = model.sample_transition(s, action, rng)
            reward_total += r
            if terminal:
                continue
            o = model.generate_observation(s_next, rng)
            i = scratch.slot(o)
            if i is None:
                overflow.append(s_next)
                continue
            scratch.counts[i] += 1
            scratch.buckets[i].append(s_next)

        if terminal:
            return ControllerNode(action), model.discount * reward_total / n

        edges = {}
        future = 0.0
        for i, o in enumerate(scratch.observations):
            target, value = self._best_edge(scratch.buckets[i], graph, model, rng)
            scratch.values[i] = value
            if target is not None:
                edges[o] = target.index
            future += scratch.counts[i] * value

        # Observations beyond the scratch capacity get no edge.
        future += sum(self.lower_bound.state_bound(model, s) for s in overflow)

        q = model.discount * (reward_total + future) / n
        return ControllerNode(action, edges), q

    def _best_edge(
        self,
        successors: List[Hashable],
        graph: PolicyGraph,
        model,
        rng: np.random.Generator,
    ) -> Tuple[Optional[ControllerNode], float]:
        """Pick the controller node that does best on these successor states."""
        if len(successors) > self.num_prune_obs:
            idx = rng.choice(len(successors), size=self.num_prune_obs, replace=False)
            scored = [successors[i] for i in idx]
        else:
            scored = successors

        best = None
        best_value = -np.inf
        for candidate in [None] + graph.nodes:
            value = np.mean([
                simulate_controller(graph, candidate, s, model, self.lower_bound, rng,
                                    self.max_rollout_depth)
                for s in scored
            ])
            if value > best_value:
                best, best_value = candidate, float(value)
        return best, best_value
