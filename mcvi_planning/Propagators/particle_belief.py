"""Weighted particle belief.

Represents a belief as N weighted state particles. Each particle also
remembers the reward of the transition that produced it, so a predicted
belief (after an action, before the observation) carries the expected
immediate reward of that action:

    r(b, a) = sum_i w_i * R(s_i, a)

Observation updates reweight particles by P(o | s) instead of resampling,
so they need no randomness.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Optional

import numpy as np

from .belief_base import Belief

State = Hashable


@dataclass(eq=False)
class ParticleBelief(Belief):
    """Belief over hidden states as weighted particles.

    Parameters
    ----------
    particles : list
        Concrete states.
    weights : np.ndarray of shape (N,), optional
        Normalized particle weights. Uniform if omitted.
    rewards : np.ndarray of shape (N,), optional
        Reward of the transition that produced each particle. Zeros if
        omitted.
    """
    particles: List[State]
    weights: Optional[np.ndarray] = None
    rewards: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self):
        n = len(self.particles)
        if n == 0:
            raise ValueError("ParticleBelief requires at least one particle")
        if self.weights is None:
            self.weights = np.full(n, 1.0 / n)
        else:
            self.weights = np.asarray(self.weights, dtype=float)
            total = self.weights.sum()
            if self.weights.shape != (n,) or total <= 0:
                raise ValueError(f"weights must be a positive vector of length {n}")
            self.weights = self.weights / total
        if self.rewards is None:
            self.rewards = np.zeros(n)
        else:
            self.rewards = np.asarray(self.rewards, dtype=float)

    @classmethod
    def from_distribution(
        cls, dist: Dict[State, float], num_particles: int, rng: np.random.Generator
    ) -> "ParticleBelief":
        """Sample `num_particles` equally weighted particles from a distribution."""
        if num_particles <= 0:
            raise ValueError(f"num_particles must be positive, got {num_particles}")
        states = [s for s, p in dist.items() if p > 0]
        probs = np.array([dist[s] for s in states], dtype=float)
        idx = rng.choice(len(states), size=num_particles, p=probs / probs.sum())
        return cls([states[i] for i in idx])

    def __len__(self) -> int:
        return len(self.particles)

    # ------------------------------------------------------------------
    # Belief interface
    # ------------------------------------------------------------------

    def advance_by_action(self, action, model, rng) -> "ParticleBelief":
        """Push every particle through the dynamics, keeping weights."""
        nxt = []
        rewards = np.zeros(len(self.particles))
        for i, s in enumerate(self.particles):
            s_next, r = model.sample_transition(s, action, rng)
            nxt.append(s_next)
            rewards[i] = r
        return type(self)(nxt, self.weights.copy(), rewards)

    def advance_by_observation(self, obs, model) -> "ParticleBelief":
        """Reweight particles by P(obs | s) and drop the impossible ones.

        If no particle explains the observation the predicted belief is
        returned unchanged.
        """
        likelihood = np.array([model.observation_probability(s, obs) for s in self.particles])
        alpha = self.weights * likelihood
        keep = alpha > 0
        if not keep.any():
            return type(self)(list(self.particles), self.weights.copy(), self.rewards.copy())
        idx = np.flatnonzero(keep)
        return type(self)(
            [self.particles[i] for i in idx],
            alpha[idx],
            self.rewards[idx],
        )

    def sample(self, rng) -> State:
        return self.particles[rng.choice(len(self.particles), p=self.weights)]

    def expectation(self, fn: Callable[[State], float]) -> float:
        return float(sum(w * fn(s) for s, w in zip(self.particles, self.weights)))

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    def distribution(self) -> Dict[State, float]:
        """Collapse particles into a state -> probability map."""
        dist: Dict[State, float] = {}
        for s, w in zip(self.particles, self.weights):
            dist[s] = dist.get(s, 0.0) + float(w)
        return dist
