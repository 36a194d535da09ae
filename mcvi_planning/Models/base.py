"""Base class for decision-process models used by the solver."""

from typing import Dict, Hashable, List, Optional, Tuple

import numpy as np

State = Hashable
Action = Hashable
Observation = Hashable


class POMDPModel:
    """
    Abstract generative POMDP model.

    Subclasses must implement:
    - action_space(): Enumerate the actions (order is significant)
    - is_terminal(action): Whether taking the action ends the episode
    - reward(belief): Expected immediate reward carried by a predicted belief
    - sample_transition(state, action, rng): Sample (next_state, reward)
    - generate_observation(state, rng): Sample an observation for a state
    - observation_probability(state, obs): Likelihood P(obs | state)

    and set a `discount` attribute in [0, 1).

    Values follow a single convention everywhere: taking action a with
    immediate reward r is worth discount * (r + V(next)); a terminal action
    is worth discount * r.
    """

    discount: float = 0.95

    def action_space(self) -> List[Action]:
        raise NotImplementedError

    def is_terminal(self, action: Action) -> bool:
        raise NotImplementedError

    def reward(self, belief) -> float:
        raise NotImplementedError

    def sample_transition(
        self, state: State, action: Action, rng: np.random.Generator
    ) -> Tuple[State, float]:
        raise NotImplementedError

    def generate_observation(self, state: State, rng: np.random.Generator) -> Observation:
        raise NotImplementedError

    def observation_probability(self, state: State, obs: Observation) -> float:
        raise NotImplementedError

    def initial_state_distribution(self) -> Optional[Dict[State, float]]:
        """Return the initial state distribution, or None if the model has none."""
        return None

    def initial_belief(self, num_particles: int, rng: np.random.Generator):
        """Draw a particle belief from the initial state distribution."""
        from ..Propagators.particle_belief import ParticleBelief

        dist = self.initial_state_distribution()
        if dist is None:
            raise ValueError(
                f"{type(self).__name__} has no initial state distribution; "
                "override initial_belief() to supply a root belief"
            )
        return ParticleBelief.from_distribution(dist, num_particles, rng)
