"""Base class for beliefs used by the search tree."""

from typing import Callable, Hashable

State = Hashable
Action = Hashable
Observation = Hashable


class Belief:
    """
    Abstract base class for beliefs.

    Subclasses must implement:
    - advance_by_action(action, model, rng): Predicted belief after an action
    - advance_by_observation(obs, model): Posterior belief after an observation
    - sample(rng): Draw a concrete state
    - expectation(fn): Belief-weighted average of fn(state)

    Beliefs are immutable from the solver's point of view: every update
    returns a new belief.
    """

    def advance_by_action(self, action: Action, model, rng) -> "Belief":
        raise NotImplementedError

    def advance_by_observation(self, obs: Observation, model) -> "Belief":
        raise NotImplementedError

    def sample(self, rng) -> State:
        raise NotImplementedError

    def expectation(self, fn: Callable[[State], float]) -> float:
        raise NotImplementedError
