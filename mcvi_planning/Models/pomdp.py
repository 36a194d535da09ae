"""Discrete Partially Observable Markov Decision Process with rewards."""

from dataclasses import dataclass, field
from typing import Dict, Tuple, List, Hashable, Optional

import numpy as np

from .base import POMDPModel

State = Hashable
Action = Hashable
Observation = Hashable


@dataclass
class DiscretePOMDP(POMDPModel):
    """
    Tabular POMDP with rewards, discounting and terminal actions.

    states           : list of states
    observations     : list of possible observations
    actions          : list of actions (enumeration order is kept)
    T                : (s, a) -> {s' -> P(s' | s, a)}
    P                : s -> {o -> P(o | s)}
    R                : (s, a) -> immediate reward
    discount         : discount factor in [0, 1)
    terminal_actions : actions that end the episode when taken
    initial          : s -> P(s_0 = s), optional

    Observations depend on the state reached after the transition.
    """
    states: List[State]
    observations: List[Observation]
    actions: List[Action]
    T: Dict[Tuple[State, Action], Dict[State, float]]
    P: Dict[State, Dict[Observation, float]]
    R: Dict[Tuple[State, Action], float]
    discount: float = 0.95
    terminal_actions: List[Action] = field(default_factory=list)
    initial: Optional[Dict[State, float]] = None

    def __post_init__(self):
        if not 0.0 <= self.discount < 1.0:
            raise ValueError(f"discount must be in [0, 1), got {self.discount}")
        if not self.actions:
            raise ValueError("actions must be non-empty.")

        self._terminal = set(self.terminal_actions)
        unknown = self._terminal - set(self.actions)
        if unknown:
            raise ValueError(f"Terminal actions not in action list: {sorted(map(str, unknown))}")

        # Sampling tables: (s, a) -> (successors, probabilities)
        self._succ = {}
        for s in self.states:
            for a in self.actions:
                row = self.T.get((s, a))
                if row is None:
                    raise ValueError(f"Missing transition row for {(s, a)}")
                self._succ[(s, a)] = _sampling_table(row, f"T[{(s, a)}]")

        missing = [s for s in self.states if s not in self.P]
        if missing:
            raise ValueError(f"Missing observation rows for states {missing}")
        self._emit = {s: _sampling_table(self.P[s], f"P[{s}]") for s in self.states}

        if self.initial is not None:
            _sampling_table(self.initial, "initial")

    # ------------------------------------------------------------------
    # POMDPModel interface
    # ------------------------------------------------------------------

    def action_space(self) -> List[Action]:
        return list(self.actions)

    def is_terminal(self, action: Action) -> bool:
        return action in self._terminal

    def reward(self, belief) -> float:
        """Expected reward of the transition that produced `belief`."""
        return float(np.dot(belief.weights, belief.rewards))

    def sample_transition(self, state, action, rng):
        succ, probs = self._succ[(state, action)]
        nxt = succ[rng.choice(len(succ), p=probs)]
        return nxt, float(self.R.get((state, action), 0.0))

    def generate_observation(self, state, rng):
        obs, probs = self._emit[state]
        return obs[rng.choice(len(obs), p=probs)]

    def observation_probability(self, state, obs) -> float:
        return float(self.P[state].get(obs, 0.0))

    def initial_state_distribution(self) -> Optional[Dict[State, float]]:
        if self.initial is None:
            return None
        return dict(self.initial)

    # ------------------------------------------------------------------
    # Matrix views
    # ------------------------------------------------------------------

    def _state_index(self) -> Dict[State, int]:
        """Return mapping from state to index."""
        return {s: i for i, s in enumerate(self.states)}

    def _build_T_matrix(self, action: Action) -> np.ndarray:
        """
        Returns T_a as an n x n matrix where [i,j] = P(s_j | s_i, a).
        """
        idx = self._state_index()
        n = len(self.states)
        Tmat = np.zeros((n, n), dtype=float)
        for s in self.states:
            row = self.T.get((s, action), {})
            i = idx[s]
            for sp, p in row.items():
                j = idx[sp]
                Tmat[i, j] = float(p)
        return Tmat

    def _reward_vector(self, action: Action) -> np.ndarray:
        """r_a[i] = R(s_i, a)."""
        return np.array([float(self.R.get((s, action), 0.0)) for s in self.states])


def _sampling_table(dist: Dict[Hashable, float], name: str):
    """Split a distribution into (outcomes, probabilities), checking it sums to 1."""
    total = sum(float(p) for p in dist.values())
    if any(p < 0 for p in dist.values()) or not np.isclose(total, 1.0, atol=1e-6):
        raise ValueError(f"{name} is not a probability distribution (sum={total:.6f})")
    outcomes = [k for k, p in dist.items() if p > 0]
    probs = np.array([float(dist[k]) for k in outcomes])
    return outcomes, probs / probs.sum()
