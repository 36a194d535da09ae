"""Upper and lower value bound estimators.

The solver asks an estimator for `bound(model, belief)`. Policy-graph
rollouts also need a value for a concrete state when a controller runs out
of edges, which is what `state_bound(model, state)` provides.

The defaults here are for tabular models (`DiscretePOMDP`):

    V_blind(b) <= V*(b) <= V_MDP(b)

where V_MDP is the fully observable MDP value and V_blind the value of the
best policy that repeats a single action forever.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, Optional

import numpy as np


class BoundEstimator:
    """
    Base class for value bound estimators.

    Subclasses must implement state_bound(); bound() defaults to the
    belief-weighted average of state_bound().
    """

    def state_bound(self, model, state: Hashable) -> float:
        raise NotImplementedError

    def bound(self, model, belief) -> float:
        return belief.expectation(lambda s: self.state_bound(model, s))


@dataclass
class ConstantBound(BoundEstimator):
    """Same value for every state and belief."""
    value: float

    def state_bound(self, model, state) -> float:
        return float(self.value)

    def bound(self, model, belief) -> float:
        return float(self.value)


class MDPUpperBound(BoundEstimator):
    """
    Optimistic bound from the fully observable MDP (QMDP-style).

    Solves V(s) = max_a discount * (R(s,a) + [a not terminal] sum_s' T V(s'))
    by value iteration. The residual is added back so the result stays an
    upper bound when iteration stops early.
    """

    def __init__(self, tol: float = 1e-6, max_iter: int = 10_000):
        self.tol = tol
        self.max_iter = max_iter
        self._model = None
        self._index: Dict[Hashable, int] = {}
        self._values: Optional[np.ndarray] = None

    def values(self, model) -> np.ndarray:
        if self._model is not model:
            self._values = self._solve(model)
            self._index = model._state_index()
            self._model = model
        return self._values

    def _solve(self, model) -> np.ndarray:
        gamma = model.discount
        n = len(model.states)
        Ts = {a: model._build_T_matrix(a) for a in model.actions}
        Rs = {a: model._reward_vector(a) for a in model.actions}

        V = np.zeros(n)
        residual = np.inf
        for _ in range(self.max_iter):
            Q = np.stack([
                gamma * (Rs[a] if model.is_terminal(a) else Rs[a] + Ts[a] @ V)
                for a in model.actions
            ])
            V_new = Q.max(axis=0)
            residual = float(np.max(np.abs(V_new - V)))
            V = V_new
            if residual < self.tol:
                break

        if gamma > 0:
            V = V + residual * gamma / (1.0 - gamma)
        return V

    def state_bound(self, model, state) -> float:
        V = self.values(model)
        return float(V[self._index[state]])


class BlindPolicyLowerBound(BoundEstimator):
    """
    Pessimistic bound from fixed-action ("blind") policies.

    For every action a, V_a solves V_a = discount * (R_a + T_a V_a), or
    V_a = discount * R_a when a is terminal. A belief is bounded by the best
    single action in expectation; a known state by the best action for it.
    """

    def __init__(self):
        self._model = None
        self._index: Dict[Hashable, int] = {}
        self._alphas: Optional[np.ndarray] = None

    def alpha_vectors(self, model) -> np.ndarray:
        """Return an (|A|, |S|) array of blind-policy values."""
        if self._model is not model:
            self._alphas = self._solve(model)
            self._index = model._state_index()
            self._model = model
        return self._alphas

    def _solve(self, model) -> np.ndarray:
        gamma = model.discount
        n = len(model.states)
        rows = []
        for a in model.actions:
            R_a = model._reward_vector(a)
            if model.is_terminal(a):
                rows.append(gamma * R_a)
            else:
                A = np.eye(n) - gamma * model._build_T_matrix(a)
                rows.append(np.linalg.solve(A, gamma * R_a))
        return np.stack(rows)

    def state_bound(self, model, state) -> float:
        alphas = self.alpha_vectors(model)
        return float(np.max(alphas[:, self._index[state]]))

    def bound(self, model, belief) -> float:
        alphas = self.alpha_vectors(model)
        return max(
            belief.expectation(lambda s, row=row: float(row[self._index[s]]))
            for row in alphas
        )
