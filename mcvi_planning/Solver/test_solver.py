"""End-to-end tests for MCVISolver."""

import pytest
import numpy as np

from . import search
from .config import SolverConfig
from .solver import MCVISolver
from .tree import ActionNode, BeliefNode
from ..Models import ConstantBound
from ..Propagators import ParticleBelief
from ..CaseStudies.Toy import (
    build_stop_or_wait_pomdp,
    build_stop_or_wait_problem,
    build_look_then_claim_problem,
    look_then_claim_value,
    claim_action,
    seen_observation,
    STOP,
    LOOK,
)
from ..CaseStudies.Tiger import build_tiger_problem


def toy_config(lbound, ubound, **overrides):
    params = dict(
        n_iter=200,
        num_particles=10,
        obs_branch=2,
        num_state=10,
        num_prune_obs=10,
        num_eval_belief=10,
        num_obs=2,
        max_depth=5,
        seed=0,
    )
    params.update(overrides)
    return SolverConfig(lbound, ubound, **params)


class RoundRobinBelief(ParticleBelief):
    """Hands out its particles in turn, so sampling is exact and repeatable."""

    def sample(self, rng):
        i = getattr(self, "_cursor", 0)
        self._cursor = i + 1
        return self.particles[i % len(self.particles)]


# ============================================================
# Configuration
# ============================================================

class TestSolverConfig:

    def test_defaults(self):
        cfg = SolverConfig(ConstantBound(0), ConstantBound(1))
        assert cfg.n_iter == 100
        assert cfg.obs_branch == 8
        assert cfg.convergence_gap == 0.1
        assert cfg.max_depth is None

    @pytest.mark.parametrize("field_name", ["n_iter", "num_particles", "obs_branch", "num_obs"])
    def test_nonpositive_counts_rejected(self, field_name):
        with pytest.raises(ValueError):
            SolverConfig(ConstantBound(0), ConstantBound(1), **{field_name: 0})

    def test_invalid_limits_rejected(self):
        with pytest.raises(ValueError):
            SolverConfig(ConstantBound(0), ConstantBound(1), time_limit=0.0)
        with pytest.raises(ValueError):
            SolverConfig(ConstantBound(0), ConstantBound(1), max_depth=-1)
        with pytest.raises(ValueError):
            SolverConfig(ConstantBound(0), ConstantBound(1), convergence_gap=-0.5)


# ============================================================
# Stop-or-wait toy
# ============================================================

class TestToySolve:

    def test_tight_bounds_converge_immediately(self):
        model = build_stop_or_wait_pomdp(discount=0.5, stop_reward=10.0)
        solver = MCVISolver(toy_config(ConstantBound(5.0), ConstantBound(5.0)))
        policy = solver.solve(model)

        assert len(solver.history) == 1
        assert solver.history[0].gap == 0.0
        assert solver.root_node.children == []
        assert len(solver.tree) == 1
        # The backup only matches the existing lower bound, so nothing is registered
        assert policy.graph.root is None
        assert len(policy.graph) == 0

    def test_loose_bounds_converge(self):
        model, lbound, ubound = build_stop_or_wait_problem(discount=0.5, stop_reward=10.0)
        solver = MCVISolver(toy_config(lbound, ubound))
        policy = solver.solve(model)

        history = solver.history
        assert len(history) < 200
        assert history[0].upper < 100.0
        assert history[0].lower > -100.0
        assert history[-1].gap < 0.1
        assert all(b.upper <= a.upper for a, b in zip(history, history[1:]))
        assert all(b.lower >= a.lower for a, b in zip(history, history[1:]))
        assert history[1].upper < history[0].upper

        root = solver.root_node
        assert np.isclose(root.lower, 5.0)
        assert root.upper >= root.lower

        assert policy.graph.root == root.best_controller_node
        assert policy.action(policy.initial_node()) == STOP
        assert policy.graph.root_belief == model.initial_state_distribution()

    def test_stop_actions_never_expanded(self):
        model, lbound, ubound = build_stop_or_wait_problem()
        solver = MCVISolver(toy_config(lbound, ubound))
        solver.solve(model)

        stops = [n for n in solver.tree.nodes if isinstance(n, ActionNode) and n.action == STOP]
        assert stops
        assert all(n.children == [] for n in stops)

    def test_history_records(self):
        model, lbound, ubound = build_stop_or_wait_problem()
        solver = MCVISolver(toy_config(lbound, ubound, n_iter=3, convergence_gap=0.0))
        solver.solve(model)

        assert [r.iteration for r in solver.history] == [1, 2, 3]
        for r in solver.history:
            assert np.isclose(r.gap, r.upper - r.lower)
            assert r.tree_size > 1
            assert r.graph_size >= 1
            assert not r.timed_out

    def test_solve_continues_existing_tree(self):
        model, lbound, ubound = build_stop_or_wait_problem()
        solver = MCVISolver(toy_config(lbound, ubound, n_iter=2, convergence_gap=0.0))
        policy = solver.solve(model)
        size = len(solver.tree)
        upper = solver.root_node.upper

        solver.solve(model, policy)
        assert len(solver.history) == 4
        assert len(solver.tree) > size
        assert solver.root_node.upper <= upper

    def test_time_limit_stops_loop(self, monkeypatch):
        monkeypatch.setattr(search, "_expired", lambda deadline: deadline is not None)
        model, lbound, ubound = build_stop_or_wait_problem()
        solver = MCVISolver(toy_config(lbound, ubound, time_limit=60.0))
        solver.solve(model)

        assert len(solver.history) == 1
        assert solver.history[0].timed_out
        assert len(solver.tree) == 1

    def test_default_config_descent_is_bounded(self):
        model, lbound, ubound = build_stop_or_wait_problem()
        config = SolverConfig(
            lbound, ubound, n_iter=3, num_particles=10, num_state=10,
            num_prune_obs=10, num_eval_belief=10, num_obs=2, seed=0,
        )
        assert config.max_depth is None and config.time_limit is None

        solver = MCVISolver(config)
        solver.solve(model)

        # 0.5**11 * 200 < 0.1 <= 0.5**10 * 200
        assert solver.max_depth == 11
        assert len(solver.history) == 3
        depths = [n.depth for n in solver.tree.nodes if isinstance(n, BeliefNode)]
        assert max(depths) == 11
        history = solver.history
        assert all(b.upper <= a.upper for a, b in zip(history, history[1:]))
        assert all(b.lower >= a.lower for a, b in zip(history, history[1:]))

    def test_configured_max_depth_wins(self):
        model, lbound, ubound = build_stop_or_wait_problem()
        solver = MCVISolver(toy_config(lbound, ubound, max_depth=3, n_iter=1))
        solver.solve(model)
        assert solver.max_depth == 3

    def test_unbounded_gap_needs_a_limit(self, monkeypatch):
        model = build_stop_or_wait_pomdp()
        loose = (ConstantBound(-100.0), ConstantBound(float("inf")))
        solver = MCVISolver(toy_config(*loose, max_depth=None))
        with pytest.raises(ValueError, match="max_depth or time_limit"):
            solver.solve(model)

        monkeypatch.setattr(search, "_expired", lambda deadline: deadline is not None)
        solver = MCVISolver(toy_config(*loose, max_depth=None, time_limit=60.0))
        solver.solve(model)
        assert solver.max_depth is None
        assert solver.history[0].timed_out

    def test_check_bounds_on_consistent_bounds(self):
        model, lbound, ubound = build_stop_or_wait_problem()
        solver = MCVISolver(toy_config(lbound, ubound, check_bounds=True))
        solver.solve(model)
        assert solver.history[-1].gap < 0.1

    def test_check_bounds_rejects_inconsistent_bounds(self):
        model = build_stop_or_wait_pomdp()
        crossed = (ConstantBound(10.0), ConstantBound(0.0))

        solver = MCVISolver(toy_config(*crossed, check_bounds=True))
        with pytest.raises(RuntimeError, match="exceeds upper bound"):
            solver.solve(model)

        solver = MCVISolver(toy_config(*crossed))
        solver.solve(model)
        assert solver.history[0].gap == -10.0

    def test_same_seed_same_result(self):
        results = []
        for _ in range(2):
            model, lbound, ubound = build_stop_or_wait_problem()
            solver = MCVISolver(toy_config(lbound, ubound))
            solver.solve(model)
            results.append([(r.upper, r.lower) for r in solver.history])
        assert results[0] == results[1]


# ============================================================
# Look-then-claim toy
# ============================================================

class TestLookThenClaim:
    """Three boxes, discount 0.5, bounds [-100, 10], exact sampling.

    Each iteration explores one more box after `look`, so the root gains one
    correct claim per iteration and both bounds move every time:

        iteration   upper    lower
        1           25/6    -95/6
        2           10/3    -5/2
        3           5/2      5/2
    """

    @pytest.fixture
    def solver_and_model(self):
        model, lbound, ubound = build_look_then_claim_problem(num_boxes=3, discount=0.5)
        model.initial_belief = lambda num_particles, rng: RoundRobinBelief(list(model.states))
        config = SolverConfig(
            lbound, ubound,
            n_iter=20, num_particles=3, obs_branch=3,
            num_state=3, num_prune_obs=3, num_eval_belief=3, num_obs=3,
            max_depth=2, seed=0,
        )
        return MCVISolver(config), model

    def test_both_bounds_improve_every_iteration(self, solver_and_model):
        solver, model = solver_and_model
        solver.solve(model)
        history = solver.history

        assert len(history) == 3 < solver.config.n_iter
        uppers = [10.0] + [r.upper for r in history]
        lowers = [-100.0] + [r.lower for r in history]
        assert all(b < a for a, b in zip(uppers, uppers[1:]))
        assert all(b > a for a, b in zip(lowers, lowers[1:]))
        assert np.allclose(uppers[1:], [25 / 6, 10 / 3, 2.5])
        assert np.allclose(lowers[1:], [-95 / 6, -2.5, 2.5])
        assert [r.graph_size for r in history] == [2, 4, 6]

    def test_converged_policy_looks_then_claims(self, solver_and_model):
        solver, model = solver_and_model
        policy = solver.solve(model)

        assert solver.history[-1].gap < 0.1
        assert np.isclose(solver.root_node.lower, look_then_claim_value(0.5, 10.0))

        node = policy.initial_node()
        assert policy.action(node) == LOOK
        for box in model.states:
            claim = policy.next_node(node, seen_observation(box))
            assert policy.action(claim) == claim_action(box)


# ============================================================
# Tiger
# ============================================================

class TestTigerSolve:

    def test_bounds_monotone(self):
        model, lbound, ubound = build_tiger_problem(discount=0.95)
        config = SolverConfig(
            lbound, ubound,
            n_iter=4, num_particles=50, obs_branch=2,
            num_state=20, num_prune_obs=20, num_eval_belief=20, num_obs=4,
            max_depth=3, seed=0,
        )
        solver = MCVISolver(config)
        policy = solver.solve(model)

        history = solver.history
        assert 1 <= len(history) <= 4
        assert history[0].upper <= 9.5 + 1e-9
        assert all(b.upper <= a.upper for a, b in zip(history, history[1:]))
        assert all(b.lower >= a.lower for a, b in zip(history, history[1:]))
        assert all(b.graph_size >= a.graph_size for a, b in zip(history, history[1:]))

        if policy.graph.root is not None:
            assert 0 <= policy.graph.root < len(policy.graph)
