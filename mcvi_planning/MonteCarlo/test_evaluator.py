"""Tests for Monte Carlo policy evaluation."""

import pytest
import numpy as np

from .evaluator import run_single_trial, compute_policy_metrics, PolicyEvaluator
from .data_structures import PolicyTrialResult
from ..PolicyGraph import ControllerNode, MCVIPolicy
from ..CaseStudies.Toy import build_stop_or_wait_pomdp, STATE, OBS, STOP, WAIT
from ..CaseStudies.Tiger import (
    build_tiger_pomdp,
    TIGER_LEFT,
    LISTEN,
    OPEN_LEFT,
    OPEN_RIGHT,
    HEAR_LEFT,
    HEAR_RIGHT,
)


@pytest.fixture
def toy():
    return build_stop_or_wait_pomdp(discount=0.5, stop_reward=10.0)


def wait_then_stop(model):
    policy = MCVIPolicy(model)
    policy.graph.add_node(ControllerNode(STOP))
    policy.graph.root = policy.graph.add_node(ControllerNode(WAIT, {OBS: 0})).index
    return policy


class TestRunSingleTrial:

    def test_terminal_outcome(self, toy):
        policy = wait_then_stop(toy)
        result = run_single_trial(0, toy, policy, STATE, np.random.default_rng(0), 10,
                                  store_trajectory=True)

        assert result.outcome == "terminal"
        assert result.steps_completed == 2
        assert np.isclose(result.discounted_return, 0.25 * 10.0)
        assert [step[1] for step in result.trajectory] == [WAIT, STOP]

    def test_no_controller_outcome(self, toy):
        policy = MCVIPolicy(toy)
        result = run_single_trial(0, toy, policy, STATE, np.random.default_rng(0), 10)
        assert result.outcome == "no_controller"
        assert result.steps_completed == 0
        assert result.discounted_return == 0.0

    def test_horizon_outcome(self, toy):
        policy = wait_then_stop(toy)
        result = run_single_trial(0, toy, policy, STATE, np.random.default_rng(0), 1)
        assert result.outcome == "horizon"
        assert result.steps_completed == 1
        assert result.trajectory == []

    def test_listen_then_open(self):
        tiger = build_tiger_pomdp(discount=0.95, accuracy=1.0)
        policy = MCVIPolicy(tiger)
        policy.graph.add_node(ControllerNode(OPEN_LEFT))
        policy.graph.add_node(ControllerNode(OPEN_RIGHT))
        policy.graph.root = policy.graph.add_node(
            ControllerNode(LISTEN, {HEAR_LEFT: 1, HEAR_RIGHT: 0})
        ).index

        result = run_single_trial(0, tiger, policy, TIGER_LEFT, np.random.default_rng(0), 10)
        assert result.outcome == "terminal"
        assert np.isclose(result.discounted_return, 0.95 * -1.0 + 0.95 ** 2 * 10.0)


class TestComputeMetrics:

    def test_empty(self):
        metrics = compute_policy_metrics([])
        assert metrics.num_trials == 0
        assert metrics.mean_return == 0.0

    def test_constant_returns(self):
        results = [PolicyTrialResult(i, "terminal", 5.0, 1) for i in range(4)]
        metrics = compute_policy_metrics(results)
        assert metrics.mean_return == 5.0
        assert metrics.std_return == 0.0
        assert (metrics.ci_low, metrics.ci_high) == (5.0, 5.0)
        assert metrics.terminal_rate == 1.0

    def test_confidence_interval_contains_mean(self):
        returns = [1.0, 2.0, 3.0, 4.0, 5.0]
        results = [PolicyTrialResult(i, "horizon", r, 3) for i, r in enumerate(returns)]
        metrics = compute_policy_metrics(results, confidence=0.9)

        assert np.isclose(metrics.mean_return, 3.0)
        assert np.isclose(metrics.std_return, np.std(returns, ddof=1))
        assert metrics.ci_low < 3.0 < metrics.ci_high
        assert np.isclose(3.0 - metrics.ci_low, metrics.ci_high - 3.0)
        assert metrics.terminal_rate == 0.0
        assert metrics.mean_steps == 3.0

    def test_str(self):
        results = [PolicyTrialResult(0, "terminal", 5.0, 1)]
        text = str(compute_policy_metrics(results))
        assert "Mean Return" in text
        assert "Trials: 1" in text


class TestPolicyEvaluator:

    def test_evaluate_toy(self, toy):
        policy = wait_then_stop(toy)
        metrics = PolicyEvaluator(toy).evaluate(policy, num_trials=20, seed=0)

        assert metrics.num_trials == 20
        assert np.isclose(metrics.mean_return, 2.5)
        assert metrics.terminal_rate == 1.0
        assert metrics.mean_steps == 2.0

    def test_empty_graph(self, toy):
        metrics = PolicyEvaluator(toy).evaluate(MCVIPolicy(toy), num_trials=5, seed=0)
        assert metrics.no_controller_rate == 1.0
        assert metrics.mean_return == 0.0

    def test_initial_distribution_precedence(self, toy):
        policy = wait_then_stop(toy)
        policy.graph.root_belief = {"elsewhere": 1.0}
        explicit = {STATE: 1.0}

        assert PolicyEvaluator(toy, explicit)._initial_distribution(policy) == explicit
        assert PolicyEvaluator(toy)._initial_distribution(policy) == {"elsewhere": 1.0}
        policy.graph.root_belief = None
        assert PolicyEvaluator(toy)._initial_distribution(policy) == {STATE: 1.0}

    def test_seeded_runs_repeat(self):
        tiger = build_tiger_pomdp()
        policy = MCVIPolicy(tiger)
        policy.graph.root = policy.graph.add_node(ControllerNode(OPEN_LEFT)).index
        evaluator = PolicyEvaluator(tiger)

        first = evaluator.evaluate(policy, num_trials=30, seed=3)
        second = evaluator.evaluate(policy, num_trials=30, seed=3)
        assert first.returns == second.returns
