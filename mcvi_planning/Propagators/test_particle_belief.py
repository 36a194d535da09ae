"""Tests for ParticleBelief."""

import pytest
import numpy as np

from .particle_belief import ParticleBelief
from ..CaseStudies.Tiger import (
    build_tiger_pomdp,
    TIGER_LEFT,
    TIGER_RIGHT,
    LISTEN,
    OPEN_LEFT,
    HEAR_LEFT,
)


@pytest.fixture
def tiger():
    return build_tiger_pomdp(discount=0.95, accuracy=0.85)


@pytest.fixture
def uniform():
    return ParticleBelief([TIGER_LEFT, TIGER_RIGHT])


class TestParticleBelief:

    def test_default_weights_uniform(self, uniform):
        assert np.allclose(uniform.weights, [0.5, 0.5])
        assert np.allclose(uniform.rewards, [0.0, 0.0])
        assert len(uniform) == 2

    def test_weights_normalized(self):
        b = ParticleBelief([TIGER_LEFT, TIGER_RIGHT], np.array([3.0, 1.0]))
        assert np.allclose(b.weights, [0.75, 0.25])

    def test_empty_particles_rejected(self):
        with pytest.raises(ValueError):
            ParticleBelief([])

    def test_bad_weights_rejected(self):
        with pytest.raises(ValueError):
            ParticleBelief([TIGER_LEFT, TIGER_RIGHT], np.array([1.0]))
        with pytest.raises(ValueError):
            ParticleBelief([TIGER_LEFT], np.array([0.0]))

    def test_from_distribution(self):
        rng = np.random.default_rng(0)
        b = ParticleBelief.from_distribution({TIGER_LEFT: 1.0, TIGER_RIGHT: 0.0}, 20, rng)
        assert len(b) == 20
        assert set(b.particles) == {TIGER_LEFT}

    def test_advance_by_action_records_rewards(self, tiger, uniform):
        rng = np.random.default_rng(0)
        predicted = uniform.advance_by_action(LISTEN, tiger, rng)

        assert predicted.particles == [TIGER_LEFT, TIGER_RIGHT]
        assert np.allclose(predicted.rewards, [-1.0, -1.0])
        assert np.isclose(tiger.reward(predicted), -1.0)

    def test_advance_by_action_keeps_original(self, tiger, uniform):
        rng = np.random.default_rng(0)
        uniform.advance_by_action(OPEN_LEFT, tiger, rng)
        assert uniform.particles == [TIGER_LEFT, TIGER_RIGHT]
        assert np.allclose(uniform.rewards, [0.0, 0.0])

    def test_advance_by_observation_reweights(self, tiger, uniform):
        posterior = uniform.advance_by_observation(HEAR_LEFT, tiger)
        dist = posterior.distribution()
        assert np.isclose(dist[TIGER_LEFT], 0.85)
        assert np.isclose(dist[TIGER_RIGHT], 0.15)

    def test_advance_by_observation_drops_impossible(self, tiger):
        # Perfect hearing rules out the right-hand particle
        perfect = build_tiger_pomdp(accuracy=1.0)
        b = ParticleBelief([TIGER_LEFT, TIGER_RIGHT])
        posterior = b.advance_by_observation(HEAR_LEFT, perfect)
        assert posterior.particles == [TIGER_LEFT]
        assert np.allclose(posterior.weights, [1.0])

    def test_unexplained_observation_keeps_belief(self, tiger, uniform):
        posterior = uniform.advance_by_observation("silence", tiger)
        assert posterior.particles == uniform.particles
        assert np.allclose(posterior.weights, uniform.weights)
        assert posterior is not uniform

    def test_sample_respects_weights(self):
        b = ParticleBelief([TIGER_LEFT, TIGER_RIGHT], np.array([1.0, 0.0]))
        rng = np.random.default_rng(0)
        assert all(b.sample(rng) == TIGER_LEFT for _ in range(20))

    def test_expectation(self):
        b = ParticleBelief([TIGER_LEFT, TIGER_RIGHT], np.array([0.25, 0.75]))
        value = b.expectation(lambda s: 4.0 if s == TIGER_LEFT else 0.0)
        assert np.isclose(value, 1.0)

    def test_distribution_merges_duplicates(self):
        b = ParticleBelief([TIGER_LEFT, TIGER_LEFT, TIGER_RIGHT, TIGER_LEFT])
        dist = b.distribution()
        assert np.isclose(dist[TIGER_LEFT], 0.75)
        assert np.isclose(dist[TIGER_RIGHT], 0.25)
