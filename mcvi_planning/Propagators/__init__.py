"""Belief representations for the search tree."""

from .belief_base import Belief
from .particle_belief import ParticleBelief

__all__ = [
    'Belief',
    'ParticleBelief',
]
