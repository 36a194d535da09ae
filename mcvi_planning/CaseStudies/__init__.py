"""Example problems for the solver."""

from . import Tiger
from . import Toy

__all__ = ['Tiger', 'Toy']
