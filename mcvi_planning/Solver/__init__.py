"""Belief/action search tree, gap-driven search and the MCVI driver loop."""

from .config import SolverConfig
from .tree import BeliefNode, ActionNode, TreeNode, SearchTree
from .search import GapSearch, SearchStats, depth_cap
from .solver import MCVISolver, IterationRecord

__all__ = [
    'SolverConfig',
    'BeliefNode',
    'ActionNode',
    'TreeNode',
    'SearchTree',
    'GapSearch',
    'SearchStats',
    'depth_cap',
    'MCVISolver',
    'IterationRecord',
]
