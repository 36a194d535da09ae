"""Gap-driven search over the belief/action tree.

One pass descends from a node, alternating between belief and action
levels:

- at a belief node whose gap exceeds the target, expand it, back up every
  action child, and follow the child with the largest upper bound;
- at a non-terminal action node, expand it and follow the belief child with
  the largest positive gap, dividing the target gap by the discount.

Every belief node and non-terminal action node on the path is then backed
up, deepest first. The path is kept on an explicit stack, so pass depth is
not limited by the interpreter's recursion limit.
"""

import math
import time
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .tree import ActionNode, BeliefNode, SearchTree


@dataclass
class SearchStats:
    """Summary of one search pass."""
    visited: int = 0
    deepest: int = 0
    gap_closed: bool = False
    timed_out: bool = False


class GapSearch:
    """Runs search passes against a SearchTree.

    Parameters
    ----------
    tree : SearchTree
        Tree to search and grow.
    backup : callable
        Monte Carlo belief backup, (belief, policy, model, rng, scratch) ->
        (ControllerNode, value).
    policy : MCVIPolicy
        Policy whose graph receives improving controller nodes.
    scratch : Scratch
        Buffer handed to every belief backup.
    max_depth : int, optional
        Belief depth at which descent stops. None leaves descent unbounded;
        MCVISolver derives a cap with depth_cap() when the config has none.
    check_bounds : bool
        Raise if a belief backup leaves lower > upper.
    verbose : bool
        Print each visited node.
    """

    def __init__(
        self,
        tree: SearchTree,
        backup,
        policy,
        scratch,
        max_depth: Optional[int] = None,
        check_bounds: bool = False,
        verbose: bool = False,
    ):
        self.tree = tree
        self.backup = backup
        self.policy = policy
        self.scratch = scratch
        self.max_depth = max_depth
        self.check_bounds = check_bounds
        self.verbose = verbose

    def run(self, handle: int, target_gap: float, deadline: Optional[float] = None) -> SearchStats:
        """Search from a belief or action node.

        Parameters
        ----------
        handle : int
            Node to start from.
        target_gap : float
            Gap below which a belief node is not refined further.
        deadline : float, optional
            time.time() value after which descent stops. Nodes already on the
            path are still backed up.

        Returns
        -------
        SearchStats
        """
        tree = self.tree
        model = tree.model
        stats = SearchStats()
        path: List[int] = []
        gap = target_gap

        while True:
            node = tree[handle]
            stats.visited += 1

            if isinstance(node, BeliefNode):
                path.append(handle)
                stats.deepest = max(stats.deepest, node.depth)
                if self.verbose:
                    print(f"belief -> {node.obs} \t {node.upper} \t {node.lower}")
                if node.upper - node.lower <= gap:
                    break
                if self.max_depth is not None and node.depth >= self.max_depth:
                    break
                if _expired(deadline):
                    stats.timed_out = True
                    break
                tree.expand_belief(handle)
                choice = self._select_action(node)
                if choice is None:
                    break
                handle = choice

            else:
                if self.verbose:
                    print(f"act -> {node.action} \t {node.upper}")
                # Terminal is decided by the action label alone.
                if model.is_terminal(node.action):
                    break
                path.append(handle)
                if _expired(deadline):
                    stats.timed_out = True
                    break
                tree.expand_action(handle)
                choice = self._select_belief(node)
                if choice is None:
                    stats.gap_closed = True
                    if self.verbose:
                        print("Gap closed!")
                    break
                gap = gap / model.discount if model.discount > 0 else math.inf
                handle = choice

        for h in reversed(path):
            if isinstance(tree[h], BeliefNode):
                tree.backup_belief(h, self.backup, self.policy, self.scratch, self.check_bounds)
            else:
                tree.backup_action(h)

        return stats

    def _select_action(self, node: BeliefNode) -> Optional[int]:
        """Back up every action child and return the one with the largest upper bound."""
        max_upper = -np.inf
        choice = None
        for c in node.children:
            self.tree.backup_action(c)
            if max_upper < self.tree[c].upper:
                max_upper = self.tree[c].upper
                choice = c
        return choice

    def _select_belief(self, node: ActionNode) -> Optional[int]:
        """Return the belief child with the largest positive gap, if any."""
        max_gap = 0.0
        choice = None
        for c in node.children:
            child = self.tree[c]
            gap = child.upper - child.lower
            if gap > max_gap:
                max_gap = gap
                choice = c
        return choice


MIN_DEPTH_TOLERANCE = 1e-6


def depth_cap(gap: float, discount: float, tolerance: float) -> int:
    """Smallest depth d with discount**d * gap < tolerance.

    A belief at depth d moves the root bounds by at most discount**d times
    its own gap, so beyond this depth refinement cannot matter at the
    `tolerance` scale. A zero tolerance is replaced by MIN_DEPTH_TOLERANCE.

    Raises
    ------
    ValueError
        If `gap` is not finite.
    """
    if not math.isfinite(gap):
        raise ValueError(f"Cannot derive a depth cap from a gap of {gap}")
    tolerance = max(tolerance, MIN_DEPTH_TOLERANCE)
    depth = 0
    while gap * discount ** depth >= tolerance:
        depth += 1
    return depth


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time.time() >= deadline
