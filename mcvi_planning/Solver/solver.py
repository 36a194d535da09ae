"""MCVI solver: repeated gap-driven search over a persistent tree."""

import math
import time
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from tqdm import trange

from ..PolicyGraph import MCVIPolicy, MonteCarloBackup, Scratch
from .config import SolverConfig
from .search import GapSearch, SearchStats, depth_cap
from .tree import BeliefNode, SearchTree


@dataclass
class IterationRecord:
    """Root bounds after one search iteration."""
    iteration: int
    upper: float
    lower: float
    gap: float
    tree_size: int
    graph_size: int
    elapsed: float
    timed_out: bool = False


class MCVISolver:
    """Online, anytime MCVI planner.

    The search tree and the scratch buffer are created on the first solve()
    and kept, so repeated calls continue refining the same tree.

    Parameters
    ----------
    config : SolverConfig
        Hyperparameters and bound estimators.
    backup : MonteCarloBackup, optional
        Belief backup; built from the config when omitted.
    verbose : bool
        Print per-iteration bounds and, at tree level, every expansion.
    """

    def __init__(
        self,
        config: SolverConfig,
        backup: Optional[MonteCarloBackup] = None,
        verbose: bool = False,
    ):
        self.config = config
        self.verbose = verbose
        self.rng = np.random.default_rng(config.seed)
        if backup is None:
            backup = MonteCarloBackup(
                lower_bound=config.lbound,
                num_state=config.num_state,
                num_prune_obs=config.num_prune_obs,
                num_eval_belief=config.num_eval_belief,
                max_rollout_depth=config.max_rollout_depth,
            )
        self.backup = backup
        self.tree: Optional[SearchTree] = None
        self.root: Optional[int] = None
        self.scratch: Optional[Scratch] = None
        self.max_depth: Optional[int] = None
        self.history: List[IterationRecord] = []

    @property
    def root_node(self) -> Optional[BeliefNode]:
        if self.root is None:
            return None
        return self.tree[self.root]

    def create_policy(self, model) -> MCVIPolicy:
        return MCVIPolicy(model)

    def initialize_root(self, model):
        """Build the root from the model's initial belief and allocate scratch."""
        cfg = self.config
        b0 = model.initial_belief(cfg.num_particles, self.rng)
        self.tree = SearchTree(model, cfg.ubound, cfg.lbound, cfg.obs_branch, self.rng,
                               verbose=self.verbose)
        self.root = self.tree.add_root(b0)
        self.scratch = Scratch(cfg.num_obs)
        self.max_depth = self._search_depth(model, self.tree[self.root])
        if self.verbose:
            print(f"Search depth cap: {self.max_depth}")

    def _search_depth(self, model, root: BeliefNode) -> Optional[int]:
        """Configured max_depth, or one derived from the initial root gap.

        Only a run with a time limit may search without a depth cap, and only
        when the root gap is unbounded.
        """
        cfg = self.config
        if cfg.max_depth is not None:
            return cfg.max_depth
        gap = root.upper - root.lower
        if cfg.time_limit is not None and not math.isfinite(gap):
            return None
        try:
            return depth_cap(gap, model.discount, cfg.convergence_gap)
        except ValueError as e:
            raise ValueError(f"{e}; set max_depth or time_limit in SolverConfig") from e

    def solve(self, model, policy: Optional[MCVIPolicy] = None, progress: bool = False) -> MCVIPolicy:
        """Run up to `n_iter` search iterations and return the policy.

        Stops early once the root gap falls below `convergence_gap` or the
        time limit runs out.
        """
        cfg = self.config
        if self.root is None:
            self.initialize_root(model)
        if policy is None:
            policy = self.create_policy(model)

        searcher = GapSearch(
            self.tree, self.backup, policy, self.scratch,
            max_depth=self.max_depth,
            check_bounds=cfg.check_bounds,
            verbose=self.verbose,
        )

        start = time.time()
        deadline = start + cfg.time_limit if cfg.time_limit is not None else None
        iterations = trange(cfg.n_iter, desc="MCVI") if progress else range(cfg.n_iter)

        for i in iterations:
            stats = searcher.run(self.root, 0.0, deadline)
            root = self.tree[self.root]

            policy.graph.root = root.best_controller_node
            initial_dist = getattr(model, "initial_state_distribution", None)
            policy.graph.root_belief = initial_dist() if initial_dist is not None else None

            record = self._record(len(self.history) + 1, root, policy, start, stats)
            self.history.append(record)
            if self.verbose:
                print(f"iter {record.iteration} \t upper: {record.upper:.4f} \t "
                      f"lower: {record.lower:.4f} \t time: {record.elapsed:.2f}s")

            if root.upper - root.lower < cfg.convergence_gap:
                break
            if stats.timed_out:
                if self.verbose:
                    print(f"Time limit of {cfg.time_limit}s reached")
                break

        return policy

    def _record(self, iteration: int, root: BeliefNode, policy: MCVIPolicy,
                start: float, stats: SearchStats) -> IterationRecord:
        return IterationRecord(
            iteration=iteration,
            upper=float(root.upper),
            lower=float(root.lower),
            gap=float(root.upper - root.lower),
            tree_size=len(self.tree),
            graph_size=len(policy.graph),
            elapsed=time.time() - start,
            timed_out=stats.timed_out,
        )
