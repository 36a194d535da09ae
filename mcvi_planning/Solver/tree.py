"""Belief/action search tree with lazy expansion and bound backups.

Nodes live in a flat arena and refer to each other by integer handle; the
root is handle 0. The tree only grows: nodes are never removed, and each
node's children are created exactly once.
"""

from dataclasses import dataclass, field
from typing import Any, Hashable, List, Optional, Union

import numpy as np

Action = Hashable
Observation = Hashable


@dataclass(eq=False)
class BeliefNode:
    """Belief reached by an observation.

    Attributes
    ----------
    obs : hashable or None
        Observation that led here, None for the root.
    belief : Belief
        Posterior belief.
    upper, lower : float
        Current bounds on the belief's value.
    best_controller_node : int or None
        Index of the policy-graph node achieving `lower`.
    children : list of int
        ActionNode handles, one per action.
    depth : int
        Number of observations between the root and this node.
    """
    obs: Optional[Observation]
    belief: Any
    upper: float
    lower: float
    best_controller_node: Optional[int] = None
    children: List[int] = field(default_factory=list)
    depth: int = 0

    @property
    def gap(self) -> float:
        return self.upper - self.lower


@dataclass(eq=False)
class ActionNode:
    """Action taken from the parent belief.

    Attributes
    ----------
    action : hashable
        Action label.
    belief : Belief
        Predicted belief after the action, before any observation.
    upper : float
        Upper bound on the action's value.
    immediate_reward : float
        Expected reward of the action from the parent belief.
    children : list of int
        BeliefNode handles, `branching_factor` of them once expanded.
    depth : int
        Depth of the parent belief.
    """
    action: Action
    belief: Any
    upper: float
    immediate_reward: float
    children: List[int] = field(default_factory=list)
    depth: int = 0


TreeNode = Union[BeliefNode, ActionNode]


class SearchTree:
    """Arena of search nodes plus the expansion and backup operations.

    Parameters
    ----------
    model : POMDPModel
        Generative model.
    upper_bound, lower_bound : BoundEstimator
        Bound estimators for new belief nodes.
    branching_factor : int
        Observation samples per action node.
    rng : np.random.Generator
        Randomness source for belief updates and observation sampling.
    verbose : bool
        Print every expansion and belief backup.
    """

    def __init__(
        self,
        model,
        upper_bound,
        lower_bound,
        branching_factor: int,
        rng: np.random.Generator,
        verbose: bool = False,
    ):
        self.model = model
        self.upper_bound = upper_bound
        self.lower_bound = lower_bound
        self.branching_factor = branching_factor
        self.rng = rng
        self.verbose = verbose
        self.nodes: List[TreeNode] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, handle: int) -> TreeNode:
        return self.nodes[handle]

    def add(self, node: TreeNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def add_root(self, belief) -> int:
        """Create the root belief node. Only allowed on an empty tree."""
        if self.nodes:
            raise RuntimeError("Search tree already has a root")
        root = BeliefNode(
            None, belief,
            self.upper_bound.bound(self.model, belief),
            self.lower_bound.bound(self.model, belief),
        )
        return self.add(root)

    @property
    def root(self) -> BeliefNode:
        return self.nodes[0]

    def children(self, handle: int) -> List[TreeNode]:
        return [self.nodes[c] for c in self.nodes[handle].children]

    def num_belief_nodes(self) -> int:
        return sum(1 for n in self.nodes if isinstance(n, BeliefNode))

    def num_action_nodes(self) -> int:
        return sum(1 for n in self.nodes if isinstance(n, ActionNode))

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def expand(self, handle: int):
        if isinstance(self.nodes[handle], BeliefNode):
            self.expand_belief(handle)
        else:
            self.expand_action(handle)

    def expand_belief(self, handle: int):
        """Add one action node per action, in action-space order."""
        bn = self.nodes[handle]
        if bn.children:
            return

        model = self.model
        actions = model.action_space()
        for a in actions:
            bel = bn.belief.advance_by_action(a, model, self.rng)
            imm_r = model.reward(bel)
            if model.is_terminal(a):
                upper = imm_r * model.discount
            else:
                upper = self.upper_bound.bound(model, bel)
            if self.verbose:
                print(f"expand (belief) -> {a} \t {imm_r} \t {upper}")
            bn.children.append(self.add(ActionNode(a, bel, upper, imm_r, depth=bn.depth)))

        if len(bn.children) != len(actions):
            raise RuntimeError(
                f"Belief expansion produced {len(bn.children)} children for {len(actions)} actions"
            )

    def expand_action(self, handle: int):
        """Sample `branching_factor` observations and their posterior beliefs."""
        an = self.nodes[handle]
        if an.children:
            return

        model = self.model
        for _ in range(self.branching_factor):
            s = an.belief.sample(self.rng)
            obs = model.generate_observation(s, self.rng)
            bel = an.belief.advance_by_observation(obs, model)
            upper = self.upper_bound.bound(model, bel)
            lower = self.lower_bound.bound(model, bel)
            if self.verbose:
                print(f"expand (action {an.action}) -> {obs} \t {upper} \t {lower}")
            an.children.append(self.add(BeliefNode(obs, bel, upper, lower, depth=an.depth + 1)))

        if len(an.children) != self.branching_factor:
            raise RuntimeError(
                f"Action expansion produced {len(an.children)} children, "
                f"expected {self.branching_factor}"
            )

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    def backup_action(self, handle: int):
        """Tighten the action's upper bound from its sampled observations."""
        an = self.nodes[handle]
        if not an.children:
            return
        u = float(np.mean([self.nodes[c].upper for c in an.children]))
        u = (u + an.immediate_reward) * self.model.discount
        if u < an.upper:
            an.upper = u

    def backup_belief(self, handle: int, backup, policy, scratch, check_bounds: bool = False):
        """Tighten the upper bound from the children and raise the lower bound.

        The lower bound comes from a Monte Carlo backup against the policy
        graph; an improving controller node is registered in the graph and
        remembered as this belief's best node.
        """
        bn = self.nodes[handle]
        if bn.children:
            u = max(self.nodes[c].upper for c in bn.children)
            if u < bn.upper:
                bn.upper = u

        candidate, value = backup(bn.belief, policy, self.model, self.rng, scratch)
        if self.verbose:
            print(f"backup (belief) -> {value} \t {bn.lower}")
        if value > bn.lower:
            bn.lower = value
            bn.best_controller_node = policy.graph.add_node(candidate).index

        if check_bounds and bn.lower > bn.upper + 1e-9:
            raise RuntimeError(
                f"Lower bound {bn.lower:.6f} exceeds upper bound {bn.upper:.6f} "
                f"at belief node {handle}; bound estimators are inconsistent"
            )
