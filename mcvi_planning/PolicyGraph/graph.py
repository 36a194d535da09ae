"""Policy graph (finite-state controller) built by belief backups."""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Tuple

Action = Hashable
Observation = Hashable


@dataclass
class ControllerNode:
    """A controller node: an action plus observation-indexed successors.

    Attributes
    ----------
    action : hashable
        Action executed while in this node.
    edges : dict
        Observation -> index of the next controller node. A missing entry
        means the controller has no plan for that observation; rollouts then
        fall back to the lower bound.
    index : int or None
        Position in PolicyGraph.nodes, None until the node is registered.
    """
    action: Action
    edges: Dict[Observation, int] = field(default_factory=dict)
    index: Optional[int] = None

    def key(self) -> Tuple[Action, frozenset]:
        """Structural identity used to de-duplicate registrations."""
        return (self.action, frozenset(self.edges.items()))


class PolicyGraph:
    """Append-only store of controller nodes.

    Nodes are only added, never removed or edited, and every edge points at a
    node registered earlier, so the graph is a DAG.
    """

    def __init__(self):
        self.nodes: List[ControllerNode] = []
        self.root: Optional[int] = None
        self.root_belief: Optional[Dict[Any, float]] = None
        self._by_key: Dict[Tuple[Action, frozenset], int] = {}

    def __len__(self) -> int:
        return len(self.nodes)

    def add_node(self, node: ControllerNode) -> ControllerNode:
        """Register a node and return the stored node.

        A node identical to one already in the graph is not added twice; the
        existing node is returned instead.
        """
        for o, target in node.edges.items():
            if not 0 <= target < len(self.nodes):
                raise ValueError(f"Edge {o!r} -> {target} points outside the graph")

        key = node.key()
        if key in self._by_key:
            return self.nodes[self._by_key[key]]

        node.index = len(self.nodes)
        self.nodes.append(node)
        self._by_key[key] = node.index
        return node

    def get(self, index: Optional[int]) -> Optional[ControllerNode]:
        if index is None:
            return None
        return self.nodes[index]

    @property
    def root_node(self) -> Optional[ControllerNode]:
        return self.get(self.root)


class MCVIPolicy:
    """Executable policy backed by a policy graph.

    The action depends only on the current controller node. Observations
    move the controller along its edges with next_node() before the next
    action lookup.
    """

    def __init__(self, model, graph: Optional[PolicyGraph] = None):
        self.model = model
        self.graph = graph if graph is not None else PolicyGraph()

    def initial_node(self) -> Optional[ControllerNode]:
        return self.graph.root_node

    def action(self, node: ControllerNode) -> Action:
        return node.action

    def next_node(self, node: ControllerNode, obs: Observation) -> Optional[ControllerNode]:
        """Follow the edge labelled `obs`, or None if the controller has none."""
        return self.graph.get(node.edges.get(obs))
