"""
Immutable tech graph backed by NetworkX.

It manages:
- TechNodes and UnlockNodes in one id namespace, in declaration order.
- The prereq -> tech dependency edges (TechNodes only).
- The unlock -> parent containment relation, kept apart from the edges.
- The element payload handed to the rendering collaborator.

Instances are produced by GraphBuilder; nothing mutates them afterward.
"""

from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import networkx as nx

from .errors import UnknownNodeError
from .types import HAS_UNLOCKS_CLASS, Edge, NodeKind, TechNode, UnlockNode

AnyNode = Union[TechNode, UnlockNode]


class TechGraph:
    """
    Validated technology dependency graph.

    Features:
    - O(1) node lookup for both node categories
    - Stable declaration order for nodes and edges
    - Unlock -> parent resolution for callers handed an unlock id
    """

    def __init__(self, tech_nodes: Sequence[TechNode]):
        self._tech_nodes: Tuple[TechNode, ...] = tuple(tech_nodes)
        self._unlock_nodes: Tuple[UnlockNode, ...] = tuple(
            unlock for tech in self._tech_nodes for unlock in tech.unlocks
        )
        self._edges: Tuple[Edge, ...] = tuple(
            Edge(source_id=prereq_id, target_id=tech.id)
            for tech in self._tech_nodes
            for prereq_id in tech.prereq_ids
        )

        self._techs: Dict[str, TechNode] = {t.id: t for t in self._tech_nodes}
        self._unlocks: Dict[str, UnlockNode] = {u.id: u for u in self._unlock_nodes}
        self._order: Dict[str, int] = {t.id: i for i, t in enumerate(self._tech_nodes)}
        self._positions: Dict[str, int] = {n.id: i for i, n in enumerate(self.iter_nodes())}

        graph = nx.DiGraph()
        for index, tech in enumerate(self._tech_nodes):
            graph.add_node(tech.id, index=index)
        for edge in self._edges:
            graph.add_edge(edge.source_id, edge.target_id)
        self._graph = nx.freeze(graph)

    # =========================================================================
    # Collections
    # =========================================================================

    @property
    def tech_nodes(self) -> Tuple[TechNode, ...]:
        return self._tech_nodes

    @property
    def unlock_nodes(self) -> Tuple[UnlockNode, ...]:
        return self._unlock_nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def node_count(self) -> int:
        return len(self._techs) + len(self._unlocks)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def iter_nodes(self) -> Iterator[AnyNode]:
        """Yield every node, each technology followed by its unlocks."""
        for tech in self._tech_nodes:
            yield tech
            yield from tech.unlocks

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_node(self, node_id: str) -> Optional[AnyNode]:
        """Retrieve a node of either category by ID."""
        return self._techs.get(node_id) or self._unlocks.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._techs or node_id in self._unlocks

    def is_tech(self, node_id: str) -> bool:
        return node_id in self._techs

    def is_unlock(self, node_id: str) -> bool:
        return node_id in self._unlocks

    def get_tech(self, tech_id: str) -> TechNode:
        try:
            return self._techs[tech_id]
        except KeyError:
            raise UnknownNodeError(tech_id) from None

    def resolve_tech(self, node_id: str) -> str:
        """
        Map any node id to the technology that owns it.

        Technologies resolve to themselves, unlocks to their parent.
        """
        if node_id in self._techs:
            return node_id
        unlock = self._unlocks.get(node_id)
        if unlock is None:
            raise UnknownNodeError(node_id)
        return unlock.parent_id

    def position(self, node_id: str) -> int:
        """Position of any node in `iter_nodes` order; unknown ids sort last."""
        return self._positions.get(node_id, len(self._positions))

    def sort_techs(self, tech_ids) -> List[str]:
        """Order technology ids by declaration."""
        return sorted(tech_ids, key=self._order.__getitem__)

    # =========================================================================
    # Relations
    # =========================================================================

    def prereqs(self, tech_id: str) -> Tuple[str, ...]:
        """Direct prerequisites of a technology, in declaration order."""
        return self.get_tech(tech_id).prereq_ids

    def dependents(self, tech_id: str) -> List[str]:
        """Technologies that list `tech_id` as a direct prerequisite."""
        self.get_tech(tech_id)
        return self.sort_techs(self._graph.successors(tech_id))

    def roots(self) -> List[str]:
        """Technologies with no prerequisites."""
        return [t.id for t in self._tech_nodes if not t.prereq_ids]

    # =========================================================================
    # Export
    # =========================================================================

    def to_elements(self) -> List[Dict[str, Any]]:
        """
        Build the node/edge payload for the rendering collaborator.

        Each element carries a `group`, a `data` dict and a `classes` list.
        Unlock nodes carry `data.parent` for visual containment only.
        """
        elements: List[Dict[str, Any]] = []
        for node in self.iter_nodes():
            if isinstance(node, TechNode):
                classes = [NodeKind.TECHNOLOGY.value]
                if node.has_unlocks:
                    classes.append(HAS_UNLOCKS_CLASS)
                data = {"id": node.id, "name": node.name}
            else:
                classes = [node.kind.value]
                data = {"id": node.id, "name": node.name, "parent": node.parent_id}
            elements.append({"group": "nodes", "data": data, "classes": classes})

        for edge in self._edges:
            elements.append({
                "group": "edges",
                "data": {"source": edge.source_id, "target": edge.target_id},
            })
        return elements

    def stats(self) -> Dict[str, Any]:
        unlocks_by_kind: Dict[str, int] = {}
        for unlock in self._unlock_nodes:
            unlocks_by_kind[unlock.kind.value] = unlocks_by_kind.get(unlock.kind.value, 0) + 1

        return {
            "technologies": len(self._tech_nodes),
            "unlocks": len(self._unlock_nodes),
            "unlocks_by_kind": unlocks_by_kind,
            "edges": len(self._edges),
            "roots": len(self.roots()),
            "longest_chain": nx.dag_longest_path_length(self._graph) if self._tech_nodes else 0,
        }
