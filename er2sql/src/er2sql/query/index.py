"""Per-request lookup tables over a graph."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from er2sql.errors import DanglingReferenceError
from er2sql.ir.graph import Edge, Graph, Node


class GraphIndex:
    """O(1) node/edge lookup plus incoming and outgoing edge lists per node.

    Built once per validate/compile call and passed explicitly; nothing is
    cached across requests. Edges whose endpoints do not resolve are kept
    aside in ``dangling`` and never show up in adjacency lists.
    """

    def __init__(self, graph: Graph):
        self.graph = graph
        self.nodes: Dict[str, Node] = {node.id: node for node in graph.nodes}
        self.edges: Dict[str, Edge] = {edge.id: edge for edge in graph.edges}
        self.dangling: List[Edge] = []

        self._outgoing: Dict[str, List[Edge]] = defaultdict(list)
        self._incoming: Dict[str, List[Edge]] = defaultdict(list)
        self._touching: Dict[str, List[Edge]] = defaultdict(list)

        for edge in graph.edges:
            if edge.source_id not in self.nodes or edge.target_id not in self.nodes:
                self.dangling.append(edge)
                continue
            self._outgoing[edge.source_id].append(edge)
            self._incoming[edge.target_id].append(edge)
            self._touching[edge.source_id].append(edge)
            if edge.target_id != edge.source_id:
                self._touching[edge.target_id].append(edge)

    def node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def require_node(self, node_id: str) -> Node:
        """Return the node or raise DanglingReferenceError."""
        node = self.nodes.get(node_id)
        if node is None:
            raise DanglingReferenceError(f"Unknown node id '{node_id}'", node_id)
        return node

    def edge(self, edge_id: str) -> Optional[Edge]:
        return self.edges.get(edge_id)

    def outgoing(self, node_id: str) -> List[Edge]:
        return list(self._outgoing.get(node_id, ()))

    def incoming(self, node_id: str) -> List[Edge]:
        return list(self._incoming.get(node_id, ()))

    def edges_of(self, node_id: str) -> List[Edge]:
        """All edges touching the node, in graph order."""
        return list(self._touching.get(node_id, ()))

    def nodes_of_kind(self, kinds: Iterable[str]) -> List[Node]:
        """Nodes whose kind is in ``kinds``, in graph order."""
        wanted = set(kinds)
        return [node for node in self.graph.nodes if node.kind in wanted]

    def check_references(self) -> None:
        """
        Fail on the first edge with an unresolved endpoint.

        Raises:
            DanglingReferenceError: If any edge references a missing node
        """
        for edge in self.dangling:
            missing = edge.source_id if edge.source_id not in self.nodes else edge.target_id
            raise DanglingReferenceError(
                f"Edge '{edge.id}' references missing node '{missing}'", edge.id
            )
