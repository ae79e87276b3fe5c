"""Graph backend abstraction layer.

Wraps a NetworkX ``MultiDiGraph`` whose nodes are canonical node ids and
whose parallel edges are keyed by edge kind. NetworkX iterates edges grouped
by source node, so the backend also records global insertion order.
"""

import logging
from typing import Any, Hashable, List, Tuple

import networkx as nx

logger = logging.getLogger("depgraph.graph.backend")

EdgeKey = Tuple[int, int, Hashable]


class GraphBackend:
    """Insertion-ordered, duplicate-free multigraph storage."""

    def __init__(self) -> None:
        """Initialize backend with an empty NetworkX MultiDiGraph."""
        self._graph = nx.MultiDiGraph()
        self._edge_order: List[EdgeKey] = []
        logger.debug("Graph backend initialized with NetworkX")

    @property
    def native_graph(self) -> nx.MultiDiGraph:
        """Get native NetworkX graph for advanced operations.

        Returns:
            nx.MultiDiGraph: Native graph instance.
        """
        return self._graph

    def add_node(self, node_id: int, **attributes: Any) -> None:
        """Add node to graph unless it already exists.

        Args:
            node_id: Node identifier.
            **attributes: Node attributes.
        """
        if not self._graph.has_node(node_id):
            self._graph.add_node(node_id, **attributes)

    def add_edge(self, source: int, target: int, key: Hashable, **attributes: Any) -> bool:
        """Add edge unless ``(source, target, key)`` is already present.

        Args:
            source: Source node ID.
            target: Target node ID.
            key: Edge key distinguishing parallel edges.
            **attributes: Edge attributes, ignored for existing edges.

        Returns:
            bool: True if the edge was new.
        """
        if self._graph.has_edge(source, target, key=key):
            return False
        self._graph.add_edge(source, target, key=key, **attributes)
        self._edge_order.append((source, target, key))
        return True

    def ordered_edges(self) -> List[EdgeKey]:
        """Return ``(source, target, key)`` triples in insertion order."""
        return list(self._edge_order)

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def edge_count(self) -> int:
        return self._graph.number_of_edges()
