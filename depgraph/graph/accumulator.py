"""Canonical graph accumulation.

GraphAccumulator consumes raw ``(source, target, resolution, scope)`` edges,
collapses their endpoints onto canonical nodes and keeps a duplicate-free,
insertion-ordered edge set. One accumulator serves one session; aggregated
graphs feed several modules' edges into the same instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, NamedTuple, Optional, Protocol, Tuple

import networkx as nx

from depgraph.errors import GraphFinalizedError
from depgraph.graph.backend import GraphBackend
from depgraph.graph.identity import ArtifactCoordinates, IdentityMode
from depgraph.graph.nodes import GraphNode, NodeTable
from depgraph.graph.resolution import NodeResolution

logger = logging.getLogger("depgraph.graph.accumulator")


class EdgeKind(str, Enum):
    """Edge kinds; part of the edge identity."""

    DEPENDENCY = "dependency"
    MODULE = "module"


class RawEdge(NamedTuple):
    """One parent/child relationship as reported by the resolver."""

    source: Optional[ArtifactCoordinates]
    target: Optional[ArtifactCoordinates]
    resolution: NodeResolution = NodeResolution.INCLUDED
    scope: Optional[str] = None


@dataclass(frozen=True)
class Edge:
    """A deduplicated edge between two canonical nodes.

    Attributes:
        source: Canonical source node.
        target: Canonical target node.
        kind: Dependency or module containment.
        resolution: Resolution of the raw edge that created this edge.
        version: Target version carried by that raw edge.
    """

    source: GraphNode
    target: GraphNode
    kind: EdgeKind = EdgeKind.DEPENDENCY
    resolution: NodeResolution = NodeResolution.INCLUDED
    version: Optional[str] = None

    @property
    def scopes(self) -> Tuple[str, ...]:
        """Scopes accumulated on the target node."""
        return self.target.scopes

    @property
    def key(self) -> Tuple[int, int, EdgeKind]:
        return (self.source.id, self.target.id, self.kind)


class Graph:
    """Finished, read-only result of an accumulation session."""

    def __init__(
        self,
        name: Optional[str],
        nodes: Tuple[GraphNode, ...],
        edges: Tuple[Edge, ...],
        backend: GraphBackend,
    ) -> None:
        self.name = name
        self.nodes = nodes
        self.edges = edges
        self._backend = backend

    @property
    def native_graph(self) -> nx.MultiDiGraph:
        """NetworkX view of the structure, keyed by node id and edge kind."""
        return self._backend.native_graph

    def node_count(self) -> int:
        return self._backend.node_count()

    def edge_count(self) -> int:
        return self._backend.edge_count()

    def dependency_edges(self) -> Tuple[Edge, ...]:
        return tuple(edge for edge in self.edges if edge.kind is EdgeKind.DEPENDENCY)

    def module_edges(self) -> Tuple[Edge, ...]:
        return tuple(edge for edge in self.edges if edge.kind is EdgeKind.MODULE)


class EdgeInserter(Protocol):
    """Insertion capability shared by every graph consumer."""

    graph_name: Optional[str]

    def add_edge(
        self,
        source: Optional[ArtifactCoordinates],
        target: Optional[ArtifactCoordinates],
        resolution: NodeResolution = NodeResolution.INCLUDED,
        scope: Optional[str] = None,
    ) -> Optional[Edge]: ...

    def add_module_edge(
        self,
        parent: Optional[ArtifactCoordinates],
        child: Optional[ArtifactCoordinates],
        child_resolution: NodeResolution = NodeResolution.INCLUDED,
    ) -> Optional[Edge]: ...

    def effective_node(self, node: GraphNode) -> GraphNode: ...

    def build(self) -> Graph: ...


class GraphAccumulator:
    """Builds one canonical graph from a stream of raw edges."""

    def __init__(
        self,
        mode: IdentityMode = IdentityMode.VERSIONLESS,
        graph_name: Optional[str] = None,
    ) -> None:
        self.mode = mode
        self.graph_name = graph_name
        self._table = NodeTable(mode)
        self._backend = GraphBackend()
        self._edges: Dict[Tuple[int, int, EdgeKind], Edge] = {}
        self._finalized = False

    @property
    def nodes(self) -> Tuple[GraphNode, ...]:
        return tuple(self._table)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(
            self._edges[(source, target, EdgeKind(kind))]
            for source, target, kind in self._backend.ordered_edges()
        )

    def add_edge(
        self,
        source: Optional[ArtifactCoordinates],
        target: Optional[ArtifactCoordinates],
        resolution: NodeResolution = NodeResolution.INCLUDED,
        scope: Optional[str] = None,
    ) -> Optional[Edge]:
        """Insert a dependency edge.

        A ``None`` endpoint means the caller filtered it out; the call is then
        a no-op. Target coordinates without a scope take ``scope``.

        Returns:
            The canonical edge, or ``None`` for a no-op.
        """
        if source is None or target is None:
            return None
        self._check_open()
        if scope and target.scope is None:
            target = target.with_scope(scope)

        source_node = self._table.get_or_create(source, NodeResolution.INCLUDED)
        target_node = self._table.get_or_create(target, resolution)
        target_node.add_scope(scope)
        return self._insert(
            Edge(source_node, target_node, EdgeKind.DEPENDENCY, resolution, target.version)
        )

    def add_module_edge(
        self,
        parent: Optional[ArtifactCoordinates],
        child: Optional[ArtifactCoordinates],
        child_resolution: NodeResolution = NodeResolution.INCLUDED,
    ) -> Optional[Edge]:
        """Insert a parent-to-module containment edge.

        Module edges share the dedup set with dependency edges but their kind
        is part of the key, so both kinds survive for the same endpoints.
        """
        if parent is None or child is None:
            return None
        self._check_open()

        parent_node = self._table.get_or_create(parent, NodeResolution.PARENT)
        child_node = self._table.get_or_create(child, child_resolution)
        return self._insert(
            Edge(parent_node, child_node, EdgeKind.MODULE, child_resolution, child.version)
        )

    def add_raw_edges(self, raw_edges: Iterable[RawEdge]) -> int:
        """Insert every raw edge in order; return the number of new edges."""
        before = len(self._edges)
        for raw in raw_edges:
            self.add_edge(raw.source, raw.target, raw.resolution, raw.scope)
        return len(self._edges) - before

    def transient_node(
        self,
        coordinates: ArtifactCoordinates,
        resolution: NodeResolution = NodeResolution.INCLUDED,
    ) -> GraphNode:
        """Unregistered node keyed like the nodes of this session."""
        return self._table.transient(coordinates, resolution)

    def effective_node(self, node: GraphNode) -> GraphNode:
        return self._table.effective_node(node)

    def build(self) -> Graph:
        """Finalize the session and return the accumulated graph."""
        self._finalized = True
        graph = Graph(self.graph_name, self.nodes, self.edges, self._backend)
        logger.info(
            "Graph %s built: %d nodes, %d edges",
            self.graph_name or "<unnamed>",
            graph.node_count(),
            graph.edge_count(),
        )
        return graph

    def _check_open(self) -> None:
        if self._finalized:
            raise GraphFinalizedError("Graph already built; no further edges can be added")

    def _insert(self, edge: Edge) -> Edge:
        for node in (edge.source, edge.target):
            self._backend.add_node(node.id, key=node.key)

        added = self._backend.add_edge(
            edge.source.id, edge.target.id, edge.kind.value, resolution=edge.resolution.value
        )
        if not added:
            logger.debug(
                "Duplicate edge %s -> %s (%s) skipped",
                edge.source.key,
                edge.target.key,
                edge.kind.value,
            )
            return self._edges[edge.key]

        self._edges[edge.key] = edge
        logger.debug("Added edge %s -> %s (%s)", edge.source.key, edge.target.key, edge.resolution.value)
        return edge


__all__ = [
    "Edge",
    "EdgeInserter",
    "EdgeKind",
    "Graph",
    "GraphAccumulator",
    "RawEdge",
]
