"""Public graph API surface."""

from depgraph.graph.accumulator import (
    Edge,
    EdgeInserter,
    EdgeKind,
    Graph,
    GraphAccumulator,
    RawEdge,
)
from depgraph.graph.backend import GraphBackend
from depgraph.graph.identity import ArtifactCoordinates, IdentityMode, artifact_key
from depgraph.graph.nodes import GraphNode, NodeTable
from depgraph.graph.resolution import NodeResolution

__all__ = [
    "ArtifactCoordinates",
    "Edge",
    "EdgeInserter",
    "EdgeKind",
    "Graph",
    "GraphAccumulator",
    "GraphBackend",
    "GraphNode",
    "IdentityMode",
    "NodeResolution",
    "NodeTable",
    "RawEdge",
    "artifact_key",
]
