"""depgraph: canonical dependency graphs rendered as DOT or viewer JSON."""

from depgraph.errors import (
    ConfigurationError,
    DependencyGraphError,
    GraphFinalizedError,
    RenderSerializationError,
    UpstreamResolutionError,
)
from depgraph.export import DotRenderer, GraphFormat, JsonRenderer, StyleConfiguration, create_renderer
from depgraph.factory import AggregatingGraphFactory, SimpleGraphFactory
from depgraph.graph import (
    ArtifactCoordinates,
    Edge,
    EdgeKind,
    Graph,
    GraphAccumulator,
    GraphNode,
    IdentityMode,
    NodeResolution,
    NodeTable,
    RawEdge,
    artifact_key,
)

__version__ = "0.1.0"

__all__ = [
    "AggregatingGraphFactory",
    "ArtifactCoordinates",
    "ConfigurationError",
    "DependencyGraphError",
    "DotRenderer",
    "Edge",
    "EdgeKind",
    "Graph",
    "GraphAccumulator",
    "GraphFinalizedError",
    "GraphFormat",
    "GraphNode",
    "IdentityMode",
    "JsonRenderer",
    "NodeResolution",
    "NodeTable",
    "RawEdge",
    "RenderSerializationError",
    "SimpleGraphFactory",
    "StyleConfiguration",
    "UpstreamResolutionError",
    "artifact_key",
]
