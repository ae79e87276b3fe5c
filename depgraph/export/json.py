"""JSON export for the interactive dependency viewer.

The document carries structured facts only; styling is left to the viewer.
Node ids double as indexes into ``artifacts``.
"""

import json
import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from depgraph.errors import RenderSerializationError
from depgraph.graph.accumulator import Graph
from depgraph.graph.resolution import NodeResolution

logger = logging.getLogger("depgraph.export.json")

JSONP_PREFIX = "var graph = "
JSONP_SUFFIX = ";"


class ArtifactJson(BaseModel):
    """One canonical node."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(ge=0)
    artifact_id: str = Field(alias="artifactId")
    version: str


class DependencyJson(BaseModel):
    """One deduplicated edge."""

    model_config = ConfigDict(populate_by_name=True)

    from_: int = Field(alias="from", ge=0)
    to: int = Field(ge=0)
    resolution: NodeResolution
    scopes: List[str] = Field(default_factory=list)


class GraphJson(BaseModel):
    """Top-level viewer document."""

    artifacts: List[ArtifactJson] = Field(default_factory=list)
    dependencies: List[DependencyJson] = Field(default_factory=list)


def build_graph_json(graph: Graph) -> GraphJson:
    """Project ``graph`` onto the viewer schema."""
    artifacts = [
        ArtifactJson(id=node.id, artifact_id=node.artifact_id or "", version=node.version or "")
        for node in graph.nodes
    ]
    dependencies = [
        DependencyJson(
            from_=edge.source.id,
            to=edge.target.id,
            resolution=edge.target.resolution,
            scopes=list(edge.scopes),
        )
        for edge in graph.edges
    ]
    return GraphJson(artifacts=artifacts, dependencies=dependencies)


class JsonRenderer:
    """Renders a Graph as indented JSON, optionally as a JSONP assignment."""

    def __init__(self, jsonp: bool = False, indent: int = 2) -> None:
        self.jsonp = jsonp
        self.indent = indent

    def render(self, graph: Graph) -> str:
        """Serialize ``graph``.

        Raises:
            RenderSerializationError: The encoder rejected the data.
        """
        logger.info("Rendering JSON graph: %d nodes, %d edges", graph.node_count(), graph.edge_count())
        try:
            data = build_graph_json(graph).model_dump(mode="json", by_alias=True)
            text = json.dumps(data, indent=self.indent, ensure_ascii=False)
        except (TypeError, ValueError, ValidationError) as exc:
            raise RenderSerializationError(f"Unable to serialize graph: {exc}") from exc

        if self.jsonp:
            return f"{JSONP_PREFIX}{text}{JSONP_SUFFIX}"
        return text


def render_json(graph: Graph, jsonp: bool = False) -> str:
    """Render ``graph`` to viewer JSON."""
    return JsonRenderer(jsonp=jsonp).render(graph)


__all__ = [
    "ArtifactJson",
    "DependencyJson",
    "GraphJson",
    "JsonRenderer",
    "build_graph_json",
    "render_json",
]
