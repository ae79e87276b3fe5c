"""DOT export for accumulated dependency graphs.

The document is assembled as a :class:`pydot.Dot` and serialized with
``to_string()``. Every id and attribute value is handed to pydot already
quoted: pydot passes double-quoted strings through untouched, and an unquoted
``group:artifact`` key would otherwise be read as a node port.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

import pydot

from depgraph.export.style import StyleConfiguration
from depgraph.graph.accumulator import Edge, EdgeKind, Graph
from depgraph.graph.nodes import GraphNode
from depgraph.graph.resolution import NodeResolution

logger = logging.getLogger("depgraph.export.dot")

LABEL_SEPARATOR = "\n"
DEFAULT_GRAPH_NAME = "G"
DEFAULT_SCOPE = "compile"


def quote(value: object) -> str:
    """Return ``value`` as a double-quoted DOT string.

    Backslashes and quotes are escaped so no coordinate can terminate the
    string early; line breaks become the ``\\n`` label escape.
    """
    text = str(value)
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\n", "\\n")
    return f'"{text}"'


class AttributeBuilder:
    """Ordered graphviz attributes for one statement.

    Later values for the same key replace earlier ones but keep the original
    position. Empty values are dropped.
    """

    def __init__(self, attributes: Optional[Mapping[str, object]] = None) -> None:
        self._attributes: Dict[str, str] = {}
        if attributes:
            self.update(attributes)

    def add(self, key: str, value: object) -> "AttributeBuilder":
        if value is not None and value != "":
            self._attributes[key] = str(value)
        return self

    def update(self, attributes: Mapping[str, object]) -> "AttributeBuilder":
        for key, value in attributes.items():
            self.add(key, value)
        return self

    def label(self, value: object) -> "AttributeBuilder":
        return self.add("label", value)

    def style(self, value: str) -> "AttributeBuilder":
        return self.add("style", value)

    def as_dict(self) -> Dict[str, str]:
        """Plain values, in insertion order."""
        return dict(self._attributes)

    def quoted(self) -> Dict[str, str]:
        """Values quoted for pydot keyword arguments."""
        return {key: quote(value) for key, value in self._attributes.items()}

    def __bool__(self) -> bool:
        return bool(self._attributes)


class DotRenderer:
    """Projects a Graph onto a DOT document using a StyleConfiguration."""

    def __init__(self, style: Optional[StyleConfiguration] = None) -> None:
        self.style = style or StyleConfiguration()

    def node_label(self, node: GraphNode) -> str:
        """Label lines: group id, artifact id, version, then non-default scopes."""
        coordinates = node.coordinates
        parts: List[str] = []
        if self.style.show_group_id and coordinates.group_id:
            parts.append(coordinates.group_id)
        if self.style.show_artifact_id and coordinates.artifact_id:
            parts.append(coordinates.artifact_id)
        if self.style.show_version_on_nodes and coordinates.version:
            parts.append(coordinates.version)

        scopes = node.scopes
        if any(scope != DEFAULT_SCOPE for scope in scopes):
            parts.append("(" + "/".join(scopes) + ")")
        return LABEL_SEPARATOR.join(parts)

    def node_attributes(self, node: GraphNode) -> AttributeBuilder:
        attributes = AttributeBuilder().label(self.node_label(node))
        scope_attributes = self.style.node_attributes_for(node.scopes)
        if scope_attributes:
            attributes.update(scope_attributes)
        return attributes

    def edge_attributes(self, edge: Edge) -> AttributeBuilder:
        if edge.kind is EdgeKind.MODULE:
            return AttributeBuilder(self.style.module_edge_attributes)

        attributes = AttributeBuilder(self.style.edge_attributes_for(edge.resolution))
        if (
            self.style.show_version_on_edges
            and edge.resolution is NodeResolution.OMITTED_FOR_CONFLICT
            and edge.version
        ):
            attributes.label(edge.version)
        return attributes

    def to_pydot(self, graph: Graph) -> pydot.Dot:
        """Build the pydot document: defaults, then nodes, then edges."""
        dot = pydot.Dot(
            graph_name=quote(graph.name or DEFAULT_GRAPH_NAME),
            graph_type="digraph",
            strict=False,
        )

        graph_defaults = AttributeBuilder(self.style.graph_attributes)
        if graph_defaults:
            dot.set_graph_defaults(**graph_defaults.quoted())
        node_defaults = AttributeBuilder(self.style.node_attributes)
        if node_defaults:
            dot.set_node_defaults(**node_defaults.quoted())
        edge_defaults = AttributeBuilder(self.style.edge_attributes)
        if edge_defaults:
            dot.set_edge_defaults(**edge_defaults.quoted())

        for node in graph.nodes:
            dot.add_node(pydot.Node(quote(node.key), **self.node_attributes(node).quoted()))
        for edge in graph.edges:
            dot.add_edge(
                pydot.Edge(
                    quote(edge.source.key),
                    quote(edge.target.key),
                    **self.edge_attributes(edge).quoted(),
                )
            )
        return dot

    def render(self, graph: Graph) -> str:
        """Render ``graph`` as a DOT digraph.

        Args:
            graph: Finished graph from a GraphAccumulator.

        Returns:
            DOT document text.
        """
        logger.info("Rendering DOT graph: %d nodes, %d edges", graph.node_count(), graph.edge_count())
        return self.to_pydot(graph).to_string()


def render_dot(graph: Graph, style: Optional[StyleConfiguration] = None) -> str:
    """Render ``graph`` to DOT text with ``style``."""
    return DotRenderer(style).render(graph)


__all__ = ["AttributeBuilder", "DotRenderer", "quote", "render_dot"]
