"""Style configuration for the DOT renderer.

A StyleConfiguration is built once (defaults, config file, CLI flags) and
then handed to renderers unchanged. Attribute maps are plain graphviz
``key -> value`` pairs.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from depgraph.graph.resolution import NodeResolution

Attributes = Dict[str, str]


def _default_resolution_attributes() -> Dict[NodeResolution, Attributes]:
    return {
        NodeResolution.OMITTED_FOR_DUPLICATE: {"style": "dashed"},
        NodeResolution.OMITTED_FOR_CONFLICT: {
            "style": "dashed",
            "color": "red",
            "fontcolor": "red",
        },
        NodeResolution.OMITTED_FOR_CYCLE: {"style": "dashed", "color": "orange"},
    }


class StyleConfiguration(BaseModel):
    """Immutable rendering options.

    Attributes:
        show_group_id: Put the group id on node labels.
        show_artifact_id: Put the artifact id on node labels.
        show_version_on_nodes: Put the version on node labels.
        show_version_on_edges: Label conflict edges with the omitted version.
        graph_attributes: Global ``graph [...]`` defaults.
        node_attributes: Global ``node [...]`` defaults.
        edge_attributes: Global ``edge [...]`` defaults.
        resolution_edge_attributes: Extra attributes for dependency edges by
            resolution state.
        module_edge_attributes: Attributes for module containment edges.
        scope_node_attributes: Extra node attributes by scope; the first of a
            node's scopes with an entry applies.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    show_group_id: bool = False
    show_artifact_id: bool = True
    show_version_on_nodes: bool = False
    show_version_on_edges: bool = False

    graph_attributes: Attributes = Field(default_factory=dict)
    node_attributes: Attributes = Field(
        default_factory=lambda: {"shape": "box", "fontname": "Helvetica", "fontsize": "14"}
    )
    edge_attributes: Attributes = Field(
        default_factory=lambda: {"fontname": "Helvetica", "fontsize": "10"}
    )
    resolution_edge_attributes: Dict[NodeResolution, Attributes] = Field(
        default_factory=_default_resolution_attributes
    )
    module_edge_attributes: Attributes = Field(default_factory=lambda: {"style": "dotted"})
    scope_node_attributes: Dict[str, Attributes] = Field(
        default_factory=lambda: {"test": {"color": "gray", "fontcolor": "gray"}}
    )

    def edge_attributes_for(self, resolution: NodeResolution) -> Attributes:
        return self.resolution_edge_attributes.get(resolution, {})

    def node_attributes_for(self, scopes) -> Optional[Attributes]:
        for scope in scopes:
            attributes = self.scope_node_attributes.get(scope)
            if attributes:
                return attributes
        return None


__all__ = ["Attributes", "StyleConfiguration"]
