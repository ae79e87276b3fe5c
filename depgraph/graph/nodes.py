"""Canonical node table.

Nodes live in an append-only list (the arena); a separate key-to-index map
resolves identity keys. The id of a node is its index in the arena, so ids
are dense, zero-based and follow first-seen order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from depgraph.graph.identity import ArtifactCoordinates, IdentityMode, artifact_key
from depgraph.graph.resolution import NodeResolution

logger = logging.getLogger("depgraph.graph.nodes")

UNREGISTERED_ID = -1


@dataclass(frozen=True, eq=False)
class GraphNode:
    """One artifact vertex.

    Everything except the scope set is fixed at creation time.

    Attributes:
        id: Arena index, or ``UNREGISTERED_ID`` for transient nodes.
        key: Identity key the node was registered under.
        coordinates: First-seen coordinates (the version shown on labels).
        resolution: First-seen resolution state.
    """

    id: int
    key: str
    coordinates: ArtifactCoordinates
    resolution: NodeResolution
    _scopes: Dict[str, None] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def transient(
        cls,
        coordinates: ArtifactCoordinates,
        resolution: NodeResolution = NodeResolution.INCLUDED,
        mode: IdentityMode = IdentityMode.VERSIONLESS,
    ) -> "GraphNode":
        """Build a node that is not registered in any table."""
        return cls(UNREGISTERED_ID, artifact_key(coordinates, mode), coordinates, resolution)

    @property
    def scopes(self) -> Tuple[str, ...]:
        """Scopes observed on edges pointing here, in insertion order."""
        return tuple(self._scopes)

    @property
    def artifact_id(self) -> Optional[str]:
        return self.coordinates.artifact_id

    @property
    def version(self) -> Optional[str]:
        return self.coordinates.version

    def add_scope(self, scope: Optional[str]) -> None:
        if scope:
            self._scopes.setdefault(scope, None)


class NodeTable:
    """Maps identity keys to the single canonical GraphNode of a session."""

    def __init__(self, mode: IdentityMode = IdentityMode.VERSIONLESS) -> None:
        self.mode = mode
        self._nodes: List[GraphNode] = []
        self._index: Dict[str, int] = {}

    def get_or_create(
        self,
        coordinates: ArtifactCoordinates,
        resolution: NodeResolution,
        mode: Optional[IdentityMode] = None,
    ) -> GraphNode:
        """Return the canonical node for ``coordinates``, creating it if unseen.

        A later call for a known key returns the existing node untouched; its
        ``resolution`` argument is discarded.
        """
        key = artifact_key(coordinates, mode or self.mode)
        index = self._index.get(key)
        if index is not None:
            return self._nodes[index]

        node = GraphNode(len(self._nodes), key, coordinates, resolution)
        self._index[key] = node.id
        self._nodes.append(node)
        logger.debug("Registered node %d: %s (%s)", node.id, key, resolution.value)
        return node

    def transient(
        self,
        coordinates: ArtifactCoordinates,
        resolution: NodeResolution = NodeResolution.INCLUDED,
    ) -> GraphNode:
        """Unregistered node keyed with this table's identity mode."""
        return GraphNode.transient(coordinates, resolution, self.mode)

    def effective_node(self, node: GraphNode) -> GraphNode:
        """Return the canonical instance sharing ``node``'s key, else ``node``."""
        index = self._index.get(node.key)
        if index is None:
            return node
        return self._nodes[index]

    def get(self, key: str) -> Optional[GraphNode]:
        index = self._index.get(key)
        return None if index is None else self._nodes[index]

    def nodes(self) -> List[GraphNode]:
        return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self._nodes)


__all__ = ["GraphNode", "NodeTable", "UNREGISTERED_ID"]
