"""Graph factories driving resolver, accumulator and renderer.

A factory asks the resolver for raw edges, drops filtered artifacts, feeds
the rest into one GraphAccumulator and renders the finished graph exactly
once. Any resolver failure aborts the run before anything is rendered.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Optional, Protocol

from depgraph.errors import DependencyGraphError, UpstreamResolutionError
from depgraph.export import GraphRenderer
from depgraph.filters import ArtifactFilter, accept_all
from depgraph.graph.accumulator import EdgeInserter, RawEdge
from depgraph.graph.identity import ArtifactCoordinates
from depgraph.graph.resolution import NodeResolution
from depgraph.sources.base import DependencyResolver, ProjectModule

logger = logging.getLogger("depgraph.factory")

ALL_RESOLUTIONS: FrozenSet[NodeResolution] = frozenset(NodeResolution)


class GraphFactory(Protocol):
    """Creates the serialized graph of a project."""

    def create_graph(self, project: ProjectModule) -> str: ...


class _FilteringGraphFactory:
    """Shared resolve-filter-insert plumbing.

    Raw edges whose resolution is not in ``resolutions`` are dropped before
    they reach the graph builder; by default every state is kept.
    """

    def __init__(
        self,
        resolver: DependencyResolver,
        artifact_filter: Optional[ArtifactFilter],
        graph_builder: EdgeInserter,
        renderer: GraphRenderer,
        resolutions: Optional[Iterable[NodeResolution]] = None,
    ) -> None:
        self.resolver = resolver
        self.artifact_filter = artifact_filter or accept_all
        self.graph_builder = graph_builder
        self.renderer = renderer
        self.resolutions = ALL_RESOLUTIONS if resolutions is None else frozenset(resolutions)

    def _filtered(self, coordinates: Optional[ArtifactCoordinates]) -> Optional[ArtifactCoordinates]:
        if coordinates is None or not self.artifact_filter(coordinates):
            return None
        return coordinates

    def _resolve(self, module: ProjectModule) -> Iterable[RawEdge]:
        logger.info("Resolving dependencies of %s", module.name)
        try:
            return self.resolver.resolve(module)
        except DependencyGraphError:
            raise
        except (OSError, ValueError, LookupError) as exc:
            raise UpstreamResolutionError(
                f"Unable to resolve dependencies of '{module.name}': {exc}",
                module=module.name,
                cause=exc,
            ) from exc

    def _build_dependency_graph(self, module: ProjectModule) -> None:
        added = 0
        for raw in self._resolve(module):
            if raw.resolution not in self.resolutions:
                logger.debug("Dropping %s edge to %s", raw.resolution.value, raw.target)
                continue
            edge = self.graph_builder.add_edge(
                self._filtered(raw.source),
                self._filtered(raw.target),
                raw.resolution,
                raw.scope,
            )
            if edge is not None:
                added += 1
        logger.debug("Module %s contributed %d edges", module.name, added)

    def _render(self, project: ProjectModule) -> str:
        if self.graph_builder.graph_name is None:
            self.graph_builder.graph_name = project.coordinates.artifact_id or project.name
        return self.renderer.render(self.graph_builder.build())


class SimpleGraphFactory(_FilteringGraphFactory):
    """Graph of a single module."""

    def create_graph(self, project: ProjectModule) -> str:
        self._build_dependency_graph(project)
        return self._render(project)


class AggregatingGraphFactory(_FilteringGraphFactory):
    """One graph for all modules below an aggregation root.

    Aggregator (parent) modules are resolved and drawn only when
    ``include_parent_projects`` is set; they are then linked to their child
    modules through module containment edges.
    """

    def __init__(
        self,
        resolver: DependencyResolver,
        artifact_filter: Optional[ArtifactFilter],
        graph_builder: EdgeInserter,
        renderer: GraphRenderer,
        include_parent_projects: bool = False,
        resolutions: Optional[Iterable[NodeResolution]] = None,
    ) -> None:
        super().__init__(resolver, artifact_filter, graph_builder, renderer, resolutions)
        self.include_parent_projects = include_parent_projects

    def create_graph(self, project: ProjectModule) -> str:
        collected = self.resolver.tree.collected_modules(project)
        logger.info("Aggregating %d modules below %s", len(collected), project.name)

        if self.include_parent_projects:
            self._build_module_tree(project, collected)

        for module in collected:
            if self.is_part_of_graph(module):
                self._build_dependency_graph(module)
            else:
                logger.debug("Skipping module %s", module.name)

        return self._render(project)

    def is_part_of_graph(self, module: ProjectModule) -> bool:
        """Filtered modules are skipped; aggregators need parent projects on."""
        if not self.artifact_filter(module.coordinates):
            return False
        if module.is_aggregator:
            return self.include_parent_projects
        return True

    def _build_module_tree(self, root: ProjectModule, collected: Iterable[ProjectModule]) -> None:
        tree = self.resolver.tree
        modules = {module.name: module for module in tree}
        parents = {
            child: modules[parent]
            for parent, child in tree.containment_pairs()
            if parent in modules
        }

        def parent_of(child: ProjectModule) -> Optional[ProjectModule]:
            return parents.get(child.name)

        for module in collected:
            child = module
            parent = parent_of(child)
            visited = {child.name}

            while parent is not None:
                self.graph_builder.add_module_edge(
                    self._filtered(parent.coordinates),
                    self._filtered(child.coordinates),
                    NodeResolution.PARENT if child.is_aggregator else NodeResolution.INCLUDED,
                )
                if parent.name == root.name:
                    break
                if parent.name in visited:
                    raise UpstreamResolutionError(
                        f"Module hierarchy of '{module.name}' contains a cycle at '{parent.name}'",
                        module=module.name,
                    )
                visited.add(parent.name)
                child = parent
                parent = parent_of(parent)


__all__ = ["AggregatingGraphFactory", "GraphFactory", "SimpleGraphFactory"]
