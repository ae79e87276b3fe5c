"""Tests for the simple and aggregating graph factories."""

from typing import Dict, List

import pytest

from depgraph.errors import UpstreamResolutionError
from depgraph.export.json import JsonRenderer
from depgraph.factory import AggregatingGraphFactory, SimpleGraphFactory
from depgraph.filters import create_filter
from depgraph.graph import ArtifactCoordinates, Graph, GraphAccumulator, NodeResolution, RawEdge
from depgraph.sources.base import DependencyResolver, ProjectModule, ProjectTree


def _art(name: str, type_: str = "jar") -> ArtifactCoordinates:
    return ArtifactCoordinates("com.example", name, type_, None, "1.0")


class _StaticResolver(DependencyResolver):
    """Serves canned raw edges per module name."""

    def __init__(self, modules: List[ProjectModule], edges: Dict[str, List[RawEdge]], root: str) -> None:
        super().__init__(ProjectTree(modules, root=root))
        self.edges = edges
        self.resolved: List[str] = []

    def resolve(self, module: ProjectModule) -> List[RawEdge]:
        self.resolved.append(module.name)
        edges = self.edges.get(module.name)
        if isinstance(edges, Exception):
            raise edges
        return list(edges or [])


class _RecordingRenderer:
    def __init__(self) -> None:
        self.graphs: List[Graph] = []

    def render(self, graph: Graph) -> str:
        self.graphs.append(graph)
        return f"{graph.name}:{graph.node_count()}:{graph.edge_count()}"


def _project(edges=None) -> _StaticResolver:
    modules = [
        ProjectModule("parent", _art("parent", "pom"), modules=["core", "web"]),
        ProjectModule("core", _art("core")),
        ProjectModule("web", _art("web")),
    ]
    default_edges = {
        "parent": [],
        "core": [RawEdge(_art("core"), _art("guava"), NodeResolution.INCLUDED, "compile")],
        "web": [
            RawEdge(_art("web"), _art("core"), NodeResolution.INCLUDED, "compile"),
            RawEdge(_art("core"), _art("guava"), NodeResolution.OMITTED_FOR_DUPLICATE, "compile"),
            RawEdge(_art("web"), _art("junit"), NodeResolution.INCLUDED, "test"),
        ],
    }
    if edges:
        default_edges.update(edges)
    return _StaticResolver(modules, default_edges, root="parent")


def test_simple_factory_renders_one_module() -> None:
    """The graph is named after the project and rendered once."""
    resolver = _project()
    renderer = _RecordingRenderer()
    factory = SimpleGraphFactory(resolver, None, GraphAccumulator(), renderer)

    result = factory.create_graph(resolver.tree.get("web"))

    assert result == "web:4:3"
    assert resolver.resolved == ["web"]
    assert len(renderer.graphs) == 1


def test_simple_factory_keeps_configured_name() -> None:
    """An explicit graph name is not overwritten."""
    resolver = _project()
    factory = SimpleGraphFactory(resolver, None, GraphAccumulator(graph_name="custom"), _RecordingRenderer())

    assert factory.create_graph(resolver.tree.get("core")).startswith("custom:")


def test_filtered_endpoints_drop_edges() -> None:
    """Edges touching an excluded artifact disappear."""
    resolver = _project()
    renderer = _RecordingRenderer()
    factory = SimpleGraphFactory(resolver, create_filter(excludes=["*:junit"]), GraphAccumulator(), renderer)

    factory.create_graph(resolver.tree.get("web"))

    graph = renderer.graphs[0]
    assert [node.artifact_id for node in graph.nodes] == ["web", "core", "guava"]
    assert graph.edge_count() == 2


def test_aggregate_without_parents() -> None:
    """Aggregator modules are skipped and edges shared across modules merge."""
    resolver = _project()
    renderer = _RecordingRenderer()
    factory = AggregatingGraphFactory(resolver, None, GraphAccumulator(), renderer)

    factory.create_graph(resolver.tree.root)

    graph = renderer.graphs[0]
    assert resolver.resolved == ["core", "web"]
    assert [node.artifact_id for node in graph.nodes] == ["core", "guava", "web", "junit"]
    assert graph.edge_count() == 3
    assert graph.module_edges() == ()
    # first insertion wins, so the duplicate report from web does not restyle the edge
    assert graph.edges[0].resolution is NodeResolution.INCLUDED


def test_aggregate_with_parents() -> None:
    """Parent projects add module edges; the root itself is never resolved."""
    resolver = _project()
    renderer = _RecordingRenderer()
    factory = AggregatingGraphFactory(
        resolver, None, GraphAccumulator(), renderer, include_parent_projects=True
    )

    factory.create_graph(resolver.tree.root)

    graph = renderer.graphs[0]
    assert resolver.resolved == ["core", "web"]
    assert graph.nodes[0].artifact_id == "parent"
    assert graph.nodes[0].resolution is NodeResolution.PARENT
    module_pairs = [(e.source.artifact_id, e.target.artifact_id) for e in graph.module_edges()]
    assert module_pairs == [("parent", "core"), ("parent", "web")]
    assert len(graph.dependency_edges()) == 3


def test_nested_aggregators_link_up_to_root() -> None:
    """Intermediate aggregators are linked to their own parents."""
    modules = [
        ProjectModule("root", _art("root", "pom"), modules=["services"]),
        ProjectModule("services", _art("services", "pom"), modules=["api"]),
        ProjectModule("api", _art("api")),
    ]
    resolver = _StaticResolver(modules, {}, root="root")
    renderer = _RecordingRenderer()
    factory = AggregatingGraphFactory(
        resolver, None, GraphAccumulator(), renderer, include_parent_projects=True
    )

    factory.create_graph(resolver.tree.root)

    edges = renderer.graphs[0].module_edges()
    assert [(e.source.artifact_id, e.target.artifact_id) for e in edges] == [
        ("root", "services"),
        ("services", "api"),
    ]
    assert edges[0].resolution is NodeResolution.PARENT


def test_filtered_modules_are_skipped() -> None:
    """Modules rejected by the filter are neither resolved nor linked."""
    resolver = _project()
    renderer = _RecordingRenderer()
    factory = AggregatingGraphFactory(
        resolver,
        create_filter(excludes=["*:web"]),
        GraphAccumulator(),
        renderer,
        include_parent_projects=True,
    )

    factory.create_graph(resolver.tree.root)

    assert resolver.resolved == ["core"]
    assert len(renderer.graphs[0].module_edges()) == 1


def test_resolver_failure_aborts_before_rendering() -> None:
    """A failing module stops the run; nothing is rendered."""
    resolver = _project({"web": UpstreamResolutionError("boom", module="web")})
    renderer = _RecordingRenderer()
    factory = AggregatingGraphFactory(resolver, None, GraphAccumulator(), renderer)

    with pytest.raises(UpstreamResolutionError, match="boom"):
        factory.create_graph(resolver.tree.root)
    assert renderer.graphs == []


def test_foreign_resolver_errors_are_wrapped() -> None:
    """Low-level resolver errors become UpstreamResolutionError with the cause."""
    cause = FileNotFoundError("pom.xml")
    resolver = _project({"core": cause})
    factory = SimpleGraphFactory(resolver, None, GraphAccumulator(), _RecordingRenderer())

    with pytest.raises(UpstreamResolutionError) as excinfo:
        factory.create_graph(resolver.tree.get("core"))
    assert excinfo.value.cause is cause
    assert excinfo.value.module == "core"


def test_factory_with_json_renderer() -> None:
    """Factories hand the finished graph to real renderers."""
    resolver = _project()
    factory = SimpleGraphFactory(resolver, None, GraphAccumulator(), JsonRenderer())

    text = factory.create_graph(resolver.tree.get("web"))

    assert '"artifactId": "web"' in text
    assert '"OMITTED_FOR_DUPLICATE"' in text


def test_resolution_states_filter_raw_edges() -> None:
    """Raw edges outside the configured states never reach the graph."""
    resolver = _project()
    renderer = _RecordingRenderer()
    factory = SimpleGraphFactory(
        resolver, None, GraphAccumulator(), renderer, resolutions={NodeResolution.INCLUDED}
    )

    factory.create_graph(resolver.tree.get("web"))

    graph = renderer.graphs[0]
    assert [node.artifact_id for node in graph.nodes] == ["web", "core", "junit"]
    assert all(edge.resolution is NodeResolution.INCLUDED for edge in graph.edges)


def test_resolution_states_leave_module_edges_alone() -> None:
    """Module containment edges are drawn regardless of the resolution states."""
    resolver = _project()
    renderer = _RecordingRenderer()
    factory = AggregatingGraphFactory(
        resolver,
        None,
        GraphAccumulator(),
        renderer,
        include_parent_projects=True,
        resolutions={NodeResolution.INCLUDED},
    )

    factory.create_graph(resolver.tree.root)

    graph = renderer.graphs[0]
    assert len(graph.module_edges()) == 2
    assert len(graph.dependency_edges()) == 3
    assert factory.resolutions == frozenset({NodeResolution.INCLUDED})
