"""Tests for the viewer JSON renderer."""

import json

import pytest

import depgraph.export.json as json_export
from depgraph.errors import RenderSerializationError
from depgraph.export.json import JsonRenderer, render_json
from depgraph.graph import ArtifactCoordinates, GraphAccumulator, NodeResolution


def _art(name: str, version="1.0", type_: str = "jar") -> ArtifactCoordinates:
    return ArtifactCoordinates("com.example", name, type_, None, version)


def _abc_graph():
    accumulator = GraphAccumulator()
    accumulator.add_edge(_art("a"), _art("b"), NodeResolution.INCLUDED, "compile")
    accumulator.add_edge(_art("a"), _art("c"), NodeResolution.INCLUDED, "test")
    accumulator.add_edge(_art("b"), _art("c", "2.0"), NodeResolution.OMITTED_FOR_CONFLICT, "compile")
    return accumulator.build()


def test_render_abc_scenario() -> None:
    """Artifacts and dependencies follow first-seen and insertion order."""
    data = json.loads(render_json(_abc_graph()))

    assert data["artifacts"] == [
        {"id": 0, "artifactId": "a", "version": "1.0"},
        {"id": 1, "artifactId": "b", "version": "1.0"},
        {"id": 2, "artifactId": "c", "version": "1.0"},
    ]
    assert data["dependencies"] == [
        {"from": 0, "to": 1, "resolution": "INCLUDED", "scopes": ["compile"]},
        {"from": 0, "to": 2, "resolution": "INCLUDED", "scopes": ["test", "compile"]},
        {"from": 1, "to": 2, "resolution": "INCLUDED", "scopes": ["test", "compile"]},
    ]


def test_resolution_follows_target_node() -> None:
    """Every dependency into a node reports that node's first-seen resolution."""
    accumulator = GraphAccumulator()
    accumulator.add_edge(_art("a"), _art("old", "0.9"), NodeResolution.OMITTED_FOR_CONFLICT, "compile")
    accumulator.add_edge(_art("b"), _art("old", "1.0"), NodeResolution.INCLUDED, "compile")
    graph = accumulator.build()
    data = json.loads(render_json(graph))

    target = graph.nodes[1]
    assert target.resolution is NodeResolution.OMITTED_FOR_CONFLICT
    assert [d["resolution"] for d in data["dependencies"]] == ["OMITTED_FOR_CONFLICT", "OMITTED_FOR_CONFLICT"]
    assert graph.edges[1].resolution is NodeResolution.INCLUDED


def test_dependency_ids_index_into_artifacts() -> None:
    """Every from/to value is a valid artifacts index."""
    accumulator = GraphAccumulator()
    for source, target in [("a", "b"), ("b", "c"), ("c", "a"), ("d", "b"), ("a", "b")]:
        accumulator.add_edge(_art(source), _art(target), scope="compile")
    data = json.loads(render_json(accumulator.build()))

    count = len(data["artifacts"])
    for dependency in data["dependencies"]:
        assert 0 <= dependency["from"] < count
        assert 0 <= dependency["to"] < count
    assert [artifact["id"] for artifact in data["artifacts"]] == list(range(count))


def test_empty_values_are_kept() -> None:
    """Empty scope sets and missing versions are serialized, not omitted."""
    accumulator = GraphAccumulator()
    accumulator.add_module_edge(_art("parent", None, "pom"), _art("app"))
    data = json.loads(render_json(accumulator.build()))

    assert data["artifacts"][0] == {"id": 0, "artifactId": "parent", "version": ""}
    assert data["dependencies"][0]["scopes"] == []


def test_jsonp_wrapping() -> None:
    """JSONP output assigns the document to a script variable."""
    text = JsonRenderer(jsonp=True).render(_abc_graph())

    assert text.startswith("var graph = {")
    assert text.endswith("};")
    payload = json.loads(text[len("var graph = "):-1])
    assert len(payload["artifacts"]) == 3


def test_non_ascii_is_preserved() -> None:
    """Artifact names are written as UTF-8 text, not escapes."""
    accumulator = GraphAccumulator()
    accumulator.add_edge(_art("wurzel"), _art("bücher"), scope="compile")

    assert '"bücher"' in render_json(accumulator.build())


def test_encoder_failure_raises_serialization_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Low-level encoder failures surface as RenderSerializationError."""

    def _broken(graph):
        raise TypeError("not serializable")

    monkeypatch.setattr(json_export, "build_graph_json", _broken)

    with pytest.raises(RenderSerializationError):
        render_json(_abc_graph())
