"""Tests for the canonical node table."""

from depgraph.graph.identity import ArtifactCoordinates, IdentityMode
from depgraph.graph.nodes import UNREGISTERED_ID, GraphNode, NodeTable
from depgraph.graph.resolution import NodeResolution


def _art(name: str, version: str = "1.0") -> ArtifactCoordinates:
    return ArtifactCoordinates("com.example", name, "jar", None, version)


def test_ids_are_dense_in_first_seen_order() -> None:
    """N distinct identities get ids 0..N-1 in insertion order."""
    table = NodeTable()
    names = ["c", "a", "b", "a", "c", "d"]

    nodes = [table.get_or_create(_art(name), NodeResolution.INCLUDED) for name in names]

    assert [node.id for node in nodes] == [0, 1, 2, 1, 0, 3]
    assert sorted(node.id for node in table) == list(range(len(table)))
    assert [node.artifact_id for node in table.nodes()] == ["c", "a", "b", "d"]


def test_first_seen_resolution_and_version_win() -> None:
    """Later registrations of a known identity return the first node untouched."""
    table = NodeTable(IdentityMode.VERSIONLESS)

    first = table.get_or_create(_art("lib", "1.0"), NodeResolution.OMITTED_FOR_CONFLICT)
    second = table.get_or_create(_art("lib", "2.0"), NodeResolution.INCLUDED)

    assert second is first
    assert len(table) == 1
    assert first.resolution is NodeResolution.OMITTED_FOR_CONFLICT
    assert first.version == "1.0"


def test_get_or_create_does_not_merge_scopes() -> None:
    """Scope merging is left to edge insertion."""
    table = NodeTable()
    node = table.get_or_create(_art("lib").with_scope("test"), NodeResolution.INCLUDED)

    assert node.scopes == ()


def test_effective_node_returns_canonical_instance() -> None:
    """Transient duplicates resolve to the registered node."""
    table = NodeTable()
    canonical = table.get_or_create(_art("lib", "1.0"), NodeResolution.INCLUDED)
    duplicate = GraphNode.transient(_art("lib", "9.9"), NodeResolution.OMITTED_FOR_DUPLICATE)

    assert duplicate.id == UNREGISTERED_ID
    assert table.effective_node(duplicate) is canonical


def test_effective_node_passes_through_unknown_node() -> None:
    """Unregistered identities are returned as given."""
    table = NodeTable()
    stranger = GraphNode.transient(_art("unknown"))

    assert table.effective_node(stranger) is stranger
    assert stranger.key not in table


def test_mode_override_per_call() -> None:
    """An explicit mode argument takes precedence over the table default."""
    table = NodeTable(IdentityMode.VERSIONLESS)
    compile_node = table.get_or_create(
        _art("lib").with_scope("compile"), NodeResolution.INCLUDED, IdentityMode.VERSIONLESS_WITH_SCOPE
    )
    test_node = table.get_or_create(
        _art("lib").with_scope("test"), NodeResolution.INCLUDED, IdentityMode.VERSIONLESS_WITH_SCOPE
    )

    assert compile_node is not test_node
    assert table.get("com.example:lib:jar::test") is test_node


def test_transient_node_uses_table_mode() -> None:
    """Transient nodes built by a table resolve under that table's mode."""
    table = NodeTable(IdentityMode.VERSIONLESS_WITH_SCOPE)
    registered = table.get_or_create(_art("lib").with_scope("test"), NodeResolution.INCLUDED)

    lookup = table.transient(_art("lib", "2.0").with_scope("test"))

    assert lookup.id == UNREGISTERED_ID
    assert lookup.key == "com.example:lib:jar::test"
    assert table.effective_node(lookup) is registered
    assert table.effective_node(GraphNode.transient(_art("lib").with_scope("test"))) is not registered
