"""Tests for artifact identity keys."""

from depgraph.graph.identity import ArtifactCoordinates, IdentityMode, artifact_key


def _coords(**overrides) -> ArtifactCoordinates:
    fields = dict(
        group_id="com.example",
        artifact_id="lib",
        type="jar",
        classifier=None,
        version="1.0",
        scope="compile",
    )
    fields.update(overrides)
    return ArtifactCoordinates(**fields)


def test_versionless_key_omits_version_and_scope() -> None:
    """Versionless keys keep group, artifact, type and classifier only."""
    assert artifact_key(_coords(), IdentityMode.VERSIONLESS) == "com.example:lib:jar:"
    assert artifact_key(_coords(version="2.0", scope="test"), IdentityMode.VERSIONLESS) == "com.example:lib:jar:"


def test_versionless_with_scope_key_appends_scope() -> None:
    """Scope-aware keys separate the same artifact in different scopes."""
    compile_key = artifact_key(_coords(), IdentityMode.VERSIONLESS_WITH_SCOPE)
    test_key = artifact_key(_coords(scope="test"), IdentityMode.VERSIONLESS_WITH_SCOPE)

    assert compile_key == "com.example:lib:jar::compile"
    assert test_key == "com.example:lib:jar::test"


def test_scoped_group_id_key() -> None:
    """Group mode keys only use group id and scope."""
    assert artifact_key(_coords(artifact_id="other"), IdentityMode.SCOPED_GROUP_ID) == "com.example:compile"


def test_missing_fields_become_empty_segments() -> None:
    """Absent fields never fail and keep keys positionally comparable."""
    empty = ArtifactCoordinates()

    assert artifact_key(empty, IdentityMode.VERSIONLESS) == ":::"
    assert artifact_key(empty, IdentityMode.VERSIONLESS_WITH_SCOPE) == "::::"
    assert artifact_key(_coords(classifier="sources"), IdentityMode.VERSIONLESS) == "com.example:lib:jar:sources"


def test_key_is_deterministic() -> None:
    """Computing a key twice yields identical strings."""
    coords = _coords(artifact_id="ünïcode:\"quoted\"")
    for mode in IdentityMode:
        assert artifact_key(coords, mode) == artifact_key(coords, mode)


def test_with_scope_returns_copy() -> None:
    """with_scope leaves the original coordinates untouched."""
    original = _coords(scope=None)
    scoped = original.with_scope("test")

    assert original.scope is None
    assert scoped.scope == "test"
    assert str(scoped) == "com.example:lib:jar::1.0:test"
