"""Artifact coordinates and identity keys.

The identity key decides which raw nodes collapse onto one canonical graph
node. Keys are plain strings joined with ``:``; absent fields are kept as
empty segments so keys of the same mode stay positionally comparable.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

KEY_SEPARATOR = ":"


@dataclass(frozen=True)
class ArtifactCoordinates:
    """Coordinates of one artifact as reported by the resolver.

    Attributes:
        group_id: Group (organisation) identifier.
        artifact_id: Artifact name.
        type: Packaging type such as ``jar`` or ``pom``.
        classifier: Optional classifier (``sources``, ``tests``...).
        version: Resolved or declared version.
        scope: Scope under which the artifact was reached.
    """

    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    type: Optional[str] = None
    classifier: Optional[str] = None
    version: Optional[str] = None
    scope: Optional[str] = None

    def with_scope(self, scope: Optional[str]) -> "ArtifactCoordinates":
        """Return a copy carrying ``scope``."""
        return replace(self, scope=scope)

    def __str__(self) -> str:
        return _join(
            self.group_id, self.artifact_id, self.type, self.classifier, self.version, self.scope
        )


class IdentityMode(str, Enum):
    """Coordinate subsets used to form node identity keys."""

    VERSIONLESS = "versionless"
    VERSIONLESS_WITH_SCOPE = "versionless_with_scope"
    SCOPED_GROUP_ID = "scoped_group_id"


def _join(*fields: Optional[str]) -> str:
    return KEY_SEPARATOR.join("" if value is None else str(value) for value in fields)


def artifact_key(coordinates: ArtifactCoordinates, mode: IdentityMode) -> str:
    """Compute the identity key of ``coordinates`` under ``mode``.

    Args:
        coordinates: Artifact coordinates, optional fields may be ``None``.
        mode: Identity mode selecting the participating fields.

    Returns:
        Key like ``org.example:lib:jar:`` (versionless, no classifier).
    """
    c = coordinates
    if mode is IdentityMode.VERSIONLESS_WITH_SCOPE:
        return _join(c.group_id, c.artifact_id, c.type, c.classifier, c.scope)
    if mode is IdentityMode.SCOPED_GROUP_ID:
        return _join(c.group_id, c.scope)
    return _join(c.group_id, c.artifact_id, c.type, c.classifier)


__all__ = ["ArtifactCoordinates", "IdentityMode", "KEY_SEPARATOR", "artifact_key"]
