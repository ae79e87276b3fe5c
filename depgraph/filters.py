"""Artifact filters deciding which artifacts take part in a graph."""

from __future__ import annotations

import logging
from fnmatch import fnmatchcase
from typing import Callable, Iterable, List, Optional, Sequence

from depgraph.graph.identity import ArtifactCoordinates

logger = logging.getLogger("depgraph.filters")

ArtifactFilter = Callable[[ArtifactCoordinates], bool]


def accept_all(artifact: ArtifactCoordinates) -> bool:
    return True


def _fields(artifact: ArtifactCoordinates) -> List[str]:
    return [
        artifact.group_id or "",
        artifact.artifact_id or "",
        artifact.type or "",
        artifact.classifier or "",
        artifact.version or "",
    ]


def matches(pattern: str, artifact: ArtifactCoordinates) -> bool:
    """Match ``groupId:artifactId:type:classifier:version`` glob patterns.

    Segments missing at the end of the pattern match anything, so
    ``com.example`` and ``com.example:*`` are equivalent.
    """
    segments = pattern.strip().split(":")
    return all(
        fnmatchcase(value, segment or "*")
        for segment, value in zip(segments, _fields(artifact))
    )


class PatternArtifactFilter:
    """Include/exclude filter over coordinate glob patterns.

    An artifact passes when it matches at least one include pattern (or no
    includes are configured) and no exclude pattern.
    """

    def __init__(
        self,
        includes: Optional[Iterable[str]] = None,
        excludes: Optional[Iterable[str]] = None,
    ) -> None:
        self.includes: Sequence[str] = [p for p in (includes or []) if p.strip()]
        self.excludes: Sequence[str] = [p for p in (excludes or []) if p.strip()]

    def __call__(self, artifact: ArtifactCoordinates) -> bool:
        if self.includes and not any(matches(p, artifact) for p in self.includes):
            logger.debug("Artifact %s not included", artifact)
            return False
        if any(matches(p, artifact) for p in self.excludes):
            logger.debug("Artifact %s excluded", artifact)
            return False
        return True

    def __repr__(self) -> str:
        return f"PatternArtifactFilter(includes={list(self.includes)!r}, excludes={list(self.excludes)!r})"


def create_filter(includes: Optional[Iterable[str]] = None, excludes: Optional[Iterable[str]] = None) -> ArtifactFilter:
    """Return :func:`accept_all` when no patterns are given."""
    pattern_filter = PatternArtifactFilter(includes, excludes)
    if not pattern_filter.includes and not pattern_filter.excludes:
        return accept_all
    return pattern_filter


__all__ = ["ArtifactFilter", "PatternArtifactFilter", "accept_all", "create_filter", "matches"]
