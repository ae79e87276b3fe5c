"""Resolver parsing ``mvn dependency:tree -Dverbose`` console output.

Each module's tree starts with an unindented root line followed by
indented dependency lines::

    [INFO] com.example:app:jar:1.0
    [INFO] +- org.slf4j:slf4j-api:jar:1.7.36:compile
    [INFO] \\- junit:junit:jar:4.13.2:test
    [INFO]    \\- (org.hamcrest:hamcrest-core:jar:1.3:test - omitted for duplicate)

When the first tree belongs to a ``pom`` module and more trees follow, the
first module is treated as the aggregator of all others.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from depgraph.errors import UpstreamResolutionError
from depgraph.graph.accumulator import RawEdge
from depgraph.graph.identity import ArtifactCoordinates
from depgraph.graph.resolution import NodeResolution
from depgraph.sources.base import DependencyResolver, ProjectModule, ProjectTree

logger = logging.getLogger("depgraph.sources.tree_text")

_LOG_PREFIX = re.compile(r"^\[(?:INFO|WARNING|WARN|DEBUG|ERROR)\]\s?")
_TREE_LINE = re.compile(r"^((?:[| ]  )*)([+\\]- )(.+)$")
_ROOT_LINE = re.compile(r"^[^\s:()]+(?::[^\s:()]*){3,4}$")
_BRANCH_WIDTH = 3


def parse_coordinates(text: str, with_scope: bool = True) -> ArtifactCoordinates:
    """Parse ``group:artifact:type[:classifier]:version[:scope]``.

    Args:
        text: Coordinate string as printed by the dependency tree.
        with_scope: Whether the string ends with a scope (dependency lines).

    Raises:
        ValueError: The field count does not match either layout.
    """
    parts = text.strip().split(":")
    scope: Optional[str] = None
    if with_scope:
        if len(parts) not in (5, 6):
            raise ValueError(f"Unexpected dependency coordinates '{text}'")
        scope = parts.pop()
    elif len(parts) not in (4, 5):
        raise ValueError(f"Unexpected project coordinates '{text}'")

    classifier = parts[3] if len(parts) == 5 else None
    return ArtifactCoordinates(
        group_id=parts[0],
        artifact_id=parts[1],
        type=parts[2],
        classifier=classifier or None,
        version=parts[-1],
        scope=scope or None,
    )


def parse_dependency(content: str) -> Tuple[ArtifactCoordinates, NodeResolution]:
    """Parse the part of a tree line after the branch marker."""
    content = content.strip()
    if content.startswith("(") and content.endswith(")"):
        coordinates_text, _, note = content[1:-1].partition(" - ")
        return parse_coordinates(coordinates_text), _resolution_for(note)

    # Included artifacts may carry a trailing note such as
    # "(version managed from 1.0)".
    coordinates_text = content.split(None, 1)[0]
    return parse_coordinates(coordinates_text), NodeResolution.INCLUDED


def _resolution_for(note: str) -> NodeResolution:
    if "omitted for conflict" in note:
        return NodeResolution.OMITTED_FOR_CONFLICT
    if "omitted for cycle" in note:
        return NodeResolution.OMITTED_FOR_CYCLE
    if "omitted for duplicate" in note:
        return NodeResolution.OMITTED_FOR_DUPLICATE
    logger.debug("Unrecognized tree note '%s', treating as duplicate", note)
    return NodeResolution.OMITTED_FOR_DUPLICATE


@dataclass
class _TreeBlock:
    root_line: str
    line_number: int
    lines: List[Tuple[int, str]] = field(default_factory=list)


def split_trees(text: str) -> List[_TreeBlock]:
    """Split console output into one block per module tree."""
    blocks: List[_TreeBlock] = []
    for number, raw_line in enumerate(text.splitlines(), start=1):
        line = _LOG_PREFIX.sub("", raw_line.rstrip())
        if not line.strip():
            continue
        if _TREE_LINE.match(line):
            if blocks:
                blocks[-1].lines.append((number, line))
            continue
        if _ROOT_LINE.match(line.strip()):
            blocks.append(_TreeBlock(line.strip(), number))
    return blocks


class TreeTextResolver(DependencyResolver):
    """Serves raw edges parsed from dependency tree console output."""

    NAME = "tree"

    def __init__(self, text: str, source: str = "<text>") -> None:
        self.source = source
        self._blocks: Dict[str, _TreeBlock] = {}
        modules: List[ProjectModule] = []
        for block in split_trees(text):
            try:
                coordinates = parse_coordinates(block.root_line, with_scope=False)
            except ValueError as exc:
                raise UpstreamResolutionError(
                    f"{source}:{block.line_number}: {exc}", cause=exc
                ) from exc
            name = f"{coordinates.group_id}:{coordinates.artifact_id}"
            self._blocks[name] = block
            modules.append(ProjectModule(name=name, coordinates=coordinates))

        if not modules:
            raise UpstreamResolutionError(f"No dependency tree found in {source}")

        root = modules[0]
        if root.coordinates.type == "pom" and len(modules) > 1:
            root.modules = [module.name for module in modules[1:]]
            for module in modules[1:]:
                module.parent = root.name
        super().__init__(ProjectTree(modules, root=root.name))

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "TreeTextResolver":
        path = Path(path)
        logger.info("Loading dependency tree output: %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise UpstreamResolutionError(f"Unable to read {path}: {exc}", cause=exc) from exc
        return cls(text, source=str(path))

    def resolve(self, module: ProjectModule) -> List[RawEdge]:
        block = self._blocks.get(module.name)
        if block is None:
            raise UpstreamResolutionError(f"No dependency tree for module '{module.name}'", module=module.name)

        edges: List[RawEdge] = []
        parents: List[ArtifactCoordinates] = [module.coordinates]
        for number, line in block.lines:
            match = _TREE_LINE.match(line)
            depth = len(match.group(1)) // _BRANCH_WIDTH + 1
            if depth > len(parents):
                raise UpstreamResolutionError(
                    f"{self.source}:{number}: tree line is nested too deep", module=module.name
                )
            try:
                coordinates, resolution = parse_dependency(match.group(3))
            except ValueError as exc:
                raise UpstreamResolutionError(
                    f"{self.source}:{number}: {exc}", module=module.name, cause=exc
                ) from exc

            del parents[depth:]
            edges.append(RawEdge(parents[-1], coordinates, resolution, coordinates.scope))
            parents.append(coordinates)

        logger.debug("Parsed %d raw edges for module %s", len(edges), module.name)
        return edges


__all__ = ["TreeTextResolver", "parse_coordinates", "parse_dependency", "split_trees"]
