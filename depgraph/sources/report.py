"""Resolver reading a JSON resolution report.

Report layout::

    {
      "root": "parent",
      "modules": [
        {
          "name": "parent",
          "groupId": "com.example", "artifactId": "parent",
          "version": "1.0", "type": "pom",
          "modules": ["app"],
          "dependencies": []
        },
        {
          "name": "app", "parent": "parent",
          "groupId": "com.example", "artifactId": "app", "version": "1.0",
          "dependencies": [
            {"from": {...coordinates...}, "to": {...},
             "resolution": "INCLUDED", "scope": "compile"}
          ]
        }
      ]
    }

A module may carry ``"error"`` instead of dependencies when the build tool
failed to resolve it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from depgraph.errors import UpstreamResolutionError
from depgraph.graph.accumulator import RawEdge
from depgraph.graph.identity import ArtifactCoordinates
from depgraph.graph.resolution import NodeResolution
from depgraph.sources.base import DependencyResolver, ProjectModule, ProjectTree

logger = logging.getLogger("depgraph.sources.report")


class CoordinatesModel(BaseModel):
    """Artifact coordinates as written in the report."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    group_id: Optional[str] = Field(default=None, alias="groupId")
    artifact_id: Optional[str] = Field(default=None, alias="artifactId")
    type: Optional[str] = "jar"
    classifier: Optional[str] = None
    version: Optional[str] = None
    scope: Optional[str] = None

    def to_coordinates(self) -> ArtifactCoordinates:
        return ArtifactCoordinates(
            group_id=self.group_id,
            artifact_id=self.artifact_id,
            type=self.type,
            classifier=self.classifier or None,
            version=self.version,
            scope=self.scope,
        )


class DependencyModel(BaseModel):
    """One raw edge."""

    model_config = ConfigDict(populate_by_name=True)

    source: CoordinatesModel = Field(alias="from")
    target: CoordinatesModel = Field(alias="to")
    resolution: NodeResolution = NodeResolution.INCLUDED
    scope: Optional[str] = None


class ModuleModel(CoordinatesModel):
    """One module entry; dependencies stay unvalidated until resolved."""

    name: Optional[str] = None
    parent: Optional[str] = None
    modules: List[str] = Field(default_factory=list)
    dependencies: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def module_name(self) -> str:
        return self.name or f"{self.group_id or ''}:{self.artifact_id or ''}"


class ReportModel(BaseModel):
    root: Optional[str] = None
    modules: List[ModuleModel] = Field(min_length=1)


class ReportResolver(DependencyResolver):
    """Serves raw edges from a parsed resolution report."""

    NAME = "report"

    def __init__(self, report: ReportModel) -> None:
        self._entries: Dict[str, ModuleModel] = {m.module_name: m for m in report.modules}
        modules = [
            ProjectModule(
                name=entry.module_name,
                coordinates=entry.to_coordinates(),
                parent=entry.parent,
                modules=list(entry.modules),
            )
            for entry in report.modules
        ]
        super().__init__(ProjectTree(modules, root=report.root))

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "ReportResolver":
        try:
            report = ReportModel.model_validate(data)
        except ValidationError as exc:
            raise UpstreamResolutionError(f"Invalid resolution report: {exc}", cause=exc) from exc
        return cls(report)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "ReportResolver":
        """Load a report file.

        Raises:
            UpstreamResolutionError: The file is unreadable or malformed.
        """
        path = Path(path)
        logger.info("Loading resolution report: %s", path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise UpstreamResolutionError(f"Unable to read report {path}: {exc}", cause=exc) from exc
        if not isinstance(data, dict):
            raise UpstreamResolutionError(f"Report {path} must contain a JSON object")
        return cls.from_data(data)

    def resolve(self, module: ProjectModule) -> List[RawEdge]:
        entry = self._entries.get(module.name)
        if entry is None:
            raise UpstreamResolutionError(f"Module '{module.name}' is not in the report", module=module.name)
        if entry.error:
            raise UpstreamResolutionError(
                f"Unable to resolve dependencies of '{module.name}': {entry.error}",
                module=module.name,
            )

        edges: List[RawEdge] = []
        for index, raw in enumerate(entry.dependencies):
            try:
                dependency = DependencyModel.model_validate(raw)
            except ValidationError as exc:
                raise UpstreamResolutionError(
                    f"Malformed dependency #{index} in module '{module.name}': {exc}",
                    module=module.name,
                    cause=exc,
                ) from exc
            edges.append(
                RawEdge(
                    dependency.source.to_coordinates(),
                    dependency.target.to_coordinates(),
                    dependency.resolution,
                    dependency.scope or dependency.target.scope,
                )
            )

        logger.debug("Resolved %d raw edges for module %s", len(edges), module.name)
        return edges


__all__ = ["ReportResolver"]
