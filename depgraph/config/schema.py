"""Configuration schema definitions using Pydantic for validation.

Values only: command-line parsing lives in :mod:`depgraph.main`, which
overlays explicit flags on top of a loaded configuration.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from depgraph.export import GraphFormat
from depgraph.export.style import StyleConfiguration
from depgraph.graph.identity import IdentityMode
from depgraph.graph.resolution import NodeResolution


class DepGraphConfig(BaseModel):
    """Top-level configuration for one graph invocation.

    Attributes:
        identity_mode: Coordinate subset used to merge nodes.
        graph_format: Output format.
        jsonp: Wrap JSON output as ``var graph = ...;``.
        include_parent_projects: Draw aggregator modules and their module
            containment edges in aggregated graphs.
        includes: Artifact glob patterns to keep.
        excludes: Artifact glob patterns to drop.
        resolutions: Resolution states whose raw edges enter the graph;
            unset means the command's default.
        graph_name: Name of the rendered graph; defaults to the project.
        style: DOT style options.
    """

    model_config = ConfigDict(extra="forbid")

    identity_mode: IdentityMode = IdentityMode.VERSIONLESS
    graph_format: GraphFormat = GraphFormat.DOT
    jsonp: bool = False
    include_parent_projects: bool = False
    includes: List[str] = Field(default_factory=list)
    excludes: List[str] = Field(default_factory=list)
    resolutions: Optional[List[NodeResolution]] = None
    graph_name: Optional[str] = None
    style: StyleConfiguration = Field(default_factory=StyleConfiguration)

    @field_validator("includes", "excludes", mode="before")
    @classmethod
    def split_patterns(cls, v):
        """Accept comma-separated strings as well as lists."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("resolutions", mode="before")
    @classmethod
    def split_resolutions(cls, v):
        """Accept comma-separated, case-insensitive state names."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            names = [part.strip() if isinstance(part, str) else part for part in v]
            return [name.upper() if isinstance(name, str) else name for name in names if name]
        return v

    @field_validator("graph_format", mode="before")
    @classmethod
    def normalize_format(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def with_style(self, **flags) -> "DepGraphConfig":
        """Return a copy whose style has ``flags`` applied."""
        return self.model_copy(update={"style": self.style.model_copy(update=flags)})


__all__ = ["DepGraphConfig"]
