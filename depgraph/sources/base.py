"""Resolver interface and the project module tree.

A resolver is the collaborator that walks a project's declared dependencies
and reports the raw, un-deduplicated edges plus their resolution verdicts.
Concrete resolvers read those facts from files produced by a build tool.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from depgraph.errors import UpstreamResolutionError
from depgraph.graph.accumulator import RawEdge
from depgraph.graph.identity import ArtifactCoordinates

logger = logging.getLogger("depgraph.sources.base")


@dataclass
class ProjectModule:
    """One module (project) of a possibly multi-module build.

    Attributes:
        name: Unique module name within the tree.
        coordinates: Artifact coordinates of the module itself.
        parent: Name of the parent module, ``None`` for a top-level module.
        modules: Names of declared child modules; non-empty for aggregators.
    """

    name: str
    coordinates: ArtifactCoordinates
    parent: Optional[str] = None
    modules: List[str] = field(default_factory=list)

    @property
    def is_aggregator(self) -> bool:
        return bool(self.modules)


class ProjectTree:
    """Module containment tree, kept as plain parent/child name pairs."""

    def __init__(self, modules: Iterable[ProjectModule], root: Optional[str] = None) -> None:
        self._modules: Dict[str, ProjectModule] = {}
        for module in modules:
            if module.name in self._modules:
                raise UpstreamResolutionError(f"Duplicate module name '{module.name}'", module=module.name)
            self._modules[module.name] = module

        if not self._modules:
            raise UpstreamResolutionError("Project tree contains no modules")

        self.root_name = root or next(iter(self._modules))
        if self.root_name not in self._modules:
            raise UpstreamResolutionError(f"Unknown root module '{self.root_name}'", module=self.root_name)

        for module in self._modules.values():
            for child in module.modules:
                if child in self._modules and self._modules[child].parent is None:
                    self._modules[child].parent = module.name

    @property
    def root(self) -> ProjectModule:
        return self._modules[self.root_name]

    def get(self, name: str) -> ProjectModule:
        try:
            return self._modules[name]
        except KeyError:
            raise UpstreamResolutionError(f"Unknown module '{name}'", module=name) from None

    def containment_pairs(self) -> List[Tuple[str, str]]:
        """``(parent, child)`` name pairs in declaration order."""
        return [
            (module.parent, module.name)
            for module in self._modules.values()
            if module.parent is not None
        ]

    def collected_modules(self, root: Optional[ProjectModule] = None) -> List[ProjectModule]:
        """All modules below ``root`` in depth-first declaration order.

        Modules whose parent is unknown are attached below the tree root so
        that flat resolver outputs still aggregate.
        """
        root = root or self.root
        children: Dict[str, List[ProjectModule]] = {name: [] for name in self._modules}
        for module in self._modules.values():
            if module.name == self.root_name:
                continue
            parent = module.parent if module.parent in self._modules else self.root_name
            children[parent].append(module)

        collected: List[ProjectModule] = []
        seen = {root.name}
        stack = list(reversed(children[root.name]))
        while stack:
            module = stack.pop()
            if module.name in seen:
                continue
            seen.add(module.name)
            collected.append(module)
            stack.extend(reversed(children[module.name]))
        return collected

    def __iter__(self) -> Iterator[ProjectModule]:
        return iter(self._modules.values())

    def __len__(self) -> int:
        return len(self._modules)


class DependencyResolver(ABC):
    """Supplies raw edges per module and the module tree they belong to."""

    NAME = "base"

    def __init__(self, tree: ProjectTree) -> None:
        self.tree = tree

    @abstractmethod
    def resolve(self, module: ProjectModule) -> List[RawEdge]:
        """Return the raw edges of ``module`` in traversal order.

        Raises:
            UpstreamResolutionError: The module's edges cannot be produced.
        """


__all__ = ["DependencyResolver", "ProjectModule", "ProjectTree"]
