"""Resolver collaborators producing raw dependency edges."""

from pathlib import Path
from typing import Union

from depgraph.sources.base import DependencyResolver, ProjectModule, ProjectTree
from depgraph.sources.report import ReportResolver
from depgraph.sources.tree_text import TreeTextResolver

RESOLVERS = {
    ReportResolver.NAME: ReportResolver,
    TreeTextResolver.NAME: TreeTextResolver,
}


def load_resolver(path: Union[str, Path], input_format: str = ReportResolver.NAME) -> DependencyResolver:
    """Create the resolver registered for ``input_format`` from ``path``.

    Raises:
        ValueError: ``input_format`` is unknown.
        UpstreamResolutionError: The input cannot be read or parsed.
    """
    try:
        resolver_cls = RESOLVERS[input_format]
    except KeyError:
        raise ValueError(
            f"Unknown input format '{input_format}'. Supported formats: {sorted(RESOLVERS)}"
        ) from None
    return resolver_cls.from_path(path)


__all__ = [
    "DependencyResolver",
    "ProjectModule",
    "ProjectTree",
    "RESOLVERS",
    "ReportResolver",
    "TreeTextResolver",
    "load_resolver",
]
