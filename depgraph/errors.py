"""Exception hierarchy for depgraph.

Only two conditions leave the core as failures: the resolver could not
produce raw edges for a module, or an output encoder broke. Canonicalization
and deduplication accept any input and never raise.
"""

from typing import Any, Optional


class DependencyGraphError(Exception):
    """Base class for user-facing depgraph failures."""
    pass


class UpstreamResolutionError(DependencyGraphError):
    """The dependency resolver could not produce raw edges for a module.

    Fatal for the whole run. The original exception is kept as
    ``__cause__`` and exposed through :attr:`cause`.
    """

    def __init__(self, message: str, module: Any = None, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.module = module
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ConfigurationError(DependencyGraphError):
    """Configuration file or inline configuration is invalid."""
    pass


class GraphFinalizedError(DependencyGraphError):
    """An edge was inserted after the accumulator produced its graph."""
    pass


class RenderSerializationError(RuntimeError):
    """The low-level encoder of an output format failed.

    Signals a programming error rather than a user condition, hence the
    RuntimeError base.
    """
    pass


__all__ = [
    "ConfigurationError",
    "DependencyGraphError",
    "GraphFinalizedError",
    "RenderSerializationError",
    "UpstreamResolutionError",
]
