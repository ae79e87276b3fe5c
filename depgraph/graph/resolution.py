"""Resolution states of dependency edges."""

from enum import Enum


class NodeResolution(str, Enum):
    """Why a dependency's target was kept in, or left out of, the resolved set.

    Values equal the member names so they serialize as e.g.
    ``"OMITTED_FOR_CONFLICT"``.
    """

    INCLUDED = "INCLUDED"
    OMITTED_FOR_DUPLICATE = "OMITTED_FOR_DUPLICATE"
    OMITTED_FOR_CONFLICT = "OMITTED_FOR_CONFLICT"
    OMITTED_FOR_CYCLE = "OMITTED_FOR_CYCLE"
    PARENT = "PARENT"


__all__ = ["NodeResolution"]
