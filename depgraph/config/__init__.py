"""Configuration schema and loading for depgraph."""

from .loader import load_config
from .schema import DepGraphConfig

__all__ = ["DepGraphConfig", "load_config"]
