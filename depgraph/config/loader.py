"""Helpers for loading depgraph configuration from TOML/JSON sources.

This module provides a single entry point `load_config` that accepts
various configuration sources:

* None -> default DepGraphConfig
* dict -> validated mapping
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from depgraph.config.schema import DepGraphConfig
from depgraph.errors import ConfigurationError

logger = logging.getLogger("depgraph.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _parse_text(text: str, fmt: str) -> Any:
    try:
        if fmt == "json":
            return json.loads(text)
        return tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"Invalid {fmt.upper()} configuration: {exc}") from exc


def _guess_format(text: str) -> str:
    stripped = text.lstrip()
    return "json" if stripped.startswith(("{", "[")) else "toml"


def _validate(data: Dict[str, Any]) -> DepGraphConfig:
    # A [depgraph] table lets the settings share a file with other tools.
    if "depgraph" in data and isinstance(data["depgraph"], dict):
        data = data["depgraph"]
    try:
        return DepGraphConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def load_config(source: ConfigSource) -> DepGraphConfig:
    """Load DepGraphConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns the defaults
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        DepGraphConfig instance.

    Raises:
        ConfigurationError: The source cannot be read, parsed or validated.
    """
    if source is None:
        logger.debug("No config source provided; using default DepGraphConfig")
        return DepGraphConfig()

    if isinstance(source, dict):
        logger.debug("Loading DepGraphConfig from provided dict")
        return _validate(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        text: Optional[str] = None

        if path.is_file():
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise ConfigurationError(f"Unable to read configuration {path}: {exc}") from exc
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _guess_format(text)
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        elif isinstance(source, Path):
            raise ConfigurationError(f"Configuration file not found: {path}")
        else:
            text = str(source)
            fmt = _guess_format(text)
            logger.info("Loading configuration from inline %s string", fmt)

        data = _parse_text(text, fmt)
        if not isinstance(data, dict):
            raise ConfigurationError("Top-level configuration must be a mapping/dict")
        return _validate(data)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["load_config"]
