"""
Optional YAML configuration for the command line.

Example (analyze-npm.yaml):

    input_path: data/packages.json
    output_path: build/package.json
    project_root: build
    skip_packages:
      - csstype

Only paths and the analyzer skip list are configurable. The selection
window and the excluded package name of the manifest builder are fixed.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

import yaml

from analyze_npm.loader import DEFAULT_INPUT_PATH
from analyze_npm.serialization import DEFAULT_OUTPUT_PATH
from analyze_npm.analysis.analyzer import DEFAULT_SKIP_PACKAGES


class ConfigError(ValueError):
    """Raised when a config file is malformed."""
    pass


@dataclass
class Config:
    """
    Resolved run configuration.

    Properties:
        input_path: Package list read by the builder
        output_path: Manifest written by the builder, read by the analyzer
        project_root: Directory holding node_modules for the analyzer
        skip_packages: Names the analyzer never resolves.
            Entries ending in "/" match as prefixes (e.g. "@types/").
    """

    input_path: str = DEFAULT_INPUT_PATH
    output_path: str = DEFAULT_OUTPUT_PATH
    project_root: str = "."
    skip_packages: List[str] = field(default_factory=lambda: list(DEFAULT_SKIP_PACKAGES))

    def with_overrides(self, **overrides: Optional[Any]) -> "Config":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def config_from_dict(d: Dict[str, Any]) -> Config:
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {unknown}")

    for key in ("input_path", "output_path", "project_root"):
        if key in d and not isinstance(d[key], str):
            raise ConfigError(f"Config key '{key}' must be a string")

    if "skip_packages" in d:
        skip = d["skip_packages"]
        if not isinstance(skip, list) or not all(isinstance(s, str) for s in skip):
            raise ConfigError("Config key 'skip_packages' must be a list of strings")

    return Config(**d)


def load_config(path: str) -> Config:
    """
    Load a YAML config file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: If file doesn't exist
        ConfigError: If the YAML is invalid or has the wrong shape
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")
    return config_from_dict(data)


__all__ = ["Config", "ConfigError", "config_from_dict", "load_config"]
