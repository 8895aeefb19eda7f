"""
Serialization helpers for manifests and analysis statistics.

Manifests are written as package.json text: 2-space indented JSON,
`name` first, then `dependencies` in insertion order.
Statistics round-trip through a plain dict and can be dumped as YAML.
"""
from __future__ import annotations

import json
from dataclasses import asdict, fields
from typing import Any, Dict

import yaml

from analyze_npm.model import Manifest
from analyze_npm.analysis.analyzer import Stats


DEFAULT_OUTPUT_PATH = "package.json"


class ManifestError(ValueError):
    """Raised when a manifest document has the wrong shape."""
    pass


def manifest_to_dict(m: Manifest) -> Dict[str, Any]:
    return {"name": m.name, "dependencies": dict(m.dependencies)}


def manifest_from_dict(d: Any) -> Manifest:
    if not isinstance(d, dict):
        raise ManifestError(f"Manifest must be an object, got {type(d).__name__}")
    deps = d.get("dependencies", {})
    if not isinstance(deps, dict):
        raise ManifestError("Manifest 'dependencies' must be an object")
    for name, version in deps.items():
        if not isinstance(version, str):
            raise ManifestError(f"Version of {name!r} must be a string")
    return Manifest(name=d.get("name", ""), dependencies=dict(deps))


def manifest_to_json(m: Manifest) -> str:
    # No trailing newline, matching JSON.stringify(obj, null, 2).
    return json.dumps(manifest_to_dict(m), indent=2, ensure_ascii=False)


def manifest_from_json(s: str) -> Manifest:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid manifest JSON: {e}") from e
    return manifest_from_dict(d)


def write_manifest(m: Manifest, filename: str = DEFAULT_OUTPUT_PATH) -> None:
    """
    Serialize a manifest and overwrite `filename` with it.

    The file is created or truncated; OSError propagates if the path is
    not writable.
    """
    text = manifest_to_json(m)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(text)


def read_manifest(filename: str = DEFAULT_OUTPUT_PATH) -> Manifest:
    with open(filename, 'r', encoding='utf-8') as f:
        return manifest_from_json(f.read())


def stats_to_dict(s: Stats) -> Dict[str, int]:
    return asdict(s)


def stats_from_dict(d: Dict[str, Any]) -> Stats:
    known = {f.name for f in fields(Stats)}
    return Stats(**{k: int(v) for k, v in d.items() if k in known})


def stats_to_yaml(s: Stats) -> str:
    return yaml.safe_dump(stats_to_dict(s), sort_keys=False)


def stats_from_yaml(s: str) -> Stats:
    return stats_from_dict(yaml.safe_load(s) or {})
