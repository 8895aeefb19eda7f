"""
Node-style module resolution over an installed node_modules tree.

Given a specifier as written in JavaScript source ("react", "./util",
"@babel/core/lib/index.js", "node:fs") and the file it appears in,
find the file it refers to on disk.

Resolution order for bare specifiers:
    1. Walk up from the importing directory looking for node_modules/<pkg>
    2. Subpath given  → resolve it as a file inside the package
    3. No subpath     → package.json "exports", "module", "main", then index
"""
from __future__ import annotations

import json
import os
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


NODE_MODULES = "node_modules"

RESOLVE_EXTENSIONS = (".js", ".mjs", ".cjs", ".json")

NODE_BUILTINS = frozenset({
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
    "events", "fs", "http", "http2", "https", "inspector", "module", "net",
    "os", "path", "perf_hooks", "process", "punycode", "querystring",
    "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
    "trace_events", "tty", "url", "util", "v8", "vm", "wasi", "worker_threads",
    "zlib",
})

# Condition names tried, in order, inside package.json "exports".
EXPORT_CONDITIONS = ("import", "module", "default", "require", "node")


class ResolutionKind(Enum):
    """What a specifier resolved to."""
    PATH = "path"
    BUILTIN = "builtin"


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    path: Optional[str] = None
    name: Optional[str] = None


def split_package_specifier(specifier: str) -> Tuple[str, str]:
    """
    Split a bare specifier into (package name, subpath).

    "lodash/fp/map"      → ("lodash", "fp/map")
    "@babel/core"        → ("@babel/core", "")
    """
    parts = specifier.split("/")
    if specifier.startswith("@") and len(parts) >= 2:
        return "/".join(parts[:2]), "/".join(parts[2:])
    return parts[0], "/".join(parts[1:])


def is_builtin(specifier: str) -> bool:
    if specifier.startswith("node:"):
        return True
    return specifier.split("/")[0] in NODE_BUILTINS


def _read_package_json(package_dir: str) -> Optional[dict]:
    pkg_path = os.path.join(package_dir, "package.json")
    if not os.path.isfile(pkg_path):
        return None
    try:
        with open(pkg_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        warnings.warn(f"Unreadable package.json {pkg_path}: {e}", UserWarning)
        return None
    return data if isinstance(data, dict) else None


def _export_target(exports: Any) -> Optional[str]:
    """Pick the root entry out of a package.json "exports" value."""
    if isinstance(exports, str):
        return exports
    if isinstance(exports, list):
        for item in exports:
            target = _export_target(item)
            if target:
                return target
        return None
    if not isinstance(exports, dict):
        return None

    if "." in exports:
        return _export_target(exports["."])
    if any(key.startswith(".") for key in exports):
        # Subpath map without a root entry
        return None
    for condition in EXPORT_CONDITIONS:
        if condition in exports:
            target = _export_target(exports[condition])
            if target:
                return target
    return None


def _resolve_file(path: str) -> Optional[str]:
    if os.path.isfile(path):
        return os.path.normpath(path)
    for ext in RESOLVE_EXTENSIONS:
        if os.path.isfile(path + ext):
            return os.path.normpath(path + ext)
    if os.path.isdir(path):
        return _resolve_directory(path)
    return None


def _resolve_directory(directory: str) -> Optional[str]:
    pkg = _read_package_json(directory)
    if pkg is not None:
        main = pkg.get("main")
        if isinstance(main, str) and main:
            resolved = _resolve_file(os.path.join(directory, main))
            if resolved:
                return resolved
    for ext in RESOLVE_EXTENSIONS:
        candidate = os.path.join(directory, "index" + ext)
        if os.path.isfile(candidate):
            return os.path.normpath(candidate)
    return None


def resolve_package_entry(package_dir: str) -> Optional[str]:
    """
    Resolve the entry file of an installed package.

    Tries "exports", then "module", then "main", then index.* files.
    """
    pkg = _read_package_json(package_dir) or {}

    candidates = [_export_target(pkg.get("exports")), pkg.get("module"), pkg.get("main")]
    for entry in candidates:
        if isinstance(entry, str) and entry:
            resolved = _resolve_file(os.path.join(package_dir, entry))
            if resolved:
                return resolved

    for ext in RESOLVE_EXTENSIONS:
        candidate = os.path.join(package_dir, "index" + ext)
        if os.path.isfile(candidate):
            return os.path.normpath(candidate)
    return None


def find_package_dir(package_name: str, start_dir: str) -> Optional[str]:
    """Walk up from start_dir looking for node_modules/<package_name>."""
    current = os.path.abspath(start_dir)
    while True:
        if os.path.basename(current) != NODE_MODULES:
            candidate = os.path.join(current, NODE_MODULES, package_name)
            if os.path.isdir(candidate):
                return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def resolve(specifier: str, from_file: str) -> Optional[Resolution]:
    """
    Resolve a specifier relative to the file that imports it.

    Args:
        specifier: Module specifier as written in source
        from_file: Importing file (need not exist, only its directory matters)

    Returns:
        Resolution, or None if the specifier cannot be resolved
    """
    if not specifier:
        return None

    if is_builtin(specifier):
        return Resolution(ResolutionKind.BUILTIN, name=specifier)

    base_dir = os.path.dirname(os.path.abspath(from_file))

    if specifier.startswith(("./", "../", "/")) or specifier in (".", ".."):
        resolved = _resolve_file(os.path.normpath(os.path.join(base_dir, specifier)))
        return Resolution(ResolutionKind.PATH, path=resolved) if resolved else None

    package_name, subpath = split_package_specifier(specifier)
    package_dir = find_package_dir(package_name, base_dir)
    if package_dir is None:
        return None

    if subpath:
        resolved = _resolve_file(os.path.normpath(os.path.join(package_dir, subpath)))
    else:
        resolved = resolve_package_entry(package_dir)

    if resolved is None:
        return None
    return Resolution(ResolutionKind.PATH, path=resolved, name=package_name)


def package_root_of(path: str) -> Optional[str]:
    """
    Path prefix up to the innermost node_modules/<name> containing `path`.

    Scoped packages keep both segments (node_modules/@scope/name).
    Returns None for files outside any node_modules directory.
    """
    parts = os.path.normpath(path).split(os.sep)
    indices = [i for i, part in enumerate(parts) if part == NODE_MODULES]
    if not indices:
        return None

    index = indices[-1]
    end = index + 2
    if end > len(parts):
        return None
    if parts[end - 1].startswith("@") and end < len(parts):
        end += 1
    return os.sep.join(parts[:end])


__all__ = [
    "ResolutionKind",
    "Resolution",
    "resolve",
    "resolve_package_entry",
    "find_package_dir",
    "split_package_specifier",
    "is_builtin",
    "package_root_of",
]
