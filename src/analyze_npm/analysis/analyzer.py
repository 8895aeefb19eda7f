"""
Manifest Analyzer: module-format inventory of an installed dependency tree.

For every dependency of a manifest, resolve its entry file inside
node_modules, then follow every static import/require recursively:
    - Each reachable JavaScript file is scanned once
    - Per-file flags are summed into a Stats total
    - Distinct package roots among visited files are counted

IMPORTANT: This is read-only. It never installs, modifies or executes
anything in node_modules.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, fields
from typing import Iterable, Optional, Sequence, Set, Tuple

from analyze_npm.model import Manifest
from analyze_npm.analysis.resolver import ResolutionKind, package_root_of, resolve
from analyze_npm.analysis.scanner import ScanError, scan_source


# Packages whose package.json does not describe loadable JavaScript.
# Entries ending in "/" match as prefixes.
DEFAULT_SKIP_PACKAGES = (
    "@types/",
    "@octokit/openapi-types",
    "@graphql-typed-document-node/core",
    "csstype",
    "@tokenizer/token",
)

SKIPPED_EXTENSIONS = frozenset({".json", ".node", ".css", ".svg"})


@dataclass
class Stats:
    """Counters summed over every analyzed file."""
    packages: int = 0
    files: int = 0
    is_esm: int = 0
    dynamic_import: int = 0
    is_cjs: int = 0
    non_static_exports: int = 0
    non_static_deps: int = 0
    error: int = 0

    @classmethod
    def error_file(cls) -> Stats:
        return cls(files=1, error=1)

    def merge(self, other: Stats) -> Stats:
        return Stats(**{
            f.name: getattr(self, f.name) + getattr(other, f.name)
            for f in fields(Stats)
        })


def is_skipped(package_name: str, skip_packages: Iterable[str] = DEFAULT_SKIP_PACKAGES) -> bool:
    for skip in skip_packages:
        if skip.endswith("/"):
            if package_name.startswith(skip):
                return True
        elif package_name == skip:
            return True
    return False


def _read_source(path: str) -> Optional[str]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        warnings.warn(f"Error reading {path}: {e}", UserWarning)
        return None


def _scan_file(path: str) -> Tuple[Stats, Set[str]]:
    """Stats for a single file plus the specifiers it imports."""
    ext = os.path.splitext(path)[1]
    if not ext or ext in SKIPPED_EXTENSIONS:
        return Stats(), set()

    code = _read_source(path)
    if code is None:
        return Stats.error_file(), set()

    try:
        scan = scan_source(code)
    except ScanError as e:
        warnings.warn(f"Could not parse {path}: {e}", UserWarning)
        return Stats.error_file(), set()

    stats = Stats(
        files=1,
        is_esm=int(scan.is_esm),
        dynamic_import=int(scan.dynamic_import),
        is_cjs=int(scan.is_cjs),
        non_static_exports=int(scan.non_static_exports),
        non_static_deps=int(scan.non_static_deps),
    )
    return stats, scan.dependencies


def analyze_file(path: str, visited: Set[str]) -> Stats:
    """
    Scan one file and everything reachable from it through static imports.

    Args:
        path: File to analyze
        visited: Paths already analyzed (updated in place)

    Returns:
        Stats for this file and its not-yet-visited dependencies
    """
    stats = Stats()
    pending = [path]

    # Import chains can be deeper than the recursion limit.
    while pending:
        current = os.path.normpath(os.path.abspath(pending.pop()))
        if current in visited:
            continue
        visited.add(current)

        file_stats, dependencies = _scan_file(current)
        stats = stats.merge(file_stats)

        for specifier in sorted(dependencies, reverse=True):
            resolution = resolve(specifier, current)
            if resolution is not None and resolution.kind == ResolutionKind.PATH:
                pending.append(resolution.path)

    return stats


def count_packages(visited: Iterable[str]) -> int:
    roots = {package_root_of(path) for path in visited}
    roots.discard(None)
    return len(roots)


def analyze_manifest(
    manifest: Manifest,
    project_root: str = ".",
    skip_packages: Sequence[str] = DEFAULT_SKIP_PACKAGES,
) -> Stats:
    """
    Analyze every dependency of a manifest installed under project_root.

    Dependencies are resolved as if imported from <project_root>/index.js.
    Builtins and unresolvable names contribute nothing.

    Args:
        manifest: Manifest whose dependencies are analyzed
        project_root: Directory containing node_modules
        skip_packages: Names never resolved (see is_skipped)

    Returns:
        Total Stats, with `packages` set to the number of distinct
        packages visited
    """
    from_file = os.path.join(os.path.abspath(project_root), "index.js")
    visited: Set[str] = set()
    stats = Stats()

    for name in manifest.dependencies:
        if is_skipped(name, skip_packages):
            continue
        resolution = resolve(name, from_file)
        if resolution is None or resolution.kind != ResolutionKind.PATH:
            continue
        stats = stats.merge(analyze_file(resolution.path, visited))

    stats.packages = count_packages(visited)
    return stats


def format_report(stats: Stats, title: str = "analyze-npm") -> str:
    """Render Stats as a human-readable text report."""
    analyzed = max(stats.files - stats.error, 0)

    def pct(n: int) -> str:
        return f"{100.0 * n / analyzed:.1f}%" if analyzed else "n/a"

    lines = [
        "=" * 60,
        f"MODULE FORMAT REPORT: {title}",
        "=" * 60,
        f"  Packages:              {stats.packages}",
        f"  Files:                 {stats.files}",
        f"  Errors:                {stats.error}",
        "",
        f"  ESM:                   {stats.is_esm} ({pct(stats.is_esm)})",
        f"  CommonJS:              {stats.is_cjs} ({pct(stats.is_cjs)})",
        f"  Dynamic import():      {stats.dynamic_import} ({pct(stats.dynamic_import)})",
        f"  Non-static exports:    {stats.non_static_exports} ({pct(stats.non_static_exports)})",
        f"  Non-static deps:       {stats.non_static_deps} ({pct(stats.non_static_deps)})",
    ]
    return "\n".join(lines)


__all__ = [
    "DEFAULT_SKIP_PACKAGES",
    "Stats",
    "is_skipped",
    "analyze_file",
    "analyze_manifest",
    "count_packages",
    "format_report",
]
