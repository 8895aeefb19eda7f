"""
Manifest pipeline: Load → Transform → Emit.

Runs exactly once per call, strictly in order:
    1. load_packages_file(input_path)
    2. build_dependencies(records)
    3. report_count(...) to stdout
    4. write_manifest(...) to output_path

Every failure is fatal and propagates to the caller. Nothing is written
if loading or parsing fails.
"""

import sys
from typing import Dict, Optional, TextIO

from analyze_npm.loader import DEFAULT_INPUT_PATH, load_packages_file
from analyze_npm.model import Manifest
from analyze_npm.selector import build_dependencies
from analyze_npm.serialization import DEFAULT_OUTPUT_PATH, write_manifest


def report_count(dependencies: Dict[str, str], stream: Optional[TextIO] = None) -> int:
    """Print the number of dependency entries on its own line."""
    count = len(dependencies)
    print(count, file=stream if stream is not None else sys.stdout)
    return count


def build_manifest(
    input_path: str = DEFAULT_INPUT_PATH,
    output_path: str = DEFAULT_OUTPUT_PATH,
    stream: Optional[TextIO] = None,
) -> Manifest:
    """
    Build package.json from a package list.

    Args:
        input_path: JSON array of package descriptors
        output_path: Manifest destination (overwritten)
        stream: Where the entry count is printed (defaults to stdout)

    Returns:
        The Manifest that was written
    """
    records = load_packages_file(input_path)
    manifest = Manifest(dependencies=build_dependencies(records))
    report_count(manifest.dependencies, stream=stream)
    write_manifest(manifest, output_path)
    return manifest


__all__ = ["report_count", "build_manifest"]
