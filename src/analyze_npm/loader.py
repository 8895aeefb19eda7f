"""
Package Loader (Stage 1: data.json → PackageRecord list).

Input Format:
    A JSON array of objects, each with at least string fields
    `name` and `version`:

        [
          {"name": "react", "version": "18.2.0"},
          {"name": "lodash", "version": "4.17.21"}
        ]

Extra fields on each object are ignored. Missing `name`/`version`
fields are NOT validated; they load as None.
"""

import json
from typing import Any, List

from analyze_npm.model import PackageRecord


DEFAULT_INPUT_PATH = "data.json"


class PackageLoadError(ValueError):
    """Raised when the input document cannot be turned into package records."""
    pass


def _record_from_entry(entry: Any, index: int) -> PackageRecord:
    if not isinstance(entry, dict):
        raise PackageLoadError(
            f"Entry {index} is not an object: {type(entry).__name__}"
        )
    return PackageRecord(name=entry.get("name"), version=entry.get("version"))


def parse_packages_string(content: str) -> List[PackageRecord]:
    """
    Parse JSON text into an ordered list of package records.

    Args:
        content: JSON document as string

    Returns:
        PackageRecord list, in document order

    Raises:
        PackageLoadError: If the text is not valid JSON, the top-level
            value is not an array, or an entry is not an object
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise PackageLoadError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise PackageLoadError(
            f"Expected a JSON array of packages, got {type(data).__name__}"
        )

    return [_record_from_entry(entry, i) for i, entry in enumerate(data)]


def load_packages_file(filepath: str = DEFAULT_INPUT_PATH) -> List[PackageRecord]:
    """
    Read and parse a package list file.

    Args:
        filepath: Path to the JSON file (relative to the working directory)

    Returns:
        PackageRecord list

    Raises:
        FileNotFoundError: If file doesn't exist
        PackageLoadError: If parsing fails
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        content = f.read()

    return parse_packages_string(content)


__all__ = [
    "DEFAULT_INPUT_PATH",
    "PackageLoadError",
    "parse_packages_string",
    "load_packages_file",
]
