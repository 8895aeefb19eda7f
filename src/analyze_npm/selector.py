"""
Record Selection (Stage 2: records → dependency mapping).

Drops a fixed index window from the input and excludes one package name.
The window and the name are literal constants tied to one particular
data set (installs failed somewhere inside the window); they are not a
general filtering policy and are not configurable.
"""

from typing import Dict, List, Sequence

from analyze_npm.model import PackageRecord


# Half-open index window [SKIP_START, SKIP_END) removed from the input.
SKIP_START = 3800
SKIP_END = 4800

EXCLUDED_NAME = "canvas"


def select_records(records: Sequence[PackageRecord]) -> List[PackageRecord]:
    """
    Keep records at indices [0, SKIP_START) and [SKIP_END, N).

    Relative order is preserved. Short inputs are not an error:
    if N < SKIP_START everything is kept, if N < SKIP_END the
    second part is simply empty.
    """
    return list(records[:SKIP_START]) + list(records[SKIP_END:])


def build_dependencies(records: Sequence[PackageRecord]) -> Dict[str, str]:
    """
    Fold selected records into a name → version mapping.

    Args:
        records: Full input sequence (selection is applied here)

    Returns:
        Dict in selection order; later duplicates overwrite earlier ones
    """
    dependencies: Dict[str, str] = {}
    for record in select_records(records):
        if record.name == EXCLUDED_NAME:
            continue
        dependencies[record.name] = record.version
    return dependencies


__all__ = [
    "SKIP_START",
    "SKIP_END",
    "EXCLUDED_NAME",
    "select_records",
    "build_dependencies",
]
