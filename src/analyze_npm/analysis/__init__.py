"""Dependency tree analysis (resolution, scanning, statistics)."""

from .analyzer import DEFAULT_SKIP_PACKAGES, Stats, analyze_manifest, format_report
from .resolver import Resolution, ResolutionKind, resolve
from .scanner import ScanError, ScanResult, scan_source

__all__ = [
    "DEFAULT_SKIP_PACKAGES",
    "Stats",
    "analyze_manifest",
    "format_report",
    "Resolution",
    "ResolutionKind",
    "resolve",
    "ScanError",
    "ScanResult",
    "scan_source",
]
