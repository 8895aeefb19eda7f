"""
analyze-npm Package

Builds a dependency manifest (package.json) from a list of npm package
descriptors, and analyzes the installed dependency tree of such a manifest.

PIPELINE:
---------
    data.json  →  records  →  selected records  →  dependencies  →  package.json

The manifest builder is a single linear pass with no state of its own.
The analyzer (analyze_npm.analysis) only READS the installed node_modules tree.
"""

__version__ = "0.1.0"
