#!/usr/bin/env python3
"""
Build package.json from data.json in the current directory.

Prints the number of dependencies written, then writes the manifest.
"""

from analyze_npm.pipeline import build_manifest


def main():
    build_manifest("data.json", "package.json")


if __name__ == "__main__":
    main()
