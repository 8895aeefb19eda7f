from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from analyze_npm.config import Config, load_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="analyze-npm", add_help=True)
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build package.json from a package list")
    build.add_argument("--input", dest="input_path", help="Package list (default: data.json)")
    build.add_argument("--output", dest="output_path", help="Manifest to write (default: package.json)")
    build.add_argument("--config", help="YAML config file")

    analyze = sub.add_parser("analyze", help="Report module formats of installed dependencies")
    analyze.add_argument("--manifest", dest="output_path", help="Manifest to read (default: package.json)")
    analyze.add_argument("--root", dest="project_root", help="Directory containing node_modules")
    analyze.add_argument("--config", help="YAML config file")
    analyze.add_argument("--yaml", action="store_true", help="Print statistics as YAML")

    return parser


def _resolve_config(args: argparse.Namespace) -> Config:
    config = load_config(args.config) if args.config else Config()
    return config.with_overrides(
        input_path=getattr(args, "input_path", None),
        output_path=getattr(args, "output_path", None),
        project_root=getattr(args, "project_root", None),
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    config = _resolve_config(args)

    if args.command == "build":
        from analyze_npm.pipeline import build_manifest

        build_manifest(config.input_path, config.output_path)
        return 0

    if args.command == "analyze":
        from analyze_npm.analysis import analyze_manifest, format_report
        from analyze_npm.serialization import read_manifest, stats_to_yaml

        manifest = read_manifest(config.output_path)
        stats = analyze_manifest(
            manifest,
            project_root=config.project_root,
            skip_packages=config.skip_packages,
        )
        if args.yaml:
            print(stats_to_yaml(stats), end="")
        else:
            print(format_report(stats, title=manifest.name))
        return 0

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
