"""
Demo: Analyze the dependencies of package.json installed in the current directory.
"""

from analyze_npm.analysis import analyze_manifest
from analyze_npm.serialization import read_manifest, stats_to_yaml


def print_report(stats, manifest):
    """Pretty-print analysis Stats."""
    print()
    print("=" * 70)
    print(f"DEPENDENCY ANALYSIS REPORT: {manifest.name}")
    print("=" * 70)
    print()
    
    print("📦 INVENTORY")
    print(f"  Declared Dependencies: {len(manifest)}")
    print(f"  Packages Visited:      {stats.packages}")
    print(f"  Files Scanned:         {stats.files}")
    print()
    
    print("📈 MODULE FORMATS")
    print(f"  ESM Files:             {stats.is_esm}")
    print(f"  CommonJS Files:        {stats.is_cjs}")
    print(f"  Dynamic import():      {stats.dynamic_import}")
    print()
    
    print("⚙️  STATIC ANALYZABILITY")
    print(f"  Non-static Exports:    {stats.non_static_exports}")
    print(f"  Non-static Deps:       {stats.non_static_deps}")
    print()
    
    if stats.error:
        print("⚠️  ERRORS")
        print(f"  {stats.error} file(s) could not be read")
    else:
        print("✨ NO ERRORS - every reachable file was scanned!")
    print()


if __name__ == "__main__":
    manifest = read_manifest("package.json")
    
    stats = analyze_manifest(manifest, project_root=".")
    
    print_report(stats, manifest)
    
    # Also save to YAML for inspection
    with open("analysis_output.yaml", "w") as f:
        f.write(stats_to_yaml(stats))
    print(f"✅ Statistics exported to analysis_output.yaml")
