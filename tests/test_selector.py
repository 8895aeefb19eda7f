"""
Tests for record selection.

Selection keeps indices [0, 3800) and [4800, N), then drops "canvas".
"""

import pytest
from analyze_npm.model import PackageRecord
from analyze_npm.selector import (
    SKIP_START,
    SKIP_END,
    EXCLUDED_NAME,
    select_records,
    build_dependencies,
)


def make_records(count, version="1.0.0"):
    return [PackageRecord(name=f"pkg{i}", version=version) for i in range(count)]


class TestConstants:
    
    def test_window_literals(self):
        assert SKIP_START == 3800
        assert SKIP_END == 4800
        assert EXCLUDED_NAME == "canvas"


class TestSelectRecords:
    """Test the fixed index window."""
    
    def test_long_input_drops_window(self):
        records = make_records(5000)
        selected = select_records(records)
        assert len(selected) == 4000
        assert selected[:3800] == records[:3800]
        assert selected[3800:] == records[4800:]
    
    def test_short_input_keeps_everything(self):
        records = make_records(10)
        assert select_records(records) == records
    
    def test_input_inside_window(self):
        """3800 <= N < 4800: only the first part survives."""
        records = make_records(4500)
        assert select_records(records) == records[:3800]
    
    def test_boundaries_are_half_open(self):
        records = make_records(4801)
        names = {r.name for r in select_records(records)}
        assert "pkg3799" in names
        assert "pkg3800" not in names
        assert "pkg4799" not in names
        assert "pkg4800" in names
    
    def test_empty_input(self):
        assert select_records([]) == []


class TestBuildDependencies:
    """Test folding records into the dependency mapping."""
    
    def test_scenario_five_thousand_records(self):
        deps = build_dependencies(make_records(5000))
        assert len(deps) == 4000
        expected = {f"pkg{i}" for i in range(3800)} | {f"pkg{i}" for i in range(4800, 5000)}
        assert set(deps) == expected
        assert set(deps.values()) == {"1.0.0"}
    
    def test_scenario_short_input_with_canvas(self):
        records = make_records(9) + [PackageRecord("canvas", "2.11.2")]
        deps = build_dependencies(records)
        assert len(deps) == 9
        assert "canvas" not in deps
    
    def test_canvas_excluded_anywhere(self):
        records = make_records(6000)
        records[10] = PackageRecord("canvas", "2.0.0")
        records[5500] = PackageRecord("canvas", "2.0.0")
        assert "canvas" not in build_dependencies(records)
    
    def test_exclusion_is_exact_match(self):
        records = [
            PackageRecord("Canvas", "1.0.0"),
            PackageRecord("canvas-prebuilt", "1.0.0"),
            PackageRecord("@napi-rs/canvas", "1.0.0"),
        ]
        assert set(build_dependencies(records)) == {"Canvas", "canvas-prebuilt", "@napi-rs/canvas"}
    
    def test_later_duplicates_overwrite(self):
        records = [
            PackageRecord("react", "17.0.0"),
            PackageRecord("vue", "3.0.0"),
            PackageRecord("react", "18.2.0"),
        ]
        deps = build_dependencies(records)
        assert deps == {"react": "18.2.0", "vue": "3.0.0"}
        assert list(deps) == ["react", "vue"]
    
    def test_duplicates_inside_window_do_not_overwrite(self):
        records = make_records(5000)
        records[4000] = PackageRecord("pkg0", "9.9.9")
        assert build_dependencies(records)["pkg0"] == "1.0.0"
    
    def test_insertion_order_follows_selection(self):
        deps = build_dependencies(make_records(4802))
        keys = list(deps)
        assert keys[3799] == "pkg3799"
        assert keys[3800:] == ["pkg4800", "pkg4801"]
    
    def test_versions_kept_unchanged(self):
        records = [PackageRecord("a", "^1.2.3-beta.1+build.5")]
        assert build_dependencies(records) == {"a": "^1.2.3-beta.1+build.5"}
