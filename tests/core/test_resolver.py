"""Unit tests for plugin path resolution."""

from __future__ import annotations

from pathlib import Path

from core.resolver import resolve_file_patterns


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


def test_relative_pattern_resolves_against_base_dir(tmp_path: Path) -> None:
    plugin = _touch(tmp_path / "plugins" / "timeline.py")

    assert resolve_file_patterns("plugins/timeline.py", tmp_path) == [plugin.resolve()]


def test_glob_matches_are_sorted(tmp_path: Path) -> None:
    b = _touch(tmp_path / "b_plugin.py")
    a = _touch(tmp_path / "a_plugin.py")

    assert resolve_file_patterns("*_plugin.py", tmp_path) == [a.resolve(), b.resolve()]


def test_absolute_pattern_ignores_base_dir(tmp_path: Path) -> None:
    plugin = _touch(tmp_path / "abs.py")

    assert resolve_file_patterns(str(plugin), "/nonexistent") == [plugin.resolve()]


def test_no_match_returns_empty_list(tmp_path: Path) -> None:
    assert resolve_file_patterns("missing.py", tmp_path) == []


def test_directories_are_not_matched(tmp_path: Path) -> None:
    (tmp_path / "pkg").mkdir()

    assert resolve_file_patterns("pkg", tmp_path) == []


def test_multiple_patterns_deduplicate_in_order(tmp_path: Path) -> None:
    a = _touch(tmp_path / "a.py")
    b = _touch(tmp_path / "b.py")

    assert resolve_file_patterns(["b.py", "*.py"], tmp_path) == [b.resolve(), a.resolve()]
