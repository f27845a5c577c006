"""File pattern resolution for plugin paths."""

from __future__ import annotations

import glob
import os
from pathlib import Path


def resolve_file_patterns(
    patterns: str | list[str],
    base_dir: str | Path | None = None,
) -> list[Path]:
    """Resolve glob patterns against a base directory.

    Patterns are expanded with ``~`` and environment variables first.
    Relative patterns are matched under ``base_dir`` (the current directory
    when omitted). Results are absolute, de-duplicated and keep the order in
    which patterns were given; matches of a single pattern are sorted.

    Args:
        patterns: One pattern or a list of patterns.
        base_dir: Directory relative patterns are resolved against.

    Returns:
        Matching files. Empty when nothing matches; callers decide whether
        that is an error.
    """
    if isinstance(patterns, str):
        patterns = [patterns]

    root = Path(base_dir) if base_dir is not None else Path.cwd()
    resolved: list[Path] = []
    seen: set[Path] = set()

    for pattern in patterns:
        expanded = os.path.expandvars(os.path.expanduser(pattern))
        full_pattern = expanded if os.path.isabs(expanded) else str(root / expanded)
        for match in sorted(glob.glob(full_pattern, recursive=True)):
            path = Path(match).resolve()
            if path.is_file() and path not in seen:
                seen.add(path)
                resolved.append(path)

    return resolved
