from __future__ import annotations

from pathlib import Path

DEFAULT_IGNORES = {
    ".git",
    ".venv",
    "venv",
    "__pycache__",
    "node_modules",
    "dist",
    "build",
    ".mypy_cache",
    ".ruff_cache",
    ".pytest_cache",
    ".tox",
}


def should_ignore_dir(dir_path: Path, extra: frozenset[str] = frozenset()) -> bool:
    return dir_path.name in DEFAULT_IGNORES or dir_path.name in extra
