from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from route_action_gen.domain.models import HTTP_METHODS, EndpointGroup, ScannedConfig
from route_action_gen.repo.ignore import should_ignore_dir

Walker = Callable[[Path], Iterable[tuple[str, list[str], list[str]]]]

_CONFIG_FILE = re.compile(r"^route\.(\w+)\.config\.py$")


def extract_method(file_name: str) -> Optional[str]:
    """
    route.post.config.py -> "post". None for other names and unknown verbs.
    """
    m = _CONFIG_FILE.match(file_name)
    if m is None:
        return None
    method = m.group(1)
    return method if method in HTTP_METHODS else None


def iter_config_files(
    root: Path,
    walk: Optional[Walker] = None,
    ignore_dirs: frozenset[str] = frozenset(),
) -> Iterator[ScannedConfig]:
    walker = walk or os.walk
    for dirpath, dirs, files in walker(root):
        dir_p = Path(dirpath)

        # prune ignored dirs (generated output included)
        dirs[:] = [d for d in dirs if not should_ignore_dir(dir_p / d, ignore_dirs)]

        for f in files:
            method = extract_method(f)
            if method is None:
                continue
            absolute = (dir_p / f).resolve()
            yield ScannedConfig(
                absolute_path=str(absolute),
                file_name=f,
                method=method,
                directory=str(absolute.parent),
            )


def scan_config_files(
    root: Path,
    walk: Optional[Walker] = None,
    ignore_dirs: frozenset[str] = frozenset({"_generated"}),
) -> list[EndpointGroup]:
    """
    Discover route.<method>.config.py files under root and group them by directory.

    Deterministic: groups sorted by directory, members sorted by method, so the
    result does not depend on the order the file system lists entries in.
    """
    by_dir: dict[str, dict[str, ScannedConfig]] = {}
    for cfg in iter_config_files(root.resolve(), walk=walk, ignore_dirs=ignore_dirs):
        by_dir.setdefault(cfg.directory, {})[cfg.method] = cfg

    groups: list[EndpointGroup] = []
    for directory in sorted(by_dir):
        members = by_dir[directory]
        groups.append(
            EndpointGroup(
                directory=directory,
                configs=tuple(members[m] for m in sorted(members)),
            )
        )
    return groups
