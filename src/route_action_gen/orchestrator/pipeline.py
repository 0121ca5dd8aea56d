from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path
from typing import Optional

from route_action_gen.config import Settings, get_settings
from route_action_gen.domain.models import (
    EndpointGroup,
    GeneratedFile,
    GenerateResult,
    GenerationContext,
    GroupResult,
)
from route_action_gen.errors import GenerationIOError, NoDescriptorsFoundError
from route_action_gen.extractors.descriptor import extract_descriptor_from_file
from route_action_gen.repo.scanner import Walker, scan_config_files
from route_action_gen.targets.base import TargetAdapter
from route_action_gen.targets.registry import TargetRegistry, default_registry

logger = logging.getLogger(__name__)


def _sha256_bytes(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()


def _existing_sha256(path: Path) -> Optional[str]:
    try:
        return _sha256_bytes(path.read_bytes())
    except FileNotFoundError:
        return None


def build_context(group: EndpointGroup, adapter: TargetAdapter, generated_dir: str) -> GenerationContext:
    configs = tuple(extract_descriptor_from_file(Path(c.absolute_path), c.method) for c in group.configs)
    prefix = Path(os.path.relpath(group.directory, generated_dir)).as_posix()
    return GenerationContext(
        directory=group.directory,
        route_path=adapter.resolve_route_path(group.directory),
        configs=configs,
        config_import_prefix=prefix,
    )


def _write_batch(generated_dir: Path, files: list[GeneratedFile], write_unchanged: bool) -> tuple[list[str], list[str]]:
    written: list[str] = []
    skipped: list[str] = []
    generated_dir.mkdir(parents=True, exist_ok=True)
    for f in files:
        target = generated_dir / f.file_name
        data = f.content.encode("utf-8")
        if not write_unchanged and _existing_sha256(target) == _sha256_bytes(data):
            skipped.append(f.file_name)
            continue
        target.write_bytes(data)
        written.append(f.file_name)
    return written, skipped


def generate_group(group: EndpointGroup, adapter: TargetAdapter, root: Path, settings: Settings) -> GroupResult:
    """
    Render every file of one endpoint in memory, then write the batch.
    The entry point next to the descriptors is only created when missing.
    """
    generated_dir = adapter.resolve_generated_dir(group.directory, str(root))
    context = build_context(group, adapter, generated_dir)
    files = adapter.generate(context)
    logger.debug(
        "%s: %s via %s, %d files",
        context.route_path,
        ",".join(group.methods),
        adapter.name,
        len(files),
    )

    entry_rel = Path(os.path.relpath(generated_dir, group.directory)).as_posix()
    entry = adapter.get_entry_point_file(entry_rel)
    entry_path = Path(group.directory) / entry.file_name

    try:
        written, skipped = _write_batch(Path(generated_dir), files, settings.write_unchanged)
        created = False
        if not entry_path.exists():
            entry_path.write_text(entry.content, encoding="utf-8")
            created = True
    except OSError as exc:
        raise GenerationIOError(group.directory, str(exc)) from exc

    if written:
        logger.info("%s: wrote %s", context.route_path, ", ".join(written))
    if skipped:
        logger.info("%s: unchanged %s", context.route_path, ", ".join(skipped))
    if created:
        logger.info("%s: created entry point %s", context.route_path, entry_path)

    return GroupResult(
        directory=group.directory,
        generated_dir=generated_dir,
        framework=adapter.name,
        route_path=context.route_path,
        files=tuple(f.file_name for f in files),
        written=tuple(written),
        skipped=tuple(skipped),
        entry_point_file=str(entry_path),
        entry_point_created=created,
    )


def run_generate(
    root: Path,
    framework: Optional[str] = None,
    registry: Optional[TargetRegistry] = None,
    settings: Optional[Settings] = None,
    walk: Optional[Walker] = None,
) -> GenerateResult:
    """
    Scan root for descriptors and generate every endpoint group.

    framework overrides settings.framework; "auto" picks the target per
    directory. Groups are independent: a write failure raises
    GenerationIOError after earlier groups are fully on disk.
    """
    settings = settings or get_settings()
    registry = registry or default_registry(settings.generated_dir_name)
    framework = framework or settings.framework
    root = root.resolve()

    groups = scan_config_files(root, walk=walk, ignore_dirs=frozenset({settings.generated_dir_name}))
    if not groups:
        raise NoDescriptorsFoundError(str(root))

    # resolve every adapter before writing anything, so an unknown name fails fast
    plan = [(g, registry.resolve(framework, g.directory)) for g in groups]

    results = [generate_group(g, adapter, root, settings) for g, adapter in plan]
    return GenerateResult(root=str(root), framework=framework, groups=tuple(results))
