"""
File copy and delete primitives for publish and cleanup tasks.
"""

import shutil
from collections.abc import Iterable
from pathlib import Path

from sitebuild.core.globs import walk
from sitebuild.utils.logging import logger


def copy_files(sources: Iterable[Path], source_base: Path, dest_dir: Path) -> list[Path]:
    """
    Copy files preserving their path relative to source_base.

    Args:
        sources: Files to copy
        source_base: Directory the relative layout is computed from
        dest_dir: Destination directory

    Returns:
        Paths of the written files
    """
    written: list[Path] = []
    for src in sources:
        target = dest_dir / src.relative_to(source_base)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, target)
        written.append(target)
    return written


def remove_matching(patterns: list[str], root: Path) -> list[Path]:
    """
    Delete files and directories matching the patterns.

    Directories are removed only once empty, so anything protected by an
    exclusion keeps its parents. Nothing matching is a no-op.

    Returns:
        Paths that were removed
    """
    removed: list[Path] = []
    for path in list(walk(patterns, root, include_dirs=True)):
        if path.is_symlink() or path.is_file():
            path.unlink()
            removed.append(path)
        elif path.is_dir():
            if any(path.iterdir()):
                logger.debug(f"Keeping non-empty directory {path}")
                continue
            path.rmdir()
            removed.append(path)
    return removed


def file_size_kb(path: Path) -> float:
    """Get file size in kilobytes."""
    return path.stat().st_size / 1024
